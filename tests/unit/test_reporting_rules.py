"""Unit tests for income/expense and yearly overview rules"""

from decimal import Decimal

from ledger_gateway.domain.models import MonthlyCategoryTotal
from ledger_gateway.domain.reporting import (
    format_period,
    month_name,
    savings_rate,
    summarize_financial_overview,
    summarize_income_vs_expense,
)


def total(year, month, category, amount):
    return MonthlyCategoryTotal(year=year, month=month, category=category, amount=Decimal(amount))


def test_format_period_pads_month():
    assert format_period(2025, 3) == "2025-03"
    assert format_period(Decimal("2025"), Decimal("11")) == "2025-11"


def test_month_name():
    assert month_name(1) == "January"
    assert month_name(12) == "December"


def test_savings_rate():
    assert savings_rate(Decimal("3000"), Decimal("2000")) == Decimal("33.33")
    assert savings_rate(Decimal("1000"), Decimal("1500")) == Decimal("-50.00")
    assert savings_rate(Decimal("0"), Decimal("500")) == Decimal("0.00")


def test_income_vs_expense_monthly_series():
    """Expenses count by magnitude; savings is a percentage of income"""
    totals = [
        total(2025, 1, "Income", "3000"),
        total(2025, 1, "Food", "-400"),
        total(2025, 1, "Housing", "-1100"),
        total(2025, 2, "Food", "-250"),
    ]

    rows = summarize_income_vs_expense(totals)

    assert [(r.dates, r.category, r.amount) for r in rows] == [
        ("2025-01", "Income", Decimal("3000")),
        ("2025-01", "Expenses", Decimal("1500")),
        ("2025-01", "Savings", Decimal("50.00")),
        ("2025-02", "Income", Decimal("0")),
        ("2025-02", "Expenses", Decimal("250")),
        ("2025-02", "Savings", Decimal("0.00")),
    ]


def test_income_vs_expense_orders_months_across_years():
    rows = summarize_income_vs_expense(
        [total(2026, 1, "Food", "-1"), total(2025, 12, "Food", "-1")]
    )

    assert [r.dates for r in rows] == ["2025-12"] * 3 + ["2026-01"] * 3


def test_income_vs_expense_empty():
    assert summarize_income_vs_expense([]) == []


def test_financial_overview_yearly_metrics():
    """Category shares add up to 100% and net income accumulates across years"""
    totals = [
        total(2025, 1, "Income", "5000"),
        total(2025, 1, "Food", "-600"),
        total(2025, 2, "Food", "-400"),
        total(2025, 2, "Housing", "-3000"),
        total(2026, 1, "Income", "2000"),
        total(2026, 1, "Food", "-500"),
    ]

    rows = summarize_financial_overview(totals)

    assert [(r.report_year, r.expense_category) for r in rows] == [
        ("2025", "Food"),
        ("2025", "Housing"),
        ("2026", "Food"),
    ]

    food_2025, housing_2025, food_2026 = rows
    assert food_2025.total_income_value == Decimal("5000")
    assert food_2025.total_yearly_expenses == Decimal("4000")
    assert food_2025.savings_rate_value == Decimal("20.00")
    assert food_2025.cumulative_net_income_value == Decimal("1000")
    assert food_2025.total_expense_value == Decimal("25.00")
    assert housing_2025.total_expense_value == Decimal("75.00")

    assert food_2026.total_income_value == Decimal("7000")  # 5000 + 2000
    assert food_2026.cumulative_net_income_value == Decimal("2500")  # 1000 + 1500
    assert food_2026.savings_rate_value == Decimal("75.00")
    assert food_2026.total_expense_value == Decimal("100.00")


def test_financial_overview_year_without_expenses():
    rows = summarize_financial_overview([total(2025, 6, "Income", "1200")])

    assert len(rows) == 1
    assert rows[0].expense_category is None
    assert rows[0].total_expense_value == Decimal("0.00")
    assert rows[0].savings_rate_value == Decimal("100.00")
    assert rows[0].cumulative_net_income_value == Decimal("1200")
