"""Reporting rules shared by every ledger report"""

import calendar
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Tuple

from ledger_gateway.domain.models import FinancialMetrics, MonthlyCategoryTotal, PeriodCategoryAmount

DEFAULT_CUTOFF_YEAR = 2024

# Types left out of the expense time series (income and fixed housing cost)
TIMESERIES_EXCLUDED_TYPES = ("Salary", "Bonus", "Rent")

INCOME_CATEGORY = "Income"

# Series names emitted by the income vs expense report
INCOME_SERIES = "Income"
EXPENSES_SERIES = "Expenses"
SAVINGS_SERIES = "Savings"

_CENTS = Decimal("0.01")


def format_period(year: int, month: int) -> str:
    """Format a calendar month as YYYY-MM"""
    return f"{int(year):04d}-{int(month):02d}"


def month_name(month: int) -> str:
    """English month name for 1-12"""
    return calendar.month_name[int(month)]


def savings_rate(income: Decimal, expenses: Decimal) -> Decimal:
    """Share of income not spent, in percent; 0 when there is no income"""
    if income == 0:
        return Decimal("0.00")
    return ((income - expenses) / income * 100).quantize(_CENTS, rounding=ROUND_HALF_UP)


def _split_income_expenses(
    totals: Iterable[MonthlyCategoryTotal],
    key,
) -> Tuple[Dict, Dict, Dict]:
    """Group totals by key into income, expenses and per-category expenses"""
    income: Dict = defaultdict(Decimal)
    expenses: Dict = defaultdict(Decimal)
    by_category: Dict = defaultdict(lambda: defaultdict(Decimal))

    for total in totals:
        bucket = key(total)
        if total.category == INCOME_CATEGORY:
            income[bucket] += total.amount
        else:
            # Expense categories count by magnitude whatever sign was recorded
            spent = abs(total.amount)
            expenses[bucket] += spent
            by_category[bucket][total.category] += spent

    return income, expenses, by_category


def summarize_income_vs_expense(totals: Iterable[MonthlyCategoryTotal]) -> List[PeriodCategoryAmount]:
    """
    Build the monthly Income / Expenses / Savings series.

    For every month that has any transaction:
    - Income: signed sum of the Income category
    - Expenses: sum of |category total| over all other categories
    - Savings: savings rate in percent (see savings_rate)

    Returns rows ordered by month, then Income, Expenses, Savings.
    """
    income, expenses, _ = _split_income_expenses(totals, key=lambda t: (int(t.year), int(t.month)))

    rows: List[PeriodCategoryAmount] = []
    for year, month in sorted(set(income) | set(expenses)):
        period = format_period(year, month)
        month_income = income.get((year, month), Decimal(0))
        month_expenses = expenses.get((year, month), Decimal(0))
        rows.append(PeriodCategoryAmount(dates=period, category=INCOME_SERIES, amount=month_income))
        rows.append(PeriodCategoryAmount(dates=period, category=EXPENSES_SERIES, amount=month_expenses))
        rows.append(
            PeriodCategoryAmount(
                dates=period,
                category=SAVINGS_SERIES,
                amount=savings_rate(month_income, month_expenses),
            )
        )
    return rows


def summarize_financial_overview(totals: Iterable[MonthlyCategoryTotal]) -> List[FinancialMetrics]:
    """
    Build yearly financial metrics.

    One row per (year, expense category), ordered by year then category.
    Year-level values repeat on every row of that year:
    - total_income_value: accumulated income over all reported years up
      to and including this one
    - cumulative_net_income_value: running income - expenses over all
      reported years up to and including this one
    - savings_rate_value: savings rate of the year in percent
    - total_yearly_expenses: expenses booked in the year
    A year without expenses still yields one row (expense_category None).
    """
    income, expenses, by_category = _split_income_expenses(totals, key=lambda t: int(t.year))

    rows: List[FinancialMetrics] = []
    cumulative_income = Decimal(0)
    cumulative_net = Decimal(0)
    for year in sorted(set(income) | set(expenses)):
        year_income = income.get(year, Decimal(0))
        year_expenses = expenses.get(year, Decimal(0))
        cumulative_income += year_income
        cumulative_net += year_income - year_expenses
        rate = savings_rate(year_income, year_expenses)

        categories = by_category.get(year) or {None: Decimal(0)}
        for category in sorted(categories, key=lambda c: (c is None, c or "")):
            spent = categories[category]
            share = (
                (spent / year_expenses * 100).quantize(_CENTS, rounding=ROUND_HALF_UP)
                if year_expenses
                else Decimal("0.00")
            )
            rows.append(
                FinancialMetrics(
                    report_year=str(year),
                    total_income_value=cumulative_income,
                    cumulative_net_income_value=cumulative_net,
                    savings_rate_value=rate,
                    expense_category=category,
                    total_expense_value=share,
                    total_yearly_expenses=year_expenses,
                )
            )
    return rows
