"""Reporting engine - user-scoped aggregations over the transaction ledger"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import extract, func
from sqlalchemy.orm import Query, Session

from ledger_gateway.domain.exceptions import UnauthenticatedError, ValidationError
from ledger_gateway.domain.models import (
    CashflowRow,
    ExpenseListing,
    FinancialMetrics,
    MonthlyCategoryTotal,
    PeriodCategoryAmount,
    TimeSeriesPoint,
)
from ledger_gateway.domain.reporting import (
    DEFAULT_CUTOFF_YEAR,
    INCOME_CATEGORY,
    TIMESERIES_EXCLUDED_TYPES,
    format_period,
    month_name,
    summarize_financial_overview,
    summarize_income_vs_expense,
)
from ledger_gateway.infrastructure.database.errors import store_errors
from ledger_gateway.infrastructure.database.models import ExpenseCategory, ExpenseType, Transaction
from ledger_gateway.infrastructure.database.repositories import LedgerRepository

_year = extract("year", Transaction.date)
_month = extract("month", Transaction.date)
_sum_amount = func.sum(Transaction.amount)


class ReportingEngine:
    """
    Catalogue of report queries for one authenticated user.

    The user id is bound at construction (from the verified session) and
    every query filters on it; no method takes a user id. Reports only
    cover calendar years strictly after cutoff_year.
    """

    def __init__(self, db: Session, user_id: Optional[int], cutoff_year: int = DEFAULT_CUTOFF_YEAR):
        if user_id is None:
            raise UnauthenticatedError("Reporting requires an authenticated user")
        self.db = db
        self.user_id = user_id
        self.cutoff_year = cutoff_year

    def _scoped(self, query: Query) -> Query:
        """Restrict a transaction query to this user and the reporting window"""
        return query.filter(Transaction.user_id == self.user_id).filter(_year > self.cutoff_year)

    def record_transaction(
        self,
        txn_date: date,
        amount: Decimal,
        type_id: int,
        category_id: Optional[int] = None,
    ) -> Transaction:
        """
        Record a transaction for this user.

        The category is always taken from the expense type. A supplied
        category_id that disagrees with it is rejected, never stored.

        Raises:
            ValidationError: Unknown type or mismatching category
        """
        ledger = LedgerRepository(self.db)
        expense_type = ledger.get_expense_type(type_id)
        if expense_type is None:
            raise ValidationError(
                "Validation failed.",
                errors=[{"loc": ["body", "typeId"], "msg": f"Unknown expense type {type_id}", "type": "value_error"}],
            )

        if category_id is not None and category_id != expense_type.category_id:
            raise ValidationError(
                "Validation failed.",
                errors=[
                    {
                        "loc": ["body", "categoryId"],
                        "msg": f"Category {category_id} does not match expense type {type_id}",
                        "type": "value_error",
                    }
                ],
            )

        return ledger.create_transaction(
            user_id=self.user_id,
            txn_date=txn_date,
            amount=amount,
            type_id=type_id,
            category_id=expense_type.category_id,
        )

    def timeseries(self) -> List[TimeSeriesPoint]:
        """Monthly totals per expense type, without income and rent types"""
        query = (
            self.db.query(
                _sum_amount.label("total"),
                _year.label("year"),
                _month.label("month"),
                ExpenseType.type_name,
            )
            .select_from(Transaction)
            .join(ExpenseType, ExpenseType.id == Transaction.type_id)
            .filter(ExpenseType.type_name.notin_(TIMESERIES_EXCLUDED_TYPES))
        )
        query = (
            self._scoped(query)
            .group_by(_year, _month, ExpenseType.type_name)
            .order_by(_year, _month, ExpenseType.type_name)
        )
        with store_errors("timeseries report"):
            rows = query.all()

        return [
            TimeSeriesPoint(total=row.total, time=format_period(row.year, row.month), type_name=row.type_name)
            for row in rows
        ]

    def _monthly_category_totals(self) -> List[MonthlyCategoryTotal]:
        query = (
            self.db.query(
                _year.label("year"),
                _month.label("month"),
                ExpenseCategory.category_name,
                _sum_amount.label("amount"),
            )
            .select_from(Transaction)
            .join(ExpenseCategory, ExpenseCategory.id == Transaction.category_id)
        )
        query = (
            self._scoped(query)
            .group_by(_year, _month, ExpenseCategory.category_name)
            .order_by(_year, _month, ExpenseCategory.category_name)
        )
        with store_errors("category totals"):
            rows = query.all()

        return [
            MonthlyCategoryTotal(
                year=int(row.year),
                month=int(row.month),
                category=row.category_name,
                amount=row.amount,
            )
            for row in rows
        ]

    def income_vs_expense(self) -> List[PeriodCategoryAmount]:
        """Monthly Income / Expenses / Savings rate series"""
        return summarize_income_vs_expense(self._monthly_category_totals())

    def financial_overview(self) -> List[FinancialMetrics]:
        """Yearly income, net income, savings rate and category expense shares"""
        return summarize_financial_overview(self._monthly_category_totals())

    def cashflow(self) -> List[CashflowRow]:
        """Totals per category, type and month name, ordered by category then month"""
        query = (
            self.db.query(
                ExpenseCategory.category_name,
                ExpenseType.type_name,
                _month.label("month"),
                _sum_amount.label("total_amount"),
            )
            .select_from(Transaction)
            .join(ExpenseType, ExpenseType.id == Transaction.type_id)
            .join(ExpenseCategory, ExpenseCategory.id == Transaction.category_id)
        )
        query = (
            self._scoped(query)
            .group_by(ExpenseCategory.category_name, ExpenseType.type_name, _month)
            .order_by(ExpenseCategory.category_name, _month, ExpenseType.type_name)
        )
        with store_errors("cashflow report"):
            rows = query.all()

        return [
            CashflowRow(
                category_name=row.category_name,
                type_name=row.type_name,
                month=month_name(row.month),
                total_amount=row.total_amount,
            )
            for row in rows
        ]

    def financial_details(self) -> List[PeriodCategoryAmount]:
        """Monthly totals per expense category, largest sums first"""
        query = (
            self.db.query(
                _year.label("year"),
                _month.label("month"),
                ExpenseCategory.category_name,
                _sum_amount.label("amount"),
            )
            .select_from(Transaction)
            .join(ExpenseCategory, ExpenseCategory.id == Transaction.category_id)
            .filter(ExpenseCategory.category_name != INCOME_CATEGORY)
        )
        query = (
            self._scoped(query)
            .group_by(_year, _month, ExpenseCategory.category_name)
            .order_by(_sum_amount.desc(), _year, _month, ExpenseCategory.category_name)
        )
        with store_errors("financial details report"):
            rows = query.all()

        return [
            PeriodCategoryAmount(
                dates=format_period(row.year, row.month),
                category=row.category_name,
                amount=row.amount,
            )
            for row in rows
        ]

    def expense_table(self) -> List[ExpenseListing]:
        """Individual expense transactions, newest first"""
        query = (
            self.db.query(
                Transaction.date,
                Transaction.amount,
                ExpenseType.type_name,
                ExpenseCategory.category_name,
            )
            .select_from(Transaction)
            .join(ExpenseType, ExpenseType.id == Transaction.type_id)
            .join(ExpenseCategory, ExpenseCategory.id == Transaction.category_id)
            .filter(ExpenseCategory.category_name != INCOME_CATEGORY)
        )
        query = self._scoped(query).order_by(Transaction.date.desc(), Transaction.id.desc())
        with store_errors("expense table report"):
            rows = query.all()

        return [
            ExpenseListing(
                date=row.date.isoformat(),
                amount=row.amount,
                type=row.type_name,
                category=row.category_name,
            )
            for row in rows
        ]
