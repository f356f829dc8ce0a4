"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class UserIdentity:
    """Registered user as exposed outside the credential store (never the hash)"""

    id: int
    email: str


@dataclass
class SessionClaims:
    """Decoded contents of a session credential"""

    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass
class IssuedSession:
    """Credential handed to the client after a successful login"""

    token: str
    user_id: int


@dataclass
class MonthlyCategoryTotal:
    """Signed sum of one category's transactions in one calendar month"""

    year: int
    month: int
    category: str
    amount: Decimal


@dataclass
class TimeSeriesPoint:
    """Monthly total for one expense type"""

    total: Decimal
    time: str  # YYYY-MM
    type_name: str


@dataclass
class PeriodCategoryAmount:
    """Monthly amount for one category (or derived series such as Savings)"""

    dates: str  # YYYY-MM
    category: str
    amount: Decimal


@dataclass
class CashflowRow:
    """Category/type total for a calendar month name"""

    category_name: str
    type_name: str
    month: str
    total_amount: Decimal


@dataclass
class FinancialMetrics:
    """Yearly metrics, repeated per expense category"""

    report_year: str
    total_income_value: Decimal
    cumulative_net_income_value: Decimal
    savings_rate_value: Decimal
    expense_category: Optional[str]
    total_expense_value: Decimal  # Category share of yearly expenses, percent
    total_yearly_expenses: Decimal


@dataclass
class ExpenseListing:
    """Single expense transaction as shown in the expense table"""

    date: str  # YYYY-MM-DD
    amount: Decimal
    type: str
    category: str
