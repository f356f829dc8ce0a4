"""Pydantic schemas for API request/response validation"""

import datetime
import re
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")

# Upper bound of the store's Integer id columns
MAX_ID = 2**31 - 1


class Credentials(BaseModel):
    """Request body for POST /auth/signup and POST /auth/login"""

    email: EmailStr
    password: str = Field(..., min_length=6, description="At least 6 characters")

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return value


class UserSchema(BaseModel):
    id: int
    email: str


class SignupResponse(BaseModel):
    """Response for POST /auth/signup"""

    message: str
    user: UserSchema


class LoginResponse(BaseModel):
    """Response for POST /auth/login"""

    token: str
    user_id: int = Field(..., serialization_alias="userId")


class ExpenseTypeSchema(BaseModel):
    """Single row of GET /feed/expense-categories"""

    id: int
    category_id: int
    type_name: str


class TransactionCreate(BaseModel):
    """Request body for POST /feed/transaction; the owner always comes from the token"""

    model_config = ConfigDict(populate_by_name=True)

    date: datetime.date = Field(..., description="Calendar date, YYYY-MM-DD")
    amount: Decimal = Field(..., max_digits=12, decimal_places=2, description="Signed amount")
    type_id: int = Field(..., alias="typeId", gt=0, le=MAX_ID)
    category_id: Optional[int] = Field(
        None, alias="categoryId", gt=0, le=MAX_ID, description="Must match the type's category"
    )

    @field_validator("date", mode="before")
    @classmethod
    def _iso_calendar_date(cls, value: Any) -> Any:
        if not isinstance(value, str) or not ISO_DATE.fullmatch(value):
            raise ValueError("date must be a YYYY-MM-DD string")
        return value


class TransactionSchema(BaseModel):
    id: int
    date: datetime.date
    amount: Decimal
    type_id: int
    category_id: int
    user_id: int


class TransactionCreatedResponse(BaseModel):
    """Response for POST /feed/transaction"""

    message: str
    transaction: TransactionSchema


class TimeSeriesItem(BaseModel):
    total: Decimal
    time: str
    type_name: str


class PeriodCategoryItem(BaseModel):
    """Row of GET /feed/income-expenses and GET /feed/financial-details"""

    dates: str
    category: str
    amount: Decimal


class CashflowItem(BaseModel):
    category_name: str
    type_name: str
    month: str
    total_amount: Decimal


class FinancialOverviewItem(BaseModel):
    report_year: str
    total_income_value: Decimal
    cumulative_net_income_value: Decimal
    savings_rate_value: Decimal
    expense_category: Optional[str] = None
    total_expense_value: Decimal
    total_yearly_expenses: Decimal


class ExpenseListItem(BaseModel):
    date: str
    amount: Decimal
    type: str
    category: str


class ErrorResponse(BaseModel):
    """Envelope for every failure"""

    message: str
    errors: Optional[List[Any]] = None
