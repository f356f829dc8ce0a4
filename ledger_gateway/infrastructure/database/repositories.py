"""Data access layer for users, reference data and transactions"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ledger_gateway.domain.exceptions import DuplicateEmailError
from ledger_gateway.infrastructure.database.errors import store_errors
from ledger_gateway.infrastructure.database.models import ExpenseType, Transaction, User


class UserRepository:
    """Credential store: user identities and password hashes"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        """Exact (case-sensitive) lookup by email"""
        with store_errors("user lookup"):
            return self.db.query(User).filter(User.email == email).first()

    def create_user(self, email: str, password_hash: str) -> User:
        """
        Persist a new user.

        Raises:
            DuplicateEmailError: The unique index rejected the email
        """
        db_user = User(email=email, password_hash=password_hash)
        with store_errors("user insert"):
            try:
                self.db.add(db_user)
                self.db.flush()  # Get ID without committing
            except IntegrityError as e:
                self.db.rollback()
                raise DuplicateEmailError(email) from e
        return db_user


class LedgerRepository:
    """Ledger store: transactions and read-only reference tables"""

    def __init__(self, db: Session):
        self.db = db

    def list_expense_types(self) -> List[ExpenseType]:
        with store_errors("expense type listing"):
            return self.db.query(ExpenseType).order_by(ExpenseType.id).all()

    def get_expense_type(self, type_id: int) -> Optional[ExpenseType]:
        with store_errors("expense type lookup"):
            return self.db.get(ExpenseType, type_id)

    def create_transaction(
        self,
        user_id: int,
        txn_date: date,
        amount: Decimal,
        type_id: int,
        category_id: int,
    ) -> Transaction:
        """Insert a single transaction; the caller commits"""
        db_transaction = Transaction(
            date=txn_date,
            amount=amount,
            type_id=type_id,
            category_id=category_id,
            user_id=user_id,
        )
        with store_errors("transaction insert"):
            self.db.add(db_transaction)
            self.db.flush()
        return db_transaction
