"""SQLAlchemy ORM models for users, reference data and the transaction ledger"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class User(Base):
    """Registered account; email is unique and compared case-sensitively"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    transactions = relationship("Transaction", back_populates="user")


class ExpenseCategory(Base):
    """Top-level reporting category (Income, Food, Housing, ...)"""

    __tablename__ = "expense_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_name = Column(Text, nullable=False, unique=True)

    types = relationship("ExpenseType", back_populates="category")


class ExpenseType(Base):
    """Transaction type; belongs to exactly one category"""

    __tablename__ = "expense_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, ForeignKey("expense_categories.id"), nullable=False)
    type_name = Column(Text, nullable=False, unique=True)

    category = relationship("ExpenseCategory", back_populates="types")


class Transaction(Base):
    """Ledger entry; category_id always equals the type's category"""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    type_id = Column(Integer, ForeignKey("expense_types.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("expense_categories.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="transactions")
    expense_type = relationship("ExpenseType")
    category = relationship("ExpenseCategory")
