"""Schema creation and reference data seeding"""

import logging
from typing import Dict, Tuple

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ledger_gateway.infrastructure.database.models import Base, ExpenseCategory, ExpenseType

logger = logging.getLogger(__name__)

# category name -> type names
DEFAULT_REFERENCE_DATA: Dict[str, Tuple[str, ...]] = {
    "Income": ("Salary", "Bonus"),
    "Housing": ("Rent", "Utilities"),
    "Food": ("Groceries", "Restaurants"),
    "Transport": ("Fuel", "Public Transport"),
    "Leisure": ("Entertainment", "Travel"),
    "Health": ("Pharmacy",),
}


def seed_reference_data(db: Session, reference_data: Dict[str, Tuple[str, ...]] = DEFAULT_REFERENCE_DATA) -> int:
    """
    Insert missing categories and types; existing rows are left untouched.

    Returns:
        Number of rows inserted
    """
    inserted = 0
    categories = {c.category_name: c for c in db.query(ExpenseCategory).all()}
    type_names = {t.type_name for t in db.query(ExpenseType).all()}

    for category_name, types in reference_data.items():
        category = categories.get(category_name)
        if category is None:
            category = ExpenseCategory(category_name=category_name)
            db.add(category)
            db.flush()
            inserted += 1

        for type_name in types:
            if type_name in type_names:
                continue
            db.add(ExpenseType(category_id=category.id, type_name=type_name))
            inserted += 1

    db.commit()
    return inserted


def init_db(engine: Engine, session_factory: sessionmaker) -> None:
    """Create tables and seed reference data"""
    Base.metadata.create_all(bind=engine)
    db = session_factory()
    try:
        inserted = seed_reference_data(db)
    finally:
        db.close()
    logger.info("Database initialised", extra={"reference_rows_inserted": inserted})
