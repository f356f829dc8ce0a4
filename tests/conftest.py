"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Generator, Tuple
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from ledger_gateway.api.main import create_app
from ledger_gateway.config import Settings
from ledger_gateway.infrastructure.database.models import Base, ExpenseType
from ledger_gateway.infrastructure.database.repositories import UserRepository
from ledger_gateway.infrastructure.database.reports import ReportingEngine
from ledger_gateway.infrastructure.database.seed import seed_reference_data
from ledger_gateway.infrastructure.database.session import get_db
from ledger_gateway.infrastructure.security.tokens import TokenSigner


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
TEST_JWT_SECRET = "test-signing-secret-0123456789-abcdefghij"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's .env"""
    return Settings(
        _env_file=None,
        database_url=TEST_DATABASE_URL,
        jwt_secret=TEST_JWT_SECRET,
        report_cutoff_year=2024,
    )


@pytest.fixture
def signer(settings: Settings) -> TokenSigner:
    return TokenSigner(settings.jwt_secret, algorithm=settings.jwt_algorithm, ttl_seconds=settings.token_ttl_seconds)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database with reference data and yield a session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    seed_reference_data(db)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(settings: Settings, db: Session):
    """FastAPI app sharing the test session"""
    app = create_app(settings)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(app)


@pytest.fixture
def expense_types(db: Session) -> Dict[str, ExpenseType]:
    """Seeded expense types by name"""
    return {t.type_name: t for t in db.query(ExpenseType).all()}


@pytest.fixture
def register_user(client: TestClient) -> Callable[..., Tuple[int, Dict[str, str]]]:
    """Sign up and log in through the API; returns (user_id, auth headers)"""

    def _register(email: str, password: str = "secret1") -> Tuple[int, Dict[str, str]]:
        signup = client.post("/auth/signup", json={"email": email, "password": password})
        assert signup.status_code == 201, signup.text
        login = client.post("/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        body = login.json()
        return body["userId"], {"Authorization": f"Bearer {body['token']}"}

    return _register


@pytest.fixture
def make_user(db: Session) -> Callable[[str], int]:
    """Create a user directly in the store (skips bcrypt for speed)"""

    def _make(email: str) -> int:
        user = UserRepository(db).create_user(email=email, password_hash="not-a-bcrypt-hash")
        db.commit()
        return user.id

    return _make


@pytest.fixture
def add_transactions(db: Session, expense_types: Dict[str, ExpenseType]):
    """Record (date, amount, type name) tuples for a user through the reporting engine"""

    def _add(user_id: int, *entries: Tuple[str, str, str]) -> None:
        engine = ReportingEngine(db, user_id=user_id)
        for txn_date, amount, type_name in entries:
            engine.record_transaction(
                txn_date=date.fromisoformat(txn_date),
                amount=Decimal(amount),
                type_id=expense_types[type_name].id,
            )
        db.commit()

    return _add
