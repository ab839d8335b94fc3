"""Pytest fixtures for testing"""

import os

# Point the service at SQLite before any application module builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from inala_ledger.api.main import create_app
from inala_ledger.infrastructure.database.models import Base
from inala_ledger.infrastructure.database.session import get_db
from inala_ledger.domain.models import BusinessPeriod, Payment, Sale


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def march_2025() -> BusinessPeriod:
    return BusinessPeriod(month=3, year=2025)


@pytest.fixture
def credit_sales() -> list[Sale]:
    """Credit sales for two customers across the February and March 2025 business periods"""
    return [
        Sale(customer_name="Amy", total_cents=20000, payment_type="credit", date=date(2025, 3, 10)),
        Sale(customer_name="Amy", total_cents=5000, payment_type="credit", date=date(2025, 4, 2)),  # still March
        Sale(customer_name="Ben", total_cents=12000, payment_type="credit", date=date(2025, 3, 6)),
        Sale(customer_name="Ben", total_cents=8000, payment_type="credit", date=date(2025, 2, 20)),
        Sale(customer_name="Amy", total_cents=9900, payment_type="cash", date=date(2025, 3, 12)),
    ]


@pytest.fixture
def credit_payments() -> list[Payment]:
    """Payments against the credit sales, one of them pinned to an earlier period"""
    return [
        Payment(customer_name="Amy", amount_cents=5000, date=date(2025, 3, 15), received_by="Thandi"),
        Payment(
            customer_name="Ben",
            amount_cents=8000,
            date=date(2025, 3, 8),
            applies_to_period=BusinessPeriod(month=2, year=2025),
            received_by="Sipho",
        ),
        Payment(customer_name="Ben", amount_cents=2000, date=date(2025, 3, 20), received_by="Thandi"),
    ]
