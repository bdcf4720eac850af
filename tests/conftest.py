"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from card_invoices.api.main import create_app
from card_invoices.application.cards import CardService
from card_invoices.domain.models import PurchaseRequest
from card_invoices.infrastructure.database.models import Base, Card
from card_invoices.infrastructure.database.session import get_db


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
def card(db: Session) -> Card:
    """Card closing on the 15th, due on the 25th"""
    return CardService(db).create_card(bank_name="Nubank", closing_day=15, due_day=25)


@pytest.fixture
def make_purchase(card: Card) -> Callable[..., PurchaseRequest]:
    """Build purchase requests against the default card"""

    def _make(
        purchase_date: date = date(2024, 3, 10),
        total_value: str = "300.00",
        total_installments: int = 3,
        name: str = "Notebook",
        category: str = "electronics",
        card_id=None,
    ) -> PurchaseRequest:
        return PurchaseRequest(
            card_id=card_id or card.id,
            purchase_date=purchase_date,
            name=name,
            category=category,
            total_value=Decimal(total_value),
            total_installments=total_installments,
        )

    return _make
