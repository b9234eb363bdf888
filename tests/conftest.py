"""Pytest fixtures for the storefront backend tests."""

import os
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

# The app reads its settings at import time, so point it at a scratch
# database and document directory before anything from backend/ is imported.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="storefront-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["INVOICE_STORAGE_DIR"] = str(_TMP_DIR / "invoices")
os.environ["DB_TIMEOUT_SECONDS"] = "15"

from fastapi.testclient import TestClient  # noqa: E402

from database import Base, SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402
from models.order import Order, OrderItem, OrderStatus  # noqa: E402
from models.ordering_window import OrderingWindow  # noqa: E402
from models.product import Product  # noqa: E402
from models.users import Customer  # noqa: E402
from utils.dates import utcnow  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Start every test from empty tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def customer(db):
    c = Customer(name="Ann Baker", email="ann@example.com", address="1 Harbour Lane", phone="555-0100")
    db.add(c)
    db.commit()
    return c


@pytest.fixture
def make_customer(db):
    """Factory for extra customers with unique emails."""
    counter = {"n": 0}

    def _make(name=None):
        counter["n"] += 1
        c = Customer(name=name or f"Customer {counter['n']}", email=f"customer{counter['n']}@example.com")
        db.add(c)
        db.commit()
        return c

    return _make


@pytest.fixture
def products(db):
    """Three catalog products; `stock` doubles as the rollouts-per-unit multiplier."""
    salmon = Product(name="Salmon Roll", price=Decimal("24.50"), stock=7, is_available=True)
    tuna = Product(name="Tuna Nigiri", price=Decimal("18.00"), stock=5, is_available=True)
    special = Product(name="Seasonal Special", price=Decimal("40.00"), stock=3, is_available=False)
    db.add_all([salmon, tuna, special])
    db.commit()
    return {"salmon": salmon, "tuna": tuna, "special": special}


@pytest.fixture
def make_order(db):
    """Inserts an order directly, bypassing the cart."""

    def _make(customer, lines, order_date=None, status=OrderStatus.PENDING):
        items = [OrderItem(product_id=p.id, quantity=q, price=p.price) for p, q in lines]
        total = sum((p.price * q for p, q in lines), Decimal("0.00"))
        order = Order(
            customer_id=customer.id,
            order_date=order_date or utcnow(),
            status=status,
            total_amount=total,
            items=items,
        )
        db.add(order)
        db.commit()
        return order

    return _make


@pytest.fixture
def make_window(db):
    def _make(is_enabled=True, on_date=None, off_date=None):
        window = OrderingWindow(is_enabled=is_enabled, on_date=on_date, off_date=off_date)
        db.add(window)
        db.commit()
        return window

    return _make
