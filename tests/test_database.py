"""Tests for the transaction retry helper and date utilities."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

import database
from config import settings
from database import SessionLocal, _connect_args, run_in_transaction
from errors import ConflictError, NotFoundError, TransientStoreError
from models.cart import Cart
from services import cart as cart_service
from utils.dates import end_of_day, start_of_day, to_naive_utc


class TestRunInTransaction:
    def test_retries_stale_data(self, db):
        calls = []

        def work(session):
            calls.append(1)
            if len(calls) == 1:
                raise StaleDataError("version mismatch")
            return "done"

        assert run_in_transaction(db, work, attempts=3) == "done"
        assert len(calls) == 2

    def test_lock_timeouts_exhaust_to_transient_error(self, db):
        def work(session):
            raise OperationalError("UPDATE invoice_counters", {}, Exception("database is locked"))

        with pytest.raises(TransientStoreError):
            run_in_transaction(db, work, attempts=2)

    def test_duplicates_exhaust_to_conflict(self, db):
        def work(session):
            raise IntegrityError("INSERT INTO carts", {}, Exception("UNIQUE constraint failed"))

        with pytest.raises(ConflictError):
            run_in_transaction(db, work, attempts=2)

    def test_backoff_grows_between_attempts(self, db, monkeypatch):
        delays = []
        monkeypatch.setattr(settings, "STORE_RETRY_BACKOFF_SECONDS", 0.01)
        monkeypatch.setattr(database.time, "sleep", delays.append)

        def work(session):
            raise OperationalError("UPDATE carts", {}, Exception("database is locked"))

        with pytest.raises(TransientStoreError):
            run_in_transaction(db, work, attempts=3)
        assert delays == pytest.approx([0.01, 0.02])

    def test_domain_errors_are_not_retried(self, db):
        calls = []

        def work(session):
            calls.append(1)
            raise NotFoundError("nope")

        with pytest.raises(NotFoundError):
            run_in_transaction(db, work, attempts=3)
        assert len(calls) == 1

    def test_changes_from_another_session_are_kept(self, db, customer, products):
        cart_service.add_cart_item(db, customer.id, products["salmon"].id)

        # A second session bumps the cart version in between
        other = SessionLocal()
        try:
            cart_service.add_cart_item(other, customer.id, products["tuna"].id)
        finally:
            other.close()

        cart = cart_service.add_cart_item(db, customer.id, products["salmon"].id)
        assert {it.product_id: it.quantity for it in cart.items} == {
            products["salmon"].id: 2,
            products["tuna"].id: 1,
        }
        assert db.query(Cart).count() == 1


class TestConnectArgs:
    def test_sqlite(self):
        assert _connect_args("sqlite:///./x.db", 5) == {"check_same_thread": False, "timeout": 5}

    def test_postgres(self):
        args = _connect_args("postgresql://u:p@localhost/db", 5)
        assert args["connect_timeout"] == 5
        assert "statement_timeout=5000" in args["options"]


class TestDates:
    def test_end_of_day(self):
        assert end_of_day(datetime(2024, 2, 29, 13, 0)) == datetime(2024, 3, 1) - timedelta(microseconds=1)

    def test_start_of_day(self):
        assert start_of_day(datetime(2024, 2, 29, 13, 0)) == datetime(2024, 2, 29)

    def test_to_naive_utc(self):
        aware = datetime(2024, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == datetime(2023, 12, 31, 23, 0)
        assert to_naive_utc(datetime(2024, 1, 1)) == datetime(2024, 1, 1)
        assert to_naive_utc(None) is None
