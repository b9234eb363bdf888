"""Tests for ordering window resolution and the /orderingwindow routes."""

from datetime import datetime, timedelta

import pytest

from errors import NoWindowConfiguredError, WindowNotFoundError
from models.log import Log
from models.ordering_window import OrderingWindow
from services.ordering_window import is_window_active, resolve_active_window, window_interval
from utils.dates import utcnow


class TestResolveActiveWindow:
    def test_latest_enabled_window_wins(self, db, make_window):
        make_window(on_date=datetime(2024, 1, 1))
        latest = make_window(on_date=datetime(2024, 2, 1))
        make_window(is_enabled=False, on_date=datetime(2024, 3, 1))

        assert resolve_active_window(db).id == latest.id

    def test_explicit_id_wins(self, db, make_window):
        older = make_window(on_date=datetime(2024, 1, 1))
        make_window(on_date=datetime(2024, 2, 1))

        assert resolve_active_window(db, older.id).id == older.id

    def test_explicit_id_may_be_disabled(self, db, make_window):
        disabled = make_window(is_enabled=False, on_date=datetime(2024, 1, 1))
        assert resolve_active_window(db, disabled.id).id == disabled.id

    def test_unknown_explicit_id(self, db, make_window):
        make_window(on_date=datetime(2024, 1, 1))
        with pytest.raises(WindowNotFoundError):
            resolve_active_window(db, 999)

    def test_no_windows(self, db):
        with pytest.raises(NoWindowConfiguredError):
            resolve_active_window(db)

    def test_fallback_treats_missing_on_date_as_earliest(self, db, make_window):
        dated = make_window(is_enabled=False, on_date=datetime(2024, 1, 1))
        make_window(is_enabled=True, on_date=None)

        assert resolve_active_window(db).id == dated.id

    def test_fallback_without_any_dates(self, db, make_window):
        make_window(is_enabled=True)
        newest = make_window(is_enabled=False)

        assert resolve_active_window(db).id == newest.id


class TestWindowInterval:
    def test_inclusive_end_of_off_day(self, make_window):
        window = make_window(on_date=datetime(2024, 3, 4, 15, 30), off_date=datetime(2024, 3, 10, 8, 0))
        start, end = window_interval(window)
        assert start == datetime(2024, 3, 4)
        assert end == datetime(2024, 3, 11) - timedelta(microseconds=1)

    def test_open_ended_window_uses_now(self, make_window):
        window = make_window(on_date=None, off_date=None)
        now = datetime(2024, 5, 5, 12, 0)
        start, end = window_interval(window, now)
        assert start == datetime.min
        assert end == datetime(2024, 5, 5, 23, 59, 59, 999999)


class TestIsWindowActive:
    def test_no_window_is_open(self):
        assert is_window_active(None) is True

    def test_disabled_window_is_closed(self, make_window):
        assert is_window_active(make_window(is_enabled=False)) is False

    def test_bounds(self, make_window):
        window = make_window(on_date=datetime(2024, 1, 10), off_date=datetime(2024, 1, 20))
        assert is_window_active(window, datetime(2024, 1, 9)) is False
        assert is_window_active(window, datetime(2024, 1, 15)) is True
        assert is_window_active(window, datetime(2024, 1, 21)) is False


class TestOrderingWindowRoutes:
    def test_get_without_window(self, client):
        response = client.get("/orderingwindow")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] is None
        assert data["isActive"] is True

    def test_put_camel_case_body(self, client, db):
        response = client.put("/orderingwindow", json={
            "isEnabled": False,
            "onDate": "2024-06-01T00:00:00Z",
            "offDate": "2024-06-30T00:00:00Z",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["isEnabled"] is False
        assert data["onDate"].startswith("2024-06-01T00:00:00")
        assert data["offDate"].startswith("2024-06-30T00:00:00")

        window = db.query(OrderingWindow).one()
        assert window.is_enabled is False
        assert window.on_date == datetime(2024, 6, 1)
        assert window.off_date == datetime(2024, 6, 30)

        status = client.get("/orderingwindow").json()
        assert status["isEnabled"] is False
        assert status["isActive"] is False

    def test_put_accepts_snake_case_names(self, client, db):
        response = client.put("/orderingwindow", json={"is_enabled": False, "on_date": "2024-06-01T00:00:00"})
        assert response.status_code == 200
        assert response.json()["isEnabled"] is False
        assert db.query(OrderingWindow).one().on_date == datetime(2024, 6, 1)

    def test_put_creates_then_updates_in_place(self, client, db):
        first = client.put("/orderingwindow", json={
            "isEnabled": True,
            "onDate": "2024-06-01T00:00:00Z",
            "offDate": "2024-06-30T00:00:00Z",
        })
        assert first.status_code == 200

        second = client.put("/orderingwindow", json={"isEnabled": False})
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["onDate"] is None

        assert db.query(OrderingWindow).count() == 1
        assert db.query(Log).filter(Log.action == "ORDERING_WINDOW_UPDATE").count() == 2

    def test_put_stores_utc(self, client):
        client.put("/orderingwindow", json={"isEnabled": True, "onDate": "2024-06-01T02:00:00+02:00"})
        data = client.get("/orderingwindow").json()
        assert data["onDate"].startswith("2024-06-01T00:00:00")

    def test_get_reports_open_window(self, client):
        today = utcnow().replace(microsecond=0)
        client.put("/orderingwindow", json={
            "isEnabled": True,
            "onDate": (today - timedelta(days=1)).isoformat(),
            "offDate": (today + timedelta(days=1)).isoformat(),
        })
        assert client.get("/orderingwindow").json()["isActive"] is True
