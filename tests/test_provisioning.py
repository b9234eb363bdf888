"""Tests for provisioning aggregation, pending totals and revenue reports."""

from datetime import datetime, timedelta
from decimal import Decimal

from models.order import OrderStatus
from services.provisioning import compute_requirements, scale_recipe, sum_pending_amount
from services.revenue import revenue_summary
from utils.dates import start_of_day, utcnow


class TestScaleRecipe:
    def test_whole_groups(self):
        precise_groups, precise, rounded_up = scale_recipe(21)
        assert precise_groups == Decimal(3)
        assert precise["rice"] == Decimal("900.00")
        assert rounded_up["rice"] == Decimal("900.00")
        assert rounded_up["salt"] == Decimal("15.00")

    def test_partial_group(self):
        precise_groups, precise, rounded_up = scale_recipe(10)
        assert precise_groups.quantize(Decimal("0.0001")) == Decimal("1.4286")
        assert precise["rice"] == Decimal("428.57")
        assert precise["water"] == Decimal("571.43")
        assert rounded_up["rice"] == Decimal("600.00")
        assert rounded_up["vinegar"] == Decimal("120.00")

    def test_nothing_ordered(self):
        precise_groups, precise, rounded_up = scale_recipe(0)
        assert precise_groups == 0
        assert all(v == 0 for v in precise.values())
        assert all(v == 0 for v in rounded_up.values())


class TestComputeRequirements:
    def test_three_full_groups(self, db, customer, products, make_order, make_window):
        today = start_of_day(utcnow())
        window = make_window(on_date=today)
        make_order(customer, [(products["salmon"], 3)], order_date=today + timedelta(hours=1))

        report = compute_requirements(db, window, now=today + timedelta(hours=2))
        assert report.total_rollouts == 21
        assert report.full_groups == 3
        assert report.remainder == 0
        assert report.rounded_up_groups == 3
        assert report.ingredients_precise["rice"] == Decimal("900.00")

    def test_remainder(self, db, customer, products, make_order, make_window):
        today = start_of_day(utcnow())
        window = make_window(on_date=today)
        make_order(customer, [(products["tuna"], 2)], order_date=today + timedelta(hours=1))

        report = compute_requirements(db, window, now=today + timedelta(hours=2))
        assert report.total_rollouts == 10
        assert report.full_groups == 1
        assert report.remainder == 3
        assert report.precise_groups_display == Decimal("1.4286")
        assert report.rounded_up_groups == 2
        assert report.ingredients_precise["rice"] == Decimal("428.57")
        assert report.ingredients_rounded_up["rice"] == Decimal("600.00")

    def test_only_pending_orders_in_window(self, db, customer, products, make_order, make_window):
        window = make_window(on_date=datetime(2024, 4, 1), off_date=datetime(2024, 4, 7))
        make_order(customer, [(products["salmon"], 1)], order_date=datetime(2024, 4, 2, 9, 0))
        make_order(customer, [(products["salmon"], 1), (products["tuna"], 1)], order_date=datetime(2024, 4, 7, 23, 0))
        make_order(customer, [(products["tuna"], 5)], order_date=datetime(2024, 4, 3), status=OrderStatus.PAID)
        make_order(customer, [(products["tuna"], 5)], order_date=datetime(2024, 3, 31, 23, 59))
        make_order(customer, [(products["tuna"], 5)], order_date=datetime(2024, 4, 8))

        report = compute_requirements(db, window)
        assert report.total_pending_orders == 2
        assert report.total_items_ordered == 3
        assert report.total_rollouts == 7 + 7 + 5
        assert [(p.product_name, p.total_quantity, p.total_rollouts) for p in report.per_product] == [
            ("Salmon Roll", 2, 14),
            ("Tuna Nigiri", 1, 5),
        ]

    def test_stock_read_at_report_time(self, db, customer, products, make_order, make_window):
        window = make_window(on_date=datetime(2024, 4, 1), off_date=datetime(2024, 4, 7))
        make_order(customer, [(products["salmon"], 2)], order_date=datetime(2024, 4, 2))

        products["salmon"].stock = 10
        db.commit()

        assert compute_requirements(db, window).total_rollouts == 20


class TestSumPendingAmount:
    def test_off_date_inclusive_next_day_excluded(self, db, customer, products, make_order, make_window):
        window = make_window(on_date=datetime(2024, 4, 1), off_date=datetime(2024, 4, 7))
        make_order(customer, [(products["salmon"], 1)], order_date=datetime(2024, 4, 7, 23, 59, 59, 999999))
        make_order(customer, [(products["tuna"], 1)], order_date=datetime(2024, 4, 8, 0, 0))
        make_order(customer, [(products["tuna"], 1)], order_date=datetime(2024, 4, 1, 0, 0))
        make_order(customer, [(products["tuna"], 3)], order_date=datetime(2024, 4, 3), status=OrderStatus.CANCELLED)

        total, count = sum_pending_amount(db, window)
        assert count == 2
        assert total == Decimal("42.50")

    def test_empty_window(self, db, make_window):
        window = make_window(on_date=datetime(2024, 4, 1), off_date=datetime(2024, 4, 7))
        assert sum_pending_amount(db, window) == (Decimal("0.00"), 0)


class TestAdminRoutes:
    def test_pending_total(self, client, customer, products, make_order, make_window):
        window = make_window(on_date=datetime(2024, 4, 1), off_date=datetime(2024, 4, 7))
        make_order(customer, [(products["salmon"], 2)], order_date=datetime(2024, 4, 2))

        response = client.get("/admin/orders/pending/total")
        assert response.status_code == 200
        data = response.json()
        assert data["window_id"] == window.id
        assert data["total_pending_amount"] == 49.0
        assert data["pending_count"] == 1
        assert data["date_to"].startswith("2024-04-07T23:59:59")

    def test_pending_total_without_windows(self, client):
        response = client.get("/admin/orders/pending/total")
        assert response.status_code == 400
        assert response.json()["detail"] == "No ordering window configured"

    def test_unknown_window_id(self, client, make_window):
        make_window(on_date=datetime(2024, 4, 1))
        assert client.get("/admin/orders/pending/total?windowId=77").status_code == 404
        assert client.get("/admin/stock/requirements?windowId=77").status_code == 404

    def test_stock_requirements(self, client, customer, products, make_order, make_window):
        window = make_window(on_date=datetime(2024, 4, 1), off_date=datetime(2024, 4, 7))
        make_order(customer, [(products["tuna"], 2)], order_date=datetime(2024, 4, 2))

        response = client.get(f"/admin/stock/requirements?windowId={window.id}")
        assert response.status_code == 200
        data = response.json()
        assert data["total_rollouts"] == 10
        assert data["rollouts_per_group"] == 7
        assert data["full_groups"] == 1
        assert data["remainder"] == 3
        assert data["precise_groups"] == 1.4286
        assert data["rounded_up_groups"] == 2
        assert data["ingredients_precise"]["rice"] == 428.57
        assert data["ingredients_rounded_up"]["rice"] == 600.0
        assert [line["ingredient"] for line in data["recipe_per_group"]] == ["rice", "water", "vinegar", "sugar", "salt"]
        assert data["per_product"] == [
            {"product_id": products["tuna"].id, "product_name": "Tuna Nigiri", "total_quantity": 2, "total_rollouts": 10},
        ]


class TestRevenue:
    def test_zero_filled_days(self, db, customer, products, make_order):
        make_order(customer, [(products["salmon"], 1)], order_date=datetime(2024, 1, 2, 9, 0))
        make_order(customer, [(products["tuna"], 1)], order_date=datetime(2024, 1, 2, 18, 0), status=OrderStatus.PAID)
        make_order(customer, [(products["tuna"], 1)], order_date=datetime(2024, 1, 4, 0, 0))

        summary = revenue_summary(db, datetime(2024, 1, 1), datetime(2024, 1, 3))
        assert [d["orders"] for d in summary["daily"]] == [0, 2, 0]
        assert summary["daily"][1]["revenue"] == Decimal("42.50")
        assert summary["total"] == Decimal("42.50")

    def test_route(self, client, customer, products, make_order):
        make_order(customer, [(products["salmon"], 2)], order_date=datetime(2024, 1, 3, 12, 0))

        response = client.get("/admin/revenue?from=2024-01-01T00:00:00&to=2024-01-03T00:00:00")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 49.0
        assert [d["date"] for d in data["daily"]] == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert data["daily"][2] == {"date": "2024-01-03", "revenue": 49.0, "orders": 1}
