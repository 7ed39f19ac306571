"""
Tests for order listing, detail, statistics and notes.
"""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from kct_admin.db.models import EmailLog
from kct_admin.exceptions import NotFoundError
from kct_admin.orders import (
    OrderFilters,
    compute_dashboard_stats,
    get_order,
    list_orders,
    order_payload,
    recent_email_logs,
    save_processing_notes,
)
from kct_admin.orders.queries import date_range_start

NOW = datetime(2024, 6, 15, 15, 30)


@pytest.fixture
def orders(make_order):
    make_order("KCT-1001", status="pending_payment", created_at=NOW - timedelta(hours=2))
    make_order("KCT-1002", status="processing", order_priority="rush",
               customer_name="Jordan Lee", customer_email="jordan@example.com",
               created_at=NOW - timedelta(days=3))
    make_order("KCT-1003", status="shipped", created_at=NOW - timedelta(days=20))
    make_order("KCT-1004", status="delivered", created_at=NOW - timedelta(days=60))


def test_date_range_start():
    assert date_range_start("today", NOW) == datetime(2024, 6, 15)
    assert date_range_start("week", NOW) == NOW - timedelta(days=7)
    assert date_range_start("month", NOW) == NOW - timedelta(days=30)


class TestListOrders:
    def test_newest_first(self, db_session, orders):
        page = list_orders(db_session)
        assert [o.order_number for o in page.orders] == ["KCT-1001", "KCT-1002", "KCT-1003", "KCT-1004"]
        assert page.total == 4

    @pytest.mark.parametrize(
        "date_range, expected",
        [("today", ["KCT-1001"]), ("week", ["KCT-1001", "KCT-1002"]),
         ("month", ["KCT-1001", "KCT-1002", "KCT-1003"])],
    )
    def test_date_ranges(self, db_session, orders, date_range, expected):
        page = list_orders(db_session, OrderFilters(date_range=date_range), now=NOW)
        assert [o.order_number for o in page.orders] == expected

    def test_status_priority_and_search(self, db_session, orders):
        assert [o.order_number for o in list_orders(
            db_session, OrderFilters(status="shipped")).orders] == ["KCT-1003"]
        assert [o.order_number for o in list_orders(
            db_session, OrderFilters(priority="rush")).orders] == ["KCT-1002"]
        assert [o.order_number for o in list_orders(
            db_session, OrderFilters(search="JORDAN")).orders] == ["KCT-1002"]
        assert list_orders(db_session, OrderFilters(search="kct-100")).total == 4

    def test_pagination(self, db_session, orders):
        page = list_orders(db_session, OrderFilters(limit=3, page=2))
        assert [o.order_number for o in page.orders] == ["KCT-1004"]
        assert page.total_pages == 2


def test_get_order_includes_items(db_session, make_order):
    order = make_order(items=[
        {"product_name": "Navy Suit", "product_sku": "SUIT-1", "quantity": 1,
         "unit_price": Decimal("120.00"), "total_price": Decimal("120.00")},
    ])

    fetched = get_order(db_session, order.id)
    assert [item.product_name for item in fetched.items] == ["Navy Suit"]

    with pytest.raises(NotFoundError):
        get_order(db_session, uuid.uuid4())


def test_compute_dashboard_stats():
    rows = [
        SimpleNamespace(status="pending_payment", order_priority="normal", is_rush_order=False,
                        total_amount=Decimal("100.00")),
        SimpleNamespace(status="processing", order_priority="wedding_party", is_rush_order=False,
                        total_amount=Decimal("250.50")),
        SimpleNamespace(status="quality_check", order_priority="normal", is_rush_order=True,
                        total_amount=None),
        SimpleNamespace(status="out_for_delivery", order_priority=None, is_rush_order=False,
                        total_amount=Decimal("49.50")),
        SimpleNamespace(status="completed", order_priority="normal", is_rush_order=False,
                        total_amount=Decimal("0")),
        SimpleNamespace(status="cancelled", order_priority="normal", is_rush_order=False,
                        total_amount=Decimal("0")),
    ]

    stats = compute_dashboard_stats(rows)

    assert stats.total_orders == 6
    assert stats.pending_orders == 1
    assert stats.processing_orders == 2
    assert stats.shipped_orders == 1
    assert stats.completed_orders == 1
    assert stats.rush_orders == 2
    assert stats.total_revenue == Decimal("400.00")
    assert stats.average_order_value == Decimal("66.67")


def test_compute_dashboard_stats_empty():
    stats = compute_dashboard_stats([])
    assert stats.total_orders == 0
    assert stats.average_order_value == Decimal("0")


def test_save_processing_notes(db_session, make_order):
    order = make_order()
    saved = save_processing_notes(db_session, order.id, "Hemmed trousers, ready Friday")
    assert saved.processing_notes == "Hemmed trousers, ready Friday"

    with pytest.raises(NotFoundError):
        save_processing_notes(db_session, uuid.uuid4(), "x")


def test_recent_email_logs_filter_by_order(db_session, make_order):
    order = make_order()
    db_session.add_all([
        EmailLog(order_id=order.id, email_type="order_confirmation", recipient="alex@example.com",
                 created_at=NOW - timedelta(minutes=5)),
        EmailLog(order_id=order.id, email_type="shipping_update", recipient="alex@example.com",
                 created_at=NOW),
        EmailLog(order_id=None, email_type="newsletter", recipient="other@example.com",
                 created_at=NOW),
    ])
    db_session.commit()

    logs = recent_email_logs(db_session, order.id)
    assert [log.email_type for log in logs] == ["shipping_update", "order_confirmation"]
    assert len(recent_email_logs(db_session)) == 3


def test_order_payload_is_json_ready(db_session, make_order):
    order = make_order(estimated_delivery_date=datetime(2024, 7, 1).date())
    payload = order_payload(order)

    assert payload["id"] == str(order.id)
    assert payload["order_number"] == "KCT-1001"
    assert payload["total_amount"] == 150.0
    assert payload["estimated_delivery_date"] == "2024-07-01"
    assert payload["shipping_city"] == "Kalamazoo"
