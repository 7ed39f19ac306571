"""
Integration tests for the vendor inbox endpoints.
"""

from datetime import datetime

import pytest

from kct_admin.db.models import TaskExecution, VendorInboxItem
from kct_admin.functions import names
from kct_admin.tasks import vendor as vendor_tasks
from kct_admin.vendor.inbox import mark_imported

pytestmark = pytest.mark.integration


@pytest.fixture
def inbox(db_session):
    db_session.add_all([
        VendorInboxItem(shopify_product_id=1, title="Navy Tuxedo", category="Tuxedos",
                        status="active", created_at=datetime(2024, 5, 1)),
        VendorInboxItem(shopify_product_id=2, title="Grey Vest", category="Vests",
                        status="active", decision="staged", created_at=datetime(2024, 5, 2)),
    ])
    db_session.commit()


def test_inbox_listing_and_count(client, inbox):
    body = client.get("/api/v1/vendor/inbox").json()
    assert [item["shopify_product_id"] for item in body["items"]] == [2, 1]
    assert body["items"][1]["decision"] == "none"

    body = client.get("/api/v1/vendor/inbox", params={"decision": "staged"}).json()
    assert [item["title"] for item in body["items"]] == ["Grey Vest"]

    assert client.get("/api/v1/vendor/inbox/count").json() == {"inbox_count": 1}


def test_unknown_decision_filter_is_422(client):
    assert client.get("/api/v1/vendor/inbox", params={"decision": "maybe"}).status_code == 422


def test_decisions(client, db_session):
    mark_imported(db_session, [30])

    response = client.post("/api/v1/vendor/inbox/decisions",
                           json={"ids": [10, 30], "decision": "staged"})

    assert response.status_code == 200
    assert response.json() == {"updated": [10], "unchanged": [], "rejected": [30]}


def test_decisions_only_accept_stage_or_skip(client):
    response = client.post("/api/v1/vendor/inbox/decisions", json={"ids": [1], "decision": "imported"})
    assert response.status_code == 422

    response = client.post("/api/v1/vendor/inbox/decisions", json={"ids": [], "decision": "staged"})
    assert response.status_code == 422


def test_variant_decisions(client):
    response = client.post("/api/v1/vendor/inbox/variants/decisions",
                           json={"ids": [501, 502], "decision": "skipped"})
    assert response.json()["updated"] == [501, 502]


def test_queue_import(client, db_session, queued):
    calls = queued(vendor_tasks.import_vendor_products, task_id="import-1")

    response = client.post("/api/v1/vendor/import", json={
        "product_ids": [1, 2],
        "overrides": {"2": {"title": "Charcoal Vest"}},
    })

    assert response.status_code == 202
    assert response.json()["task_id"] == "import-1"
    assert response.json()["status"] == "queued"
    assert calls == [(([1, 2],), {"overrides": {"2": {"title": "Charcoal Vest"}}})]

    execution = db_session.query(TaskExecution).one()
    assert execution.task_name == "tasks.import_vendor_products"
    assert execution.status == "PENDING"
    assert execution.progress_total == 2


def test_queue_variant_import_and_refresh(client, queued):
    variant_calls = queued(vendor_tasks.import_vendor_variants, task_id="variants-1")
    refresh_calls = queued(vendor_tasks.refresh_vendor_inventory, task_id="refresh-1")

    assert client.post("/api/v1/vendor/import/variants",
                       json={"variant_ids": [9]}).json()["task_id"] == "variants-1"
    response = client.post("/api/v1/vendor/inventory/refresh", json={})

    assert response.status_code == 202
    assert "all products" in response.json()["message"]
    assert variant_calls == [(([9],), {})]
    assert refresh_calls == [((None,), {})]


def test_sync_status(client, function_stub):
    function_stub.on(names.INVENTORY_SYNC_STATUS, {
        "is_running": False,
        "last_sync": "2024-05-07T06:00:00Z",
        "next_scheduled_sync": "2024-05-10T06:00:00Z",
        "stats": {"products": 214},
    })

    body = client.get("/api/v1/vendor/sync-status").json()

    assert body["is_running"] is False
    assert body["next_scheduled_sync"].startswith("2024-05-10T06:00:00")
    assert body["stats"] == {"products": 214}


def test_sync_status_function_error_is_502(client, function_stub):
    function_stub.on(names.INVENTORY_SYNC_STATUS, {"error": "unavailable"}, status_code=503)
    response = client.get("/api/v1/vendor/sync-status")
    assert response.status_code == 502
    assert response.json()["error"]["type"] == "FunctionInvocationError"
