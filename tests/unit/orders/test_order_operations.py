"""
Tests for order operations delegated to the edge functions.
"""

import uuid

import pytest

from kct_admin.exceptions import FunctionInvocationError, ValidationFailed
from kct_admin.functions import names
from kct_admin.orders import operations


def last_body(function_stub, name):
    return function_stub.calls_to(name)[-1]["body"]


def test_update_status_sends_new_status(functions, function_stub):
    order_id = uuid.uuid4()
    function_stub.on(names.ORDER_STATUS_UPDATE, {"success": True, "data": {"status": "shipped"}})

    result = operations.update_status(functions, order_id, "shipped", notes="Left dock", reason="Picked up")

    assert result == {"status": "shipped"}
    assert last_body(function_stub, names.ORDER_STATUS_UPDATE) == {
        "orderId": str(order_id),
        "newStatus": "shipped",
        "notes": "Left dock",
        "statusReason": "Picked up",
    }


def test_update_status_rejects_unknown_status(functions, function_stub):
    with pytest.raises(ValidationFailed):
        operations.update_status(functions, uuid.uuid4(), "teleported")
    assert function_stub.calls == []


def test_update_status_surfaces_function_errors(functions, function_stub):
    function_stub.on(names.ORDER_STATUS_UPDATE, {"error": {"message": "Invalid transition"}},
                     status_code=400)
    with pytest.raises(FunctionInvocationError) as exc_info:
        operations.update_status(functions, uuid.uuid4(), "delivered")
    assert exc_info.value.message == "order-status-update: Invalid transition"


class TestQueue:
    def test_queue_actions(self, functions, function_stub):
        order_id = uuid.uuid4()
        function_stub.on(names.PRIORITY_QUEUE_MANAGEMENT, {"queue": []})

        operations.get_queue_status(functions)
        assert last_body(function_stub, names.PRIORITY_QUEUE_MANAGEMENT) == {
            "action": "get_queue_status", "queueType": "processing"
        }

        operations.assign_next(functions, "user-7", queue_type="quality_check")
        assert last_body(function_stub, names.PRIORITY_QUEUE_MANAGEMENT) == {
            "action": "assign_next", "assignToUserId": "user-7", "queueType": "quality_check"
        }

        operations.escalate_order(functions, order_id)
        assert last_body(function_stub, names.PRIORITY_QUEUE_MANAGEMENT) == {
            "action": "escalate_order", "orderId": str(order_id)
        }


def test_efficiency_dashboard_strips_day_suffix(functions, function_stub):
    function_stub.on(names.PROCESSING_ANALYTICS, {"data": {"avg_processing_hours": 18}})

    result = operations.get_efficiency_dashboard(functions, "30d")
    operations.real_time_metrics(functions)

    first, second = function_stub.calls_to(names.PROCESSING_ANALYTICS)
    assert first["body"] == {"action": "get_efficiency_dashboard", "timeframe": "30"}
    assert second["body"] == {"action": "real_time_metrics"}
    assert result == {"avg_processing_hours": 18}


class TestExceptions:
    def test_get_exceptions_unwraps_list(self, functions, function_stub):
        function_stub.on(names.EXCEPTION_HANDLING, {"data": {"exceptions": [{"id": "e1"}]}})
        assert operations.get_exceptions(functions) == [{"id": "e1"}]

    def test_get_exceptions_accepts_bare_list(self, functions, function_stub):
        function_stub.on(names.EXCEPTION_HANDLING, [{"id": "e2"}])
        assert operations.get_exceptions(functions) == [{"id": "e2"}]

    def test_create_and_resolve(self, functions, function_stub):
        order_id = uuid.uuid4()
        function_stub.on(names.EXCEPTION_HANDLING, {"success": True})

        operations.create_exception(functions, order_id, "sizing_issue", "high", "Jacket too short")
        assert last_body(function_stub, names.EXCEPTION_HANDLING) == {
            "action": "create_exception",
            "orderId": str(order_id),
            "exceptionType": "sizing_issue",
            "severity": "high",
            "description": "Jacket too short",
        }

        operations.resolve_exception(functions, "e1", "Remade jacket")
        assert last_body(function_stub, names.EXCEPTION_HANDLING) == {
            "action": "resolve_exception", "exceptionId": "e1", "resolutionNotes": "Remade jacket"
        }


def test_customer_communication(functions, function_stub):
    order_id = uuid.uuid4()
    function_stub.on(names.CUSTOMER_COMMUNICATION, {"success": True})

    operations.send_customer_communication(functions, order_id, "delay_notice", "Two more days")

    assert last_body(function_stub, names.CUSTOMER_COMMUNICATION) == {
        "orderId": str(order_id),
        "communicationType": "delay_notice",
        "customMessage": "Two more days",
        "triggerReason": "Manual communication",
    }


class TestSendEmail:
    def test_without_tracking(self, db_session, functions, function_stub, make_order):
        order = make_order()
        function_stub.on(names.SEND_EMAIL, {"success": True, "id": "msg-1"})

        operations.send_email(functions, order, "order_confirmation")

        body = last_body(function_stub, names.SEND_EMAIL)
        assert body["emailType"] == "order_confirmation"
        assert body["orderData"]["order_number"] == "KCT-1001"
        assert body["orderData"]["customer_email"] == "alex@example.com"
        assert "trackingData" not in body

    def test_with_tracking_and_recipient_override(self, db_session, functions, function_stub, make_order):
        order = make_order(tracking_number="9400100000000000000000")
        function_stub.on(names.SEND_EMAIL, {"success": True})

        operations.send_email(functions, order, "shipping_notification", recipient="ops@example.com")

        body = last_body(function_stub, names.SEND_EMAIL)
        assert body["orderData"]["customer_email"] == "ops@example.com"
        assert body["trackingData"] == {
            "tracking_code": "9400100000000000000000",
            "carrier": "USPS",
            "tracking_url": "https://tools.usps.com/go/TrackConfirmAction?qtc_tLabels1=9400100000000000000000",
        }


def test_trigger_automation(db_session, functions, function_stub, make_order):
    order = make_order()
    function_stub.on(names.ORDER_AUTOMATION, {"success": True})

    operations.trigger_automation(functions, order, "auto_assign_priority")

    body = last_body(function_stub, names.ORDER_AUTOMATION)
    assert body["action"] == "auto_assign_priority"
    assert body["orderData"]["id"] == str(order.id)


@pytest.mark.parametrize(
    "reported, expected",
    [("healthy", "healthy"), ("degraded", "degraded"), (None, "unhealthy"), ("on fire", "unhealthy")],
)
def test_system_health_normalizes_status(functions, function_stub, reported, expected):
    function_stub.on(names.SYSTEM_HEALTH_CHECK, {"overall_status": reported, "summary": {}})
    assert operations.system_health(functions)["overall_status"] == expected
