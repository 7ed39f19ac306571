"""
Order operations delegated to the edge functions: status changes, the
processing queue, analytics, exceptions, customer e-mail and automation.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from ..db.models import Order
from ..exceptions import ValidationFailed
from ..functions import EdgeFunctionClient, names
from ..models.order import USPS_TRACKING_URL, OrderStatus
from .queries import order_payload

logger = logging.getLogger(__name__)

HEALTH_STATUSES = ("healthy", "degraded", "unhealthy")


def update_status(
    functions: EdgeFunctionClient,
    order_id: UUID,
    new_status: str,
    notes: Optional[str] = None,
    reason: Optional[str] = None,
) -> Dict[str, Any]:
    """Change an order's status through order-status-update."""
    try:
        status = OrderStatus(new_status).value
    except ValueError:
        raise ValidationFailed(f"Unknown order status: {new_status}")

    result = functions.invoke(
        names.ORDER_STATUS_UPDATE,
        {"orderId": str(order_id), "newStatus": status, "notes": notes, "statusReason": reason},
    )
    logger.info(f"Order {order_id} status -> {status}")
    return result


# === PROCESSING QUEUE ===

def get_queue_status(functions: EdgeFunctionClient, queue_type: str = "processing") -> Dict[str, Any]:
    return functions.invoke(
        names.PRIORITY_QUEUE_MANAGEMENT, {"action": "get_queue_status", "queueType": queue_type}
    )


def assign_next(
    functions: EdgeFunctionClient, user_id: str, queue_type: str = "processing"
) -> Dict[str, Any]:
    """Assign the next queued order to a processor."""
    return functions.invoke(
        names.PRIORITY_QUEUE_MANAGEMENT,
        {"action": "assign_next", "assignToUserId": user_id, "queueType": queue_type},
    )


def escalate_order(functions: EdgeFunctionClient, order_id: UUID) -> Dict[str, Any]:
    return functions.invoke(
        names.PRIORITY_QUEUE_MANAGEMENT, {"action": "escalate_order", "orderId": str(order_id)}
    )


# === ANALYTICS ===

def get_efficiency_dashboard(functions: EdgeFunctionClient, timeframe: str = "7") -> Dict[str, Any]:
    """Processing efficiency over the last `timeframe` days ("7d" is accepted)."""
    return functions.invoke(
        names.PROCESSING_ANALYTICS,
        {"action": "get_efficiency_dashboard", "timeframe": str(timeframe).rstrip("d")},
    )


def real_time_metrics(functions: EdgeFunctionClient) -> Dict[str, Any]:
    return functions.invoke(names.PROCESSING_ANALYTICS, {"action": "real_time_metrics"})


# === EXCEPTIONS ===

def get_exceptions(functions: EdgeFunctionClient) -> list:
    payload = functions.invoke(names.EXCEPTION_HANDLING, {"action": "get_exceptions"})
    if isinstance(payload, dict):
        return payload.get("exceptions") or []
    return payload or []


def create_exception(
    functions: EdgeFunctionClient,
    order_id: UUID,
    exception_type: str,
    severity: str,
    description: str,
) -> Dict[str, Any]:
    result = functions.invoke(
        names.EXCEPTION_HANDLING,
        {
            "action": "create_exception",
            "orderId": str(order_id),
            "exceptionType": exception_type,
            "severity": severity,
            "description": description,
        },
    )
    logger.info(f"Created {severity} exception for order {order_id}",
                extra={"exception_type": exception_type})
    return result


def resolve_exception(
    functions: EdgeFunctionClient, exception_id: str, resolution_notes: str
) -> Dict[str, Any]:
    return functions.invoke(
        names.EXCEPTION_HANDLING,
        {"action": "resolve_exception", "exceptionId": exception_id,
         "resolutionNotes": resolution_notes},
    )


# === CUSTOMER COMMUNICATION ===

def send_customer_communication(
    functions: EdgeFunctionClient,
    order_id: UUID,
    communication_type: str,
    custom_message: Optional[str] = None,
) -> Dict[str, Any]:
    return functions.invoke(
        names.CUSTOMER_COMMUNICATION,
        {
            "orderId": str(order_id),
            "communicationType": communication_type,
            "customMessage": custom_message,
            "triggerReason": "Manual communication",
        },
    )


def tracking_data(order: Order) -> Optional[Dict[str, str]]:
    """Tracking block for e-mails; None until the order has a tracking number."""
    if not order.tracking_number:
        return None
    return {
        "tracking_code": order.tracking_number,
        "carrier": order.carrier or "USPS",
        "tracking_url": USPS_TRACKING_URL.format(tracking_number=order.tracking_number),
    }


def send_email(
    functions: EdgeFunctionClient,
    order: Order,
    email_type: str,
    recipient: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Send a templated e-mail about an order.

    Args:
        email_type: Template name, e.g. "order_confirmation" or "shipping_notification"
        recipient: Overrides the customer's e-mail address
    """
    order_data = order_payload(order)
    if recipient:
        order_data["customer_email"] = recipient

    body: Dict[str, Any] = {"emailType": email_type, "orderData": order_data}
    tracking = tracking_data(order)
    if tracking:
        body["trackingData"] = tracking

    result = functions.invoke(names.SEND_EMAIL, body)
    logger.info(f"Sent {email_type} e-mail for order {order.order_number}",
                extra={"recipient": order_data.get("customer_email")})
    return result


def trigger_automation(functions: EdgeFunctionClient, order: Order, action: str) -> Dict[str, Any]:
    return functions.invoke(
        names.ORDER_AUTOMATION, {"action": action, "orderData": order_payload(order)}
    )


def system_health(functions: EdgeFunctionClient) -> Dict[str, Any]:
    """Run the remote system health check."""
    payload = functions.invoke(names.SYSTEM_HEALTH_CHECK, {}) or {}
    status = payload.get("overall_status")
    if status not in HEALTH_STATUSES:
        payload["overall_status"] = "unhealthy"
    if status != "healthy":
        logger.warning(f"System health is {payload['overall_status']}",
                       extra={"summary": payload.get("summary")})
    return payload
