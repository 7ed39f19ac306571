"""
Orders Package
Order listing, dashboard statistics and order operations.
"""

from .queries import (
    OrderFilters,
    OrderPage,
    compute_dashboard_stats,
    dashboard_orders,
    get_order,
    list_orders,
    order_payload,
    recent_email_logs,
    save_processing_notes,
)

__all__ = [
    "OrderFilters",
    "OrderPage",
    "compute_dashboard_stats",
    "dashboard_orders",
    "get_order",
    "list_orders",
    "order_payload",
    "recent_email_logs",
    "save_processing_notes",
]
