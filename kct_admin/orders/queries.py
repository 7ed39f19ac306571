"""
Order queries: filtered listing, dashboard rows, detail, statistics and notes.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from ..db.models import EmailLog, Order, OrderDashboardRow, utcnow
from ..exceptions import NotFoundError
from ..inventory.queries import page_count
from ..models.order import (
    COMPLETED_STATUSES,
    PENDING_STATUSES,
    PROCESSING_STATUSES,
    RUSH_PRIORITIES,
    SHIPPED_STATUSES,
    OrderStats,
)

logger = logging.getLogger(__name__)

DATE_RANGE_DAYS = {"week": 7, "month": 30}


class OrderFilters(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    status: Optional[str] = None
    priority: Optional[str] = None
    date_range: Optional[Literal["today", "week", "month"]] = None
    search: Optional[str] = None


@dataclass
class OrderPage:
    orders: List[Order]
    total: int
    total_pages: int
    current_page: int


def date_range_start(date_range: str, now: Optional[datetime] = None) -> datetime:
    """Start of a dashboard date range: midnight today, or 7/30 days back."""
    now = now or utcnow()
    if date_range == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    return now - timedelta(days=DATE_RANGE_DAYS[date_range])


def list_orders(
    session: Session,
    filters: Optional[OrderFilters] = None,
    now: Optional[datetime] = None,
) -> OrderPage:
    """Orders matching the filters, newest first."""
    filters = filters or OrderFilters()
    query = session.query(Order)

    if filters.status:
        query = query.filter(Order.status == filters.status)
    if filters.priority:
        query = query.filter(Order.order_priority == filters.priority)
    if filters.date_range:
        query = query.filter(Order.created_at >= date_range_start(filters.date_range, now))
    if filters.search:
        pattern = f"%{filters.search.strip()}%"
        query = query.filter(
            or_(
                Order.order_number.ilike(pattern),
                Order.customer_name.ilike(pattern),
                Order.customer_email.ilike(pattern),
            )
        )

    total = query.count()
    orders = (
        query.order_by(Order.created_at.desc())
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
        .all()
    )
    return OrderPage(
        orders=orders,
        total=total,
        total_pages=page_count(total, filters.limit),
        current_page=filters.page,
    )


def dashboard_orders(session: Session, limit: int = 50) -> List[OrderDashboardRow]:
    return (
        session.query(OrderDashboardRow)
        .order_by(OrderDashboardRow.created_at.desc())
        .limit(limit)
        .all()
    )


def get_order(session: Session, order_id: UUID) -> Order:
    order = (
        session.query(Order)
        .options(selectinload(Order.items))
        .filter(Order.id == order_id)
        .first()
    )
    if order is None:
        raise NotFoundError("Order", order_id)
    return order


def compute_dashboard_stats(orders: Iterable[Any]) -> OrderStats:
    """
    Count orders per status group and sum revenue.

    Works on Order rows or dashboard view rows; an order is a rush order
    when flagged as one or when its priority is a rush priority.
    """
    stats = OrderStats()
    revenue = Decimal("0")

    for order in orders:
        stats.total_orders += 1
        status = order.status or ""
        if status in PENDING_STATUSES:
            stats.pending_orders += 1
        elif status in PROCESSING_STATUSES:
            stats.processing_orders += 1
        elif status in SHIPPED_STATUSES:
            stats.shipped_orders += 1
        elif status in COMPLETED_STATUSES:
            stats.completed_orders += 1

        if order.is_rush_order or (order.order_priority or "") in RUSH_PRIORITIES:
            stats.rush_orders += 1

        revenue += Decimal(str(order.total_amount or 0))

    stats.total_revenue = revenue.quantize(Decimal("0.01"))
    if stats.total_orders:
        stats.average_order_value = (revenue / stats.total_orders).quantize(Decimal("0.01"))
    return stats


def save_processing_notes(session: Session, order_id: UUID, notes: str) -> Order:
    order = session.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order", order_id)

    order.processing_notes = notes
    order.updated_at = utcnow()
    session.commit()
    session.refresh(order)
    logger.info(f"Saved processing notes for order {order.order_number}")
    return order


def recent_email_logs(
    session: Session, order_id: Optional[UUID] = None, limit: int = 50
) -> List[EmailLog]:
    query = session.query(EmailLog)
    if order_id is not None:
        query = query.filter(EmailLog.order_id == order_id)
    return query.order_by(EmailLog.created_at.desc()).limit(limit).all()


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


def order_payload(order: Order) -> Dict[str, Any]:
    """Order columns as JSON-ready values, the orderData the remote functions expect."""
    return {
        column.name: _json_value(getattr(order, column.key))
        for column in Order.__table__.columns
    }
