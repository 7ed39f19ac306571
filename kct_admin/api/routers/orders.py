"""
Order Endpoints
Order lists, the processing dashboard and order operations.

Operations other than listing and notes are delegated to the edge
functions; their payloads are returned as-is.
"""

import logging
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...functions import EdgeFunctionClient
from ...models.order import OrderStats
from ...orders import (
    OrderFilters,
    compute_dashboard_stats,
    dashboard_orders,
    get_order,
    list_orders,
    recent_email_logs,
    save_processing_notes,
)
from ...orders import operations
from ..dependencies import get_db, get_function_client, verify_api_key
from ..schemas.orders import (
    AssignRequest,
    AutomationRequest,
    CommunicationRequest,
    DashboardRowResponse,
    EmailLogResponse,
    EmailRequest,
    ExceptionCreateRequest,
    ExceptionResolveRequest,
    NotesRequest,
    OrderListResponse,
    OrderResponse,
    OrderSummary,
    StatusUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/orders", tags=["orders"], dependencies=[Depends(verify_api_key)]
)


@router.get("", response_model=OrderListResponse)
def get_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[str] = None,
    priority: Optional[str] = None,
    date_range: Optional[Literal["today", "week", "month"]] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
) -> OrderListResponse:
    filters = OrderFilters(
        page=page, limit=limit, status=status, priority=priority, date_range=date_range,
        search=search,
    )
    result = list_orders(db, filters)
    return OrderListResponse(
        orders=[OrderSummary.model_validate(o) for o in result.orders],
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.current_page,
    )


@router.get("/dashboard")
def dashboard(
    limit: int = Query(50, ge=1, le=500), db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """Most recent dashboard rows with the counters computed over them."""
    rows = dashboard_orders(db, limit=limit)
    stats: OrderStats = compute_dashboard_stats(rows)
    return {
        "orders": [DashboardRowResponse.model_validate(row).model_dump(mode="json") for row in rows],
        "stats": stats.model_dump(mode="json"),
    }


# === PROCESSING QUEUE ===

@router.get("/queue")
def queue_status(
    queue_type: str = "processing",
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> Dict[str, Any]:
    return operations.get_queue_status(functions, queue_type)


@router.post("/queue/assign")
def assign(
    request: AssignRequest, functions: EdgeFunctionClient = Depends(get_function_client)
) -> Dict[str, Any]:
    return operations.assign_next(functions, request.user_id, request.queue_type)


# === ANALYTICS ===

@router.get("/analytics/efficiency")
def efficiency(
    timeframe: str = "7", functions: EdgeFunctionClient = Depends(get_function_client)
) -> Dict[str, Any]:
    return operations.get_efficiency_dashboard(functions, timeframe)


@router.get("/analytics/real-time")
def real_time(functions: EdgeFunctionClient = Depends(get_function_client)) -> Dict[str, Any]:
    return operations.real_time_metrics(functions)


# === EXCEPTIONS ===

@router.get("/exceptions")
def exceptions(functions: EdgeFunctionClient = Depends(get_function_client)) -> List[Any]:
    return operations.get_exceptions(functions)


@router.post("/exceptions/{exception_id}/resolve")
def resolve(
    exception_id: str,
    request: ExceptionResolveRequest,
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> Dict[str, Any]:
    return operations.resolve_exception(functions, exception_id, request.resolution_notes)


@router.get("/email-logs", response_model=List[EmailLogResponse])
def email_logs(
    order_id: Optional[UUID] = None,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
) -> List[EmailLogResponse]:
    return [EmailLogResponse.model_validate(log) for log in recent_email_logs(db, order_id, limit)]


# === SINGLE ORDER ===

@router.get("/{order_id}", response_model=OrderResponse)
def get_one(order_id: UUID, db: Session = Depends(get_db)) -> OrderResponse:
    return OrderResponse.model_validate(get_order(db, order_id))


@router.patch("/{order_id}/status")
def change_status(
    order_id: UUID,
    request: StatusUpdateRequest,
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> Dict[str, Any]:
    return operations.update_status(
        functions, order_id, request.new_status, notes=request.notes, reason=request.reason
    )


@router.put("/{order_id}/notes", response_model=OrderResponse)
def notes(order_id: UUID, request: NotesRequest, db: Session = Depends(get_db)) -> OrderResponse:
    return OrderResponse.model_validate(save_processing_notes(db, order_id, request.notes))


@router.post("/{order_id}/escalate")
def escalate(
    order_id: UUID, functions: EdgeFunctionClient = Depends(get_function_client)
) -> Dict[str, Any]:
    return operations.escalate_order(functions, order_id)


@router.post("/{order_id}/exceptions")
def open_exception(
    order_id: UUID,
    request: ExceptionCreateRequest,
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> Dict[str, Any]:
    return operations.create_exception(
        functions, order_id, request.exception_type, request.severity, request.description
    )


@router.post("/{order_id}/communications")
def communicate(
    order_id: UUID,
    request: CommunicationRequest,
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> Dict[str, Any]:
    return operations.send_customer_communication(
        functions, order_id, request.communication_type, request.custom_message
    )


@router.post("/{order_id}/emails")
def email(
    order_id: UUID,
    request: EmailRequest,
    db: Session = Depends(get_db),
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> Dict[str, Any]:
    order = get_order(db, order_id)
    return operations.send_email(functions, order, request.email_type, request.recipient)


@router.post("/{order_id}/automation")
def automation(
    order_id: UUID,
    request: AutomationRequest,
    db: Session = Depends(get_db),
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> Dict[str, Any]:
    order = get_order(db, order_id)
    return operations.trigger_automation(functions, order, request.action)
