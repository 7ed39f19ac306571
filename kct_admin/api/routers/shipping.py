"""
Shipping Endpoints
Rate quotes, label purchase and tracking for a single order.

The steps run in order: rates need a complete address, a label needs a
selected rate, tracking needs the label's tracking number.
"""

import logging
from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...functions import EdgeFunctionClient
from ...orders import get_order
from ...shipping import ShippingManager
from ..dependencies import get_db, get_function_client, verify_api_key
from ..schemas.orders import LabelRequest, PackageRequest, RatesRequest

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/orders/{order_id}/shipping",
    tags=["shipping"],
    dependencies=[Depends(verify_api_key)],
)


def get_manager(
    order_id: UUID,
    db: Session = Depends(get_db),
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> ShippingManager:
    return ShippingManager(db, get_order(db, order_id), functions)


@router.get("")
def shipping_state(manager: ShippingManager = Depends(get_manager)) -> Dict[str, Any]:
    return manager.state()


@router.post("/rates")
def rates(
    request: RatesRequest, manager: ShippingManager = Depends(get_manager)
) -> List[Dict[str, Any]]:
    quoted = manager.calculate_rates(request.weight_oz, request.dimensions)
    return [rate.model_dump(mode="json") for rate in quoted]


@router.post("/label")
def label(request: LabelRequest, manager: ShippingManager = Depends(get_manager)) -> Dict[str, Any]:
    created = manager.generate_label(request.rate)
    return {"label": created.model_dump(mode="json"), "shipping": manager.state()}


@router.post("/tracking")
def tracking(manager: ShippingManager = Depends(get_manager)) -> Dict[str, Any]:
    """Fetch the latest tracking details and store the status on the order."""
    return manager.refresh_tracking().model_dump(mode="json")


@router.post("/package")
def package(
    request: PackageRequest, manager: ShippingManager = Depends(get_manager)
) -> Dict[str, Any]:
    """Package templates for the given items (the order's items when none are sent)."""
    items = request.items or [
        {
            "product_name": item.product_name,
            "quantity": item.quantity,
            "weight_oz": float(item.weight_oz) if item.weight_oz is not None else None,
        }
        for item in manager.order.items
    ]
    result = manager.recommend_package(items, request.total_weight)
    return {
        "recommendations": result.recommendations,
        "templates": result.templates,
        "selected": result.selected,
    }
