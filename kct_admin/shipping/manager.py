"""
Shipping Manager
Quote, label and tracking steps for a single order. Each step checks its
precondition locally and then delegates to a shipping edge function.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..db.models import Order, utcnow
from ..exceptions import FunctionInvocationError, ShippingPreconditionError
from ..functions import EdgeFunctionClient, names
from ..models.order import (
    OrderStatus,
    PackageDimensions,
    ShippingAddress,
    ShippingLabel,
    ShippingRate,
    TrackingInfo,
)

logger = logging.getLogger(__name__)

DEFAULT_WEIGHT_OZ = 16


@dataclass
class PackageRecommendation:
    recommendations: List[Dict[str, Any]] = field(default_factory=list)
    templates: List[Dict[str, Any]] = field(default_factory=list)
    selected: Optional[Dict[str, Any]] = None


class ShippingManager:
    """
    Drives the rates -> label -> tracking flow for one order.

    Generated labels and tracking updates are written back to the order row.
    """

    def __init__(self, session: Session, order: Order, functions: EdgeFunctionClient):
        self.session = session
        self.order = order
        self.functions = functions

    # === STATE ===

    def shipping_address(self) -> Optional[ShippingAddress]:
        """Destination address, or None while any required part is missing."""
        order = self.order
        required = (
            order.shipping_address_line_1,
            order.shipping_city,
            order.shipping_state,
            order.shipping_postal_code,
        )
        if not all(required):
            return None

        name = f"{order.shipping_first_name or ''} {order.shipping_last_name or ''}".strip()
        return ShippingAddress(
            name=name or order.customer_name or "",
            street1=order.shipping_address_line_1,
            street2=order.shipping_address_line_2 or "",
            city=order.shipping_city,
            state=order.shipping_state,
            zip=order.shipping_postal_code,
            country=order.shipping_country or "US",
        )

    @property
    def has_shipping_address(self) -> bool:
        return self.shipping_address() is not None

    @property
    def can_calculate_rates(self) -> bool:
        return self.has_shipping_address and not self.order.tracking_number

    def can_generate_label(self, rate: Optional[ShippingRate]) -> bool:
        return rate is not None and not self.order.shipping_label_url

    @property
    def can_show_tracking(self) -> bool:
        return bool(self.order.tracking_number)

    @property
    def current_step(self) -> str:
        if self.order.tracking_number:
            return "tracking"
        if self.order.shipping_label_url:
            return "label"
        return "rates"

    def state(self) -> Dict[str, Any]:
        address = self.shipping_address()
        return {
            "order_id": str(self.order.id),
            "current_step": self.current_step,
            "has_shipping_address": address is not None,
            "shipping_address": address.model_dump() if address else None,
            "can_calculate_rates": self.can_calculate_rates,
            "can_show_tracking": self.can_show_tracking,
            "label_url": self.order.shipping_label_url,
            "tracking_number": self.order.tracking_number,
            "tracking_status": self.order.tracking_status,
            "carrier": self.order.carrier,
            "service_type": self.order.service_type,
        }

    # === STEPS ===

    def calculate_rates(
        self,
        weight_oz: float = DEFAULT_WEIGHT_OZ,
        dimensions: Optional[PackageDimensions] = None,
    ) -> List[ShippingRate]:
        """
        Quote shipping rates, cheapest first.

        Raises:
            ShippingPreconditionError: without an address, once shipped, or
                when the carrier returns no rates
        """
        address = self.shipping_address()
        if address is None:
            raise ShippingPreconditionError("Order has no complete shipping address")
        if self.order.tracking_number:
            raise ShippingPreconditionError("Order already has a tracking number")

        dimensions = dimensions or PackageDimensions()
        payload = self.functions.invoke(
            names.SHIPPING_RATES,
            {
                "orderId": str(self.order.id),
                "toAddress": address.model_dump(),
                "weight": weight_oz,
                "dimensions": dimensions.model_dump(),
            },
        )

        raw_rates = payload.get("rates") if isinstance(payload, dict) else None
        if not raw_rates:
            raise ShippingPreconditionError("No shipping rates available")

        try:
            rates = [ShippingRate.model_validate(rate) for rate in raw_rates]
        except ValidationError as e:
            raise FunctionInvocationError(names.SHIPPING_RATES, f"malformed rate: {e}")

        rates.sort(key=lambda rate: rate.rate)
        logger.info(
            f"Got {len(rates)} shipping rates for order {self.order.order_number}",
            extra={"cheapest": str(rates[0].rate)},
        )
        return rates

    def generate_label(self, rate: Optional[ShippingRate]) -> ShippingLabel:
        """
        Buy a label for the selected rate and record it on the order.

        Raises:
            ShippingPreconditionError: without a rate or when a label exists
        """
        if rate is None:
            raise ShippingPreconditionError("Select a shipping rate first")
        if self.order.shipping_label_url:
            raise ShippingPreconditionError("Order already has a shipping label")

        payload = self.functions.invoke(
            names.SHIPPING_LABEL, {"orderId": str(self.order.id), "rateId": rate.id}
        )
        try:
            label = ShippingLabel.model_validate(payload)
        except ValidationError as e:
            raise FunctionInvocationError(names.SHIPPING_LABEL, f"malformed label: {e}")

        now = utcnow()
        order = self.order
        order.shipping_label_url = label.label_url
        order.tracking_number = label.tracking_number
        order.carrier = label.carrier or rate.carrier
        order.service_type = label.service or rate.service
        order.shipping_cost = label.cost if label.cost is not None else Decimal(rate.rate)
        order.easypost_shipment_id = label.shipment_id
        order.shipping_rate_id = rate.id
        order.tracking_status = "label_created"
        order.status = OrderStatus.PROCESSING.value
        order.shipped_at = now
        order.updated_at = now
        self.session.commit()

        logger.info(
            f"Label created for order {order.order_number}",
            extra={"tracking_number": label.tracking_number, "carrier": order.carrier},
        )
        return label

    def refresh_tracking(self) -> TrackingInfo:
        """
        Fetch tracking details and store the latest status.

        Raises:
            ShippingPreconditionError: if the order has no tracking number
        """
        if not self.can_show_tracking:
            raise ShippingPreconditionError("Order has no tracking number")

        payload = self.functions.get(
            names.SHIPPING_TRACKING,
            {"tracking_number": self.order.tracking_number, "order_id": str(self.order.id)},
        )
        try:
            info = TrackingInfo.model_validate(payload)
        except ValidationError as e:
            raise FunctionInvocationError(names.SHIPPING_TRACKING, f"malformed tracking: {e}")

        self.order.tracking_status = info.status
        if info.estimated_delivery_date:
            self.order.estimated_delivery_date = info.estimated_delivery_date
        self.order.updated_at = utcnow()
        self.session.commit()
        return info

    def recommend_package(
        self, items: List[Dict[str, Any]], total_weight: Optional[float] = None
    ) -> PackageRecommendation:
        """Ask for package templates that fit the items."""
        if total_weight is None:
            total_weight = sum(
                float(item.get("weight_oz") or 0) * int(item.get("quantity") or 1) for item in items
            )

        payload = self.functions.invoke(
            names.SHIPPING_TEMPLATE_RECOMMENDATION,
            {"orderItems": items, "totalWeight": total_weight},
        ) or {}

        result = PackageRecommendation(
            recommendations=list(payload.get("recommendations") or []),
            templates=list(payload.get("allTemplates") or []),
        )
        if result.recommendations:
            top = result.recommendations[0]
            if top.get("recommendation_level") == "highly_recommended":
                result.selected = top
        return result
