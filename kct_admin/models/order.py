"""
Order domain models.
Status and priority enums, dashboard status groups and shipping value objects.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .money import parse_money


class OrderStatus(str, Enum):
    PENDING_PAYMENT = "pending_payment"
    PAYMENT_CONFIRMED = "payment_confirmed"
    PROCESSING = "processing"
    IN_PRODUCTION = "in_production"
    QUALITY_CHECK = "quality_check"
    PACKAGING = "packaging"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    ON_HOLD = "on_hold"
    EXCEPTION = "exception"


class OrderPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"
    RUSH = "rush"
    WEDDING_PARTY = "wedding_party"
    PROM_GROUP = "prom_group"
    VIP_CUSTOMER = "vip_customer"


PENDING_STATUSES = frozenset({"pending_payment", "payment_confirmed"})
PROCESSING_STATUSES = frozenset({"processing", "in_production", "quality_check", "packaging"})
SHIPPED_STATUSES = frozenset({"shipped", "out_for_delivery"})
COMPLETED_STATUSES = frozenset({"delivered", "completed"})
RUSH_PRIORITIES = frozenset({"urgent", "rush", "wedding_party", "prom_group"})

USPS_TRACKING_URL = "https://tools.usps.com/go/TrackConfirmAction?qtc_tLabels1={tracking_number}"


class ShippingAddress(BaseModel):
    """Destination address in the shape the shipping functions expect."""

    name: str
    street1: str
    street2: str = ""
    city: str
    state: str
    zip: str
    country: str = "US"


class PackageDimensions(BaseModel):
    """Parcel size in inches."""

    length: float = 12
    width: float = 9
    height: float = 3


class ShippingRate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    carrier: str
    service: str
    rate: Decimal
    delivery_days: Optional[int] = None
    delivery_date: Optional[str] = None

    @field_validator("rate", mode="before")
    @classmethod
    def clean_rate(cls, v):
        return parse_money(v)


class ShippingLabel(BaseModel):
    """Result of the label generation function."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    shipment_id: Optional[str] = Field(default=None, alias="shipmentId")
    label_url: str = Field(..., alias="labelUrl")
    tracking_number: str = Field(..., alias="trackingNumber")
    carrier: Optional[str] = None
    service: Optional[str] = None
    cost: Optional[Decimal] = None

    @field_validator("cost", mode="before")
    @classmethod
    def clean_cost(cls, v):
        """Label cost arrives formatted, e.g. "$8.45"."""
        if v is None or v == "":
            return None
        return parse_money(v)


class TrackingEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: Optional[str] = None
    status: str
    message: Optional[str] = None
    location: Optional[str] = None
    occurred_at: Optional[str] = Field(default=None, alias="datetime")
    source: Optional[str] = None


class TrackingInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tracking_number: str = Field(..., alias="trackingNumber")
    status: str
    estimated_delivery_date: Optional[date] = Field(default=None, alias="estimatedDeliveryDate")
    carrier: Optional[str] = None
    events: List[TrackingEvent] = Field(default_factory=list)
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")

    @field_validator("estimated_delivery_date", mode="before")
    @classmethod
    def parse_delivery_date(cls, v):
        """Accept a date or a full ISO timestamp."""
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v or None


class OrderStats(BaseModel):
    """Order dashboard counters."""

    total_orders: int = 0
    pending_orders: int = 0
    processing_orders: int = 0
    shipped_orders: int = 0
    completed_orders: int = 0
    total_revenue: Decimal = Decimal("0")
    average_order_value: Decimal = Decimal("0")
    rush_orders: int = 0

