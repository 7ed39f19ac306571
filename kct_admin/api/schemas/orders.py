"""
Pydantic schemas for orders and shipping.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ...models.order import PackageDimensions, ShippingRate


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_source: Optional[str] = None
    product_id: Optional[str] = None
    product_name: str
    product_sku: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    is_bundle_item: bool
    item_status: Optional[str] = None
    weight_oz: Optional[Decimal] = None


class OrderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_number: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    status: str
    order_priority: str
    total_amount: Decimal
    currency: str
    is_rush_order: bool
    tracking_number: Optional[str] = None
    created_at: datetime


class OrderResponse(OrderSummary):
    customer_phone: Optional[str] = None
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    discount_amount: Decimal
    payment_method: Optional[str] = None
    payment_status: Optional[str] = None

    shipping_first_name: Optional[str] = None
    shipping_last_name: Optional[str] = None
    shipping_address_line_1: Optional[str] = None
    shipping_address_line_2: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_state: Optional[str] = None
    shipping_postal_code: Optional[str] = None
    shipping_country: Optional[str] = None

    estimated_delivery_date: Optional[date] = None
    tracking_status: Optional[str] = None
    carrier: Optional[str] = None
    service_type: Optional[str] = None
    shipping_label_url: Optional[str] = None
    shipping_cost: Optional[Decimal] = None

    is_group_order: bool
    special_instructions: Optional[str] = None
    internal_notes: Optional[str] = None
    processing_notes: Optional[str] = None
    updated_at: datetime
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    items: List[OrderItemResponse] = Field(default_factory=list)


class OrderListResponse(BaseModel):
    orders: List[OrderSummary]
    total: int
    total_pages: int
    current_page: int


class DashboardRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_number: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    status: Optional[str] = None
    order_priority: Optional[str] = None
    total_amount: Optional[Decimal] = None
    currency: Optional[str] = None
    is_rush_order: Optional[bool] = None
    item_count: Optional[int] = None
    tracking_number: Optional[str] = None
    created_at: Optional[datetime] = None


class EmailLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_id: Optional[UUID] = None
    email_type: str
    recipient: str
    subject: Optional[str] = None
    status: str
    error_message: Optional[str] = None
    created_at: datetime


# === REQUESTS ===

class StatusUpdateRequest(BaseModel):
    new_status: str
    notes: Optional[str] = None
    reason: Optional[str] = None


class NotesRequest(BaseModel):
    notes: str


class AssignRequest(BaseModel):
    user_id: str
    queue_type: str = "processing"


class ExceptionCreateRequest(BaseModel):
    exception_type: str
    severity: str = "medium"
    description: str


class ExceptionResolveRequest(BaseModel):
    resolution_notes: str


class CommunicationRequest(BaseModel):
    communication_type: str
    custom_message: Optional[str] = None


class EmailRequest(BaseModel):
    email_type: str
    recipient: Optional[str] = None


class AutomationRequest(BaseModel):
    action: str


# === SHIPPING ===

class RatesRequest(BaseModel):
    weight_oz: float = Field(default=16, gt=0)
    dimensions: PackageDimensions = Field(default_factory=PackageDimensions)


class LabelRequest(BaseModel):
    rate: ShippingRate


class PackageRequest(BaseModel):
    items: List[Dict[str, Any]] = Field(default_factory=list)
    total_weight: Optional[float] = None
