"""
Pydantic schemas for the vendor inbox.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InboxItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shopify_product_id: int
    title: Optional[str] = None
    handle: Optional[str] = None
    vendor: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = None
    inventory: Optional[int] = None
    variants: Optional[int] = None
    status: Optional[str] = None
    image_src: Optional[str] = None
    decision: str = "none"
    created_at: Optional[datetime] = None

    @field_validator("decision", mode="before")
    @classmethod
    def default_decision(cls, v):
        return v or "none"


class InboxVariantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shopify_variant_id: int
    shopify_product_id: Optional[int] = None
    sku: Optional[str] = None
    product_title: Optional[str] = None
    color_name: Optional[str] = None
    color_code: Optional[str] = None
    size: Optional[str] = None
    base_product_code: Optional[str] = None
    price: Optional[Decimal] = None
    inventory_quantity: Optional[int] = None
    image_src: Optional[str] = None
    decision: str = "none"
    decided_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @field_validator("decision", mode="before")
    @classmethod
    def default_decision(cls, v):
        return v or "none"


class InboxPageResponse(BaseModel):
    items: List[InboxItemResponse]
    total: int
    total_pages: int
    current_page: int


class InboxVariantPageResponse(BaseModel):
    items: List[InboxVariantResponse]
    total: int
    total_pages: int
    current_page: int


class InboxCountResponse(BaseModel):
    inbox_count: int


class DecisionRequest(BaseModel):
    ids: List[int] = Field(..., min_length=1, description="Shopify product or variant ids")
    decision: Literal["staged", "skipped"]


class DecisionResponse(BaseModel):
    updated: List[int]
    unchanged: List[int]
    rejected: List[int] = Field(..., description="Already imported; left unchanged")


class ImportRequest(BaseModel):
    product_ids: List[int] = Field(..., min_length=1)
    overrides: Dict[int, Dict[str, Any]] = Field(default_factory=dict)


class VariantImportRequest(BaseModel):
    variant_ids: List[int] = Field(..., min_length=1)


class InventoryRefreshRequest(BaseModel):
    product_ids: Optional[List[int]] = Field(None, description="Omit to refresh every product")


class SyncStatusResponse(BaseModel):
    is_running: bool
    last_sync: Optional[datetime] = None
    next_scheduled_sync: Optional[datetime] = None
    stats: Dict[str, Any] = Field(default_factory=dict)
