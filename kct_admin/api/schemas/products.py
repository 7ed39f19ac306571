"""
Pydantic schemas for products, variants, bulk actions and collections.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ...inventory.bulk import BulkUpdate
from ...models.product import VariantUpdate


class VariantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    variant_type: str
    color: Optional[str] = None
    size: Optional[str] = None
    sku: str
    price_cents: int
    compare_at_price_cents: Optional[int] = None
    inventory_quantity: int
    available_quantity: int
    reserved_quantity: int
    low_stock_threshold: int
    stock_status: str
    allow_backorders: bool
    barcode: Optional[str] = None
    weight_grams: Optional[int] = None
    last_inventory_update: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class LowStockVariantResponse(VariantResponse):
    product_name: Optional[str] = None
    product_sku: Optional[str] = None


class ProductSummary(BaseModel):
    """Product as shown in list views."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: str
    subcategory: Optional[str] = None
    sku: str
    handle: Optional[str] = None
    base_price: int = Field(..., description="Price in cents")
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    status: str
    visibility: bool
    featured: bool
    primary_image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    variant_count: int
    total_inventory: int
    in_stock: bool
    created_at: datetime
    updated_at: datetime


class ProductResponse(ProductSummary):
    """Full product with its variants."""

    description: Optional[str] = None
    requires_shipping: bool
    taxable: bool
    track_inventory: bool
    weight: Optional[int] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    search_keywords: Optional[str] = None
    image_gallery: List[str] = Field(default_factory=list)
    additional_info: Dict[str, Any] = Field(default_factory=dict)
    variants: List[VariantResponse] = Field(default_factory=list)


class ProductListResponse(BaseModel):
    products: List[ProductSummary]
    total: int
    total_pages: int
    current_page: int


class CategoriesResponse(BaseModel):
    categories: List[str]
    subcategories: Dict[str, List[str]]


class GenerateVariantsRequest(BaseModel):
    sku: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price: Decimal = Field(default=Decimal("0"), ge=0, description="Price in dollars")


class ImageUploadResponse(BaseModel):
    product_id: UUID
    url: str
    image_type: str


# === BULK ===

class BulkRequest(BaseModel):
    product_ids: List[UUID] = Field(..., min_length=1)


class BulkUpdateRequest(BulkRequest):
    update: BulkUpdate


class BulkResultResponse(BaseModel):
    succeeded: List[UUID]
    failed: Dict[str, str]
    total: int


class VariantBulkUpdateRequest(BaseModel):
    updates: List[VariantUpdate] = Field(..., min_length=1)


class VariantBulkUpdateResponse(BaseModel):
    updated: List[UUID]
    missing: List[UUID]


# === COLLECTIONS ===

class CollectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    collection_type: str
    rules: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool
    product_count: int
    created_at: datetime
    updated_at: datetime


class CollectionMembershipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    collection_id: UUID
    product_id: UUID
    display_order: int
    added_at: datetime


class CollectionProductRequest(BaseModel):
    product_id: UUID
