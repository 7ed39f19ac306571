"""
Product and variant models for the create/edit wizard and the API.
Handles required-field checks, price cleaning, tag normalisation and stock status.
"""

import re
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .money import dollars_to_cents, parse_money

DEFAULT_VENDOR = "KCT Menswear"
DEFAULT_PRODUCT_TYPE = "Formal Accessories"
DEFAULT_LOW_STOCK_THRESHOLD = 5


class ProductStatus(str, Enum):
    """Product publication status."""

    ACTIVE = "active"
    DRAFT = "draft"
    ARCHIVED = "archived"


class StockStatus(str, Enum):
    """Variant stock status, derived at write time."""

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    BACKORDER = "backorder"


def compute_stock_status(quantity: int, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> StockStatus:
    """
    Derive stock status from on-hand quantity.

    Quantity above the threshold is in stock; any remaining quantity at or
    below it is low stock.
    """
    if quantity > threshold:
        return StockStatus.IN_STOCK
    if quantity > 0:
        return StockStatus.LOW_STOCK
    return StockStatus.OUT_OF_STOCK


def normalize_tags(tags: Any) -> List[str]:
    """Split, trim and de-duplicate tags, keeping first occurrence order."""
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    result: List[str] = []
    for tag in tags:
        tag = str(tag).strip()
        if tag and tag not in result:
            result.append(tag)
    return result


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower())
    return slug.strip("-")


class VariantInput(BaseModel):
    """Variant as submitted by the wizard or the variants API."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    id: Optional[UUID] = None
    variant_type: str = "standard"
    color: Optional[str] = None
    size: Optional[str] = None
    sku: str = Field(..., min_length=1)
    price_cents: int = Field(default=0, ge=0)
    compare_at_price_cents: Optional[int] = Field(default=None, ge=0)
    inventory_quantity: int = Field(default=0, ge=0)
    low_stock_threshold: int = Field(default=DEFAULT_LOW_STOCK_THRESHOLD, ge=0)
    allow_backorders: bool = False
    barcode: Optional[str] = None
    weight_grams: Optional[int] = Field(default=None, ge=0)

    @property
    def stock_status(self) -> StockStatus:
        return compute_stock_status(self.inventory_quantity, self.low_stock_threshold)


class VariantUpdate(BaseModel):
    """Partial variant update. Only fields that are set are written."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[UUID] = None
    color: Optional[str] = None
    size: Optional[str] = None
    sku: Optional[str] = None
    price_cents: Optional[int] = Field(default=None, ge=0)
    compare_at_price_cents: Optional[int] = Field(default=None, ge=0)
    inventory_quantity: Optional[int] = Field(default=None, ge=0)
    reserved_quantity: Optional[int] = Field(default=None, ge=0)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)
    allow_backorders: Optional[bool] = None
    barcode: Optional[str] = None
    weight_grams: Optional[int] = Field(default=None, ge=0)

    @field_validator(
        "sku", "price_cents", "inventory_quantity", "reserved_quantity",
        "low_stock_threshold", "allow_backorders",
    )
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ProductForm(BaseModel):
    """
    Product wizard payload: the product plus its variants.

    Required fields are checked by missing_fields() so every problem can
    be reported at once rather than one pydantic error at a time.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        use_enum_values=True,
    )

    # === BASIC INFO ===
    name: str = ""
    description: Optional[str] = None
    category: str = ""
    subcategory: Optional[str] = None
    sku: str = ""
    handle: Optional[str] = None
    price: Decimal = Field(default=Decimal("0"), description="Base price in dollars")
    vendor: str = DEFAULT_VENDOR
    product_type: str = DEFAULT_PRODUCT_TYPE
    status: ProductStatus = ProductStatus.DRAFT

    # === FLAGS ===
    visibility: bool = True
    featured: bool = False
    requires_shipping: bool = True
    taxable: bool = True
    track_inventory: bool = True
    weight: Optional[int] = Field(default=None, ge=0)

    # === SEO ===
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    search_keywords: Optional[str] = None

    # === MEDIA ===
    primary_image: Optional[str] = None
    image_gallery: List[str] = Field(default_factory=list)

    tags: List[str] = Field(default_factory=list)
    additional_info: Dict[str, Any] = Field(default_factory=dict)
    variants: List[VariantInput] = Field(default_factory=list)

    @field_validator("price", mode="before")
    @classmethod
    def clean_price(cls, v):
        """Accept dollar strings like "$1,299.00"."""
        if v is None or v == "":
            return Decimal("0")
        amount = parse_money(v)
        if amount < 0:
            raise ValueError("Price cannot be negative")
        return amount

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v):
        return normalize_tags(v)

    @field_validator("vendor", "product_type", mode="before")
    @classmethod
    def default_when_blank(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_VENDOR if info.field_name == "vendor" else DEFAULT_PRODUCT_TYPE
        return v

    # === METHODS ===

    def missing_fields(self) -> List[str]:
        """Return a message for every required field left blank."""
        errors = []
        if not self.name:
            errors.append("Product name is required")
        if not self.category:
            errors.append("Category is required")
        if not self.sku:
            errors.append("SKU is required")
        return errors

    @property
    def base_price_cents(self) -> int:
        return dollars_to_cents(self.price)

    @property
    def total_inventory(self) -> int:
        return sum(v.inventory_quantity for v in self.variants)

    @property
    def in_stock(self) -> bool:
        return any(v.inventory_quantity > 0 for v in self.variants)

    def add_tag(self, tag: str) -> bool:
        """Add a tag if it is non-blank and new. Returns whether it was added."""
        tag = (tag or "").strip()
        if not tag or tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]

    def default_variant(self) -> VariantInput:
        """The variant appended by "Add variant": numbered SKU, base price, no stock."""
        return VariantInput(
            sku=f"{self.sku}-{len(self.variants) + 1}",
            price_cents=self.base_price_cents,
            inventory_quantity=0,
            low_stock_threshold=DEFAULT_LOW_STOCK_THRESHOLD,
        )

    def product_fields(self) -> Dict[str, Any]:
        """Column values for the products row (derived totals included)."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "subcategory": self.subcategory,
            "sku": self.sku,
            "handle": self.handle or slugify(self.name),
            "base_price": self.base_price_cents,
            "vendor": self.vendor,
            "product_type": self.product_type,
            "status": ProductStatus(self.status).value,
            "visibility": self.visibility,
            "featured": self.featured,
            "requires_shipping": self.requires_shipping,
            "taxable": self.taxable,
            "track_inventory": self.track_inventory,
            "weight": self.weight,
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
            "seo_title": self.seo_title,
            "seo_description": self.seo_description,
            "search_keywords": self.search_keywords,
            "primary_image": self.primary_image,
            "image_gallery": list(self.image_gallery),
            "tags": list(self.tags),
            "additional_info": dict(self.additional_info),
            "variant_count": len(self.variants),
            "total_inventory": self.total_inventory,
            "in_stock": self.in_stock,
        }
