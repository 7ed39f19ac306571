"""
Domain Models Package
Pydantic models, enums and value helpers shared by services and the API.
"""

from .money import cents_to_dollars, dollars_to_cents, format_cents, parse_money
from .order import (
    OrderPriority,
    OrderStats,
    OrderStatus,
    PackageDimensions,
    ShippingAddress,
    ShippingLabel,
    ShippingRate,
    TrackingInfo,
)
from .product import (
    ProductForm,
    ProductStatus,
    StockStatus,
    VariantInput,
    VariantUpdate,
    compute_stock_status,
)
from .vendor import ImportDecision, check_transition

__all__ = [
    "cents_to_dollars",
    "dollars_to_cents",
    "format_cents",
    "parse_money",
    "OrderPriority",
    "OrderStats",
    "OrderStatus",
    "PackageDimensions",
    "ShippingAddress",
    "ShippingLabel",
    "ShippingRate",
    "TrackingInfo",
    "ProductForm",
    "ProductStatus",
    "StockStatus",
    "VariantInput",
    "VariantUpdate",
    "compute_stock_status",
    "ImportDecision",
    "check_transition",
]
