"""
Database ORM Models
SQLAlchemy ORM models for the hosted Postgres tables and views.
"""

from .models import (
    Base,
    CollectionProduct,
    EmailLog,
    Order,
    OrderDashboardRow,
    OrderItem,
    Product,
    ProductVariant,
    SmartCollection,
    TaskExecution,
    VendorImportDecision,
    VendorInboxItem,
    VendorInboxVariant,
    VendorVariantImportDecision,
    utcnow,
)

__all__ = [
    "Base",
    "CollectionProduct",
    "EmailLog",
    "Order",
    "OrderDashboardRow",
    "OrderItem",
    "Product",
    "ProductVariant",
    "SmartCollection",
    "TaskExecution",
    "VendorImportDecision",
    "VendorInboxItem",
    "VendorInboxVariant",
    "VendorVariantImportDecision",
    "utcnow",
]
