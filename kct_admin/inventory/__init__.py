"""
Inventory Package
Products, variants, collections, bulk actions and dashboard statistics.
"""

from .analytics import get_dashboard_stats, get_inventory_trends
from .bulk import BulkUpdate, PriceAdjustment, adjust_price, bulk_activate, bulk_archive, bulk_delete, bulk_update
from .queries import ProductFilters, ProductPage, delete_product, get_categories, get_product, list_products
from .variants import generate_variants, get_low_stock_variants
from .writer import create_product, update_product

__all__ = [
    "get_dashboard_stats",
    "get_inventory_trends",
    "BulkUpdate",
    "PriceAdjustment",
    "adjust_price",
    "bulk_activate",
    "bulk_archive",
    "bulk_delete",
    "bulk_update",
    "ProductFilters",
    "ProductPage",
    "delete_product",
    "get_categories",
    "get_product",
    "list_products",
    "generate_variants",
    "get_low_stock_variants",
    "create_product",
    "update_product",
]
