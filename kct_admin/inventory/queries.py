"""
Product queries: listing with filters, detail, categories and delete.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field
from sqlalchemy import Text, asc, cast, desc, or_
from sqlalchemy.orm import Session, selectinload

from ..db.models import Product
from ..exceptions import NotFoundError

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "created_at": Product.created_at,
    "updated_at": Product.updated_at,
    "name": Product.name,
    "base_price": Product.base_price,
    "total_inventory": Product.total_inventory,
    "sku": Product.sku,
}


class ProductFilters(BaseModel):
    """Product list filters and pagination."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    search: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    stock_status: Optional[Literal["in_stock", "out_of_stock"]] = None
    sort_by: Literal[
        "created_at", "updated_at", "name", "base_price", "total_inventory", "sku"
    ] = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


@dataclass
class ProductPage:
    products: List[Product]
    total: int
    total_pages: int
    current_page: int


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def filtered_products_query(session: Session, filters: ProductFilters):
    """Build the filtered (unpaginated, unsorted) product query."""
    query = session.query(Product)

    if filters.search:
        pattern = f"%{filters.search.strip()}%"
        query = query.filter(
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.sku.ilike(pattern),
                cast(Product.tags, Text).ilike(pattern),
            )
        )

    if filters.category:
        query = query.filter(Product.category == filters.category)

    if filters.status:
        query = query.filter(Product.status == filters.status)

    if filters.stock_status == "in_stock":
        query = query.filter(Product.in_stock.is_(True))
    elif filters.stock_status == "out_of_stock":
        query = query.filter(Product.in_stock.is_(False))

    return query


def list_products(session: Session, filters: Optional[ProductFilters] = None) -> ProductPage:
    """List products matching the filters, one page at a time."""
    filters = filters or ProductFilters()
    query = filtered_products_query(session, filters)

    total = query.count()

    order = asc if filters.sort_order == "asc" else desc
    products = (
        query.order_by(order(SORT_COLUMNS[filters.sort_by]))
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
        .all()
    )

    return ProductPage(
        products=products,
        total=total,
        total_pages=page_count(total, filters.limit),
        current_page=filters.page,
    )


def get_product(session: Session, product_id: UUID) -> Product:
    """Fetch a product with its variants (newest first)."""
    product = (
        session.query(Product)
        .options(selectinload(Product.variants))
        .filter(Product.id == product_id)
        .first()
    )
    if product is None:
        raise NotFoundError("Product", product_id)
    return product


@dataclass
class CategoryTree:
    categories: List[str] = field(default_factory=list)
    subcategories: Dict[str, List[str]] = field(default_factory=dict)


def get_categories(session: Session) -> CategoryTree:
    """Distinct categories and the subcategories used under each."""
    rows = session.query(Product.category, Product.subcategory).distinct().all()

    tree: Dict[str, set] = {}
    for category, subcategory in rows:
        if not category:
            continue
        subs = tree.setdefault(category, set())
        if subcategory:
            subs.add(subcategory)

    return CategoryTree(
        categories=sorted(tree),
        subcategories={category: sorted(subs) for category, subs in sorted(tree.items())},
    )


def delete_product(session: Session, product_id: UUID) -> None:
    """Delete a product; its variants are removed first."""
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)

    sku = product.sku
    variant_count = len(product.variants)
    for variant in list(product.variants):
        session.delete(variant)
    session.flush()
    session.expire(product, ["variants"])

    session.delete(product)
    session.commit()

    logger.info(f"Deleted product {sku} and {variant_count} variants")
