"""
Variant operations: size/color generation, CRUD, bulk updates and low stock.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from ..db.models import Product, ProductVariant
from ..exceptions import NotFoundError, ValidationFailed
from ..models.product import DEFAULT_LOW_STOCK_THRESHOLD, VariantInput, VariantUpdate
from .writer import apply_inventory, build_variant, refresh_product_totals

logger = logging.getLogger(__name__)

# Size grids used by "auto-generate variants"
SHIRT_NECK_SIZES = ["14.5", "15", "15.5", "16", "16.5", "17", "17.5", "18"]
SHIRT_SLEEVE_LENGTHS = ["32-33", "34-35", "36-37"]
SHIRT_COLORS = ["White", "Blue", "Light Blue"]

SUIT_SIZES = [
    "34S", "36S", "38S", "40S", "42S",
    "34R", "36R", "38R", "40R", "42R", "44R", "46R", "48R",
    "34L", "36L", "38L", "40L", "42L", "44L", "46L", "48L", "50L", "52L", "54L",
]
SUIT_COLORS = ["Navy", "Charcoal", "Black"]


def generate_variants(sku: str, category: str, price_cents: int = 0) -> List[VariantInput]:
    """
    Expand the size/color grid for a category.

    Shirts get neck × sleeve × color, suits get jacket size × color. Any
    other category has no grid and returns an empty list.
    """
    category = (category or "").lower()
    variants: List[VariantInput] = []

    if "shirt" in category:
        for color in SHIRT_COLORS:
            for neck in SHIRT_NECK_SIZES:
                for sleeve in SHIRT_SLEEVE_LENGTHS:
                    variants.append(
                        VariantInput(
                            variant_type="shirt_classic",
                            color=color,
                            size=f"{neck}/{sleeve}",
                            sku=f"{sku}-{color.upper()[:2]}-{neck.replace('.', '')}-{sleeve.replace('-', '')}",
                            price_cents=price_cents,
                            compare_at_price_cents=0,
                            inventory_quantity=10,
                            low_stock_threshold=2,
                        )
                    )
    elif "suit" in category:
        for color in SUIT_COLORS:
            for size in SUIT_SIZES:
                variants.append(
                    VariantInput(
                        variant_type="suit_formal",
                        color=color,
                        size=size,
                        sku=f"{sku}-{color.upper()[:2]}-{size}",
                        price_cents=price_cents,
                        compare_at_price_cents=0,
                        inventory_quantity=5,
                        low_stock_threshold=1,
                    )
                )

    return variants


def list_variants(session: Session, product_id: UUID) -> List[ProductVariant]:
    return (
        session.query(ProductVariant)
        .filter(ProductVariant.product_id == product_id)
        .order_by(ProductVariant.created_at.desc())
        .all()
    )


def create_variant(session: Session, product_id: UUID, data: VariantInput) -> ProductVariant:
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)

    variant = build_variant(session, product, data)
    refresh_product_totals(session, product)
    session.commit()
    session.refresh(variant)
    return variant


def _apply_update(variant: ProductVariant, update: VariantUpdate) -> None:
    changes = update.model_dump(exclude_unset=True, exclude={"id", "inventory_quantity"})
    for key, value in changes.items():
        setattr(variant, key, value)

    fields = update.model_fields_set
    if {"inventory_quantity", "reserved_quantity", "low_stock_threshold"} & fields:
        quantity = (
            update.inventory_quantity
            if update.inventory_quantity is not None
            else variant.inventory_quantity
        )
        apply_inventory(variant, quantity)


def update_variant(session: Session, variant_id: UUID, update: VariantUpdate) -> ProductVariant:
    """Apply a partial update; stock fields are recomputed when quantities change."""
    variant = session.get(ProductVariant, variant_id)
    if variant is None:
        raise NotFoundError("Variant", variant_id)

    _apply_update(variant, update)
    refresh_product_totals(session, variant.product)
    session.commit()
    session.refresh(variant)
    return variant


def delete_variant(session: Session, variant_id: UUID) -> None:
    variant = session.get(ProductVariant, variant_id)
    if variant is None:
        raise NotFoundError("Variant", variant_id)

    product = variant.product
    session.delete(variant)
    refresh_product_totals(session, product)
    session.commit()


@dataclass
class VariantBulkResult:
    updated: List[UUID] = field(default_factory=list)
    missing: List[UUID] = field(default_factory=list)


def bulk_update_variants(session: Session, updates: List[VariantUpdate]) -> VariantBulkResult:
    """Apply one partial update per variant id. Unknown ids are reported, not fatal."""
    result = VariantBulkResult()
    touched = {}

    for update in updates:
        if update.id is None:
            raise ValidationFailed("Every variant update needs an id")

        variant = session.get(ProductVariant, update.id)
        if variant is None:
            result.missing.append(update.id)
            continue

        _apply_update(variant, update)
        touched[variant.product_id] = variant.product
        result.updated.append(update.id)

    for product in touched.values():
        refresh_product_totals(session, product)
    session.commit()

    logger.info(
        f"Bulk variant update: {len(result.updated)} updated, {len(result.missing)} missing"
    )
    return result


def get_low_stock_variants(
    session: Session, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD, limit: Optional[int] = None
) -> List[ProductVariant]:
    """Variants with available quantity at or below the threshold, lowest first."""
    query = (
        session.query(ProductVariant)
        .options(joinedload(ProductVariant.product))
        .filter(ProductVariant.available_quantity <= threshold)
        .order_by(ProductVariant.available_quantity.asc())
    )
    if limit:
        query = query.limit(limit)
    return query.all()

