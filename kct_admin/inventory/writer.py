"""
Product graph writer.
Creates and edits a product together with its variants, keeping the derived
totals on the product in step with the variant rows.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db.models import Product, ProductVariant, utcnow
from ..exceptions import NotFoundError, ValidationFailed
from ..models.product import ProductForm, VariantInput, compute_stock_status

logger = logging.getLogger(__name__)


def apply_inventory(variant: ProductVariant, quantity: int, now: Optional[datetime] = None) -> None:
    """Set on-hand quantity and recompute available quantity and stock status."""
    variant.inventory_quantity = quantity
    variant.available_quantity = max(0, quantity - (variant.reserved_quantity or 0))
    variant.stock_status = compute_stock_status(
        quantity, variant.low_stock_threshold if variant.low_stock_threshold is not None else 5
    ).value
    variant.last_inventory_update = now or utcnow()


def build_variant(
    session: Session, product: Product, data: VariantInput, now: Optional[datetime] = None
) -> ProductVariant:
    """Create a variant row for the product and add it to the session."""
    variant = ProductVariant(
        product=product,
        variant_type=data.variant_type,
        color=data.color,
        size=data.size,
        sku=data.sku,
        price_cents=data.price_cents,
        compare_at_price_cents=data.compare_at_price_cents,
        low_stock_threshold=data.low_stock_threshold,
        reserved_quantity=0,
        allow_backorders=data.allow_backorders,
        barcode=data.barcode,
        weight_grams=data.weight_grams,
    )
    apply_inventory(variant, data.inventory_quantity, now)
    session.add(variant)
    return variant


def refresh_product_totals(session: Session, product: Product) -> None:
    """Recompute variant_count, total_inventory and in_stock from the variant rows."""
    session.flush()
    session.expire(product, ["variants"])
    variants = product.variants
    product.variant_count = len(variants)
    product.total_inventory = sum(v.inventory_quantity or 0 for v in variants)
    product.in_stock = any((v.inventory_quantity or 0) > 0 for v in variants)


def _commit(session: Session, sku: str) -> None:
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Integrity error writing product {sku}: {e.orig}")
        raise ValidationFailed(f"SKU already exists: {sku}")


def create_product(session: Session, form: ProductForm) -> Product:
    """
    Create a product and its variants.

    The product row is written first; variants follow with
    available_quantity equal to their on-hand quantity.

    Raises:
        ValidationFailed: if required fields are missing or the SKU is taken
    """
    errors = form.missing_fields()
    if errors:
        raise ValidationFailed(errors)

    product = Product(**form.product_fields())
    session.add(product)

    now = utcnow()
    for data in form.variants:
        build_variant(session, product, data, now)

    _commit(session, form.sku)
    session.refresh(product)

    logger.info(
        f"Created product {product.sku}",
        extra={"product_id": str(product.id), "variants": product.variant_count},
    )
    return product


def update_product(session: Session, product_id: UUID, form: ProductForm) -> Product:
    """
    Update a product and reconcile its variants.

    Variants missing from the form are deleted, variants carrying an id are
    updated in place and variants without an id are created.
    """
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)

    errors = form.missing_fields()
    if errors:
        raise ValidationFailed(errors)

    existing = {variant.id: variant for variant in product.variants}
    submitted_ids = {v.id for v in form.variants if v.id is not None}

    foreign = submitted_ids - set(existing)
    if foreign:
        raise ValidationFailed(
            [f"Variant {variant_id} does not belong to this product"
             for variant_id in sorted(map(str, foreign))]
        )

    for key, value in form.product_fields().items():
        setattr(product, key, value)

    removed = 0
    for variant_id, variant in existing.items():
        if variant_id not in submitted_ids:
            product.variants.remove(variant)
            removed += 1

    now = utcnow()
    created = 0
    for data in form.variants:
        if data.id is None:
            build_variant(session, product, data, now)
            created += 1
            continue

        variant = existing[data.id]
        variant.variant_type = data.variant_type
        variant.color = data.color
        variant.size = data.size
        variant.sku = data.sku
        variant.price_cents = data.price_cents
        variant.compare_at_price_cents = data.compare_at_price_cents
        variant.low_stock_threshold = data.low_stock_threshold
        variant.allow_backorders = data.allow_backorders
        variant.barcode = data.barcode
        variant.weight_grams = data.weight_grams
        apply_inventory(variant, data.inventory_quantity, now)

    _commit(session, form.sku)
    session.refresh(product)

    logger.info(
        f"Updated product {product.sku}",
        extra={"created": created, "removed": removed, "variants": product.variant_count},
    )
    return product
