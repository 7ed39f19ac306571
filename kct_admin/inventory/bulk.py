"""
Bulk product actions: field updates, price adjustment, archive, activate and delete.
Each selected product is written on its own so one failure does not stop the rest.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.models import Product
from ..exceptions import NotFoundError, ValidationFailed
from ..models.money import round_cents
from ..models.product import ProductStatus, normalize_tags
from .queries import delete_product

logger = logging.getLogger(__name__)


class AdjustmentType(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    SET = "set"


class AdjustmentMode(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PriceAdjustment(BaseModel):
    """Percentage or fixed-dollar price change."""

    model_config = ConfigDict(use_enum_values=True)

    type: AdjustmentType
    mode: AdjustmentMode = AdjustmentMode.PERCENTAGE
    value: Decimal = Field(..., ge=0)


class BulkUpdate(BaseModel):
    """Fields to apply to every selected product. Unset fields are left alone."""

    model_config = ConfigDict(use_enum_values=True)

    status: Optional[ProductStatus] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    price_adjustment: Optional[PriceAdjustment] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        """Accept "a, b, c" as well as a list."""
        if v is None:
            return None
        return normalize_tags(v)

    @field_validator("category", mode="before")
    @classmethod
    def blank_category(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def is_empty(self) -> bool:
        return (
            self.status is None
            and self.category is None
            and self.tags is None
            and self.price_adjustment is None
        )


def adjust_price(cents: int, adjustment: PriceAdjustment) -> int:
    """
    Apply a price adjustment to a price in cents.

    Percentages scale the current price, fixed values are dollars. The
    result is rounded half up to whole cents and never negative.
    """
    value = Decimal(adjustment.value)
    price = Decimal(cents or 0)
    adjustment_type = AdjustmentType(adjustment.type)
    percentage = AdjustmentMode(adjustment.mode) == AdjustmentMode.PERCENTAGE

    if adjustment_type == AdjustmentType.SET:
        new_price = value * 100
    elif adjustment_type == AdjustmentType.INCREASE:
        new_price = price * (1 + value / 100) if percentage else price + value * 100
    else:
        new_price = price * (1 - value / 100) if percentage else price - value * 100

    return max(0, round_cents(new_price))


@dataclass
class BulkResult:
    succeeded: List[UUID] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)


def _for_each(
    session: Session,
    product_ids: List[UUID],
    action: Callable[[Product], None],
    label: str,
) -> BulkResult:
    result = BulkResult()

    for product_id in product_ids:
        product = session.get(Product, product_id)
        if product is None:
            result.failed[str(product_id)] = "Product not found"
            continue

        try:
            action(product)
            session.commit()
            result.succeeded.append(product_id)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Bulk {label} failed for {product_id}: {e}")
            result.failed[str(product_id)] = str(e)

    logger.info(
        f"Bulk {label}: {len(result.succeeded)} succeeded, {len(result.failed)} failed"
    )
    return result


def bulk_update(session: Session, product_ids: List[UUID], update: BulkUpdate) -> BulkResult:
    """
    Apply the selected fields to each product.

    Raises:
        ValidationFailed: if no field was selected
    """
    if update.is_empty():
        raise ValidationFailed("Please select at least one field to update")

    def apply(product: Product) -> None:
        if update.status is not None:
            product.status = ProductStatus(update.status).value
        if update.category is not None:
            product.category = update.category
        if update.tags is not None:
            product.tags = list(update.tags)
        if update.price_adjustment is not None:
            product.base_price = adjust_price(product.base_price, update.price_adjustment)

    return _for_each(session, product_ids, apply, "update")


def _set_status(status: ProductStatus) -> Callable[[Product], None]:
    def apply(product: Product) -> None:
        product.status = status.value
    return apply


def bulk_archive(session: Session, product_ids: List[UUID]) -> BulkResult:
    return _for_each(session, product_ids, _set_status(ProductStatus.ARCHIVED), "archive")


def bulk_activate(session: Session, product_ids: List[UUID]) -> BulkResult:
    return _for_each(session, product_ids, _set_status(ProductStatus.ACTIVE), "activate")


def bulk_delete(session: Session, product_ids: List[UUID]) -> BulkResult:
    """Delete each product (and its variants)."""
    result = BulkResult()

    for product_id in product_ids:
        try:
            delete_product(session, product_id)
            result.succeeded.append(product_id)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Bulk delete failed for {product_id}: {e}")
            result.failed[str(product_id)] = str(e)
        except NotFoundError as e:
            result.failed[str(product_id)] = e.message

    logger.info(f"Bulk delete: {len(result.succeeded)} succeeded, {len(result.failed)} failed")
    return result
