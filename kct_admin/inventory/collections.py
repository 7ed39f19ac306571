"""
Smart collections: CRUD, ordered membership and popularity.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..db.models import CollectionProduct, Product, SmartCollection
from ..exceptions import NotFoundError

logger = logging.getLogger(__name__)


class CollectionType(str, Enum):
    DYNAMIC = "dynamic"
    MANUAL = "manual"
    AI_POWERED = "ai_powered"


class CollectionInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    collection_type: CollectionType = CollectionType.MANUAL
    rules: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True


class CollectionUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    collection_type: Optional[CollectionType] = None
    rules: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None

    @field_validator("name", "collection_type", "rules", "is_active")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


def _get(session: Session, collection_id: UUID) -> SmartCollection:
    collection = session.get(SmartCollection, collection_id)
    if collection is None:
        raise NotFoundError("Collection", collection_id)
    return collection


def _refresh_count(session: Session, collection: SmartCollection) -> None:
    session.flush()
    session.expire(collection, ["memberships"])
    collection.product_count = (
        session.query(func.count(CollectionProduct.id))
        .filter(CollectionProduct.collection_id == collection.id)
        .scalar()
    )


def list_collections(session: Session, active_only: bool = False) -> List[SmartCollection]:
    query = session.query(SmartCollection)
    if active_only:
        query = query.filter(SmartCollection.is_active.is_(True))
    return query.order_by(SmartCollection.created_at.desc()).all()


def get_collection(session: Session, collection_id: UUID) -> SmartCollection:
    return _get(session, collection_id)


def collection_products(session: Session, collection_id: UUID) -> List[Product]:
    """Products in display order."""
    _get(session, collection_id)
    return (
        session.query(Product)
        .join(CollectionProduct, CollectionProduct.product_id == Product.id)
        .filter(CollectionProduct.collection_id == collection_id)
        .order_by(CollectionProduct.display_order.asc())
        .all()
    )


def create_collection(session: Session, data: CollectionInput) -> SmartCollection:
    collection = SmartCollection(
        name=data.name,
        description=data.description,
        collection_type=CollectionType(data.collection_type).value,
        rules=dict(data.rules),
        is_active=data.is_active,
        product_count=0,
    )
    session.add(collection)
    session.commit()
    session.refresh(collection)
    logger.info(f"Created collection {collection.name}", extra={"collection_id": str(collection.id)})
    return collection


def update_collection(session: Session, collection_id: UUID, data: CollectionUpdate) -> SmartCollection:
    collection = _get(session, collection_id)
    changes = data.model_dump(exclude_unset=True)
    if "collection_type" in changes and changes["collection_type"] is not None:
        changes["collection_type"] = CollectionType(changes["collection_type"]).value
    for key, value in changes.items():
        setattr(collection, key, value)
    session.commit()
    session.refresh(collection)
    return collection


def delete_collection(session: Session, collection_id: UUID) -> None:
    """Delete a collection and its membership rows."""
    collection = _get(session, collection_id)
    session.delete(collection)
    session.commit()
    logger.info(f"Deleted collection {collection_id}")


def add_product_to_collection(
    session: Session, collection_id: UUID, product_id: UUID
) -> CollectionProduct:
    """
    Append a product to the end of a collection.

    Adding a product that is already a member returns the existing row.
    """
    collection = _get(session, collection_id)
    if session.get(Product, product_id) is None:
        raise NotFoundError("Product", product_id)

    existing = (
        session.query(CollectionProduct)
        .filter(
            CollectionProduct.collection_id == collection_id,
            CollectionProduct.product_id == product_id,
        )
        .first()
    )
    if existing is not None:
        return existing

    max_order = (
        session.query(func.max(CollectionProduct.display_order))
        .filter(CollectionProduct.collection_id == collection_id)
        .scalar()
    )
    membership = CollectionProduct(
        collection=collection,
        product_id=product_id,
        display_order=0 if max_order is None else max_order + 1,
    )
    session.add(membership)
    _refresh_count(session, collection)
    session.commit()
    session.refresh(membership)
    return membership


def remove_product_from_collection(session: Session, collection_id: UUID, product_id: UUID) -> bool:
    """Remove a product; returns whether it was a member."""
    collection = _get(session, collection_id)
    removed = (
        session.query(CollectionProduct)
        .filter(
            CollectionProduct.collection_id == collection_id,
            CollectionProduct.product_id == product_id,
        )
        .delete(synchronize_session=False)
    )
    _refresh_count(session, collection)
    session.commit()
    return bool(removed)


def get_popular_collections(session: Session, limit: int = 5) -> List[SmartCollection]:
    return (
        session.query(SmartCollection)
        .filter(SmartCollection.is_active.is_(True))
        .order_by(SmartCollection.product_count.desc())
        .limit(limit)
        .all()
    )
