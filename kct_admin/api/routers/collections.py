"""
Collection Endpoints
Curated and rule-based product collections.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...inventory.collections import (
    CollectionInput,
    CollectionUpdate,
    add_product_to_collection,
    collection_products,
    create_collection,
    delete_collection,
    get_collection,
    get_popular_collections,
    list_collections,
    remove_product_from_collection,
    update_collection,
)
from ..dependencies import get_db, verify_api_key
from ..errors import APIError
from ..schemas.products import (
    CollectionMembershipResponse,
    CollectionProductRequest,
    CollectionResponse,
    ProductSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/collections", tags=["collections"], dependencies=[Depends(verify_api_key)]
)


@router.get("", response_model=List[CollectionResponse])
def get_collections(
    active_only: bool = False, db: Session = Depends(get_db)
) -> List[CollectionResponse]:
    return [CollectionResponse.model_validate(c) for c in list_collections(db, active_only)]


@router.get("/popular", response_model=List[CollectionResponse])
def popular(
    limit: int = Query(5, ge=1, le=50), db: Session = Depends(get_db)
) -> List[CollectionResponse]:
    return [CollectionResponse.model_validate(c) for c in get_popular_collections(db, limit)]


@router.post("", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
def create(data: CollectionInput, db: Session = Depends(get_db)) -> CollectionResponse:
    return CollectionResponse.model_validate(create_collection(db, data))


@router.get("/{collection_id}", response_model=CollectionResponse)
def get_one(collection_id: UUID, db: Session = Depends(get_db)) -> CollectionResponse:
    return CollectionResponse.model_validate(get_collection(db, collection_id))


@router.patch("/{collection_id}", response_model=CollectionResponse)
def update(
    collection_id: UUID, data: CollectionUpdate, db: Session = Depends(get_db)
) -> CollectionResponse:
    return CollectionResponse.model_validate(update_collection(db, collection_id, data))


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(collection_id: UUID, db: Session = Depends(get_db)) -> None:
    delete_collection(db, collection_id)


@router.get("/{collection_id}/products", response_model=List[ProductSummary])
def products(collection_id: UUID, db: Session = Depends(get_db)) -> List[ProductSummary]:
    return [ProductSummary.model_validate(p) for p in collection_products(db, collection_id)]


@router.post(
    "/{collection_id}/products",
    response_model=CollectionMembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_product(
    collection_id: UUID, request: CollectionProductRequest, db: Session = Depends(get_db)
) -> CollectionMembershipResponse:
    membership = add_product_to_collection(db, collection_id, request.product_id)
    return CollectionMembershipResponse.model_validate(membership)


@router.delete("/{collection_id}/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_product(collection_id: UUID, product_id: UUID, db: Session = Depends(get_db)) -> None:
    if not remove_product_from_collection(db, collection_id, product_id):
        raise APIError("Product is not in this collection", status_code=status.HTTP_404_NOT_FOUND)
