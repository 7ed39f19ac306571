"""
Variant Endpoints
Per-variant stock and price management.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...config.settings import Settings, get_settings
from ...inventory.variants import (
    bulk_update_variants,
    create_variant,
    delete_variant,
    get_low_stock_variants,
    list_variants,
    update_variant,
)
from ...models.product import VariantInput, VariantUpdate
from ..dependencies import get_db, verify_api_key
from ..schemas.products import (
    LowStockVariantResponse,
    VariantBulkUpdateRequest,
    VariantBulkUpdateResponse,
    VariantResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["variants"], dependencies=[Depends(verify_api_key)])


@router.get("/variants/low-stock", response_model=List[LowStockVariantResponse])
def low_stock(
    threshold: Optional[int] = Query(None, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=500),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> List[LowStockVariantResponse]:
    """Variants at or below the threshold (LOW_STOCK_THRESHOLD by default)."""
    if threshold is None:
        threshold = settings.low_stock_threshold

    variants = get_low_stock_variants(db, threshold=threshold, limit=limit)
    return [
        LowStockVariantResponse(
            **VariantResponse.model_validate(v).model_dump(),
            product_name=v.product.name if v.product else None,
            product_sku=v.product.sku if v.product else None,
        )
        for v in variants
    ]


@router.post("/variants/bulk-update", response_model=VariantBulkUpdateResponse)
def bulk_update(
    request: VariantBulkUpdateRequest, db: Session = Depends(get_db)
) -> VariantBulkUpdateResponse:
    result = bulk_update_variants(db, request.updates)
    return VariantBulkUpdateResponse(updated=result.updated, missing=result.missing)


@router.get("/products/{product_id}/variants", response_model=List[VariantResponse])
def get_variants(product_id: UUID, db: Session = Depends(get_db)) -> List[VariantResponse]:
    return [VariantResponse.model_validate(v) for v in list_variants(db, product_id)]


@router.post(
    "/products/{product_id}/variants",
    response_model=VariantResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_variant(
    product_id: UUID, data: VariantInput, db: Session = Depends(get_db)
) -> VariantResponse:
    return VariantResponse.model_validate(create_variant(db, product_id, data))


@router.patch("/variants/{variant_id}", response_model=VariantResponse)
def patch_variant(
    variant_id: UUID, update: VariantUpdate, db: Session = Depends(get_db)
) -> VariantResponse:
    return VariantResponse.model_validate(update_variant(db, variant_id, update))


@router.delete("/variants/{variant_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_variant(variant_id: UUID, db: Session = Depends(get_db)) -> None:
    delete_variant(db, variant_id)
