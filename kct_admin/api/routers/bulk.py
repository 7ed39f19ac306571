"""
Bulk Product Endpoints
Apply one change to many products. Each product is committed on its own,
so a failure is reported per id and never aborts the batch.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...inventory import bulk_activate, bulk_archive, bulk_delete, bulk_update
from ...inventory.bulk import BulkResult
from ..dependencies import get_db, verify_api_key
from ..schemas.products import BulkRequest, BulkResultResponse, BulkUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/products/bulk", tags=["bulk"], dependencies=[Depends(verify_api_key)]
)


def _response(result: BulkResult) -> BulkResultResponse:
    return BulkResultResponse(succeeded=result.succeeded, failed=result.failed, total=result.total)


@router.post("/update", response_model=BulkResultResponse)
def update(request: BulkUpdateRequest, db: Session = Depends(get_db)) -> BulkResultResponse:
    return _response(bulk_update(db, request.product_ids, request.update))


@router.post("/archive", response_model=BulkResultResponse)
def archive(request: BulkRequest, db: Session = Depends(get_db)) -> BulkResultResponse:
    return _response(bulk_archive(db, request.product_ids))


@router.post("/activate", response_model=BulkResultResponse)
def activate(request: BulkRequest, db: Session = Depends(get_db)) -> BulkResultResponse:
    return _response(bulk_activate(db, request.product_ids))


@router.post("/delete", response_model=BulkResultResponse)
def delete(request: BulkRequest, db: Session = Depends(get_db)) -> BulkResultResponse:
    return _response(bulk_delete(db, request.product_ids))
