"""
Vendor Inbox Endpoints

Endpoints:
GET  /api/v1/vendor/inbox                     - Vendor products awaiting review
GET  /api/v1/vendor/inbox/count               - Products without a decision
GET  /api/v1/vendor/inbox/variants            - Vendor variants
POST /api/v1/vendor/inbox/decisions           - Stage or skip products
POST /api/v1/vendor/inbox/variants/decisions  - Stage or skip variants
POST /api/v1/vendor/import                    - Queue a product import
POST /api/v1/vendor/import/variants           - Queue a variant import
POST /api/v1/vendor/inventory/refresh         - Queue an inventory refresh
GET  /api/v1/vendor/sync-status               - Vendor sync status
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...functions import EdgeFunctionClient
from ...models.vendor import ImportDecision
from ...tasks.progress import record_task
from ...vendor import (
    InboxFilters,
    VariantInboxFilters,
    get_sync_status,
    inbox_count,
    list_inbox,
    list_inbox_variants,
    set_decisions,
    set_variant_decisions,
)
from ..dependencies import get_db, get_function_client, verify_api_key
from ..errors import APIError
from ..schemas.tasks import TaskDispatchResponse
from ..schemas.vendor import (
    DecisionRequest,
    DecisionResponse,
    ImportRequest,
    InboxCountResponse,
    InboxItemResponse,
    InboxPageResponse,
    InboxVariantPageResponse,
    InboxVariantResponse,
    InventoryRefreshRequest,
    SyncStatusResponse,
    VariantImportRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/vendor", tags=["vendor"], dependencies=[Depends(verify_api_key)]
)


@router.get("/inbox", response_model=InboxPageResponse)
def get_inbox(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    decision: Optional[ImportDecision] = None,
    db: Session = Depends(get_db),
) -> InboxPageResponse:
    filters = InboxFilters(
        page=page, limit=limit, search=search, status=status_filter, decision=decision
    )
    result = list_inbox(db, filters)
    return InboxPageResponse(
        items=[InboxItemResponse.model_validate(item) for item in result.items],
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.current_page,
    )


@router.get("/inbox/count", response_model=InboxCountResponse)
def get_inbox_count(db: Session = Depends(get_db)) -> InboxCountResponse:
    return InboxCountResponse(inbox_count=inbox_count(db))


@router.get("/inbox/variants", response_model=InboxVariantPageResponse)
def get_inbox_variants(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    search: Optional[str] = None,
    decision: Optional[ImportDecision] = None,
    color: Optional[str] = None,
    size: Optional[str] = None,
    db: Session = Depends(get_db),
) -> InboxVariantPageResponse:
    filters = VariantInboxFilters(
        page=page, limit=limit, search=search, decision=decision, color=color, size=size
    )
    result = list_inbox_variants(db, filters)
    return InboxVariantPageResponse(
        items=[InboxVariantResponse.model_validate(item) for item in result.items],
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.current_page,
    )


@router.post("/inbox/decisions", response_model=DecisionResponse)
def decide_products(request: DecisionRequest, db: Session = Depends(get_db)) -> DecisionResponse:
    """Stage or skip products. Already imported products are reported as rejected."""
    result = set_decisions(db, request.ids, request.decision)
    return DecisionResponse(
        updated=result.updated, unchanged=result.unchanged, rejected=result.rejected
    )


@router.post("/inbox/variants/decisions", response_model=DecisionResponse)
def decide_variants(request: DecisionRequest, db: Session = Depends(get_db)) -> DecisionResponse:
    result = set_variant_decisions(db, request.ids, request.decision)
    return DecisionResponse(
        updated=result.updated, unchanged=result.unchanged, rejected=result.rejected
    )


@router.post("/import", response_model=TaskDispatchResponse, status_code=status.HTTP_202_ACCEPTED)
def import_products(request: ImportRequest, db: Session = Depends(get_db)) -> TaskDispatchResponse:
    """
    Queue an import of the selected vendor products.

    Overrides are keyed by product id; JSON object keys travel as strings.
    """
    try:
        from ...tasks.vendor import import_vendor_products

        result = import_vendor_products.delay(
            request.product_ids,
            overrides={str(key): value for key, value in request.overrides.items()},
        )
    except Exception as e:
        logger.error(f"Failed to queue vendor import: {e}", exc_info=True)
        raise APIError(f"Failed to queue vendor import: {e}")

    record_task(db, result.id, "tasks.import_vendor_products",
                progress_total=len(request.product_ids))
    logger.info(f"Vendor import queued: task_id={result.id}, products={len(request.product_ids)}")

    return TaskDispatchResponse(
        task_id=result.id,
        message=f"Import of {len(request.product_ids)} vendor products queued",
    )


@router.post(
    "/import/variants", response_model=TaskDispatchResponse, status_code=status.HTTP_202_ACCEPTED
)
def import_variants(
    request: VariantImportRequest, db: Session = Depends(get_db)
) -> TaskDispatchResponse:
    try:
        from ...tasks.vendor import import_vendor_variants

        result = import_vendor_variants.delay(request.variant_ids)
    except Exception as e:
        logger.error(f"Failed to queue variant import: {e}", exc_info=True)
        raise APIError(f"Failed to queue variant import: {e}")

    record_task(db, result.id, "tasks.import_vendor_variants",
                progress_total=len(request.variant_ids))
    logger.info(f"Variant import queued: task_id={result.id}, variants={len(request.variant_ids)}")

    return TaskDispatchResponse(
        task_id=result.id,
        message=f"Import of {len(request.variant_ids)} vendor variants queued",
    )


@router.post(
    "/inventory/refresh",
    response_model=TaskDispatchResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def refresh(
    request: InventoryRefreshRequest, db: Session = Depends(get_db)
) -> TaskDispatchResponse:
    try:
        from ...tasks.vendor import refresh_vendor_inventory

        result = refresh_vendor_inventory.delay(request.product_ids)
    except Exception as e:
        logger.error(f"Failed to queue inventory refresh: {e}", exc_info=True)
        raise APIError(f"Failed to queue inventory refresh: {e}")

    scope = f"{len(request.product_ids)} products" if request.product_ids else "all products"
    record_task(db, result.id, "tasks.refresh_vendor_inventory")
    logger.info(f"Inventory refresh queued: task_id={result.id}, scope={scope}")

    return TaskDispatchResponse(task_id=result.id, message=f"Inventory refresh queued for {scope}")


@router.get("/sync-status", response_model=SyncStatusResponse)
def sync_status(
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> SyncStatusResponse:
    return SyncStatusResponse.model_validate(get_sync_status(functions).model_dump())
