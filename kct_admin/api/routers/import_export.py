"""
CSV Import/Export Endpoints

Endpoints:
GET  /api/v1/csv/export    - Download the (filtered) catalog as CSV
GET  /api/v1/csv/template  - Download an empty import template
POST /api/v1/csv/validate  - Validate an upload and preview its rows
POST /api/v1/csv/import    - Import an upload inline, or queue it with background=true
"""

import csv
import io
import logging
from pathlib import Path
from typing import Any, Dict, Literal, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from ...config.settings import Settings, get_settings
from ...exceptions import CSVImportError
from ...ingestion import (
    EXPORT_COLUMNS,
    export_filename,
    export_products,
    import_products,
    parse_product_csv,
)
from ...inventory import ProductFilters
from ...tasks.progress import record_task
from ..dependencies import get_db, verify_api_key
from ..errors import APIError, InvalidRequestError
from ..schemas.tasks import TaskDispatchResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/csv", tags=["import-export"], dependencies=[Depends(verify_api_key)]
)

TEMPLATE_ROW = [
    "Silk Bow Tie", "Hand-tied silk bow tie", "Accessories", "Bow Ties", "BT-SILK-001",
    "29.99", "KCT Menswear", "Formal Accessories", "draft", "true", "false", "50",
    "silk, formal", "", "", "",
]


def _read_upload(file: UploadFile) -> bytes:
    name = (file.filename or "").lower()
    if not name.endswith(".csv"):
        raise InvalidRequestError("Only .csv files are supported")

    data = file.file.read()
    if not data:
        raise InvalidRequestError("Uploaded file is empty")
    return data


@router.get("/export")
def export_csv(
    search: Optional[str] = None,
    category: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    stock_status: Optional[Literal["in_stock", "out_of_stock"]] = None,
    db: Session = Depends(get_db),
) -> Response:
    filters = ProductFilters(
        search=search, category=category, status=status_filter, stock_status=stock_status
    )
    content = export_products(db, filters)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.get("/template")
def template() -> Response:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    writer.writerow(TEMPLATE_ROW)
    return Response(
        content=buffer.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="product_import_template.csv"'},
    )


@router.post("/validate")
def validate_csv(file: UploadFile = File(...)) -> Dict[str, Any]:
    """Validate every row without importing anything."""
    parsed = parse_product_csv(_read_upload(file))
    return {
        "valid": parsed.is_valid,
        "total_rows": parsed.total_rows,
        "valid_rows": len(parsed.forms),
        "errors": parsed.errors,
        "preview": parsed.preview(),
    }


@router.post("/import")
def import_csv(
    file: UploadFile = File(...),
    dry_run: bool = False,
    background: bool = False,
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    """
    Import products from a CSV upload.

    Any row error rejects the whole file. Inline imports return the per-row
    summary; background imports return the task id to poll.
    """
    data = _read_upload(file)

    if background:
        upload_dir = Path(settings.upload_dir)
        upload_dir.mkdir(parents=True, exist_ok=True)
        path = upload_dir / f"{uuid4().hex}.csv"
        path.write_bytes(data)

        try:
            from ...tasks.ingestion import import_product_csv

            result = import_product_csv.delay(str(path), dry_run=dry_run)
        except Exception as e:
            path.unlink(missing_ok=True)
            logger.error(f"Failed to queue CSV import: {e}", exc_info=True)
            raise APIError(f"Failed to queue CSV import: {e}")

        record_task(db, result.id, "tasks.import_product_csv")
        logger.info(f"CSV import queued: task_id={result.id}, file={file.filename}")
        response = TaskDispatchResponse(
            task_id=result.id, message=f"Import of {file.filename} queued"
        )
        return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content=response.model_dump())

    parsed = parse_product_csv(data)
    if not parsed.is_valid:
        raise CSVImportError(parsed.errors)

    summary = import_products(db, parsed.forms, dry_run=dry_run)
    return summary.to_dict()
