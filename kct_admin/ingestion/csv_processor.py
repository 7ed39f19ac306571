"""
Product CSV Import/Export
Parses product CSV files with pandas, validates every row and writes one
product per row. Exports the catalog in the same column layout.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from uuid import UUID

import chardet
import pandas as pd
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config.settings import get_settings
from ..db.models import Product
from ..exceptions import CSVImportError, ValidationFailed
from ..inventory.queries import ProductFilters, filtered_products_query
from ..inventory.writer import create_product
from ..models.money import format_cents, parse_money
from ..models.product import DEFAULT_PRODUCT_TYPE, DEFAULT_VENDOR, ProductForm, ProductStatus

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "name",
    "description",
    "category",
    "subcategory",
    "sku",
    "price",
    "vendor",
    "product_type",
    "status",
    "visibility",
    "featured",
    "weight",
    "tags",
    "meta_title",
    "meta_description",
    "primary_image",
]

REQUIRED_COLUMNS = ["name", "category", "sku", "price"]

ProgressCallback = Callable[[int, int], None]
Source = Union[bytes, str, Path]


def detect_csv_encoding(raw_data: bytes) -> str:
    """
    Detect the encoding of CSV content using chardet.

    Args:
        raw_data: File content (the first 10KB is enough)

    Returns:
        Detected encoding string
    """
    result = chardet.detect(raw_data[:10000])
    encoding = result["encoding"]

    # ASCII is a subset of UTF-8; treat it as UTF-8
    if not encoding or encoding.lower() == "ascii":
        return "utf-8"

    logger.info(f"Detected encoding: {encoding} (confidence: {result['confidence']:.2%})")
    return encoding


def read_csv_frame(source: Source) -> pd.DataFrame:
    """
    Read a CSV file into a DataFrame of strings.

    Headers are stripped and lowercased, empty cells become empty strings
    and rows with no values at all are dropped.

    Raises:
        ValidationFailed: if the file has no header or no data rows
    """
    raw = Path(source).read_bytes() if isinstance(source, (str, Path)) else source
    text = raw.decode(detect_csv_encoding(raw), errors="replace").lstrip("\ufeff")

    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError:
        raise ValidationFailed("CSV file must have at least a header row and one data row")
    except pd.errors.ParserError as e:
        raise ValidationFailed(f"Could not parse CSV: {e}")

    df.columns = [str(column).strip().lower() for column in df.columns]
    df = df.fillna("")
    for column in df.columns:
        df[column] = df[column].str.strip()
    df = df[(df != "").any(axis=1)].reset_index(drop=True)

    if df.empty:
        raise ValidationFailed("CSV file must have at least a header row and one data row")

    return df


@dataclass
class ParsedCSV:
    """Validated CSV rows. Row numbers count the header as row 1."""

    forms: List[Tuple[int, ProductForm]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    total_rows: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def preview(self, limit: int = 5) -> List[Dict[str, Any]]:
        return [
            {"row": row, "name": form.name, "sku": form.sku, "category": form.category,
             "price": str(form.price)}
            for row, form in self.forms[:limit]
        ]


def _parse_weight(value: str) -> int:
    try:
        return max(0, int(float(value)))
    except (ValueError, OverflowError):
        return 0


def row_to_form(record: Dict[str, str]) -> ProductForm:
    """Map one CSV record to a product form, applying the import defaults."""
    tags = record.get("tags", "")
    return ProductForm(
        name=record.get("name", ""),
        description=record.get("description") or None,
        category=record.get("category", ""),
        subcategory=record.get("subcategory") or None,
        sku=record.get("sku", ""),
        price=record.get("price") or "0",
        vendor=record.get("vendor") or DEFAULT_VENDOR,
        product_type=record.get("product_type") or DEFAULT_PRODUCT_TYPE,
        status=record.get("status") or ProductStatus.DRAFT.value,
        visibility=record.get("visibility", "").lower() != "false",
        featured=record.get("featured", "").lower() == "true",
        weight=_parse_weight(record.get("weight", "")),
        tags=[tag.strip() for tag in tags.split(",")] if tags else [],
        meta_title=record.get("meta_title") or None,
        meta_description=record.get("meta_description") or None,
        primary_image=record.get("primary_image") or None,
    )


def validate_row(row_number: int, record: Dict[str, str]) -> Tuple[Optional[ProductForm], List[str]]:
    """
    Check one record.

    Returns:
        The product form (None when the row has errors) and the row's errors
    """
    errors = []
    if not record.get("name"):
        errors.append(f"Row {row_number}: Product name is required")
    if not record.get("category"):
        errors.append(f"Row {row_number}: Category is required")
    if not record.get("sku"):
        errors.append(f"Row {row_number}: SKU is required")

    try:
        if parse_money(record.get("price", "")) < 0:
            raise ValueError("negative price")
    except ValueError:
        errors.append(f"Row {row_number}: Valid price is required")

    status = record.get("status")
    if status and status not in {s.value for s in ProductStatus}:
        errors.append(f"Row {row_number}: Invalid status '{status}'")

    if errors:
        return None, errors

    try:
        return row_to_form(record), []
    except ValidationError as e:
        return None, [f"Row {row_number}: {err['msg']}" for err in e.errors()]


def parse_product_csv(source: Source) -> ParsedCSV:
    """
    Parse and validate a product CSV.

    Raises:
        ValidationFailed: if the file is empty or required columns are missing
    """
    df = read_csv_frame(source)

    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise ValidationFailed(f"Missing required columns: {', '.join(missing)}")

    parsed = ParsedCSV(total_rows=len(df))
    for index, record in enumerate(df.to_dict("records")):
        row_number = index + 2
        form, errors = validate_row(row_number, record)
        if errors:
            parsed.errors.extend(errors)
        else:
            parsed.forms.append((row_number, form))

    logger.info(
        f"Parsed CSV: {parsed.total_rows} rows, {len(parsed.errors)} errors",
        extra={"columns": list(df.columns)},
    )
    return parsed


@dataclass
class ImportRowResult:
    row: int
    sku: str
    success: bool
    error: Optional[str] = None
    product_id: Optional[UUID] = None


@dataclass
class ImportSummary:
    total: int = 0
    successful: int = 0
    failed: int = 0
    dry_run: bool = False
    results: List[ImportRowResult] = field(default_factory=list)

    def add(self, result: ImportRowResult) -> None:
        self.results.append(result)
        self.total += 1
        if result.success:
            self.successful += 1
        else:
            self.failed += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "dry_run": self.dry_run,
            "results": [
                {
                    "row": r.row,
                    "sku": r.sku,
                    "success": r.success,
                    "error": r.error,
                    "product_id": str(r.product_id) if r.product_id else None,
                }
                for r in self.results
            ],
        }


class ProductCSVImporter:
    """
    Creates one product per validated CSV row.

    Every row is committed (or rolled back) on its own, so a duplicate SKU
    fails that row only. A dry run checks SKUs against the catalog and the
    rest of the file but writes nothing.
    """

    def __init__(self, session: Session, dry_run: bool = False):
        self.session = session
        self.dry_run = dry_run
        self.stats = {"processed": 0, "created": 0, "failed": 0, "errors": []}

    def import_file(self, source: Source, progress: Optional[ProgressCallback] = None) -> ImportSummary:
        """
        Parse, validate and import a CSV file.

        Raises:
            CSVImportError: if any row has errors; nothing is imported
        """
        parsed = parse_product_csv(source)
        if not parsed.is_valid:
            raise CSVImportError(parsed.errors)
        return self.import_rows(parsed.forms, progress)

    def import_rows(
        self,
        rows: List[Tuple[int, ProductForm]],
        progress: Optional[ProgressCallback] = None,
    ) -> ImportSummary:
        summary = ImportSummary(dry_run=self.dry_run)
        seen_skus = set()
        total = len(rows)

        for position, (row_number, form) in enumerate(rows, start=1):
            self.stats["processed"] += 1
            if self.dry_run:
                result = self._check_row(row_number, form, seen_skus)
            else:
                result = self._create_row(row_number, form)
            seen_skus.add(form.sku)

            summary.add(result)
            if result.success:
                self.stats["created"] += 1
            else:
                self.stats["failed"] += 1
                if len(self.stats["errors"]) < 10:
                    self.stats["errors"].append({"row": row_number, "error": result.error})

            if progress:
                progress(position, total)

        self._log_statistics()
        return summary

    def _create_row(self, row_number: int, form: ProductForm) -> ImportRowResult:
        try:
            product = create_product(self.session, form)
        except ValidationFailed as e:
            return ImportRowResult(row=row_number, sku=form.sku, success=False, error=e.message)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Row {row_number} failed: {e}")
            return ImportRowResult(row=row_number, sku=form.sku, success=False,
                                   error=str(e)[:200])
        return ImportRowResult(row=row_number, sku=form.sku, success=True, product_id=product.id)

    def _check_row(self, row_number: int, form: ProductForm, seen_skus: set) -> ImportRowResult:
        duplicate = form.sku in seen_skus or (
            self.session.query(Product.id).filter(Product.sku == form.sku).first() is not None
        )
        if duplicate:
            return ImportRowResult(row=row_number, sku=form.sku, success=False,
                                   error=f"SKU already exists: {form.sku}")
        return ImportRowResult(row=row_number, sku=form.sku, success=True)

    def _log_statistics(self):
        mode = "Dry run" if self.dry_run else "Import"
        logger.info(
            f"{mode} finished: {self.stats['created']} ok, {self.stats['failed']} failed "
            f"of {self.stats['processed']}"
        )
        if self.stats["errors"]:
            logger.warning(f"Sample errors: {self.stats['errors'][:3]}")


def import_products(
    session: Session,
    rows: List[Tuple[int, ProductForm]],
    progress: Optional[ProgressCallback] = None,
    dry_run: bool = False,
) -> ImportSummary:
    """Import already validated rows; see ProductCSVImporter."""
    return ProductCSVImporter(session, dry_run=dry_run).import_rows(rows, progress)


def _export_row(product: Product) -> List[str]:
    return [
        product.name or "",
        product.description or "",
        product.category or "",
        product.subcategory or "",
        product.sku or "",
        format_cents(product.base_price or 0),
        product.vendor or "",
        product.product_type or "",
        product.status or "",
        "true" if product.visibility else "false",
        "true" if product.featured else "false",
        str(product.weight or 0),
        ", ".join(product.tags or []),
        product.meta_title or "",
        product.meta_description or "",
        product.primary_image or "",
    ]


def export_products(
    session: Session,
    filters: Optional[ProductFilters] = None,
    limit: Optional[int] = None,
) -> str:
    """
    Export products as CSV text, every value quoted.

    Args:
        filters: Optional list filters (pagination is ignored)
        limit: Maximum rows, defaults to the export_row_limit setting
    """
    limit = limit or get_settings().export_row_limit
    query = filtered_products_query(session, filters or ProductFilters())
    products = query.order_by(Product.created_at.desc()).limit(limit).all()

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for product in products:
        writer.writerow(_export_row(product))

    logger.info(f"Exported {len(products)} products")
    return buffer.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    return f"products_export_{(today or date.today()).isoformat()}.csv"
