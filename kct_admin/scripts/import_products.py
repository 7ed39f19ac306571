#!/usr/bin/env python3
"""
Product Import Script
Loads a product CSV into the catalog. Any row error rejects the whole file.

Usage:
    python -m kct_admin.scripts.import_products data/products.csv
    python -m kct_admin.scripts.import_products data/products.csv --dry-run
"""

import argparse
import logging
import sys
from pathlib import Path

from kct_admin.db.session import SessionLocal
from kct_admin.exceptions import CSVImportError, ValidationFailed
from kct_admin.ingestion import ProductCSVImporter

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Import products from a CSV file")
    parser.add_argument("csv_path", type=str, help="Path to the product CSV file")
    parser.add_argument(
        "--dry-run", action="store_true", help="Validate and check SKUs without database writes"
    )
    args = parser.parse_args()

    csv_path = Path(args.csv_path)
    if not csv_path.exists():
        logger.error(f"CSV file not found: {csv_path}")
        sys.exit(1)

    logger.info(f"Starting import of {csv_path}" + (" (dry run)" if args.dry_run else ""))

    db = SessionLocal()
    try:
        summary = ProductCSVImporter(db, dry_run=args.dry_run).import_file(
            csv_path,
            progress=lambda current, total: logger.info(f"Processed {current}/{total} rows"),
        )
    except CSVImportError as e:
        logger.error(f"CSV has {len(e.errors)} invalid rows, nothing was imported")
        for error in e.errors[:20]:
            logger.error(f"  - {error}")
        sys.exit(1)
    except ValidationFailed as e:
        logger.error(f"Import failed: {e.message}")
        sys.exit(1)
    finally:
        db.close()

    logger.info("=" * 60)
    logger.info("IMPORT COMPLETE" if not args.dry_run else "DRY RUN COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Rows: {summary.total}")
    logger.info(f"Successful: {summary.successful}")
    logger.info(f"Failed: {summary.failed}")
    for result in summary.results:
        if not result.success:
            logger.warning(f"  Row {result.row} ({result.sku}): {result.error}")

    if summary.failed:
        sys.exit(2)


if __name__ == "__main__":
    main()
