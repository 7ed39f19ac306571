#!/usr/bin/env python3
"""
Product Export Script
Writes the catalog (optionally filtered) to a CSV file.

Usage:
    python -m kct_admin.scripts.export_products
    python -m kct_admin.scripts.export_products --status active --output active.csv
"""

import argparse
import logging
from pathlib import Path

from kct_admin.db.session import SessionLocal
from kct_admin.ingestion import export_filename, export_products
from kct_admin.inventory import ProductFilters

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Export products to CSV")
    parser.add_argument("--output", type=str, default=None,
                        help="Output path (default: products_export_<date>.csv)")
    parser.add_argument("--search", type=str, default=None, help="Name, SKU or tag search")
    parser.add_argument("--category", type=str, default=None)
    parser.add_argument("--status", type=str, default=None, choices=["active", "draft", "archived"])
    parser.add_argument("--limit", type=int, default=None, help="Maximum rows to export")
    args = parser.parse_args()

    filters = ProductFilters(search=args.search, category=args.category, status=args.status)
    output = Path(args.output or export_filename())

    db = SessionLocal()
    try:
        content = export_products(db, filters, limit=args.limit)
    finally:
        db.close()

    output.write_text(content, encoding="utf-8")
    logger.info(f"Wrote {output}")


if __name__ == "__main__":
    main()
