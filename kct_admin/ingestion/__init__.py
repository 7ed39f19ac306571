"""
Data Ingestion Package
Product CSV parsing, validation, import and export.
"""

from .csv_processor import (
    EXPORT_COLUMNS,
    ImportRowResult,
    ImportSummary,
    ParsedCSV,
    ProductCSVImporter,
    export_filename,
    export_products,
    import_products,
    parse_product_csv,
)

__all__ = [
    "EXPORT_COLUMNS",
    "ImportRowResult",
    "ImportSummary",
    "ParsedCSV",
    "ProductCSVImporter",
    "export_filename",
    "export_products",
    "import_products",
    "parse_product_csv",
]
