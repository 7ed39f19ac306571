"""
Data Ingestion Tasks
Background product CSV import.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from .celery_app import app

logger = logging.getLogger(__name__)


@app.task(bind=True, name="tasks.import_product_csv")
def import_product_csv(self, file_path: str, dry_run: bool = False) -> Dict[str, Any]:
    """
    Import a product CSV file.

    The file is validated first; if any row has errors nothing is imported
    and the errors are returned. The uploaded file is removed afterwards.

    Args:
        file_path: Path to the uploaded CSV file
        dry_run: Validate and check SKUs without writing

    Returns:
        Dictionary with the import summary or the validation errors
    """
    from ..db.session import SessionLocal
    from ..exceptions import CSVImportError, ValidationFailed
    from ..ingestion.csv_processor import ProductCSVImporter
    from .progress import ProgressReporter

    logger.info(f"Starting CSV import for {file_path}", extra={"dry_run": dry_run})

    db = SessionLocal()
    reporter = ProgressReporter(self, db, "tasks.import_product_csv")
    try:
        reporter.started(0)
        summary = ProductCSVImporter(db, dry_run=dry_run).import_file(
            file_path, progress=lambda current, total: reporter(
                current, total, f"Imported {current} of {total} rows"
            )
        )
        payload = {"status": "success", "file_path": file_path, **summary.to_dict()}
        reporter.finished(payload)
        return payload

    except CSVImportError as e:
        reporter.failed(e.message)
        return {"status": "invalid", "file_path": file_path, "errors": e.errors}

    except ValidationFailed as e:
        reporter.failed(e.message)
        return {"status": "error", "file_path": file_path, "error": e.message}

    except Exception as e:
        logger.error(f"Error importing CSV file {file_path}: {e}", exc_info=True)
        reporter.failed(str(e))
        raise

    finally:
        db.close()
        Path(file_path).unlink(missing_ok=True)
