"""
Vendor Tasks
Background vendor product/variant import and inventory refresh.
"""

import logging
from typing import Any, Dict, List, Optional

from .celery_app import app

logger = logging.getLogger(__name__)


@app.task(bind=True, name="tasks.import_vendor_products")
def import_vendor_products(
    self,
    product_ids: List[int],
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Import vendor products in batches, reporting progress after each batch.

    Args:
        product_ids: Shopify product ids to import
        overrides: Per-product overrides keyed by product id (JSON keys are strings)

    Returns:
        Dictionary with the merged import result
    """
    from ..db.session import SessionLocal
    from ..exceptions import AdminError
    from ..functions import EdgeFunctionClient
    from ..vendor.importer import VendorImporter
    from .progress import ProgressReporter

    logger.info(f"Starting vendor import of {len(product_ids)} products")
    overrides = {int(key): value for key, value in (overrides or {}).items()}

    db = SessionLocal()
    reporter = ProgressReporter(self, db, "tasks.import_vendor_products")
    try:
        reporter.started(len(product_ids))
        with EdgeFunctionClient() as functions:
            result = VendorImporter(db, functions).import_products(
                product_ids, overrides, progress=reporter
            )

        payload = {"status": "success", **result.to_dict()}
        reporter.finished(payload)
        return payload

    except AdminError as e:
        logger.error(f"Vendor import failed: {e.message}")
        reporter.failed(e.message)
        return {"status": "error", "error": e.message}

    except Exception as e:
        logger.error(f"Vendor import crashed: {e}", exc_info=True)
        reporter.failed(str(e))
        raise

    finally:
        db.close()


@app.task(bind=True, name="tasks.import_vendor_variants")
def import_vendor_variants(self, variant_ids: List[int]) -> Dict[str, Any]:
    """Import individual vendor variants in batches."""
    from ..db.session import SessionLocal
    from ..exceptions import AdminError
    from ..functions import EdgeFunctionClient
    from ..vendor.importer import VendorImporter
    from .progress import ProgressReporter

    db = SessionLocal()
    reporter = ProgressReporter(self, db, "tasks.import_vendor_variants")
    try:
        reporter.started(len(variant_ids))
        with EdgeFunctionClient() as functions:
            result = VendorImporter(db, functions).import_variants(variant_ids, progress=reporter)

        payload = {"status": "success", **result.to_dict()}
        reporter.finished(payload)
        return payload

    except AdminError as e:
        logger.error(f"Vendor variant import failed: {e.message}")
        reporter.failed(e.message)
        return {"status": "error", "error": e.message}

    except Exception as e:
        logger.error(f"Vendor variant import crashed: {e}", exc_info=True)
        reporter.failed(str(e))
        raise

    finally:
        db.close()


@app.task(bind=True, name="tasks.refresh_vendor_inventory")
def refresh_vendor_inventory(self, product_ids: Optional[List[int]] = None) -> Dict[str, Any]:
    """
    Refresh vendor inventory levels.

    Runs on the beat schedule for all products, or on demand for a selection.
    """
    from ..db.session import SessionLocal
    from ..exceptions import AdminError
    from ..functions import EdgeFunctionClient
    from ..vendor.importer import refresh_inventory
    from .progress import ProgressReporter

    scope = f"{len(product_ids)} products" if product_ids else "all products"
    logger.info(f"Starting vendor inventory refresh for {scope}")

    db = SessionLocal()
    reporter = ProgressReporter(self, db, "tasks.refresh_vendor_inventory")
    total = len(product_ids) if product_ids else 0
    try:
        reporter.started(total)
        reporter(0, total, f"Refreshing {scope}")
        with EdgeFunctionClient() as functions:
            result = refresh_inventory(functions, product_ids)

        payload = {"status": "success", "refresh_type": "selected" if product_ids else "all",
                   "result": result}
        reporter.finished(payload)
        return payload

    except AdminError as e:
        logger.error(f"Inventory refresh failed: {e.message}")
        reporter.failed(e.message)
        return {"status": "error", "error": e.message}

    except Exception as e:
        logger.error(f"Inventory refresh crashed: {e}", exc_info=True)
        reporter.failed(str(e))
        raise

    finally:
        db.close()
