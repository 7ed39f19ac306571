"""
Inventory dashboard statistics and trends.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List

import pandas as pd
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..db.models import Product, ProductVariant, utcnow
from ..models.product import DEFAULT_LOW_STOCK_THRESHOLD, ProductStatus

logger = logging.getLogger(__name__)


def get_dashboard_stats(
    session: Session, low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
) -> Dict[str, Any]:
    """
    Catalog-wide counters for the inventory dashboard.

    Returns:
        Dict with product, variant and inventory totals plus products by status
    """
    total_products = session.query(func.count(Product.id)).scalar() or 0

    status_counts = dict(
        session.query(Product.status, func.count(Product.id)).group_by(Product.status).all()
    )
    products_by_status = {status.value: status_counts.get(status.value, 0) for status in ProductStatus}

    total_variants, total_inventory, available_inventory = session.query(
        func.count(ProductVariant.id),
        func.coalesce(func.sum(ProductVariant.inventory_quantity), 0),
        func.coalesce(func.sum(ProductVariant.available_quantity), 0),
    ).one()

    low_stock_variants = (
        session.query(func.count(ProductVariant.id))
        .filter(ProductVariant.available_quantity <= low_stock_threshold)
        .scalar()
        or 0
    )

    return {
        "total_products": total_products,
        "active_products": products_by_status[ProductStatus.ACTIVE.value],
        "total_variants": int(total_variants or 0),
        "total_inventory": int(total_inventory or 0),
        "available_inventory": int(available_inventory or 0),
        "low_stock_variants": low_stock_variants,
        "products_by_status": products_by_status,
    }


def get_inventory_trends(session: Session, days: int = 30) -> List[Dict[str, Any]]:
    """
    Daily inventory activity over the last `days` days.

    Each entry counts the variants whose stock was last updated that day
    and the on-hand quantity they hold. Days without activity are zero.
    """
    today = utcnow().date()
    start = today - timedelta(days=days - 1)

    rows = (
        session.query(ProductVariant.last_inventory_update, ProductVariant.inventory_quantity)
        .filter(ProductVariant.last_inventory_update >= pd.Timestamp(start).to_pydatetime())
        .all()
    )

    index = pd.date_range(start=start, end=today, freq="D")
    if rows:
        df = pd.DataFrame(rows, columns=["updated_at", "quantity"])
        df["day"] = pd.to_datetime(df["updated_at"]).dt.normalize()
        daily = df.groupby("day").agg(updates=("quantity", "size"), quantity=("quantity", "sum"))
        daily = daily.reindex(index, fill_value=0)
    else:
        daily = pd.DataFrame({"updates": 0, "quantity": 0}, index=index)

    return [
        {"date": day.date().isoformat(), "updates": int(row.updates), "quantity": int(row.quantity)}
        for day, row in daily.iterrows()
    ]
