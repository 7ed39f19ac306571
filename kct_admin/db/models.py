"""
SQLAlchemy ORM Models
Database table and view definitions for the catalog, vendor inbox and orders.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    JSON, BigInteger, Boolean, Column, Date, ForeignKey, Index, Integer,
    Numeric, String, Text, TIMESTAMP, Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

# JSONB on Postgres, plain JSON elsewhere (tests run on SQLite)
JSONType = JSON().with_variant(JSONB, "postgresql")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the TIMESTAMP columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Product(Base):
    """
    Catalog product.

    Prices are stored in cents. variant_count, total_inventory and in_stock
    are derived from the variants whenever the product graph is written.
    """
    __tablename__ = 'products'

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False, index=True)
    subcategory = Column(String(100), nullable=True)
    sku = Column(String(100), unique=True, nullable=False, index=True)
    handle = Column(String(255), nullable=True, index=True)
    base_price = Column(Integer, nullable=False, default=0, comment='Price in cents')
    vendor = Column(String(255), nullable=True)
    product_type = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default='draft', index=True,
                    comment='active, draft or archived')
    visibility = Column(Boolean, nullable=False, default=True)
    featured = Column(Boolean, nullable=False, default=False)
    requires_shipping = Column(Boolean, nullable=False, default=True)
    taxable = Column(Boolean, nullable=False, default=True)
    track_inventory = Column(Boolean, nullable=False, default=True)
    weight = Column(Integer, nullable=True, comment='Weight in grams')

    # SEO
    meta_title = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)
    seo_title = Column(String(255), nullable=True)
    seo_description = Column(Text, nullable=True)
    search_keywords = Column(Text, nullable=True)

    # Media
    primary_image = Column(Text, nullable=True)
    image_gallery = Column(JSONType, nullable=False, default=list)

    tags = Column(JSONType, nullable=False, default=list)
    additional_info = Column(JSONType, nullable=False, default=dict)

    # Derived from variants
    variant_count = Column(Integer, nullable=False, default=0)
    total_inventory = Column(Integer, nullable=False, default=0)
    in_stock = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now(),
                        onupdate=utcnow)

    variants = relationship("ProductVariant", back_populates="product",
                            cascade="all, delete-orphan",
                            order_by="ProductVariant.created_at.desc()")

    def __repr__(self):
        return f"<Product(id={self.id}, sku={self.sku}, status={self.status})>"

    @property
    def price_dollars(self) -> float:
        return (self.base_price or 0) / 100


class ProductVariant(Base):
    """Sellable SKU-level unit of a product."""
    __tablename__ = 'enhanced_product_variants'

    id = Column(Uuid, primary_key=True, default=uuid4)
    product_id = Column(Uuid, ForeignKey('products.id', ondelete='CASCADE'), nullable=False,
                        index=True)
    variant_type = Column(String(50), nullable=False, default='standard')
    color = Column(String(100), nullable=True)
    size = Column(String(50), nullable=True)
    sku = Column(String(150), nullable=False, index=True)
    price_cents = Column(Integer, nullable=False, default=0)
    compare_at_price_cents = Column(Integer, nullable=True)

    # Inventory
    inventory_quantity = Column(Integer, nullable=False, default=0)
    available_quantity = Column(Integer, nullable=False, default=0)
    reserved_quantity = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=5)
    stock_status = Column(String(20), nullable=False, default='out_of_stock',
                          comment='in_stock, low_stock, out_of_stock or backorder')
    allow_backorders = Column(Boolean, nullable=False, default=False)

    barcode = Column(String(100), nullable=True)
    weight_grams = Column(Integer, nullable=True)
    last_inventory_update = Column(TIMESTAMP, nullable=True)

    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now(),
                        onupdate=utcnow)

    product = relationship("Product", back_populates="variants")

    __table_args__ = (
        Index('idx_variants_available', 'available_quantity'),
    )

    def __repr__(self):
        return f"<ProductVariant(id={self.id}, sku={self.sku}, qty={self.inventory_quantity})>"


class SmartCollection(Base):
    __tablename__ = 'smart_collections'

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    collection_type = Column(String(20), nullable=False, default='manual',
                             comment='dynamic, manual or ai_powered')
    rules = Column(JSONType, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)
    product_count = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now(),
                        onupdate=utcnow)

    memberships = relationship("CollectionProduct", back_populates="collection",
                               cascade="all, delete-orphan",
                               order_by="CollectionProduct.display_order")

    def __repr__(self):
        return f"<SmartCollection(id={self.id}, name={self.name}, products={self.product_count})>"


class CollectionProduct(Base):
    __tablename__ = 'collection_products'

    id = Column(Uuid, primary_key=True, default=uuid4)
    collection_id = Column(Uuid, ForeignKey('smart_collections.id', ondelete='CASCADE'),
                           nullable=False)
    product_id = Column(Uuid, ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    display_order = Column(Integer, nullable=False, default=0)
    added_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now())

    collection = relationship("SmartCollection", back_populates="memberships")
    product = relationship("Product")

    __table_args__ = (
        Index('idx_collection_products_unique', 'collection_id', 'product_id', unique=True),
    )


class VendorImportDecision(Base):
    """Import decision for a vendor (Shopify) product."""
    __tablename__ = 'vendor_import_decisions'

    shopify_product_id = Column(BigInteger, primary_key=True, autoincrement=False)
    decision = Column(String(20), nullable=False, comment='staged, skipped or imported')
    decided_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<VendorImportDecision({self.shopify_product_id}={self.decision})>"


class VendorVariantImportDecision(Base):
    """Import decision for a single vendor variant."""
    __tablename__ = 'vendor_variant_import_decisions'

    shopify_variant_id = Column(BigInteger, primary_key=True, autoincrement=False)
    decision = Column(String(20), nullable=False)
    decided_at = Column(TIMESTAMP, nullable=False, default=utcnow)


class VendorInboxItem(Base):
    """
    Row of the v_vendor_inbox view.

    Read-only: vendor products are synced from Shopify by the remote
    functions, the view joins them with their import decision.
    """
    __tablename__ = 'v_vendor_inbox'
    __table_args__ = {'info': {'is_view': True}}

    shopify_product_id = Column(BigInteger, primary_key=True, autoincrement=False)
    title = Column(String(255))
    handle = Column(String(255))
    vendor = Column(String(255))
    category = Column(String(100))
    price = Column(Numeric(10, 2))
    inventory = Column(Integer)
    variants = Column(Integer)
    status = Column(String(20))
    image_src = Column(Text)
    decision = Column(String(20))
    created_at = Column(TIMESTAMP)


class VendorInboxVariant(Base):
    """Row of the v_vendor_inbox_variants view."""
    __tablename__ = 'v_vendor_inbox_variants'
    __table_args__ = {'info': {'is_view': True}}

    shopify_variant_id = Column(BigInteger, primary_key=True, autoincrement=False)
    shopify_product_id = Column(BigInteger)
    sku = Column(String(150))
    product_title = Column(String(255))
    color_name = Column(String(100))
    color_code = Column(String(50))
    size = Column(String(50))
    base_product_code = Column(String(100))
    price = Column(Numeric(10, 2))
    inventory_quantity = Column(Integer)
    image_src = Column(Text)
    decision = Column(String(20))
    decided_at = Column(TIMESTAMP)
    created_at = Column(TIMESTAMP)


class Order(Base):
    """Customer order with shipping, billing and fulfilment fields."""
    __tablename__ = 'orders'

    id = Column(Uuid, primary_key=True, default=uuid4)
    order_number = Column(String(50), unique=True, nullable=False, index=True)
    customer_email = Column(String(255), nullable=True)
    customer_name = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)

    status = Column(String(30), nullable=False, default='pending_payment', index=True)
    order_priority = Column(String(30), nullable=False, default='normal')

    # Money
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(10, 2), nullable=False, default=0)
    shipping_amount = Column(Numeric(10, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default='USD')

    # Payment
    stripe_payment_intent_id = Column(String(255), nullable=True)
    payment_method = Column(String(50), nullable=True)
    payment_status = Column(String(30), nullable=True)

    # Shipping address
    shipping_first_name = Column(String(100), nullable=True)
    shipping_last_name = Column(String(100), nullable=True)
    shipping_address_line_1 = Column(String(255), nullable=True)
    shipping_address_line_2 = Column(String(255), nullable=True)
    shipping_city = Column(String(100), nullable=True)
    shipping_state = Column(String(100), nullable=True)
    shipping_postal_code = Column(String(20), nullable=True)
    shipping_country = Column(String(2), nullable=True)

    # Billing address
    billing_first_name = Column(String(100), nullable=True)
    billing_last_name = Column(String(100), nullable=True)
    billing_address_line_1 = Column(String(255), nullable=True)
    billing_address_line_2 = Column(String(255), nullable=True)
    billing_city = Column(String(100), nullable=True)
    billing_state = Column(String(100), nullable=True)
    billing_postal_code = Column(String(20), nullable=True)
    billing_country = Column(String(2), nullable=True)

    # Delivery and tracking
    estimated_delivery_date = Column(Date, nullable=True)
    actual_delivery_date = Column(Date, nullable=True)
    tracking_number = Column(String(100), nullable=True)
    tracking_status = Column(String(50), nullable=True)
    shipping_carrier = Column(String(50), nullable=True)
    carrier = Column(String(50), nullable=True)
    service_type = Column(String(100), nullable=True)
    shipping_rate_id = Column(String(100), nullable=True)
    shipping_label_url = Column(Text, nullable=True)
    shipping_cost = Column(Numeric(10, 2), nullable=True)
    easypost_shipment_id = Column(String(100), nullable=True)

    # Flags and notes
    is_rush_order = Column(Boolean, nullable=False, default=False)
    is_group_order = Column(Boolean, nullable=False, default=False)
    special_instructions = Column(Text, nullable=True)
    internal_notes = Column(Text, nullable=True)
    processing_notes = Column(Text, nullable=True)

    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now())
    processed_at = Column(TIMESTAMP, nullable=True)
    shipped_at = Column(TIMESTAMP, nullable=True)
    delivered_at = Column(TIMESTAMP, nullable=True)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_orders_created_at', 'created_at'),
    )

    def __repr__(self):
        return f"<Order(order_number={self.order_number}, status={self.status})>"


class OrderItem(Base):
    __tablename__ = 'order_items'

    id = Column(Uuid, primary_key=True, default=uuid4)
    order_id = Column(Uuid, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False,
                      index=True)
    product_source = Column(String(30), nullable=True,
                            comment='core_stripe or catalog_supabase')
    product_id = Column(String(100), nullable=True)
    product_name = Column(String(255), nullable=False)
    product_sku = Column(String(150), nullable=True)
    size = Column(String(50), nullable=True)
    color = Column(String(100), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False, default=0)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    is_bundle_item = Column(Boolean, nullable=False, default=False)
    item_status = Column(String(30), nullable=True)
    weight_oz = Column(Numeric(8, 2), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now())

    order = relationship("Order", back_populates="items")


class OrderDashboardRow(Base):
    """Row of the order_management_dashboard view."""
    __tablename__ = 'order_management_dashboard'
    __table_args__ = {'info': {'is_view': True}}

    id = Column(Uuid, primary_key=True)
    order_number = Column(String(50))
    customer_name = Column(String(255))
    customer_email = Column(String(255))
    status = Column(String(30))
    order_priority = Column(String(30))
    total_amount = Column(Numeric(10, 2))
    currency = Column(String(3))
    is_rush_order = Column(Boolean)
    item_count = Column(Integer)
    tracking_number = Column(String(100))
    created_at = Column(TIMESTAMP)


class EmailLog(Base):
    __tablename__ = 'email_logs'

    id = Column(Uuid, primary_key=True, default=uuid4)
    order_id = Column(Uuid, nullable=True, index=True)
    email_type = Column(String(50), nullable=False)
    recipient = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default='sent')
    error_message = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now())


class TaskExecution(Base):
    """
    Background task execution record.

    Mirrors Celery task state so the admin can list recent imports and
    refreshes after the result backend expires them.
    """
    __tablename__ = 'task_executions'

    id = Column(Uuid, primary_key=True, default=uuid4)
    task_id = Column(String(255), unique=True, nullable=False, index=True)
    task_name = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default='PENDING')
    progress_current = Column(Integer, nullable=True)
    progress_total = Column(Integer, nullable=True)
    progress_message = Column(Text, nullable=True)
    result = Column(JSONType, nullable=True)
    error = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, server_default=func.now())
    completed_at = Column(TIMESTAMP, nullable=True)

    @property
    def progress_percent(self) -> int:
        if not self.progress_total:
            return 0
        return min(100, int(100 * (self.progress_current or 0) / self.progress_total))

    @property
    def is_finished(self) -> bool:
        return self.status in ('SUCCESS', 'FAILURE', 'REVOKED')

    def __repr__(self):
        return f"<TaskExecution(task_id={self.task_id}, status={self.status})>"
