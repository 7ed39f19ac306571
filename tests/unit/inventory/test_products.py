"""
Tests for product create/edit, listing and deletion.
"""

import uuid

import pytest

from kct_admin.db.models import Product, ProductVariant
from kct_admin.exceptions import NotFoundError, ValidationFailed
from kct_admin.inventory import (
    ProductFilters,
    create_product,
    delete_product,
    get_categories,
    get_product,
    list_products,
    update_product,
)
from kct_admin.models.product import ProductForm, VariantInput


def test_create_product_writes_variants_and_totals(db_session, make_product):
    product = make_product(sku="SUIT-100", variants=[("SUIT-100-38R", 4), ("SUIT-100-40R", 0)])

    assert product.base_price == 29999
    assert product.variant_count == 2
    assert product.total_inventory == 4
    assert product.in_stock is True

    by_sku = {v.sku: v for v in product.variants}
    assert by_sku["SUIT-100-38R"].available_quantity == 4
    assert by_sku["SUIT-100-38R"].stock_status == "low_stock"
    assert by_sku["SUIT-100-40R"].stock_status == "out_of_stock"
    assert by_sku["SUIT-100-40R"].last_inventory_update is not None


def test_create_product_persists_variant_rows(db_session, make_product):
    product = make_product(sku="SUIT-101", variants=[("SUIT-101-38R", 2), ("SUIT-101-40R", 5)])
    product_id = product.id
    db_session.expunge_all()

    rows = db_session.query(ProductVariant).order_by(ProductVariant.sku).all()
    assert [(row.sku, row.inventory_quantity) for row in rows] == [
        ("SUIT-101-38R", 2), ("SUIT-101-40R", 5),
    ]
    assert {row.product_id for row in rows} == {product_id}


def test_create_product_reports_all_missing_fields(db_session):
    with pytest.raises(ValidationFailed) as exc_info:
        create_product(db_session, ProductForm(sku="X-1"))
    assert exc_info.value.errors == ["Product name is required", "Category is required"]
    assert db_session.query(Product).count() == 0


def test_create_product_rejects_duplicate_sku(db_session, make_product):
    make_product(sku="DUP-1")
    with pytest.raises(ValidationFailed) as exc_info:
        make_product(sku="DUP-1")
    assert "SKU already exists: DUP-1" in exc_info.value.message
    assert db_session.query(Product).count() == 1


def test_update_product_reconciles_variants(db_session, make_product):
    product = make_product(sku="SH-1", category="Shirts", variants=[("SH-1-A", 3), ("SH-1-B", 7)])
    keep = next(v for v in product.variants if v.sku == "SH-1-A")

    form = ProductForm(
        name="Renamed Shirt",
        category="Shirts",
        sku="SH-1",
        price="49.50",
        variants=[
            VariantInput(id=keep.id, sku="SH-1-A", inventory_quantity=20),
            VariantInput(sku="SH-1-C", inventory_quantity=1),
        ],
    )
    updated = update_product(db_session, product.id, form)

    assert updated.name == "Renamed Shirt"
    assert updated.base_price == 4950
    assert sorted(v.sku for v in updated.variants) == ["SH-1-A", "SH-1-C"]
    assert updated.total_inventory == 21
    assert db_session.query(ProductVariant).count() == 2
    rows = db_session.query(ProductVariant).filter_by(product_id=product.id).all()
    assert sorted(row.sku for row in rows) == ["SH-1-A", "SH-1-C"]
    assert db_session.query(ProductVariant).filter_by(sku="SH-1-B").first() is None

    kept = db_session.get(ProductVariant, keep.id)
    assert kept.inventory_quantity == 20
    assert kept.stock_status == "in_stock"


def test_update_product_rejects_foreign_variant(db_session, make_product):
    product = make_product(sku="A-1", variants=[("A-1-1", 1)])
    other = make_product(sku="B-1", variants=[("B-1-1", 1)])

    form = ProductForm(
        name="A", category="Suits", sku="A-1",
        variants=[VariantInput(id=other.variants[0].id, sku="B-1-1")],
    )
    with pytest.raises(ValidationFailed):
        update_product(db_session, product.id, form)


def test_update_missing_product(db_session):
    form = ProductForm(name="A", category="Suits", sku="A-1")
    with pytest.raises(NotFoundError):
        update_product(db_session, uuid.uuid4(), form)


def test_get_product_loads_variants(db_session, make_product):
    product = make_product(sku="G-1", variants=[("G-1-1", 2)])
    fetched = get_product(db_session, product.id)
    assert [v.sku for v in fetched.variants] == ["G-1-1"]

    with pytest.raises(NotFoundError):
        get_product(db_session, uuid.uuid4())


def test_delete_product_removes_variants(db_session, make_product):
    product = make_product(sku="D-1", variants=[("D-1-1", 2), ("D-1-2", 0)])
    delete_product(db_session, product.id)

    assert db_session.query(Product).count() == 0
    assert db_session.query(ProductVariant).count() == 0

    with pytest.raises(NotFoundError):
        delete_product(db_session, product.id)


class TestListProducts:
    @pytest.fixture(autouse=True)
    def catalog(self, make_product):
        make_product(sku="SUIT-NAVY", name="Navy Suit", category="Suits",
                     variants=[("SUIT-NAVY-40R", 3)], tags=["wedding", "wool"])
        make_product(sku="TIE-RED", name="Red Silk Tie", category="Ties", price="25",
                     status="draft", tags=["silk"])
        make_product(sku="SHIRT-WHT", name="White Shirt", category="Shirts", price="60",
                     variants=[("SHIRT-WHT-15", 0)])

    def test_defaults_return_everything(self, db_session):
        page = list_products(db_session)
        assert page.total == 3
        assert page.total_pages == 1
        assert page.current_page == 1

    def test_search_covers_name_sku_and_tags(self, db_session):
        assert [p.sku for p in list_products(db_session, ProductFilters(search="navy")).products] \
            == ["SUIT-NAVY"]
        assert [p.sku for p in list_products(db_session, ProductFilters(search="tie-")).products] \
            == ["TIE-RED"]
        assert [p.sku for p in list_products(db_session, ProductFilters(search="wool")).products] \
            == ["SUIT-NAVY"]

    def test_filters_combine(self, db_session):
        page = list_products(db_session, ProductFilters(status="active", stock_status="in_stock"))
        assert [p.sku for p in page.products] == ["SUIT-NAVY"]

        page = list_products(db_session, ProductFilters(stock_status="out_of_stock"))
        assert sorted(p.sku for p in page.products) == ["SHIRT-WHT", "TIE-RED"]

        page = list_products(db_session, ProductFilters(category="Ties"))
        assert [p.sku for p in page.products] == ["TIE-RED"]

    def test_sorting_and_pagination(self, db_session):
        filters = ProductFilters(sort_by="base_price", sort_order="asc", limit=2, page=1)
        first = list_products(db_session, filters)
        assert [p.sku for p in first.products] == ["TIE-RED", "SHIRT-WHT"]
        assert first.total == 3
        assert first.total_pages == 2

        second = list_products(db_session, filters.model_copy(update={"page": 2}))
        assert [p.sku for p in second.products] == ["SUIT-NAVY"]


def test_get_categories_groups_subcategories(db_session, make_product):
    make_product(sku="S-1", category="Suits", subcategory="Slim Fit")
    make_product(sku="S-2", category="Suits", subcategory="Classic")
    make_product(sku="T-1", category="Ties")

    tree = get_categories(db_session)
    assert tree.categories == ["Suits", "Ties"]
    assert tree.subcategories == {"Suits": ["Classic", "Slim Fit"], "Ties": []}
