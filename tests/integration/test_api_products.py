"""
Integration tests for the product, variant, bulk and collection endpoints.
"""

import uuid

import pytest

from kct_admin.functions import names

pytestmark = pytest.mark.integration

PRODUCT = {
    "name": "Navy Slim Suit",
    "category": "Suits",
    "sku": "SUIT-NAVY",
    "price": "$349.00",
    "status": "active",
    "tags": "wedding, wool",
    "variants": [
        {"sku": "SUIT-NAVY-38R", "size": "38R", "inventory_quantity": 3},
        {"sku": "SUIT-NAVY-40R", "size": "40R", "inventory_quantity": 12},
    ],
}


@pytest.fixture
def product(client):
    response = client.post("/api/v1/products", json=PRODUCT)
    assert response.status_code == 201
    return response.json()


class TestProducts:
    def test_create_returns_product_with_variants(self, product):
        assert product["base_price"] == 34900
        assert product["tags"] == ["wedding", "wool"]
        assert product["variant_count"] == 2
        assert product["total_inventory"] == 15
        assert {v["sku"]: v["stock_status"] for v in product["variants"]} == {
            "SUIT-NAVY-38R": "low_stock",
            "SUIT-NAVY-40R": "in_stock",
        }

    def test_create_reports_every_missing_field(self, client):
        response = client.post("/api/v1/products", json={"price": "10"})
        assert response.status_code == 400
        assert response.json()["error"]["details"]["errors"] == [
            "Product name is required",
            "Category is required",
            "SKU is required",
        ]

    def test_duplicate_sku(self, client, product):
        response = client.post("/api/v1/products", json=PRODUCT)
        assert response.status_code == 400
        assert "SKU already exists" in response.json()["error"]["message"]

    def test_list_and_filter(self, client, product):
        client.post("/api/v1/products", json={"name": "Tie", "category": "Ties", "sku": "TIE-1"})

        body = client.get("/api/v1/products", params={"status": "active"}).json()
        assert [p["sku"] for p in body["products"]] == ["SUIT-NAVY"]
        assert body["total"] == 1

        body = client.get("/api/v1/products", params={"search": "tie", "limit": 1}).json()
        assert body["total_pages"] == 1
        assert body["products"][0]["sku"] == "TIE-1"

    def test_invalid_sort_is_rejected(self, client):
        response = client.get("/api/v1/products", params={"sort_by": "password"})
        assert response.status_code == 422
        assert response.json()["error"]["type"] == "ValidationError"

    def test_get_update_delete(self, client, product):
        product_id = product["id"]
        assert client.get(f"/api/v1/products/{product_id}").json()["sku"] == "SUIT-NAVY"

        keep = product["variants"][0]
        update = dict(PRODUCT, name="Navy Suit II", variants=[dict(keep, inventory_quantity=7)])
        updated = client.put(f"/api/v1/products/{product_id}", json=update).json()
        assert updated["name"] == "Navy Suit II"
        assert updated["variant_count"] == 1
        assert updated["total_inventory"] == 7

        assert client.delete(f"/api/v1/products/{product_id}").status_code == 204
        assert client.get(f"/api/v1/products/{product_id}").status_code == 404

    def test_unknown_product_is_404(self, client):
        response = client.get(f"/api/v1/products/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"]["type"] == "NotFoundError"

    def test_categories_stats_and_trends(self, client, product):
        assert client.get("/api/v1/products/categories").json() == {
            "categories": ["Suits"], "subcategories": {"Suits": []}
        }

        stats = client.get("/api/v1/products/stats").json()
        assert stats["total_products"] == 1
        assert stats["low_stock_variants"] == 1

        trends = client.get("/api/v1/products/trends", params={"days": 3}).json()
        assert len(trends) == 3
        assert trends[-1]["updates"] == 2

    def test_generate_variants_preview(self, client):
        response = client.post(
            "/api/v1/products/generate-variants",
            json={"sku": "SH-9", "category": "Dress Shirts", "price": "79.00"},
        )
        variants = response.json()
        assert len(variants) == 72
        assert variants[0]["price_cents"] == 7900


class TestImageUpload:
    def test_upload(self, client, product, function_stub):
        function_stub.on(names.PRODUCT_IMAGE_UPLOAD, {"publicUrl": "https://cdn.test/suit.png"})

        response = client.post(
            f"/api/v1/products/{product['id']}/images",
            files={"file": ("suit.png", b"\x89PNG data", "image/png")},
            data={"image_type": "primary"},
        )

        assert response.status_code == 201
        assert response.json()["url"] == "https://cdn.test/suit.png"
        assert client.get(f"/api/v1/products/{product['id']}").json()["primary_image"] \
            == "https://cdn.test/suit.png"

    def test_rejects_non_images(self, client, product, function_stub):
        response = client.post(
            f"/api/v1/products/{product['id']}/images",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )
        assert response.status_code == 400
        assert function_stub.calls == []

    def test_function_failure_is_502(self, client, product, function_stub):
        function_stub.on(names.PRODUCT_IMAGE_UPLOAD, {"error": "bucket missing"}, status_code=500)
        response = client.post(
            f"/api/v1/products/{product['id']}/images",
            files={"file": ("suit.png", b"\x89PNG data", "image/png")},
        )
        assert response.status_code == 502


class TestVariants:
    def test_variant_crud(self, client, product):
        product_id = product["id"]

        created = client.post(
            f"/api/v1/products/{product_id}/variants",
            json={"sku": "SUIT-NAVY-42R", "size": "42R", "inventory_quantity": 1},
        )
        assert created.status_code == 201
        variant_id = created.json()["id"]
        assert len(client.get(f"/api/v1/products/{product_id}/variants").json()) == 3

        patched = client.patch(f"/api/v1/variants/{variant_id}", json={"inventory_quantity": 0})
        assert patched.json()["stock_status"] == "out_of_stock"

        assert client.delete(f"/api/v1/variants/{variant_id}").status_code == 204
        assert client.get(f"/api/v1/products/{product_id}").json()["variant_count"] == 2

    def test_null_for_required_field_is_422(self, client, product):
        variant_id = product["variants"][0]["id"]

        response = client.patch(f"/api/v1/variants/{variant_id}", json={"sku": None})

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "ValidationError"
        skus = [v["sku"] for v in client.get(f"/api/v1/products/{product['id']}/variants").json()]
        assert "SUIT-NAVY-38R" in skus

    def test_low_stock(self, client, product):
        low = client.get("/api/v1/variants/low-stock").json()
        assert [v["sku"] for v in low] == ["SUIT-NAVY-38R"]
        assert low[0]["product_sku"] == "SUIT-NAVY"

    def test_bulk_update(self, client, product):
        ids = [v["id"] for v in product["variants"]]
        missing = str(uuid.uuid4())

        response = client.post("/api/v1/variants/bulk-update", json={"updates": [
            {"id": ids[0], "price_cents": 30000},
            {"id": missing, "price_cents": 1},
        ]})

        assert response.json() == {"updated": [ids[0]], "missing": [missing]}


class TestBulkActions:
    def test_bulk_price_and_status(self, client, product):
        response = client.post("/api/v1/products/bulk/update", json={
            "product_ids": [product["id"]],
            "update": {"status": "draft",
                       "price_adjustment": {"type": "increase", "mode": "percentage", "value": 10}},
        })

        assert response.json()["succeeded"] == [product["id"]]
        refreshed = client.get(f"/api/v1/products/{product['id']}").json()
        assert refreshed["status"] == "draft"
        assert refreshed["base_price"] == 38390

    def test_empty_update_is_rejected(self, client, product):
        response = client.post("/api/v1/products/bulk/update",
                               json={"product_ids": [product["id"]], "update": {}})
        assert response.status_code == 400

    def test_archive_and_delete(self, client, product):
        missing = str(uuid.uuid4())

        archived = client.post("/api/v1/products/bulk/archive", json={"product_ids": [product["id"]]})
        assert archived.json()["total"] == 1

        deleted = client.post("/api/v1/products/bulk/delete",
                              json={"product_ids": [product["id"], missing]})
        assert deleted.json()["failed"] == {missing: "Product not found"}


class TestCollections:
    def test_collection_membership(self, client, product):
        created = client.post("/api/v1/collections", json={"name": "Wedding"})
        assert created.status_code == 201
        collection_id = created.json()["id"]

        added = client.post(f"/api/v1/collections/{collection_id}/products",
                            json={"product_id": product["id"]})
        assert added.status_code == 201

        members = client.get(f"/api/v1/collections/{collection_id}/products").json()
        assert [p["sku"] for p in members] == ["SUIT-NAVY"]
        assert client.get("/api/v1/collections/popular").json()[0]["product_count"] == 1

        renamed = client.patch(f"/api/v1/collections/{collection_id}", json={"name": None})
        assert renamed.status_code == 422
        assert client.get(f"/api/v1/collections/{collection_id}").json()["name"] == "Wedding"

        removed = client.delete(f"/api/v1/collections/{collection_id}/products/{product['id']}")
        assert removed.status_code == 204
        again = client.delete(f"/api/v1/collections/{collection_id}/products/{product['id']}")
        assert again.status_code == 404
