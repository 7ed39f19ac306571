"""
Tests for product image upload.
"""

import base64
import uuid

import pytest

from kct_admin.exceptions import FunctionInvocationError, NotFoundError
from kct_admin.functions import names
from kct_admin.inventory.media import upload_product_image

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def test_first_primary_upload_sets_primary_image(db_session, functions, function_stub, make_product):
    product = make_product(sku="IMG-1")
    function_stub.on(names.PRODUCT_IMAGE_UPLOAD, {"publicUrl": "https://cdn.test/a.png"})

    url = upload_product_image(
        db_session, functions, product.id, "a.png", "image/png", PNG_BYTES
    )

    assert url == "https://cdn.test/a.png"
    db_session.refresh(product)
    assert product.primary_image == url

    body = function_stub.calls_to(names.PRODUCT_IMAGE_UPLOAD)[0]["body"]
    assert body["fileName"] == "a.png"
    assert body["productId"] == str(product.id)
    assert body["imageType"] == "primary"
    assert body["imageData"] == "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


def test_later_uploads_go_to_the_gallery(db_session, functions, function_stub, make_product):
    product = make_product(sku="IMG-2")
    function_stub.sequence(
        names.PRODUCT_IMAGE_UPLOAD,
        [{"publicUrl": "https://cdn.test/1.png"}, {"data": {"publicUrl": "https://cdn.test/2.png"}}],
    )

    upload_product_image(db_session, functions, product.id, "1.png", "image/png", PNG_BYTES)
    upload_product_image(db_session, functions, product.id, "2.png", "image/png", PNG_BYTES)

    db_session.refresh(product)
    assert product.primary_image == "https://cdn.test/1.png"
    assert product.image_gallery == ["https://cdn.test/2.png"]


def test_gallery_upload_appends(db_session, functions, function_stub, make_product):
    product = make_product(sku="IMG-3")
    function_stub.on(names.PRODUCT_IMAGE_UPLOAD, {"publicUrl": "https://cdn.test/g.png"})

    upload_product_image(
        db_session, functions, product.id, "g.png", "image/png", PNG_BYTES, image_type="gallery"
    )

    db_session.refresh(product)
    assert product.primary_image is None
    assert product.image_gallery == ["https://cdn.test/g.png"]


def test_missing_public_url_fails(db_session, functions, function_stub, make_product):
    product = make_product(sku="IMG-4")
    function_stub.on(names.PRODUCT_IMAGE_UPLOAD, {"success": True})

    with pytest.raises(FunctionInvocationError):
        upload_product_image(db_session, functions, product.id, "a.png", "image/png", PNG_BYTES)

    db_session.refresh(product)
    assert product.primary_image is None


def test_unknown_product_is_not_uploaded(db_session, functions, function_stub):
    with pytest.raises(NotFoundError):
        upload_product_image(db_session, functions, uuid.uuid4(), "a.png", "image/png", PNG_BYTES)
    assert function_stub.calls == []
