"""
Product image upload through the product-image-upload function.
"""

import base64
import logging
from typing import Literal
from uuid import UUID

from sqlalchemy.orm import Session

from ..db.models import Product
from ..exceptions import FunctionInvocationError, NotFoundError
from ..functions import EdgeFunctionClient, names

logger = logging.getLogger(__name__)


def upload_product_image(
    session: Session,
    functions: EdgeFunctionClient,
    product_id: UUID,
    filename: str,
    content_type: str,
    data: bytes,
    image_type: Literal["primary", "gallery"] = "primary",
) -> str:
    """
    Upload an image and attach its public URL to the product.

    The URL becomes the primary image when requested and the product has
    none yet; otherwise it is appended to the gallery.

    Returns:
        The public URL of the uploaded image
    """
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)

    encoded = base64.b64encode(data).decode("ascii")
    payload = functions.invoke(
        names.PRODUCT_IMAGE_UPLOAD,
        {
            "imageData": f"data:{content_type};base64,{encoded}",
            "fileName": filename,
            "productId": str(product_id),
            "imageType": image_type,
        },
    )

    url = payload.get("publicUrl") if isinstance(payload, dict) else None
    if not url:
        raise FunctionInvocationError(names.PRODUCT_IMAGE_UPLOAD, "response had no publicUrl")

    if image_type == "primary" and not product.primary_image:
        product.primary_image = url
    else:
        product.image_gallery = list(product.image_gallery or []) + [url]
    session.commit()

    logger.info(f"Uploaded image for product {product.sku}", extra={"url": url})
    return url
