"""
Product Endpoints
Catalog listing, the product wizard and image upload.

Endpoints:
GET    /api/v1/products                      - Paginated, filtered product list
GET    /api/v1/products/categories           - Categories and their subcategories
GET    /api/v1/products/stats                - Inventory dashboard counters
GET    /api/v1/products/trends               - Daily inventory activity
POST   /api/v1/products/generate-variants    - Preview variants for a SKU and category
POST   /api/v1/products                      - Create a product with its variants
GET    /api/v1/products/{product_id}         - Product with variants
PUT    /api/v1/products/{product_id}         - Update a product and reconcile variants
DELETE /api/v1/products/{product_id}         - Delete a product
POST   /api/v1/products/{product_id}/images  - Upload a product image
"""

import logging
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from ...config.settings import Settings, get_settings
from ...functions import EdgeFunctionClient
from ...inventory import (
    ProductFilters,
    create_product,
    delete_product,
    generate_variants,
    get_categories,
    get_dashboard_stats,
    get_inventory_trends,
    get_product,
    list_products,
    update_product,
)
from ...inventory.media import upload_product_image
from ...models.money import dollars_to_cents
from ...models.product import ProductForm, VariantInput
from ..dependencies import get_db, get_function_client, verify_api_key
from ..errors import InvalidRequestError
from ..schemas.products import (
    CategoriesResponse,
    GenerateVariantsRequest,
    ImageUploadResponse,
    ProductListResponse,
    ProductResponse,
    ProductSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/products", tags=["products"], dependencies=[Depends(verify_api_key)]
)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}


@router.get("", response_model=ProductListResponse)
def get_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    category: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    stock_status: Optional[Literal["in_stock", "out_of_stock"]] = None,
    sort_by: Literal[
        "created_at", "updated_at", "name", "base_price", "total_inventory", "sku"
    ] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
) -> ProductListResponse:
    filters = ProductFilters(
        page=page,
        limit=limit,
        search=search,
        category=category,
        status=status_filter,
        stock_status=stock_status,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = list_products(db, filters)

    return ProductListResponse(
        products=[ProductSummary.model_validate(p) for p in result.products],
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.current_page,
    )


@router.get("/categories", response_model=CategoriesResponse)
def categories(db: Session = Depends(get_db)) -> CategoriesResponse:
    tree = get_categories(db)
    return CategoriesResponse(categories=tree.categories, subcategories=tree.subcategories)


@router.get("/stats")
def dashboard_stats(
    settings: Settings = Depends(get_settings), db: Session = Depends(get_db)
) -> Dict[str, Any]:
    return get_dashboard_stats(db, low_stock_threshold=settings.low_stock_threshold)


@router.get("/trends")
def inventory_trends(
    days: int = Query(30, ge=1, le=365), db: Session = Depends(get_db)
) -> List[Dict[str, Any]]:
    return get_inventory_trends(db, days=days)


@router.post("/generate-variants", response_model=List[VariantInput])
def preview_variants(request: GenerateVariantsRequest) -> List[VariantInput]:
    """Variants the wizard would create for this SKU and category (nothing is saved)."""
    return generate_variants(request.sku, request.category, dollars_to_cents(request.price))


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create(form: ProductForm, db: Session = Depends(get_db)) -> ProductResponse:
    product = create_product(db, form)
    return ProductResponse.model_validate(product)


@router.get("/{product_id}", response_model=ProductResponse)
def get_one(product_id: UUID, db: Session = Depends(get_db)) -> ProductResponse:
    return ProductResponse.model_validate(get_product(db, product_id))


@router.put("/{product_id}", response_model=ProductResponse)
def update(product_id: UUID, form: ProductForm, db: Session = Depends(get_db)) -> ProductResponse:
    product = update_product(db, product_id, form)
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(product_id: UUID, db: Session = Depends(get_db)) -> None:
    delete_product(db, product_id)


@router.post(
    "/{product_id}/images", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED
)
def upload_image(
    product_id: UUID,
    file: UploadFile = File(...),
    image_type: Literal["primary", "gallery"] = Form("primary"),
    db: Session = Depends(get_db),
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> ImageUploadResponse:
    """Upload an image through the image function and attach it to the product."""
    content_type = file.content_type or "application/octet-stream"
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise InvalidRequestError(f"Unsupported image type: {content_type}")

    data = file.file.read()
    if not data:
        raise InvalidRequestError("Uploaded image is empty")

    url = upload_product_image(
        db,
        functions,
        product_id,
        filename=file.filename or f"{product_id}.img",
        content_type=content_type,
        data=data,
        image_type=image_type,
    )
    return ImageUploadResponse(product_id=product_id, url=url, image_type=image_type)
