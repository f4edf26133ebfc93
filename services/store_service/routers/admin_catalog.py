"""Admin store catalog router: products and variants."""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.models import Locale
from services.store_service.routers._helpers import (
    build_product_detail,
    build_product_response,
    build_variant_response,
    get_locale,
)
from services.store_service.schemas import (
    ProductCreate,
    ProductDetail,
    ProductListResponse,
    ProductUpdate,
    ProductVariantCreate,
    ProductVariantResponse,
    ProductVariantUpdate,
)
from services.store_service.services import catalog_admin, catalog_queries
from services.store_service.services.catalog_queries import ProductFilter
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["admin-store"])


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/products", response_model=ProductListResponse)
async def list_all_products(
    search: Optional[str] = None,
    category: Optional[uuid.UUID] = None,
    status_filter: Optional[Literal["active", "inactive"]] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(15, ge=1, le=100),
    locale: Locale = Depends(get_locale),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List all products (including inactive), newest first."""
    filters = ProductFilter(
        category_id=category,
        search=search,
        active=None if status_filter is None else status_filter == "active",
    )
    products, total = await catalog_queries.list_products(
        db, filters, page=page, page_size=page_size, featured_first=False
    )

    return ProductListResponse(
        items=[build_product_response(p, locale) for p in products],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=(total + page_size - 1) // page_size,
    )


@router.post(
    "/products", response_model=ProductDetail, status_code=status.HTTP_201_CREATED
)
async def create_product(
    product_in: ProductCreate,
    locale: Locale = Depends(get_locale),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a new product."""
    product = await catalog_admin.create_product(db, product_in)
    return build_product_detail(product, locale, include_inactive_variants=True)


@router.get("/products/{product_id}", response_model=ProductDetail)
async def get_product_admin(
    product_id: uuid.UUID,
    locale: Locale = Depends(get_locale),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Get product detail (admin view, includes inactive products and variants)."""
    product = await catalog_admin.get_product(db, product_id)
    return build_product_detail(product, locale, include_inactive_variants=True)


@router.patch("/products/{product_id}", response_model=ProductDetail)
async def update_product(
    product_id: uuid.UUID,
    product_in: ProductUpdate,
    locale: Locale = Depends(get_locale),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update a product."""
    product = await catalog_admin.update_product(db, product_id, product_in)
    return build_product_detail(product, locale, include_inactive_variants=True)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a product and its variants."""
    await catalog_admin.delete_product(db, product_id)


# ============================================================================
# PRODUCT VARIANTS
# ============================================================================


@router.post(
    "/products/{product_id}/variants",
    response_model=ProductVariantResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_variant(
    product_id: uuid.UUID,
    variant_in: ProductVariantCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Add a variant to a product."""
    variant = await catalog_admin.create_variant(db, product_id, variant_in)
    return build_variant_response(variant, variant.product.base_price)


@router.patch(
    "/products/{product_id}/variants/{variant_id}",
    response_model=ProductVariantResponse,
)
async def update_variant(
    product_id: uuid.UUID,
    variant_id: uuid.UUID,
    variant_in: ProductVariantUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update a product variant."""
    variant = await catalog_admin.update_variant(db, product_id, variant_id, variant_in)
    return build_variant_response(variant, variant.product.base_price)


@router.delete(
    "/products/{product_id}/variants/{variant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_variant(
    product_id: uuid.UUID,
    variant_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a product variant."""
    await catalog_admin.delete_variant(db, product_id, variant_id)
