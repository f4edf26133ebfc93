"""Store catalog router: home page, products, categories."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.db.session import get_async_db
from services.store_service.models import Locale
from services.store_service.routers._helpers import (
    build_category_response,
    build_product_detail,
    build_product_response,
    get_locale,
)
from services.store_service.schemas import (
    CategoryResponse,
    HomeResponse,
    ProductListResponse,
    ProductPageResponse,
)
from services.store_service.services import catalog_queries
from services.store_service.services.catalog_queries import ProductFilter
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])

PRODUCTS_PER_PAGE = 12


# ============================================================================
# CATALOG - HOME
# ============================================================================


@router.get("/", response_model=HomeResponse)
async def home(
    locale: Locale = Depends(get_locale),
    db: AsyncSession = Depends(get_async_db),
):
    """Featured products for the storefront home page."""
    products = await catalog_queries.list_featured_products(db)
    return HomeResponse(
        featured_products=[build_product_response(p, locale) for p in products],
        locale=locale,
    )


# ============================================================================
# CATALOG - CATEGORIES
# ============================================================================


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(
    locale: Locale = Depends(get_locale),
    db: AsyncSession = Depends(get_async_db),
):
    """List all active categories."""
    categories = await catalog_queries.list_categories(db)
    return [build_category_response(c, locale) for c in categories]


# ============================================================================
# CATALOG - PRODUCTS
# ============================================================================


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    category: Optional[uuid.UUID] = Query(None, description="Category ID"),
    search: Optional[str] = Query(None, description="Search name or SKU"),
    page: int = Query(1, ge=1),
    locale: Locale = Depends(get_locale),
    db: AsyncSession = Depends(get_async_db),
):
    """List active products, featured first."""
    filters = ProductFilter(category_id=category, search=search, locale=locale)
    products, total = await catalog_queries.list_products(
        db, filters, page=page, page_size=PRODUCTS_PER_PAGE
    )

    return ProductListResponse(
        items=[build_product_response(p, locale) for p in products],
        total=total,
        page=page,
        page_size=PRODUCTS_PER_PAGE,
        total_pages=(total + PRODUCTS_PER_PAGE - 1) // PRODUCTS_PER_PAGE,
    )


@router.get("/products/{slug}", response_model=ProductPageResponse)
async def get_product(
    slug: str,
    locale: Locale = Depends(get_locale),
    db: AsyncSession = Depends(get_async_db),
):
    """Get product detail by slug, with related products."""
    product = await catalog_queries.get_product_by_slug(db, slug)
    related = await catalog_queries.get_related_products(db, product)

    return ProductPageResponse(
        product=build_product_detail(product, locale),
        related_products=[build_product_response(p, locale) for p in related],
    )
