"""Read-only catalog queries for the public storefront and admin lists."""

import uuid
from dataclasses import dataclass
from typing import Optional

from libs.common.error_handler import NotFoundError
from services.store_service.models import Category, Locale, Product
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

FEATURED_LIMIT = 8
RELATED_LIMIT = 4
LIKE_ESCAPE = "\\"


@dataclass
class ProductFilter:
    """Filters for product listings.

    ``active`` / ``featured`` of None mean "don't filter". With no
    ``locale`` the search covers both name columns.
    """

    category_id: Optional[uuid.UUID] = None
    search: Optional[str] = None
    active: Optional[bool] = True
    featured: Optional[bool] = None
    locale: Optional[Locale] = None


def _contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` literally anywhere in the column."""
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _apply_filter(query: Select, filters: ProductFilter) -> Select:
    if filters.active is not None:
        query = query.where(Product.is_active.is_(filters.active))

    if filters.featured is not None:
        query = query.where(Product.is_featured.is_(filters.featured))

    if filters.category_id:
        query = query.where(Product.category_id == filters.category_id)

    if filters.search:
        search_term = _contains_pattern(filters.search)

        def matches(column):
            return column.ilike(search_term, escape=LIKE_ESCAPE)

        if filters.locale is None:
            name_clause = or_(matches(Product.name_en), matches(Product.name_id))
        elif Locale(filters.locale) == Locale.ID:
            name_clause = matches(Product.name_id)
        else:
            name_clause = matches(Product.name_en)
        query = query.where(or_(name_clause, matches(Product.sku)))

    return query


async def list_products(
    db: AsyncSession,
    filters: ProductFilter,
    page: int = 1,
    page_size: int = 12,
    featured_first: bool = True,
) -> tuple[list[Product], int]:
    """Return one page of products plus the total match count.

    Storefront listings put featured products first; admin listings are
    newest first.
    """
    query = _apply_filter(select(Product), filters)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    if featured_first:
        query = query.order_by(Product.is_featured.desc())
    query = (
        query.order_by(Product.created_at.desc(), Product.id)
        .options(selectinload(Product.category))
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def list_featured_products(
    db: AsyncSession, limit: int = FEATURED_LIMIT
) -> list[Product]:
    query = _apply_filter(select(Product), ProductFilter(active=True, featured=True))
    query = query.order_by(Product.created_at.desc()).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_product_by_slug(db: AsyncSession, slug: str) -> Product:
    """Active product with its variants and category."""
    query = (
        select(Product)
        .where(Product.slug == slug, Product.is_active.is_(True))
        .options(
            selectinload(Product.variants),
            selectinload(Product.category),
        )
    )
    product = (await db.execute(query)).scalar_one_or_none()
    if not product:
        raise NotFoundError("Product")
    return product


async def get_related_products(
    db: AsyncSession, product: Product, limit: int = RELATED_LIMIT
) -> list[Product]:
    """Other active products from the same category."""
    query = _apply_filter(
        select(Product), ProductFilter(category_id=product.category_id)
    )
    query = query.where(Product.id != product.id).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def list_categories(db: AsyncSession, active_only: bool = True) -> list[Category]:
    query = select(Category)
    if active_only:
        query = query.where(Category.is_active.is_(True))
    query = query.order_by(Category.name_en)
    result = await db.execute(query)
    return list(result.scalars().all())
