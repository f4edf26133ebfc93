"""Shared request dependencies and response builders for store routers."""

from decimal import Decimal
from typing import Optional

from fastapi import Query
from libs.common.config import get_settings
from libs.common.currency import format_idr
from services.store_service.models import (
    CartItem,
    Category,
    Locale,
    Product,
    ProductVariant,
)
from services.store_service.schemas import (
    CartItemResponse,
    CartResponse,
    CartSummary,
    CategoryResponse,
    ProductDetail,
    ProductResponse,
    ProductVariantResponse,
)
from services.store_service.services.pricing import CartTotals, line_total


def get_locale(
    locale: Optional[Locale] = Query(None, description="Response language (en|id)"),
) -> Locale:
    """Locale for the request, falling back to the configured default."""
    return locale or Locale(get_settings().DEFAULT_LOCALE)


def build_category_response(category: Category, locale: Locale) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.get_name(locale),
        name_en=category.name_en,
        name_id=category.name_id,
        slug=category.slug,
        description=category.get_description(locale),
        image=category.image,
        is_active=category.is_active,
    )


def build_product_response(product: Product, locale: Locale) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        category_id=product.category_id,
        name=product.get_name(locale),
        short_description=product.get_short_description(locale),
        slug=product.slug,
        sku=product.sku,
        base_price=product.base_price,
        formatted_price=format_idr(product.base_price),
        stock_quantity=product.stock_quantity,
        images=[str(url) for url in product.images or []],
        is_active=product.is_active,
        is_featured=product.is_featured,
        created_at=product.created_at,
    )


def build_variant_response(
    variant: ProductVariant, base_price: Decimal
) -> ProductVariantResponse:
    return ProductVariantResponse(
        id=variant.id,
        product_id=variant.product_id,
        size=variant.size,
        color=variant.color,
        sku=variant.sku,
        price_adjustment=variant.price_adjustment,
        stock_quantity=variant.stock_quantity,
        image=variant.image,
        is_active=variant.is_active,
        display_name=variant.display_name,
        final_price=variant.final_price(base_price),
        created_at=variant.created_at,
        updated_at=variant.updated_at,
    )


def build_product_detail(
    product: Product, locale: Locale, include_inactive_variants: bool = False
) -> ProductDetail:
    """Product with variants and category (variants and category must be loaded)."""
    variants = [
        build_variant_response(v, product.base_price)
        for v in product.variants
        if include_inactive_variants or v.is_active
    ]
    card = build_product_response(product, locale)
    return ProductDetail(
        **card.model_dump(),
        name_en=product.name_en,
        name_id=product.name_id,
        description=product.get_description(locale),
        description_en=product.description_en,
        description_id=product.description_id,
        short_description_en=product.short_description_en,
        short_description_id=product.short_description_id,
        weight=product.weight,
        updated_at=product.updated_at,
        variants=variants,
        category=(
            build_category_response(product.category, locale)
            if product.category
            else None
        ),
    )


def build_cart_item_response(item: CartItem, locale: Locale) -> CartItemResponse:
    """Cart line with display data (product and variant must be loaded)."""
    product = item.product
    variant = item.variant
    images = product.images or []

    return CartItemResponse(
        id=item.id,
        product_id=item.product_id,
        product_variant_id=item.product_variant_id,
        quantity=item.quantity,
        price=item.price,
        line_total=line_total(item.quantity, item.price),
        product_name=product.get_name(locale),
        product_slug=product.slug,
        sku=variant.sku if variant else product.sku,
        variant_name=variant.display_name if variant else None,
        image_url=(variant.image if variant and variant.image else None)
        or (images[0] if images else None),
    )


def build_cart_response(
    items: list[CartItem], totals: CartTotals, locale: Locale
) -> CartResponse:
    return CartResponse(
        items=[build_cart_item_response(item, locale) for item in items],
        summary=CartSummary(
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            shipping_cost=totals.shipping_cost,
            total=totals.total,
            shipping_method=totals.shipping_method,
        ),
    )
