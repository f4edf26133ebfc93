"""Admin product and variant management."""

import uuid
from decimal import Decimal
from typing import Any, Optional

from libs.common.error_handler import NotFoundError, ValidationError
from libs.common.logging import get_logger
from services.store_service.models import Category, Product, ProductVariant
from services.store_service.schemas import (
    ProductCreate,
    ProductUpdate,
    ProductVariantCreate,
    ProductVariantUpdate,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

# Columns that are NOT NULL; a partial update may omit them but not blank them.
REQUIRED_PRODUCT_FIELDS = (
    "category_id",
    "name_en",
    "name_id",
    "slug",
    "base_price",
    "sku",
    "stock_quantity",
    "images",
    "is_active",
    "is_featured",
)
REQUIRED_VARIANT_FIELDS = ("sku", "price_adjustment", "stock_quantity", "is_active")


def _product_values(data: dict[str, Any]) -> dict[str, Any]:
    """Convert validated input into column values (URLs become plain strings)."""
    if data.get("images") is not None:
        data["images"] = [str(url) for url in data["images"]]
    return data


def _reject_nulls(data: dict[str, Any], fields: tuple[str, ...]) -> None:
    errors = {
        field: "This field is required."
        for field in fields
        if field in data and data[field] is None
    }
    if errors:
        raise ValidationError(errors)


def _check_variant_price(base_price: Decimal, price_adjustment: Decimal) -> None:
    if base_price + price_adjustment < 0:
        raise ValidationError(
            {"price_adjustment": "The variant price cannot be below zero."}
        )


async def _validate_product_fields(
    db: AsyncSession,
    data: dict[str, Any],
    product_id: Optional[uuid.UUID] = None,
) -> None:
    errors: dict[str, str] = {}

    if data.get("category_id") is not None:
        category = await db.get(Category, data["category_id"])
        if not category:
            errors["category_id"] = "Selected category is invalid."

    for field in ("slug", "sku"):
        value = data.get(field)
        if value is None:
            continue
        query = select(Product.id).where(getattr(Product, field) == value)
        if product_id:
            query = query.where(Product.id != product_id)
        if (await db.execute(query)).first():
            errors[field] = f"This {field} is already taken by another product."

    if errors:
        raise ValidationError(errors)


async def _validate_variant_sku(
    db: AsyncSession, sku: Optional[str], variant_id: Optional[uuid.UUID] = None
) -> None:
    if sku is None:
        return
    query = select(ProductVariant.id).where(ProductVariant.sku == sku)
    if variant_id:
        query = query.where(ProductVariant.id != variant_id)
    if (await db.execute(query)).first():
        raise ValidationError({"sku": "This SKU is already taken by another variant."})


async def get_product(db: AsyncSession, product_id: uuid.UUID) -> Product:
    """Any product (active or not) with variants and category."""
    query = (
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.variants), selectinload(Product.category))
        .execution_options(populate_existing=True)
    )
    product = (await db.execute(query)).scalar_one_or_none()
    if not product:
        raise NotFoundError("Product")
    return product


async def create_product(db: AsyncSession, product_in: ProductCreate) -> Product:
    data = product_in.model_dump()
    await _validate_product_fields(db, data)

    product = Product(**_product_values(data))
    db.add(product)
    await db.commit()

    logger.info("Created product %s (%s)", product.sku, product.id)
    return await get_product(db, product.id)


async def update_product(
    db: AsyncSession, product_id: uuid.UUID, product_in: ProductUpdate
) -> Product:
    product = await get_product(db, product_id)

    update_data = product_in.model_dump(exclude_unset=True)
    _reject_nulls(update_data, REQUIRED_PRODUCT_FIELDS)
    await _validate_product_fields(db, update_data, product_id=product.id)

    if "base_price" in update_data and product.variants:
        lowest = min(v.price_adjustment for v in product.variants)
        if update_data["base_price"] + lowest < 0:
            raise ValidationError(
                {"base_price": "A variant of this product would be priced below zero."}
            )

    for field, value in _product_values(update_data).items():
        setattr(product, field, value)

    await db.commit()
    logger.info("Updated product %s: %s", product.sku, sorted(update_data))
    return await get_product(db, product.id)


async def delete_product(db: AsyncSession, product_id: uuid.UUID) -> None:
    """Hard delete. Variants and cart rows go with it; order lines keep their
    snapshot."""
    product = await get_product(db, product_id)
    await db.delete(product)
    await db.commit()
    logger.info("Deleted product %s (%s)", product.sku, product_id)


async def _get_variant(
    db: AsyncSession, product_id: uuid.UUID, variant_id: uuid.UUID
) -> ProductVariant:
    query = (
        select(ProductVariant)
        .where(ProductVariant.id == variant_id, ProductVariant.product_id == product_id)
        .options(selectinload(ProductVariant.product))
    )
    variant = (await db.execute(query)).scalar_one_or_none()
    if not variant:
        raise NotFoundError("Product variant")
    return variant


async def create_variant(
    db: AsyncSession, product_id: uuid.UUID, variant_in: ProductVariantCreate
) -> ProductVariant:
    product = await get_product(db, product_id)
    await _validate_variant_sku(db, variant_in.sku)
    _check_variant_price(product.base_price, variant_in.price_adjustment)

    variant = ProductVariant(product=product, **variant_in.model_dump())
    db.add(variant)
    await db.commit()
    logger.info("Created variant %s for product %s", variant.sku, product.sku)
    return variant


async def update_variant(
    db: AsyncSession,
    product_id: uuid.UUID,
    variant_id: uuid.UUID,
    variant_in: ProductVariantUpdate,
) -> ProductVariant:
    variant = await _get_variant(db, product_id, variant_id)

    update_data = variant_in.model_dump(exclude_unset=True)
    _reject_nulls(update_data, REQUIRED_VARIANT_FIELDS)
    await _validate_variant_sku(db, update_data.get("sku"), variant_id=variant.id)
    if "price_adjustment" in update_data:
        _check_variant_price(
            variant.product.base_price, update_data["price_adjustment"]
        )

    for field, value in update_data.items():
        setattr(variant, field, value)

    await db.commit()
    return variant


async def delete_variant(
    db: AsyncSession, product_id: uuid.UUID, variant_id: uuid.UUID
) -> None:
    variant = await _get_variant(db, product_id, variant_id)
    await db.delete(variant)
    await db.commit()
