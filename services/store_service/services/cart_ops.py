"""Cart operations scoped to a single owner key.

A signed-in shopper's rows are keyed by ``user_id``; an anonymous shopper's
rows by ``session_id``. Exactly one of the two is set on every row, and
anonymous rows are never folded into an account on sign-in.
"""

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from libs.common.error_handler import NotFoundError, ValidationError
from libs.common.logging import get_logger
from services.store_service.models import CartItem, Product, ProductVariant
from services.store_service.schemas import CartItemCreate
from sqlalchemy import ColumnElement, delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)


@dataclass(frozen=True)
class CartOwner:
    """Owner key for cart rows."""

    user_id: Optional[str] = None
    session_id: Optional[str] = None

    def __post_init__(self):
        if bool(self.user_id) == bool(self.session_id):
            raise ValidationError(
                {"session_id": "A session ID is required for guest carts."}
            )

    @classmethod
    def resolve(cls, user_id: Optional[str], session_id: Optional[str]) -> "CartOwner":
        """Signed-in users are always scoped by user ID."""
        if user_id:
            return cls(user_id=user_id)
        return cls(session_id=session_id)

    def clause(self) -> ColumnElement[bool]:
        if self.user_id:
            return CartItem.user_id == self.user_id
        return CartItem.session_id == self.session_id

    def __str__(self) -> str:
        return f"user:{self.user_id}" if self.user_id else f"session:{self.session_id}"


def unit_price_for(product: Product, variant: Optional[ProductVariant]) -> Decimal:
    """Variant price (base plus adjustment) or the base price."""
    return variant.final_price(product.base_price) if variant else product.base_price


async def list_items(db: AsyncSession, owner: CartOwner) -> list[CartItem]:
    """All rows for the owner, oldest first, with product and variant loaded."""
    query = (
        select(CartItem)
        .where(owner.clause())
        .options(selectinload(CartItem.product), selectinload(CartItem.variant))
        .order_by(CartItem.created_at, CartItem.id)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def _get_owned_item(
    db: AsyncSession, owner: CartOwner, item_id: uuid.UUID
) -> CartItem:
    query = select(CartItem).where(CartItem.id == item_id, owner.clause())
    cart_item = (await db.execute(query)).scalar_one_or_none()
    if not cart_item:
        raise NotFoundError("Cart item")
    return cart_item


async def add_item(
    db: AsyncSession, owner: CartOwner, item_in: CartItemCreate
) -> CartItem:
    """Add a product (optionally a variant) to the owner's cart.

    Adding an existing (product, variant) pair bumps the quantity and keeps the
    price captured by the first add.
    """
    product = (
        await db.execute(
            select(Product).where(
                Product.id == item_in.product_id, Product.is_active.is_(True)
            )
        )
    ).scalar_one_or_none()
    if not product:
        raise NotFoundError("Product")

    variant = None
    if item_in.product_variant_id:
        variant = (
            await db.execute(
                select(ProductVariant).where(
                    ProductVariant.id == item_in.product_variant_id,
                    ProductVariant.product_id == product.id,
                    ProductVariant.is_active.is_(True),
                )
            )
        ).scalar_one_or_none()
        if not variant:
            raise NotFoundError("Product variant")

    unit_price = unit_price_for(product, variant)

    # Check if item already in cart
    variant_clause = (
        CartItem.product_variant_id == variant.id
        if variant
        else CartItem.product_variant_id.is_(None)
    )
    existing_query = select(CartItem).where(
        owner.clause(), CartItem.product_id == product.id, variant_clause
    )
    cart_item = (await db.execute(existing_query)).scalar_one_or_none()

    if cart_item:
        cart_item.quantity += item_in.quantity
    else:
        cart_item = CartItem(
            user_id=owner.user_id,
            session_id=owner.session_id,
            product=product,
            variant=variant,
            quantity=item_in.quantity,
            price=unit_price,
        )
        db.add(cart_item)

    await db.commit()
    await db.refresh(cart_item)

    logger.info(
        "Cart %s: added %d x %s (row %s, qty now %d)",
        owner,
        item_in.quantity,
        variant.sku if variant else product.sku,
        cart_item.id,
        cart_item.quantity,
    )
    return cart_item


async def update_quantity(
    db: AsyncSession, owner: CartOwner, item_id: uuid.UUID, quantity: int
) -> CartItem:
    if quantity < 1:
        raise ValidationError({"quantity": "Quantity must be at least 1."})

    cart_item = await _get_owned_item(db, owner, item_id)
    cart_item.quantity = quantity
    await db.commit()
    await db.refresh(cart_item)
    return cart_item


async def remove_item(db: AsyncSession, owner: CartOwner, item_id: uuid.UUID) -> None:
    cart_item = await _get_owned_item(db, owner, item_id)
    await db.delete(cart_item)
    await db.commit()
    logger.info("Cart %s: removed row %s", owner, item_id)


async def clear(db: AsyncSession, owner: CartOwner) -> None:
    """Delete every row for the owner without committing.

    The caller owns the transaction (order placement commits this together with
    the order it creates).
    """
    await db.execute(
        delete(CartItem).where(owner.clause()).execution_options(
            synchronize_session="fetch"
        )
    )
