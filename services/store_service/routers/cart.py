"""Store cart router: add, update, remove and view cart rows."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_optional_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.models import Locale, ShippingMethod
from services.store_service.routers._helpers import build_cart_response, get_locale
from services.store_service.schemas import CartItemCreate, CartItemUpdate, CartResponse
from services.store_service.services import cart_ops
from services.store_service.services.cart_ops import CartOwner
from services.store_service.services.pricing import calculate_totals
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])


# ============================================================================
# CART HELPERS
# ============================================================================


def get_cart_owner(
    session_id: Optional[str] = Query(None, description="Guest session ID"),
    current_user: Optional[AuthUser] = Depends(get_optional_user),
) -> CartOwner:
    """Signed-in callers own their cart by user ID, guests by session ID."""
    return CartOwner.resolve(
        current_user.user_id if current_user else None, session_id
    )


async def _cart_response(
    db: AsyncSession,
    owner: CartOwner,
    locale: Locale,
    shipping_method: ShippingMethod = ShippingMethod.REGULAR,
) -> CartResponse:
    items = await cart_ops.list_items(db, owner)
    return build_cart_response(items, calculate_totals(items, shipping_method), locale)


# ============================================================================
# CART ENDPOINTS
# ============================================================================


@router.get("/cart", response_model=CartResponse)
async def get_cart(
    shipping_method: ShippingMethod = Query(ShippingMethod.REGULAR),
    owner: CartOwner = Depends(get_cart_owner),
    locale: Locale = Depends(get_locale),
    db: AsyncSession = Depends(get_async_db),
):
    """Get the caller's cart with totals."""
    return await _cart_response(db, owner, locale, shipping_method)


@router.post("/cart", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    item_in: CartItemCreate,
    owner: CartOwner = Depends(get_cart_owner),
    locale: Locale = Depends(get_locale),
    db: AsyncSession = Depends(get_async_db),
):
    """Add a product (or one of its variants) to the cart."""
    await cart_ops.add_item(db, owner, item_in)
    return await _cart_response(db, owner, locale)


@router.patch("/cart/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: uuid.UUID,
    item_in: CartItemUpdate,
    owner: CartOwner = Depends(get_cart_owner),
    locale: Locale = Depends(get_locale),
    db: AsyncSession = Depends(get_async_db),
):
    """Set the quantity of one of the caller's cart rows."""
    await cart_ops.update_quantity(db, owner, item_id, item_in.quantity)
    return await _cart_response(db, owner, locale)


@router.delete("/cart/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_cart_item(
    item_id: uuid.UUID,
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """Remove one of the caller's cart rows."""
    await cart_ops.remove_item(db, owner, item_id)
