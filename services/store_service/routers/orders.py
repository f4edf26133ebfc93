"""Store orders router: checkout and order history."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.error_handler import EmptyCartError
from libs.db.session import get_async_db
from services.store_service.models import Locale, ShippingMethod
from services.store_service.routers._helpers import build_cart_response, get_locale
from services.store_service.schemas import (
    CartResponse,
    CheckoutRequest,
    OrderListResponse,
    OrderResponse,
)
from services.store_service.services import cart_ops, order_ops
from services.store_service.services.cart_ops import CartOwner
from services.store_service.services.pricing import calculate_totals
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])

ORDERS_PER_PAGE = 10


# ============================================================================
# CHECKOUT
# ============================================================================


@router.get("/checkout", response_model=CartResponse)
async def checkout_summary(
    shipping_method: ShippingMethod = Query(ShippingMethod.REGULAR),
    current_user: AuthUser = Depends(get_current_user),
    locale: Locale = Depends(get_locale),
    db: AsyncSession = Depends(get_async_db),
):
    """Cart rows and totals the order will be placed with."""
    items = await cart_ops.list_items(db, CartOwner(user_id=current_user.user_id))
    if not items:
        raise EmptyCartError()

    return build_cart_response(items, calculate_totals(items, shipping_method), locale)


@router.post(
    "/checkout", response_model=OrderResponse, status_code=status.HTTP_201_CREATED
)
async def place_order(
    checkout: CheckoutRequest,
    current_user: AuthUser = Depends(get_current_user),
    locale: Locale = Depends(get_locale),
    db: AsyncSession = Depends(get_async_db),
):
    """Turn the caller's cart into a pending order."""
    return await order_ops.place_order(db, current_user.user_id, checkout, locale)


# ============================================================================
# ORDER HISTORY
# ============================================================================


@router.get("/orders", response_model=OrderListResponse)
async def list_my_orders(
    page: int = Query(1, ge=1),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """List the caller's orders, newest first."""
    orders, total = await order_ops.list_orders(
        db, current_user.user_id, page=page, page_size=ORDERS_PER_PAGE
    )

    return OrderListResponse(
        items=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        page=page,
        page_size=ORDERS_PER_PAGE,
        total_pages=(total + ORDERS_PER_PAGE - 1) // ORDERS_PER_PAGE,
    )


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_my_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Get one of the caller's orders with its items."""
    return await order_ops.get_order(db, current_user.user_id, order_id)
