"""Order placement and order history.

Placing an order turns the shopper's cart rows into an ``Order`` plus one
``OrderItem`` snapshot per row and empties the cart, all in one transaction:
either the order, its items and the cart clear are all committed, or none of
them are.
"""

import random
import string
import uuid
from datetime import datetime
from typing import Optional

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.error_handler import EmptyCartError, NotFoundError, StorageError
from libs.common.logging import get_logger
from services.store_service.models import (
    CartItem,
    Locale,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
)
from services.store_service.schemas import CheckoutRequest
from services.store_service.services import cart_ops
from services.store_service.services.cart_ops import CartOwner
from services.store_service.services.pricing import calculate_totals, line_total
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

ORDER_NUMBER_PREFIX = "ORD"
ORDER_NUMBER_SUFFIX_LENGTH = 6
MAX_ORDER_NUMBER_ATTEMPTS = 5


def generate_order_number(now: Optional[datetime] = None) -> str:
    """Generate an order number like ORD-20260104-A1B2C3."""
    date_part = (now or utc_now()).strftime("%Y%m%d")
    random_part = "".join(
        random.choices(string.ascii_uppercase + string.digits, k=ORDER_NUMBER_SUFFIX_LENGTH)
    )
    return f"{ORDER_NUMBER_PREFIX}-{date_part}-{random_part}"


async def _order_number_taken(db: AsyncSession, order_number: str) -> bool:
    query = select(Order.id).where(Order.order_number == order_number)
    return (await db.execute(query)).first() is not None


async def _unused_order_number(db: AsyncSession) -> str:
    """Draw order numbers until one is free."""
    for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
        candidate = generate_order_number()
        if not await _order_number_taken(db, candidate):
            return candidate
        logger.warning("Order number %s already taken, drawing again", candidate)
    raise StorageError("Could not allocate an order number. Please try again.")


def _snapshot_item(cart_item: CartItem, locale: Locale) -> OrderItem:
    """Copy a cart row into an order line that later catalog edits can't touch."""
    product = cart_item.product
    variant = cart_item.variant

    return OrderItem(
        product_id=cart_item.product_id,
        product_variant_id=cart_item.product_variant_id,
        quantity=cart_item.quantity,
        price=cart_item.price,
        total=line_total(cart_item.quantity, cart_item.price),
        product_name=product.get_name(locale),
        product_sku=variant.sku if variant else product.sku,
        product_details={
            "size": variant.size if variant else None,
            "color": variant.color if variant else None,
            "variant_sku": variant.sku if variant else None,
        },
    )


async def place_order(
    db: AsyncSession,
    user_id: str,
    checkout: CheckoutRequest,
    locale: Locale = Locale.EN,
) -> Order:
    """Convert the user's cart into a pending order and empty the cart.

    Totals are always recomputed from the stored cart rows. Stock levels are not
    touched. If another checkout claims the same order number between the
    lookup and the commit, the whole transaction is retried with a new number.
    """
    owner = CartOwner(user_id=user_id)

    for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
        cart_items = await cart_ops.list_items(db, owner)
        if not cart_items:
            raise EmptyCartError()

        totals = calculate_totals(cart_items, checkout.shipping_method)
        order_number = None

        try:
            order_number = await _unused_order_number(db)
            order = Order(
                order_number=order_number,
                user_id=user_id,
                status=OrderStatus.PENDING,
                subtotal=totals.subtotal,
                tax_amount=totals.tax_amount,
                shipping_cost=totals.shipping_cost,
                total=totals.total,
                currency=get_settings().CURRENCY,
                billing_address=checkout.billing_address.model_dump(),
                shipping_address=checkout.shipping_address.model_dump(),
                payment_method=checkout.payment_method,
                payment_status=PaymentStatus.PENDING,
                shipping_method=checkout.shipping_method,
                notes=checkout.notes,
                locale=Locale(locale).value,
                items=[_snapshot_item(item, locale) for item in cart_items],
            )
            db.add(order)
            await db.flush()

            await cart_ops.clear(db, owner)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            if order_number is None or not await _order_number_taken(db, order_number):
                logger.exception(
                    "Order placement failed for user %s; rolled back", user_id
                )
                raise StorageError()
            logger.warning(
                "Order number %s was claimed by a concurrent checkout, retrying",
                order_number,
            )
            continue
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Order placement failed for user %s; rolled back", user_id)
            raise StorageError()
        except StorageError:
            await db.rollback()
            raise

        logger.info(
            "Placed order %s for user %s: %d items, total %s %s",
            order.order_number,
            user_id,
            len(order.items),
            order.total,
            order.currency,
        )
        return order

    raise StorageError("Could not allocate an order number. Please try again.")


async def list_orders(
    db: AsyncSession, user_id: str, page: int = 1, page_size: int = 10
) -> tuple[list[Order], int]:
    """The user's orders, newest first."""
    total = (
        await db.execute(
            select(func.count()).select_from(Order).where(Order.user_id == user_id)
        )
    ).scalar() or 0

    query = (
        select(Order)
        .where(Order.user_id == user_id)
        .options(selectinload(Order.items))
        .order_by(Order.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def get_order(db: AsyncSession, user_id: str, order_id: uuid.UUID) -> Order:
    """One of the user's orders; other users' orders read as missing."""
    query = (
        select(Order)
        .where(Order.id == order_id, Order.user_id == user_id)
        .options(selectinload(Order.items))
    )
    order = (await db.execute(query)).scalar_one_or_none()
    if not order:
        raise NotFoundError("Order")
    return order
