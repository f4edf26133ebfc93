"""Admin dashboard statistics."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from libs.common.currency import quantize_amount
from libs.common.datetime_utils import subtract_months, subtract_years, utc_now
from services.store_service.models import (
    Category,
    Locale,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    Product,
    SalesPeriod,
)
from services.store_service.schemas import DashboardStats, SalesSeries, TopProduct
from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

RECENT_ORDERS_LIMIT = 5
TOP_PRODUCTS_LIMIT = 5


def period_start(period: SalesPeriod, now: datetime) -> datetime:
    """Start of the lookback window for a sales period."""
    if period == SalesPeriod.WEEKLY:
        return now - timedelta(weeks=12)
    if period == SalesPeriod.MONTHLY:
        return subtract_months(now, 12)
    if period == SalesPeriod.YEARLY:
        return subtract_years(now, 5)
    return now - timedelta(days=30)


def bucket_key(period: SalesPeriod, value: datetime) -> str:
    """Label of the bucket an order falls into, e.g. '2026-W07' for weekly."""
    if period == SalesPeriod.WEEKLY:
        iso_year, iso_week, _ = value.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if period == SalesPeriod.MONTHLY:
        return value.strftime("%Y-%m")
    if period == SalesPeriod.YEARLY:
        return value.strftime("%Y")
    return value.strftime("%Y-%m-%d")


async def _count(db: AsyncSession, query) -> int:
    return (await db.execute(query)).scalar() or 0


async def get_dashboard_stats(db: AsyncSession) -> DashboardStats:
    """Headline counts.

    Customer accounts live with the identity provider, so customers are counted
    as distinct users who have placed an order.
    """
    return DashboardStats(
        total_products=await _count(db, select(func.count()).select_from(Product)),
        active_products=await _count(
            db,
            select(func.count()).select_from(Product).where(Product.is_active.is_(True)),
        ),
        total_categories=await _count(db, select(func.count()).select_from(Category)),
        total_customers=await _count(
            db,
            select(func.count(distinct(Order.user_id))).where(Order.user_id.is_not(None)),
        ),
        total_orders=await _count(db, select(func.count()).select_from(Order)),
        pending_orders=await _count(
            db,
            select(func.count())
            .select_from(Order)
            .where(Order.status == OrderStatus.PENDING),
        ),
    )


async def get_sales_data(
    db: AsyncSession,
    period: SalesPeriod = SalesPeriod.DAILY,
    now: Optional[datetime] = None,
) -> SalesSeries:
    """Paid-order sales bucketed by day, ISO week, month or year.

    Buckets are computed here rather than in SQL so the same code runs on any
    database backend.
    """
    period = SalesPeriod(period)
    start = period_start(period, now or utc_now())

    rows = (
        await db.execute(
            select(Order.created_at, Order.total)
            .where(
                Order.payment_status == PaymentStatus.PAID,
                Order.created_at >= start,
            )
            .order_by(Order.created_at)
        )
    ).all()

    buckets: dict[str, list[Decimal]] = {}
    for created_at, total in rows:
        buckets.setdefault(bucket_key(period, created_at), []).append(Decimal(total))

    labels = sorted(buckets)
    return SalesSeries(
        labels=labels,
        orders=[len(buckets[label]) for label in labels],
        sales=[quantize_amount(sum(buckets[label])) for label in labels],
        average_order_value=[
            quantize_amount(sum(buckets[label]) / len(buckets[label]))
            for label in labels
        ],
    )


async def get_recent_orders(
    db: AsyncSession, limit: int = RECENT_ORDERS_LIMIT
) -> list[Order]:
    query = (
        select(Order)
        .options(selectinload(Order.items))
        .order_by(Order.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_top_products(
    db: AsyncSession,
    locale: Locale = Locale.EN,
    limit: int = TOP_PRODUCTS_LIMIT,
) -> list[TopProduct]:
    """Best sellers by units sold. Ties come back in whatever order the database
    returns them."""
    total_sold = func.coalesce(func.sum(OrderItem.quantity), 0).label("total_sold")
    query = (
        select(Product, total_sold)
        .outerjoin(OrderItem, OrderItem.product_id == Product.id)
        .group_by(Product.id)
        .order_by(total_sold.desc())
        .limit(limit)
    )
    rows = (await db.execute(query)).all()
    return [
        TopProduct(
            id=product.id,
            name=product.get_name(locale),
            sku=product.sku,
            total_sold=int(sold),
        )
        for product, sold in rows
    ]
