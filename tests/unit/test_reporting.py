"""Unit tests for admin dashboard reporting."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from services.store_service.models import (
    Locale,
    OrderStatus,
    PaymentStatus,
    SalesPeriod,
)
from services.store_service.services import reporting
from tests.factories import (
    CategoryFactory,
    OrderFactory,
    OrderItemFactory,
    ProductFactory,
)

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _paid_order(created_at, total, **overrides):
    return OrderFactory.create(
        created_at=created_at,
        total=Decimal(total),
        payment_status=PaymentStatus.PAID,
        **overrides,
    )


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestBuckets:
    def test_daily_key(self):
        assert reporting.bucket_key(SalesPeriod.DAILY, NOW) == "2026-06-15"

    def test_weekly_key_uses_iso_week(self):
        assert reporting.bucket_key(SalesPeriod.WEEKLY, NOW) == "2026-W25"
        # 1 January 2021 belongs to the last ISO week of 2020
        assert (
            reporting.bucket_key(SalesPeriod.WEEKLY, datetime(2021, 1, 1))
            == "2020-W53"
        )

    def test_monthly_and_yearly_keys(self):
        assert reporting.bucket_key(SalesPeriod.MONTHLY, NOW) == "2026-06"
        assert reporting.bucket_key(SalesPeriod.YEARLY, NOW) == "2026"

    def test_period_start_windows(self):
        assert reporting.period_start(SalesPeriod.DAILY, NOW) == NOW - timedelta(days=30)
        assert reporting.period_start(SalesPeriod.WEEKLY, NOW) == NOW - timedelta(weeks=12)
        assert reporting.period_start(SalesPeriod.MONTHLY, NOW) == datetime(
            2025, 6, 15, 12, 0, tzinfo=timezone.utc
        )
        assert reporting.period_start(SalesPeriod.YEARLY, NOW) == datetime(
            2021, 6, 15, 12, 0, tzinfo=timezone.utc
        )


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_dashboard_stats_counts(db_session):
    category = CategoryFactory.create()
    db_session.add_all(
        [
            category,
            CategoryFactory.create(is_active=False),
            ProductFactory.create(category_id=category.id),
            ProductFactory.create(category_id=category.id),
            ProductFactory.create(category_id=category.id, is_active=False),
            OrderFactory.create(user_id="customer-1"),
            OrderFactory.create(user_id="customer-1", status=OrderStatus.SHIPPED),
            OrderFactory.create(user_id="customer-2"),
        ]
    )
    await db_session.commit()

    stats = await reporting.get_dashboard_stats(db_session)

    assert stats.total_products == 3
    assert stats.active_products == 2
    assert stats.total_categories == 2
    assert stats.total_customers == 2
    assert stats.total_orders == 3
    assert stats.pending_orders == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_dashboard_stats_empty_store(db_session):
    stats = await reporting.get_dashboard_stats(db_session)

    assert stats.total_products == 0
    assert stats.total_orders == 0
    assert stats.total_customers == 0


# ---------------------------------------------------------------------------
# Sales series
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_daily_sales_only_counts_paid_orders_in_window(db_session):
    db_session.add_all(
        [
            _paid_order(NOW - timedelta(days=1), "100000"),
            _paid_order(NOW - timedelta(days=1, hours=2), "50000"),
            _paid_order(NOW - timedelta(days=3), "200000"),
            # Not paid
            OrderFactory.create(created_at=NOW - timedelta(days=1), total=Decimal("999")),
            OrderFactory.create(
                created_at=NOW - timedelta(days=2),
                total=Decimal("777"),
                payment_status=PaymentStatus.FAILED,
            ),
            # Outside the 30 day window
            _paid_order(NOW - timedelta(days=45), "300000"),
        ]
    )
    await db_session.commit()

    series = await reporting.get_sales_data(db_session, SalesPeriod.DAILY, now=NOW)

    assert series.labels == ["2026-06-12", "2026-06-14"]
    assert series.orders == [1, 2]
    assert series.sales == [Decimal("200000.00"), Decimal("150000.00")]
    assert series.average_order_value == [Decimal("200000.00"), Decimal("75000.00")]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_monthly_sales_buckets(db_session):
    db_session.add_all(
        [
            _paid_order(datetime(2026, 6, 1, tzinfo=timezone.utc), "100000"),
            _paid_order(datetime(2026, 4, 20, tzinfo=timezone.utc), "40000"),
            _paid_order(datetime(2026, 4, 2, tzinfo=timezone.utc), "20000"),
            _paid_order(datetime(2025, 1, 1, tzinfo=timezone.utc), "500000"),
        ]
    )
    await db_session.commit()

    series = await reporting.get_sales_data(db_session, SalesPeriod.MONTHLY, now=NOW)

    assert series.labels == ["2026-04", "2026-06"]
    assert series.orders == [2, 1]
    assert series.sales == [Decimal("60000.00"), Decimal("100000.00")]
    assert series.average_order_value == [Decimal("30000.00"), Decimal("100000.00")]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_yearly_sales_buckets(db_session):
    db_session.add_all(
        [
            _paid_order(datetime(2024, 3, 1, tzinfo=timezone.utc), "10000"),
            _paid_order(datetime(2026, 1, 1, tzinfo=timezone.utc), "30000"),
            _paid_order(datetime(2020, 1, 1, tzinfo=timezone.utc), "90000"),
        ]
    )
    await db_session.commit()

    series = await reporting.get_sales_data(db_session, SalesPeriod.YEARLY, now=NOW)

    assert series.labels == ["2024", "2026"]
    assert series.orders == [1, 1]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_sales_series_empty(db_session):
    series = await reporting.get_sales_data(db_session, SalesPeriod.WEEKLY, now=NOW)

    assert series.labels == []
    assert series.orders == []
    assert series.sales == []
    assert series.average_order_value == []


# ---------------------------------------------------------------------------
# Recent orders & top products
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_recent_orders_newest_first_limited(db_session):
    orders = [
        OrderFactory.create(created_at=NOW - timedelta(hours=i)) for i in range(7)
    ]
    db_session.add_all(orders)
    await db_session.commit()

    recent = await reporting.get_recent_orders(db_session)

    assert len(recent) == reporting.RECENT_ORDERS_LIMIT
    assert [o.id for o in recent] == [o.id for o in orders[:5]]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_top_products_ranked_by_units_sold(db_session):
    category = CategoryFactory.create()
    best = ProductFactory.create(category_id=category.id, name_id="Terlaris")
    second = ProductFactory.create(category_id=category.id)
    unsold = ProductFactory.create(category_id=category.id)
    order = OrderFactory.create()
    db_session.add_all([category, best, second, unsold, order])
    await db_session.flush()

    db_session.add_all(
        [
            OrderItemFactory.create(order_id=order.id, product_id=best.id, quantity=2),
            OrderItemFactory.create(order_id=order.id, product_id=best.id, quantity=3),
            OrderItemFactory.create(order_id=order.id, product_id=second.id, quantity=1),
        ]
    )
    await db_session.commit()

    top = await reporting.get_top_products(db_session, Locale.ID)

    assert [p.id for p in top] == [best.id, second.id, unsold.id]
    assert [p.total_sold for p in top] == [5, 1, 0]
    assert top[0].name == "Terlaris"
