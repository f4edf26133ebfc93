"""Integration tests for checkout and order history."""

from decimal import Decimal

import pytest
from services.store_service.models import CartItem, Order
from sqlalchemy import func, select
from tests.factories import (
    CartItemFactory,
    CategoryFactory,
    OrderFactory,
    OrderItemFactory,
    ProductFactory,
    auth_headers,
    checkout_payload,
    make_customer_user,
)


async def _cart(db, user_id="customer-1"):
    """Two tees and one wallet in the user's cart: 600000 subtotal."""
    category = CategoryFactory.create()
    tee = ProductFactory.create(
        category_id=category.id, sku="SKU-TEE", base_price=Decimal("150000")
    )
    wallet = ProductFactory.create(
        category_id=category.id,
        name_en="Leather Wallet",
        name_id="Dompet Kulit",
        sku="SKU-WALLET",
        base_price=Decimal("300000"),
    )
    db.add_all([category, tee, wallet])
    await db.flush()
    db.add_all(
        [
            CartItemFactory.create(
                user_id=user_id, product_id=tee.id, quantity=2, price=Decimal("150000")
            ),
            CartItemFactory.create(
                user_id=user_id, product_id=wallet.id, price=Decimal("300000")
            ),
        ]
    )
    await db.commit()
    return tee, wallet


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_requires_auth(client, db_session):
    """GET/POST /checkout without a token: 401."""
    summary = await client.get("/checkout")
    placed = await client.post("/checkout", json=checkout_payload())

    assert summary.status_code == 401
    assert placed.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_with_empty_cart(client, db_session):
    """POST /checkout with nothing in the cart: 400."""
    headers = auth_headers(make_customer_user())

    summary = await client.get("/checkout", headers=headers)
    placed = await client.post("/checkout", json=checkout_payload(), headers=headers)

    assert summary.status_code == 400
    assert placed.status_code == 400
    assert placed.json()["detail"] == "Your cart is empty."


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_summary_express(client, db_session):
    """GET /checkout?shipping_method=express: totals preview."""
    await _cart(db_session)

    response = await client.get(
        "/checkout",
        params={"shipping_method": "express"},
        headers=auth_headers(make_customer_user()),
    )

    assert response.status_code == 200
    summary = response.json()["summary"]
    assert Decimal(summary["subtotal"]) == Decimal("600000")
    assert Decimal(summary["tax_amount"]) == Decimal("60000")
    assert Decimal(summary["shipping_cost"]) == Decimal("50000")
    assert Decimal(summary["total"]) == Decimal("710000")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_place_order(client, db_session):
    """POST /checkout: pending order, item snapshots, cart emptied."""
    await _cart(db_session)

    response = await client.post(
        "/checkout",
        json=checkout_payload(payment_method="e_wallet", notes="Leave at the gate"),
        headers=auth_headers(make_customer_user()),
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["order_number"].startswith("ORD-")
    assert data["status"] == "pending"
    assert data["payment_status"] == "pending"
    assert data["payment_method"] == "e_wallet"
    assert data["currency"] == "IDR"
    assert data["locale"] == "en"
    assert data["notes"] == "Leave at the gate"
    assert Decimal(data["subtotal"]) == Decimal("600000")
    assert Decimal(data["tax_amount"]) == Decimal("60000")
    assert Decimal(data["shipping_cost"]) == Decimal("25000")
    assert Decimal(data["total"]) == Decimal("685000")
    assert data["shipping_address"]["city"] == "Jakarta"
    assert sorted(i["product_sku"] for i in data["items"]) == ["SKU-TEE", "SKU-WALLET"]

    remaining = (
        await db_session.execute(select(func.count()).select_from(CartItem))
    ).scalar()
    assert remaining == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_place_order_in_indonesian(client, db_session):
    """POST /checkout?locale=id: item names and order locale in Indonesian."""
    await _cart(db_session)

    response = await client.post(
        "/checkout",
        params={"locale": "id"},
        json=checkout_payload(),
        headers=auth_headers(make_customer_user()),
    )

    data = response.json()
    assert data["locale"] == "id"
    assert "Dompet Kulit" in {i["product_name"] for i in data["items"]}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_blank_address_rejected(client, db_session):
    """POST /checkout with a blank city: 422 and no order."""
    await _cart(db_session)
    payload = checkout_payload()
    payload["shipping_address"]["city"] = "   "

    response = await client.post(
        "/checkout", json=payload, headers=auth_headers(make_customer_user())
    )

    assert response.status_code == 422
    orders = (await db_session.execute(select(func.count()).select_from(Order))).scalar()
    assert orders == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_payment_method_rejected(client, db_session):
    """POST /checkout with an unsupported payment method: 422."""
    await _cart(db_session)

    response = await client.post(
        "/checkout",
        json=checkout_payload(payment_method="cash"),
        headers=auth_headers(make_customer_user()),
    )

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Order history
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_my_orders(client, db_session):
    """GET /orders: only the caller's orders."""
    db_session.add_all(
        [
            OrderFactory.create(),
            OrderFactory.create(),
            OrderFactory.create(user_id="customer-2"),
        ]
    )
    await db_session.commit()

    response = await client.get("/orders", headers=auth_headers(make_customer_user()))

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["page_size"] == 10
    assert data["total_pages"] == 1
    assert all(o["user_id"] == "customer-1" for o in data["items"])


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_my_order(client, db_session):
    """GET /orders/{id}: order with its items."""
    order = OrderFactory.create()
    db_session.add(order)
    await db_session.flush()
    db_session.add(
        OrderItemFactory.create(order_id=order.id, product_sku="SKU-WALLET")
    )
    await db_session.commit()
    order_id = order.id

    response = await client.get(
        f"/orders/{order_id}", headers=auth_headers(make_customer_user())
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["order_number"] == order.order_number
    assert [i["product_sku"] for i in data["items"]] == ["SKU-WALLET"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_other_customers_order_not_found(client, db_session):
    """GET /orders/{id} for another user's order: 404."""
    order = OrderFactory.create(user_id="customer-2")
    db_session.add(order)
    await db_session.commit()

    response = await client.get(
        f"/orders/{order.id}", headers=auth_headers(make_customer_user())
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Order not found"
