"""Integration tests for the admin dashboard and catalog management."""

from decimal import Decimal

import pytest
from services.store_service.models import OrderStatus
from tests.factories import (
    CategoryFactory,
    OrderFactory,
    ProductFactory,
    auth_headers,
    make_admin_user,
    make_customer_user,
)


async def _category(db):
    category = CategoryFactory.create()
    db.add(category)
    await db.commit()
    return category


def _product_body(category_id, **overrides) -> dict:
    body = {
        "category_id": str(category_id),
        "name_en": "Classic Cotton T-Shirt",
        "name_id": "Kaos Katun Klasik",
        "slug": "classic-cotton-t-shirt",
        "base_price": "150000",
        "sku": "SKU-100001",
        "stock_quantity": 50,
        "images": ["https://placehold.co/600x600?text=Tee"],
    }
    body.update(overrides)
    return body


# ---------------------------------------------------------------------------
# Access control
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_requires_token(client, db_session):
    """GET /admin/dashboard without a token: 401."""
    response = await client.get("/admin/dashboard")
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_rejects_customers(client, db_session):
    """Customer tokens: 403 on every admin route."""
    headers = auth_headers(make_customer_user())

    dashboard = await client.get("/admin/dashboard", headers=headers)
    products = await client.get("/admin/products", headers=headers)

    assert dashboard.status_code == 403
    assert products.status_code == 403


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_dashboard(client, db_session):
    """GET /admin/dashboard: stats, series and recent orders."""
    category = await _category(db_session)
    db_session.add_all(
        [
            ProductFactory.create(category_id=category.id),
            ProductFactory.create(category_id=category.id, is_active=False),
            OrderFactory.create(),
            OrderFactory.create(status=OrderStatus.SHIPPED),
            OrderFactory.create(user_id="customer-2"),
        ]
    )
    await db_session.commit()

    response = await client.get(
        "/admin/dashboard",
        params={"period": "monthly"},
        headers=auth_headers(make_admin_user()),
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["period"] == "monthly"
    assert data["stats"] == {
        "total_products": 2,
        "active_products": 1,
        "total_categories": 1,
        "total_customers": 2,
        "total_orders": 3,
        "pending_orders": 2,
    }
    assert len(data["recent_orders"]) == 3
    assert set(data["sales_data"]) == {
        "labels",
        "orders",
        "sales",
        "average_order_value",
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_dashboard_invalid_period(client, db_session):
    """GET /admin/dashboard?period=hourly: 422."""
    response = await client.get(
        "/admin/dashboard",
        params={"period": "hourly"},
        headers=auth_headers(make_admin_user()),
    )

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_product(client, db_session):
    """POST /admin/products: 201 with the full detail view."""
    category = await _category(db_session)

    response = await client.post(
        "/admin/products",
        json=_product_body(category.id),
        headers=auth_headers(make_admin_user()),
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["slug"] == "classic-cotton-t-shirt"
    assert data["name_id"] == "Kaos Katun Klasik"
    assert data["formatted_price"] == "Rp 150.000"
    assert data["variants"] == []
    assert data["category"]["id"] == str(category.id)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_product_duplicate_slug(client, db_session):
    """POST /admin/products with a taken slug: 422 pointing at the field."""
    category = await _category(db_session)
    headers = auth_headers(make_admin_user())
    await client.post("/admin/products", json=_product_body(category.id), headers=headers)

    response = await client.post(
        "/admin/products",
        json=_product_body(category.id, sku="SKU-100002"),
        headers=headers,
    )

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert [d["loc"] for d in detail] == [["body", "slug"]]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_product_negative_price(client, db_session):
    """POST /admin/products with a negative price: 422."""
    category = await _category(db_session)

    response = await client.post(
        "/admin/products",
        json=_product_body(category.id, base_price="-1"),
        headers=auth_headers(make_admin_user()),
    )

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_products_includes_inactive(client, db_session):
    """GET /admin/products: inactive products listed; status filter narrows."""
    category = await _category(db_session)
    db_session.add_all(
        [
            ProductFactory.create(category_id=category.id),
            ProductFactory.create(category_id=category.id, is_active=False),
        ]
    )
    await db_session.commit()
    headers = auth_headers(make_admin_user())

    everything = (await client.get("/admin/products", headers=headers)).json()
    inactive = (
        await client.get(
            "/admin/products", params={"status": "inactive"}, headers=headers
        )
    ).json()

    assert everything["total"] == 2
    assert everything["page_size"] == 15
    assert inactive["total"] == 1
    assert inactive["items"][0]["is_active"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_product(client, db_session):
    """PATCH /admin/products/{id}: partial update."""
    category = await _category(db_session)
    product = ProductFactory.create(category_id=category.id)
    db_session.add(product)
    await db_session.commit()

    response = await client.patch(
        f"/admin/products/{product.id}",
        json={"base_price": "175000", "is_featured": True},
        headers=auth_headers(make_admin_user()),
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert Decimal(data["base_price"]) == Decimal("175000")
    assert data["is_featured"] is True
    assert data["name_en"] == product.name_en


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_product_null_required_field(client, db_session):
    """PATCH /admin/products/{id} with null on a required field: 422 for that field."""
    category = await _category(db_session)
    product = ProductFactory.create(category_id=category.id)
    db_session.add(product)
    await db_session.commit()
    headers = auth_headers(make_admin_user())

    for field in ("name_en", "base_price", "category_id", "stock_quantity", "is_active"):
        response = await client.patch(
            f"/admin/products/{product.id}", json={field: None}, headers=headers
        )

        assert response.status_code == 422, response.text
        assert [d["loc"] for d in response.json()["detail"]] == [["body", field]]

    fetched = await client.get(f"/admin/products/{product.id}", headers=headers)
    assert fetched.json()["name_en"] == product.name_en


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_product_below_variant_price(client, db_session):
    """PATCH /admin/products/{id}: a base price that would make a variant negative is 422."""
    category = await _category(db_session)
    headers = auth_headers(make_admin_user())
    product = (
        await client.post(
            "/admin/products", json=_product_body(category.id), headers=headers
        )
    ).json()
    await client.post(
        f"/admin/products/{product['id']}/variants",
        json={"sku": "SKU-100001-S", "price_adjustment": "-50000"},
        headers=headers,
    )

    response = await client.patch(
        f"/admin/products/{product['id']}",
        json={"base_price": "20000"},
        headers=headers,
    )

    assert response.status_code == 422
    assert [d["loc"] for d in response.json()["detail"]] == [["body", "base_price"]]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_product(client, db_session):
    """DELETE /admin/products/{id}: 204, then 404."""
    category = await _category(db_session)
    product = ProductFactory.create(category_id=category.id)
    db_session.add(product)
    await db_session.commit()
    headers = auth_headers(make_admin_user())

    deleted = await client.delete(f"/admin/products/{product.id}", headers=headers)
    fetched = await client.get(f"/admin/products/{product.id}", headers=headers)

    assert deleted.status_code == 204
    assert fetched.status_code == 404


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_variant_lifecycle(client, db_session):
    """Create, update and delete a variant through the admin API."""
    category = await _category(db_session)
    headers = auth_headers(make_admin_user())
    product = (
        await client.post(
            "/admin/products", json=_product_body(category.id), headers=headers
        )
    ).json()

    created = await client.post(
        f"/admin/products/{product['id']}/variants",
        json={
            "size": "XL",
            "color": "Black",
            "sku": "SKU-100001-XL-BLA",
            "price_adjustment": "25000",
            "stock_quantity": 10,
        },
        headers=headers,
    )
    assert created.status_code == 201, created.text
    variant = created.json()
    assert variant["display_name"] == "XL / Black"
    assert Decimal(variant["final_price"]) == Decimal("175000")

    updated = await client.patch(
        f"/admin/products/{product['id']}/variants/{variant['id']}",
        json={"is_active": False},
        headers=headers,
    )
    assert updated.status_code == 200, updated.text
    assert updated.json()["is_active"] is False

    detail = (
        await client.get(f"/admin/products/{product['id']}", headers=headers)
    ).json()
    assert [v["sku"] for v in detail["variants"]] == ["SKU-100001-XL-BLA"]

    deleted = await client.delete(
        f"/admin/products/{product['id']}/variants/{variant['id']}", headers=headers
    )
    assert deleted.status_code == 204


@pytest.mark.asyncio
@pytest.mark.integration
async def test_variant_invalid_writes_rejected(client, db_session):
    """Variant writes with a negative effective price or null required field: 422."""
    category = await _category(db_session)
    headers = auth_headers(make_admin_user())
    product = (
        await client.post(
            "/admin/products",
            json=_product_body(category.id, base_price="10000"),
            headers=headers,
        )
    ).json()
    url = f"/admin/products/{product['id']}/variants"

    negative = await client.post(
        url, json={"sku": "SKU-100001-S", "price_adjustment": "-20000"}, headers=headers
    )
    variant = (await client.post(url, json={"sku": "SKU-100001-M"}, headers=headers)).json()
    nulled = await client.patch(
        f"{url}/{variant['id']}", json={"price_adjustment": None}, headers=headers
    )

    assert negative.status_code == 422
    assert negative.json()["detail"][0]["loc"] == ["body", "price_adjustment"]
    assert nulled.status_code == 422
    assert nulled.json()["detail"][0]["loc"] == ["body", "price_adjustment"]
