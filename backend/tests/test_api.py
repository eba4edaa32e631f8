from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from artsign.api import deps
from artsign.core.utils import utcnow
from artsign.main import app

from conftest import make_token


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[deps.get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def order_body(*lines) -> dict:
    return {"items": [{"product_id": pid, "quantity": qty, "unit_price": price} for pid, qty, price in lines]}


async def test_root(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert "ArtSign" in response.json()["message"]


async def test_missing_token_is_auth_required(client, seed):
    response = await client.post("/api/v1/orders/", json=order_body((seed.cards_id, 1, 5.0)))

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Authentication required", "code": "AUTH_REQUIRED"}


async def test_invalid_and_expired_tokens_are_rejected(client, seed):
    bad = await client.get("/api/v1/orders/my-orders", headers={"Authorization": "Bearer not-a-jwt"})
    expired = await client.get(
        "/api/v1/orders/my-orders",
        headers={"Authorization": f"Bearer {make_token(seed.customer_id, timedelta(minutes=-5))}"},
    )

    assert bad.status_code == 401
    assert expired.status_code == 401
    assert expired.json()["code"] == "AUTH_REQUIRED"


async def test_inactive_user_is_forbidden(client, seed):
    response = await client.get("/api/v1/orders/my-orders", headers=auth(seed.inactive_id))

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


async def test_create_order_and_read_it(client, seed):
    response = await client.post(
        "/api/v1/orders/",
        json=order_body((seed.banner_id, 2, 10.0), (seed.cards_id, 1, 5.0)),
        headers=auth(seed.customer_id),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    order = body["data"]
    assert order["subtotal"] == 25.0
    assert order["tax_amount"] == 1.75
    assert order["total_amount"] == 26.75
    assert order["customer_name"] == "Ana Lopez"
    assert order["status"] == "PENDING_PAYMENT"

    own = await client.get(f"/api/v1/orders/{order['id']}", headers=auth(seed.customer_id))
    foreign = await client.get(f"/api/v1/orders/{order['id']}", headers=auth(seed.other_id))
    manager = await client.get(f"/api/v1/orders/{order['id']}", headers=auth(seed.manager_id))

    assert own.status_code == 200
    assert foreign.status_code == 403
    assert manager.status_code == 200


async def test_insufficient_stock_is_bad_request(client, seed):
    response = await client.post(
        "/api/v1/orders/", json=order_body((seed.banner_id, 9, 10.0)), headers=auth(seed.customer_id)
    )

    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"


async def test_validation_error_envelope(client, seed):
    response = await client.post("/api/v1/orders/", json={"items": []}, headers=auth(seed.customer_id))

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"


async def test_manager_routes_require_manager_role(client, seed):
    as_user = await client.get("/api/v1/orders/", headers=auth(seed.customer_id))
    as_manager = await client.get("/api/v1/orders/", headers=auth(seed.manager_id))

    assert as_user.status_code == 403
    assert as_manager.status_code == 200
    assert as_manager.json()["data"]["pagination"] == {"page": 1, "limit": 10, "total": 0, "pages": 0}


async def test_delete_requires_super_admin(client, seed):
    created = await client.post(
        "/api/v1/orders/", json=order_body((seed.cards_id, 1, 5.0)), headers=auth(seed.customer_id)
    )
    order_id = created.json()["data"]["id"]

    as_manager = await client.delete(f"/api/v1/orders/{order_id}", headers=auth(seed.manager_id))
    as_admin = await client.delete(f"/api/v1/orders/{order_id}", headers=auth(seed.admin_id))
    after = await client.get(f"/api/v1/orders/{order_id}", headers=auth(seed.admin_id))

    assert as_manager.status_code == 403
    assert as_admin.status_code == 200
    assert after.status_code == 404
    assert after.json()["code"] == "NOT_FOUND"


async def test_cancel_order_restores_stock_through_api(client, seed):
    created = await client.post(
        "/api/v1/orders/", json=order_body((seed.banner_id, 3, 10.0)), headers=auth(seed.customer_id)
    )
    order_id = created.json()["data"]["id"]

    product = await client.get(f"/api/v1/products/{seed.banner_id}")
    assert product.json()["data"]["current_stock"] == 2

    cancelled = await client.patch(f"/api/v1/orders/{order_id}/cancel", headers=auth(seed.manager_id))
    assert cancelled.json()["data"]["status"] == "CANCELLED"

    product = await client.get(f"/api/v1/products/{seed.banner_id}")
    assert product.json()["data"]["current_stock"] == 5

    again = await client.patch(f"/api/v1/orders/{order_id}/cancel", headers=auth(seed.manager_id))
    assert again.status_code == 400


async def test_public_product_listing_is_paginated(client, seed):
    response = await client.get("/api/v1/products/", params={"limit": 1, "sort_by": "name", "sort_order": "asc"})

    assert response.status_code == 200
    page = response.json()["data"]
    assert page["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}
    assert page["data"][0]["name"] == "Business Cards"
    assert page["data"][0]["category_name"] == "Banners"


async def test_stock_endpoint(client, seed):
    ok = await client.patch(
        f"/api/v1/products/{seed.banner_id}/stock",
        json={"quantity": 5, "operation": "subtract"},
        headers=auth(seed.manager_id),
    )
    too_much = await client.patch(
        f"/api/v1/products/{seed.banner_id}/stock",
        json={"quantity": 1, "operation": "subtract"},
        headers=auth(seed.manager_id),
    )

    assert ok.json()["data"]["current_stock"] == 0
    assert ok.json()["data"]["stock_status"] == "OUT_OF_STOCK"
    assert too_much.status_code == 400


async def test_quotation_flow_through_api(client, seed):
    created = await client.post(
        "/api/v1/quotations/",
        json={
            "user_id": seed.customer_id,
            "title": "Shopfront",
            "valid_until": (utcnow() + timedelta(days=7)).isoformat(),
            "items": [
                {"product_id": seed.banner_id, "quantity": 2, "unit_price": 10.0},
                {"product_id": seed.cards_id, "quantity": 1, "unit_price": 5.0},
            ],
        },
        headers=auth(seed.manager_id),
    )
    assert created.status_code == 201
    quotation_id = created.json()["data"]["id"]

    foreign_accept = await client.patch(f"/api/v1/quotations/{quotation_id}/accept", headers=auth(seed.other_id))
    assert foreign_accept.status_code == 403

    accepted = await client.patch(f"/api/v1/quotations/{quotation_id}/accept", headers=auth(seed.customer_id))
    assert accepted.json()["data"]["status"] == "ACCEPTED"

    converted = await client.post(
        f"/api/v1/quotations/{quotation_id}/convert-to-order", headers=auth(seed.manager_id)
    )
    assert converted.status_code == 200
    data = converted.json()["data"]
    assert data["quotation"]["status"] == "ACCEPTED"

    order = await client.get(f"/api/v1/orders/{data['order_id']}", headers=auth(seed.customer_id))
    assert order.json()["data"]["total_amount"] == 26.75


async def test_invoice_lifecycle_through_api(client, seed):
    created = await client.post(
        "/api/v1/orders/", json=order_body((seed.cards_id, 2, 10.0)), headers=auth(seed.customer_id)
    )
    order_id = created.json()["data"]["id"]

    invoice = await client.post(f"/api/v1/invoices/generate-from-order/{order_id}", headers=auth(seed.manager_id))
    duplicate = await client.post(f"/api/v1/invoices/generate-from-order/{order_id}", headers=auth(seed.manager_id))
    assert invoice.status_code == 201
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "CONFLICT"

    invoice_id = invoice.json()["data"]["id"]
    paid = await client.patch(f"/api/v1/invoices/{invoice_id}/mark-paid", headers=auth(seed.manager_id))
    assert paid.json()["data"]["status"] == "PAID"

    delete = await client.delete(f"/api/v1/invoices/{invoice_id}", headers=auth(seed.admin_id))
    assert delete.status_code == 400
    assert delete.json()["message"] == "Cannot delete paid invoices"

    mine = await client.get("/api/v1/invoices/my-invoices", headers=auth(seed.customer_id))
    assert mine.json()["data"]["pagination"]["total"] == 1


async def test_customer_profile_endpoints(client, seed):
    created = await client.post(
        "/api/v1/customers/", json={"company_name": "Ana Prints"}, headers=auth(seed.customer_id)
    )
    duplicate = await client.post("/api/v1/customers/", json={}, headers=auth(seed.customer_id))
    for_other = await client.post(
        "/api/v1/customers/", json={"user_id": seed.other_id}, headers=auth(seed.customer_id)
    )

    assert created.status_code == 201
    assert duplicate.status_code == 409
    assert for_other.status_code == 403

    me = await client.put("/api/v1/customers/me", json={"tax_id": "B123"}, headers=auth(seed.customer_id))
    assert me.json()["data"]["tax_id"] == "B123"
    assert me.json()["data"]["company_name"] == "Ana Prints"
