"""Product API test cases."""
from decimal import Decimal
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession
from apps.catalog.repository import ProductRepository


class TestProductsAPI:

    async def test_list_is_public(self, anon_client: AsyncClient, sample_products):
        response = await anon_client.get("/api/v1/products")
        assert response.status_code == 200
        products = response.json()["data"]
        assert [p["description"] for p in products] == ["Laptop", "Mouse", "Keyboard"]
        assert products[0]["price"] == "999.99"
        assert products[0]["image_url"] == "https://img.example/laptop.png"
        assert products[1]["image_url"] is None

    async def test_list_paginated(self, anon_client: AsyncClient, sample_products):
        response = await anon_client.get("/api/v1/products", params={"limit": 2, "offset": 1})
        assert [p["description"] for p in response.json()["data"]] == ["Mouse", "Keyboard"]

    async def test_get_product(self, anon_client: AsyncClient, sample_products):
        mouse = sample_products[1]
        response = await anon_client.get(f"/api/v1/products/{mouse.id}")
        assert response.json()["data"]["description"] == "Mouse"

    async def test_get_missing_product(self, anon_client: AsyncClient):
        response = await anon_client.get("/api/v1/products/404")
        assert response.status_code == 404
        assert response.json()["code"] == 404

    async def test_create_requires_auth(self, anon_client: AsyncClient):
        response = await anon_client.post(
            "/api/v1/products",
            json={"description": "Monitor", "price": "199.00"}
        )
        assert response.status_code == 401

    async def test_create_update_delete(self, client: AsyncClient, async_session: AsyncSession):
        response = await client.post(
            "/api/v1/products",
            json={"description": "Monitor", "price": "199.00"}
        )
        assert response.status_code == 200
        product = response.json()["data"]
        assert product["price"] == "199.00"

        response = await client.put(
            f"/api/v1/products/{product['id']}",
            json={"price": "179.50", "image_url": "https://img.example/monitor.png"}
        )
        updated = response.json()["data"]
        assert updated["description"] == "Monitor"
        assert updated["price"] == "179.50"
        assert updated["image_url"] == "https://img.example/monitor.png"

        stored = await ProductRepository(async_session).get_by_id(product["id"])
        assert stored.price == Decimal("179.50")

        response = await client.delete(f"/api/v1/products/{product['id']}")
        assert response.status_code == 200
        assert await ProductRepository(async_session).get_by_id(product["id"]) is None

    async def test_create_rejects_negative_price(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/products",
            json={"description": "Refund", "price": "-1.00"}
        )
        assert response.status_code == 422

    async def test_update_missing_product(self, client: AsyncClient):
        response = await client.put("/api/v1/products/999", json={"price": "1.00"})
        assert response.status_code == 404

    async def test_delete_missing_product(self, client: AsyncClient):
        response = await client.delete("/api/v1/products/999")
        assert response.status_code == 404

    async def test_update_can_clear_image_url(self, client: AsyncClient, sample_products):
        laptop = sample_products[0]
        response = await client.put(f"/api/v1/products/{laptop.id}", json={"image_url": None})
        data = response.json()["data"]
        assert data["image_url"] is None
        assert data["description"] == "Laptop"
        assert data["price"] == "999.99"

    async def test_update_cannot_null_price(self, client: AsyncClient, sample_products):
        response = await client.put(f"/api/v1/products/{sample_products[0].id}", json={"price": None})
        assert response.json()["code"] == 400
