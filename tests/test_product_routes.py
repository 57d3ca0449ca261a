"""
Product Catalog API: Product Endpoint Tests
============================================

What we test:
    ✅ Admin create/update/delete, public reads
    ✅ Aggregated validation errors for bad bodies and bad query strings
    ✅ Search, category, price, sale, variant and date filters (AND-combined)
    ✅ Low-stock and inventory reports are admin-only and add up
"""

from datetime import datetime

import pytest
import pytest_asyncio

MISSING_ID = "00000000-0000-0000-0000-000000000000"


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture
def create_product(test_client, admin_headers, sample_product_data):
    """Factory: POST a product built from the sample body plus overrides."""

    async def _create(**overrides):
        body = {**sample_product_data, **overrides}
        response = await test_client.post("/products/", headers=admin_headers, json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


class TestProductCrud:

    @pytest.mark.asyncio
    async def test_create_returns_camel_case_product(self, create_product):
        product = await create_product()
        assert product["name"] == "Classic Tee"
        assert product["price"] == 19.99
        assert product["stock"] == 25
        assert product["image"] == "https://cdn.example.com/tee.png"
        assert product["variants"][0] == {"size": "M", "color": "Red", "quantity": 10}
        assert product["onSale"] is False
        assert product["salePrice"] is None
        assert "createdAt" in product and "updatedAt" in product

    @pytest.mark.asyncio
    async def test_prices_rounded_to_cents(self, create_product):
        product = await create_product(price=10.456, salePrice=8.999)
        assert product["price"] == 10.46
        assert product["salePrice"] == 9.0
        assert product["onSale"] is True

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client, create_product):
        product = await create_product()
        response = await test_client.get(f"/products/{product['id']}")
        assert response.status_code == 200
        assert response.json()["id"] == product["id"]

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, admin_headers, create_product):
        product = await create_product()
        response = await test_client.put(
            f"/products/{product['id']}",
            headers=admin_headers,
            json={"stock": 3, "discountPercentage": 15},
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["stock"] == 3
        assert updated["discountPercentage"] == 15
        assert updated["onSale"] is True
        assert updated["name"] == product["name"]
        assert parse_timestamp(updated["updatedAt"]) >= parse_timestamp(product["updatedAt"])

    @pytest.mark.asyncio
    async def test_update_rejects_null_required_fields(self, test_client, admin_headers, create_product):
        product = await create_product()
        response = await test_client.put(
            f"/products/{product['id']}",
            headers=admin_headers,
            json={"name": None, "price": None},
        )
        assert response.status_code == 400
        details = response.json()["details"]
        assert "name" in details and "price" in details

    @pytest.mark.asyncio
    async def test_delete(self, test_client, admin_headers, create_product):
        product = await create_product()
        response = await test_client.delete(f"/products/{product['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted"}
        assert (await test_client.get(f"/products/{product['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_missing_product_is_404(self, test_client):
        response = await test_client.get(f"/products/{MISSING_ID}")
        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    @pytest.mark.asyncio
    async def test_create_as_customer_is_403(self, test_client, customer_headers, sample_product_data):
        response = await test_client.post(
            "/products/", headers=customer_headers, json=sample_product_data
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_create_without_token_is_401(self, test_client, sample_product_data):
        response = await test_client.post("/products/", json=sample_product_data)
        assert response.status_code == 401


class TestProductValidation:

    @pytest.mark.asyncio
    async def test_every_invalid_field_reported(self, test_client, admin_headers):
        response = await test_client.post(
            "/products/",
            headers=admin_headers,
            json={
                "price": -5,
                "image": "not a url",
                "variants": [{"size": "M", "color": "Red", "quantity": -1}],
            },
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        for field in ("name", "category", "price", "image", "variants.0.quantity"):
            assert field in body["details"]

    @pytest.mark.asyncio
    async def test_prices_that_round_to_zero_are_rejected(self, test_client, admin_headers):
        response = await test_client.post(
            "/products/",
            headers=admin_headers,
            json={"name": "x", "category": "c", "price": 0.001, "salePrice": 0.004},
        )
        assert response.status_code == 400
        details = response.json()["details"]
        assert "price:" in details
        assert "salePrice:" in details

    @pytest.mark.asyncio
    async def test_update_price_that_rounds_to_zero_is_rejected(
        self, test_client, admin_headers, create_product
    ):
        product = await create_product()
        response = await test_client.put(
            f"/products/{product['id']}", headers=admin_headers, json={"price": 0.004}
        )
        assert response.status_code == 400
        assert (await test_client.get(f"/products/{product['id']}")).json()["price"] == 19.99

    @pytest.mark.asyncio
    async def test_non_positive_min_price_is_query_error(self, test_client, database):
        response = await test_client.get("/products/", params={"minPrice": 0})
        assert response.status_code == 400
        assert response.json()["error"] == "Query validation failed"
        assert "minPrice" in response.json()["details"]

    @pytest.mark.asyncio
    async def test_min_price_above_max_price(self, test_client, database):
        response = await test_client.get("/products/", params={"minPrice": 50, "maxPrice": 10})
        assert response.status_code == 400
        assert response.json() == {
            "error": "Query validation failed",
            "details": "minPrice must be less than or equal to maxPrice",
        }

    @pytest.mark.asyncio
    async def test_inverted_date_range(self, test_client, database):
        response = await test_client.get(
            "/products/",
            params={"createdAfter": "2030-01-01T00:00:00Z", "createdBefore": "2020-01-01T00:00:00Z"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Query validation failed"


class TestProductFilters:

    @pytest_asyncio.fixture
    async def catalog(self, create_product):
        """Three products that differ on every filterable attribute."""
        tee = await create_product()
        boots = await create_product(
            name="Leather Boots",
            category="Shoes",
            price=120.0,
            salePrice=99.0,
            stock=4,
            variants=[{"size": "42", "color": "Brown", "quantity": 4}],
        )
        mug = await create_product(
            name="Coffee Mug",
            category="Kitchen",
            price=8.5,
            discountPercentage=10,
            stock=0,
            variants=[],
        )
        return {"tee": tee, "boots": boots, "mug": mug}

    @staticmethod
    def names(response):
        return sorted(p["name"] for p in response.json())

    @pytest.mark.asyncio
    async def test_no_filters_returns_everything_with_count(self, test_client, catalog):
        response = await test_client.get("/products/")
        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "3"
        assert self.names(response) == ["Classic Tee", "Coffee Mug", "Leather Boots"]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, test_client, catalog):
        response = await test_client.get("/products/", params={"search": "BOOT"})
        assert self.names(response) == ["Leather Boots"]

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, test_client, catalog):
        response = await test_client.get("/products/", params={"search": "%"})
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_categories_list(self, test_client, catalog):
        response = await test_client.get("/products/", params={"categories": "Shoes, Kitchen"})
        assert self.names(response) == ["Coffee Mug", "Leather Boots"]

    @pytest.mark.asyncio
    async def test_price_range_is_inclusive(self, test_client, catalog):
        response = await test_client.get("/products/", params={"minPrice": 8.5, "maxPrice": 19.99})
        assert self.names(response) == ["Classic Tee", "Coffee Mug"]

    @pytest.mark.asyncio
    async def test_on_sale(self, test_client, catalog):
        on_sale = await test_client.get("/products/", params={"onSale": "true"})
        assert self.names(on_sale) == ["Coffee Mug", "Leather Boots"]

        full_price = await test_client.get("/products/", params={"onSale": "false"})
        assert self.names(full_price) == ["Classic Tee"]

    @pytest.mark.asyncio
    async def test_variant_color_and_size(self, test_client, catalog):
        red = await test_client.get("/products/", params={"color": "red"})
        assert self.names(red) == ["Classic Tee"]

        # Both must hold for the same variant: the tee has M/Red and L/Blue
        mixed = await test_client.get("/products/", params={"color": "Red", "size": "L"})
        assert mixed.json() == []
        assert mixed.headers["X-Total-Count"] == "0"

    @pytest.mark.asyncio
    async def test_date_range(self, test_client, catalog):
        past = await test_client.get("/products/", params={"createdAfter": "2000-01-01T00:00:00Z"})
        assert len(past.json()) == 3

        future = await test_client.get("/products/", params={"createdAfter": "2999-01-01T00:00:00Z"})
        assert future.json() == []

    @pytest.mark.asyncio
    async def test_filters_combine(self, test_client, catalog):
        response = await test_client.get(
            "/products/", params={"onSale": "true", "maxPrice": 50}
        )
        assert self.names(response) == ["Coffee Mug"]


class TestProductReports:

    @pytest.mark.asyncio
    async def test_low_stock(self, test_client, admin_headers, create_product):
        await create_product(name="Plenty", stock=50)
        await create_product(name="Few", stock=3)
        await create_product(name="None", stock=0)

        response = await test_client.get(
            "/products/reports/low-stock", headers=admin_headers, params={"threshold": 5}
        )
        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["None", "Few"]

    @pytest.mark.asyncio
    async def test_inventory_summary(self, test_client, admin_headers, create_product):
        await create_product(name="A", category="Apparel", price=10.0, stock=2)
        await create_product(name="B", category="Apparel", price=5.0, stock=0, salePrice=4.0)
        await create_product(name="C", category="Shoes", price=20.0, stock=1)

        response = await test_client.get("/products/reports/inventory", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {
            "totalProducts": 3,
            "totalStock": 3,
            "totalInventoryValue": 40.0,
            "onSaleCount": 1,
            "outOfStockCount": 1,
            "productsPerCategory": {"Apparel": 2, "Shoes": 1},
        }

    @pytest.mark.asyncio
    async def test_inventory_on_empty_catalog(self, test_client, admin_headers):
        response = await test_client.get("/products/reports/inventory", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["totalProducts"] == 0
        assert response.json()["productsPerCategory"] == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("threshold", [0, 1001])
    async def test_low_stock_threshold_bounds(self, test_client, admin_headers, threshold):
        response = await test_client.get(
            "/products/reports/low-stock", headers=admin_headers, params={"threshold": threshold}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Query validation failed"
        assert "threshold" in response.json()["details"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/products/reports/low-stock", "/products/reports/inventory"])
    async def test_reports_are_admin_only(self, test_client, customer_headers, path):
        assert (await test_client.get(path)).status_code == 401
        assert (await test_client.get(path, headers=customer_headers)).status_code == 403
