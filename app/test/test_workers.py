import pytest
from httpx import AsyncClient

from app.repositories.seed import DEMO_WORKERS


class TestWorkerDirectory:
    """Test the public collector directory."""

    async def test_list_workers(self, client: AsyncClient):
        response = await client.get("/api/workers")

        assert response.status_code == 200
        names = [w["name"] for w in response.json()]
        assert names == sorted(w.name for w in DEMO_WORKERS)

    async def test_filter_by_area(self, client: AsyncClient):
        response = await client.get("/api/workers", params={"area": "north district"})

        workers = response.json()
        assert [w["name"] for w in workers] == ["Worker Alpha"]

    @pytest.mark.parametrize(
        "field, best",
        [
            ("price_steel", "Worker Gamma"),
            ("price_plastic", "Worker Beta"),
            ("price_paper", "Worker Epsilon"),
        ],
    )
    async def test_sort_by_price(self, client: AsyncClient, field, best):
        response = await client.get("/api/workers", params={"sort_by": field})

        workers = response.json()
        assert workers[0]["name"] == best
        prices = [w[field] for w in workers]
        assert prices == sorted(prices, reverse=True)

    async def test_invalid_sort_field(self, client: AsyncClient):
        response = await client.get("/api/workers", params={"sort_by": "price_gold"})
        assert response.status_code == 422

    async def test_get_worker(self, client: AsyncClient):
        worker = (await client.get("/api/workers")).json()[0]

        response = await client.get(f"/api/workers/{worker['id']}")

        assert response.status_code == 200
        assert response.json() == worker

    async def test_get_missing_worker(self, client: AsyncClient):
        response = await client.get("/api/workers/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
