# ABOUTME: Tests for the aiohttp service wrapping the response cache
# ABOUTME: Exercises query handling, validation errors, statistics, reset and sweep endpoints

import asyncio
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from aiohttp import test_utils

from cache import LRUCacheStore, ResponseCache
from service import CacheSettings, SimulatedGenerator, create_app
from service.app import CACHE_KEY, GENERATOR_KEY


class TestSimulatedGenerator:
    """Test suite for the stand-in answer generator."""

    @pytest.mark.asyncio
    async def test_generate(self) -> None:
        generator = SimulatedGenerator(delay=0)

        answer = await generator.generate("quarterly report")

        assert answer == "Summary of document: quarterly report"
        assert generator.calls == 1

    @pytest.mark.asyncio
    async def test_for_query_binds_query(self) -> None:
        generator = SimulatedGenerator(delay=0)

        compute = generator.for_query("q")

        assert generator.calls == 0
        assert await compute() == "Summary of document: q"

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValueError):
            SimulatedGenerator(delay=-1)


class TestCacheService:
    """Test suite for the HTTP endpoints."""

    @pytest_asyncio.fixture
    async def client(self) -> AsyncGenerator[test_utils.TestClient, None]:
        """Create a test client around a fresh application."""
        app = create_app(CacheSettings(generation_delay=0, capacity=2))
        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            yield client

    @pytest.mark.asyncio
    async def test_health(self, client: test_utils.TestClient) -> None:
        resp = await client.get("/health")

        assert resp.status == 200
        assert await resp.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_miss_then_hit(self, client: test_utils.TestClient) -> None:
        first = await client.post("/", json={"query": "Annual Report"})
        second = await client.post("/", json={"query": "  annual report  "})

        first_body = await first.json()
        second_body = await second.json()

        assert first.status == 200
        assert first_body["cached"] is False
        assert first_body["answer"] == "Summary of document: Annual Report"
        assert second_body["cached"] is True
        assert second_body["answer"] == first_body["answer"]
        assert second_body["cacheKey"] == first_body["cacheKey"]
        assert isinstance(second_body["latency"], int)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{}, {"query": ""}, {"query": "   "}, {"query": None}, {"query": 0}, ["query"]],
    )
    async def test_missing_query(self, client: test_utils.TestClient, payload: object) -> None:
        resp = await client.post("/", json=payload)

        assert resp.status == 400
        body = await resp.json()
        assert body["answer"] == "Query is required"
        assert body["cached"] is False
        assert "cacheKey" not in body

    @pytest.mark.asyncio
    async def test_numeric_query_answered(self, client: test_utils.TestClient) -> None:
        resp = await client.post("/", json={"query": 42})

        assert resp.status == 200
        body = await resp.json()
        assert body["answer"] == "Summary of document: 42"
        assert body["cached"] is False

    @pytest.mark.asyncio
    async def test_invalid_json(self, client: test_utils.TestClient) -> None:
        resp = await client.post(
            "/", data="not json", headers={"Content-Type": "application/json"}
        )

        assert resp.status == 400

    @pytest.mark.asyncio
    async def test_rejected_request_not_counted(self, client: test_utils.TestClient) -> None:
        await client.post("/", json={})

        stats = await (await client.get("/stats")).json()
        assert stats["total_requests"] == 0

    @pytest.mark.asyncio
    async def test_stats(self, client: test_utils.TestClient) -> None:
        await client.post("/", json={"query": "a"})
        await client.post("/", json={"query": "a"})
        await client.post("/", json={"query": "b"})

        resp = await client.get("/stats")
        stats = await resp.json()

        assert resp.status == 200
        assert stats["total_requests"] == 3
        assert stats["cache_hits"] == 1
        assert stats["cache_misses"] == 2
        assert stats["cache_size"] == 2
        assert stats["hit_rate"] == pytest.approx(1 / 3)
        assert stats["cost_savings"] == pytest.approx(500 * 0.00002)

    @pytest.mark.asyncio
    async def test_reset(self, client: test_utils.TestClient) -> None:
        await client.post("/", json={"query": "a"})
        await client.post("/", json={"query": "a"})

        resp = await client.post("/reset")
        assert resp.status == 200
        assert await resp.json() == {"status": "reset"}

        stats = await (await client.get("/stats")).json()
        assert stats["total_requests"] == 0
        assert stats["cache_hits"] == 0
        assert stats["cache_misses"] == 0
        assert stats["cache_size"] == 0

    @pytest.mark.asyncio
    async def test_cleanup_endpoint(self, client: test_utils.TestClient) -> None:
        resp = await client.post("/cleanup")

        assert resp.status == 200
        assert await resp.json() == {"removed": 0}

    @pytest.mark.asyncio
    async def test_concurrent_requests_share_computation(
        self, client: test_utils.TestClient
    ) -> None:
        generator = client.app[GENERATOR_KEY]
        generator.delay = 0.05

        responses = await asyncio.gather(
            *[client.post("/", json={"query": "shared"}) for _ in range(4)]
        )
        bodies = [await r.json() for r in responses]

        assert generator.calls == 1
        assert len({b["answer"] for b in bodies}) == 1
        assert client.app[CACHE_KEY].get_snapshot().cache_size == 1


class TestServiceFailures:
    """Test suite for failing computations behind the service."""

    class FailingGenerator(SimulatedGenerator):
        async def generate(self, query: str) -> str:
            raise RuntimeError("model offline")

    @pytest.mark.asyncio
    async def test_generation_failure_returns_500(self) -> None:
        cache = ResponseCache(store=LRUCacheStore(capacity=5, ttl_seconds=60))
        app = create_app(cache=cache, generator=self.FailingGenerator(delay=0))

        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            resp = await client.post("/", json={"query": "anything"})

            assert resp.status == 500
            assert cache.get_snapshot().cache_size == 0
