# ABOUTME: aiohttp web application exposing the response cache over HTTP
# ABOUTME: Handles query lookups, statistics, administrative reset and expired-entry sweeps

import logging
import time
from typing import Any, Dict, Optional

from aiohttp import web
from pydantic import ValidationError

from cache import ResponseCache
from models import QueryRequest, QueryResponse

from .config import CacheSettings
from .generator import SimulatedGenerator

logger = logging.getLogger(__name__)

CACHE_KEY = web.AppKey("response_cache", ResponseCache)
GENERATOR_KEY = web.AppKey("generator", SimulatedGenerator)
SETTINGS_KEY = web.AppKey("settings", CacheSettings)


def _latency_ms(start_time: float) -> int:
    return int((time.perf_counter() - start_time) * 1000)


def _response_body(response: QueryResponse) -> Dict[str, Any]:
    return response.model_dump(by_alias=True, exclude_none=True)


async def _read_payload(request: web.Request) -> Dict[str, Any]:
    """Parse the JSON body, treating anything but an object as empty."""
    try:
        payload = await request.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


async def handle_query(request: web.Request) -> web.Response:
    start_time = time.perf_counter()
    payload = await _read_payload(request)

    try:
        query_request = QueryRequest(query=payload.get("query"))
    except ValidationError:
        logger.warning("Rejected request without a query")
        body = QueryResponse(
            answer="Query is required", cached=False, latency=_latency_ms(start_time)
        )
        return web.json_response(_response_body(body), status=400)

    cache = request.app[CACHE_KEY]
    generator = request.app[GENERATOR_KEY]

    try:
        result = await cache.lookup_or_compute(
            query_request.query, generator.for_query(query_request.query)
        )
    except Exception:
        logger.exception("Answer generation failed")
        return web.json_response({"error": "Answer generation failed"}, status=500)

    body = QueryResponse(
        answer=result.answer,
        cached=result.was_hit,
        latency=_latency_ms(start_time),
        cache_key=result.key,
    )
    return web.json_response(_response_body(body))


async def handle_stats(request: web.Request) -> web.Response:
    snapshot = request.app[CACHE_KEY].get_snapshot()
    return web.json_response(snapshot.model_dump())


async def handle_reset(request: web.Request) -> web.Response:
    request.app[CACHE_KEY].reset_all()
    return web.json_response({"status": "reset"})


async def handle_cleanup(request: web.Request) -> web.Response:
    removed = request.app[CACHE_KEY].cleanup()
    return web.json_response({"removed": removed})


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


async def _log_startup(app: web.Application) -> None:
    settings = app[SETTINGS_KEY]
    logger.info(
        f"Response cache ready (capacity={settings.capacity}, "
        f"ttl={settings.ttl_seconds}s, coalesce={settings.coalesce_misses})"
    )


def create_app(
    settings: Optional[CacheSettings] = None,
    cache: Optional[ResponseCache] = None,
    generator: Optional[SimulatedGenerator] = None,
) -> web.Application:
    """Create the web application around a single shared response cache."""
    settings = settings or CacheSettings()

    app = web.Application()
    app[SETTINGS_KEY] = settings
    app[CACHE_KEY] = cache or ResponseCache(
        capacity=settings.capacity,
        ttl_seconds=settings.ttl_seconds,
        avg_tokens=settings.avg_tokens,
        cost_per_token=settings.cost_per_token,
        coalesce_misses=settings.coalesce_misses,
    )
    app[GENERATOR_KEY] = generator or SimulatedGenerator(
        delay=settings.generation_delay
    )

    app.router.add_post("/", handle_query)
    app.router.add_get("/stats", handle_stats)
    app.router.add_post("/reset", handle_reset)
    app.router.add_post("/cleanup", handle_cleanup)
    app.router.add_get("/health", handle_health)
    app.on_startup.append(_log_startup)

    return app
