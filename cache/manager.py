# ABOUTME: Response cache facade combining key derivation, LRU-TTL storage and usage statistics
# ABOUTME: Runs the lookup-or-compute flow and coalesces concurrent misses for the same key

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

from models import LookupResult, StatsSnapshot

from .keys import CacheKeyGenerator
from .stats import DEFAULT_AVG_TOKENS, DEFAULT_COST_PER_TOKEN, StatsRecorder
from .store import LRUCacheStore

logger = logging.getLogger(__name__)

ComputeFn = Callable[[], Awaitable[str]]


def _consume_exception(future: "asyncio.Future[str]") -> None:
    # Nobody may be waiting on a failed computation
    if not future.cancelled():
        future.exception()


class ResponseCache:
    """Cache in front of an expensive answer computation.

    One instance is shared by every request handler. Store and statistics
    calls are synchronous; the only suspension point is ``compute``, which is
    awaited on a miss and whose result is stored only once it completes.
    """

    def __init__(
        self,
        capacity: int = 100,
        ttl_seconds: float = 300,
        avg_tokens: int = DEFAULT_AVG_TOKENS,
        cost_per_token: float = DEFAULT_COST_PER_TOKEN,
        coalesce_misses: bool = True,
        store: Optional[LRUCacheStore] = None,
        stats: Optional[StatsRecorder] = None,
    ):
        """Initialize response cache with its store, recorder and key generator."""
        if store is None:
            store = LRUCacheStore(capacity=capacity, ttl_seconds=ttl_seconds)
        if stats is None:
            stats = StatsRecorder(avg_tokens=avg_tokens, cost_per_token=cost_per_token)
        self.store = store
        self.stats = stats
        self.key_generator = CacheKeyGenerator()
        self.coalesce_misses = coalesce_misses

        # key -> future resolved by the request computing that key
        self._inflight: Dict[str, "asyncio.Future[str]"] = {}

    async def lookup_or_compute(self, query: str, compute: ComputeFn) -> LookupResult:
        """Return the cached answer for ``query`` or compute, store and return it."""
        key = self.key_generator.generate_key(query)
        recorded = False

        while True:
            answer = self.store.get(key)
            if answer is not None:
                if recorded:
                    # A retry after an abandoned computation found a fresh entry
                    return LookupResult(answer=answer, was_hit=False, key=key)
                self.stats.record_hit()
                logger.debug(f"Cache hit for {key}")
                return LookupResult(answer=answer, was_hit=True, key=key)

            pending = self._inflight.get(key) if self.coalesce_misses else None
            if pending is None:
                break

            if not recorded:
                self.stats.record_miss(coalesced=True)
                recorded = True
            logger.debug(f"Joining in-flight computation for {key}")

            # Never raises for the pending future; a CancelledError here is our own
            await asyncio.wait({pending})
            if pending.cancelled():
                # The computing request went away; look up again
                continue

            return LookupResult(
                answer=pending.result(), was_hit=False, key=key, coalesced=True
            )

        if not recorded:
            self.stats.record_miss()
        logger.debug(f"Cache miss for {key}")

        return await self._compute_and_store(key, compute)

    async def _compute_and_store(self, key: str, compute: ComputeFn) -> LookupResult:
        """Run the computation and store its result, sharing it with waiters."""
        future: Optional["asyncio.Future[str]"] = None
        if self.coalesce_misses:
            future = asyncio.get_running_loop().create_future()
            future.add_done_callback(_consume_exception)
            self._inflight[key] = future

        try:
            answer = await compute()
            self.store.put(key, answer)
        except asyncio.CancelledError:
            if future is not None:
                future.cancel()
            raise
        except Exception as exc:
            if future is not None:
                future.set_exception(exc)
            raise
        else:
            if future is not None:
                future.set_result(answer)
        finally:
            if future is not None:
                if not future.done():
                    # Interrupted by a non-Exception error; waiters retry
                    future.cancel()
                if self._inflight.get(key) is future:
                    del self._inflight[key]

        return LookupResult(answer=answer, was_hit=False, key=key)

    def get_snapshot(self) -> StatsSnapshot:
        """Get statistics reflecting the live counters and cache size."""
        return self.stats.snapshot(cache_size=self.store.size())

    def reset_all(self) -> None:
        """Clear all cached answers and zero the statistics."""
        self.store.clear()
        self.stats.reset()
        logger.info("Cache and statistics reset")

    def cleanup(self) -> int:
        """Sweep expired entries and return count removed."""
        removed = self.store.cleanup_expired()
        logger.info(f"Removed {removed} expired cache entries")
        return removed

    def get_cache_key(self, query: str) -> str:
        """Get cache key for given query (for testing)."""
        return self.key_generator.generate_key(query)

    @property
    def inflight_count(self) -> int:
        """Number of keys with a computation currently in progress."""
        return len(self._inflight)
