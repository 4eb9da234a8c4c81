# ABOUTME: Request statistics for the response cache: hits, misses, hit rate and cost savings
# ABOUTME: Savings are an accounting estimate of tokens a hit avoided at a fixed per-token price

import threading

from models import StatsSnapshot

DEFAULT_AVG_TOKENS = 500
DEFAULT_COST_PER_TOKEN = 0.00002  # $0.02 per 1K tokens


class StatsRecorder:
    """Counts lookup outcomes and derives savings on demand."""

    def __init__(
        self,
        avg_tokens: int = DEFAULT_AVG_TOKENS,
        cost_per_token: float = DEFAULT_COST_PER_TOKEN,
    ):
        """Initialize recorder with the per-request cost model."""
        self.avg_tokens = avg_tokens
        self.cost_per_token = cost_per_token
        self.total_requests = 0
        self.hits = 0
        self.misses = 0
        self.coalesced = 0
        self._lock = threading.Lock()

    def record_hit(self) -> None:
        """Record a lookup served from the cache."""
        with self._lock:
            self.total_requests += 1
            self.hits += 1

    def record_miss(self, coalesced: bool = False) -> None:
        """Record a lookup that had to compute (or wait on a computation)."""
        with self._lock:
            self.total_requests += 1
            self.misses += 1
            if coalesced:
                self.coalesced += 1

    def snapshot(self, cache_size: int) -> StatsSnapshot:
        """Build a statistics snapshot from the live counters."""
        with self._lock:
            total, hits, misses = self.total_requests, self.hits, self.misses
            coalesced = self.coalesced

        hit_rate = hits / total if total else 0.0
        # Baseline (every request a miss) minus actual (misses only)
        cost_savings = hits * self.avg_tokens * self.cost_per_token

        return StatsSnapshot(
            total_requests=total,
            cache_hits=hits,
            cache_misses=misses,
            coalesced_requests=coalesced,
            hit_rate=hit_rate,
            cache_size=cache_size,
            tokens_saved=hits * self.avg_tokens,
            cost_savings=cost_savings,
            savings_percent=hit_rate * 100,
        )

    def reset(self) -> None:
        """Zero all counters."""
        with self._lock:
            self.total_requests = 0
            self.hits = 0
            self.misses = 0
            self.coalesced = 0
