# ABOUTME: In-memory response cache package with LRU eviction, TTL expiry and usage statistics
# ABOUTME: Includes query key derivation, the LRU-TTL store, the stats recorder and the cache facade

from .keys import CacheKeyGenerator, derive_key
from .manager import ResponseCache
from .stats import StatsRecorder
from .store import LRUCacheStore

__all__ = [
    "CacheKeyGenerator",
    "derive_key",
    "LRUCacheStore",
    "StatsRecorder",
    "ResponseCache",
]
