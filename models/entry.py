from pydantic import ConfigDict, Field

from .base import CacheBaseModel


class CacheEntry(CacheBaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, description="Derived cache key")
    answer: str = Field(..., description="Cached answer text")
    created_at: float = Field(..., description="Insertion timestamp (seconds)")

    def age(self, now: float) -> float:
        return now - self.created_at

    def is_expired(self, now: float, ttl: float) -> bool:
        return self.age(now) >= ttl


class LookupResult(CacheBaseModel):
    answer: str = Field(..., description="Cached or freshly computed answer")
    was_hit: bool = Field(..., description="True when served from the cache")
    key: str = Field(..., description="Derived cache key")
    coalesced: bool = Field(
        default=False, description="True when the miss joined an in-flight computation"
    )
