from pydantic import Field, field_validator

from .base import CacheBaseModel, validate_ratio


class StatsSnapshot(CacheBaseModel):
    total_requests: int = Field(default=0, ge=0, description="Completed lookups")
    cache_hits: int = Field(default=0, ge=0, description="Lookups served from cache")
    cache_misses: int = Field(default=0, ge=0, description="Lookups that computed")
    coalesced_requests: int = Field(
        default=0, ge=0, description="Misses that shared an in-flight computation"
    )
    hit_rate: float = Field(default=0.0, description="cache_hits / total_requests")
    cache_size: int = Field(default=0, ge=0, description="Resident cache entries")
    tokens_saved: int = Field(default=0, ge=0, description="Tokens avoided by hits")
    cost_savings: float = Field(default=0.0, ge=0.0, description="Estimated cost avoided")
    savings_percent: float = Field(default=0.0, description="hit_rate as a percentage")

    @field_validator("hit_rate")
    @classmethod
    def validate_hit_rate(cls, v: float) -> float:
        return validate_ratio(v)
