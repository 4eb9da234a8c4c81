from typing import Optional

from pydantic import Field, field_validator

from .base import CacheBaseModel, validate_query_text


class QueryRequest(CacheBaseModel):
    query: str = Field(..., description="Query text to answer")

    @field_validator("query", mode="before")
    @classmethod
    def validate_query(cls, v: object) -> str:
        if v is None:
            raise ValueError("Query is required")
        # Non-zero numbers are templated as text; zero and booleans are not
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v:
            v = str(v)
        return validate_query_text(v)  # type: ignore[arg-type]


class QueryResponse(CacheBaseModel):
    answer: str = Field(..., description="Answer text or error message")
    cached: bool = Field(default=False, description="Served from cache")
    latency: int = Field(default=0, ge=0, description="Handling time in milliseconds")
    cache_key: Optional[str] = Field(
        default=None, alias="cacheKey", description="Derived cache key"
    )
