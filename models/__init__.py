from .base import CacheBaseModel, validate_query_text, validate_ratio
from .entry import CacheEntry, LookupResult
from .query import QueryRequest, QueryResponse
from .stats import StatsSnapshot

__all__ = [
    # Base infrastructure
    "CacheBaseModel",
    "validate_query_text",
    "validate_ratio",

    # Cache models
    "CacheEntry",
    "LookupResult",
    "StatsSnapshot",

    # Request/response models
    "QueryRequest",
    "QueryResponse",
]
