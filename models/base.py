from pydantic import BaseModel, ConfigDict


class CacheBaseModel(BaseModel):
    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)


def validate_query_text(query: str) -> str:
    if not isinstance(query, str) or not query.strip():
        raise ValueError("Query is required")
    return query


def validate_ratio(value: float) -> float:
    if not 0.0 <= value <= 1.0:
        raise ValueError("Ratio must be between 0.0 and 1.0")
    return value
