# ABOUTME: Runtime settings for the response cache service loaded from environment and .env
# ABOUTME: Covers cache sizing, TTL, the cost model, simulated generation delay and bind address

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_VARS = {
    "capacity": "CACHE_CAPACITY",
    "ttl_seconds": "CACHE_TTL_SECONDS",
    "avg_tokens": "CACHE_AVG_TOKENS",
    "cost_per_token": "CACHE_COST_PER_TOKEN",
    "generation_delay": "GENERATION_DELAY",
    "coalesce_misses": "CACHE_COALESCE_MISSES",
    "host": "HOST",
    "port": "PORT",
    "log_level": "LOG_LEVEL",
}


class CacheSettings(BaseModel):
    capacity: int = Field(default=100, gt=0, description="Maximum resident entries")
    ttl_seconds: float = Field(default=300.0, gt=0, description="Entry time-to-live")
    avg_tokens: int = Field(default=500, ge=0, description="Tokens per generated answer")
    cost_per_token: float = Field(default=0.00002, ge=0, description="Cost per token")
    generation_delay: float = Field(
        default=1.2, ge=0, description="Simulated generation delay in seconds"
    )
    coalesce_misses: bool = Field(
        default=True, description="Share one computation between concurrent misses"
    )
    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=3000, gt=0, lt=65536, description="Bind port")
    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @classmethod
    def from_env(
        cls, env_file: Optional[str] = None, **overrides: Any
    ) -> "CacheSettings":
        """Build settings from environment variables, then explicit overrides."""
        load_dotenv(env_file)

        values: Dict[str, Any] = {}
        for field_name, env_name in ENV_VARS.items():
            raw = os.getenv(env_name)
            if raw is not None and raw != "":
                values[field_name] = raw

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
