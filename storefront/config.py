"""
Storefront configuration.

Loaded once at startup from environment variables (a local .env file is read
first if present). Misconfiguration raises ConfigError naming the offending
variable; values are never guessed or swapped at runtime.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Mapping, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator, model_validator

from storefront.errors import ConfigError

# Field name -> environment variable
ENV_VARS: dict[str, str] = {
    "api_url": "SHOPIFY_API_URL",
    "access_token": "SHOPIFY_ACCESS_TOKEN",
    "request_timeout": "STOREFRONT_REQUEST_TIMEOUT",
    "checkout_timeout": "STOREFRONT_CHECKOUT_TIMEOUT",
    "cart_storage": "CART_STORAGE",
    "cart_storage_dir": "CART_STORAGE_DIR",
    "cart_ttl_seconds": "CART_TTL_SECONDS",
    "redis_url": "UPSTASH_REDIS_REST_URL",
    "redis_token": "UPSTASH_REDIS_REST_TOKEN",
}


class StorefrontConfig(BaseModel):
    """Validated storefront settings."""

    api_url: str
    access_token: str
    request_timeout: float = 10.0
    checkout_timeout: float = 15.0
    cart_storage: Literal["memory", "file", "redis"] = "memory"
    cart_storage_dir: Path = Path(".cart")
    cart_ttl_seconds: int = 86400
    redis_url: Optional[str] = None
    redis_token: Optional[str] = None

    class Config:
        frozen = True

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        v = v.strip()
        parsed = urlparse(v)
        if parsed.scheme != "https" or not parsed.netloc:
            raise ValueError("must be an https:// URL of the Storefront GraphQL endpoint")
        return v

    @field_validator("access_token")
    @classmethod
    def validate_access_token(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        if any(ch.isspace() for ch in v):
            raise ValueError("must not contain whitespace")
        return v

    @field_validator("request_timeout", "checkout_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator("cart_ttl_seconds")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @model_validator(mode="after")
    def validate_redis(self) -> "StorefrontConfig":
        # ConfigError is not a ValueError, pydantic lets it through unchanged
        if self.cart_storage == "redis" and not (self.redis_url and self.redis_token):
            raise ConfigError(
                "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN are required when CART_STORAGE=redis",
                variable=ENV_VARS["redis_url"],
            )
        return self


def _first_error(exc: ValidationError) -> ConfigError:
    """Turn the first pydantic error into a ConfigError naming the env var."""
    error = exc.errors()[0]
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else ""
    variable = ENV_VARS.get(field, field)
    if error.get("type") == "missing":
        return ConfigError(f"{variable} is not set", variable=variable)
    message = error.get("msg", "invalid value").removeprefix("Value error, ")
    return ConfigError(f"{variable} is invalid: {message}", variable=variable)


def config_from_env(environ: Mapping[str, str]) -> StorefrontConfig:
    """
    Build configuration from an environment mapping.

    Raises:
        ConfigError: If a required variable is missing or a value is invalid
    """
    values = {}
    for field, variable in ENV_VARS.items():
        raw = environ.get(variable)
        if raw is not None and raw.strip() != "":
            values[field] = raw.strip().lower() if field == "cart_storage" else raw

    try:
        return StorefrontConfig(**values)
    except ValidationError as e:
        raise _first_error(e) from e


@lru_cache(maxsize=1)
def load_config() -> StorefrontConfig:
    """Load configuration from the process environment (once)."""
    load_dotenv()
    return config_from_env(os.environ)
