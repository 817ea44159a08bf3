"""
Tests for configuration loading
"""

from pathlib import Path

import pytest

from storefront.config import config_from_env
from storefront.errors import ConfigError

BASE = {
    "SHOPIFY_API_URL": "https://shop.example.com/api/2024-01/graphql.json",
    "SHOPIFY_ACCESS_TOKEN": "token_0123456789",
}


def test_minimal_config_defaults():
    config = config_from_env(BASE)

    assert config.api_url == BASE["SHOPIFY_API_URL"]
    assert config.access_token == "token_0123456789"
    assert config.request_timeout == 10.0
    assert config.checkout_timeout == 15.0
    assert config.cart_storage == "memory"
    assert config.cart_storage_dir == Path(".cart")
    assert config.cart_ttl_seconds == 86400


def test_values_are_parsed():
    config = config_from_env({
        **BASE,
        "STOREFRONT_REQUEST_TIMEOUT": "2.5",
        "STOREFRONT_CHECKOUT_TIMEOUT": "30",
        "CART_STORAGE": " FILE ",
        "CART_STORAGE_DIR": "/tmp/carts",
        "CART_TTL_SECONDS": "0",
    })

    assert config.request_timeout == 2.5
    assert config.checkout_timeout == 30.0
    assert config.cart_storage == "file"
    assert config.cart_storage_dir == Path("/tmp/carts")
    assert config.cart_ttl_seconds == 0


def test_surrounding_whitespace_is_stripped():
    config = config_from_env({
        "SHOPIFY_API_URL": "  https://shop.example.com/api/graphql.json\n",
        "SHOPIFY_ACCESS_TOKEN": " token_0123456789 ",
    })

    assert config.api_url == "https://shop.example.com/api/graphql.json"
    assert config.access_token == "token_0123456789"


@pytest.mark.parametrize("missing", ["SHOPIFY_API_URL", "SHOPIFY_ACCESS_TOKEN"])
def test_missing_required_variable(missing):
    environ = {k: v for k, v in BASE.items() if k != missing}

    with pytest.raises(ConfigError) as exc_info:
        config_from_env(environ)

    assert exc_info.value.variable == missing
    assert str(exc_info.value) == f"{missing} is not set"


def test_blank_value_counts_as_missing():
    with pytest.raises(ConfigError) as exc_info:
        config_from_env({**BASE, "SHOPIFY_ACCESS_TOKEN": "   "})

    assert exc_info.value.variable == "SHOPIFY_ACCESS_TOKEN"


@pytest.mark.parametrize("url", [
    "http://shop.example.com/api/graphql.json",
    "shop.example.com/api/graphql.json",
    "https://",
])
def test_api_url_must_be_https(url):
    with pytest.raises(ConfigError) as exc_info:
        config_from_env({**BASE, "SHOPIFY_API_URL": url})

    assert exc_info.value.variable == "SHOPIFY_API_URL"
    assert "https://" in str(exc_info.value)


def test_token_with_whitespace():
    with pytest.raises(ConfigError) as exc_info:
        config_from_env({**BASE, "SHOPIFY_ACCESS_TOKEN": "two words"})

    assert exc_info.value.variable == "SHOPIFY_ACCESS_TOKEN"
    assert str(exc_info.value) == "SHOPIFY_ACCESS_TOKEN is invalid: must not contain whitespace"


@pytest.mark.parametrize("variable,value", [
    ("STOREFRONT_REQUEST_TIMEOUT", "0"),
    ("STOREFRONT_CHECKOUT_TIMEOUT", "-1"),
    ("STOREFRONT_CHECKOUT_TIMEOUT", "soon"),
    ("CART_TTL_SECONDS", "-5"),
    ("CART_STORAGE", "sqlite"),
])
def test_invalid_optional_values(variable, value):
    with pytest.raises(ConfigError) as exc_info:
        config_from_env({**BASE, variable: value})

    assert exc_info.value.variable == variable


def test_redis_requires_credentials():
    with pytest.raises(ConfigError) as exc_info:
        config_from_env({**BASE, "CART_STORAGE": "redis", "UPSTASH_REDIS_REST_URL": "https://redis.example.com"})

    assert exc_info.value.variable == "UPSTASH_REDIS_REST_URL"


def test_config_is_immutable():
    config = config_from_env(BASE)

    with pytest.raises(Exception):
        config.api_url = "https://other.example.com"
