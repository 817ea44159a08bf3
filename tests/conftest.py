"""Pytest configuration and fixtures"""
import os
from decimal import Decimal

import pytest

# Set test environment variables
os.environ.setdefault("SHOPIFY_API_URL", "https://test-shop.myshopify.com/api/2024-01/graphql.json")
os.environ.setdefault("SHOPIFY_ACCESS_TOKEN", "test_storefront_token_0123456789")
os.environ.setdefault("CART_STORAGE", "memory")

from storefront.cart import CartStore, LineItem, MemoryCartStorage  # noqa: E402
from storefront.catalog import Product  # noqa: E402
from storefront.config import config_from_env  # noqa: E402


def _variant_node(variant_id, title, available, amount, options, compare_at=None):
    return {
        "id": variant_id,
        "title": title,
        "availableForSale": available,
        "priceV2": {"amount": amount, "currencyCode": "USD"},
        "compareAtPriceV2": {"amount": compare_at, "currencyCode": "USD"} if compare_at else None,
        "selectedOptions": [{"name": n, "value": v} for n, v in options],
    }


@pytest.fixture
def product_node():
    """Product as returned by GetProductByHandle (before edge flattening)"""
    variants = [
        _variant_node("gid://shopify/ProductVariant/1", "S / Black", False, "25.00", [("Size", "S"), ("Color", "Black")]),
        _variant_node("gid://shopify/ProductVariant/2", "M / Black", True, "25.00", [("Size", "M"), ("Color", "Black")], compare_at="30.00"),
        _variant_node("gid://shopify/ProductVariant/3", "M / White", True, "27.50", [("Size", "M"), ("Color", "White")]),
        _variant_node("gid://shopify/ProductVariant/4", "L / White", False, "27.50", [("Size", "L"), ("Color", "White")]),
    ]
    return {
        "id": "gid://shopify/Product/100",
        "title": "Classic Tee",
        "handle": "classic-tee",
        "description": "A plain tee",
        "descriptionHtml": "<p>A plain tee</p>",
        "availableForSale": True,
        "productType": "Shirts",
        "vendor": "Acme",
        "priceRange": {
            "minVariantPrice": {"amount": "25.0", "currencyCode": "USD"},
            "maxVariantPrice": {"amount": "27.5", "currencyCode": "USD"},
        },
        "images": {"edges": [
            {"node": {"id": "img-1", "url": "https://cdn.example.com/tee.jpg", "altText": "Tee", "width": 800, "height": 800}},
        ]},
        "variants": {"edges": [{"node": v} for v in variants]},
        "options": [
            {"id": "opt-size", "name": "Size", "values": ["S", "M", "L"]},
            {"id": "opt-color", "name": "Color", "values": ["Black", "White"]},
        ],
    }


@pytest.fixture
def product(product_node):
    """Parsed Product model"""
    node = {
        **product_node,
        "images": [e["node"] for e in product_node["images"]["edges"]],
        "variants": [e["node"] for e in product_node["variants"]["edges"]],
    }
    return Product.model_validate(node)


@pytest.fixture
def make_item():
    """Factory for line items"""
    def _make(item_id="v1", quantity=1, price="10.00", currency_code="USD", **kwargs):
        return LineItem(
            id=item_id,
            product_id=kwargs.pop("product_id", "p1"),
            title=kwargs.pop("title", "Test Product"),
            handle=kwargs.pop("handle", "test-product"),
            price=Decimal(price),
            currency_code=currency_code,
            quantity=quantity,
            **kwargs,
        )
    return _make


class FakeSubmitter:
    """Checkout submitter returning a canned response or raising"""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {"id": "checkout-1", "webUrl": "https://x/checkout"}
        self.error = error
        self.calls = []

    async def create_checkout(self, line_items):
        self.calls.append(line_items)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_submitter():
    return FakeSubmitter


@pytest.fixture
def submitter():
    return FakeSubmitter()


@pytest.fixture
def storage():
    return MemoryCartStorage()


@pytest.fixture
def store(storage, submitter):
    return CartStore(storage=storage, submitter=submitter, checkout_timeout=1.0)


@pytest.fixture
def config():
    return config_from_env({
        "SHOPIFY_API_URL": "https://test-shop.myshopify.com/api/2024-01/graphql.json",
        "SHOPIFY_ACCESS_TOKEN": "test_storefront_token_0123456789",
    })
