"""Catalog Client - Shopify Storefront GraphQL API.

Read queries raise NetworkError when the API cannot be used and return
None / [] only for genuinely empty results. create_checkout() is the
checkout submitter used by the cart store.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from storefront.catalog import queries
from storefront.catalog.models import Collection, FilterFacet, Product
from storefront.config import StorefrontConfig
from storefront.errors import (
    ERROR_MALFORMED_RESPONSE,
    CheckoutError,
    NetworkError,
)
from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging

logger = get_logger(__name__)

ALL_COLLECTIONS_HANDLE = "all"

SORT_KEYS = frozenset({
    "COLLECTION_DEFAULT",
    "BEST_SELLING",
    "CREATED",
    "ID",
    "MANUAL",
    "PRICE",
    "RELEVANCE",
    "TITLE",
})

# Facets shown on collection pages; the API exposes no per-store facet list
DEFAULT_FILTERS = [
    FilterFacet(id="size", label="Size", values=["S", "M", "L", "XL", "XXL"]),
    FilterFacet(id="color", label="Color", values=["Black", "White", "Red", "Blue", "Green"]),
]


@dataclass
class CollectionFilters:
    """Listing filters for a collection page."""
    price_min: Optional[Decimal] = None
    price_max: Optional[Decimal] = None
    sort_key: str = "COLLECTION_DEFAULT"
    reverse: bool = False

    def __post_init__(self):
        self.sort_key = (self.sort_key or "COLLECTION_DEFAULT").upper()
        if self.sort_key not in SORT_KEYS:
            raise ValueError(f"Unsupported sort key: {self.sort_key}")

    def to_variables(self) -> dict[str, Any]:
        variables: dict[str, Any] = {"sortKey": self.sort_key, "reverse": self.reverse}
        # Price filter only applies when both bounds are set
        if self.price_min and self.price_max:
            variables["filters"] = [
                {"price": {"min": float(self.price_min), "max": float(self.price_max)}}
            ]
        return variables


def _nodes(connection: Optional[dict]) -> list[dict]:
    """
    Flatten a GraphQL connection ({edges: [{node}]}) to its nodes.

    Raises:
        TypeError, KeyError: If the connection is not shaped like one
    """
    if not connection:
        return []
    if not isinstance(connection, dict):
        raise TypeError(f"Expected a connection object, got {type(connection).__name__}")
    return [edge["node"] for edge in connection.get("edges") or []]


def _flatten_product(node: dict) -> dict:
    return {
        **node,
        "images": _nodes(node.get("images")),
        "variants": _nodes(node.get("variants")),
    }


class CatalogClient:
    """Client for the Storefront GraphQL API."""

    def __init__(self, config: StorefrontConfig, http_client: httpx.AsyncClient | None = None):
        self.api_url = config.api_url
        self.access_token = config.access_token
        self.timeout = config.request_timeout
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def execute(self, document: str, variables: dict | None = None) -> dict[str, Any]:
        """
        Run a GraphQL document and return its `data` object.

        Raises:
            NetworkError: On connection failure, non-2xx status, GraphQL
                errors or a body that is not a GraphQL response
        """
        client = await self._get_http_client()
        try:
            response = await client.post(
                self.api_url,
                json={"query": document, "variables": variables or {}},
                headers={
                    "X-Shopify-Storefront-Access-Token": self.access_token,
                    "Content-Type": "application/json",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("Storefront API returned %s", status)
            raise NetworkError(f"Storefront API returned HTTP {status}", status_code=status) from e
        except httpx.RequestError as e:
            logger.error("Storefront API request failed: %s", e)
            raise NetworkError(f"Failed to connect to Storefront API: {e!s}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise NetworkError(ERROR_MALFORMED_RESPONSE, status_code=response.status_code) from e

        if not isinstance(payload, dict):
            raise NetworkError(ERROR_MALFORMED_RESPONSE, status_code=response.status_code)

        errors = payload.get("errors")
        if errors:
            message = errors[0].get("message") if isinstance(errors[0], dict) else str(errors[0])
            logger.error("Storefront API GraphQL error: %s", message)
            raise NetworkError(f"Storefront API error: {message}", status_code=response.status_code)

        data = payload.get("data")
        if not isinstance(data, dict):
            raise NetworkError(ERROR_MALFORMED_RESPONSE, status_code=response.status_code)
        return data

    # ==================== QUERIES ====================

    async def list_collections(self, first: int = 10) -> list[Collection]:
        """Get the first `first` collections."""
        data = await self.execute(queries.GET_COLLECTIONS, {"first": first})
        try:
            nodes = _nodes(data["collections"])
            return [Collection.model_validate(node) for node in nodes]
        except (KeyError, TypeError, ValidationError) as e:
            raise NetworkError(ERROR_MALFORMED_RESPONSE) from e

    async def get_collection_by_handle(
        self,
        handle: str,
        filters: CollectionFilters | None = None,
        first: int = 20,
    ) -> Optional[Collection]:
        """
        Get a collection with its products.

        The "all" handle returns an aggregate view listing every collection
        instead of products.

        Returns:
            Collection, or None if no collection has that handle
        """
        if not handle:
            raise ValueError("Collection handle is required")

        if handle == ALL_COLLECTIONS_HANDLE:
            collections = await self.list_collections()
            if not collections:
                logger.warning("No collections found for the all-collections view")
                return None
            return Collection(
                id="all-collections",
                title="All Collections",
                handle=ALL_COLLECTIONS_HANDLE,
                description="Browse all collections in our store",
                is_collections_page=True,
                collections=collections,
            )

        filters = filters or CollectionFilters()
        variables = {"handle": handle, "first": first, **filters.to_variables()}
        data = await self.execute(queries.GET_COLLECTION_BY_HANDLE, variables)

        node = data.get("collection")
        if not node:
            logger.info("No collection found with handle: %s", sanitize_string_for_logging(handle))
            return None
        if not isinstance(node, dict):
            raise NetworkError(ERROR_MALFORMED_RESPONSE)

        try:
            products = [_flatten_product(p) for p in _nodes(node.get("products"))]
            return Collection.model_validate({**node, "products": products})
        except (KeyError, TypeError, ValidationError) as e:
            raise NetworkError(ERROR_MALFORMED_RESPONSE) from e

    async def get_featured_products(self, first: int = 4) -> list[Product]:
        """Products for the home page."""
        data = await self.execute(queries.GET_FEATURED_PRODUCTS, {"first": first})
        return self._parse_products(data)

    async def search_products(self, query: str, first: int = 20) -> list[Product]:
        """Full-text product search."""
        logger.debug("Searching products: %s", sanitize_string_for_logging(query))
        data = await self.execute(queries.SEARCH_PRODUCTS, {"query": query, "first": first})
        return self._parse_products(data)

    async def get_product_by_handle(self, handle: str) -> Optional[Product]:
        """Get a product with all variants and options, or None if unknown."""
        data = await self.execute(queries.GET_PRODUCT_BY_HANDLE, {"handle": handle})
        node = data.get("product")
        if not node:
            logger.info("No product found with handle: %s", sanitize_string_for_logging(handle))
            return None
        try:
            return Product.model_validate(_flatten_product(node))
        except (KeyError, TypeError, ValidationError) as e:
            raise NetworkError(ERROR_MALFORMED_RESPONSE) from e

    async def get_collection_filters(self, handle: str) -> list[FilterFacet]:
        """Filter facets for a collection page (same set for every collection)."""
        return [facet.model_copy(deep=True) for facet in DEFAULT_FILTERS]

    def _parse_products(self, data: dict) -> list[Product]:
        try:
            return [Product.model_validate(_flatten_product(n)) for n in _nodes(data["products"])]
        except (KeyError, TypeError, ValidationError) as e:
            raise NetworkError(ERROR_MALFORMED_RESPONSE) from e

    # ==================== MUTATIONS ====================

    async def create_checkout(self, line_items: list[dict[str, Any]]) -> dict[str, str]:
        """
        Create a checkout from `{variantId, quantity}` line items.

        Returns:
            {"id": ..., "webUrl": ...}

        Raises:
            CheckoutError: The API rejected the line items (first user error)
            NetworkError: The request could not complete
        """
        data = await self.execute(queries.CREATE_CHECKOUT, {"lineItems": line_items})

        result = data.get("checkoutCreate")
        if not isinstance(result, dict):
            raise NetworkError(ERROR_MALFORMED_RESPONSE)

        user_errors = result.get("checkoutUserErrors") or []
        if not isinstance(user_errors, list):
            raise NetworkError(ERROR_MALFORMED_RESPONSE)
        if user_errors:
            first_error = user_errors[0]
            if not isinstance(first_error, dict):
                raise NetworkError(ERROR_MALFORMED_RESPONSE)
            message = first_error.get("message")
            if not isinstance(message, str) or not message:
                message = "Checkout was rejected"
            logger.warning("Checkout rejected: %s", sanitize_string_for_logging(message, max_length=200))
            raise CheckoutError(
                message,
                field=first_error.get("field"),
                error_code=first_error.get("code"),
            )

        checkout = result.get("checkout")
        if not isinstance(checkout, dict) or not isinstance(checkout.get("webUrl"), str) or not checkout["webUrl"]:
            raise NetworkError(ERROR_MALFORMED_RESPONSE)

        logger.info("Checkout created: %s", sanitize_id_for_logging(checkout.get("id")))
        return {"id": checkout.get("id"), "webUrl": checkout["webUrl"]}
