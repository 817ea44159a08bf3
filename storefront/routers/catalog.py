"""
Catalog API Router

Read-only endpoints over the Storefront API: collections, products, search.
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.catalog import CatalogClient, CollectionFilters, Product
from storefront.errors import (
    ERROR_CATALOG_NOT_CONFIGURED,
    ERROR_CATALOG_UNAVAILABLE,
    ERROR_COLLECTION_NOT_FOUND,
    ERROR_PRODUCT_NOT_FOUND,
    NetworkError,
)
from storefront.logging import get_logger
from storefront.variants import VariantSelector

from .deps import get_catalog_client

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["catalog"])


def catalog_http_error(error: NetworkError) -> HTTPException:
    """Map a catalog failure to the response the storefront shows."""
    if error.is_configuration_error:
        return HTTPException(status_code=503, detail=ERROR_CATALOG_NOT_CONFIGURED)
    return HTTPException(status_code=502, detail=ERROR_CATALOG_UNAVAILABLE)


def product_detail(product: Product) -> dict:
    """Product payload with its default selection and option button states."""
    selector = VariantSelector(product)
    return {
        **product.model_dump(mode="json"),
        "selected_variant_id": selector.variant.id if selector.variant else None,
        "selection": selector.selection,
        "option_values": [
            {
                "name": state.name,
                "value": state.value,
                "selected": state.selected,
                "disabled": state.disabled,
            }
            for state in selector.option_states()
        ],
    }


@router.get("/collections")
async def list_collections(client: CatalogClient = Depends(get_catalog_client)):
    """All collections (first page)."""
    try:
        collections = await client.list_collections()
    except NetworkError as e:
        raise catalog_http_error(e)
    return [c.model_dump(mode="json") for c in collections]


@router.get("/collections/{handle}")
async def get_collection(
    handle: str,
    price_min: Optional[Decimal] = Query(default=None, ge=0),
    price_max: Optional[Decimal] = Query(default=None, ge=0),
    sort_key: str = "COLLECTION_DEFAULT",
    reverse: bool = False,
    client: CatalogClient = Depends(get_catalog_client),
):
    """Collection with products; `all` lists every collection instead."""
    try:
        filters = CollectionFilters(
            price_min=price_min, price_max=price_max, sort_key=sort_key, reverse=reverse
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        collection = await client.get_collection_by_handle(handle, filters)
    except NetworkError as e:
        raise catalog_http_error(e)

    if collection is None:
        raise HTTPException(status_code=404, detail=ERROR_COLLECTION_NOT_FOUND)
    return collection.model_dump(mode="json")


@router.get("/collections/{handle}/filters")
async def get_collection_filters(handle: str, client: CatalogClient = Depends(get_catalog_client)):
    facets = await client.get_collection_filters(handle)
    return [f.model_dump(mode="json") for f in facets]


@router.get("/products/featured")
async def get_featured_products(
    first: int = Query(default=4, ge=1, le=50),
    client: CatalogClient = Depends(get_catalog_client),
):
    try:
        products = await client.get_featured_products(first)
    except NetworkError as e:
        raise catalog_http_error(e)
    return [p.model_dump(mode="json") for p in products]


@router.get("/products/{handle}")
async def get_product(handle: str, client: CatalogClient = Depends(get_catalog_client)):
    """Product detail with default variant selection."""
    try:
        product = await client.get_product_by_handle(handle)
    except NetworkError as e:
        raise catalog_http_error(e)

    if product is None:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return product_detail(product)


@router.get("/search")
async def search_products(
    q: str = Query(min_length=1),
    first: int = Query(default=20, ge=1, le=100),
    client: CatalogClient = Depends(get_catalog_client),
):
    try:
        products = await client.search_products(q, first)
    except NetworkError as e:
        raise catalog_http_error(e)
    return {"query": q, "products": [p.model_dump(mode="json") for p in products]}
