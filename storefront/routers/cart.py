"""
Cart API Router

Cart endpoints over the process-wide CartStore.

Response format:
- Line item prices are floats (JSON), totals are also given pre-formatted
- `checkout_url` is set after a successful checkout; the client redirects
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from storefront.cart import CartState, CartStore
from storefront.catalog import CatalogClient
from storefront.errors import (
    ERROR_PRODUCT_NOT_FOUND,
    ERROR_VARIANT_NOT_FOUND,
    ERROR_VARIANT_UNAVAILABLE,
    CartValidationError,
    CheckoutInProgressError,
    NetworkError,
)
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.money import format_money, to_float
from storefront.variants import default_variant, find_variant, initial_selection, line_item_for

from .catalog import catalog_http_error
from .deps import get_cart_store, get_catalog_client
from .models import AddCartItemRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _format_cart_response(state: CartState) -> dict:
    """Cart payload with derived totals."""
    currency = state.currency_code
    return {
        "items": [
            {
                "id": item.id,
                "product_id": item.product_id,
                "title": item.title,
                "variant_title": item.variant_title,
                "handle": item.handle,
                "price": to_float(item.price),
                "currency_code": item.currency_code,
                "image_url": item.image_url,
                "quantity": item.quantity,
                "line_total": to_float(item.line_total),
            }
            for item in state.items
        ],
        "item_count": state.item_count,
        "subtotal": to_float(state.subtotal),
        "subtotal_formatted": format_money(state.subtotal, currency),
        "currency_code": currency,
        "checkout_url": state.checkout_url,
        "loading": state.loading,
        "error": state.error,
    }


@router.get("")
async def get_cart(store: CartStore = Depends(get_cart_store)):
    return _format_cart_response(store.state)


@router.post("/items")
async def add_cart_item(
    request: AddCartItemRequest,
    store: CartStore = Depends(get_cart_store),
    client: CatalogClient = Depends(get_catalog_client),
):
    """Resolve the requested variant and add it to the cart."""
    try:
        product = await client.get_product_by_handle(request.handle)
    except NetworkError as e:
        raise catalog_http_error(e)
    if product is None:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)

    if request.variant_id:
        variant = next((v for v in product.variants if v.id == request.variant_id), None)
    else:
        selection = {**initial_selection(default_variant(product.variants)), **request.options}
        variant = find_variant(product.variants, selection)

    if variant is None:
        raise HTTPException(status_code=400, detail=ERROR_VARIANT_NOT_FOUND)
    if not variant.available_for_sale:
        logger.info("Rejected unavailable variant %s", sanitize_id_for_logging(variant.id))
        raise HTTPException(status_code=400, detail=ERROR_VARIANT_UNAVAILABLE)

    try:
        state = store.add_to_cart(line_item_for(product, variant, request.quantity))
    except CartValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _format_cart_response(state)


@router.patch("/items/{variant_id:path}")
async def update_cart_item(
    variant_id: str,
    request: UpdateCartItemRequest,
    store: CartStore = Depends(get_cart_store),
):
    try:
        state = store.update_cart_item(variant_id, request.quantity)
    except CartValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _format_cart_response(state)


@router.delete("/items/{variant_id:path}")
async def remove_cart_item(variant_id: str, store: CartStore = Depends(get_cart_store)):
    return _format_cart_response(store.remove_from_cart(variant_id))


@router.delete("")
async def clear_cart(store: CartStore = Depends(get_cart_store)):
    return _format_cart_response(store.clear_cart())


@router.post("/checkout")
async def checkout(store: CartStore = Depends(get_cart_store)):
    """Create a checkout; 502 with the cart's error message if it is rejected."""
    try:
        checkout_url = await store.checkout()
    except CheckoutInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))

    payload = _format_cart_response(store.state)
    if checkout_url is None:
        return JSONResponse(status_code=502, content=payload)
    return payload
