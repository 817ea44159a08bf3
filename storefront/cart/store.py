"""
Cart Store - single owner of the cart state.

All mutations go through CartStore methods (or dispatch()), are applied
synchronously in call order, and are written through to storage before the
method returns. checkout() is the only operation that awaits; its lifecycle
is pending (loading) -> fulfilled (checkout_url) | rejected (error).

Usage:
    store = CartStore(storage=MemoryCartStorage(), submitter=catalog_client)
    store.add_to_cart(line_item)
    url = await store.checkout()
"""

import asyncio
from dataclasses import dataclass, replace
from typing import Callable, Optional, Union

from storefront.errors import (
    ERROR_CHECKOUT_FAILED,
    ERROR_CHECKOUT_NOT_CONFIGURED,
    ERROR_CHECKOUT_TIMEOUT,
    ERROR_EMPTY_CART,
    CartValidationError,
    CatalogError,
    CheckoutInProgressError,
)
from storefront.logging import get_logger

from .checkout import CheckoutSubmitter, build_checkout_payload
from .models import CartState, LineItem, validate_quantity
from .storage import CartStorage, MemoryCartStorage

logger = get_logger(__name__)

DEFAULT_CHECKOUT_TIMEOUT = 15.0

Listener = Callable[[CartState], None]


# ==================== ACTIONS ====================

@dataclass(frozen=True)
class AddToCart:
    item: LineItem


@dataclass(frozen=True)
class UpdateCartItem:
    id: str
    quantity: int


@dataclass(frozen=True)
class RemoveFromCart:
    id: str


@dataclass(frozen=True)
class ClearCart:
    pass


CartAction = Union[AddToCart, UpdateCartItem, RemoveFromCart, ClearCart]


class CartStore:
    """Owns a CartState; the only code allowed to mutate it."""

    def __init__(
        self,
        storage: CartStorage | None = None,
        submitter: CheckoutSubmitter | None = None,
        checkout_timeout: float = DEFAULT_CHECKOUT_TIMEOUT,
    ):
        self._storage = storage if storage is not None else MemoryCartStorage()
        self._submitter = submitter
        self._checkout_timeout = checkout_timeout
        self._listeners: list[Listener] = []
        self._state = self._storage.load()
        self._state.loading = False
        self._state.error = None

    @property
    def state(self) -> CartState:
        """Snapshot of the current state; changes to it do not affect the store."""
        return self._state.copy()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(state)` after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ==================== MUTATIONS ====================

    def add_to_cart(self, item: LineItem) -> CartState:
        """Append the item, or add its quantity to the entry with the same variant id."""
        if not isinstance(item, LineItem):
            raise CartValidationError("add_to_cart expects a LineItem")

        if self._state.items and item.currency_code != self._state.currency_code:
            logger.warning(
                "Adding %s item to a %s cart; subtotal is shown in %s",
                item.currency_code,
                self._state.currency_code,
                self._state.currency_code,
            )

        existing = self._state.find(item.id)
        if existing:
            existing.quantity += item.quantity
        else:
            self._state.items.append(replace(item))

        self._commit()
        return self.state

    def update_cart_item(self, item_id: str, quantity: int) -> CartState:
        """
        Set the quantity of an entry. Unknown ids are ignored.

        Raises:
            CartValidationError: If quantity is not an integer >= 1
        """
        validate_quantity(quantity)

        existing = self._state.find(item_id)
        if existing:
            existing.quantity = quantity

        self._commit()
        return self.state

    def remove_from_cart(self, item_id: str) -> CartState:
        """Remove an entry. Unknown ids are ignored."""
        self._state.items = [item for item in self._state.items if item.id != item_id]
        self._commit()
        return self.state

    def clear_cart(self) -> CartState:
        """Empty the cart and forget the last checkout URL."""
        self._state.items = []
        self._state.checkout_url = None
        self._commit()
        return self.state

    def dispatch(self, action: CartAction) -> CartState:
        """Apply a cart action."""
        if isinstance(action, AddToCart):
            return self.add_to_cart(action.item)
        if isinstance(action, UpdateCartItem):
            return self.update_cart_item(action.id, action.quantity)
        if isinstance(action, RemoveFromCart):
            return self.remove_from_cart(action.id)
        if isinstance(action, ClearCart):
            return self.clear_cart()
        raise TypeError(f"Unknown cart action: {action!r}")

    # ==================== CHECKOUT ====================

    async def checkout(self) -> Optional[str]:
        """
        Create a hosted checkout for the current items.

        Sets loading before the request is sent. On success records and
        returns the checkout URL; navigating to it is the caller's job. On
        failure records the error message, keeps the previous checkout URL
        and returns None.

        Raises:
            CheckoutInProgressError: If a checkout is already in flight
        """
        if self._state.loading:
            raise CheckoutInProgressError()

        self._state.loading = True
        self._state.error = None
        self._notify()

        if not self._state.items:
            self._reject(ERROR_EMPTY_CART)
            return None
        if self._submitter is None:
            self._reject(ERROR_CHECKOUT_NOT_CONFIGURED)
            return None

        payload = build_checkout_payload(self._state.items)

        try:
            result = await asyncio.wait_for(
                self._submitter.create_checkout(payload),
                timeout=self._checkout_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Checkout timed out after %ss", self._checkout_timeout)
            self._reject(ERROR_CHECKOUT_TIMEOUT)
            return None
        except CatalogError as e:
            self._reject(e.message or ERROR_CHECKOUT_FAILED)
            return None
        except asyncio.CancelledError:
            self._reject(ERROR_CHECKOUT_FAILED)
            raise
        except Exception:
            logger.exception("Unexpected checkout failure")
            self._reject(ERROR_CHECKOUT_FAILED)
            return None

        web_url = result.get("webUrl") if isinstance(result, dict) else None
        if not web_url:
            logger.error("Checkout response has no webUrl: %r", result)
            self._reject(ERROR_CHECKOUT_FAILED)
            return None

        self._state.loading = False
        self._state.checkout_url = web_url
        self._commit()
        return web_url

    def _reject(self, message: str) -> None:
        logger.info("Checkout rejected: %s", message)
        self._state.loading = False
        self._state.error = message
        self._commit()

    # ==================== INTERNAL ====================

    def _commit(self) -> None:
        self._storage.save(self._state)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception:
                logger.exception("Cart listener failed")
