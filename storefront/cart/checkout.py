"""Checkout submission contract used by the cart store."""
from typing import Any, Protocol, Sequence

from .models import LineItem


class CheckoutSubmitter(Protocol):
    """Anything that can turn line items into a hosted checkout.

    CatalogClient implements this against the Storefront API.
    """

    async def create_checkout(self, line_items: list[dict[str, Any]]) -> dict[str, str]:
        """Return {"id": ..., "webUrl": ...}; raise CheckoutError / NetworkError."""
        ...


def build_checkout_payload(items: Sequence[LineItem]) -> list[dict[str, Any]]:
    """One {variantId, quantity} entry per line item, in cart order."""
    return [{"variantId": item.id, "quantity": item.quantity} for item in items]
