"""Cart models with Decimal-based pricing."""
import re
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, List, Optional

from storefront.errors import ERROR_INVALID_QUANTITY, CartValidationError
from storefront.services.money import multiply, parse_decimal, round_money

DEFAULT_CURRENCY = "USD"

# Largest accepted price exponent (prices below 10**13)
MAX_PRICE_EXPONENT = 12

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


def _require_text(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise CartValidationError(f"{name} must be a non-empty string")
    return value


def validate_quantity(quantity: Any) -> int:
    """Quantities are integers >= 1; bools are rejected."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise CartValidationError(ERROR_INVALID_QUANTITY)
    return quantity


@dataclass
class LineItem:
    """One purchasable entry in the cart, keyed by variant id."""
    id: str  # Variant id, not the product id
    product_id: str
    title: str
    handle: str
    price: Decimal
    currency_code: str
    quantity: int = 1
    variant_title: Optional[str] = None  # None for a single default variant
    image_url: str = ""

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.title, "title")
        if not isinstance(self.product_id, str):
            raise CartValidationError("product_id must be a string")
        if not isinstance(self.handle, str):
            raise CartValidationError("handle must be a string")
        if self.variant_title is not None and not isinstance(self.variant_title, str):
            raise CartValidationError("variant_title must be a string or None")
        if self.image_url is None:
            self.image_url = ""
        elif not isinstance(self.image_url, str):
            raise CartValidationError("image_url must be a string")

        try:
            self.price = parse_decimal(self.price)
        except ValueError as e:
            raise CartValidationError(f"price is not a valid amount: {self.price!r}") from e
        if self.price < 0:
            raise CartValidationError("price must not be negative")
        if self.price and self.price.adjusted() > MAX_PRICE_EXPONENT:
            raise CartValidationError(f"price is out of range: {self.price}")

        if not isinstance(self.currency_code, str):
            raise CartValidationError("currency_code must be an ISO 4217 code")
        self.currency_code = self.currency_code.upper()
        if not _CURRENCY_RE.match(self.currency_code):
            raise CartValidationError("currency_code must be an ISO 4217 code")

        validate_quantity(self.quantity)

    @property
    def line_total(self) -> Decimal:
        """Price for all units."""
        return round_money(multiply(self.price, self.quantity))

    def to_dict(self) -> dict:
        """Convert to the persisted (camelCase) record shape."""
        return {
            "id": self.id,
            "productId": self.product_id,
            "title": self.title,
            "variantTitle": self.variant_title,
            "handle": self.handle,
            "price": str(self.price),
            "currencyCode": self.currency_code,
            "imageUrl": self.image_url,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Create from the persisted record shape."""
        return cls(
            id=data["id"],
            product_id=data.get("productId", ""),
            title=data["title"],
            handle=data.get("handle", ""),
            price=data["price"],
            currency_code=data["currencyCode"],
            quantity=data["quantity"],
            variant_title=data.get("variantTitle"),
            image_url=data.get("imageUrl") or "",
        )


@dataclass
class CartState:
    """Cart contents plus checkout status."""
    items: List[LineItem] = field(default_factory=list)
    checkout_url: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None

    @property
    def item_count(self) -> int:
        """Total number of units in cart."""
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Decimal:
        """Sum of price x quantity over all line items."""
        return sum((item.price * item.quantity for item in self.items), Decimal("0"))

    @property
    def currency_code(self) -> str:
        """
        Display currency: the first item's, USD for an empty cart.

        Items in other currencies are summed as-is; the cart does not convert.
        """
        return self.items[0].currency_code if self.items else DEFAULT_CURRENCY

    def find(self, item_id: str) -> Optional[LineItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def copy(self) -> "CartState":
        """Copy with independent line items."""
        return replace(self, items=[replace(item) for item in self.items])

    def to_dict(self) -> dict:
        """Persisted record: items and checkout URL, no transient status."""
        return {
            "items": [item.to_dict() for item in self.items],
            "checkoutUrl": self.checkout_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartState":
        """
        Create from a persisted record.

        Raises:
            CartValidationError, KeyError, TypeError: On a malformed record
        """
        if not isinstance(data, dict):
            raise TypeError("cart record must be an object")
        raw_items = data.get("items") or []
        if not isinstance(raw_items, list):
            raise TypeError("items must be a list")
        checkout_url = data.get("checkoutUrl")
        if checkout_url is not None and not isinstance(checkout_url, str):
            raise TypeError("checkoutUrl must be a string or null")

        items: List[LineItem] = []
        for raw in raw_items:
            item = LineItem.from_dict(raw)
            existing = next((i for i in items if i.id == item.id), None)
            if existing:
                # One entry per variant, even for hand-edited records
                existing.quantity += item.quantity
            else:
                items.append(item)
        return cls(items=items, checkout_url=checkout_url)
