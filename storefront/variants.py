"""
Variant Resolver

Maps a product's option selection (e.g. {"Size": "M", "Color": "Red"}) to the
variant the shopper is buying, and works out which option values can still be
picked.

Policies:
- Initial selection: first variant available for sale, else the first variant;
  the selection is copied from its selected options.
- Re-resolution: when the selection matches no variant, the previously
  resolved variant is kept.
- An option value is disabled unless some available variant carries it.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from storefront.cart.models import LineItem
from storefront.catalog.models import Product, ProductVariant


@dataclass(frozen=True)
class OptionValueState:
    """Render state of one option value button."""
    name: str
    value: str
    selected: bool
    has_available_variant: bool

    @property
    def disabled(self) -> bool:
        return not self.has_available_variant


def variant_matches(variant: ProductVariant, selection: Mapping[str, str]) -> bool:
    """True if the variant agrees with every entry of the selection."""
    options = variant.options
    return all(options.get(name) == value for name, value in selection.items())


def find_variant(variants: Sequence[ProductVariant], selection: Mapping[str, str]) -> Optional[ProductVariant]:
    """First variant matching the selection, or None."""
    return next((v for v in variants if variant_matches(v, selection)), None)


def default_variant(variants: Sequence[ProductVariant]) -> Optional[ProductVariant]:
    """First available variant, falling back to the first in list order."""
    if not variants:
        return None
    return next((v for v in variants if v.available_for_sale), variants[0])


def initial_selection(variant: Optional[ProductVariant]) -> dict[str, str]:
    """Selection mapping copied from a variant's selected options."""
    if variant is None:
        return {}
    return {opt.name: opt.value for opt in variant.selected_options}


def resolve_variant(
    variants: Sequence[ProductVariant],
    selection: Mapping[str, str],
    previous: Optional[ProductVariant] = None,
) -> Optional[ProductVariant]:
    """Matching variant, or `previous` if the combination matches nothing."""
    return find_variant(variants, selection) or previous


def has_available_variant(variants: Sequence[ProductVariant], name: str, value: str) -> bool:
    """True if an available variant carries the name/value pair."""
    return any(
        v.available_for_sale and v.options.get(name) == value
        for v in variants
    )


def option_value_states(product: Product, selection: Mapping[str, str]) -> list[OptionValueState]:
    """Button state for every value of every option, in option order."""
    return [
        OptionValueState(
            name=option.name,
            value=value,
            selected=selection.get(option.name) == value,
            has_available_variant=has_available_variant(product.variants, option.name, value),
        )
        for option in product.options
        for value in option.values
    ]


def line_item_for(product: Product, variant: ProductVariant, quantity: int = 1) -> LineItem:
    """
    Build the cart line item for a resolved variant.

    Raises:
        CartValidationError: If quantity is invalid or the catalog data is
            not a valid line item
    """
    return LineItem(
        id=variant.id,
        product_id=product.id,
        title=product.title,
        handle=product.handle,
        variant_title=None if variant.is_default else variant.title,
        price=variant.price.amount,
        currency_code=variant.price.currency_code,
        image_url=product.featured_image_url,
        quantity=quantity,
    )


class VariantSelector:
    """Option selection state for one product detail view."""

    def __init__(self, product: Product):
        self.product = product
        self.variant: Optional[ProductVariant] = default_variant(product.variants)
        self.selection: dict[str, str] = initial_selection(self.variant)

    def is_selectable(self, name: str, value: str) -> bool:
        """Known option value with at least one available variant."""
        option = next((o for o in self.product.options if o.name == name), None)
        if option is None or value not in option.values:
            return False
        return has_available_variant(self.product.variants, name, value)

    def select(self, name: str, value: str) -> bool:
        """
        Pick an option value and re-resolve the variant.

        Returns:
            False (and changes nothing) if the value is disabled or unknown
        """
        if not self.is_selectable(name, value):
            return False
        self.selection = {**self.selection, name: value}
        self.variant = resolve_variant(self.product.variants, self.selection, self.variant)
        return True

    def option_states(self) -> list[OptionValueState]:
        return option_value_states(self.product, self.selection)

    def line_item(self, quantity: int = 1) -> Optional[LineItem]:
        """Line item for the current variant, or None for a product without variants."""
        if self.variant is None:
            return None
        return line_item_for(self.product, self.variant, quantity)
