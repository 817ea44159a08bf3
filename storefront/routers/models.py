"""Request models for the storefront API."""
from typing import Optional

from pydantic import BaseModel, Field


class AddCartItemRequest(BaseModel):
    """Add a product to the cart.

    Either `variant_id` or `options` picks the variant; with neither, the
    product's default variant is used.
    """
    handle: str = Field(min_length=1)
    variant_id: Optional[str] = None
    options: dict[str, str] = {}
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1)
