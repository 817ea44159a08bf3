"""Catalog Models - Pydantic models for Storefront API entities.

Field aliases follow the GraphQL schema (camelCase); connection `edges/node`
wrappers are flattened by the client before validation.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from storefront.services.money import to_decimal as _to_decimal

DEFAULT_VARIANT_TITLE = "Default Title"


class _CatalogModel(BaseModel):
    class Config:
        extra = "ignore"  # Queries may select more than we model
        populate_by_name = True


class MoneyV2(_CatalogModel):
    """Amount + currency pair."""
    amount: Decimal
    currency_code: str = Field(default="USD", alias="currencyCode")

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount_to_decimal(cls, v):
        return _to_decimal(v)


class Image(_CatalogModel):
    id: Optional[str] = None
    url: str
    alt_text: Optional[str] = Field(default=None, alias="altText")
    width: Optional[int] = None
    height: Optional[int] = None


class SelectedOption(_CatalogModel):
    """One name/value pair carried by a variant, e.g. Size=M."""
    name: str
    value: str


class ProductOption(_CatalogModel):
    """A named axis of variation with its permissible values."""
    id: Optional[str] = None
    name: str
    values: list[str] = []


class ProductVariant(_CatalogModel):
    """A purchasable configuration of a product."""
    id: str
    title: str = DEFAULT_VARIANT_TITLE
    available_for_sale: bool = Field(default=False, alias="availableForSale")
    price: MoneyV2 = Field(alias="priceV2")
    compare_at_price: Optional[MoneyV2] = Field(default=None, alias="compareAtPriceV2")
    selected_options: list[SelectedOption] = Field(default_factory=list, alias="selectedOptions")

    @property
    def options(self) -> dict[str, str]:
        """selected_options as a name -> value mapping."""
        return {opt.name: opt.value for opt in self.selected_options}

    @property
    def is_default(self) -> bool:
        """True for the single placeholder variant of an option-less product."""
        return self.title == DEFAULT_VARIANT_TITLE

    @property
    def on_sale(self) -> bool:
        return self.compare_at_price is not None and self.compare_at_price.amount > self.price.amount


class PriceRange(_CatalogModel):
    min_variant_price: MoneyV2 = Field(alias="minVariantPrice")
    max_variant_price: Optional[MoneyV2] = Field(default=None, alias="maxVariantPrice")


class Product(_CatalogModel):
    """Product with its variants and options."""
    id: str
    title: str
    handle: str
    description: str = ""
    description_html: Optional[str] = Field(default=None, alias="descriptionHtml")
    available_for_sale: bool = Field(default=False, alias="availableForSale")
    product_type: Optional[str] = Field(default=None, alias="productType")
    vendor: Optional[str] = None
    price_range: Optional[PriceRange] = Field(default=None, alias="priceRange")
    images: list[Image] = []
    variants: list[ProductVariant] = []
    options: list[ProductOption] = []

    @property
    def featured_image_url(self) -> str:
        return self.images[0].url if self.images else ""


class Collection(_CatalogModel):
    """A collection, or the aggregate "all" view listing every collection."""
    id: str
    title: str
    handle: str = ""
    description: str = ""
    image: Optional[Image] = None
    products: list[Product] = []
    is_collections_page: bool = False
    collections: list["Collection"] = []


class FilterFacet(_CatalogModel):
    """A filter group shown next to a collection listing."""
    id: str
    label: str
    values: list[str]
