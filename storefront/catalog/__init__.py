"""Catalog package: Storefront API models and client."""
from .client import CatalogClient, CollectionFilters
from .models import (
    Collection,
    FilterFacet,
    Image,
    MoneyV2,
    Product,
    ProductOption,
    ProductVariant,
    SelectedOption,
)

__all__ = [
    "CatalogClient",
    "CollectionFilters",
    "Collection",
    "FilterFacet",
    "Image",
    "MoneyV2",
    "Product",
    "ProductOption",
    "ProductVariant",
    "SelectedOption",
]
