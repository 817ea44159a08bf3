"""
Shared Dependencies for Routers

Lazy-loaded singletons: configuration is read and validated on first use,
and one CartStore owns the cart for the whole process.
"""

from typing import Optional, TYPE_CHECKING

from storefront.config import load_config, StorefrontConfig

if TYPE_CHECKING:
    from storefront.catalog import CatalogClient
    from storefront.cart import CartStore


# ==================== LAZY SINGLETONS ====================

_catalog_client: Optional["CatalogClient"] = None
_cart_store: Optional["CartStore"] = None


def get_config() -> StorefrontConfig:
    """Validated configuration (raises ConfigError if invalid)."""
    return load_config()


def get_catalog_client() -> "CatalogClient":
    """Get or create the CatalogClient singleton"""
    global _catalog_client
    if _catalog_client is None:
        from storefront.catalog import CatalogClient
        _catalog_client = CatalogClient(get_config())
    return _catalog_client


def get_cart_store() -> "CartStore":
    """Get or create the CartStore singleton"""
    global _cart_store
    if _cart_store is None:
        from storefront.cart import CartStore, create_storage
        config = get_config()
        _cart_store = CartStore(
            storage=create_storage(config),
            submitter=get_catalog_client(),
            checkout_timeout=config.checkout_timeout,
        )
    return _cart_store


async def shutdown() -> None:
    """Close the shared HTTP client and drop the singletons."""
    global _catalog_client, _cart_store
    if _catalog_client is not None:
        await _catalog_client.aclose()
    _catalog_client = None
    _cart_store = None
