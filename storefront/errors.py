"""
Storefront errors.

Message constants shared by the cart, catalog client and routers, plus the
exception hierarchy:

    StorefrontError
    ├── ConfigError              invalid or missing configuration
    ├── CartValidationError      malformed line item / quantity (also ValueError)
    ├── CheckoutInProgressError  checkout already in flight
    ├── PersistenceError         storage backend failure (never leaves the adapter)
    └── CatalogError             remote catalog API failure
        ├── CheckoutError        API rejected the request content
        └── NetworkError         request could not complete
"""

# Cart errors
ERROR_EMPTY_CART = "Cart is empty"
ERROR_INVALID_QUANTITY = "Quantity must be a positive integer"
ERROR_CHECKOUT_IN_PROGRESS = "Checkout is already in progress"

# Checkout errors
ERROR_CHECKOUT_FAILED = "Failed to create checkout"
ERROR_CHECKOUT_TIMEOUT = "Checkout request timed out"
ERROR_CHECKOUT_NOT_CONFIGURED = "Checkout is not available"

# Catalog errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_COLLECTION_NOT_FOUND = "Collection not found"
ERROR_VARIANT_NOT_FOUND = "No variant matches the selected options"
ERROR_VARIANT_UNAVAILABLE = "Selected variant is not available for sale"
ERROR_CATALOG_NOT_CONFIGURED = "Catalog API is not configured correctly"
ERROR_CATALOG_UNAVAILABLE = "Catalog API is unavailable"
ERROR_MALFORMED_RESPONSE = "Malformed response from catalog API"


class StorefrontError(Exception):
    """Base error for the storefront package."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigError(StorefrontError):
    """Configuration is missing or invalid. Raised once at startup."""

    def __init__(self, message: str, variable: str | None = None) -> None:
        super().__init__(message, code="CONFIG")
        self.variable = variable


class CartValidationError(StorefrontError, ValueError):
    """A line item or quantity failed validation at the cart boundary."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CART_VALIDATION")


class CheckoutInProgressError(StorefrontError):
    """checkout() was called while another checkout is in flight."""

    def __init__(self, message: str = ERROR_CHECKOUT_IN_PROGRESS) -> None:
        super().__init__(message, code="CHECKOUT_IN_PROGRESS")


class PersistenceError(StorefrontError):
    """Cart storage read or write failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="PERSISTENCE")


class CatalogError(StorefrontError):
    """Remote catalog API failure."""


class CheckoutError(CatalogError):
    """The catalog API rejected the checkout (e.g. a variant is out of stock)."""

    def __init__(self, message: str, field: list[str] | None = None, error_code: str | None = None) -> None:
        super().__init__(message, code=error_code or "CHECKOUT_USER_ERROR")
        self.field = field


class NetworkError(CatalogError):
    """The catalog API could not be reached or returned an unusable response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, code="NETWORK")
        self.status_code = status_code

    @property
    def is_configuration_error(self) -> bool:
        """Status codes the API returns for a bad endpoint or token."""
        return self.status_code in (401, 403, 404)
