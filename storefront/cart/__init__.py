"""Cart package: models, storage, checkout contract, and the store."""
from .checkout import CheckoutSubmitter, build_checkout_payload
from .models import CartState, LineItem
from .storage import (
    CART_STORAGE_KEY,
    CartStorage,
    FileCartStorage,
    MemoryCartStorage,
    RedisCartStorage,
    create_storage,
)
from .store import (
    AddToCart,
    CartAction,
    CartStore,
    ClearCart,
    RemoveFromCart,
    UpdateCartItem,
)

__all__ = [
    "LineItem",
    "CartState",
    "CART_STORAGE_KEY",
    "CartStorage",
    "MemoryCartStorage",
    "FileCartStorage",
    "RedisCartStorage",
    "create_storage",
    "CheckoutSubmitter",
    "build_checkout_payload",
    "CartStore",
    "CartAction",
    "AddToCart",
    "UpdateCartItem",
    "RemoveFromCart",
    "ClearCart",
]
