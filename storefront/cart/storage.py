"""
Cart persistence.

A CartStorage serializes CartState to JSON under one fixed key in a
key-value slot. load() and save() never raise: an unreadable or corrupted
record loads as an empty cart, a failed write is logged and dropped. The
cart behaves the same whether or not storage works.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from upstash_redis import Redis

from storefront.cart.models import CartState
from storefront.config import StorefrontConfig
from storefront.errors import PersistenceError
from storefront.logging import get_logger

logger = get_logger(__name__)

CART_STORAGE_KEY = "shopApp.cart"


class CartStorage:
    """Base adapter. Subclasses implement the raw key-value slot."""

    def __init__(self, key: str = CART_STORAGE_KEY):
        self.key = key

    def _read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def _write(self, key: str, value: str) -> None:
        raise NotImplementedError

    def _delete(self, key: str) -> None:
        raise NotImplementedError

    def load(self) -> CartState:
        """Load the persisted cart, or an empty one."""
        try:
            data = self._read(self.key)
        except Exception as e:
            logger.warning(f"Failed to read cart from storage: {e}")
            return CartState()

        if not data:
            return CartState()

        try:
            return CartState.from_dict(json.loads(data))
        except Exception as e:
            # Corrupted or old-schema record - drop it and start empty
            logger.warning(f"Corrupted cart record under {self.key!r}: {type(e).__name__}: {str(e)[:200]}")
            self._discard()
            return CartState()

    def save(self, state: CartState) -> None:
        """Persist items and checkout URL (best-effort)."""
        try:
            self._write(self.key, json.dumps(state.to_dict()))
        except Exception as e:
            logger.error(f"Failed to save cart to storage: {e}")

    def _discard(self) -> None:
        try:
            self._delete(self.key)
        except Exception as e:
            logger.warning(f"Failed to remove corrupted cart record: {e}")


class MemoryCartStorage(CartStorage):
    """Process-scoped storage; the default."""

    def __init__(self, key: str = CART_STORAGE_KEY):
        super().__init__(key)
        self._slots: dict[str, str] = {}

    def _read(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def _write(self, key: str, value: str) -> None:
        self._slots[key] = value

    def _delete(self, key: str) -> None:
        self._slots.pop(key, None)


class FileCartStorage(CartStorage):
    """One JSON file per key under a directory."""

    def __init__(self, directory: Path | str, key: str = CART_STORAGE_KEY):
        super().__init__(key)
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def _read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Cannot read {path}: {e}") from e

    def _write(self, key: str, value: str) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write-then-rename so a crash never leaves half a record
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_path, self._path(key))
        except OSError as e:
            raise PersistenceError(f"Cannot write {self._path(key)}: {e}") from e

    def _delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class RedisCartStorage(CartStorage):
    """Upstash Redis storage with an optional TTL for abandoned carts."""

    def __init__(self, redis: Redis, key: str = CART_STORAGE_KEY, ttl_seconds: int | None = None):
        super().__init__(key)
        self.redis = redis
        self.ttl_seconds = ttl_seconds or None

    def _read(self, key: str) -> Optional[str]:
        return self.redis.get(key)

    def _write(self, key: str, value: str) -> None:
        if self.ttl_seconds:
            self.redis.set(key, value, ex=self.ttl_seconds)
        else:
            self.redis.set(key, value)

    def _delete(self, key: str) -> None:
        self.redis.delete(key)


def create_storage(config: StorefrontConfig, key: str = CART_STORAGE_KEY) -> CartStorage:
    """Build the storage backend selected by CART_STORAGE."""
    if config.cart_storage == "file":
        return FileCartStorage(config.cart_storage_dir, key=key)
    if config.cart_storage == "redis":
        redis = Redis(url=config.redis_url, token=config.redis_token)
        return RedisCartStorage(redis, key=key, ttl_seconds=config.cart_ttl_seconds)
    return MemoryCartStorage(key=key)
