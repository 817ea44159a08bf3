"""
Tests for cart persistence adapters
"""

import json
from unittest.mock import Mock

import pytest

from storefront.cart import (
    CART_STORAGE_KEY,
    CartState,
    CartStore,
    FileCartStorage,
    MemoryCartStorage,
    RedisCartStorage,
    create_storage,
)
from storefront.config import config_from_env


class _BrokenStorage(MemoryCartStorage):
    """Storage whose slot always fails"""

    def _read(self, key):
        raise OSError("disk unavailable")

    def _write(self, key, value):
        raise OSError("disk full")


class TestMemoryStorage:

    def test_missing_record_loads_empty(self):
        state = MemoryCartStorage().load()

        assert state == CartState()

    def test_round_trip(self, make_item):
        storage = MemoryCartStorage()
        state = CartState(
            items=[
                make_item("v1", quantity=2, price="19.99", variant_title="M / Black", image_url="https://img/1"),
                make_item("v2", quantity=1, price="5", currency_code="EUR"),
            ],
            checkout_url="https://shop/checkouts/abc",
        )

        storage.save(state)
        assert storage.load() == state

    def test_record_shape(self, make_item):
        storage = MemoryCartStorage()
        storage.save(CartState(items=[make_item("v1")], loading=True, error="nope"))

        record = json.loads(storage._slots[CART_STORAGE_KEY])
        assert set(record) == {"items", "checkoutUrl"}
        assert record["checkoutUrl"] is None
        assert record["items"][0]["id"] == "v1"

    def test_transient_fields_not_restored(self, make_item):
        storage = MemoryCartStorage()
        storage.save(CartState(items=[make_item("v1")], loading=True, error="nope"))

        state = storage.load()
        assert state.loading is False
        assert state.error is None

    @pytest.mark.parametrize("raw", [
        "{not json",
        "[]",
        '"a string"',
        '{"items": "nope"}',
        '{"items": [{"id": "v1"}]}',
        '{"items": [{"id": "v1", "title": "T", "price": "1", "currencyCode": "USD", "quantity": 0}]}',
        '{"items": [], "checkoutUrl": 42}',
        '{"items": [{"id": "v1", "title": "T", "price": "1", "currencyCode": "USD", "quantity": '
        + "9" * 5000 + "}]}",
        "[" * 100000 + "]" * 100000,
        '{"items": [{"id": "v1", "title": "T", "price": "1e1000000", "currencyCode": "USD", "quantity": 1}]}',
    ], ids=lambda raw: raw[:20])
    def test_corrupted_record_loads_empty(self, raw):
        storage = MemoryCartStorage()
        storage._slots[CART_STORAGE_KEY] = raw

        assert storage.load() == CartState()
        # Corrupted record is dropped
        assert CART_STORAGE_KEY not in storage._slots

    def test_store_starts_empty_from_corrupted_record(self):
        storage = MemoryCartStorage()
        storage._slots[CART_STORAGE_KEY] = "[" * 100000 + "]" * 100000

        store = CartStore(storage=storage)

        assert store.state.items == []
        assert store.state.subtotal == 0

    def test_storage_failures_never_raise(self, make_item):
        storage = _BrokenStorage()

        assert storage.load() == CartState()
        storage.save(CartState(items=[make_item("v1")]))

    def test_store_works_without_storage(self, make_item):
        store = CartStore(storage=_BrokenStorage())

        store.add_to_cart(make_item("v1", quantity=2))
        store.add_to_cart(make_item("v1", quantity=3))

        assert [(i.id, i.quantity) for i in store.state.items] == [("v1", 5)]

    def test_custom_key(self, make_item):
        storage = MemoryCartStorage(key="other.cart")
        storage.save(CartState(items=[make_item("v1")]))

        assert "other.cart" in storage._slots
        assert CART_STORAGE_KEY not in storage._slots


class TestFileStorage:

    def test_round_trip(self, tmp_path, make_item):
        storage = FileCartStorage(tmp_path / "carts")
        state = CartState(items=[make_item("v1", quantity=4)], checkout_url="https://x/checkout")

        storage.save(state)

        assert (tmp_path / "carts" / f"{CART_STORAGE_KEY}.json").exists()
        assert FileCartStorage(tmp_path / "carts").load() == state

    def test_missing_file_loads_empty(self, tmp_path):
        assert FileCartStorage(tmp_path).load() == CartState()

    def test_corrupted_file_loads_empty(self, tmp_path):
        path = tmp_path / f"{CART_STORAGE_KEY}.json"
        path.write_text("{broken", encoding="utf-8")

        assert FileCartStorage(tmp_path).load() == CartState()
        assert not path.exists()

    def test_unwritable_directory_is_ignored(self, tmp_path, make_item):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        storage = FileCartStorage(blocker / "carts")

        storage.save(CartState(items=[make_item("v1")]))
        assert storage.load() == CartState()


class TestRedisStorage:

    def test_save_with_ttl(self, make_item):
        redis = Mock()
        storage = RedisCartStorage(redis, ttl_seconds=60)

        storage.save(CartState(items=[make_item("v1")]))

        key, value = redis.set.call_args.args
        assert key == CART_STORAGE_KEY
        assert json.loads(value)["items"][0]["id"] == "v1"
        assert redis.set.call_args.kwargs == {"ex": 60}

    def test_save_without_ttl(self, make_item):
        redis = Mock()
        RedisCartStorage(redis, ttl_seconds=0).save(CartState())

        assert redis.set.call_args.kwargs == {}

    def test_load(self, make_item):
        state = CartState(items=[make_item("v1", quantity=2)])
        redis = Mock()
        redis.get.return_value = json.dumps(state.to_dict())

        assert RedisCartStorage(redis).load() == state
        redis.get.assert_called_once_with(CART_STORAGE_KEY)

    def test_redis_errors_are_swallowed(self, make_item):
        redis = Mock()
        redis.get.side_effect = ConnectionError("down")
        redis.set.side_effect = ConnectionError("down")
        storage = RedisCartStorage(redis)

        assert storage.load() == CartState()
        storage.save(CartState(items=[make_item("v1")]))


class TestCreateStorage:

    BASE = {
        "SHOPIFY_API_URL": "https://shop.example.com/api/graphql.json",
        "SHOPIFY_ACCESS_TOKEN": "token_0123456789",
    }

    def test_memory_default(self):
        assert isinstance(create_storage(config_from_env(self.BASE)), MemoryCartStorage)

    def test_file(self, tmp_path):
        config = config_from_env({**self.BASE, "CART_STORAGE": "file", "CART_STORAGE_DIR": str(tmp_path)})

        storage = create_storage(config)
        assert isinstance(storage, FileCartStorage)
        assert storage.directory == tmp_path

    def test_redis(self):
        config = config_from_env({
            **self.BASE,
            "CART_STORAGE": "redis",
            "UPSTASH_REDIS_REST_URL": "https://redis.example.com",
            "UPSTASH_REDIS_REST_TOKEN": "redis-token",
            "CART_TTL_SECONDS": "120",
        })

        storage = create_storage(config)
        assert isinstance(storage, RedisCartStorage)
        assert storage.ttl_seconds == 120
