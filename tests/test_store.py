"""Tests for the key-value stores and their registry."""

import pytest

from regional_redlist.store import JsonFileStore, KeyValueStore, MemoryStore, StoreRegistry


def test_registry_lists_builtin_stores():
    assert {"json", "memory"} <= set(StoreRegistry.available())


def test_registry_create_memory():
    assert isinstance(StoreRegistry.create("memory"), MemoryStore)


def test_registry_unknown_raises():
    with pytest.raises(KeyError, match="Unknown store 'redis'"):
        StoreRegistry.create("redis")


def test_register_custom_store():
    @StoreRegistry.register("test-dict")
    class DictStore(KeyValueStore):
        name = "test-dict"

        def __init__(self):
            self.data = {}

        def load(self, key):
            return self.data.get(key)

        def save(self, key, value):
            self.data[key] = value

        def delete(self, key):
            self.data.pop(key, None)

    try:
        assert isinstance(StoreRegistry.create("test-dict"), DictStore)
    finally:
        StoreRegistry._stores.pop("test-dict", None)


class TestMemoryStore:
    def test_missing_key(self):
        assert MemoryStore().load("missing") is None

    def test_values_are_copied(self):
        store = MemoryStore()
        value = {"items": [1]}
        store.save("k", value)
        value["items"].append(2)
        loaded = store.load("k")
        loaded["items"].append(3)
        assert store.load("k") == {"items": [1]}

    def test_delete(self):
        store = MemoryStore()
        store.save("k", 1)
        store.delete("k")
        store.delete("k")
        assert store.load("k") is None


class TestJsonFileStore:
    def test_round_trip(self, tmp_path):
        store = JsonFileStore(tmp_path / "data")
        store.save("assessments", [{"id": "a", "name": "Cigogne blanche"}])
        assert store.load("assessments") == [{"id": "a", "name": "Cigogne blanche"}]
        assert (tmp_path / "data" / "assessments.json").read_text(encoding="utf-8").endswith("\n")

    def test_missing_key(self, tmp_path):
        assert JsonFileStore(tmp_path).load("absent") is None

    def test_malformed_json_is_absent(self, tmp_path, caplog):
        (tmp_path / "assessments.json").write_text("{not json", encoding="utf-8")
        store = JsonFileStore(tmp_path)
        with caplog.at_level("WARNING"):
            assert store.load("assessments") is None
        assert "malformed" in caplog.text

    def test_unsafe_key_characters(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.save("region/../x", 1)
        assert store.load("region/../x") == 1
        assert sorted(path.name for path in tmp_path.iterdir()) == ["region_.._x.json"]

    def test_delete_missing_is_noop(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.delete("absent")
        store.save("k", "v")
        store.delete("k")
        assert store.load("k") is None
