"""Key-value persistence contract and built-in stores."""

from regional_redlist.store.base import KeyValueStore, StoreRegistry
from regional_redlist.store.json_file import JsonFileStore
from regional_redlist.store.memory import MemoryStore

__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore", "StoreRegistry"]
