"""In-process store for tests and single-session use."""

from __future__ import annotations

import copy
import logging
from typing import Any

from regional_redlist.store.base import KeyValueStore, StoreRegistry

logger = logging.getLogger(__name__)


@StoreRegistry.register("memory")
class MemoryStore(KeyValueStore):
    """Store that keeps values in a dict.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    name = "memory"

    def __init__(self, **_: Any) -> None:
        self._data: dict[str, Any] = {}

    def load(self, key: str) -> Any | None:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def save(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        logger.debug("Saved key %r to memory store", key)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
