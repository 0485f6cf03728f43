"""Abstract key-value store and registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """Synchronous store of plain JSON-compatible values.

    A missing key is not an error: ``load`` returns ``None``.
    Subclasses must set ``name`` and implement ``load``, ``save`` and ``delete``.
    """

    name: str = ""

    @abstractmethod
    def load(self, key: str) -> Any | None:
        """Return the value stored under *key*, or ``None`` if absent."""

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*; removing a missing key is a no-op."""


class StoreRegistry:
    """Discover and instantiate registered key-value stores."""

    _stores: dict[str, type[KeyValueStore]] = {}

    @classmethod
    def register(cls, name: str):
        """Class decorator that registers a store under *name*.

        Parameters
        ----------
        name : str
            Lookup key used in configuration files.

        Returns
        -------
        Callable
            The original class, unmodified.
        """

        def decorator(klass: type[KeyValueStore]) -> type[KeyValueStore]:
            cls._stores[name] = klass
            return klass

        return decorator

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> KeyValueStore:
        """Instantiate a registered store.

        Parameters
        ----------
        name : str
            Registered store name.
        **kwargs
            Forwarded to the store constructor.

        Returns
        -------
        KeyValueStore

        Raises
        ------
        KeyError
            If *name* is not registered.
        """
        if name not in cls._stores:
            available = ", ".join(sorted(cls._stores)) or "(none)"
            msg = f"Unknown store {name!r}. Available: {available}"
            raise KeyError(msg)
        return cls._stores[name](**kwargs)

    @classmethod
    def available(cls) -> list[str]:
        """Return sorted list of registered store names."""
        return sorted(cls._stores)
