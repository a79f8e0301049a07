"""The key/value contract every record store sits on.

Data is grouped in namespaces (one per record table plus `meta` for id
sequences) and addressed by string keys. Backends receive plain dicts of
scalars and datetimes and decide how to encode them.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable


class StorageBackend(ABC):
    """Namespaced key/value storage used by `RecordStore`.

    A single backend instance is shared by every repository in a registry,
    so implementations guard their own state with a lock.
    """

    @abstractmethod
    def save(self, namespace: str, key: str, value: Any) -> None:
        """Store `value`, replacing any previous value for the key."""

    @abstractmethod
    def load(self, namespace: str, key: str) -> Any:
        """Return a copy of the stored value; `KeyError` when absent."""

    @abstractmethod
    def delete(self, namespace: str, key: str) -> None:
        """Remove the key; `KeyError` when absent."""

    @abstractmethod
    def list_keys(self, namespace: str) -> Iterable[str]:
        """Keys currently stored in `namespace`, in no particular order.
        An unknown namespace is empty."""

    @abstractmethod
    def exists(self, namespace: str, key: str) -> bool: ...

    def load_or(self, namespace: str, key: str, default: Any = None) -> Any:
        try:
            return self.load(namespace, key)
        except KeyError:
            return default
