"""Simple memory-backed storage backend

This backend stores Python objects in memory as a data structure `[<namespace>][<key>]`.
Values are deep-copied on the way in and out so callers never share state
with the store, matching what a serializing backend would do.
"""
import copy
from threading import RLock
from typing import Dict, Any, List

from .base import StorageBackend


class MemoryStorage(StorageBackend):
    def __init__(self):
        self._lock = RLock()
        self._store: Dict[str, Dict[str, Any]] = {}

    def save(self, namespace: str, key: str, value: Any) -> None:
        with self._lock:
            self._store.setdefault(namespace, {})[key] = copy.deepcopy(value)

    def load(self, namespace: str, key: str) -> Any:
        with self._lock:
            try:
                return copy.deepcopy(self._store[namespace][key])
            except KeyError:
                raise KeyError(key)

    def delete(self, namespace: str, key: str) -> None:
        with self._lock:
            try:
                del self._store[namespace][key]
            except KeyError:
                raise KeyError(key)

    def list_keys(self, namespace: str) -> List[str]:
        with self._lock:
            return list(self._store.get(namespace, {}).keys())

    def exists(self, namespace: str, key: str) -> bool:
        with self._lock:
            return key in self._store.get(namespace, {})
