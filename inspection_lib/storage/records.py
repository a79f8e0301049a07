"""Record tables on top of a StorageBackend.

A `RecordStore` keeps one namespace of records (plain dicts) keyed by an
integer id. Ids come from a per-namespace sequence held in the `meta`
namespace, and every record carries `created_at`, `updated_at` and
`deleted_at`. Deletion is soft: the record stays in storage with
`deleted_at` set and is hidden from reads unless `with_deleted=True`.
"""
from __future__ import annotations

import logging
from datetime import datetime
from threading import RLock
from typing import Any, Callable, Dict, List, Optional

from .base import StorageBackend

logger = logging.getLogger(__name__)

META_NS = "meta"


class RecordStore:
    def __init__(self, storage: StorageBackend, namespace: str,
                 clock: Optional[Callable[[], datetime]] = None) -> None:
        self.storage = storage
        self.namespace = namespace
        self._clock = clock or datetime.now
        self._lock = RLock()

    def _next_id(self) -> int:
        key = f"{self.namespace}_seq"
        nxt = int(self.storage.load_or(META_NS, key, 0)) + 1
        self.storage.save(META_NS, key, nxt)
        return nxt

    def insert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            now = self._clock()
            record = dict(data)
            record["id"] = self._next_id()
            record["created_at"] = now
            record["updated_at"] = now
            record["deleted_at"] = None
            self.storage.save(self.namespace, str(record["id"]), record)
        logger.debug("Inserted %s/%s", self.namespace, record["id"])
        return record

    def get(self, record_id: int, with_deleted: bool = False) -> Optional[Dict[str, Any]]:
        try:
            record = self.storage.load(self.namespace, str(record_id))
        except KeyError:
            return None
        if record.get("deleted_at") is not None and not with_deleted:
            return None
        return record

    def update(self, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply `changes` to a live record. Returns the updated record or None."""
        with self._lock:
            record = self.get(record_id)
            if record is None:
                return None
            protected = {"id", "created_at", "deleted_at"}
            record.update({k: v for k, v in changes.items() if k not in protected})
            record["updated_at"] = self._clock()
            self.storage.save(self.namespace, str(record_id), record)
        return record

    def soft_delete(self, record_id: int) -> bool:
        with self._lock:
            record = self.get(record_id)
            if record is None:
                return False
            record["deleted_at"] = self._clock()
            self.storage.save(self.namespace, str(record_id), record)
        logger.debug("Soft-deleted %s/%s", self.namespace, record_id)
        return True

    def all(self, with_deleted: bool = False) -> List[Dict[str, Any]]:
        """Return records ordered by id."""
        records = []
        for key in self.storage.list_keys(self.namespace):
            try:
                record = self.storage.load(self.namespace, key)
            except KeyError:
                # removed between listing and loading
                continue
            if record.get("deleted_at") is not None and not with_deleted:
                continue
            records.append(record)
        records.sort(key=lambda r: r["id"])
        return records

    def count(self) -> int:
        return len(self.all())
