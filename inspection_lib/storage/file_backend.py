"""Simple file-backed storage backend.

This backend stores serialized Python objects under
`<data_dir>/<namespace>/<key>.<ext>`, the extension coming from the
serializer. It provides atomic writes by writing to a temporary file then
renaming.
"""
from __future__ import annotations
import os
from pathlib import Path
from threading import RLock
from typing import Any, Iterable, Optional

from .base import StorageBackend
from .serializer import PickleSerializer, Serializer


class FileStorageBackend(StorageBackend):
    def __init__(self, data_dir: str | Path = "./data", serializer: Optional[Serializer] = None) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.serializer = serializer or PickleSerializer()
        self._lock = RLock()

    def _ns_dir(self, namespace: str) -> Path:
        ns = self.data_dir / namespace
        ns.mkdir(parents=True, exist_ok=True)
        return ns

    def _path_for(self, namespace: str, key: str) -> Path:
        safe_key = key.replace("/", "_")
        return self._ns_dir(namespace) / f"{safe_key}.{self.serializer.extension}"

    def save(self, namespace: str, key: str, value: Any) -> None:
        path = self._path_for(namespace, key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        payload = self.serializer.dump(value)
        with self._lock:
            with open(tmp, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(path)

    def load(self, namespace: str, key: str) -> Any:
        path = self._path_for(namespace, key)
        with self._lock:
            if not path.exists():
                raise KeyError(key)
            with open(path, "rb") as f:
                data = f.read()
        return self.serializer.load(data)

    def delete(self, namespace: str, key: str) -> None:
        path = self._path_for(namespace, key)
        with self._lock:
            if not path.exists():
                raise KeyError(key)
            path.unlink()

    def list_keys(self, namespace: str) -> Iterable[str]:
        suffix = f".{self.serializer.extension}"
        ns = self._ns_dir(namespace)
        return [p.stem for p in ns.iterdir() if p.is_file() and p.suffix == suffix]

    def exists(self, namespace: str, key: str) -> bool:
        return self._path_for(namespace, key).exists()
