"""Storage abstraction package for the inspection tool."""
from pathlib import Path
from typing import Union

from .base import StorageBackend
from .file_backend import FileStorageBackend
from .memory_backend import MemoryStorage
from .records import RecordStore
from .serializer import get_serializer


def create_storage(backend: str = "file", serializer: str = "pickle",
                   data_dir: Union[str, Path] = "data") -> StorageBackend:
    """Build a storage backend by name.

    `backend` is 'file' or 'memory'; `serializer` only applies to the file
    backend and is one of 'pickle', 'json' or 'yaml'.
    """
    if backend == "memory":
        return MemoryStorage()
    if backend == "file":
        return FileStorageBackend(data_dir=data_dir, serializer=get_serializer(serializer))
    raise ValueError(f"Unknown storage backend '{backend}'")


__all__ = [
    "StorageBackend",
    "FileStorageBackend",
    "MemoryStorage",
    "RecordStore",
    "create_storage",
]
