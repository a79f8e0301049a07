from typing import Any, Iterable, Protocol, runtime_checkable


@runtime_checkable
class StorageProtocol(Protocol):
    """What a `RecordStore` needs from its backend.

    Both shipped backends subclass `StorageBackend`; this Protocol lets tests
    and callers check an arbitrary object structurally instead.
    """

    def save(self, namespace: str, key: str, value: Any) -> None: ...

    def load(self, namespace: str, key: str) -> Any: ...

    def load_or(self, namespace: str, key: str, default: Any = None) -> Any: ...

    def delete(self, namespace: str, key: str) -> None: ...

    def list_keys(self, namespace: str) -> Iterable[str]: ...

    def exists(self, namespace: str, key: str) -> bool: ...
