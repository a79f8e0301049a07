"""Composition registry for the inspection services.

The registry binds a type identifier (usually the class a caller asks for)
to a factory and lazily materializes exactly one instance per identifier.
Factories are plain callables taking either no arguments or the registry
itself, so dependencies are resolved explicitly:

    registry = Registry()
    registry.register(BillRepository, lambda r: BillRepository(r.resolve(StorageBackend)))
    repo = registry.resolve(BillRepository)

There is no module-level instance; the composition root in
`inspection_lib.main` builds one and hands it to whoever needs it.
"""
from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Optional, TypeVar, cast

from .errors import CyclicDependencyError, UnregisteredTypeError

T = TypeVar("T")

logger = logging.getLogger(__name__)

_MISSING = object()


def type_name(type_id: Hashable) -> str:
    """Readable name for a type identifier (class name or the key itself)."""
    return getattr(type_id, "__name__", None) or str(type_id)


@dataclass
class _Entry:
    factory: Optional[Callable[..., Any]]
    wants_registry: bool
    instance: Any = _MISSING

    @property
    def materialized(self) -> bool:
        return self.instance is not _MISSING


def _wants_registry(factory: Callable[..., Any]) -> bool:
    try:
        sig = inspect.signature(factory)
    except (TypeError, ValueError):
        # builtins without introspectable signatures are called bare
        return False
    for param in sig.parameters.values():
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD) and param.default is param.empty:
            return True
    return False


class Registry:
    """Lazy singleton registry keyed by type identifier.

    Materialized instances are read without locking. Construction is
    serialized behind a single re-entrant lock so each identifier is built at
    most once, even when several threads race on first access. Cycles are
    detected per thread by tracking the identifiers currently under
    construction on that thread's resolution path.
    """

    def __init__(self) -> None:
        self._entries: Dict[Hashable, _Entry] = {}
        self._instances: Dict[Hashable, Any] = {}
        self._lock = threading.RLock()
        self._local = threading.local()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(self, type_id: Hashable, factory: Callable[..., Any]) -> None:
        """Store (or replace) the factory for `type_id` without invoking it.

        A factory with a required positional parameter is called with the
        registry as that argument; any other factory is called with none.
        This applies to classes too: `register(BillRepository, BillRepository)`
        would pass the registry in as `storage`, so classes that need
        constructor arguments are registered through a lambda that resolves
        them.

        Replacing the factory of an already materialized entry keeps the
        cached instance; call `reset(type_id)` to rebuild it from the new
        factory.
        """
        with self._lock:
            entry = self._entries.get(type_id)
            wants_registry = _wants_registry(factory)
            if entry is None:
                self._entries[type_id] = _Entry(factory=factory, wants_registry=wants_registry)
                logger.debug("Registered %s", type_name(type_id))
                return
            if entry.materialized:
                logger.warning(
                    "Factory for %s replaced after materialization; cached instance kept",
                    type_name(type_id),
                )
            else:
                logger.debug("Replaced factory for %s", type_name(type_id))
            entry.factory = factory
            entry.wants_registry = wants_registry

    def register_singleton(self, type_id: Hashable, instance: Any) -> None:
        """Register an already constructed instance for `type_id`."""
        with self._lock:
            self._entries[type_id] = _Entry(factory=None, wants_registry=False, instance=instance)
            self._instances[type_id] = instance
        logger.debug("Registered instance for %s", type_name(type_id))

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def resolve(self, type_id: Hashable) -> Any:
        instance = self._instances.get(type_id, _MISSING)
        if instance is not _MISSING:
            return instance

        path = self._resolution_path()
        if type_id in path:
            chain = [type_name(t) for t in path[path.index(type_id):]] + [type_name(type_id)]
            raise CyclicDependencyError(chain)

        with self._lock:
            entry = self._entries.get(type_id)
            if entry is None:
                raise UnregisteredTypeError(type_name(type_id))
            # another thread may have finished construction while we waited
            if entry.materialized:
                return entry.instance

            path.append(type_id)
            try:
                factory = cast(Callable[..., Any], entry.factory)
                instance = factory(self) if entry.wants_registry else factory()
            finally:
                path.pop()

            entry.instance = instance
            self._instances[type_id] = instance
            logger.debug("Materialized %s", type_name(type_id))
            return instance

    def resolve_typed(self, type_id: type[T]) -> T:
        """Resolve a class-keyed entry and cast it to that class."""
        return cast(T, self.resolve(type_id))

    def _resolution_path(self) -> List[Hashable]:
        path = getattr(self._local, "path", None)
        if path is None:
            path = []
            self._local.path = path
        return path

    # ------------------------------------------------------------------
    # Introspection and lifecycle
    # ------------------------------------------------------------------
    def is_registered(self, type_id: Hashable) -> bool:
        return type_id in self._entries

    def is_materialized(self, type_id: Hashable) -> bool:
        return type_id in self._instances

    def reset(self, type_id: Optional[Hashable] = None) -> None:
        """Drop cached instances so the next `resolve` rebuilds them.

        With no argument every entry with a factory goes back to Registered.
        Entries registered through `register_singleton` have no factory and
        keep their instance.
        """
        with self._lock:
            targets = [type_id] if type_id is not None else list(self._entries)
            for key in targets:
                entry = self._entries.get(key)
                if entry is None:
                    raise UnregisteredTypeError(type_name(key))
                if entry.factory is None:
                    continue
                entry.instance = _MISSING
                self._instances.pop(key, None)

    def registrations(self) -> Dict[str, str]:
        """Return `{name: state}` for every entry, state being
        'registered' or 'materialized'."""
        with self._lock:
            return {
                type_name(key): ("materialized" if entry.materialized else "registered")
                for key, entry in self._entries.items()
            }

    def __contains__(self, type_id: Hashable) -> bool:
        return self.is_registered(type_id)

    def __len__(self) -> int:
        return len(self._entries)
