"""Base class for entity repositories backed by a RecordStore."""
from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Dict, Generic, List, Optional, Type, TypeVar

from inspection_lib.util import apply_record, from_record

from .base import StorageBackend
from .records import RecordStore

E = TypeVar("E")

logger = logging.getLogger(__name__)


class EntityRepository(Generic[E]):
    """CRUD over one record namespace, returning `model` dataclasses.

    Subclasses set `NAMESPACE` and `model` and add their own finders.
    """

    NAMESPACE: ClassVar[str]
    model: ClassVar[Type[Any]]

    def __init__(self, storage: StorageBackend, clock: Optional[Callable[[], Any]] = None) -> None:
        self._records = RecordStore(storage, self.NAMESPACE, clock=clock)

    def find_by_id(self, entity_id: int) -> Optional[E]:
        record = self._records.get(entity_id)
        return from_record(self.model, record) if record else None

    def create(self, data: Dict[str, Any]) -> E:
        record = self._records.insert(data)
        logger.info("Created %s %s", self.NAMESPACE, record["id"])
        return from_record(self.model, record)

    def update(self, entity: E, data: Dict[str, Any]) -> bool:
        """Persist `data` onto `entity` and refresh it in place."""
        record = self._records.update(entity.id, data)  # type: ignore[attr-defined]
        if record is None:
            return False
        apply_record(entity, record)
        return True

    def delete(self, entity: E) -> bool:
        return self._records.soft_delete(entity.id)  # type: ignore[attr-defined]

    def get_all(self) -> List[E]:
        return [from_record(self.model, r) for r in self._records.all()]

    def count(self) -> int:
        return self._records.count()
