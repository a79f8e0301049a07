"""Persistence for containers."""
from __future__ import annotations

from typing import List, Optional, Union

from inspection_lib.storage.repository import EntityRepository

from .models import Container


class ContainerRepository(EntityRepository[Container]):
    NAMESPACE = "containers"
    model = Container

    def get_by_bill_id(self, bill_id: int) -> List[Container]:
        return [c for c in self.get_all() if c.bill_id == bill_id]

    def find_by_container_number(self, container_number: str) -> Optional[Container]:
        for c in self.get_all():
            if c.container_number == container_number:
                return c
        return None

    def find_by_container_number_or_id(self, identifier: Union[str, int]) -> Optional[Container]:
        """Look up by container number first, then by numeric id."""
        found = self.find_by_container_number(str(identifier))
        if found is not None:
            return found
        try:
            return self.find_by_id(int(identifier))
        except (TypeError, ValueError):
            return None
