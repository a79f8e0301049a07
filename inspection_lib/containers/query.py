"""Read-side queries over containers, joined with bills and cutting tests."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from inspection_lib.bills.repository import BillRepository
from inspection_lib.cutting_tests.repository import CuttingTestRepository
from inspection_lib.util import Page, contains, paginate

from .models import Container
from .repository import ContainerRepository


def _created(c: Container):
    return (c.created_at or datetime.min, c.id)


class ContainerQuery:
    def __init__(self, containers: ContainerRepository, cutting_tests: CuttingTestRepository,
                 bills: BillRepository) -> None:
        self._containers = containers
        self._tests = cutting_tests
        self._bills = bills

    def load_relations(self, container: Container, bill: bool = True, cutting_tests: bool = True) -> Container:
        if bill:
            container.bill = self._bills.find_by_id(container.bill_id)
        if cutting_tests:
            container.cutting_tests = self._tests.get_by_container_id(container.id)
        return container

    def get_by_bill_id(self, bill_id: int) -> List[Container]:
        """Containers of a bill in creation order, each with its tests newest first."""
        containers = sorted(self._containers.get_by_bill_id(bill_id), key=_created)
        return [self.load_relations(c, bill=False) for c in containers]

    def get_containers_with_high_moisture(self, threshold: float = 11.0) -> List[Container]:
        """Containers with at least one test above `threshold`.

        Only the offending tests are attached, highest moisture first.
        """
        out = []
        for c in self._containers.get_all():
            wet = [t for t in self._tests.get_by_container_id(c.id)
                   if t.moisture is not None and t.moisture > threshold]
            if not wet:
                continue
            c.bill = self._bills.find_by_id(c.bill_id)
            c.cutting_tests = sorted(wet, key=lambda t: t.moisture, reverse=True)
            out.append(c)
        return out

    def get_containers_pending_cutting_tests(self) -> List[Container]:
        tested = {t.container_id for t in self._tests.get_all() if t.container_id is not None}
        pending = sorted((c for c in self._containers.get_all() if c.id not in tested), key=_created)
        return [self.load_relations(c, cutting_tests=False) for c in pending]

    def search(self, filters: Optional[Dict[str, Any]] = None) -> List[Container]:
        filters = filters or {}
        containers = self._containers.get_all()
        if filters.get("bill_id"):
            bill_id = int(filters["bill_id"])
            containers = [c for c in containers if c.bill_id == bill_id]
        for key in ("container_number", "truck"):
            if filters.get(key):
                containers = [c for c in containers if contains(getattr(c, key), filters[key])]
        return [self.load_relations(c, cutting_tests=False) for c in containers]

    def get_all_paginated(self, filters: Optional[Dict[str, Any]] = None, per_page: int = 15,
                          page: int = 1) -> Page[Container]:
        """Search results, newest first, one page at a time."""
        containers = sorted(self.search(filters), key=_created, reverse=True)
        return paginate(containers, page=page, per_page=per_page)
