"""Persistence for cutting tests."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from inspection_lib.storage.repository import EntityRepository
from inspection_lib.util import Page, filter_value, paginate, within

from .models import CuttingTest, CuttingTestType

_FINAL_TYPES = {int(t) for t in CuttingTestType.final_sample_types()}


def _created(t: CuttingTest):
    return (t.created_at or datetime.min, t.id)


class CuttingTestRepository(EntityRepository[CuttingTest]):
    NAMESPACE = "cutting_tests"
    model = CuttingTest

    def get_by_bill_id(self, bill_id: int) -> List[CuttingTest]:
        tests = [t for t in self.get_all() if t.bill_id == bill_id]
        return sorted(tests, key=lambda t: (t.type, t.id))

    def get_by_container_id(self, container_id: int) -> List[CuttingTest]:
        """Tests for a container, newest first."""
        tests = [t for t in self.get_all() if t.container_id == container_id]
        return sorted(tests, key=_created, reverse=True)

    def get_final_samples_by_bill_id(self, bill_id: int) -> List[CuttingTest]:
        tests = [
            t for t in self.get_all()
            if t.bill_id == bill_id and t.type in _FINAL_TYPES and t.container_id is None
        ]
        return sorted(tests, key=lambda t: (t.type, t.id))

    def get_container_tests_by_bill_id(self, bill_id: int) -> List[CuttingTest]:
        return [
            t for t in self.get_all()
            if t.bill_id == bill_id and t.type == CuttingTestType.CONTAINER_CUT and t.container_id is not None
        ]

    def get_tests_with_high_moisture(self, threshold: float = 11.0) -> List[CuttingTest]:
        tests = [t for t in self.get_all() if t.moisture is not None and t.moisture > threshold]
        return sorted(tests, key=lambda t: t.moisture, reverse=True)

    def find_with_filters(self, filters: Optional[Dict[str, Any]] = None) -> Page[CuttingTest]:
        """Paginated filter over bill_id, container_id, type and moisture range, newest first."""
        filters = filters or {}
        tests = self.get_all()
        for key in ("bill_id", "container_id", "type"):
            if filters.get(key):
                wanted = int(filters[key])
                tests = [t for t in tests if getattr(t, key) == wanted]
        lo, hi = filter_value(filters, "moisture_min", float), filter_value(filters, "moisture_max", float)
        if lo is not None or hi is not None:
            tests = [t for t in tests if within(t.moisture, lo, hi)]
        tests.sort(key=_created, reverse=True)
        return paginate(tests, page=int(filters.get("page") or 1), per_page=int(filters.get("per_page") or 15))
