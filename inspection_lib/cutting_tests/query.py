"""Read-side queries over cutting tests, joined with their bill and container."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from inspection_lib.bills.repository import BillRepository
from inspection_lib.containers.repository import ContainerRepository
from inspection_lib.util import filter_value, mean, round_half_up, within

from .models import CuttingTest
from .repository import CuttingTestRepository

# moisture buckets in percent: low <= 8 < medium <= 11 < high
LOW_MOISTURE_MAX = 8.0
MEDIUM_MOISTURE_MAX = 11.0


class CuttingTestQuery:
    def __init__(self, cutting_tests: CuttingTestRepository, bills: BillRepository,
                 containers: ContainerRepository) -> None:
        self._tests = cutting_tests
        self._bills = bills
        self._containers = containers

    def load_relations(self, test: CuttingTest, bill: bool = True, container: bool = True) -> CuttingTest:
        if bill:
            test.bill = self._bills.find_by_id(test.bill_id)
        if container and test.container_id is not None:
            test.container = self._containers.find_by_id(test.container_id)
        return test

    def get_by_bill_id(self, bill_id: int) -> List[CuttingTest]:
        """All tests of a bill ordered by type, then creation."""
        tests = [t for t in self._tests.get_all() if t.bill_id == bill_id]
        tests.sort(key=lambda t: (t.type, t.created_at or datetime.min, t.id))
        return [self.load_relations(t, bill=False) for t in tests]

    def get_final_samples_by_bill_id(self, bill_id: int) -> List[CuttingTest]:
        return self._tests.get_final_samples_by_bill_id(bill_id)

    def get_container_tests_by_bill_id(self, bill_id: int) -> List[CuttingTest]:
        """Container cuts of a bill, newest first."""
        tests = self._tests.get_container_tests_by_bill_id(bill_id)
        tests.sort(key=lambda t: (t.created_at or datetime.min, t.id), reverse=True)
        return [self.load_relations(t, bill=False) for t in tests]

    def get_tests_with_high_moisture(self, threshold: float = 11.0) -> List[CuttingTest]:
        return [self.load_relations(t) for t in self._tests.get_tests_with_high_moisture(threshold)]

    def get_moisture_distribution(self) -> Dict[str, Any]:
        readings = [t.moisture for t in self._tests.get_all() if t.moisture is not None]
        avg = mean(readings)
        return {
            "total_tests": len(readings),
            "avg_moisture": round_half_up(avg, 1) if avg is not None else None,
            "min_moisture": min(readings) if readings else None,
            "max_moisture": max(readings) if readings else None,
            "distribution": {
                "low": sum(1 for m in readings if m <= LOW_MOISTURE_MAX),
                "medium": sum(1 for m in readings if LOW_MOISTURE_MAX < m <= MEDIUM_MOISTURE_MAX),
                "high": sum(1 for m in readings if m > MEDIUM_MOISTURE_MAX),
            },
        }

    def search(self, filters: Optional[Dict[str, Any]] = None) -> List[CuttingTest]:
        filters = filters or {}
        tests = self._tests.get_all()
        for key in ("bill_id", "container_id", "type"):
            if filters.get(key):
                wanted = int(filters[key])
                tests = [t for t in tests if getattr(t, key) == wanted]
        lo, hi = filter_value(filters, "moisture_min", float), filter_value(filters, "moisture_max", float)
        if lo is not None or hi is not None:
            tests = [t for t in tests if within(t.moisture, lo, hi)]
        return [self.load_relations(t) for t in tests]
