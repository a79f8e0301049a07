"""Dashboard figures aggregated from the three domain services."""
from __future__ import annotations

import logging
from typing import Any, Dict

from inspection_lib.services.interfaces import (
    BillServiceProtocol,
    ContainerServiceProtocol,
    CuttingTestServiceProtocol,
)

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, bill_service: BillServiceProtocol, container_service: ContainerServiceProtocol,
                 cutting_test_service: CuttingTestServiceProtocol) -> None:
        self._bills = bill_service
        self._containers = container_service
        self._cutting_tests = cutting_test_service

    def get_statistics(self) -> Dict[str, Any]:
        """Return plain counts and the moisture distribution.

        The result holds only scalars and dicts so it can be dumped as JSON
        or YAML as-is.
        """
        bills = self._bills.get_bill_statistics()
        containers = self._containers.get_container_statistics()
        tests = self._cutting_tests.get_cutting_test_statistics()
        stats = {
            "bills": {
                "total": bills["total_bills"],
                "pending_final_tests": bills["pending_final_tests_count"],
                "missing_final_samples": bills["missing_final_samples_count"],
                "recent": [
                    {"id": b.id, "bill_number": b.bill_number, "containers": b.containers_count}
                    for b in bills["recent_bills"]
                ],
            },
            "containers": {
                "high_moisture": containers["high_moisture_count"],
                "pending_tests": containers["pending_tests_count"],
            },
            "cutting_tests": {
                "high_moisture": tests["high_moisture_count"],
                "moisture_distribution": tests["moisture_distribution"],
            },
        }
        logger.debug("Dashboard statistics: %s", stats)
        return stats
