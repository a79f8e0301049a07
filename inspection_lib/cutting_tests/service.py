"""CuttingTestService: recording cut tests and deriving outturn."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from inspection_lib.bills.models import Bill
from inspection_lib.bills.repository import BillRepository
from inspection_lib.containers.models import Container
from inspection_lib.containers.repository import ContainerRepository
from inspection_lib.util import Page, round_half_up, to_record

from .models import MAX_OUTTURN_RATE, OUTTURN_BAG_KG, POUND_GRAMS, CuttingTest, CuttingTestPayload, CuttingTestType
from .query import CuttingTestQuery
from .repository import CuttingTestRepository

logger = logging.getLogger(__name__)

_SYSTEM_FIELDS = ("id", "created_at", "updated_at", "deleted_at")


def calculate_outturn_rate(data: Dict[str, Any]) -> Dict[str, Any]:
    """Set `outturn_rate` (lbs per 80 kg bag) from the kernel weights.

    outturn = (w_defective_kernel / 2 + w_good_kernel) * 80 / 453.6,
    computed only when both weights are present and non-zero. The result is
    not bounded here; `CuttingTestService` rejects rates above
    MAX_OUTTURN_RATE before storing.
    """
    data = dict(data)
    defective, good = data.get("w_defective_kernel"), data.get("w_good_kernel")
    if defective and good:
        data["outturn_rate"] = round_half_up((float(defective) / 2 + float(good)) * OUTTURN_BAG_KG / POUND_GRAMS, 2)
    return data


class CuttingTestService:
    def __init__(self, cutting_test_repository: CuttingTestRepository, cutting_test_query: CuttingTestQuery,
                 bill_repository: BillRepository, container_repository: ContainerRepository,
                 high_moisture_threshold: float = 11.0) -> None:
        self._repository = cutting_test_repository
        self._query = cutting_test_query
        self._bills = bill_repository
        self._containers = container_repository
        self.high_moisture_threshold = high_moisture_threshold

    def get_cutting_tests_with_filters(self, filters: Dict[str, Any]) -> Page[CuttingTest]:
        return self._repository.find_with_filters(filters)

    def search_cutting_tests(self, filters: Optional[Dict[str, Any]] = None) -> List[CuttingTest]:
        """Unpaginated search with bill and container attached to each test."""
        return self._query.search(filters)

    def get_cutting_test_by_id(self, test_id: int) -> Optional[CuttingTest]:
        test = self._repository.find_by_id(test_id)
        return self._query.load_relations(test) if test else None

    def get_cutting_tests_by_bill_id(self, bill_id: int) -> List[CuttingTest]:
        return self._query.get_by_bill_id(bill_id)

    def get_final_samples_by_bill_id(self, bill_id: int) -> List[CuttingTest]:
        return self._query.get_final_samples_by_bill_id(bill_id)

    def get_container_tests_by_bill_id(self, bill_id: int) -> List[CuttingTest]:
        return self._query.get_container_tests_by_bill_id(bill_id)

    def validate_cutting_test_data(self, data: Dict[str, Any]) -> None:
        """Check the type/container pairing and that referenced records exist.

        Final samples (types 1-3) belong to the bill only; container cuts
        (type 4) must name a container of the same bill.
        """
        test_type = CuttingTestType(int(data["type"]))
        container_id = data.get("container_id")
        if test_type.is_final_sample() and container_id:
            raise ValueError("Final sample tests cannot be associated with a container.")
        if test_type.is_container_test() and not container_id:
            raise ValueError("Container tests must be associated with a container.")
        if self._bills.find_by_id(data["bill_id"]) is None:
            raise ValueError(f"Bill {data['bill_id']} does not exist")
        if container_id:
            container = self._containers.find_by_id(container_id)
            if container is None:
                raise ValueError(f"Container {container_id} does not exist")
            if container.bill_id != data["bill_id"]:
                raise ValueError(f"Container {container_id} does not belong to bill {data['bill_id']}")

    def _prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = CuttingTestPayload.model_validate(data).model_dump(mode="json")
        self.validate_cutting_test_data(payload)
        prepared = calculate_outturn_rate(payload)
        # the computed rate is held to the same bound as an entered one
        rate = prepared.get("outturn_rate")
        if rate is not None and rate > MAX_OUTTURN_RATE:
            raise ValueError(
                f"Computed outturn rate {rate} exceeds {MAX_OUTTURN_RATE}; check the kernel weights"
            )
        return prepared

    def create_cutting_test(self, data: Dict[str, Any]) -> CuttingTest:
        return self._repository.create(self._prepare(data))

    def update_cutting_test(self, cutting_test: CuttingTest, data: Dict[str, Any]) -> bool:
        # outturn is derived, recompute it from the merged weights
        merged = {k: v for k, v in to_record(cutting_test).items()
                  if k not in _SYSTEM_FIELDS and k != "outturn_rate"}
        merged.update(data)
        return self._repository.update(cutting_test, self._prepare(merged))

    def delete_cutting_test(self, cutting_test: CuttingTest) -> bool:
        return self._repository.delete(cutting_test)

    def get_tests_with_high_moisture(self, threshold: Optional[float] = None) -> List[CuttingTest]:
        return self._query.get_tests_with_high_moisture(
            self.high_moisture_threshold if threshold is None else threshold
        )

    def get_moisture_distribution(self) -> Dict[str, Any]:
        return self._query.get_moisture_distribution()

    def calculate_defective_ratio(self, cutting_test: CuttingTest) -> Optional[Dict[str, Any]]:
        nut, kernel = cutting_test.w_defective_nut, cutting_test.w_defective_kernel
        if not nut or not kernel:
            return None
        ratio = round_half_up(kernel / nut, 1)
        return {
            "defective_nut": nut,
            "defective_kernel": kernel,
            "ratio": ratio,
            "formatted": f"{nut}/{ratio:g}",
        }

    def is_final_sample(self, cutting_test: CuttingTest) -> bool:
        return cutting_test.is_final_sample

    def is_container_test(self, cutting_test: CuttingTest) -> bool:
        return cutting_test.is_container_test

    def get_cutting_test_statistics(self) -> Dict[str, Any]:
        high = self.get_tests_with_high_moisture()
        return {
            "high_moisture_count": len(high),
            "moisture_distribution": self.get_moisture_distribution(),
            "high_moisture_tests": high,
        }

    def get_bill_by_id(self, bill_id: int) -> Optional[Bill]:
        return self._bills.find_by_id(bill_id)

    def get_container_by_id(self, container_id: int) -> Optional[Container]:
        return self._containers.find_by_id(container_id)
