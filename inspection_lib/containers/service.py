"""ContainerService: container weighing and moisture follow-up."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from inspection_lib.bills.repository import BillRepository
from inspection_lib.util import Page, mean, round_half_up, to_record

from .models import Container, ContainerPayload
from .query import ContainerQuery
from .repository import ContainerRepository

logger = logging.getLogger(__name__)

_SYSTEM_FIELDS = ("id", "created_at", "updated_at", "deleted_at")
_DERIVED_FIELDS = ("w_tare", "w_net")


def calculate_weights(data: Dict[str, Any]) -> Dict[str, Any]:
    """Derive w_tare and w_net from the weighbridge readings.

    w_tare = w_truck + w_container + w_dunnage_dribag when all three are
    known; w_net = w_gross - w_tare when both are known.
    """
    data = dict(data)
    parts = (data.get("w_truck"), data.get("w_container"), data.get("w_dunnage_dribag"))
    if all(p is not None for p in parts):
        data["w_tare"] = float(sum(parts))
    if data.get("w_gross") is not None and data.get("w_tare") is not None:
        data["w_net"] = float(data["w_gross"] - data["w_tare"])
    return data


class ContainerService:
    def __init__(self, container_repository: ContainerRepository, container_query: ContainerQuery,
                 bill_repository: BillRepository, high_moisture_threshold: float = 11.0,
                 per_page: int = 15) -> None:
        self._repository = container_repository
        self._query = container_query
        self._bills = bill_repository
        self.high_moisture_threshold = high_moisture_threshold
        self._per_page = per_page

    def get_container_by_id(self, container_id: int) -> Optional[Container]:
        container = self._repository.find_by_id(container_id)
        return self._query.load_relations(container) if container else None

    def get_container_by_identifier(self, identifier: Union[str, int]) -> Optional[Container]:
        container = self._repository.find_by_container_number_or_id(identifier)
        return self._query.load_relations(container) if container else None

    def get_containers_by_bill_id(self, bill_id: int) -> List[Container]:
        return self._query.get_by_bill_id(bill_id)

    def _validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = ContainerPayload.model_validate(data).model_dump(mode="json")
        if self._bills.find_by_id(payload["bill_id"]) is None:
            raise ValueError(f"Bill {payload['bill_id']} does not exist")
        return calculate_weights(payload)

    def create_container(self, data: Dict[str, Any]) -> Container:
        return self._repository.create(self._validate(data))

    def update_container(self, container: Container, data: Dict[str, Any]) -> bool:
        merged = {k: v for k, v in to_record(container).items()
                  if k not in _SYSTEM_FIELDS and k not in _DERIVED_FIELDS}
        merged.update(data)
        return self._repository.update(container, self._validate(merged))

    def delete_container(self, container: Container) -> bool:
        return self._repository.delete(container)

    def get_containers_with_high_moisture(self, threshold: Optional[float] = None) -> List[Container]:
        return self._query.get_containers_with_high_moisture(
            self.high_moisture_threshold if threshold is None else threshold
        )

    def get_containers_pending_cutting_tests(self) -> List[Container]:
        return self._query.get_containers_pending_cutting_tests()

    def calculate_average_moisture(self, container: Container) -> Optional[float]:
        tests = self._query.load_relations(container, bill=False).cutting_tests
        avg = mean(t.moisture for t in tests if t.moisture is not None)
        return round_half_up(avg, 1) if avg is not None else None

    def get_outturn_rate(self, container: Container) -> Optional[float]:
        """Outturn of the earliest test on this container that has one."""
        tests = sorted(self._query.load_relations(container, bill=False).cutting_tests, key=lambda t: t.id)
        for t in tests:
            if t.outturn_rate is not None:
                return t.outturn_rate
        return None

    def get_all_containers_paginated(self, filters: Optional[Dict[str, Any]] = None,
                                     per_page: Optional[int] = None, page: int = 1) -> Page[Container]:
        return self._query.get_all_paginated(filters, per_page=per_page or self._per_page, page=page)

    def get_container_statistics(self) -> Dict[str, Any]:
        high = self.get_containers_with_high_moisture()
        pending = self.get_containers_pending_cutting_tests()
        return {
            "high_moisture_count": len(high),
            "pending_tests_count": len(pending),
            "high_moisture_containers": high,
            "pending_tests_containers": pending,
        }
