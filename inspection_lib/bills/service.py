"""BillService: use cases around bills of lading."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from inspection_lib.util import Page, to_record

from .models import Bill, BillPayload
from .query import BillQuery
from .repository import BillRepository

logger = logging.getLogger(__name__)

_SYSTEM_FIELDS = ("id", "created_at", "updated_at", "deleted_at")


class BillService:
    def __init__(self, bill_repository: BillRepository, bill_query: BillQuery, per_page: int = 15) -> None:
        self._repository = bill_repository
        self._query = bill_query
        self._per_page = per_page

    def get_all_bills(self, filters: Optional[Dict[str, Any]] = None, per_page: Optional[int] = None,
                      page: int = 1) -> Page[Bill]:
        return self._query.paginate(filters or {}, per_page=per_page or self._per_page, page=page)

    def get_bill_by_id(self, bill_id: int) -> Optional[Bill]:
        return self._query.find_with_relations(bill_id)

    def _validate(self, data: Dict[str, Any], current: Optional[Bill] = None) -> Dict[str, Any]:
        payload = BillPayload.model_validate(data).model_dump()
        number = payload.get("bill_number")
        if number:
            existing = self._repository.find_by_bill_number(number)
            if existing is not None and (current is None or existing.id != current.id):
                raise ValueError(f"Bill number '{number}' is already taken")
        return payload

    def create_bill(self, data: Dict[str, Any]) -> Bill:
        return self._repository.create(self._validate(data))

    def update_bill(self, bill: Bill, data: Dict[str, Any]) -> bool:
        merged = {k: v for k, v in to_record(bill).items() if k not in _SYSTEM_FIELDS}
        merged.update(data)
        return self._repository.update(bill, self._validate(merged, current=bill))

    def delete_bill(self, bill: Bill) -> bool:
        """Soft delete; containers and cutting tests of the bill are kept."""
        deleted = self._repository.delete(bill)
        if deleted:
            logger.info("Deleted bill %s", bill.id)
        return deleted

    def get_recent_bills(self, limit: int = 10) -> List[Bill]:
        return self._query.get_recent_bills(limit)

    def get_bills_pending_final_tests(self) -> List[Bill]:
        return self._query.get_bills_pending_final_tests()

    def get_bills_missing_final_samples(self) -> List[Bill]:
        return self._query.get_bills_missing_final_samples()

    def calculate_average_outturn(self, bill: Bill) -> Optional[float]:
        return self._query.average_outturn(bill)

    def get_bill_statistics(self) -> Dict[str, Any]:
        pending = self.get_bills_pending_final_tests()
        missing = self.get_bills_missing_final_samples()
        return {
            "total_bills": self._repository.count(),
            "recent_bills": self.get_recent_bills(5),
            "pending_final_tests_count": len(pending),
            "missing_final_samples_count": len(missing),
            "pending_final_tests": pending,
            "missing_final_samples": missing,
        }
