"""Read-side queries over bills.

Bills are annotated with counts and the average outturn of their final
samples, which requires looking at containers and cutting tests as well.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from inspection_lib.containers.repository import ContainerRepository
from inspection_lib.cutting_tests.models import CuttingTest, CuttingTestType
from inspection_lib.cutting_tests.repository import CuttingTestRepository
from inspection_lib.util import Page, contains, mean, paginate, round_half_up

from .models import Bill
from .repository import BillRepository

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("bill_number", "seller", "buyer", "created_at", "updated_at")
_FINAL_TYPES = [int(t) for t in CuttingTestType.final_sample_types()]


def _sort_key(fname: str):
    # None sorts before any value, as NULLs do in ascending SQL order
    def key(b: Bill):
        v = getattr(b, fname)
        return (v is not None, v if v is not None else "", b.id)
    return key


class BillQuery:
    def __init__(self, bills: BillRepository, containers: ContainerRepository,
                 cutting_tests: CuttingTestRepository) -> None:
        self._bills = bills
        self._containers = containers
        self._tests = cutting_tests

    def _final_samples(self, bill_id: int) -> List[CuttingTest]:
        return self._tests.get_final_samples_by_bill_id(bill_id)

    def with_counts(self, bill: Bill) -> Bill:
        bill.containers_count = len(self._containers.get_by_bill_id(bill.id))
        bill.final_samples_count = len(self._final_samples(bill.id))
        return bill

    def average_outturn(self, bill: Bill) -> Optional[float]:
        """Mean outturn of the bill's final samples (2 places), or None."""
        avg = mean(t.outturn_rate for t in self._final_samples(bill.id) if t.outturn_rate is not None)
        return round_half_up(avg, 2) if avg is not None else None

    def find_with_relations(self, bill_id: int) -> Optional[Bill]:
        """Load a bill with its containers (by id, each with tests) and final samples (by type)."""
        bill = self._bills.find_by_id(bill_id)
        if bill is None:
            return None
        containers = sorted(self._containers.get_by_bill_id(bill_id), key=lambda c: c.id)
        for c in containers:
            c.cutting_tests = self._tests.get_by_container_id(c.id)
        bill.containers = containers
        bill.final_samples = self._final_samples(bill_id)
        bill.containers_count = len(containers)
        bill.final_samples_count = len(bill.final_samples)
        bill.average_outturn = self.average_outturn(bill)
        return bill

    def search(self, filters: Optional[Dict[str, Any]] = None) -> List[Bill]:
        """Free-text search over number/seller/buyer with optional sorting.

        Sorting defaults to `created_at` descending; unknown sort fields leave
        the storage order untouched.
        """
        filters = filters or {}
        bills = self._bills.get_all()
        needle = filters.get("search")
        if needle:
            bills = [
                b for b in bills
                if contains(b.bill_number, needle) or contains(b.seller, needle) or contains(b.buyer, needle)
            ]
        sort_by = filters.get("sort_by") or "created_at"
        direction = str(filters.get("sort_direction") or "desc").lower()
        if sort_by in SORTABLE_FIELDS:
            bills.sort(key=_sort_key(sort_by), reverse=(direction == "desc"))
        else:
            logger.debug("Ignoring unsupported sort field %r", sort_by)
        return [self.with_counts(b) for b in bills]

    def paginate(self, filters: Optional[Dict[str, Any]] = None, per_page: int = 15, page: int = 1) -> Page[Bill]:
        result = paginate(self.search(filters), page=page, per_page=per_page)
        for bill in result.items:
            bill.average_outturn = self.average_outturn(bill)
        return result

    def get_recent_bills(self, limit: int = 10) -> List[Bill]:
        bills = sorted(self._bills.get_all(), key=lambda b: (b.updated_at or datetime.min, b.id), reverse=True)
        return [self.with_counts(b) for b in bills[:limit]]

    def get_bills_pending_final_tests(self) -> List[Bill]:
        """Bills without any final sample cut yet."""
        return [self.with_counts(b) for b in self._bills.get_all() if not self._final_samples(b.id)]

    def get_bills_missing_final_samples(self) -> List[Bill]:
        """Bills with containers that still lack at least one of the three final cuts."""
        out = []
        for b in self._bills.get_all():
            if not self._containers.get_by_bill_id(b.id):
                continue
            present = {t.type for t in self._final_samples(b.id)}
            if any(t not in present for t in _FINAL_TYPES):
                out.append(self.with_counts(b))
        return out
