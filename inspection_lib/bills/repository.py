"""Persistence for bills."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from inspection_lib.storage.repository import EntityRepository
from inspection_lib.util import Page, contains, filter_value, naive_utc, paginate, parse_datetime, within

from .models import Bill

# filter key -> record field, matched as case-insensitive substrings
_TEXT_FILTERS = {
    "bill_number": "bill_number",
    "seller": "seller",
    "buyer": "buyer",
    "origin": "origin",
    "inspection_location": "inspection_location",
}

# record field -> (min filter key, max filter key, conversion of the filter value)
_RANGE_FILTERS = {
    "inspection_start_date": ("inspection_start_from", "inspection_start_to", parse_datetime),
    "inspection_end_date": ("inspection_end_from", "inspection_end_to", parse_datetime),
    "sampling_ratio": ("sampling_ratio_min", "sampling_ratio_max", float),
    "net_on_bl": ("net_on_bl_min", "net_on_bl_max", int),
    "quantity_of_bags_on_bl": ("quantity_of_bags_on_bl_min", "quantity_of_bags_on_bl_max", int),
}


class BillRepository(EntityRepository[Bill]):
    NAMESPACE = "bills"
    model = Bill

    def find_by_bill_number(self, bill_number: str) -> Optional[Bill]:
        for bill in self.get_all():
            if bill.bill_number == bill_number:
                return bill
        return None

    def find_by_origin(self, origin: str) -> List[Bill]:
        return [b for b in self.get_all() if contains(b.origin, origin)]

    def find_by_sampling_ratio_range(self, min_ratio: float, max_ratio: float) -> List[Bill]:
        return [b for b in self.get_all() if within(b.sampling_ratio, min_ratio, max_ratio)]

    def find_by_inspection_date_range(self, start: Optional[datetime] = None,
                                      end: Optional[datetime] = None) -> List[Bill]:
        """Bills whose inspection starts on/after `start` and ends on/before `end`.

        Aware bounds are compared in UTC against the naive stored dates.
        """
        start, end = naive_utc(start), naive_utc(end)
        out = []
        for b in self.get_all():
            started, ended = naive_utc(b.inspection_start_date), naive_utc(b.inspection_end_date)
            if start is not None and (started is None or started < start):
                continue
            if end is not None and (ended is None or ended > end):
                continue
            out.append(b)
        return out

    def find_with_filters(self, filters: Optional[Dict[str, Any]] = None) -> Page[Bill]:
        """Filter bills by text and range criteria, newest update first.

        Empty filter values are ignored and range bounds may be given as
        strings ('5', '2025-01-01'). `per_page` and `page` in `filters`
        control pagination (defaults 15 and 1).
        """
        filters = filters or {}
        bills = self.get_all()
        for key, fname in _TEXT_FILTERS.items():
            needle = filters.get(key)
            if needle:
                bills = [b for b in bills if contains(getattr(b, fname), needle)]
        for fname, (lo_key, hi_key, convert) in _RANGE_FILTERS.items():
            lo, hi = filter_value(filters, lo_key, convert), filter_value(filters, hi_key, convert)
            if lo is not None or hi is not None:
                bills = [b for b in bills if within(_comparable(getattr(b, fname)), lo, hi)]
        bills.sort(key=lambda b: (b.updated_at or datetime.min, b.id), reverse=True)
        return paginate(bills, page=int(filters.get("page") or 1), per_page=int(filters.get("per_page") or 15))


def _comparable(value: Any) -> Any:
    return naive_utc(value) if isinstance(value, datetime) else value
