from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Sequence, Type, TypeVar

T = TypeVar("T")


def round_half_up(value: float, places: int = 2) -> float:
    """Round like a spreadsheet would (2.345 -> 2.35), not banker's rounding."""
    quant = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quant, rounding=ROUND_HALF_UP))


def transient(default: Any = None, default_factory: Optional[Callable[[], Any]] = None) -> Any:
    """Dataclass field that is attached at query time and never persisted."""
    if default_factory is not None:
        return field(default_factory=default_factory, compare=False, repr=False, metadata={"transient": True})
    return field(default=default, compare=False, repr=False, metadata={"transient": True})


def to_record(obj: Any) -> Dict[str, Any]:
    return {f.name: getattr(obj, f.name) for f in fields(obj) if not f.metadata.get("transient")}


def from_record(cls: Type[T], record: Dict[str, Any]) -> T:
    names = {f.name for f in fields(cls) if not f.metadata.get("transient")}  # type: ignore[arg-type]
    return cls(**{k: v for k, v in record.items() if k in names})


def contains(haystack: Optional[str], needle: str) -> bool:
    """Case-insensitive substring match; a missing value never matches."""
    if haystack is None:
        return False
    return needle.lower() in str(haystack).lower()


def within(value: Any, low: Any = None, high: Any = None) -> bool:
    """True when `value` lies in [low, high]; open bounds are skipped.

    A missing value never matches a bounded range.
    """
    if low is None and high is None:
        return True
    if value is None:
        return False
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Drop the timezone from an aware datetime after converting it to UTC.

    Every stored timestamp is naive, so aware values must be normalized
    before they are stored or compared.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_datetime(value: Any) -> datetime:
    """Accept a datetime, a date or an ISO 8601 string (`Z` allowed)."""
    if isinstance(value, datetime):
        return naive_utc(value)  # type: ignore[return-value]
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return naive_utc(datetime.fromisoformat(text))  # type: ignore[return-value]


def filter_value(filters: Dict[str, Any], key: str, convert: Callable[[Any], Any]) -> Any:
    """Read `filters[key]` converted with `convert`; empty values give None.

    Filters usually arrive as query-string text, so '5' must compare as a
    number. An unparseable value raises ValueError.
    """
    raw = filters.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    return convert(raw)


def mean(values: Iterable[float]) -> Optional[float]:
    vals = [float(v) for v in values]
    if not vals:
        return None
    return sum(vals) / len(vals)


@dataclass
class Page(Generic[T]):
    """One page of results plus the numbers needed to render a pager."""
    items: List[T]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, -(-self.total // self.per_page))

    @property
    def has_more(self) -> bool:
        return self.page < self.last_page

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "page": self.page,
            "per_page": self.per_page,
            "last_page": self.last_page,
        }


def paginate(items: Sequence[T], page: int = 1, per_page: int = 15) -> Page[T]:
    if per_page < 1:
        raise ValueError("per_page must be at least 1")
    page = max(1, int(page))
    start = (page - 1) * per_page
    return Page(items=list(items[start:start + per_page]), total=len(items), page=page, per_page=per_page)


def apply_record(obj: Any, record: Dict[str, Any]) -> None:
    """Copy persisted fields from `record` onto an existing dataclass instance."""
    for f in fields(obj):
        if not f.metadata.get("transient") and f.name in record:
            setattr(obj, f.name, record[f.name])
