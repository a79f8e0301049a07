"""Bill (bill of lading) records and input validation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from inspection_lib.util import naive_utc, transient


@dataclass
class Bill:
    id: int
    bill_number: Optional[str] = None
    seller: Optional[str] = None
    buyer: Optional[str] = None
    w_dunnage_dribag: Optional[int] = None
    w_jute_bag: float = 1.0
    net_on_bl: Optional[int] = None
    quantity_of_bags_on_bl: Optional[int] = None
    origin: Optional[str] = None
    inspection_start_date: Optional[datetime] = None
    inspection_end_date: Optional[datetime] = None
    inspection_location: Optional[str] = None
    sampling_ratio: float = 10.0
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    # Populated by BillQuery, never stored.
    containers: List[Any] = transient(default_factory=list)
    final_samples: List[Any] = transient(default_factory=list)
    containers_count: Optional[int] = transient()
    final_samples_count: Optional[int] = transient()
    average_outturn: Optional[float] = transient()


class BillPayload(BaseModel):
    bill_number: Optional[str] = Field(None, max_length=20)
    seller: Optional[str] = Field(None, max_length=255)
    buyer: Optional[str] = Field(None, max_length=255)
    w_dunnage_dribag: Optional[int] = Field(None, ge=0)
    w_jute_bag: float = Field(1.0, ge=0, lt=100)
    net_on_bl: Optional[int] = None
    quantity_of_bags_on_bl: Optional[int] = None
    origin: Optional[str] = Field(None, max_length=255)
    inspection_start_date: Optional[datetime] = None
    inspection_end_date: Optional[datetime] = None
    inspection_location: Optional[str] = Field(None, max_length=255)
    sampling_ratio: float = Field(10.0, ge=0, lt=1000)
    note: Optional[str] = Field(None, max_length=65535)

    @field_validator("inspection_start_date", "inspection_end_date")
    @classmethod
    def _store_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # stored timestamps are naive; '...Z' input is kept as its UTC wall time
        return naive_utc(value)
