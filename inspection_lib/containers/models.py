"""Container records, their condition enums and input validation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from inspection_lib.util import transient


class ContainerCondition(str, Enum):
    # Stored values are the Vietnamese terms used on the inspection forms.
    INTACT = "Nguyên vẹn"
    DAMAGED = "Hư hỏng"
    SLIGHTLY_DAMAGED = "Hư hỏng nhẹ"
    SEVERELY_DAMAGED = "Hư hỏng nặng"

    @property
    def label(self) -> str:
        return {
            ContainerCondition.INTACT: "Intact",
            ContainerCondition.DAMAGED: "Damaged",
            ContainerCondition.SLIGHTLY_DAMAGED: "Slightly Damaged",
            ContainerCondition.SEVERELY_DAMAGED: "Severely Damaged",
        }[self]

    @classmethod
    def values(cls) -> List[str]:
        return [c.value for c in cls]


class SealCondition(str, Enum):
    INTACT = "Nguyên vẹn"
    BROKEN = "Bị phá"
    MISSING = "Thiếu"
    TAMPERED = "Bị can thiệp"

    @property
    def label(self) -> str:
        return {
            SealCondition.INTACT: "Intact",
            SealCondition.BROKEN: "Broken",
            SealCondition.MISSING: "Missing",
            SealCondition.TAMPERED: "Tampered",
        }[self]

    @classmethod
    def values(cls) -> List[str]:
        return [c.value for c in cls]


@dataclass
class Container:
    id: int
    bill_id: int
    truck: Optional[str] = None
    container_number: Optional[str] = None
    quantity_of_bags: Optional[int] = None
    w_jute_bag: float = 1.0
    w_total: Optional[int] = None
    w_truck: Optional[int] = None
    w_container: Optional[int] = None
    w_gross: Optional[int] = None
    w_dunnage_dribag: Optional[int] = None
    w_tare: Optional[float] = None
    w_net: Optional[float] = None
    container_condition: str = ContainerCondition.INTACT.value
    seal_condition: str = SealCondition.INTACT.value
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    bill: Any = transient()
    cutting_tests: List[Any] = transient(default_factory=list)


class ContainerPayload(BaseModel):
    bill_id: int
    truck: Optional[str] = Field(None, max_length=20)
    container_number: Optional[str] = Field(None, pattern=r"^[A-Z]{4}[0-9]{7}$")
    quantity_of_bags: Optional[int] = Field(None, ge=0, le=2000)
    w_jute_bag: float = Field(1.0, ge=0)
    w_total: Optional[int] = Field(None, ge=0)
    w_truck: Optional[int] = Field(None, ge=0)
    w_container: Optional[int] = Field(None, ge=0)
    w_gross: Optional[int] = Field(None, ge=0)
    w_dunnage_dribag: Optional[int] = Field(None, ge=0)
    w_tare: Optional[float] = Field(None, ge=0)
    w_net: Optional[float] = Field(None, ge=0)
    container_condition: ContainerCondition = ContainerCondition.INTACT
    seal_condition: SealCondition = SealCondition.INTACT
    note: Optional[str] = Field(None, max_length=65535)

    @model_validator(mode="after")
    def _total_exceeds_truck_and_container(self) -> "ContainerPayload":
        if self.w_total and self.w_total <= (self.w_truck or 0) + (self.w_container or 0):
            raise ValueError("w_total must be greater than w_truck + w_container")
        return self
