"""Cutting test records and their input validation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from inspection_lib.util import transient


class CuttingTestType(IntEnum):
    FINAL_SAMPLE_FIRST_CUT = 1
    FINAL_SAMPLE_SECOND_CUT = 2
    FINAL_SAMPLE_THIRD_CUT = 3
    CONTAINER_CUT = 4

    @classmethod
    def final_sample_types(cls) -> List["CuttingTestType"]:
        return [cls.FINAL_SAMPLE_FIRST_CUT, cls.FINAL_SAMPLE_SECOND_CUT, cls.FINAL_SAMPLE_THIRD_CUT]

    def is_final_sample(self) -> bool:
        return self in self.final_sample_types()

    def is_container_test(self) -> bool:
        return self is CuttingTestType.CONTAINER_CUT


# grams per pound, and the 80 kg bag the outturn rate is quoted against
POUND_GRAMS = 453.6
OUTTURN_BAG_KG = 80
# upper bound for an outturn rate, entered or computed
MAX_OUTTURN_RATE = 60


@dataclass
class CuttingTest:
    id: int
    bill_id: int
    type: int
    container_id: Optional[int] = None
    moisture: Optional[float] = None
    sample_weight: int = 1000
    nut_count: Optional[int] = None
    w_reject_nut: Optional[int] = None
    w_defective_nut: Optional[int] = None
    w_defective_kernel: Optional[int] = None
    w_good_kernel: Optional[int] = None
    w_sample_after_cut: Optional[int] = None
    outturn_rate: Optional[float] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    bill: Any = transient()
    container: Any = transient()

    @property
    def test_type(self) -> CuttingTestType:
        return CuttingTestType(self.type)

    @property
    def is_final_sample(self) -> bool:
        return self.test_type.is_final_sample() and self.container_id is None

    @property
    def is_container_test(self) -> bool:
        return self.test_type.is_container_test() and self.container_id is not None


_U16 = 65535


class CuttingTestPayload(BaseModel):
    """Field rules for creating or updating a cutting test.

    The container/type pairing is a cross-record rule and is checked by
    `CuttingTestService`, not here.
    """
    bill_id: int
    container_id: Optional[int] = None
    type: CuttingTestType
    moisture: Optional[float] = Field(None, ge=0, le=100)
    sample_weight: int = Field(1000, ge=1, le=_U16)
    nut_count: Optional[int] = Field(None, ge=0, le=_U16)
    w_reject_nut: Optional[int] = Field(None, ge=0, le=_U16)
    w_defective_nut: Optional[int] = Field(None, ge=0, le=_U16)
    w_defective_kernel: Optional[int] = Field(None, ge=0, le=_U16)
    w_good_kernel: Optional[int] = Field(None, ge=0, le=_U16)
    w_sample_after_cut: Optional[int] = Field(None, ge=0, le=_U16)
    outturn_rate: Optional[float] = Field(None, ge=0, le=MAX_OUTTURN_RATE)
    note: Optional[str] = Field(None, max_length=65535)
