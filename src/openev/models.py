from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

# Open-EV-Charts db.dsTypes names that carry a car sales figure
ELECTRIC_CARS_TOTAL = "ElectricCarsTotal"
ELECTRIC_CARS_BY_MODEL = "ElectricCarsByModel"
ELECTRIC_CARS_BY_BRAND = "ElectricCarsByBrand"

Number = Union[int, float]

# period -> {region_code: value}
Pivot = Dict[str, Dict[str, Number]]


@dataclass(frozen=True)
class Numeric:
    value: Number


@dataclass(frozen=True)
class Other:
    raw: object = None


FieldValue = Union[Numeric, Other]


@dataclass(frozen=True)
class RawRecord:
    region: str
    period: str
    data_type: str
    fields: Dict[str, FieldValue]


@dataclass(frozen=True)
class RecordResult:
    """
    Outcome of one matched db.insert(...) call.
    Either `record` is set (ok) or `error` explains why the body was rejected.
    """
    period: str
    data_type: str
    record: Optional[RawRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


@dataclass(frozen=True)
class Row:
    period: str
    value: Number


@dataclass(frozen=True)
class YearRange:
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass(frozen=True)
class DashboardStats:
    latest_period: str
    latest_total: Number
    top_region: str
    top_region_total: Number
    period_count: int


@dataclass(frozen=True)
class SessionState:
    selected: Tuple[str, ...] = ()
    pivot: Pivot = field(default_factory=dict)
    year_range: YearRange = YearRange()
    status: str = ""
    error: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return bool(self.selected) and bool(self.pivot)
