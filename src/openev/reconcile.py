from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from src.openev.models import (
    ELECTRIC_CARS_BY_BRAND,
    ELECTRIC_CARS_BY_MODEL,
    ELECTRIC_CARS_TOTAL,
    Number,
    Row,
)

# Alternative representations of the same quantity, best first. Never summed.
DATA_TYPE_PRIORITY = (
    ELECTRIC_CARS_TOTAL,
    ELECTRIC_CARS_BY_MODEL,
    ELECTRIC_CARS_BY_BRAND,
)


def resolve_period_value(per_type: Mapping[str, Number]) -> Optional[Number]:
    for data_type in DATA_TYPE_PRIORITY:
        value = per_type.get(data_type)
        if value is not None:
            return value
    return None


def reconcile_periods(period_records: Dict[str, Dict[str, Number]]) -> List[Row]:
    """
    Collapse {period: {data_type: sum}} into one Row per period.
    Periods without any recognized data type produce no Row.
    """
    rows: List[Row] = []
    for period, per_type in period_records.items():
        value = resolve_period_value(per_type)
        if value is None:
            continue
        rows.append(Row(period=period, value=value))
    return rows
