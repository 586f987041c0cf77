from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from src.openev.models import Pivot, Row

YEAR_PREFIX_RX = re.compile(r"^(\d{4})")


def build_pivot(datasets: Iterable[Tuple[str, Sequence[Row]]]) -> Pivot:
    """
    Co-index per-region rows by period: pivot[period][region] = value.
    A region without a row for a period simply has no cell there.
    """
    pivot: Pivot = {}
    for region, rows in datasets:
        for row in rows:
            pivot.setdefault(row.period, {})[region] = row.value
    return pivot


def sorted_periods(pivot: Pivot) -> List[str]:
    # zero-padded YYYY / YYYY-Qn tokens sort chronologically as strings
    return sorted(pivot.keys())


def period_year(period: str) -> Optional[int]:
    m = YEAR_PREFIX_RX.match(period or "")
    if not m:
        return None
    return int(m.group(1))


def available_years(pivot: Pivot) -> List[int]:
    years = {period_year(p) for p in pivot}
    return sorted(y for y in years if y is not None)
