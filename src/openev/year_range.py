from __future__ import annotations

from typing import Optional

from src.openev.models import Pivot, YearRange
from src.openev.pivot import available_years, period_year


def normalize(year_range: YearRange) -> YearRange:
    start, end = year_range.start, year_range.end
    if start is not None and end is not None and start > end:
        return YearRange(start=end, end=start)
    return year_range


def with_start(year_range: YearRange, start: Optional[int]) -> YearRange:
    return normalize(YearRange(start=start, end=year_range.end))


def with_end(year_range: YearRange, end: Optional[int]) -> YearRange:
    return normalize(YearRange(start=year_range.start, end=end))


def default_range(pivot: Pivot) -> YearRange:
    years = available_years(pivot)
    if not years:
        return YearRange()
    return YearRange(start=years[0], end=years[-1])


def filter_pivot(pivot: Pivot, year_range: YearRange) -> Pivot:
    """
    New pivot holding only the periods whose leading year lies in the inclusive range.
    An unset bound does not filter on that side. The source pivot is never mutated.
    """
    yr = normalize(year_range)
    if yr.start is None and yr.end is None:
        return {period: dict(cells) for period, cells in pivot.items()}

    out: Pivot = {}
    for period, cells in pivot.items():
        year = period_year(period)
        if year is None:
            continue
        if yr.start is not None and year < yr.start:
            continue
        if yr.end is not None and year > yr.end:
            continue
        out[period] = dict(cells)
    return out
