from __future__ import annotations

from typing import Dict, Optional, Sequence

from src.openev.models import DashboardStats, Number, Pivot


def compute_stats(pivot: Pivot, selected: Sequence[str]) -> Optional[DashboardStats]:
    """
    Summary figures for a (filtered) pivot.

    - latest_period: lexicographically last period
    - latest_total: sum over selected regions for that period, missing cells count as 0
    - top_region: selected region with the highest all-period total; ties keep selection order
    - period_count: distinct periods

    Returns None for an empty pivot so callers show nothing instead of zeros.
    """
    if not pivot or not selected:
        return None

    latest = max(pivot.keys())
    latest_cells = pivot[latest]
    latest_total: Number = sum((latest_cells.get(code, 0) for code in selected), 0)

    totals: Dict[str, Number] = {code: 0 for code in selected}
    for cells in pivot.values():
        for code in selected:
            totals[code] += cells.get(code, 0)

    top_region = selected[0]
    for code in selected[1:]:
        if totals[code] > totals[top_region]:
            top_region = code

    return DashboardStats(
        latest_period=latest,
        latest_total=latest_total,
        top_region=top_region,
        top_region_total=totals[top_region],
        period_count=len(pivot),
    )
