from __future__ import annotations

import math
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pandas as pd

from src.openev.models import DashboardStats, Number, Pivot
from src.openev.pivot import sorted_periods

MISSING_SENTINEL = "–"

CHART_COLORS = [
    "#3b82f6",
    "#22c55e",
    "#eab308",
    "#f97316",
    "#ef4444",
    "#a855f7",
    "#14b8a6",
    "#ec4899",
]


def _label(labels: Mapping[str, str], code: str) -> str:
    return labels.get(code, code)


def _require_data(pivot: Pivot, selected: Sequence[str]) -> None:
    if not pivot or not selected:
        raise ValueError("No data to export. Load the chart first.")


def format_value(value: Optional[Number]) -> str:
    """en-US thousands separators, at most 3 decimals; missing cells get the sentinel."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return MISSING_SENTINEL
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.3f}".rstrip("0").rstrip(".")
    return f"{int(value):,}"


def pivot_to_frame(pivot: Pivot, selected: Sequence[str], labels: Mapping[str, str]) -> pd.DataFrame:
    """Numeric period x region frame, sorted by period; absent cells are NaN."""
    periods = sorted_periods(pivot)
    data = {
        _label(labels, code): [pivot[p].get(code, math.nan) for p in periods]
        for code in selected
    }
    df = pd.DataFrame(data, index=pd.Index(periods, name="period"), dtype="float64")
    return df


def table_frame(pivot: Pivot, selected: Sequence[str], labels: Mapping[str, str]) -> pd.DataFrame:
    rows = []
    for period in sorted_periods(pivot):
        row = {"Period": period}
        for code in selected:
            row[_label(labels, code)] = format_value(pivot[period].get(code))
        rows.append(row)
    columns = ["Period"] + [_label(labels, code) for code in selected]
    return pd.DataFrame(rows, columns=columns)


# ----------------------------
# CSV export
# ----------------------------

def csv_number(value: Number) -> str:
    # whole floats are written like ints: 4.0 -> "4", 1e16 -> "10000000000000000"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def csv_rows(pivot: Pivot, selected: Sequence[str], labels: Mapping[str, str]) -> List[List[str]]:
    header = ["period"] + [_label(labels, code) for code in selected]
    rows = [header]
    for period in sorted_periods(pivot):
        cells = pivot[period]
        rows.append([period] + [csv_number(cells[code]) if code in cells else "" for code in selected])
    return rows


def csv_text(pivot: Pivot, selected: Sequence[str], labels: Mapping[str, str]) -> str:
    _require_data(pivot, selected)
    rows = csv_rows(pivot, selected, labels)
    df = pd.DataFrame(rows[1:], columns=rows[0], dtype="object")
    # pandas quotes minimally: delimiter, quote char or newline; embedded quotes are doubled
    return df.to_csv(index=False, lineterminator="\n").rstrip("\n")


def write_csv(pivot: Pivot, selected: Sequence[str], labels: Mapping[str, str], out_path: str | Path) -> Path:
    text = csv_text(pivot, selected, labels)
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


# ----------------------------
# Chart export
# ----------------------------

def chart_title(selected: Sequence[str], labels: Mapping[str, str]) -> str:
    names = ", ".join(_label(labels, code) for code in selected)
    return f"EV sales over time - {names}"


def save_chart_png(
    pivot: Pivot,
    selected: Sequence[str],
    labels: Mapping[str, str],
    out_path: str | Path,
) -> Path:
    _require_data(pivot, selected)
    df = pivot_to_frame(pivot, selected, labels)
    periods = list(df.index)
    x = list(range(len(periods)))

    fig, ax = plt.subplots(figsize=(11, 5))
    for idx, col in enumerate(df.columns):
        # NaN cells leave gaps instead of dropping to zero
        ax.plot(x, df[col].tolist(), label=col, linewidth=2, color=CHART_COLORS[idx % len(CHART_COLORS)])

    step = max(1, len(periods) // 24)
    ax.set_xticks(x[::step])
    ax.set_xticklabels(periods[::step], rotation=45, ha="right")
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda v, _pos: f"{v:,.0f}"))
    ax.set_xlabel("period")
    ax.set_ylabel("EV sales")
    ax.grid(True, axis="y")
    ax.legend()
    ax.set_title(chart_title(selected, labels))

    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(p, dpi=150)
    plt.close(fig)
    return p


def format_stats(stats: DashboardStats, labels: Mapping[str, str]) -> str:
    return (
        f"Latest period: {stats.latest_period} | "
        f"Total EV sales (selected): {format_value(stats.latest_total)} | "
        f"Top region: {_label(labels, stats.top_region)} ({format_value(stats.top_region_total)}) | "
        f"Periods: {stats.period_count}"
    )
