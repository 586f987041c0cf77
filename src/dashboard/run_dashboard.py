from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict

from src.dashboard.render import format_stats, save_chart_png, table_frame, write_csv
from src.openev.load_regions import current_view, reload_session, update_year_end, update_year_start
from src.openev.models import SessionState
from src.openev.stats import compute_stats
from src.utils.config import (
    get_default_selection,
    get_export_paths,
    get_region_options,
    get_source_settings,
    load_yaml,
    region_label,
)


def main() -> int:
    ap = argparse.ArgumentParser(description="Load Open-EV-Charts data files and export the EV sales view.")
    ap.add_argument("--pipeline", required=True, help="Path to configs/pipeline.yaml")
    ap.add_argument("--regions", nargs="*", default=None, help="Region codes (default: defaults.selection)")
    ap.add_argument("--start", type=int, default=None, help="First year to include")
    ap.add_argument("--end", type=int, default=None, help="Last year to include")
    ap.add_argument("--out-csv", default=None, help="CSV output path (default: storage.exports_dir)")
    ap.add_argument("--out-png", default=None, help="Chart output path (default: storage.exports_dir)")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    pipeline_cfg = load_yaml(args.pipeline)
    settings = get_source_settings(pipeline_cfg)
    options = get_region_options(pipeline_cfg)
    paths = get_export_paths(pipeline_cfg)

    regions = args.regions if args.regions is not None else get_default_selection(pipeline_cfg)

    state = reload_session(SessionState(), regions, settings)
    if state.error:
        print(f"ERROR: {state.status} {state.error}", file=sys.stderr)
        return 1
    if not state.selected:
        print(state.status)
        return 2

    if args.start is not None:
        state = update_year_start(state, args.start)
    if args.end is not None:
        state = update_year_end(state, args.end)

    print(state.status)
    print(f"Year range: {state.year_range.start}..{state.year_range.end}")

    view = current_view(state)
    labels: Dict[str, str] = {code: region_label(options, code) for code in state.selected}

    if not view:
        print("No periods in the selected year range.")
        return 0

    print(table_frame(view, state.selected, labels).to_string(index=False))

    stats = compute_stats(view, state.selected)
    if stats is not None:
        print(format_stats(stats, labels))

    csv_path = write_csv(view, state.selected, labels, args.out_csv or paths["csv_path"])
    chart_path = save_chart_png(view, state.selected, labels, args.out_png or paths["chart_path"])
    print(f"Saved: {csv_path}")
    print(f"Saved: {chart_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
