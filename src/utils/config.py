from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/simonkrauter/Open-EV-Charts/master/data"


@dataclass(frozen=True)
class RegionOption:
    code: str
    name: str


@dataclass(frozen=True)
class SourceSettings:
    base_url: str = DEFAULT_BASE_URL
    headers: Dict[str, str] = field(default_factory=dict)
    timeout_seconds: int = 25
    max_workers: int = 8

    def data_url(self, region: str) -> str:
        return f"{self.base_url.rstrip('/')}/data-{region}.js"


def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"YAML root must be a mapping/dict: {p}")
    return data


def get_source_settings(pipeline_cfg: Dict[str, Any]) -> SourceSettings:
    source = pipeline_cfg.get("source", {}) or {}
    http_cfg = pipeline_cfg.get("http", {}) or {}
    base_url = str(source.get("base_url") or DEFAULT_BASE_URL)
    headers = {"User-Agent": str(http_cfg.get("user_agent", "Academic research bot"))}
    return SourceSettings(
        base_url=base_url,
        headers=headers,
        timeout_seconds=int(http_cfg.get("timeout_seconds", 25)),
        max_workers=max(1, int(http_cfg.get("max_workers", 8))),
    )


def get_region_options(pipeline_cfg: Dict[str, Any]) -> List[RegionOption]:
    regions = pipeline_cfg.get("regions") or []
    if not regions:
        raise ValueError("pipeline.yaml missing regions list")
    out: List[RegionOption] = []
    for r in regions:
        code = r.get("code") if isinstance(r, dict) else None
        if not code:
            raise ValueError(f"pipeline.yaml region entry without code: {r}")
        out.append(RegionOption(code=str(code), name=str(r.get("name") or code)))
    return out


def get_region_by_code(options: List[RegionOption], code: str) -> RegionOption:
    for o in options:
        if o.code == code:
            return o
    raise KeyError(f"region code not found in configs/pipeline.yaml: {code}")


def region_label(options: List[RegionOption], code: str) -> str:
    try:
        return get_region_by_code(options, code).name
    except KeyError:
        return code


def get_default_selection(pipeline_cfg: Dict[str, Any]) -> List[str]:
    defaults = pipeline_cfg.get("defaults", {}) or {}
    return [str(c) for c in defaults.get("selection", []) or []]


def get_export_paths(pipeline_cfg: Dict[str, Any]) -> Dict[str, str]:
    storage = pipeline_cfg.get("storage") or {}
    exports_dir = storage.get("exports_dir")
    if not exports_dir:
        raise ValueError("pipeline.yaml missing storage.exports_dir")
    exports = Path(exports_dir)
    return {
        "exports_dir": str(exports),
        "csv_path": str(exports / str(storage.get("csv_name", "ev_sales_current_view.csv"))),
        "chart_path": str(exports / str(storage.get("chart_name", "ev_sales_chart.png"))),
    }
