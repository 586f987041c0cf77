from pathlib import Path

import pytest

from src.utils.config import (
    get_default_selection,
    get_export_paths,
    get_region_options,
    get_source_settings,
    load_yaml,
    region_label,
)

REPO_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "pipeline.yaml"


def test_load_yaml_requires_mapping(tmp_path):
    p = tmp_path / "bad.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")  # YAML list, not dict
    with pytest.raises(ValueError):
        load_yaml(p)


def test_load_yaml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml(tmp_path / "missing.yaml")


def test_get_export_paths_requires_exports_dir():
    with pytest.raises(ValueError):
        get_export_paths({"storage": {"csv_name": "x.csv"}})


def test_get_region_options_requires_codes():
    with pytest.raises(ValueError):
        get_region_options({"regions": []})
    with pytest.raises(ValueError):
        get_region_options({"regions": [{"name": "Nowhere"}]})


def test_source_settings_defaults_and_data_url():
    settings = get_source_settings({"source": {"base_url": "https://example.test/data/"}})
    assert settings.timeout_seconds == 25
    assert settings.data_url("DE") == "https://example.test/data/data-DE.js"


def test_repo_config_loads():
    cfg = load_yaml(REPO_CONFIG)
    options = get_region_options(cfg)
    assert region_label(options, "NO") == "Norway"
    assert region_label(options, "ZZ") == "ZZ"
    assert get_default_selection(cfg) == ["global", "US"]
    assert get_export_paths(cfg)["csv_path"].endswith("ev_sales_current_view.csv")


def test_null_sections_raise_value_error(tmp_path):
    p = tmp_path / "pipeline.yaml"
    p.write_text("storage:\nregions:\n", encoding="utf-8")
    cfg = load_yaml(p)
    with pytest.raises(ValueError):
        get_export_paths(cfg)
    with pytest.raises(ValueError):
        get_region_options(cfg)
