import math

import matplotlib

matplotlib.use("Agg")

import pytest

from src.dashboard.render import (
    MISSING_SENTINEL,
    chart_title,
    csv_text,
    format_value,
    pivot_to_frame,
    save_chart_png,
    table_frame,
    write_csv,
)
from src.openev.extract_records import parse_body, sum_numeric


PIVOT = {"2020": {"US": 150}, "2019": {"US": 10, "KR": 3.5}}
LABELS = {"US": 'United "States"', "KR": "Korea, Republic"}


def test_format_value():
    assert format_value(21415) == "21,415"
    assert format_value(2.0) == "2"
    assert format_value(1234.5678) == "1,234.568"
    assert format_value(None) == MISSING_SENTINEL
    assert format_value(math.nan) == MISSING_SENTINEL


def test_csv_quotes_delimiters_and_doubles_quotes():
    text = csv_text(PIVOT, ["US", "KR"], LABELS)
    assert text.split("\n") == [
        'period,"United ""States""","Korea, Republic"',
        "2019,10,3.5",
        "2020,150,",
    ]


def test_csv_quotes_labels_with_newlines():
    text = csv_text({"2020": {"US": 1}}, ["US"], {"US": "United\nStates"})
    assert text == 'period,"United\nStates"\n2020,1'


def test_csv_writes_whole_float_sums_as_integers():
    fields, _ = parse_body(' "a": 1.5, "b": 2.5 ')
    pivot = {"2020": {"US": sum_numeric(fields)}, "2021": {"US": 1e16}, "2022": {"US": 0.25}}
    assert csv_text(pivot, ["US"], {}).split("\n") == [
        "period,US",
        "2020,4",
        "2021,10000000000000000",
        "2022,0.25",
    ]


def test_csv_requires_loaded_data():
    with pytest.raises(ValueError):
        csv_text({}, ["US"], LABELS)


def test_write_csv_creates_parent_dirs(tmp_path):
    out = write_csv(PIVOT, ["US"], {}, tmp_path / "exports" / "view.csv")
    assert out.read_text(encoding="utf-8") == "period,US\n2019,10\n2020,150"


def test_table_frame_uses_sentinel_for_missing_cells():
    df = table_frame(PIVOT, ["US", "KR"], {"US": "United States", "KR": "Korea"})
    assert list(df.columns) == ["Period", "United States", "Korea"]
    assert df.iloc[1].tolist() == ["2020", "150", MISSING_SENTINEL]


def test_pivot_to_frame_sorted_with_nan_gaps():
    df = pivot_to_frame(PIVOT, ["US", "KR"], {})
    assert list(df.index) == ["2019", "2020"]
    assert math.isnan(df.loc["2020", "KR"])
    assert df.loc["2019", "KR"] == 3.5


def test_save_chart_png(tmp_path):
    out = save_chart_png(PIVOT, ["US", "KR"], LABELS, tmp_path / "chart.png")
    assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_chart_title_lists_region_names():
    assert chart_title(["US", "DE"], {"US": "United States"}) == "EV sales over time - United States, DE"
