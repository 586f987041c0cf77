from src.openev.stats import compute_stats


PIVOT = {
    "2021": {"US": 20},
    "2020": {"US": 10, "CN": 30},
}


def test_latest_period_total_treats_missing_as_zero():
    stats = compute_stats(PIVOT, ["US", "CN"])
    assert stats.latest_period == "2021"
    assert stats.latest_total == 20
    assert stats.period_count == 2


def test_top_region_ties_keep_selection_order():
    assert compute_stats(PIVOT, ["US", "CN"]).top_region == "US"
    assert compute_stats(PIVOT, ["CN", "US"]).top_region == "CN"


def test_top_region_by_all_period_total():
    pivot = dict(PIVOT, **{"2019": {"CN": 1}})
    stats = compute_stats(pivot, ["US", "CN"])
    assert stats.top_region == "CN"
    assert stats.top_region_total == 31


def test_quarter_tokens_sort_after_their_year():
    stats = compute_stats({"2021": {"US": 1}, "2021-Q1": {"US": 2}}, ["US"])
    assert stats.latest_period == "2021-Q1"


def test_empty_pivot_suppresses_stats():
    assert compute_stats({}, ["US"]) is None
