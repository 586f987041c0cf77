from src.openev.reconcile import reconcile_periods, resolve_period_value
from src.openev.models import Row


def test_total_takes_precedence_over_by_model():
    assert resolve_period_value({"ElectricCarsByModel": 80, "ElectricCarsTotal": 100}) == 100


def test_by_model_takes_precedence_over_by_brand():
    assert resolve_period_value({"ElectricCarsByBrand": 70, "ElectricCarsByModel": 80}) == 80


def test_zero_total_still_wins():
    assert resolve_period_value({"ElectricCarsTotal": 0, "ElectricCarsByBrand": 9}) == 0


def test_no_recognized_type_resolves_to_none():
    assert resolve_period_value({}) is None
    assert resolve_period_value({"PluginHybridsTotal": 5}) is None


def test_reconcile_drops_unresolvable_periods():
    rows = reconcile_periods(
        {
            "2019": {"ElectricCarsByBrand": 10},
            "2020": {"Other": 1},
            "2021": {"ElectricCarsTotal": 30, "ElectricCarsByModel": 29},
        }
    )
    assert rows == [Row("2019", 10), Row("2021", 30)]
