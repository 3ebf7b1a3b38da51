import math
from datetime import date

import pytest

from nav_dashboard.domain.models import EquityPoint, MonthlyReturn, Record
from nav_dashboard.domain.normalization import normalize
from nav_dashboard.domain.services import (
    SeriesDerivationEngine,
    bucket_by_month,
    build_drawdown,
    build_equity,
    build_monthly_matrix,
    round_half_up,
)
from nav_dashboard.domain.buckets import MonthKey


def make_series(*pairs: tuple[str, float]) -> tuple[Record, ...]:
    return tuple(Record(date=date.fromisoformat(d), nav=float(nav)) for d, nav in pairs)


def test_three_month_scenario():
    engine = SeriesDerivationEngine()
    result = engine.derive(
        [
            {"Date": "2023-01-31", "Nav": 100},
            {"Date": "2023-02-28", "Nav": 110},
            {"Date": "2023-03-31", "Nav": 99},
        ]
    )

    assert [p.value for p in result.equity] == [100.0, 110.0, 99.0]
    assert [p.date for p in result.equity] == ["2023-01-31", "2023-02-28", "2023-03-31"]
    assert [p.drawdown for p in result.drawdown] == [0.0, 0.0, -10.0]
    assert result.monthly_returns == {
        "2023": (
            MonthlyReturn(year=2023, month="01", ret=None),
            MonthlyReturn(year=2023, month="02", ret=10.0),
            MonthlyReturn(year=2023, month="03", ret=-10.0),
        )
    }
    assert result.summary.valid_records == 3
    assert result.summary.dropped_records == 0
    assert result.max_drawdown() == -10.0
    assert result.final_equity() == 99.0


def test_all_invalid_input_yields_empty_outputs():
    result = SeriesDerivationEngine().derive([{"Date": "2023-01-31", "Nav": "abc"}])

    assert result.equity == ()
    assert result.drawdown == ()
    assert result.monthly_returns == {}
    assert result.is_empty()
    assert result.summary.total_raw == 1
    assert result.summary.dropped_records == 1
    assert result.summary.first_date is None
    assert not result.summary.base_rejected


def test_empty_input_yields_empty_outputs():
    result = SeriesDerivationEngine().derive([])

    assert result.is_empty()
    assert result.drawdown == ()
    assert result.monthly_returns == {}
    assert result.max_drawdown() is None


def test_derivation_is_idempotent():
    raw = [
        {"Date": "2022-12-30", "Nav": 97.3},
        {"Date": "2023-01-15", "Nav": 101.1},
        {"Date": "2023-01-31", "Nav": 99.7},
        {"Date": "2023-03-31", "Nav": 104.2},
    ]
    engine = SeriesDerivationEngine()
    first = engine.derive(raw)
    second = engine.derive(raw)

    assert first.equity == second.equity
    assert first.drawdown == second.drawdown
    assert first.monthly_returns == second.monthly_returns


def test_first_equity_point_is_base_scale():
    equity = build_equity(make_series(("2023-01-01", 37.123), ("2023-01-02", 40.0)))

    assert equity[0].value == 100.0


def test_equity_values_are_rounded():
    equity = build_equity(make_series(("2023-01-01", 3.0), ("2023-01-02", 4.0), ("2023-01-03", 2.0)))

    assert [p.value for p in equity] == [100.0, 133.33, 66.67]


@pytest.mark.parametrize("base", [0.0, -5.0])
def test_non_positive_base_is_rejected(base, caplog):
    raw = [{"Date": "2023-01-31", "Nav": base}, {"Date": "2023-02-28", "Nav": 10}]
    with caplog.at_level("WARNING", logger="nav_dashboard"):
        result = SeriesDerivationEngine().derive(raw)

    assert result.equity == ()
    assert result.drawdown == ()
    assert result.summary.base_rejected
    assert result.summary.base_nav == base
    assert "not positive" in caplog.text
    assert result.monthly_returns["2023"] == (
        MonthlyReturn(year=2023, month="01", ret=None),
        MonthlyReturn(year=2023, month="02", ret=None),
    )


def test_drawdown_never_positive_and_zero_at_peaks():
    values = [100.0, 105.0, 103.0, 105.0, 110.0, 90.0, 95.0, 111.0]
    equity = tuple(EquityPoint(date=f"2023-01-{i + 1:02d}", value=v) for i, v in enumerate(values))
    drawdown = build_drawdown(equity)

    assert len(drawdown) == len(equity)
    assert all(p.drawdown <= 0 for p in drawdown)
    running = -math.inf
    for point, dd in zip(equity, drawdown):
        running = max(running, point.value)
        if point.value == running:
            assert dd.drawdown == 0
        else:
            assert dd.drawdown < 0
    assert drawdown[5].drawdown == round_half_up((90.0 - 110.0) / 110.0 * 100)


def test_drawdown_of_empty_equity_is_empty():
    assert build_drawdown(()) == ()


def test_bucket_keeps_last_value_in_month():
    buckets = bucket_by_month(normalize([{"Date": "2023-05-01", "Nav": 100}, {"Date": "2023-05-31", "Nav": 105}]))

    assert buckets.get(MonthKey(2023, 5)) == 105.0
    assert len(buckets) == 1


def test_gap_month_has_null_return():
    matrix = build_monthly_matrix(
        make_series(
            ("2023-10-31", 100),
            ("2023-11-30", 102),
            ("2024-01-31", 110),
            ("2024-02-29", 99),
        )
    )

    assert matrix["2023"] == (
        MonthlyReturn(year=2023, month="10", ret=None),
        MonthlyReturn(year=2023, month="11", ret=2.0),
    )
    assert matrix["2024"] == (
        MonthlyReturn(year=2024, month="01", ret=None),
        MonthlyReturn(year=2024, month="02", ret=-10.0),
    )


def test_january_looks_back_to_previous_december():
    matrix = build_monthly_matrix(make_series(("2023-12-29", 200), ("2024-01-31", 210)))

    assert matrix["2024"] == (MonthlyReturn(year=2024, month="01", ret=5.0),)


def test_non_positive_previous_month_has_null_return():
    matrix = build_monthly_matrix(make_series(("2023-01-31", 0), ("2023-02-28", 10), ("2023-03-31", -4), ("2023-04-30", 8)))

    assert [m.ret for m in matrix["2023"]] == [None, None, -140.0, None]


def test_round_half_up_rounds_away_from_zero():
    assert round_half_up(1.005) == 1.01
    assert round_half_up(-1.005) == -1.01
    assert round_half_up(2.675) == 2.68
    assert round_half_up(-0.001) == 0.0
    assert math.copysign(1.0, round_half_up(-0.001)) == 1.0


def test_huge_nav_ratio_is_rounded_without_error():
    result = SeriesDerivationEngine().derive([{"Date": "2023-01-31", "Nav": 1}, {"Date": "2023-02-28", "Nav": 1e30}])

    assert result.equity[1].value == pytest.approx(1e32)
    assert result.drawdown[1].drawdown == 0.0
    assert result.monthly_returns["2023"][1].ret == pytest.approx(1e32)


def test_tiny_base_is_rounded_without_error():
    result = SeriesDerivationEngine().derive([{"Date": "2023-01-31", "Nav": 1e-30}, {"Date": "2023-02-28", "Nav": 1}])

    assert result.equity[0].value == 100.0
    assert math.isfinite(result.equity[1].value)
    assert result.monthly_returns["2023"][1].ret == pytest.approx(1e32)


def test_round_half_up_keeps_large_values():
    assert round_half_up(1e40) == 1e40
    assert round_half_up(123456789012345680000.0) == 123456789012345680000.0


def test_drawdown_with_zero_peak_is_nan():
    drawdown = build_drawdown((EquityPoint(date="2023-01-01", value=0.0), EquityPoint(date="2023-01-02", value=5.0)))

    assert math.isnan(drawdown[0].drawdown)
    assert drawdown[1].drawdown == 0.0


def test_year_keys_are_zero_padded_for_early_years():
    matrix = build_monthly_matrix(make_series(("0987-05-31", 100), ("0987-06-30", 110)))

    assert list(matrix) == ["0987"]
    assert matrix["0987"][1] == MonthlyReturn(year=987, month="06", ret=10.0)
