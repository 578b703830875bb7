from __future__ import annotations

from math import isclose

import pytest

from fire_engine.core.accumulation import project_drawdown, years_of_runway


def test_first_year_is_the_retirement_instant():
    rows = project_drawdown(100_000, 5_000, 0.05, 0.02, years=3, start_age=45)

    assert rows[0].withdrawal == 0.0
    assert rows[0].portfolioValue == 100_000
    assert rows[0].age == 45
    assert len(rows) == 4


def test_withdrawal_grows_with_inflation():
    rows = project_drawdown(100_000, 5_000, 0.05, 0.02, years=3, start_age=45)

    assert isclose(rows[1].portfolioValue, 105_000)
    assert isclose(rows[1].withdrawal, 5_100)
    assert isclose(rows[2].portfolioValue, 105_000 + 5_250 - 5_100)
    assert isclose(rows[2].withdrawal, 5_202)
    assert isclose(rows[3].withdrawal, 5_000 * 1.02**3)


def test_depletion_freezes_remaining_years():
    rows = project_drawdown(10_000, 6_000, 0.0, 0.0, years=5, start_age=60)

    assert [row.portfolioValue for row in rows] == [10_000, 10_000, 4_000, 0, 0, 0]
    assert [row.age for row in rows] == [60, 61, 62, 63, 64, 65]
    for row in rows[3:]:
        assert row.contribution == 0
        assert row.returns == 0
        assert row.withdrawal == 0
        assert row.inflationAdjustedValue == 0
    assert years_of_runway(rows, 5) == 3


@pytest.mark.parametrize(
    "start, withdrawal, rate, inflation, years",
    [
        (1_000_000, 40_000, 0.06, 0.03, 40),
        (1_000_000, 90_000, 0.04, 0.05, 40),
        (250_000, 30_000, -0.02, 0.02, 30),
        (50_000, 50_000, 0.10, 0.0, 10),
        (0, 10_000, 0.05, 0.02, 5),
    ],
)
def test_depleted_rows_stay_zero(start, withdrawal, rate, inflation, years):
    rows = project_drawdown(start, withdrawal, rate, inflation, years=years, start_age=50)

    assert len(rows) == years + 1
    assert all(row.portfolioValue >= 0 for row in rows)

    depleted = False
    for row in rows[1:]:
        if depleted:
            assert row.portfolioValue == 0
            assert row.withdrawal == 0
            assert row.returns == 0
        if row.portfolioValue == 0:
            depleted = True


def test_runway_is_full_horizon_when_never_depleted():
    rows = project_drawdown(1_000_000, 10_000, 0.05, 0.02, years=30, start_age=45)

    assert all(row.portfolioValue > 0 for row in rows)
    assert years_of_runway(rows, 30) == 30


def test_zero_starting_portfolio_is_depleted_immediately():
    rows = project_drawdown(0, 0, 0.05, 0.02, years=3, start_age=65)

    assert years_of_runway(rows, 3) == 0
    assert all(row.portfolioValue == 0 for row in rows)
