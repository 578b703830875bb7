from __future__ import annotations

from math import isclose

import pytest

from fire_engine.core.historical import fisher_rate, run_historical_backtest
from fire_engine.data import load_historical_dataset
from fire_engine.models import PortfolioInputs


def plan(**overrides) -> PortfolioInputs:
    values = dict(
        currentSavings=1_000,
        monthlyContribution=100,
        yearsToRetirement=2,
        expectedReturn=0.07,
        inflationRate=0.03,
        withdrawalRate=0.1,
    )
    values.update(overrides)
    return PortfolioInputs(**values)


@pytest.mark.parametrize(
    "years_to_retirement, retirement_years, expected",
    [(10, 40, 46), (0, 0, 96), (0, 1, 95), (30, 65, 1), (30, 66, 0), (50, 60, 0)],
)
def test_sequence_count(years_to_retirement, retirement_years, expected):
    result = run_historical_backtest(
        plan(yearsToRetirement=years_to_retirement), current_age=40, retirement_years=retirement_years
    )

    assert result.totalSequences == expected
    assert len(result.sequences) == expected
    assert len({sequence.startYear for sequence in result.sequences}) == expected


def test_horizon_longer_than_history_is_empty():
    result = run_historical_backtest(plan(yearsToRetirement=60), current_age=30, retirement_years=60)

    assert result.sequences == []
    assert result.successRate == 0.0
    assert result.worstSequence is None
    assert result.bestSequence is None


def test_start_years_map_to_calendar_years():
    """One drawdown year with no withdrawal exposes each window's first return."""
    dataset = load_historical_dataset()
    result = run_historical_backtest(
        plan(currentSavings=100, monthlyContribution=0, yearsToRetirement=0, withdrawalRate=0.0),
        current_age=65,
        retirement_years=1,
    )

    by_year = {sequence.startYear: sequence for sequence in result.sequences}
    assert result.sequences[0].startYear == 1928
    assert result.sequences[-1].startYear == 2022
    assert isclose(by_year[1931].finalValue, 100 * (1 - 0.4384))
    assert isclose(by_year[1974].finalValue, 100 * (1 - 0.2590))
    assert isclose(by_year[2008].finalValue, 100 * (1 - 0.3655))
    for offset, sequence in enumerate(result.sequences):
        assert sequence.startYear == 1928 + offset
        assert sequence.endYear == sequence.startYear
        assert isclose(sequence.finalValue, 100 * (1 + dataset.returns[offset]))


def test_flat_history_matches_hand_calculation(flat_dataset):
    dataset = flat_dataset(length=10)
    result = run_historical_backtest(plan(), current_age=40, retirement_years=3, dataset=dataset)

    assert [sequence.startYear for sequence in result.sequences] == [2000, 2001, 2002, 2003, 2004]
    for sequence in result.sequences:
        # 1000 + 2 * 1200 at retirement, then three withdrawals of 340
        assert isclose(sequence.finalValue, 3_400 - 3 * 340)
        assert sequence.survived
        assert sequence.yearsDepleted is None
        assert sequence.endYear == sequence.startYear + 4
        assert sequence.realReturns == [0.0] * 5
        assert sequence.lowestValue == 1_000
        assert sequence.lowestYear == sequence.startYear
    assert result.successRate == 1.0


def test_withdrawal_tracks_actual_inflation(flat_dataset):
    dataset = flat_dataset(length=4, inflation=0.1)
    inputs = plan(monthlyContribution=0, yearsToRetirement=0, withdrawalRate=0.1)
    result = run_historical_backtest(inputs, current_age=65, retirement_years=2, dataset=dataset)

    # 1000 - 100, then 900 - 110
    assert isclose(result.sequences[0].finalValue, 790)


def test_depletion_freezes_the_sequence(flat_dataset):
    dataset = flat_dataset(length=6, annual_return=0.5)
    inputs = plan(currentSavings=1_000, monthlyContribution=0, yearsToRetirement=0, withdrawalRate=2.0)
    result = run_historical_backtest(inputs, current_age=65, retirement_years=4, dataset=dataset)

    sequence = result.sequences[0]
    # 1500 - 2000 runs out in the first drawdown year and never recovers
    assert sequence.yearsDepleted == 0
    assert not sequence.survived
    assert sequence.finalValue == 0
    assert sequence.lowestValue == 0
    assert sequence.lowestYear == 2000
    assert len(sequence.realReturns) == 4
    assert result.successRate == 0.0


def test_real_returns_use_each_years_inflation(flat_dataset):
    dataset = flat_dataset(length=3, annual_return=0.21, inflation=0.1)
    result = run_historical_backtest(plan(yearsToRetirement=1), current_age=40, retirement_years=1, dataset=dataset)

    assert result.sequences[0].realReturns == pytest.approx([0.1, 0.1])
    assert isclose(fisher_rate(0.21, 0.1), 0.1)


def test_lowest_value_tracks_the_worst_point(flat_dataset):
    dataset = flat_dataset(returns=[-0.5, 0.0, 1.0, 0.0, 0.0])
    inputs = plan(currentSavings=1_000, monthlyContribution=0, yearsToRetirement=3, withdrawalRate=0.0)
    result = run_historical_backtest(inputs, current_age=40, retirement_years=1, dataset=dataset)

    sequence = result.sequences[0]
    assert sequence.lowestValue == 500
    assert sequence.lowestYear == 2000
    assert sequence.finalValue == 1_000


def test_aggregates_over_real_history():
    result = run_historical_backtest(
        plan(currentSavings=500_000, monthlyContribution=5_000, yearsToRetirement=10, withdrawalRate=0.04),
        current_age=35,
        retirement_years=30,
    )
    finals = sorted(sequence.finalValue for sequence in result.sequences)

    assert result.totalSequences == 56
    assert result.worstSequence.finalValue == finals[0]
    assert result.bestSequence.finalValue == finals[-1]
    assert result.medianFinalValue == finals[len(finals) // 2]
    assert isclose(result.averageFinalValue, sum(finals) / len(finals))
    survived = sum(1 for sequence in result.sequences if sequence.survived)
    assert isclose(result.successRate, survived / 56)
