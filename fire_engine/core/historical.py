"""Replay the user's plan over every window of real market history."""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from fire_engine.config import DEFAULT_CONFIG, EngineConfig
from fire_engine.data import load_historical_dataset
from fire_engine.models import PortfolioInputs
from fire_engine.schemas.historical import (
    HistoricalBacktestResult,
    HistoricalDataset,
    HistoricalSequence,
)

logger = logging.getLogger(__name__)


def fisher_rate(nominal_rate: float, inflation_rate: float) -> float:
    return (1 + nominal_rate) / (1 + inflation_rate) - 1


def start_indices(dataset_length: int, total_years: int) -> range:
    """Start offsets whose whole window fits in the data: 0 .. length - total - 1."""
    return range(max(0, dataset_length - total_years))


def replay_sequence(
    inputs: PortfolioInputs,
    retirement_years: int,
    dataset: HistoricalDataset,
    start_index: int,
) -> HistoricalSequence:
    """
    Run one window starting at ``dataset.startYear + start_index``.

    Accumulation compounds the actual nominal return and then adds the
    year's contributions. Drawdown takes ``withdrawalRate`` of the portfolio
    at retirement, raised each year by that year's actual inflation. A
    depleted portfolio stays at zero for the rest of the window.
    """
    years_to_retirement = inputs.yearsToRetirement
    total_years = years_to_retirement + retirement_years
    start_year = dataset.startYear + start_index
    annual_contribution = inputs.monthlyContribution * 12

    portfolio = float(inputs.currentSavings)
    lowest_value = portfolio
    lowest_year = start_year
    real_returns: List[float] = []

    for offset in range(years_to_retirement):
        index = start_index + offset
        nominal = dataset.returns[index]
        real_returns.append(fisher_rate(nominal, dataset.inflation[index]))

        portfolio = portfolio * (1 + nominal) + annual_contribution
        if portfolio < lowest_value:
            lowest_value = portfolio
            lowest_year = start_year + offset

    withdrawal = portfolio * inputs.withdrawalRate
    years_depleted: Optional[int] = None

    for offset in range(retirement_years):
        index = start_index + years_to_retirement + offset
        nominal = dataset.returns[index]
        inflation = dataset.inflation[index]
        real_returns.append(fisher_rate(nominal, inflation))

        if years_depleted is not None:
            continue

        portfolio = portfolio * (1 + nominal) - withdrawal
        withdrawal *= 1 + inflation

        if portfolio <= 0:
            portfolio = 0.0
            years_depleted = offset

        if portfolio < lowest_value:
            lowest_value = portfolio
            lowest_year = start_year + years_to_retirement + offset

    return HistoricalSequence(
        startYear=start_year,
        endYear=start_year + total_years - 1,
        finalValue=max(0.0, portfolio),
        lowestValue=lowest_value,
        lowestYear=lowest_year,
        survived=years_depleted is None,
        yearsDepleted=years_depleted,
        realReturns=real_returns,
    )


def summarize_sequences(sequences: List[HistoricalSequence]) -> HistoricalBacktestResult:
    if not sequences:
        return HistoricalBacktestResult(sequences=[], successRate=0.0, totalSequences=0)

    count = len(sequences)
    survived = sum(1 for sequence in sequences if sequence.survived)
    final_values = sorted(sequence.finalValue for sequence in sequences)

    return HistoricalBacktestResult(
        sequences=sequences,
        successRate=survived / count,
        worstSequence=min(sequences, key=lambda sequence: sequence.finalValue),
        bestSequence=max(sequences, key=lambda sequence: sequence.finalValue),
        medianFinalValue=final_values[int(math.floor(count * 0.5))],
        averageFinalValue=sum(final_values) / count,
        totalSequences=count,
    )


def run_historical_backtest(
    inputs: PortfolioInputs,
    current_age: int,
    retirement_years: Optional[int] = None,
    dataset: Optional[HistoricalDataset] = None,
    config: Optional[EngineConfig] = None,
) -> HistoricalBacktestResult:
    """
    Backtest the plan against every historical start year that leaves room
    for the full horizon. When the horizon is longer than the data the
    result simply has no sequences; callers must check ``totalSequences``.
    """
    config = config or DEFAULT_CONFIG
    if retirement_years is None:
        retirement_years = config.defaultRetirementYears
    dataset = dataset or load_historical_dataset()

    total_years = inputs.yearsToRetirement + retirement_years
    indices = start_indices(len(dataset.returns), total_years)
    logger.debug(
        "backtesting age %d plan over %d windows of %d years (dataset %s)",
        current_age,
        len(indices),
        total_years,
        dataset.version,
    )

    sequences = [
        replay_sequence(inputs, retirement_years, dataset, start_index) for start_index in indices
    ]
    return summarize_sequences(sequences)


__all__ = [
    "fisher_rate",
    "start_indices",
    "replay_sequence",
    "summarize_sequences",
    "run_historical_backtest",
]
