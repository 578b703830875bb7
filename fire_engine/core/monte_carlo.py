"""Monte Carlo risk bands over the two-phase savings/drawdown model."""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

import numpy as np

from fire_engine.config import DEFAULT_CONFIG, EngineConfig
from fire_engine.models import PortfolioInputs
from fire_engine.schemas.simulation import MonteCarloResult

logger = logging.getLogger(__name__)

PERCENTILES = (0.05, 0.25, 0.50, 0.75, 0.95)


def nearest_rank(sorted_values: np.ndarray, count: int, p: float) -> float:
    """Value at rank floor(count * p); no interpolation between ranks."""
    index = min(int(math.floor(count * p)), count - 1)
    return float(sorted_values[index])


def simulate_trials(
    inputs: PortfolioInputs,
    simulations: int,
    retirement_years: int,
    rng,
    config: EngineConfig,
) -> np.ndarray:
    """
    Run every trial and return the (simulations, total_years) matrix of
    year-end portfolio values.

    Draws are taken trial by trial, accumulation years first, so a given
    uniform stream always maps to the same paths. Drawdown values are
    clamped at zero for reporting but a trial keeps running afterwards.
    """
    years_to_retirement = inputs.yearsToRetirement
    total_years = years_to_retirement + retirement_years
    annual_contribution = inputs.monthlyContribution * 12
    volatility = config.volatility
    retirement_return = inputs.expectedReturn - config.retirementReturnHaircut

    uniforms = np.asarray(rng.random((simulations, total_years)), dtype=float)
    values = np.zeros((simulations, total_years))

    for sim in range(simulations):
        portfolio = float(inputs.currentSavings)
        draws = uniforms[sim]

        for year in range(years_to_retirement):
            random_return = inputs.expectedReturn + (draws[year] - 0.5) * 2 * volatility
            portfolio = portfolio * (1 + random_return) + annual_contribution
            values[sim, year] = portfolio

        withdrawal = portfolio * inputs.withdrawalRate
        for year in range(retirement_years):
            random_return = retirement_return + (draws[years_to_retirement + year] - 0.5) * 2 * volatility
            portfolio = portfolio * (1 + random_return) - withdrawal
            withdrawal *= 1 + inputs.inflationRate
            values[sim, years_to_retirement + year] = max(0.0, portfolio)

    return values


def aggregate_trials(
    trials: Sequence[Sequence[float]],
    current_age: int,
    total_years: int,
    final_values: Optional[Sequence[float]] = None,
) -> MonteCarloResult:
    """
    Collapse per-trial yearly values into nearest-rank percentile bands.

    ``final_values`` overrides each trial's end value; it is only needed when
    the trials have no simulated years (the end value is then the starting
    portfolio).
    """
    count = len(trials)
    years = [current_age + year + 1 for year in range(total_years)]

    if count == 0:
        zeros = [0.0] * total_years
        return MonteCarloResult(
            percentile5=list(zeros),
            percentile25=list(zeros),
            percentile50=list(zeros),
            percentile75=list(zeros),
            percentile95=list(zeros),
            successRate=0.0,
            medianEndValue=0.0,
            years=years,
        )

    matrix = np.asarray(trials, dtype=float).reshape(count, total_years)
    by_year = np.sort(matrix, axis=0)

    bands = {p: [] for p in PERCENTILES}
    for year in range(total_years):
        column = by_year[:, year]
        for p in PERCENTILES:
            bands[p].append(nearest_rank(column, count, p))

    if final_values is None:
        ends = matrix[:, -1] if total_years else np.zeros(count)
    else:
        ends = np.asarray(final_values, dtype=float)
    success_count = int(np.count_nonzero(ends > 0))

    return MonteCarloResult(
        percentile5=bands[0.05],
        percentile25=bands[0.25],
        percentile50=bands[0.50],
        percentile75=bands[0.75],
        percentile95=bands[0.95],
        successRate=success_count / count,
        medianEndValue=nearest_rank(np.sort(ends), count, 0.5),
        years=years,
    )


def run_monte_carlo_simulation(
    inputs: PortfolioInputs,
    current_age: int,
    monthly_expenses: float,
    simulations: Optional[int] = None,
    retirement_years: Optional[int] = None,
    rng=None,
    seed: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> MonteCarloResult:
    """
    Randomised version of the accumulation/drawdown projection.

    ``rng`` is any object with a numpy-style ``random(size)`` method returning
    uniforms on [0, 1); by default a fresh ``numpy.random.default_rng(seed)``.
    ``monthly_expenses`` is accepted for parity with ``calculate_fire``; the
    withdrawal is always ``withdrawalRate`` of the portfolio at retirement.
    """
    config = config or DEFAULT_CONFIG
    if simulations is None:
        simulations = config.defaultSimulations
    if retirement_years is None:
        retirement_years = config.defaultRetirementYears
    simulations = max(0, int(simulations))
    total_years = inputs.yearsToRetirement + retirement_years

    if rng is None:
        rng = np.random.default_rng(seed)

    logger.debug(
        "running %d Monte Carlo trials over %d years (volatility %.3f)",
        simulations,
        total_years,
        config.volatility,
    )

    values = simulate_trials(inputs, simulations, retirement_years, rng, config)
    final_values = None
    if total_years == 0:
        final_values = [float(inputs.currentSavings)] * simulations

    return aggregate_trials(values, current_age, total_years, final_values=final_values)


__all__ = [
    "PERCENTILES",
    "nearest_rank",
    "simulate_trials",
    "aggregate_trials",
    "run_monte_carlo_simulation",
]
