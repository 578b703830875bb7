"""Deterministic accumulation and drawdown projections."""

from __future__ import annotations

import logging
from typing import List, Optional

from fire_engine.config import DEFAULT_CONFIG, EngineConfig
from fire_engine.models import PortfolioInputs
from fire_engine.schemas.simulation import FIREResult, SimulationResult

logger = logging.getLogger(__name__)


def project_accumulation(inputs: PortfolioInputs, current_age: int) -> List[SimulationResult]:
    """
    Year-by-year growth from today until retirement (inclusive).

    Order of operations (per year):
      1) Record the portfolio as it stands at the start of the year.
      2) Add the year's contribution (none in year 0) and the year's return.

    So the row for ``yearsToRetirement`` holds the portfolio at retirement.
    """
    results: List[SimulationResult] = []
    portfolio = float(inputs.currentSavings)
    cumulative_inflation = 1.0

    for year in range(inputs.yearsToRetirement + 1):
        contribution = 0.0 if year == 0 else inputs.monthlyContribution * 12
        returns = portfolio * inputs.expectedReturn

        cumulative_inflation *= 1 + inputs.inflationRate

        results.append(
            SimulationResult(
                year=year,
                age=current_age + year,
                portfolioValue=portfolio,
                contribution=contribution,
                returns=returns,
                withdrawal=0.0,
                inflationAdjustedValue=portfolio / cumulative_inflation,
            )
        )

        portfolio = portfolio + contribution + returns

    return results


def project_drawdown(
    starting_portfolio: float,
    annual_withdrawal: float,
    return_rate: float,
    inflation_rate: float,
    years: int,
    start_age: int,
) -> List[SimulationResult]:
    """
    Spend a portfolio down over ``years`` retirement years.

    Year 0 is the retirement instant and withdraws nothing; the withdrawal
    grows with inflation every year. Once the portfolio reaches zero every
    remaining row is the all-zero depleted record.
    """
    results: List[SimulationResult] = []
    portfolio = float(starting_portfolio)
    current_withdrawal = float(annual_withdrawal)
    cumulative_inflation = 1.0

    for year in range(years + 1):
        returns = portfolio * return_rate
        withdrawal = 0.0 if year == 0 else current_withdrawal

        cumulative_inflation *= 1 + inflation_rate

        results.append(
            SimulationResult(
                year=year,
                age=start_age + year,
                portfolioValue=max(0.0, portfolio),
                contribution=0.0,
                returns=returns if portfolio > 0 else 0.0,
                withdrawal=withdrawal,
                inflationAdjustedValue=max(0.0, portfolio) / cumulative_inflation,
            )
        )

        portfolio = portfolio + returns - withdrawal
        current_withdrawal *= 1 + inflation_rate

        if portfolio <= 0:
            logger.debug("portfolio depleted after drawdown year %d (age %d)", year, start_age + year)
            results.extend(
                SimulationResult.depleted(year=remaining, age=start_age + remaining)
                for remaining in range(year + 1, years + 1)
            )
            break

    return results


def years_of_runway(drawdown: List[SimulationResult], horizon: int) -> int:
    """Index of the first depleted drawdown row, or the full horizon if none."""
    for index, row in enumerate(drawdown):
        if row.portfolioValue <= 0:
            return index
    return horizon


def success_heuristic(portfolio_at_retirement: float, fire_number: float) -> float:
    """
    Crude readiness score: 0.95 once the FIRE number is reached, otherwise
    80% of the funded ratio. Capped at 0.99; this is not a probability.
    """
    if portfolio_at_retirement >= fire_number:
        score = 0.95
    else:
        score = (portfolio_at_retirement / fire_number) * 0.8
    return max(0.0, min(score, 0.99))


def calculate_fire(
    inputs: PortfolioInputs,
    current_age: int,
    monthly_expenses: float,
    retirement_years: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> FIREResult:
    """Chain accumulation into drawdown and derive the FIRE number."""
    config = config or DEFAULT_CONFIG
    if retirement_years is None:
        retirement_years = config.defaultRetirementYears

    accumulation = project_accumulation(inputs, current_age)
    portfolio_at_retirement = accumulation[-1].portfolioValue

    annual_expenses = monthly_expenses * 12
    fire_number = annual_expenses / inputs.withdrawalRate if inputs.withdrawalRate else float("inf")
    annual_withdrawal = portfolio_at_retirement * inputs.withdrawalRate

    drawdown = project_drawdown(
        starting_portfolio=portfolio_at_retirement,
        annual_withdrawal=annual_withdrawal,
        return_rate=inputs.expectedReturn - config.retirementReturnHaircut,
        inflation_rate=inputs.inflationRate,
        years=retirement_years,
        start_age=current_age + inputs.yearsToRetirement,
    )

    return FIREResult(
        portfolioAtRetirement=portfolio_at_retirement,
        annualWithdrawal=annual_withdrawal,
        monthlyWithdrawal=annual_withdrawal / 12,
        yearsOfRunway=years_of_runway(drawdown, retirement_years),
        # the retirement instant is already the last accumulation row
        projections=accumulation + drawdown[1:],
        successProbability=success_heuristic(portfolio_at_retirement, fire_number),
        fireNumber=fire_number,
    )


__all__ = [
    "project_accumulation",
    "project_drawdown",
    "years_of_runway",
    "success_heuristic",
    "calculate_fire",
]
