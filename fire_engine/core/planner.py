"""Run every engine for one plan, in data-flow order."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from fire_engine.config import DEFAULT_CONFIG, DEFAULT_CPF_RULES, CPFRules, EngineConfig
from fire_engine.core.accumulation import calculate_fire
from fire_engine.core.affordability import calculate_runway, resolve_portfolio
from fire_engine.core.cpf import cpf_at_age, project_cpf
from fire_engine.core.historical import run_historical_backtest
from fire_engine.core.monte_carlo import run_monte_carlo_simulation
from fire_engine.domain.state import PlanState
from fire_engine.schemas.country import Country
from fire_engine.schemas.historical import HistoricalDataset
from fire_engine.schemas.plan import PlanEvaluation

logger = logging.getLogger(__name__)


def evaluate_plan(
    state: PlanState,
    countries: Optional[Iterable[Country]] = None,
    dataset: Optional[HistoricalDataset] = None,
    simulations: Optional[int] = None,
    rng=None,
    seed: Optional[int] = None,
    config: Optional[EngineConfig] = None,
    cpf_rules: Optional[CPFRules] = None,
) -> PlanEvaluation:
    """
    Evaluate a plan end to end.

    CPF and the cash portfolio are projected independently; their values at
    the retirement age are combined (when ``includeCPF`` is set) only for the
    country runway ranking. Monte Carlo and the historical backtest give risk
    bands for the cash portfolio alone. Horizons, expenses and the trial
    count come from ``config`` unless ``simulations`` is given.
    """
    config = config or DEFAULT_CONFIG
    cpf_rules = cpf_rules or DEFAULT_CPF_RULES
    if simulations is None:
        simulations = config.dashboardSimulations
    inputs = state.portfolio_inputs()
    retirement_age = state.retirement_age

    cpf_projection = project_cpf(
        state.cpf_balances(),
        state.monthlySalary,
        state.currentAge,
        config.cpfProjectionYears,
        stop_contributions_at_age=retirement_age,
        rules=cpf_rules,
    )
    cpf_retirement = cpf_at_age(cpf_projection, retirement_age)

    fire = calculate_fire(
        inputs,
        state.currentAge,
        config.dashboardMonthlyExpenses,
        config=config,
    )
    combined = resolve_portfolio(fire.portfolioAtRetirement, cpf_retirement.withdrawable, state.includeCPF)

    monte_carlo = run_monte_carlo_simulation(
        inputs,
        state.currentAge,
        config.dashboardMonthlyExpenses,
        simulations=simulations,
        rng=rng,
        seed=seed,
        config=config,
    )
    historical = run_historical_backtest(
        inputs,
        state.currentAge,
        dataset=dataset,
        config=config,
    )
    runway = calculate_runway(
        combined,
        state.withdrawalRate,
        tier=state.selectedBudget,
        countries=countries,
        config=config,
    )

    logger.debug(
        "evaluated plan retiring at %d: portfolio %.0f, combined %.0f, MC success %.2f",
        retirement_age,
        fire.portfolioAtRetirement,
        combined,
        monte_carlo.successRate,
    )

    return PlanEvaluation(
        retirementAge=retirement_age,
        fire=fire,
        cpfProjection=cpf_projection,
        cpfAtRetirement=cpf_retirement,
        includeCPF=state.includeCPF,
        combinedPortfolio=combined,
        monteCarlo=monte_carlo,
        historical=historical,
        tier=state.selectedBudget,
        runway=runway,
    )


__all__ = ["evaluate_plan"]
