"""Projection engine for the FIRE planner: accumulation, drawdown, risk bands, CPF and runway."""

from fire_engine.config import DEFAULT_CONFIG, EngineConfig
from fire_engine.core.accumulation import (
    calculate_fire,
    project_accumulation,
    project_drawdown,
)
from fire_engine.core.affordability import calculate_runway
from fire_engine.core.cpf import project_cpf
from fire_engine.core.historical import run_historical_backtest
from fire_engine.core.monte_carlo import run_monte_carlo_simulation
from fire_engine.core.planner import evaluate_plan
from fire_engine.models import CPFBalances, PortfolioInputs

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "CPFBalances",
    "PortfolioInputs",
    "project_accumulation",
    "project_drawdown",
    "calculate_fire",
    "run_monte_carlo_simulation",
    "run_historical_backtest",
    "project_cpf",
    "calculate_runway",
    "evaluate_plan",
]
