from __future__ import annotations

from typing import Callable, List, Optional

import numpy as np
import pytest

from fire_engine.models import CPFBalances, PortfolioInputs
from fire_engine.schemas.historical import HistoricalDataset


@pytest.fixture()
def example_inputs() -> PortfolioInputs:
    return PortfolioInputs(
        currentSavings=500_000,
        monthlyContribution=5_000,
        yearsToRetirement=10,
        expectedReturn=0.07,
        inflationRate=0.03,
        withdrawalRate=0.04,
    )


@pytest.fixture()
def example_cpf_balances() -> CPFBalances:
    return CPFBalances(OA=100_000, SA=80_000, MA=40_000, total=220_000)


@pytest.fixture()
def flat_dataset() -> Callable[..., HistoricalDataset]:
    """Build a small synthetic history with constant (or given) returns and inflation."""

    def build(
        length: int = 10,
        annual_return: float = 0.0,
        inflation: float = 0.0,
        returns: Optional[List[float]] = None,
        start_year: int = 2000,
    ) -> HistoricalDataset:
        returns = returns if returns is not None else [annual_return] * length
        return HistoricalDataset(
            version="test",
            startYear=start_year,
            returns=returns,
            inflation=[inflation] * len(returns),
        )

    return build


class FixedUniforms:
    """Stand-in uniform source returning preset draws in trial-major order."""

    def __init__(self, draws):
        self.draws = np.asarray(draws, dtype=float)

    def random(self, size):
        if self.draws.ndim == 0:
            return np.full(size, float(self.draws))
        return self.draws.reshape(size)


@pytest.fixture()
def fixed_uniforms() -> Callable[..., FixedUniforms]:
    return FixedUniforms
