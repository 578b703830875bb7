"""Data contracts for the deterministic and Monte Carlo portfolio projections."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SimulationResult(BaseModel):
    """Snapshot of the portfolio at the start of one projected year."""

    model_config = ConfigDict(extra="forbid")

    year: int = Field(..., ge=0, description="Offset from the start of the phase.")
    age: int
    portfolioValue: float
    contribution: float = 0.0
    returns: float = 0.0
    withdrawal: float = 0.0
    inflationAdjustedValue: float = 0.0

    @classmethod
    def depleted(cls, year: int, age: int) -> "SimulationResult":
        """Terminal all-zero record used once a portfolio runs out."""
        return cls(year=year, age=age, portfolioValue=0.0)


class FIREResult(BaseModel):
    """Accumulation and drawdown chained into one retirement projection."""

    model_config = ConfigDict(extra="forbid")

    portfolioAtRetirement: float
    annualWithdrawal: float
    monthlyWithdrawal: float
    yearsOfRunway: int = Field(..., ge=0)
    projections: List[SimulationResult]
    # Heuristic score, not a probability estimate.
    successProbability: float = Field(..., ge=0)
    fireNumber: float


class MonteCarloResult(BaseModel):
    """Percentile bands per simulated year, indexed by year offset."""

    model_config = ConfigDict(extra="forbid")

    percentile5: List[float]
    percentile25: List[float]
    percentile50: List[float]
    percentile75: List[float]
    percentile95: List[float]
    successRate: float = Field(..., ge=0, le=1)
    medianEndValue: float
    years: List[int] = Field(
        default_factory=list,
        description="Age at the end of each simulated year.",
    )
