from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PortfolioInputs(BaseModel):
    """Savings plan shared by every engine. Rates are annual fractions (0.04 = 4%)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    currentSavings: float = Field(ge=0)
    monthlyContribution: float = Field(ge=0)
    yearsToRetirement: int = Field(ge=0)
    expectedReturn: float
    inflationRate: float
    withdrawalRate: float


class CPFBalances(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    OA: float = Field(ge=0)
    SA: float = Field(ge=0)
    MA: float = Field(ge=0)
    # Informational only; the projector always works from OA + SA + MA.
    total: float = 0.0

    @classmethod
    def from_accounts(cls, OA: float, SA: float, MA: float) -> "CPFBalances":
        return cls(OA=OA, SA=SA, MA=MA, total=OA + SA + MA)
