"""Engine-wide constants, expressed as explicit (overridable) configuration."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EngineConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    # Half-width of the uniform noise band around the expected return.
    volatility: float = Field(default=0.15, ge=0)
    # Subtracted from the expected return once the portfolio is in drawdown.
    retirementReturnHaircut: float = 0.01
    # Fixed comparison rate; costs of living are quoted in USD, portfolios in SGD.
    sgdToUsd: float = Field(default=0.74, gt=0)
    runwayCapYears: float = Field(default=100.0, gt=0)
    affordableRunwayYears: float = Field(default=25.0, ge=0)
    defaultRetirementYears: int = Field(default=40, ge=0)
    defaultSimulations: int = Field(default=1000, ge=0)
    countryProjectionYears: int = Field(default=50, ge=0)

    # Plan evaluation defaults.
    dashboardMonthlyExpenses: float = Field(default=2_000.0, ge=0, description="USD per month.")
    dashboardSimulations: int = Field(default=500, ge=0)
    cpfProjectionYears: int = Field(default=40, ge=0)


class ContributionBracket(BaseModel):
    """
    One age bracket of the CPF contribution table.

    OA/SA/MA are each account's share of the (capped) monthly wage, in percent.
    The allocation ratios are derived from them so that they always sum to 1.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    maxAge: float
    OA: float = Field(ge=0)
    SA: float = Field(ge=0)
    MA: float = Field(ge=0)

    @property
    def total_rate(self) -> float:
        return (self.OA + self.SA + self.MA) / 100.0

    @property
    def allocation(self) -> dict:
        total = self.OA + self.SA + self.MA
        if total <= 0:
            return {"OA": 0.0, "SA": 0.0, "MA": 0.0}
        return {"OA": self.OA / total, "SA": self.SA / total, "MA": self.MA / total}


class CPFRules(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    oaRate: float = 0.025
    saRate: float = 0.04
    maRate: float = 0.04
    raRate: float = 0.04

    # Extra interest on the first $60K of combined balances, OA counting up to $20K.
    extraRate: float = 0.01
    extraLimit: float = 60_000.0
    extraOACap: float = 20_000.0

    # Further extra interest from age 55 on the first $30K, OA counting up to $30K.
    extra55Rate: float = 0.01
    extra55Limit: float = 30_000.0
    extra55OACap: float = 30_000.0
    extra55Age: int = 55

    # SA is moved into the RA when the member turns this age.
    transferAge: int = 55

    wageCeiling: float = 6_800.0

    brackets: List[ContributionBracket] = Field(
        default_factory=lambda: [
            ContributionBracket(maxAge=55, OA=23, SA=6, MA=8),
            ContributionBracket(maxAge=60, OA=12, SA=7, MA=10.5),
            ContributionBracket(maxAge=65, OA=3, SA=8, MA=9.5),
            ContributionBracket(maxAge=float("inf"), OA=1, SA=7, MA=7.5),
        ]
    )

    # CPF LIFE monthly payout per dollar of RA balance.
    payoutStandard: float = 0.0055
    payoutBasic: float = 0.0048
    payoutEscalating: float = 0.0045

    @model_validator(mode="after")
    def ensure_brackets_sorted(self) -> "CPFRules":
        ages = [bracket.maxAge for bracket in self.brackets]
        if not ages:
            raise ValueError("at least one contribution bracket is required")
        if ages != sorted(ages):
            raise ValueError("contribution brackets must be ordered by maxAge")
        return self

    def bracket_for_age(self, age: float) -> ContributionBracket:
        for bracket in self.brackets:
            if age <= bracket.maxAge:
                return bracket
        return self.brackets[-1]


DEFAULT_CONFIG = EngineConfig()
DEFAULT_CPF_RULES = CPFRules()
