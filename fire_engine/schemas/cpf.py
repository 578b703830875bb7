"""Data contracts for the CPF balance projector."""

from pydantic import BaseModel, ConfigDict, Field


class AccountSplit(BaseModel):
    """An amount split across the three working accounts."""

    model_config = ConfigDict(extra="forbid")

    OA: float = 0.0
    SA: float = 0.0
    MA: float = 0.0
    total: float = 0.0


class CPFContribution(AccountSplit):
    pass


class CPFInterest(AccountSplit):
    pass


class CPFProjection(BaseModel):
    """Balances at the start of one projected year, before contributions and interest."""

    model_config = ConfigDict(extra="forbid")

    age: int
    year: int = Field(..., ge=0)
    OA: float
    SA: float
    MA: float
    RA: float = 0.0
    total: float
    contributions: float = Field(..., ge=0)
    interest: float


class CPFAtRetirement(BaseModel):
    model_config = ConfigDict(extra="forbid")

    OA: float = 0.0
    SA: float = 0.0
    MA: float = 0.0
    RA: float = 0.0
    total: float = 0.0
    withdrawable: float = 0.0


class CPFLifePayout(BaseModel):
    """Rough monthly CPF LIFE payouts for each plan."""

    model_config = ConfigDict(extra="forbid")

    standard: int
    basic: int
    escalating: int
