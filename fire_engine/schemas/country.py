"""Country reference data and the affordability outputs computed against it."""

from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

LifestyleTier = Literal["frugal", "moderate", "comfortable"]


class CostTotals(BaseModel):
    """Monthly cost of living in USD for each lifestyle tier."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    frugal: float = Field(ge=0)
    moderate: float = Field(ge=0)
    comfortable: float = Field(ge=0)

    def __getitem__(self, tier: str) -> float:
        return getattr(self, tier)


class CostOfLiving(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    rentStudio: float = 0.0
    rent1Bed: float = 0.0
    rent2Bed: float = 0.0
    utilities: float = 0.0
    groceries: float = 0.0
    diningOut: float = 0.0
    transportation: float = 0.0
    healthcare: float = 0.0
    entertainment: float = 0.0
    total: CostTotals


class VisaInfo(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    type: str
    maxStay: str
    renewability: str = ""
    pathToResidency: str = ""
    workAllowed: bool = False


class LifestyleInfo(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    climate: str = ""
    language: List[str] = Field(default_factory=list)
    englishFriendly: int = Field(ge=1, le=5)
    safety: int = Field(ge=1, le=5)
    healthcare: int = Field(ge=1, le=5)
    internetSpeed: float = Field(ge=0)
    timezone: str = ""
    flightFromSG: str = ""


class Country(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    region: str
    currency: str
    exchangeRate: float = Field(gt=0, description="Value of one unit of local currency in SGD.")
    costOfLiving: CostOfLiving
    visa: VisaInfo
    lifestyle: LifestyleInfo


class CountryCatalog(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str
    countries: List[Country]

    def by_id(self) -> Dict[str, Country]:
        return {country.id: country for country in self.countries}


class CountryRunway(BaseModel):
    model_config = ConfigDict(extra="forbid")

    countryId: str
    name: str
    annualCost: float = Field(..., ge=0, description="Annual cost at the chosen tier, USD.")
    years: float = Field(..., ge=0, description="Runway, clamped at the configured cap.")
    infinite: bool
    canAfford: bool


class AffordableBudget(BaseModel):
    model_config = ConfigDict(extra="forbid")

    monthly: float
    annual: float


class CountryProjectionYear(BaseModel):
    model_config = ConfigDict(extra="forbid")

    age: int
    year: int = Field(..., ge=0)
    portfolio: float = Field(..., ge=0)
    withdrawal: float
    returns: float


class CountryProjection(BaseModel):
    """A drawdown funded at one country's cost of living."""

    model_config = ConfigDict(extra="forbid")

    countryId: str
    tier: LifestyleTier
    annualSpending: float = Field(..., description="First-year spending converted to SGD.")
    years: List[CountryProjectionYear]
    yearsOfRunway: int = Field(..., ge=0)
    depletionAge: int
    totalWithdrawals: float
