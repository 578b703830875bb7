"""Combined output of one full plan evaluation."""

from typing import List

from pydantic import BaseModel, ConfigDict

from fire_engine.schemas.country import CountryRunway, LifestyleTier
from fire_engine.schemas.cpf import CPFAtRetirement, CPFProjection
from fire_engine.schemas.historical import HistoricalBacktestResult
from fire_engine.schemas.simulation import FIREResult, MonteCarloResult


class PlanEvaluation(BaseModel):
    model_config = ConfigDict(extra="forbid")

    retirementAge: int
    fire: FIREResult
    cpfProjection: List[CPFProjection]
    cpfAtRetirement: CPFAtRetirement
    includeCPF: bool
    combinedPortfolio: float
    monteCarlo: MonteCarloResult
    historical: HistoricalBacktestResult
    tier: LifestyleTier
    runway: List[CountryRunway]
