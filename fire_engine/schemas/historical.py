"""Data contracts for the historical backtest."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class HistoricalDataset(BaseModel):
    """Annual nominal market returns and inflation, aligned by calendar year."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str
    source: str = ""
    startYear: int
    returns: List[float]
    inflation: List[float]

    @model_validator(mode="after")
    def ensure_aligned(self) -> "HistoricalDataset":
        if len(self.returns) != len(self.inflation):
            raise ValueError(
                f"returns ({len(self.returns)}) and inflation ({len(self.inflation)}) must be the same length"
            )
        return self

    @property
    def endYear(self) -> int:
        return self.startYear + len(self.returns) - 1


class HistoricalSequence(BaseModel):
    """One replay of history starting at a given calendar year."""

    model_config = ConfigDict(extra="forbid")

    startYear: int
    endYear: int
    finalValue: float = Field(..., ge=0)
    lowestValue: float
    lowestYear: int
    survived: bool
    yearsDepleted: Optional[int] = Field(
        default=None,
        description="Drawdown year offset at which the portfolio ran out, if it did.",
    )
    realReturns: List[float] = Field(default_factory=list)


class HistoricalBacktestResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sequences: List[HistoricalSequence]
    successRate: float = Field(..., ge=0, le=1)
    worstSequence: Optional[HistoricalSequence] = None
    bestSequence: Optional[HistoricalSequence] = None
    medianFinalValue: float = 0.0
    averageFinalValue: float = 0.0
    totalSequences: int = Field(0, ge=0)
