"""
Caller-side plan state: local persistence and share-link encoding.

None of this crosses into the engines; it only produces the inputs they take.
Corrupt payloads never raise here, they fall back to the defaults.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Literal, Optional, Union
from urllib.parse import parse_qs, urlencode

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fire_engine.models import CPFBalances, PortfolioInputs

logger = logging.getLogger(__name__)

STORAGE_KEY = "sg-fire-calculator-state"
SHARE_PARAM = "s"


class PlanState(BaseModel):
    model_config = ConfigDict(extra="ignore")

    currentAge: int = Field(35, ge=0, le=120)
    currentSavings: float = Field(500_000, ge=0)
    monthlyContribution: float = Field(5_000, ge=0)
    yearsToRetirement: int = Field(10, ge=0)
    expectedReturn: float = 0.07
    inflationRate: float = 0.03
    withdrawalRate: float = 0.04
    selectedBudget: Literal["frugal", "moderate", "comfortable"] = "moderate"
    cpfOA: float = Field(100_000, ge=0)
    cpfSA: float = Field(80_000, ge=0)
    cpfMA: float = Field(40_000, ge=0)
    monthlySalary: float = Field(8_000, ge=0)
    includeCPF: bool = True

    @property
    def retirement_age(self) -> int:
        return self.currentAge + self.yearsToRetirement

    def portfolio_inputs(self) -> PortfolioInputs:
        return PortfolioInputs(
            currentSavings=self.currentSavings,
            monthlyContribution=self.monthlyContribution,
            yearsToRetirement=self.yearsToRetirement,
            expectedReturn=self.expectedReturn,
            inflationRate=self.inflationRate,
            withdrawalRate=self.withdrawalRate,
        )

    def cpf_balances(self) -> CPFBalances:
        return CPFBalances.from_accounts(self.cpfOA, self.cpfSA, self.cpfMA)


REQUIRED_FIELDS = tuple(PlanState.model_fields)


def encode_state(state: PlanState) -> str:
    """Base64 of the state's JSON, as carried in a share link."""
    return base64.b64encode(state.model_dump_json().encode("utf-8")).decode("ascii")


def decode_state(encoded: str) -> Optional[PlanState]:
    """Inverse of ``encode_state``; ``None`` unless every field is present and valid."""
    try:
        parsed = json.loads(base64.b64decode(encoded, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        logger.warning("ignoring undecodable shared state: %s", exc)
        return None

    if not isinstance(parsed, dict):
        logger.warning("ignoring shared state that is not an object")
        return None

    missing = [key for key in REQUIRED_FIELDS if key not in parsed]
    if missing:
        logger.warning("ignoring shared state missing %s", ", ".join(missing))
        return None

    try:
        return PlanState.model_validate(parsed)
    except ValidationError as exc:
        logger.warning("ignoring invalid shared state: %d errors", exc.error_count())
        return None


def share_query(state: PlanState) -> str:
    return urlencode({SHARE_PARAM: encode_state(state)})


def state_from_query(query: str) -> Optional[PlanState]:
    values = parse_qs(query.lstrip("?")).get(SHARE_PARAM)
    if not values:
        return None
    return decode_state(values[0])


class StateStore:
    """A one-key local store backed by a JSON file."""

    def __init__(self, path: Union[str, Path], key: str = STORAGE_KEY):
        self.path = Path(path)
        self.key = key

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else {}

    def load(self) -> PlanState:
        """Stored fields layered over the defaults; the defaults on any failure."""
        try:
            stored = self._read().get(self.key)
            if not isinstance(stored, dict):
                return PlanState()
            return PlanState.model_validate({**PlanState().model_dump(), **stored})
        except (OSError, ValueError) as exc:
            logger.warning("could not load saved plan from %s: %s", self.path, exc)
            return PlanState()

    def save(self, state: PlanState) -> bool:
        try:
            try:
                data = self._read()
            except ValueError:
                data = {}
            data[self.key] = state.model_dump()
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("could not save plan to %s: %s", self.path, exc)
            return False
        return True

    def reset(self) -> PlanState:
        state = PlanState()
        self.save(state)
        return state


def load_initial_state(query: Optional[str] = None, store: Optional[StateStore] = None) -> PlanState:
    """A shared link wins over the saved plan, which wins over the defaults."""
    if query:
        shared = state_from_query(query)
        if shared is not None:
            return shared
    if store is not None:
        return store.load()
    return PlanState()


__all__ = [
    "STORAGE_KEY",
    "PlanState",
    "encode_state",
    "decode_state",
    "share_query",
    "state_from_query",
    "StateStore",
    "load_initial_state",
]
