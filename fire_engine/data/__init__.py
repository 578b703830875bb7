"""Bundled, versioned reference data: historical market series and the country catalog."""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources
from typing import List, Optional

from pydantic import ValidationError

from fire_engine.schemas.country import Country, CountryCatalog
from fire_engine.schemas.historical import HistoricalDataset

logger = logging.getLogger(__name__)

HISTORICAL_RETURNS_FILE = "historical_returns.json"
COUNTRIES_FILE = "countries.json"


class DatasetError(ValueError):
    def __init__(self, name: str, errors: List[str]):
        super().__init__(f"{name}: " + "; ".join(errors))
        self.name = name
        self.errors = errors


def _read_asset(name: str) -> str:
    return resources.files(__name__).joinpath(name).read_text(encoding="utf-8")


def parse_historical_dataset(raw: str, name: str = HISTORICAL_RETURNS_FILE) -> HistoricalDataset:
    try:
        return HistoricalDataset.model_validate_json(raw)
    except ValidationError as exc:
        raise DatasetError(name, [error["msg"] for error in exc.errors()]) from exc


def parse_country_catalog(raw: str, name: str = COUNTRIES_FILE) -> CountryCatalog:
    try:
        catalog = CountryCatalog.model_validate_json(raw)
    except ValidationError as exc:
        raise DatasetError(name, [error["msg"] for error in exc.errors()]) from exc

    ids = [country.id for country in catalog.countries]
    duplicates = sorted({country_id for country_id in ids if ids.count(country_id) > 1})
    if duplicates:
        raise DatasetError(name, [f"duplicate country id {country_id}" for country_id in duplicates])
    return catalog


@lru_cache(maxsize=None)
def load_historical_dataset() -> HistoricalDataset:
    dataset = parse_historical_dataset(_read_asset(HISTORICAL_RETURNS_FILE))
    logger.debug(
        "loaded historical dataset %s (%d-%d)", dataset.version, dataset.startYear, dataset.endYear
    )
    return dataset


@lru_cache(maxsize=None)
def load_country_catalog() -> CountryCatalog:
    catalog = parse_country_catalog(_read_asset(COUNTRIES_FILE))
    logger.debug("loaded %d countries (catalog %s)", len(catalog.countries), catalog.version)
    return catalog


def get_country(country_id: str) -> Optional[Country]:
    return load_country_catalog().by_id().get(country_id)


__all__ = [
    "DatasetError",
    "parse_historical_dataset",
    "parse_country_catalog",
    "load_historical_dataset",
    "load_country_catalog",
    "get_country",
]
