"""Compare a portfolio's sustainable withdrawal against each country's cost of living."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from fire_engine.config import DEFAULT_CONFIG, EngineConfig
from fire_engine.core.accumulation import project_drawdown, years_of_runway
from fire_engine.data import load_country_catalog
from fire_engine.schemas.country import (
    AffordableBudget,
    Country,
    CountryProjection,
    CountryProjectionYear,
    CountryRunway,
    LifestyleTier,
)

logger = logging.getLogger(__name__)


def resolve_portfolio(portfolio_at_retirement: float, cpf_withdrawable: float, include_cpf: bool) -> float:
    """Cash portfolio, plus the withdrawable CPF balance when the caller opts in."""
    if include_cpf:
        return portfolio_at_retirement + cpf_withdrawable
    return portfolio_at_retirement


def annual_withdrawal_usd(
    portfolio_value: float,
    withdrawal_rate: float,
    config: Optional[EngineConfig] = None,
) -> float:
    config = config or DEFAULT_CONFIG
    return portfolio_value * withdrawal_rate * config.sgdToUsd


def calculate_affordable_budget(
    portfolio_value: float,
    withdrawal_rate: float,
    config: Optional[EngineConfig] = None,
) -> AffordableBudget:
    annual = annual_withdrawal_usd(portfolio_value, withdrawal_rate, config)
    return AffordableBudget(monthly=annual / 12, annual=annual)


def calculate_fire_number(
    monthly_expenses_usd: float,
    withdrawal_rate: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Portfolio (SGD) whose withdrawal covers ``monthly_expenses_usd``."""
    config = config or DEFAULT_CONFIG
    if not withdrawal_rate:
        return float("inf")
    return (monthly_expenses_usd * 12 / withdrawal_rate) / config.sgdToUsd


def runway_years(annual_withdrawal: float, annual_cost: float, cap: float) -> float:
    if annual_cost <= 0:
        return cap
    return min(max(0.0, annual_withdrawal / annual_cost), cap)


def country_runway(
    country: Country,
    tier: LifestyleTier,
    annual_withdrawal: float,
    config: Optional[EngineConfig] = None,
) -> CountryRunway:
    config = config or DEFAULT_CONFIG
    annual_cost = country.costOfLiving.total[tier] * 12
    years = runway_years(annual_withdrawal, annual_cost, config.runwayCapYears)
    return CountryRunway(
        countryId=country.id,
        name=country.name,
        annualCost=annual_cost,
        years=years,
        infinite=years >= config.runwayCapYears,
        canAfford=years >= config.affordableRunwayYears,
    )


def calculate_runway(
    portfolio_value: float,
    withdrawal_rate: float,
    tier: LifestyleTier = "moderate",
    countries: Optional[Iterable[Country]] = None,
    config: Optional[EngineConfig] = None,
) -> List[CountryRunway]:
    """
    Years of runway in every country at ``tier``, most affordable first.

    Runway is one year's withdrawal divided by one year's cost, clamped at
    the configured cap (shown as infinite at the cap).
    """
    config = config or DEFAULT_CONFIG
    if countries is None:
        countries = load_country_catalog().countries

    annual = annual_withdrawal_usd(portfolio_value, withdrawal_rate, config)
    rows = [country_runway(country, tier, annual, config) for country in countries]
    # stable sort keeps catalog order for ties
    return sorted(rows, key=lambda row: row.years, reverse=True)


def project_country_drawdown(
    country: Country,
    tier: LifestyleTier,
    portfolio_at_retirement: float,
    retirement_age: int,
    expected_return: float,
    inflation_rate: float,
    config: Optional[EngineConfig] = None,
) -> CountryProjection:
    """Spend the portfolio at the country's cost of living (converted to SGD)."""
    config = config or DEFAULT_CONFIG
    horizon = config.countryProjectionYears
    annual_spending = country.costOfLiving.total[tier] * 12 / config.sgdToUsd

    drawdown = project_drawdown(
        starting_portfolio=portfolio_at_retirement,
        annual_withdrawal=annual_spending,
        return_rate=expected_return - config.retirementReturnHaircut,
        inflation_rate=inflation_rate,
        years=horizon,
        start_age=retirement_age,
    )
    runway = years_of_runway(drawdown, horizon)
    logger.debug("%s (%s): %d years of runway", country.id, tier, runway)

    return CountryProjection(
        countryId=country.id,
        tier=tier,
        annualSpending=annual_spending,
        years=[
            CountryProjectionYear(
                age=row.age,
                year=row.year,
                portfolio=row.portfolioValue,
                withdrawal=row.withdrawal,
                returns=row.returns,
            )
            for row in drawdown
        ],
        yearsOfRunway=runway,
        depletionAge=retirement_age + runway,
        totalWithdrawals=sum(row.withdrawal for row in drawdown),
    )


__all__ = [
    "resolve_portfolio",
    "annual_withdrawal_usd",
    "calculate_affordable_budget",
    "calculate_fire_number",
    "runway_years",
    "country_runway",
    "calculate_runway",
    "project_country_drawdown",
]
