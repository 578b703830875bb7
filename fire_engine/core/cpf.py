"""
CPF (Central Provident Fund) balance projection.

Three working accounts (OA, SA, MA) receive age-bracketed contributions and
tiered interest. When the member turns the transfer age the whole SA moves
into a Retirement Account (RA), which then compounds on its own.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from fire_engine.config import DEFAULT_CPF_RULES, CPFRules
from fire_engine.models import CPFBalances
from fire_engine.schemas.cpf import (
    CPFAtRetirement,
    CPFContribution,
    CPFInterest,
    CPFLifePayout,
    CPFProjection,
)

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_cpf_contribution(
    monthly_salary: float,
    age: int,
    rules: Optional[CPFRules] = None,
) -> CPFContribution:
    """Monthly contribution on a salary capped at the wage ceiling."""
    rules = rules or DEFAULT_CPF_RULES
    capped_salary = min(monthly_salary, rules.wageCeiling)
    bracket = rules.bracket_for_age(age)
    allocation = bracket.allocation

    total = capped_salary * bracket.total_rate
    return CPFContribution(
        OA=total * allocation["OA"],
        SA=total * allocation["SA"],
        MA=total * allocation["MA"],
        total=total,
    )


def split_bonus_allowance(
    balances: CPFBalances,
    limit: float,
    oa_cap: float,
) -> Tuple[float, float, float]:
    """
    How much of each account earns a bonus with a combined ``limit``.

    OA counts up to ``oa_cap``; the rest of the allowance is shared by SA and
    MA in proportion to their balances (evenly when both are empty).
    """
    oa_part = min(balances.OA, oa_cap)
    remaining = max(0.0, limit - oa_part)
    sa_ma = balances.SA + balances.MA
    sa_ma_part = min(sa_ma, remaining)

    sa_ratio = balances.SA / sa_ma if sa_ma > 0 else 0.5
    return oa_part, sa_ma_part * sa_ratio, sa_ma_part * (1 - sa_ratio)


def calculate_cpf_interest(
    balances: CPFBalances,
    age: int,
    rules: Optional[CPFRules] = None,
) -> CPFInterest:
    """One year of base interest plus the extra-interest tiers."""
    rules = rules or DEFAULT_CPF_RULES

    oa_interest = balances.OA * rules.oaRate
    sa_interest = balances.SA * rules.saRate
    ma_interest = balances.MA * rules.maRate

    oa_extra, sa_extra, ma_extra = split_bonus_allowance(balances, rules.extraLimit, rules.extraOACap)
    oa_interest += oa_extra * rules.extraRate
    sa_interest += sa_extra * rules.extraRate
    ma_interest += ma_extra * rules.extraRate

    # stacks on top of the first tier
    if age >= rules.extra55Age:
        oa_extra, sa_extra, ma_extra = split_bonus_allowance(
            balances, rules.extra55Limit, rules.extra55OACap
        )
        oa_interest += oa_extra * rules.extra55Rate
        sa_interest += sa_extra * rules.extra55Rate
        ma_interest += ma_extra * rules.extra55Rate

    return CPFInterest(
        OA=oa_interest,
        SA=sa_interest,
        MA=ma_interest,
        total=oa_interest + sa_interest + ma_interest,
    )


def project_cpf(
    balances: CPFBalances,
    monthly_salary: float,
    current_age: int,
    years_to_project: int,
    stop_contributions_at_age: int = 55,
    rules: Optional[CPFRules] = None,
) -> List[CPFProjection]:
    """
    Year-by-year CPF balances, years 0..years_to_project inclusive.

    Each row holds the balances at the start of the year; that year's
    contributions and interest are applied after it is recorded. The SA to
    RA transfer happens on the row where the age equals the transfer age
    (never on the starting row): interest for that year is worked out on the
    pre-transfer balances and the recorded SA is what moves, so the RA first
    shows up on the following row. The SA interest reported on the transfer
    row is therefore forfeited.

    From the transfer row on the SA takes no contributions or interest, and
    ``contributions`` only counts the OA and MA shares actually credited.
    """
    rules = rules or DEFAULT_CPF_RULES
    oa, sa, ma = float(balances.OA), float(balances.SA), float(balances.MA)
    ra = 0.0
    transferred = False

    projections: List[CPFProjection] = []
    for year in range(years_to_project + 1):
        age = current_age + year
        transferring = age == rules.transferAge and year > 0 and not transferred

        if age < stop_contributions_at_age:
            monthly = calculate_cpf_contribution(monthly_salary, age, rules)
            sa_share = 0.0 if transferred or transferring else monthly.SA * 12
            contributions = CPFContribution(
                OA=monthly.OA * 12,
                SA=sa_share,
                MA=monthly.MA * 12,
                total=(monthly.OA + monthly.MA) * 12 + sa_share,
            )
        else:
            contributions = CPFContribution()

        interest = calculate_cpf_interest(CPFBalances.from_accounts(oa, sa, ma), age, rules)
        ra_interest = ra * rules.raRate

        projections.append(
            CPFProjection(
                age=age,
                year=year,
                OA=oa,
                SA=sa,
                MA=ma,
                RA=ra,
                total=oa + sa + ma + ra,
                contributions=contributions.total,
                interest=interest.total + ra_interest,
            )
        )

        starting_sa = sa
        oa += contributions.OA + interest.OA
        ma += contributions.MA + interest.MA
        ra += ra_interest
        if not transferred:
            sa += contributions.SA + interest.SA

        if transferring:
            logger.debug("moving SA balance %.2f into RA at age %d", starting_sa, age)
            ra = starting_sa
            sa = 0.0
            transferred = True

    return projections


def get_effective_cpf_rate(
    balances: CPFBalances,
    age: int,
    rules: Optional[CPFRules] = None,
) -> float:
    """Blended interest rate across OA, SA and MA; the SA/MA base rate when empty."""
    rules = rules or DEFAULT_CPF_RULES
    total_balance = balances.OA + balances.SA + balances.MA
    if total_balance <= 0:
        return rules.saRate
    return calculate_cpf_interest(balances, age, rules).total / total_balance


def cpf_at_age(projections: List[CPFProjection], age: int) -> CPFAtRetirement:
    """Balances on the row for ``age``; all of it counts as withdrawable."""
    for row in projections:
        if row.age == age:
            return CPFAtRetirement(
                OA=row.OA,
                SA=row.SA,
                MA=row.MA,
                RA=row.RA,
                total=row.total,
                withdrawable=row.total,
            )
    return CPFAtRetirement()


def ra_balance_at_age(projections: List[CPFProjection], age: int = 65) -> float:
    for row in projections:
        if row.age == age:
            return row.RA
    return 0.0


def estimate_cpf_life_payout(ra_balance: float, rules: Optional[CPFRules] = None) -> CPFLifePayout:
    """Ballpark monthly CPF LIFE payouts from an RA balance (fixed multipliers)."""
    rules = rules or DEFAULT_CPF_RULES
    return CPFLifePayout(
        standard=_round_half_up(ra_balance * rules.payoutStandard),
        basic=_round_half_up(ra_balance * rules.payoutBasic),
        escalating=_round_half_up(ra_balance * rules.payoutEscalating),
    )


__all__ = [
    "calculate_cpf_contribution",
    "split_bonus_allowance",
    "calculate_cpf_interest",
    "project_cpf",
    "get_effective_cpf_rate",
    "cpf_at_age",
    "ra_balance_at_age",
    "estimate_cpf_life_payout",
]
