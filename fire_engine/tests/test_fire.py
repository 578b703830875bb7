from __future__ import annotations

from math import inf, isclose

from fire_engine.config import DEFAULT_CONFIG
from fire_engine.core.accumulation import calculate_fire, project_drawdown
from fire_engine.models import PortfolioInputs


def test_fire_result_chains_both_phases(example_inputs):
    result = calculate_fire(example_inputs, current_age=35, monthly_expenses=2_000, retirement_years=40)

    assert isclose(result.fireNumber, 24_000 / 0.04)
    assert isclose(result.annualWithdrawal, result.portfolioAtRetirement * 0.04)
    assert isclose(result.monthlyWithdrawal, result.annualWithdrawal / 12)
    # 11 accumulation rows, then 40 drawdown rows after the shared retirement row
    assert len(result.projections) == 51
    assert [row.age for row in result.projections] == list(range(35, 86))
    assert result.projections[10].portfolioValue == result.portfolioAtRetirement


def test_drawdown_uses_haircut_return(example_inputs):
    result = calculate_fire(example_inputs, current_age=35, monthly_expenses=2_000, retirement_years=40)
    drawdown = project_drawdown(
        result.portfolioAtRetirement,
        result.annualWithdrawal,
        0.07 - DEFAULT_CONFIG.retirementReturnHaircut,
        0.03,
        years=40,
        start_age=45,
    )

    assert [row.portfolioValue for row in result.projections[10:]] == [
        row.portfolioValue for row in drawdown
    ]


def test_success_heuristic_when_funded(example_inputs):
    """The score is a rule of thumb: a flat 0.95 once the FIRE number is met."""
    result = calculate_fire(example_inputs, current_age=35, monthly_expenses=2_000)

    assert result.portfolioAtRetirement >= result.fireNumber
    assert result.successProbability == 0.95
    assert result.yearsOfRunway == 40


def test_success_heuristic_when_underfunded():
    inputs = PortfolioInputs(
        currentSavings=100_000,
        monthlyContribution=0,
        yearsToRetirement=0,
        expectedReturn=0.07,
        inflationRate=0.03,
        withdrawalRate=0.04,
    )
    result = calculate_fire(inputs, current_age=60, monthly_expenses=2_000, retirement_years=30)

    assert isclose(result.successProbability, 100_000 / 600_000 * 0.8)
    assert result.successProbability < 0.99


def test_runway_counts_years_until_depletion():
    inputs = PortfolioInputs(
        currentSavings=100_000,
        monthlyContribution=0,
        yearsToRetirement=0,
        expectedReturn=0.01,
        inflationRate=0.0,
        withdrawalRate=0.25,
    )
    result = calculate_fire(inputs, current_age=60, monthly_expenses=1_000, retirement_years=10)

    # no growth after the haircut: four 25k withdrawals empty it, year 5 is the first zero row
    assert result.yearsOfRunway == 5
    assert result.projections[-1].portfolioValue == 0


def test_zero_withdrawal_rate_is_total():
    inputs = PortfolioInputs(
        currentSavings=100_000,
        monthlyContribution=1_000,
        yearsToRetirement=5,
        expectedReturn=0.05,
        inflationRate=0.02,
        withdrawalRate=0.0,
    )
    result = calculate_fire(inputs, current_age=40, monthly_expenses=3_000, retirement_years=5)

    assert result.fireNumber == inf
    assert result.successProbability == 0.0
    assert result.annualWithdrawal == 0.0
