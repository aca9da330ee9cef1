"""Projection engine - ten-year spending, surplus and asset forecast"""

import math
from typing import List
from future_letter.domain.models import (
    LetterInput,
    Projection,
    GOAL_GAP_ACHIEVED,
    GOAL_GAP_ALMOST,
    GOAL_GAP_FAR,
)

YEARS = 10
INVEST_RATES = (0.02, 0.06)

# Statistics Bureau FIES 2024 monthly consumption averages
SINGLE_SPENDING = 169_547
MULTI_SPENDING = 300_243
MULTI_SIZE = 2.88
SCALE_EXPONENT = 0.85

# Kanto regional baseline used for the life-quality tier
KANTO_SPEND_SINGLE_MONTHLY = 197_900
KANTO_SPEND_MULTI_MONTHLY = 349_900

TAKEHOME_LOW_RATIO = 0.75
TAKEHOME_HIGH_RATIO = 0.85


def _round(value: float) -> int:
    """Round half up, matching the yen rounding used across the forecast"""
    return math.floor(value + 0.5)


def estimate_spending_monthly(household_size: int) -> int:
    """
    Estimate monthly household spending in yen.

    A single-person household uses the single reference directly. Larger
    households scale the multi-person reference with a 0.85 power law to
    model economies of scale in shared living costs.
    """
    if household_size <= 1:
        return SINGLE_SPENDING
    scaled = MULTI_SPENDING * (household_size / MULTI_SIZE) ** SCALE_EXPONENT
    return _round(scaled)


def compute_invest_future(
    current_invest: int,
    monthly_invest: int,
    years: int,
    annual_rate: float,
) -> int:
    """Future value of a lump sum plus monthly annuity, compounded monthly"""
    n = years * 12
    rm = annual_rate / 12
    if rm == 0:
        return _round(current_invest + monthly_invest * n)
    growth = (1 + rm) ** n
    annuity = (growth - 1) / rm
    return _round(current_invest * growth + monthly_invest * annuity)


def compute_life_quality_tier(letter_input: LetterInput) -> int:
    """
    Classify residual monthly cash flow into five tiers.

    Residual = monthly income - fixed Kanto baseline - planned contribution.

    Bands:
    - < 0:        tier 1 (deficit)
    - < 20,000:   tier 2
    - < 60,000:   tier 3
    - < 120,000:  tier 4
    - otherwise:  tier 5 (comfortable)
    """
    monthly_income = letter_input.annual_income_jpy / 12
    baseline = (
        KANTO_SPEND_SINGLE_MONTHLY
        if letter_input.household_now == 1
        else KANTO_SPEND_MULTI_MONTHLY
    )
    planned = letter_input.monthly_savings_jpy + letter_input.monthly_invest_jpy
    cashflow_after_plan = monthly_income - baseline - planned

    if cashflow_after_plan < 0:
        return 1
    elif cashflow_after_plan < 20_000:
        return 2
    elif cashflow_after_plan < 60_000:
        return 3
    elif cashflow_after_plan < 120_000:
        return 4
    else:
        return 5


def classify_goal_gap(used_monthly_total_high: int, runway_months_max: int) -> str:
    """Coarse three-bucket heuristic on the optimistic runway"""
    if used_monthly_total_high == 0 or runway_months_max < 6:
        return GOAL_GAP_FAR
    elif runway_months_max < 12:
        return GOAL_GAP_ALMOST
    else:
        return GOAL_GAP_ACHIEVED


def compute_projections(letter_input: LetterInput) -> List[Projection]:
    """
    Main entry point: build the ten-year forecast for one household.

    Requirements:
    - Spending estimated for the current and future household, blended by mean
    - Surplus from a 75-85% take-home band, never negative
    - Stated contributions capped at the surplus of each band
    - Savings accumulate linearly (cash, zero yield)
    - Investments compound monthly at 2% and 6% using the stated monthly amount

    Returns a single-element list; the horizon is fixed at ten years.
    """
    household_now = letter_input.household_now
    household_future = household_now + letter_input.kids_future
    spending_now = estimate_spending_monthly(household_now)
    spending_future = estimate_spending_monthly(household_future)
    spending_10y = _round((spending_now + spending_future) / 2)

    # Take-home band and free cash per month
    monthly_gross = letter_input.annual_income_jpy / 12
    surplus_low = max(0, _round(monthly_gross * TAKEHOME_LOW_RATIO - spending_10y))
    surplus_high = max(0, _round(monthly_gross * TAKEHOME_HIGH_RATIO - spending_10y))

    # Contributions cannot exceed what the income model leaves free
    user_monthly_total = letter_input.monthly_savings_jpy + letter_input.monthly_invest_jpy
    used_total_low = min(user_monthly_total, surplus_low)
    used_total_high = min(user_monthly_total, surplus_high)
    if user_monthly_total > 0:
        save_ratio = letter_input.monthly_savings_jpy / user_monthly_total
        invest_ratio = letter_input.monthly_invest_jpy / user_monthly_total
    else:
        save_ratio = invest_ratio = 0.0
    used_savings = _round(used_total_low * save_ratio)
    used_invest = _round(used_total_low * invest_ratio)

    savings_future = letter_input.current_savings_jpy + letter_input.monthly_savings_jpy * 12 * YEARS
    invest_values = [
        compute_invest_future(
            letter_input.current_invest_jpy,
            letter_input.monthly_invest_jpy,
            YEARS,
            rate,
        )
        for rate in INVEST_RATES
    ]
    invest_min = min(invest_values)
    invest_max = max(invest_values)

    if spending_10y > 0:
        runway_min = _round((savings_future + invest_min) / spending_10y)
        runway_max = _round((savings_future + invest_max) / spending_10y)
    else:
        runway_min = runway_max = 0

    return [
        Projection(
            years=YEARS,
            savings_future=savings_future,
            invest_min=invest_min,
            invest_max=invest_max,
            total_min=savings_future + invest_min,
            total_max=savings_future + invest_max,
            monthly_spending_est_now=spending_now,
            monthly_spending_est_future=spending_future,
            monthly_spending_est_10y=spending_10y,
            monthly_surplus_est_low=surplus_low,
            monthly_surplus_est_high=surplus_high,
            used_monthly_savings=used_savings,
            used_monthly_invest=used_invest,
            used_monthly_total=used_savings + used_invest,
            used_monthly_total_low=used_total_low,
            used_monthly_total_high=used_total_high,
            runway_months_min=runway_min,
            runway_months_max=runway_max,
            goal_gap_label=classify_goal_gap(used_total_high, runway_max),
            life_quality_tier=compute_life_quality_tier(letter_input),
        )
    ]
