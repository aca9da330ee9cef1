"""Unit tests for the ten-year projection engine"""

import pytest
from dataclasses import replace
from future_letter.domain.models import (
    Goal,
    LetterInput,
    GOAL_GAP_ACHIEVED,
    GOAL_GAP_ALMOST,
    GOAL_GAP_FAR,
)
from future_letter.domain.projections import (
    KANTO_SPEND_SINGLE_MONTHLY,
    MULTI_SPENDING,
    SINGLE_SPENDING,
    classify_goal_gap,
    compute_invest_future,
    compute_life_quality_tier,
    compute_projections,
    estimate_spending_monthly,
)


def test_single_household_uses_single_reference():
    assert estimate_spending_monthly(1) == SINGLE_SPENDING
    assert estimate_spending_monthly(0) == SINGLE_SPENDING


def test_multi_household_spending_scales_with_size():
    """Power-law scaling: grows with size but less than linearly"""
    two = estimate_spending_monthly(2)
    three = estimate_spending_monthly(3)
    six = estimate_spending_monthly(6)

    assert SINGLE_SPENDING < two < three < six
    # 2.88 people is the reference size, so 3 people sits just above it
    assert MULTI_SPENDING < three < MULTI_SPENDING * 1.05
    assert six < two * 3


def test_invest_future_zero_rate_is_linear():
    assert compute_invest_future(100_000, 10_000, 10, 0.0) == 100_000 + 10_000 * 120


def test_invest_future_lump_sum_compounds_monthly():
    # 1.005 ** 120 = 1.8193967...
    value = compute_invest_future(1_000_000, 0, 10, 0.06)
    assert abs(value - 1_819_397) <= 1


def test_invest_future_nothing_in_nothing_out():
    assert compute_invest_future(0, 0, 10, 0.06) == 0


def test_projection_shape(sample_input: LetterInput):
    projections = compute_projections(sample_input)

    assert len(projections) == 1
    projection = projections[0]
    assert projection.years == 10
    assert projection.monthly_spending_est_10y == SINGLE_SPENDING
    # 500,000 gross per month at 75% / 85% take-home
    assert projection.monthly_surplus_est_low == 375_000 - SINGLE_SPENDING
    assert projection.monthly_surplus_est_high == 425_000 - SINGLE_SPENDING


def test_projection_savings_are_linear(sample_input: LetterInput):
    projection = compute_projections(sample_input)[0]
    assert projection.savings_future == 1_000_000 + 30_000 * 120


def test_projection_totals_are_consistent(sample_input: LetterInput):
    projection = compute_projections(sample_input)[0]

    assert projection.invest_min <= projection.invest_max
    assert projection.total_min == projection.savings_future + projection.invest_min
    assert projection.total_max == projection.savings_future + projection.invest_max
    assert projection.runway_months_min <= projection.runway_months_max


def test_projection_split_follows_stated_ratio(sample_input: LetterInput):
    """Uncapped contributions are split in the user's own save/invest ratio"""
    projection = compute_projections(sample_input)[0]

    assert projection.used_monthly_total_low == 50_000
    assert projection.used_monthly_total_high == 50_000
    assert projection.used_monthly_savings == 30_000
    assert projection.used_monthly_invest == 20_000
    assert projection.used_monthly_total == 50_000


def test_contributions_capped_by_surplus(strained_input: LetterInput):
    """Stated contributions never exceed what the income model leaves free"""
    projection = compute_projections(strained_input)[0]

    assert projection.monthly_surplus_est_low == 0
    assert projection.monthly_surplus_est_high == 0
    assert projection.used_monthly_total_low == 0
    assert projection.used_monthly_total_high == 0
    assert projection.goal_gap_label == GOAL_GAP_FAR


def test_invest_growth_uses_stated_monthly_amount(strained_input: LetterInput):
    """Growth is computed on the stated amount even when the surplus cap is zero"""
    projection = compute_projections(strained_input)[0]
    assert projection.invest_min > 0


def test_zero_income_never_goes_negative(sample_input: LetterInput):
    projection = compute_projections(replace(sample_input, annual_income_jpy=0))[0]

    assert projection.monthly_surplus_est_low == 0
    assert projection.monthly_surplus_est_high == 0
    assert projection.life_quality_tier == 1


def test_zero_contributions(sample_input: LetterInput):
    projection = compute_projections(
        replace(sample_input, monthly_savings_jpy=0, monthly_invest_jpy=0)
    )[0]

    assert projection.used_monthly_savings == 0
    assert projection.used_monthly_invest == 0
    assert projection.goal_gap_label == GOAL_GAP_FAR


def test_future_household_includes_kids(sample_input: LetterInput):
    projection = compute_projections(replace(sample_input, kids_future=2))[0]

    assert projection.monthly_spending_est_now == SINGLE_SPENDING
    assert projection.monthly_spending_est_future == estimate_spending_monthly(3)
    assert projection.monthly_spending_est_now < projection.monthly_spending_est_10y < projection.monthly_spending_est_future


@pytest.mark.parametrize(
    "residual,expected_tier",
    [
        (-1, 1),
        (0, 2),
        (19_999, 2),
        (20_000, 3),
        (59_999, 3),
        (60_000, 4),
        (119_999, 4),
        (120_000, 5),
    ],
)
def test_life_quality_tier_bands(residual: int, expected_tier: int):
    """Residual = monthly income - Kanto baseline - planned contributions"""
    letter_input = LetterInput(
        age=30,
        household_now=1,
        kids_future=0,
        annual_income_jpy=12 * (KANTO_SPEND_SINGLE_MONTHLY + residual),
        monthly_savings_jpy=0,
        current_savings_jpy=0,
        monthly_invest_jpy=0,
        current_invest_jpy=0,
        goal=Goal.FIRE,
    )
    assert compute_life_quality_tier(letter_input) == expected_tier


def test_life_quality_tier_counts_planned_contributions(sample_input: LetterInput):
    heavy_plan = replace(sample_input, monthly_savings_jpy=250_000, monthly_invest_jpy=100_000)
    assert compute_life_quality_tier(sample_input) == 5
    assert compute_life_quality_tier(heavy_plan) == 1


@pytest.mark.parametrize(
    "used_high,runway_max,expected",
    [
        (0, 100, GOAL_GAP_FAR),
        (10_000, 5, GOAL_GAP_FAR),
        (10_000, 6, GOAL_GAP_ALMOST),
        (10_000, 11, GOAL_GAP_ALMOST),
        (10_000, 12, GOAL_GAP_ACHIEVED),
    ],
)
def test_goal_gap_label(used_high: int, runway_max: int, expected: str):
    assert classify_goal_gap(used_high, runway_max) == expected


def test_projections_are_deterministic(sample_input: LetterInput):
    assert compute_projections(sample_input) == compute_projections(sample_input)
