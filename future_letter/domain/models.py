"""Domain models - pure Python dataclasses representing letter entities"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Goal(str, Enum):
    """Ten-year goal chosen by the user"""

    ENTREPRENEUR = "entrepreneur"
    FIRE = "fire"
    MORTGAGE = "mortgage"
    OVERSEAS = "overseas"
    OTHER = "other"


GOAL_GAP_ACHIEVED = "達成できてる"
GOAL_GAP_ALMOST = "もう少し"
GOAL_GAP_FAR = "まだ遠い"


@dataclass(frozen=True)
class LetterInput:
    """Validated household and financial facts for one request"""

    age: int
    household_now: int
    kids_future: int
    annual_income_jpy: int
    monthly_savings_jpy: int
    current_savings_jpy: int
    monthly_invest_jpy: int
    current_invest_jpy: int
    goal: Goal
    goal_other: Optional[str] = None


@dataclass(frozen=True)
class Projection:
    """Ten-year asset and spending forecast"""

    years: int
    savings_future: int
    invest_min: int
    invest_max: int
    total_min: int
    total_max: int
    monthly_spending_est_now: int
    monthly_spending_est_future: int
    monthly_spending_est_10y: int
    monthly_surplus_est_low: int
    monthly_surplus_est_high: int
    used_monthly_savings: int
    used_monthly_invest: int
    used_monthly_total: int
    used_monthly_total_low: int
    used_monthly_total_high: int
    runway_months_min: int
    runway_months_max: int
    goal_gap_label: str
    life_quality_tier: Optional[int] = None


@dataclass(frozen=True)
class ThreeMethod:
    """One of the three fixed methods shown under the letter"""

    title: str
    detail: str


@dataclass
class LetterContent:
    """Letter plus the copy rendered around it"""

    letter: str
    plan_save: str
    plan_grow: str
    plan_protect: str
    cta: str
    summary: str = ""
    disclaimer: str = ""
    evidence_summary: List[str] = field(default_factory=list)
    evidence_details: str = ""
    evidence: str = ""
    three_methods: List[ThreeMethod] = field(default_factory=list)
