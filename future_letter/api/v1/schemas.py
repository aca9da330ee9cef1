"""Pydantic schemas for API request/response validation"""

from typing import Any, Dict, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError, PydanticKnownError

from future_letter.domain.models import Goal, LetterInput

GOAL_OTHER_MAX_CHARS = 40

# Inclusive (min, max) per numeric field
FIELD_RANGES: Dict[str, Tuple[int, int]] = {
    "age": (18, 80),
    "household_now": (1, 6),
    "kids_future": (0, 4),
    "annual_income_jpy": (0, 50_000_000),
    "monthly_savings_jpy": (0, 2_000_000),
    "current_savings_jpy": (0, 200_000_000),
    "monthly_invest_jpy": (0, 2_000_000),
    "current_invest_jpy": (0, 200_000_000),
}


def _ranged(name: str, description: str):
    low, high = FIELD_RANGES[name]
    return Field(..., ge=low, le=high, description=description)


class LetterRequest(BaseModel):
    """Request body for POST /v1/letter"""

    age: int = _ranged("age", "Age in years")
    household_now: int = _ranged("household_now", "People in the household today")
    kids_future: int = _ranged("kids_future", "Children expected within ten years")
    annual_income_jpy: int = _ranged("annual_income_jpy", "Gross annual household income (JPY)")
    monthly_savings_jpy: int = _ranged("monthly_savings_jpy", "Planned monthly cash savings (JPY)")
    current_savings_jpy: int = _ranged("current_savings_jpy", "Cash savings today (JPY)")
    monthly_invest_jpy: int = _ranged("monthly_invest_jpy", "Planned monthly investment (JPY)")
    current_invest_jpy: int = _ranged("current_invest_jpy", "Investments today (JPY)")
    goal: Goal
    goal_other: Optional[Any] = Field(None, description="Free-text goal, required when goal is other")

    @field_validator(*FIELD_RANGES, mode="before")
    @classmethod
    def reject_booleans(cls, value: Any) -> Any:
        # bool is an int subclass; lax mode would read true/false as 1/0
        if isinstance(value, bool):
            raise PydanticKnownError("int_type")
        return value

    @model_validator(mode="after")
    def check_goal_other(self) -> "LetterRequest":
        if self.goal != Goal.OTHER:
            self.goal_other = None
            return self
        if self.goal_other is not None and not isinstance(self.goal_other, str):
            raise PydanticCustomError("invalid_goal_other", "goal_other must be a string.")
        trimmed = (self.goal_other or "").strip()
        if not trimmed:
            raise PydanticCustomError("invalid_goal_other", "goal_other is required when goal is other.")
        if len(trimmed) > GOAL_OTHER_MAX_CHARS:
            raise PydanticCustomError(
                "invalid_goal_other",
                "goal_other must be {limit} chars or less.",
                {"limit": GOAL_OTHER_MAX_CHARS},
            )
        self.goal_other = trimmed
        return self

    def to_domain(self) -> LetterInput:
        return LetterInput(**self.model_dump())


class ProjectionSchema(BaseModel):
    """Ten-year projection as returned to the client"""

    model_config = ConfigDict(from_attributes=True)

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


class ThreeMethodSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    detail: str


class LetterContentSchema(BaseModel):
    """Letter and surrounding copy"""

    model_config = ConfigDict(from_attributes=True)

    letter: str
    plan_save: str
    plan_grow: str
    plan_protect: str
    cta: str
    summary: str
    disclaimer: str
    evidence_summary: List[str] = []
    evidence_details: str = ""
    evidence: str = ""
    three_methods: List[ThreeMethodSchema] = []


class LetterResponse(BaseModel):
    """Response for POST /v1/letter"""

    ok: Literal[True] = True
    projections: List[ProjectionSchema]
    content: LetterContentSchema


class ErrorDetail(BaseModel):
    message: str
    code: str
    status: Optional[int] = None
    name: Optional[str] = None
    request_id: Optional[str] = None
    upstream_message: Optional[str] = None
    upstream_code: Optional[str] = None
    upstream_type: Optional[str] = None
    upstream_param: Optional[str] = None
    model: Optional[str] = None
    detail: Optional[str] = None
    hint: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error envelope; projections are included when they were computed"""

    ok: Literal[False] = False
    projections: Optional[List[ProjectionSchema]] = None
    error: ErrorDetail
