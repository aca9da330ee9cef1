"""Letter rule checker - structural and lexical constraints on a 7-line letter"""

import re
from typing import List, Optional
from future_letter.domain.models import (
    LetterContent,
    LetterInput,
    Projection,
    ThreeMethod,
    GOAL_GAP_ALMOST,
    GOAL_GAP_FAR,
)
from future_letter.utils.text_utils import count_chars

FORBIDDEN_LETTER_TERMS = (
    "レンジ",
    "比率",
    "%",
    "上限",
    "税引",
    "円",
    "万円",
    "月",
    "年収",
    "手取り",
    "家計調査",
    "消費支出",
    "二人以上",
    "Habitto",
)

PROHIBITED_LETTER_PHRASES = (
    "口座開設",
    "口座を作って",
    "口座作成",
    "今日の準備",
    "今日の準備にかかってる",
    "今日の準備にかかっている",
    "今日の準備にかかってた",
    "今日の準備にかかっていた",
)

OPENING_LINE = "十年前のキミへ。"
CLOSING_LINE = "十年後のキミより。"
REQUIRED_HOOK_SENTENCE = "十年後の安心は、あの日の準備にかかってたと思う。"
REQUIRED_METHODS_SENTENCE = (
    "理想の未来を創る３つの方法は、「貯める工夫」・「賢く使う」・「プロに相談する」だよ。"
)

LETTER_LINE_COUNT = 7
SENTENCE_END = "。"

# Character budgets (code points)
LIMITS = {
    "letter": 320,
    "plan": 60,
    "cta": 200,
    "disclaimer": 90,
    "total": 600,
}

_DIGITS_OR_SYMBOLS = re.compile(r"[0-9０-９%％円]")


def has_forbidden_letter_terms(text: str) -> bool:
    return any(term in text for term in FORBIDDEN_LETTER_TERMS)


def has_prohibited_letter_phrases(text: str) -> bool:
    return any(phrase in text for phrase in PROHIBITED_LETTER_PHRASES)


def has_required_hook_phrase(text: str) -> bool:
    return REQUIRED_HOOK_SENTENCE in text


def has_required_methods_line(text: str) -> bool:
    return REQUIRED_METHODS_SENTENCE in text


def has_seven_lines(text: str) -> bool:
    """Exactly seven non-empty lines"""
    lines = [line for line in text.split("\n") if line.strip()]
    return len(lines) == LETTER_LINE_COUNT


def _line(text: str, index: int) -> Optional[str]:
    lines = text.split("\n")
    if index >= len(lines):
        return None
    return lines[index].strip()


def has_single_sentence_line4(text: str) -> bool:
    """Line 4 holds exactly one terminal 。 and ends with it"""
    line = _line(text, 3)
    if not line:
        return False
    return line.count(SENTENCE_END) == 1 and line.endswith(SENTENCE_END)


def has_required_line5_hook(text: str) -> bool:
    return _line(text, 4) == REQUIRED_HOOK_SENTENCE


def has_required_line6_methods(text: str) -> bool:
    return _line(text, 5) == REQUIRED_METHODS_SENTENCE


def has_digits_or_symbols(text: str) -> bool:
    """Digits, percent or yen signs anywhere outside the fixed methods line"""
    return bool(_DIGITS_OR_SYMBOLS.search(text.replace(REQUIRED_METHODS_SENTENCE, "")))


def within_letter_budget(text: str) -> bool:
    return count_chars(text) <= LIMITS["letter"]


def within_content_budget(content: LetterContent) -> bool:
    """Per-field and combined character budgets for the rendered copy"""
    plans = (content.plan_save, content.plan_grow, content.plan_protect)
    if not within_letter_budget(content.letter):
        return False
    if any(count_chars(plan) > LIMITS["plan"] for plan in plans):
        return False
    if count_chars(content.cta) > LIMITS["cta"]:
        return False
    if count_chars(content.disclaimer) > LIMITS["disclaimer"]:
        return False
    total = sum(
        count_chars(field)
        for field in (content.letter, *plans, content.cta, content.disclaimer)
    )
    return total <= LIMITS["total"]


def describe_letter_violations(letter: str) -> List[str]:
    """Issue codes for every rule the letter breaks, empty when valid"""
    issues = []
    if has_digits_or_symbols(letter):
        issues.append("digits_or_symbols")
    if has_forbidden_letter_terms(letter):
        issues.append("forbidden_terms")
    if has_prohibited_letter_phrases(letter):
        issues.append("prohibited_phrases")
    if not has_required_hook_phrase(letter):
        issues.append("missing_hook")
    if not has_required_line5_hook(letter):
        issues.append("line5_not_hook")
    if not has_required_line6_methods(letter):
        issues.append("line6_not_methods")
    if not has_single_sentence_line4(letter):
        issues.append("line4_not_single")
    if not has_seven_lines(letter):
        issues.append("line_count")
    if not letter.startswith(OPENING_LINE):
        issues.append("start_line")
    if not letter.endswith(CLOSING_LINE):
        issues.append("end_line")
    if not within_letter_budget(letter):
        issues.append("letter_too_long")
    return issues


def is_valid_letter(letter: str) -> bool:
    return not describe_letter_violations(letter)


def compute_gap_severity(
    letter_input: LetterInput,
    projection: Optional[Projection] = None,
) -> int:
    """
    Map the household situation to a 0 (calm) .. 4 (strained) severity.

    The life-quality tier is inverted directly when available. Without a
    projection the severity defaults to 1.
    """
    if projection is None:
        return 1

    tier = projection.life_quality_tier
    if tier is not None:
        return max(0, min(4, 5 - tier))

    # Legacy heuristic for projections that carry no tier
    monthly_input_total = letter_input.monthly_savings_jpy + letter_input.monthly_invest_jpy
    if projection.monthly_surplus_est_high <= 0 or projection.runway_months_max < 3:
        return 4
    if projection.runway_months_max < 6 or (
        projection.goal_gap_label == GOAL_GAP_FAR
        and projection.used_monthly_total_high < monthly_input_total * 0.5
    ):
        return 3
    if projection.goal_gap_label == GOAL_GAP_FAR or projection.monthly_surplus_est_low <= 0:
        return 2
    if projection.goal_gap_label == GOAL_GAP_ALMOST:
        return 1
    return 0


_METHODS_RAW = (
    ("貯める", "高金利の預金"),
    ("使う", "デビット還元"),
    ("相談する", "無料FP相談"),
)


def _wrap_method_title(title: str) -> str:
    stripped = title.removeprefix("「").removesuffix("」")
    return f"「{stripped}」"


def build_three_methods() -> List[ThreeMethod]:
    return [ThreeMethod(title=_wrap_method_title(title), detail=detail) for title, detail in _METHODS_RAW]
