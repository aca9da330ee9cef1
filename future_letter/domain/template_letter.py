"""
Template letter engine - deterministic 7-line letter from input + projection.

Flow:
1. Classify situation (kids / pair / single) and severity (0-4)
2. Build a scenario key from cashflow, stability, life-load and quality tiers
3. Assemble line 2 / line 3 candidate pools from sentence_pools
4. Select lines by a stable hash seed with linear probing
5. Emit opening, line 2-4, fixed hook, fixed methods, closing

The same input and projection always produce the same letter.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple
from future_letter.domain.models import Goal, LetterContent, LetterInput, Projection
from future_letter.domain.letter_rules import (
    CLOSING_LINE,
    FORBIDDEN_LETTER_TERMS,
    OPENING_LINE,
    PROHIBITED_LETTER_PHRASES,
    REQUIRED_HOOK_SENTENCE,
    REQUIRED_METHODS_SENTENCE,
    compute_gap_severity,
)
from future_letter.domain.sentence_pools import (
    CALM,
    CAUTION,
    DEFAULT_GOAL_KEYWORD,
    DENYLIST_PATTERN,
    GOAL_CODE,
    GOAL_KEYWORDS,
    LINE2_POOLS,
    LINE2_SCENARIO_BONUS,
    LINE3_CATEGORY_POOLS,
    LINE3_GOAL_POOLS,
    LINE3_SCENARIO_BONUS,
    LINE4_BY_SEVERITY,
    OTHER_GOAL_CATEGORIES,
    OTHER_GOAL_DEFAULT,
    PLAN_BY_GOAL,
    STRAINED,
    STRAINED_WORDS,
    Sentence,
)

logger = logging.getLogger(__name__)

MAX_SEVERITY = 4
KEYWORD_MAX_CHARS = 18
LINE3_SEED_OFFSET = 3
LINE3_FALLBACK_OFFSET = 7

_KEYWORD_STRIP = re.compile(r"[0-9０-９%％円月]")


@dataclass(frozen=True)
class OtherGoalIntent:
    """Reading of a free-text goal: keyword, category and difficulty 1-3"""

    keyword: str
    category: str
    difficulty: int


# =============================================================================
# Hashing
# =============================================================================


def stable_hash(text: str) -> int:
    """
    Polynomial string hash (base 31) over code points, kept to unsigned 32 bits.

    Pure and platform independent. Different keys may collide; a collision
    only means two scenarios start probing from the same pool index.
    """
    value = 0
    for ch in text:
        value = (value * 31 + ord(ch)) & 0xFFFFFFFF
    return value


# =============================================================================
# Scenario classification
# =============================================================================


def pick_situation(letter_input: LetterInput) -> str:
    if letter_input.kids_future > 0:
        return "kids"
    if letter_input.household_now >= 2:
        return "pair"
    return "single"


def compute_cashflow_tier(projection: Optional[Projection]) -> str:
    if projection is None:
        return "MID"
    high = projection.monthly_surplus_est_high
    if high <= 0:
        return "LOW"
    if high <= 30_000:
        return "MID"
    return "HIGH"


def compute_stability_tier(letter_input: LetterInput, projection: Optional[Projection]) -> str:
    """Months of current savings + investments against blended spending"""
    if projection is None:
        return "MID"
    buffer = (letter_input.current_savings_jpy + letter_input.current_invest_jpy) / max(
        1, projection.monthly_spending_est_10y
    )
    if buffer < 3:
        return "LOW"
    if buffer < 6:
        return "MID"
    return "HIGH"


def compute_life_load_tier(letter_input: LetterInput) -> str:
    score = letter_input.kids_future * 2 + max(0, letter_input.household_now - 1)
    if score <= 1:
        return "LIGHT"
    if score <= 4:
        return "MID"
    return "HEAVY"


def build_scenario_key(letter_input: LetterInput, projection: Optional[Projection]) -> str:
    """cashflow-stability-load-Q<tier>, e.g. LOW-LOW-MID-Q1"""
    cash = compute_cashflow_tier(projection)
    stability = compute_stability_tier(letter_input, projection)
    load = compute_life_load_tier(letter_input)
    tier = projection.life_quality_tier if projection and projection.life_quality_tier else 0
    return f"{cash}-{stability}-{load}-Q{tier}"


def severity_band(severity: int) -> str:
    if severity <= 1:
        return CALM
    if severity == 2:
        return CAUTION
    return STRAINED


# =============================================================================
# Free-text goal
# =============================================================================


def sanitize_keyword(raw: str) -> str:
    """
    Strip numbers, money symbols and rule-checker vocabulary from a user keyword.

    Removal repeats until nothing changes, since dropping one term can join
    its neighbours into another (レン比率ジ -> レンジ).
    """
    cleaned = raw
    previous = None
    while cleaned != previous:
        previous = cleaned
        cleaned = _KEYWORD_STRIP.sub("", cleaned)
        for term in (*PROHIBITED_LETTER_PHRASES, *FORBIDDEN_LETTER_TERMS):
            cleaned = cleaned.replace(term, "")
        cleaned = cleaned.replace("\n", " ").replace("。", "")
    cleaned = cleaned.strip()
    if not cleaned:
        return DEFAULT_GOAL_KEYWORD
    return cleaned[:KEYWORD_MAX_CHARS]


def infer_other_goal_intent(goal_other: str) -> OtherGoalIntent:
    """Categories match on the raw text; only the keyword is sanitised"""
    keyword = sanitize_keyword(goal_other)
    for category, difficulty, pattern in OTHER_GOAL_CATEGORIES:
        if pattern.search(goal_other):
            return OtherGoalIntent(keyword=keyword, category=category, difficulty=difficulty)
    category, difficulty = OTHER_GOAL_DEFAULT
    return OtherGoalIntent(keyword=keyword, category=category, difficulty=difficulty)


def goal_keyword(letter_input: LetterInput) -> str:
    if letter_input.goal == Goal.OTHER:
        return f"「{infer_other_goal_intent(letter_input.goal_other or '').keyword}」"
    return GOAL_KEYWORDS.get(letter_input.goal, DEFAULT_GOAL_KEYWORD)


# =============================================================================
# Pools
# =============================================================================


def _scenario_bonus(table, scenario_key: str) -> List[Sentence]:
    bonus = []
    for prefix, sentences in table.items():
        if scenario_key.startswith(prefix):
            bonus.extend(sentences)
    return bonus


def line2_pool(situation: str, severity: int, scenario_key: str) -> List[Sentence]:
    pool = list(LINE2_POOLS[(situation, severity_band(severity))])
    pool.extend(_scenario_bonus(LINE2_SCENARIO_BONUS, scenario_key))
    return pool


def line3_pool(letter_input: LetterInput, severity: int, scenario_key: str) -> List[Sentence]:
    keyword = goal_keyword(letter_input)
    band = severity_band(severity)
    templates = LINE3_GOAL_POOLS[letter_input.goal][band]
    if letter_input.goal == Goal.OTHER:
        category = infer_other_goal_intent(letter_input.goal_other or "").category
        if category in LINE3_CATEGORY_POOLS:
            templates = LINE3_CATEGORY_POOLS[category][band]
    pool = [Sentence(text=s.text.replace("{goal}", keyword), ending=s.ending) for s in templates]
    pool.extend(_scenario_bonus(LINE3_SCENARIO_BONUS, scenario_key))
    return pool


# =============================================================================
# Selection
# =============================================================================


def pick_sentence(pool: List[Sentence], seed: int, avoid_ending: Optional[str] = None) -> Sentence:
    """Linear probe from seed % len(pool), wrapping, skipping avoid_ending"""
    if not pool:
        return Sentence(text="", ending="ne")
    for i in range(len(pool)):
        candidate = pool[(seed + i) % len(pool)]
        if avoid_ending and candidate.ending == avoid_ending:
            continue
        return candidate
    return pool[seed % len(pool)]


def _is_clean_pair(line2: Sentence, candidate: Sentence) -> bool:
    if candidate.ending == line2.ending:
        return False
    return not DENYLIST_PATTERN.search(f"{line2.text}{candidate.text}")


def _has_strained_word(text: str) -> bool:
    return any(word in text for word in STRAINED_WORDS)


def pick_line2_line3(
    line2_candidates: List[Sentence],
    line3_candidates: List[Sentence],
    seed: int,
    severity: int = 0,
) -> Tuple[Sentence, Sentence]:
    """
    Choose line 2, then the first line 3 that neither repeats its ending
    group nor forms a denylisted ending stack.

    At severity 3+ the pair must show strain: when neither line carries a
    strained word, line 3 is swapped for the next clean candidate that does.
    """
    line2 = pick_sentence(line2_candidates, seed)

    line3 = None
    for i in range(len(line3_candidates)):
        candidate = line3_candidates[(seed + LINE3_SEED_OFFSET + i) % len(line3_candidates)]
        if _is_clean_pair(line2, candidate):
            line3 = candidate
            break
    if line3 is None:
        line3 = pick_sentence(line3_candidates, seed + LINE3_FALLBACK_OFFSET, line2.ending)

    if severity >= 3 and not _has_strained_word(line2.text + line3.text):
        for i in range(len(line3_candidates)):
            candidate = line3_candidates[(seed + LINE3_SEED_OFFSET + i) % len(line3_candidates)]
            if _has_strained_word(candidate.text) and _is_clean_pair(line2, candidate):
                line3 = candidate
                break
        else:
            logger.warning("No strained line 3 candidate for severity %s", severity)

    return line2, line3


def build_line4(severity: int, variant: int) -> str:
    variants = LINE4_BY_SEVERITY[severity] if 0 <= severity < len(LINE4_BY_SEVERITY) else LINE4_BY_SEVERITY[1]
    return variants[variant % len(variants)]


def pick_template_variant(letter_input: LetterInput) -> int:
    """Style variant 0-2 from a weighted sum of the household profile"""
    seed = (
        letter_input.age * 31
        + letter_input.household_now * 7
        + letter_input.kids_future * 13
        + GOAL_CODE[letter_input.goal] * 17
    )
    return seed % 3


def resolve_severity(
    letter_input: LetterInput,
    projection: Optional[Projection],
    severity_override: Optional[int] = None,
) -> int:
    """Base severity, raised by the difficulty of a free-text goal"""
    if severity_override is not None:
        base = severity_override
    else:
        base = compute_gap_severity(letter_input, projection)
    if letter_input.goal == Goal.OTHER:
        intent = infer_other_goal_intent(letter_input.goal_other or "")
        return min(MAX_SEVERITY, base + (intent.difficulty - 1))
    return base


# =============================================================================
# Public entry points
# =============================================================================


def build_template_letter_variant(
    letter_input: LetterInput,
    variant: int,
    projection: Optional[Projection] = None,
    severity_override: Optional[int] = None,
) -> str:
    severity = resolve_severity(letter_input, projection, severity_override)
    scenario_key = build_scenario_key(letter_input, projection)
    situation = pick_situation(letter_input)

    seed = stable_hash(f"{scenario_key}:{letter_input.goal.value}:{variant}:{severity}")
    line2, line3 = pick_line2_line3(
        line2_pool(situation, severity, scenario_key),
        line3_pool(letter_input, severity, scenario_key),
        seed,
        severity,
    )

    return "\n".join(
        [
            OPENING_LINE,
            line2.text,
            line3.text,
            build_line4(severity, variant),
            REQUIRED_HOOK_SENTENCE,
            REQUIRED_METHODS_SENTENCE,
            CLOSING_LINE,
        ]
    )


def build_template_letter(
    letter_input: LetterInput,
    projection: Optional[Projection] = None,
    severity_override: Optional[int] = None,
) -> str:
    return build_template_letter_variant(
        letter_input,
        pick_template_variant(letter_input),
        projection,
        severity_override,
    )


def build_template_content(
    letter_input: LetterInput,
    projection: Optional[Projection] = None,
    severity_override: Optional[int] = None,
) -> LetterContent:
    """Letter plus the static plan and CTA copy for the goal"""
    plan = PLAN_BY_GOAL.get(letter_input.goal, PLAN_BY_GOAL[Goal.OTHER])
    return LetterContent(
        letter=build_template_letter(letter_input, projection, severity_override),
        plan_save=plan["save"],
        plan_grow=plan["grow"],
        plan_protect=plan["protect"],
        cta=plan["cta"],
    )
