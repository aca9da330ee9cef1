"""Static copy around the letter and normalisation of letter text"""

from typing import Optional
from future_letter.domain.models import Goal, LetterContent, Projection
from future_letter.domain.letter_rules import (
    CLOSING_LINE,
    LETTER_LINE_COUNT,
    OPENING_LINE,
    REQUIRED_HOOK_SENTENCE,
    REQUIRED_METHODS_SENTENCE,
    SENTENCE_END,
    build_three_methods,
)
from future_letter.utils.text_utils import format_number

DISCLAIMER_TEXT = (
    "※支出例の他、ケガ・病気・住宅などの大きな支出、公的負担、諸費用、物価変動などは試算に反映していません。"
)

EVIDENCE_SUMMARY = [
    "出典: 家計調査2024(総務省)の月間支出ベース",
    "支出/余力/ランウェイは入力と平均値から簡易推定",
    "未来を整える三つの方法がある",
]

EVIDENCE_DETAILS = (
    "家計調査2024の二人以上世帯・月間消費支出 300,243円を基準に世帯人数で調整し、"
    "手取り比率(75-85%)から余力とランウェイを推定しています。"
    "三つの方法: 預金金利0.5%(税引後0.398%)・100万円超は0.2%(税引後0.159%)、"
    "デビット還元0.8%、FP相談(チャット/ビデオ)無料。"
)

GOAL_LABELS = {
    Goal.ENTREPRENEUR: "起業",
    Goal.FIRE: "FIRE",
    Goal.MORTGAGE: "住宅ローン完済",
    Goal.OVERSEAS: "海外移住",
    Goal.OTHER: "その他",
}

# Older phrasings an LLM tends to reintroduce
_STALE_PHRASES = (
    "今日の準備にかかってる",
    "今日の準備にかかっている",
    "今日の準備にかかってた",
    "今日の準備にかかっていた",
    "今日の準備",
    "十年後の安心は、あの日の準備にかかってた。",
    REQUIRED_HOOK_SENTENCE,
    REQUIRED_METHODS_SENTENCE,
)


def goal_label(goal: Goal, goal_other: Optional[str] = None) -> str:
    base = GOAL_LABELS.get(goal, str(goal))
    if goal == Goal.OTHER and goal_other:
        return f"{base}({goal_other})"
    return base


def build_consult_memo(goal: Goal, goal_other: Optional[str], projection: Projection) -> str:
    """Numeric memo to bring to a consultation; the letter itself stays number-free"""
    return " / ".join(
        [
            f"目標: {goal_label(goal, goal_other)} / ギャップ: {projection.goal_gap_label}",
            f"10年レンジ: {format_number(projection.total_min)}〜{format_number(projection.total_max)}円",
            f"支出推定: {format_number(projection.monthly_spending_est_10y)}円/月 "
            f"余力: {format_number(projection.monthly_surplus_est_low)}〜"
            f"{format_number(projection.monthly_surplus_est_high)}円/月",
            f"採用積立: {format_number(projection.used_monthly_total_low)}〜"
            f"{format_number(projection.used_monthly_total_high)}円/月 "
            f"ランウェイ: {format_number(projection.runway_months_min)}〜"
            f"{format_number(projection.runway_months_max)}ヶ月",
        ]
    )


def normalize_letter(text: str) -> str:
    """
    Force a letter into the fixed 7-line frame.

    - Blank lines dropped, padded or truncated to seven lines
    - Opening, hook, methods and closing lines overwritten with the fixed text
    - Stale hook phrasings removed from the free lines
    - Line 4 collapsed into a single sentence ending with 。
    """
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    lines = (lines + [""] * LETTER_LINE_COUNT)[:LETTER_LINE_COUNT]

    cleaned = []
    for line in lines:
        for phrase in _STALE_PHRASES:
            line = line.replace(phrase, "")
        cleaned.append(line.strip())
    lines = cleaned

    lines[0] = OPENING_LINE
    lines[4] = REQUIRED_HOOK_SENTENCE
    lines[5] = REQUIRED_METHODS_SENTENCE
    lines[6] = CLOSING_LINE

    line4 = lines[3]
    count = line4.count(SENTENCE_END)
    if count > 1:
        parts = [part for part in line4.split(SENTENCE_END) if part]
        lines[3] = "、".join(parts) + SENTENCE_END
    elif count == 0 and line4:
        lines[3] = line4 + SENTENCE_END

    return "\n".join(lines).strip()


def normalize_disclaimer(text: str) -> str:
    """Keep an LLM disclaimer only if it covers big expenses, tax and inflation"""
    if "大きな出費" in text and "税金" in text and "インフレ" in text:
        return text
    return DISCLAIMER_TEXT


def finalize_content(
    content: LetterContent,
    goal: Goal,
    goal_other: Optional[str],
    projection: Projection,
) -> LetterContent:
    """Attach disclaimer, consultation memo, evidence and the three methods"""
    content.disclaimer = normalize_disclaimer(content.disclaimer)
    content.summary = build_consult_memo(goal, goal_other, projection)
    content.evidence_summary = list(EVIDENCE_SUMMARY)
    content.evidence_details = EVIDENCE_DETAILS
    content.evidence = "\n".join(EVIDENCE_SUMMARY) + "\n" + EVIDENCE_DETAILS
    content.three_methods = build_three_methods()
    return content
