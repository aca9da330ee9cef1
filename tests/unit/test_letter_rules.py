"""Unit tests for the letter rule checker and severity mapping"""

import pytest
from dataclasses import replace
from future_letter.domain.letter_rules import (
    CLOSING_LINE,
    LIMITS,
    OPENING_LINE,
    REQUIRED_HOOK_SENTENCE,
    REQUIRED_METHODS_SENTENCE,
    build_three_methods,
    compute_gap_severity,
    describe_letter_violations,
    has_digits_or_symbols,
    has_forbidden_letter_terms,
    has_prohibited_letter_phrases,
    has_seven_lines,
    has_single_sentence_line4,
    is_valid_letter,
    within_content_budget,
)
from future_letter.domain.models import LetterContent, LetterInput
from future_letter.domain.projections import compute_projections

VALID_LETTER = "\n".join(
    [
        OPENING_LINE,
        "ひとりの暮らしが整って、気持ちもゆるやかだね。",
        "FIREは動き出してて、手応えも出てきたかな。",
        "生活は安定してるし、進め方も見えてる感じ。",
        REQUIRED_HOOK_SENTENCE,
        REQUIRED_METHODS_SENTENCE,
        CLOSING_LINE,
    ]
)


def _with_line(index: int, text: str) -> str:
    lines = VALID_LETTER.split("\n")
    lines[index] = text
    return "\n".join(lines)


def test_valid_letter_has_no_violations():
    assert describe_letter_violations(VALID_LETTER) == []
    assert is_valid_letter(VALID_LETTER)


def test_methods_line_may_carry_fullwidth_digit():
    """The fixed methods line contains ３ and is exempt from the digit rule"""
    assert "３" in REQUIRED_METHODS_SENTENCE
    assert not has_digits_or_symbols(VALID_LETTER)


@pytest.mark.parametrize("text", ["毎月3万たまってるね。", "貯金が５倍になったね。", "利回り%が気になるね。"])
def test_digits_or_symbols_detected(text: str):
    letter = _with_line(1, text)
    assert has_digits_or_symbols(letter)
    assert "digits_or_symbols" in describe_letter_violations(letter)


@pytest.mark.parametrize("term", ["年収", "手取り", "家計調査", "レンジ", "Habitto"])
def test_forbidden_terms_detected(term: str):
    letter = _with_line(2, f"{term}のことが気になるかな。")
    assert has_forbidden_letter_terms(letter)
    assert "forbidden_terms" in describe_letter_violations(letter)


def test_prohibited_phrases_detected():
    letter = _with_line(2, "口座開設から始めたかな。")
    assert has_prohibited_letter_phrases(letter)
    assert "prohibited_phrases" in describe_letter_violations(letter)


def test_line4_must_be_one_sentence():
    two_sentences = _with_line(3, "生活は安定してる。進め方も見えてる。")
    no_terminal = _with_line(3, "生活は安定してる")

    assert not has_single_sentence_line4(two_sentences)
    assert not has_single_sentence_line4(no_terminal)
    assert "line4_not_single" in describe_letter_violations(two_sentences)


def test_moved_hook_line_is_flagged():
    lines = VALID_LETTER.split("\n")
    lines[4], lines[5] = lines[5], lines[4]
    letter = "\n".join(lines)

    issues = describe_letter_violations(letter)
    assert "line5_not_hook" in issues
    assert "line6_not_methods" in issues
    assert "missing_hook" not in issues


def test_missing_hook_is_flagged():
    letter = _with_line(4, "十年後の安心は、準備次第だと思う。")
    assert "missing_hook" in describe_letter_violations(letter)


def test_line_count_and_frame():
    six_lines = "\n".join(VALID_LETTER.split("\n")[:6])
    issues = describe_letter_violations(six_lines)

    assert not has_seven_lines(six_lines)
    assert "line_count" in issues
    assert "end_line" in issues


def test_wrong_opening_is_flagged():
    letter = _with_line(0, "未来のキミへ。")
    assert "start_line" in describe_letter_violations(letter)


def test_letter_budget():
    long_line = "とても長い一日が続いてるね" * 30 + "。"
    letter = _with_line(1, long_line)
    assert "letter_too_long" in describe_letter_violations(letter)


def test_content_budget():
    content = LetterContent(
        letter=VALID_LETTER,
        plan_save="余白を先に確保する",
        plan_grow="増やし方の癖を整える",
        plan_protect="安心が続く土台を持つ",
        cta="一度プロと話して、理想の十年後に向けた準備を整えよう。",
        disclaimer="※試算です。",
    )
    assert within_content_budget(content)

    content.plan_save = "あ" * (LIMITS["plan"] + 1)
    assert not within_content_budget(content)


def test_content_total_budget():
    content = LetterContent(
        letter=VALID_LETTER,
        plan_save="あ" * LIMITS["plan"],
        plan_grow="あ" * LIMITS["plan"],
        plan_protect="あ" * LIMITS["plan"],
        cta="あ" * LIMITS["cta"],
        disclaimer="あ" * LIMITS["disclaimer"],
    )
    # Every field is within its own budget, the sum is not
    assert not within_content_budget(content)


@pytest.mark.parametrize("tier,expected", [(1, 4), (2, 3), (3, 2), (4, 1), (5, 0)])
def test_severity_inverts_quality_tier(sample_input: LetterInput, tier: int, expected: int):
    projection = replace(compute_projections(sample_input)[0], life_quality_tier=tier)
    assert compute_gap_severity(sample_input, projection) == expected


def test_severity_without_projection_defaults_to_one(sample_input: LetterInput):
    assert compute_gap_severity(sample_input, None) == 1


def test_severity_legacy_heuristic(strained_input: LetterInput):
    """Projections without a tier fall back to the surplus/runway heuristic"""
    projection = replace(compute_projections(strained_input)[0], life_quality_tier=None)
    assert compute_gap_severity(strained_input, projection) == 4


def test_three_methods_titles_are_bracketed():
    methods = build_three_methods()

    assert [m.title for m in methods] == ["「貯める」", "「使う」", "「相談する」"]
    assert all(m.detail for m in methods)
