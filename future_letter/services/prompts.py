"""Prompt and JSON schema for the LLM polish of lines 2-3"""

from future_letter.domain.letter_rules import (
    CLOSING_LINE,
    FORBIDDEN_LETTER_TERMS,
    OPENING_LINE,
    REQUIRED_HOOK_SENTENCE,
    REQUIRED_METHODS_SENTENCE,
)

POLISH_SYSTEM_PROMPT = "You are a careful Japanese copywriter. Output JSON only."

POLISH_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {"letter": {"type": "string"}},
    "required": ["letter"],
}

AVOIDED_EXPRESSIONS = ("いるが", "だが", "欠ける", "追いつかない", "息の詰まる", "見えるけど")


def build_polish_prompt(base_letter: str, severity: int) -> str:
    """Ask for a softer rewrite of lines 2 and 3 only; every other line is fixed"""
    forbidden = "/".join((*FORBIDDEN_LETTER_TERMS, "今日の準備"))
    avoided = "/".join(AVOIDED_EXPRESSIONS)
    return (
        "以下の7行レターの2〜3行目だけ、やわらかく言い換えてください。"
        "1行目/4行目/5行目/6行目/7行目は一字一句変えないでください。\n\n"
        "【固定条件】\n"
        f"- 1行目は「{OPENING_LINE}」\n"
        "- 4行目は1文で、必ず「。」で終える\n"
        f"- 5行目は「{REQUIRED_HOOK_SENTENCE}」\n"
        f"- 6行目は「{REQUIRED_METHODS_SENTENCE}」\n"
        f"- 7行目は「{CLOSING_LINE}」\n"
        "- 2行目と3行目の語尾は重ねない（ね。/かな。/って感じ。/かも。/なんだ。/と思う。を使い分ける）\n"
        "- 語尾の重なり（ねかな/かなかも/ねって感じ/感じるなんだ/んだって感じ等）を作らない\n"
        "- 2〜3行目は「よ。」を使わない\n"
        "- 2行目は生活の様子、3行目は目標進捗（目標の語を必ず入れる）\n"
        f"- gapSeverity={severity}（0=穏やか,4=かなり厳しい）。指定より明るくしない\n"
        "- goalがotherの場合はgoal_otherの意味を汲み、難易度とgapSeverityに合わせて距離感を表現する\n"
        f"- 禁止語: {forbidden}\n"
        f"- 使わない表現: {avoided}\n"
        "- 数字や記号は入れない\n"
        "- 口語で、日常の言葉に寄せる（ちょっと/なんとなく/少し/って感じ などはOK）\n\n"
        "【元のレター】\n"
        f"{base_letter}\n\n"
        "JSONのみで出力。キーはletterのみ。"
    )
