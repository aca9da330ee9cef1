"""
Sentence pools for the template letter.

Content only: the selection logic lives in template_letter.py. Pools are
keyed by situation (line 2) or goal (line 3) and by severity band. Goal
templates carry a {goal} placeholder filled with the goal keyword.

Every strained band of line 3 carries strained vocabulary in at least two
ending groups so a strained sentence can always follow any line 2.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Tuple
from future_letter.domain.models import Goal

# Ending groups
NE = "ne"
KANA = "kana"
KAMO = "kamo"
NANDA = "nanda"
TTE = "tte"
TO_OMOU = "toOmou"

# Severity bands
CALM = "calm"
CAUTION = "caution"
STRAINED = "strained"


@dataclass(frozen=True)
class Sentence:
    text: str
    ending: str


def _pool(*entries: Tuple[str, str]) -> List[Sentence]:
    return [Sentence(text=text, ending=ending) for text, ending in entries]


GOAL_CODE: Dict[Goal, int] = {
    Goal.ENTREPRENEUR: 1,
    Goal.FIRE: 2,
    Goal.MORTGAGE: 3,
    Goal.OVERSEAS: 4,
    Goal.OTHER: 5,
}

GOAL_KEYWORDS: Dict[Goal, str] = {
    Goal.ENTREPRENEUR: "起業",
    Goal.FIRE: "FIRE",
    Goal.MORTGAGE: "住宅ローン完済",
    Goal.OVERSEAS: "海外移住",
}

DEFAULT_GOAL_KEYWORD = "目標"

STRAINED_WORDS = ("ギリギリ", "余裕がない", "苦しい", "しんどい", "厳しい")

# Stacked endings that read badly when line 2 and line 3 run together
DENYLIST_PATTERN = re.compile(
    r"(ねかな|かなかも|かなって感じ|かもかな|感じるなんだ|んだって感じ|ねって感じ)"
)

# =============================================================================
# LINE 2 - living situation
# =============================================================================

LINE2_POOLS: Dict[Tuple[str, str], List[Sentence]] = {
    ("kids", CALM): _pool(
        ("子どもとの時間が増えて、家のリズムも穏やかだね。", NE),
        ("家の予定は動くけど、家族のペースは保ててるかな。", KANA),
        ("子ども中心でも、気持ちは少し落ち着いてきたかも。", KAMO),
    ),
    ("kids", CAUTION): _pool(
        ("子どもの予定に振り回されやすくて、家がバタつく日もあるね。", NE),
        ("家のペースは保ってるけど、余裕はまだ少なめかな。", KANA),
        ("子どものことで疲れが残りやすいかも。", KAMO),
    ),
    ("kids", STRAINED): _pool(
        ("子どものことで毎日が手一杯で、家の余裕がほとんどないね。", NE),
        ("家の中がバタバタで、落ち着く時間が取れないかな。", KANA),
        ("子どものことで気持ちも削られがちかも。", KAMO),
    ),
    ("pair", CALM): _pool(
        ("ふたりの暮らしが安定してて、日々のリズムは整ってるね。", NE),
        ("ふたりの生活は落ち着いてきて、気持ちも軽いかな。", KANA),
        ("ふたりの時間は保てて、暮らしも穏やかかも。", KAMO),
    ),
    ("pair", CAUTION): _pool(
        ("ふたりの暮らしは続いてるけど、余裕はまだ少なめね。", NE),
        ("ふたりの生活は回ってるけど、整えたい所があるかな。", KANA),
        ("ふたりの時間はあるけど、気持ちは詰まりやすいかも。", KAMO),
    ),
    ("pair", STRAINED): _pool(
        ("ふたりの暮らしは続いてるけど、余裕が削られてるね。", NE),
        ("ふたりの生活が回ってても、息が詰まりやすいかな。", KANA),
        ("ふたりの時間はあるけど、しんどい日が増えたかも。", KAMO),
    ),
    ("single", CALM): _pool(
        ("ひとりの暮らしが整って、気持ちもゆるやかだね。", NE),
        ("ひとりの生活は落ち着いてて、ペースも合ってるかな。", KANA),
        ("ひとりの時間は守れて、気持ちも軽くなったかも。", KAMO),
    ),
    ("single", CAUTION): _pool(
        ("ひとりの暮らしは続いてるけど、余裕が減りやすいね。", NE),
        ("ひとりの生活は回ってるけど、見直したい所があるかな。", KANA),
        ("ひとりの時間はあるけど、疲れが残りやすいかも。", KAMO),
    ),
    ("single", STRAINED): _pool(
        ("ひとりの暮らしが続いてても、余裕がほとんどないね。", NE),
        ("ひとりの生活は回ってるけど、気持ちが重くなるかな。", KANA),
        ("ひとりの時間はあるけど、しんどさが続くかも。", KAMO),
    ),
}

# Bonus entries keyed by scenario key prefix (cashflow-stability)
LINE2_SCENARIO_BONUS: Dict[str, List[Sentence]] = {
    "LOW-LOW": _pool(
        ("やりくりに追われて、落ち着かない日が増えたんだ。", NANDA),
        ("少しの変化でも気持ちが揺れやすいと思う。", TO_OMOU),
    ),
    "HIGH-HIGH": _pool(
        ("日々の流れは落ち着いていて、気持ちも整ってるね。", NE),
        ("暮らしは安定してるし、心の余裕も出てきたかな。", KANA),
    ),
}

# =============================================================================
# LINE 3 - goal progress
# =============================================================================

_CAUTION_GOAL = _pool(
    ("{goal}は意識できてるけど、揺れる日もあるね。", NE),
    ("{goal}の段取りは見えてきたけど、余裕は少なめかな。", KANA),
    ("{goal}に向けて動いてるけど、不安も残るかも。", KAMO),
)

_STRAINED_GOAL = _pool(
    ("{goal}はまだ遠くて、気持ちが焦る日もあるね。", NE),
    ("{goal}に向けて進みたいけど、足元がしんどいかな。", KANA),
    ("{goal}の準備は続けてるけど、今はギリギリで揃ってないかも。", KAMO),
)

LINE3_GOAL_POOLS: Dict[Goal, Dict[str, List[Sentence]]] = {
    Goal.ENTREPRENEUR: {
        CALM: _pool(
            ("{goal}の準備が進んで、形が見えてきたね。", NE),
            ("{goal}は動き出してて、手応えも出てきたかな。", KANA),
            ("{goal}の道が少しずつ固まってきたかも。", KAMO),
        ),
        CAUTION: _CAUTION_GOAL,
        STRAINED: _pool(
            ("{goal}はまだ遠くて、動きが止まりそうな日もあるね。", NE),
            ("{goal}に向けて進みたいけど、足元がしんどいかな。", KANA),
            ("{goal}の準備は続けてるけど、今はギリギリで揃ってないかも。", KAMO),
        ),
    },
    Goal.FIRE: {
        CALM: _pool(
            ("{goal}の準備が進んで、安心感が出てきたね。", NE),
            ("{goal}は動き出してて、手応えも出てきたかな。", KANA),
            ("{goal}の道が少しずつ固まってきたかも。", KAMO),
        ),
        CAUTION: _CAUTION_GOAL,
        STRAINED: _STRAINED_GOAL,
    },
    Goal.MORTGAGE: {
        CALM: _pool(
            ("{goal}が見えてきて、気持ちが落ち着くね。", NE),
            ("{goal}に向けた動きは続いてて、あと少しかな。", KANA),
            ("{goal}の道が少しずつ固まってきたかも。", KAMO),
        ),
        CAUTION: _CAUTION_GOAL,
        STRAINED: _STRAINED_GOAL,
    },
    Goal.OVERSEAS: {
        CALM: _pool(
            ("{goal}の準備が進んで、見通しがよくなったね。", NE),
            ("{goal}は動き出してて、あと少しかな。", KANA),
            ("{goal}の道が少しずつ固まってきたかも。", KAMO),
        ),
        CAUTION: _CAUTION_GOAL,
        STRAINED: _STRAINED_GOAL,
    },
    Goal.OTHER: {
        CALM: _pool(
            ("{goal}に向けて動きが出てきて、手応えもあるね。", NE),
            ("{goal}は動き出してて、あと少しかな。", KANA),
            ("{goal}の道が少しずつ固まってきたかも。", KAMO),
        ),
        CAUTION: _CAUTION_GOAL,
        STRAINED: _STRAINED_GOAL,
    },
}

# Free-text goals, keyed by inferred category; "other" uses LINE3_GOAL_POOLS
LINE3_CATEGORY_POOLS: Dict[str, Dict[str, List[Sentence]]] = {
    "travel": {
        CALM: _pool(
            ("{goal}の計画が形になって、行き先も見えてきたね。", NE),
            ("{goal}に向けた準備は順調で、楽しみが増えたかな。", KANA),
            ("{goal}の日が少しずつ近づいてきたかも。", KAMO),
        ),
        CAUTION: _pool(
            ("{goal}は頭にあるけど、準備は途中だね。", NE),
            ("{goal}の計画は立ててるけど、まだ手探りかな。", KANA),
            ("{goal}に出られる日は、もう少し先かも。", KAMO),
        ),
        STRAINED: _STRAINED_GOAL,
    },
    "career": {
        CALM: _pool(
            ("{goal}の準備が進んで、手応えも出てきたね。", NE),
            ("{goal}に向けた動きは順調で、自信もついたかな。", KANA),
            ("{goal}の形が少しずつ見えてきたかも。", KAMO),
        ),
        CAUTION: _pool(
            ("{goal}は意識できてるけど、踏み出せない日もあるね。", NE),
            ("{goal}の段取りは考えてるけど、迷いも残るかな。", KANA),
            ("{goal}に向けて動いてるけど、足場はまだ弱いかも。", KAMO),
        ),
        STRAINED: _STRAINED_GOAL,
    },
    "home": {
        CALM: _pool(
            ("{goal}が現実になってきて、暮らしの形も見えたね。", NE),
            ("{goal}に向けた準備は続いてて、あと少しかな。", KANA),
            ("{goal}の景色が少しずつ近づいてきたかも。", KAMO),
        ),
        CAUTION: _pool(
            ("{goal}は思い描けてるけど、準備は途中だね。", NE),
            ("{goal}の話は進めてるけど、決めきれないかな。", KANA),
            ("{goal}に向けて動いてるけど、不安も残るかも。", KAMO),
        ),
        STRAINED: _STRAINED_GOAL,
    },
    "health": {
        CALM: _pool(
            ("{goal}が習慣になって、体も軽くなったね。", NE),
            ("{goal}は続けられてて、調子もいいかな。", KANA),
            ("{goal}の成果が少しずつ出てきたかも。", KAMO),
        ),
        CAUTION: _pool(
            ("{goal}は続けてるけど、波がある日もあるね。", NE),
            ("{goal}の時間は取れてるけど、まだ安定しないかな。", KANA),
            ("{goal}は気にかけてるけど、後回しになりがちかも。", KAMO),
        ),
        STRAINED: _STRAINED_GOAL,
    },
    "skill": {
        CALM: _pool(
            ("{goal}が身について、できることが増えたね。", NE),
            ("{goal}は続いてて、手応えも出てきたかな。", KANA),
            ("{goal}の積み重ねが少しずつ活きてきたかも。", KAMO),
        ),
        CAUTION: _pool(
            ("{goal}は続けてるけど、時間が足りない日もあるね。", NE),
            ("{goal}の計画はあるけど、進みはゆっくりかな。", KANA),
            ("{goal}に向き合ってるけど、集中が続かないかも。", KAMO),
        ),
        STRAINED: _STRAINED_GOAL,
    },
    "dream": {
        CALM: _pool(
            ("{goal}はまだ遠いけど、道筋は見えてきたね。", NE),
            ("{goal}に向けた一歩は踏み出せてるかな。", KANA),
            ("{goal}も夢物語じゃなくなってきたかも。", KAMO),
        ),
        CAUTION: _pool(
            ("{goal}は大きくて、まだ輪郭をつかむ途中だね。", NE),
            ("{goal}に近づきたいけど、足元を固める段階かな。", KANA),
            ("{goal}は遠くて、気持ちだけが先に行ってるかも。", KAMO),
        ),
        STRAINED: _STRAINED_GOAL,
    },
}

LINE3_SCENARIO_BONUS: Dict[str, List[Sentence]] = {
    "LOW-LOW": _pool(
        ("目標には向かってるけど、余裕のなさが引っかかるんだ。", NANDA),
        ("目標への動きはあるけど、足元が不安だと思う。", TO_OMOU),
    ),
}

# =============================================================================
# LINE 4 - one-sentence summary, [severity][variant]
# =============================================================================

LINE4_BY_SEVERITY: List[List[str]] = [
    [
        "今の暮らしは落ち着いてて、次の選択も焦らず進められる感じ。",
        "生活は落ち着いてて、次の選択に迷いが少ないかな。",
        "生活は安定してるし、進め方も見えてる感じ。",
    ],
    [
        "生活は保ててるけど、少し整える余地はあるかも。",
        "生活は続いてるけど、見直せるところが残ってるね。",
        "生活は保ててるし、整えるともう少し楽になりそう。",
    ],
    [
        "生活は続いてるけど、負担がじわっと積もってる感じ。",
        "生活は回ってるけど、余裕のなさを感じるね。",
        "普段は回ってるけど、ふとしたときにしんどくなる日もあるんだ。",
    ],
    [
        "生活はギリギリで、選択肢が狭く感じるんだ。",
        "生活は厳しくて、調整が必要だと感じる。",
        "生活は苦しくて、立て直しを急ぎたい感じ。",
    ],
    [
        "生活はかなり厳しくて、今のままだと持たない気がするんだ。",
        "生活は苦しくて、早めの調整が必要だと思う。",
        "生活はしんどくて、今のままだと続かない気がする。",
    ],
]

# =============================================================================
# PLAN / CTA copy by goal
# =============================================================================

PLAN_BY_GOAL: Dict[Goal, Dict[str, str]] = {
    Goal.ENTREPRENEUR: {
        "save": "挑戦のための余白を先に確保する",
        "grow": "未来の選択肢を増やす習慣を整える",
        "protect": "不安が出ても戻れる土台を持つ",
        "cta": "一度プロと話して、挑戦に向けた準備を整えよう。",
    },
    Goal.FIRE: {
        "save": "穏やかな時間を守るために余白を作る",
        "grow": "増やし方の癖をやさしく整える",
        "protect": "安心が続く仕組みを持つ",
        "cta": "一度プロと話して、穏やかな未来への準備を整えよう。",
    },
    Goal.MORTGAGE: {
        "save": "住まいの安心に向けて余白を作る",
        "grow": "進め方のクセをやさしく整える",
        "protect": "安心が続く土台を持つ",
        "cta": "一度プロと話して、住まいの安心に向けた準備を整えよう。",
    },
    Goal.OVERSEAS: {
        "save": "移動のための余白を先に確保する",
        "grow": "選択肢が広がる整え方を持つ",
        "protect": "変化に強い土台を持つ",
        "cta": "一度プロと話して、移動の未来に向けた準備を整えよう。",
    },
    Goal.OTHER: {
        "save": "余白を先に確保する",
        "grow": "増やし方の癖を整える",
        "protect": "安心が続く土台を持つ",
        "cta": "一度プロと話して、理想の十年後に向けた準備を整えよう。",
    },
}

# =============================================================================
# Free-text goal categories: (category, difficulty, pattern)
# =============================================================================

OTHER_GOAL_CATEGORIES: List[Tuple[str, int, re.Pattern]] = [
    ("travel", 2, re.compile(r"(旅行|世界一周|世界旅行|海外|backpack)")),
    ("career", 2, re.compile(r"(起業|独立|副業|転職|フリーランス)")),
    ("home", 2, re.compile(r"(家|マイホーム|引っ越し|引越し)")),
    ("health", 1, re.compile(r"(筋トレ|ダイエット|健康)")),
    ("skill", 1, re.compile(r"(資格|勉強|語学|スキル|学び)")),
    ("dream", 3, re.compile(r"(宇宙|火星|ロケット|億|f1)", re.IGNORECASE)),
]
OTHER_GOAL_DEFAULT = ("other", 2)
