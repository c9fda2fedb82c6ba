"""Interaction outcome generation

generate() is pure: the same (score, type, interaction id) always yields
the same narrative and deltas. Magnitudes and templates are picked from a
SHA-256 of the interaction id, never from a random source.
"""

import hashlib
import re
from typing import Dict, List, Tuple

from companion_bonds.core.attitude.scoring import clamp_dimension, net_impact
from companion_bonds.core.interaction.models import Band, Outcome

HIGH_BAND_FLOOR = 50.0  # score > 50
LOW_BAND_CEILING = 0.0  # score < 0

# ── Delta categories: dimension → (low, high) magnitude ──────
CATEGORIES: Dict[str, Dict[str, Tuple[float, float]]] = {
    "fun": {"joy": (5.0, 10.0), "attraction": (5.0, 10.0)},
    "help": {"gratitude": (8.0, 15.0), "trust": (8.0, 15.0)},
    "meaningful": {"empathy": (3.0, 8.0), "respect": (3.0, 8.0)},
    "argument": {"trust": (-15.0, -10.0), "anger": (10.0, 15.0)},
    "disappointment": {"respect": (-10.0, -5.0), "sorrow": (5.0, 10.0)},
    "betrayal": {
        "trust": (-20.0, -15.0),
        "suspicion": (15.0, 20.0),
        "disgust": (15.0, 20.0),
    },
}
POSITIVE_CATEGORIES = frozenset({"fun", "help", "meaningful"})

_WORD_RE = re.compile(r"[a-z]+")

# ── Interaction type → template family ───────────────────────
# keywords match word prefixes; first hit wins
FAMILY_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("betrayal", ("betray", "lie", "lied", "deceive", "cheat")),
    ("argument", ("argue", "argument", "fight", "conflict", "disagree")),
    ("disappointment", ("disappoint", "letdown", "cancel", "fail", "stood up")),
    ("help", ("help", "assist", "support", "favor")),
    ("work", ("work", "project", "meeting", "business", "study")),
    ("call", ("call", "phone", "chat", "video", "text")),
    ("meal", ("coffee", "lunch", "dinner", "breakfast", "brunch", "drinks", "meal", "meet")),
    ("event", ("party", "event", "gathering", "concert", "wedding", "show", "game")),
]

FAMILY_CATEGORY: Dict[str, str] = {
    "meal": "fun",
    "call": "meaningful",
    "help": "help",
    "event": "fun",
    "work": "meaningful",
    "argument": "argument",
    "disappointment": "disappointment",
    "betrayal": "betrayal",
    "generic": "fun",
}

# ── Narrative templates: family → band → variants ────────────
TEMPLATES: Dict[str, Dict[Band, List[str]]] = {
    "meal": {
        Band.HIGH: [
            "Had a wonderful time with {name}! We talked for hours and made plans to meet again soon.",
            "Sharing a meal with {name} was lovely. We laughed a lot and the time flew by.",
        ],
        Band.MEDIUM: [
            "Met with {name} as planned. The conversation was pleasant, with a few awkward pauses.",
            "Catching up with {name} was fine. Friendly enough, though {name} seemed a bit distracted.",
        ],
        Band.LOW: [
            "The meeting with {name} was tense. We struggled to find common ground and it ended early.",
            "Sitting across from {name} felt forced. Neither of us really wanted to be there.",
        ],
    },
    "call": {
        Band.HIGH: [
            "Had a great phone call with {name}. We caught up and the call ran long because we were enjoying it.",
            "Talking with {name} on the phone felt easy. We shared some laughs and a few real thoughts.",
        ],
        Band.MEDIUM: [
            "Spoke with {name} briefly. The call was polite and covered what it needed to.",
            "The call with {name} was short and a little formal, but nothing went wrong.",
        ],
        Band.LOW: [
            "The phone call with {name} was brief and uncomfortable. We barely got past the pleasantries.",
            "Calling {name} was a mistake. The silences said more than the words did.",
        ],
    },
    "help": {
        Band.HIGH: [
            "Helping {name} went really well. There were lots of thank-yous and an offer to return the favor anytime.",
            "It felt good to help {name}. Working through it together brought us closer.",
        ],
        Band.MEDIUM: [
            "Gave {name} a hand. There was some hesitation at first, but it worked out in the end.",
            "Helped {name} out. It went fine and the thanks seemed genuine.",
        ],
        Band.LOW: [
            "Offered to help {name}, and the help was accepted reluctantly. The tension never went away.",
            "Helping {name} felt thankless. Every suggestion was met with a sigh.",
        ],
    },
    "event": {
        Band.HIGH: [
            "The event with {name} was fantastic! We met interesting people and it was a night to remember.",
            "Went to the party with {name} and had a blast. Introductions all round and plenty of laughs.",
        ],
        Band.MEDIUM: [
            "Attended the event with {name}. It was decent, though we didn't talk as much as expected.",
            "The gathering with {name} was okay. Some nice moments, nothing memorable.",
        ],
        Band.LOW: [
            "The event with {name} was awkward. We barely spoke and I left early.",
            "Going to the party with {name} was uncomfortable. We kept drifting to opposite corners of the room.",
        ],
    },
    "work": {
        Band.HIGH: [
            "Working with {name} was a pleasure. We got a lot done and the ideas kept flowing.",
            "The project session with {name} was productive and genuinely enjoyable.",
        ],
        Band.MEDIUM: [
            "The work session with {name} was businesslike. We got through the agenda.",
            "Worked alongside {name} for a while. Efficient, if not especially warm.",
        ],
        Band.LOW: [
            "Working with {name} was a struggle. We disagreed on almost every point.",
            "The meeting with {name} dragged on. Little got done and both of us were frustrated.",
        ],
    },
    "argument": {
        Band.HIGH: [
            "Had a disagreement with {name}. It stung, but we talked it through before parting.",
            "Things got heated with {name}, though it felt like something we can get past.",
        ],
        Band.MEDIUM: [
            "Argued with {name}. Voices were raised and nothing really got settled.",
            "The argument with {name} left a sour taste. Neither of us backed down.",
        ],
        Band.LOW: [
            "The fight with {name} was ugly. Things were said that will be hard to take back.",
            "Clashed badly with {name}. It ended with a slammed door.",
        ],
    },
    "disappointment": {
        Band.HIGH: [
            "Felt let down by {name}. It was surprising, and it hurt more because we are close.",
            "Plans with {name} fell through. It was disappointing, even if the reasons were understandable.",
        ],
        Band.MEDIUM: [
            "Was disappointed by {name}. Not a disaster, but not what I hoped for either.",
            "Things with {name} didn't go as planned. A quiet letdown.",
        ],
        Band.LOW: [
            "Once again {name} didn't come through. I am starting to expect it.",
            "Another letdown from {name}. It is getting hard to keep giving chances.",
        ],
    },
    "betrayal": {
        Band.HIGH: [
            "Found out {name} lied to me. I never expected that from someone so close.",
            "Learning that {name} went behind my back was a shock. I don't know what to think anymore.",
        ],
        Band.MEDIUM: [
            "Discovered that {name} wasn't honest with me. Trust will be hard to rebuild.",
            "It turns out {name} betrayed my confidence. Something between us has changed.",
        ],
        Band.LOW: [
            "So {name} lied to me, again. Whatever trust was left is gone.",
            "It came out that {name} went behind my back. Not surprising, but still bitter.",
        ],
    },
    "generic": {
        Band.HIGH: [
            "The time with {name} went very well. We both enjoyed it and the relationship feels stronger.",
            "Spent time with {name} and it was great. Easy, warm and fun.",
        ],
        Band.MEDIUM: [
            "Completed the plans with {name}. It was fine, nothing memorable but no issues either.",
            "Saw {name} as planned. An ordinary, pleasant enough time.",
        ],
        Band.LOW: [
            "The time with {name} was difficult. Neither of us seemed happy with how it went.",
            "Meeting up with {name} was uncomfortable from start to finish.",
        ],
    },
}


def band_for(score: float) -> Band:
    """high > 50, medium 0..50, low < 0"""
    value = clamp_dimension(score)
    if value > HIGH_BAND_FLOOR:
        return Band.HIGH
    if value < LOW_BAND_CEILING:
        return Band.LOW
    return Band.MEDIUM


def _keyword_hit(keyword: str, words: List[str], joined: str) -> bool:
    if " " in keyword:
        return keyword in joined
    return any(word.startswith(keyword) for word in words)


def family_for(interaction_type: str) -> str:
    """Template family for a free-form interaction type."""
    words = _WORD_RE.findall((interaction_type or "").lower())
    joined = " ".join(words)
    for family, keywords in FAMILY_KEYWORDS:
        if any(_keyword_hit(keyword, words, joined) for keyword in keywords):
            return family
    return "generic"


def _unit_hash(*parts: str) -> float:
    """Stable value in [0, 1) from the given key parts."""
    digest = hashlib.sha256("|".join(parts).encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") / float(1 << 64)


def _magnitude(interaction_id: str, band: Band, dimension: str, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    value = low + _unit_hash(interaction_id, band.value, dimension) * (high - low)
    return round(value, 2)


def category_deltas(category: str, band: Band, interaction_id: str = "") -> Dict[str, float]:
    """Deltas for a category; positive categories flip sign in the low band."""
    flip = band == Band.LOW and category in POSITIVE_CATEGORIES
    deltas: Dict[str, float] = {}
    for dimension, bounds in CATEGORIES[category].items():
        value = _magnitude(interaction_id, band, dimension, bounds)
        deltas[dimension] = -value if flip else value
    return deltas


def generate(
    score: float,
    interaction_type: str,
    interaction_id: str = "",
    person_name: str = "them",
) -> Outcome:
    """Narrative and attitude deltas for one interaction."""
    band = band_for(score)
    family = family_for(interaction_type)
    category = FAMILY_CATEGORY[family]

    variants = TEMPLATES[family][band]
    index = int(_unit_hash(interaction_id, band.value, "template") * len(variants))
    narrative = variants[index].format(name=person_name)

    deltas = category_deltas(category, band, interaction_id)
    return Outcome(
        band=band,
        category=category,
        template_family=family,
        narrative=narrative,
        deltas=deltas,
        impact=net_impact(deltas),
    )
