"""Interaction intent detection

Classifies a message as planning a future interaction, asking about one,
or neither. Pure; never raises.
"""

import re
from typing import Iterable, List, Optional, Tuple

from companion_bonds.core.interaction.models import Intent, IntentKind
from companion_bonds.core.person.detector import detect
from companion_bonds.core.person.tokens import Token, is_name_token

# inquiry is checked first: "did you meet Alice?" is a question, not a plan
INQUIRY_CUES = ("did you", "have you", "how did", "how was", "what happened", "tell me about")
PLANNING_CUES = (
    "plan to",
    "planning to",
    "going to",
    "gonna",
    "will meet",
    "i'll",
    "i will",
    "scheduled",
    "tomorrow i",
)

# (interaction type, trigger words), first hit wins
TYPE_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("coffee", ("coffee",)),
    ("lunch", ("lunch",)),
    ("dinner", ("dinner",)),
    ("breakfast", ("breakfast", "brunch")),
    ("drinks", ("drinks", "drink", "beer")),
    ("call", ("call", "phone", "ring")),
    ("help", ("help", "assist", "support")),
    ("event", ("party", "event", "gathering", "concert", "wedding")),
    ("work", ("work", "project", "meeting")),
    ("visit", ("visit",)),
    ("meet", ("meet", "see", "hang out", "catch up")),
]

_DESCRIPTIONS = {
    "coffee": "Have coffee with {name}",
    "lunch": "Have lunch with {name}",
    "dinner": "Have dinner with {name}",
    "breakfast": "Have breakfast with {name}",
    "drinks": "Get drinks with {name}",
    "call": "Phone call with {name}",
    "help": "Help {name} with something",
    "event": "Attend event with {name}",
    "work": "Work on project with {name}",
    "visit": "Visit {name}",
    "meet": "Meet with {name}",
}

DATE_PHRASES = (
    "tomorrow",
    "today",
    "tonight",
    "this weekend",
    "next week",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
DEFAULT_PLANNED_DATE = "soon"

# "tell me about Alice", "anything new with Bob"
_FALLBACK_NAME_RE = re.compile(r"\b(?:about|with|to|see|meet|call|visit)\s+([A-Z][A-Za-z'\-]+)")


def _contains(lowered: str, phrase: str) -> bool:
    return re.search(r"(?<![a-z'])" + re.escape(phrase) + r"(?![a-z])", lowered) is not None


def guess_interaction_type(text: str) -> Optional[str]:
    lowered = text.lower()
    for interaction_type, words in TYPE_KEYWORDS:
        if any(_contains(lowered, word) for word in words):
            return interaction_type
    return None


def extract_planned_date(text: str) -> str:
    lowered = text.lower()
    for phrase in DATE_PHRASES:
        if _contains(lowered, phrase):
            return phrase.capitalize() if phrase in DATE_PHRASES[5:] else phrase
    return DEFAULT_PLANNED_DATE


def describe(interaction_type: Optional[str], person: str) -> str:
    template = _DESCRIPTIONS.get(interaction_type or "", "Interact with {name}")
    return template.format(name=person)


def _name_position(text: str, name: str) -> Optional[int]:
    """Offset of the first capitalized, word-bounded occurrence of a name."""
    parts = name.split()
    if not parts:
        return None
    pattern = r"(?<![A-Za-z'])" + r"\s+".join(re.escape(p) for p in parts) + r"(?![A-Za-z])"
    for match in re.finditer(pattern, text, re.IGNORECASE):
        if all(word[0].isupper() for word in match.group(0).split()):
            return match.start()
    return None


def find_person(text: str, known_names: Iterable[str] = ()) -> Optional[str]:
    """The person a message is about: directory names first, then detection.

    Among directory names the earliest mention wins, the longer name on a tie.
    """
    known = list(known_names)
    hits = []
    for name in known:
        position = _name_position(text, name)
        if position is not None:
            hits.append((position, -len(name), name))
    if hits:
        return min(hits)[2]

    candidates = detect(text, known_names=known)
    if candidates:
        return candidates[0].name

    for match in _FALLBACK_NAME_RE.finditer(text):
        word = match.group(1)
        if is_name_token(Token(text=word, lower=word.lower())):
            return word
    return None


def detect_intent(text: str, known_names: Optional[Iterable[str]] = None) -> Intent:
    """Planning, inquiry or nothing, plus who and what it is about."""
    if not isinstance(text, str) or not text.strip():
        return Intent()
    lowered = " ".join(text.lower().replace("’", "'").split())

    if any(_contains(lowered, cue) for cue in INQUIRY_CUES):
        kind = IntentKind.INQUIRY
    elif any(_contains(lowered, cue) for cue in PLANNING_CUES):
        kind = IntentKind.PLANNING
    else:
        return Intent()

    person = find_person(text, known_names or ())
    interaction_type = guess_interaction_type(text)
    intent = Intent(kind=kind, person=person, interaction_type_guess=interaction_type)
    if kind == IntentKind.PLANNING:
        intent.planned_date = extract_planned_date(text)
        if person:
            intent.description = describe(interaction_type, person)
    return intent
