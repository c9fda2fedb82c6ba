"""Contextual hints around a person mention

All extractors look at the clause the mention sits in. Relationship and
occupation come from fixed phrase shapes next to the name; traits from
adjectives attached to the name; valence from sentiment words anywhere in
the clause.
"""

from typing import AbstractSet, List, Optional, Sequence

from companion_bonds.core.attitude.models import Valence
from companion_bonds.core.person.lexicon import (
    CONCERN_WORDS,
    COPULAS,
    IMPORTANCE_CLOSE_RELATIONSHIPS,
    IMPORTANCE_EMOTION_WORDS,
    IMPORTANCE_MEDIUM_RELATIONSHIPS,
    INTENSIFIERS,
    KINSHIP,
    KINSHIP_MODIFIERS,
    NEGATIVE_WORDS,
    OCCUPATIONS,
    POSITIVE_WORDS,
    TITLES,
    TRAITS,
)
from companion_bonds.core.person.tokens import Token

# how far a keyword may sit from the name
WINDOW_BEFORE = 3
WINDOW_AFTER = 4


def _lower(tokens: Sequence[Token], index: int) -> str:
    if 0 <= index < len(tokens):
        return tokens[index].lower
    return ""


def _kinship_at(tokens: Sequence[Token], index: int) -> Optional[str]:
    word = _lower(tokens, index)
    if word not in KINSHIP:
        return None
    if word == "friend" and _lower(tokens, index - 1) == "best":
        return "best friend"
    return KINSHIP[word]


# ── Relationship ─────────────────────────────────────────────
def relationship_hint(tokens: Sequence[Token], start: int, end: int) -> Optional[str]:
    """Nearest relationship keyword in a recognized shape; ties go before."""
    found: List[tuple] = []  # (distance, side, relationship)

    # my friend Alice / my friend, Alice
    index = start - 1
    if _lower(tokens, index) == ",":
        index -= 1
    hint = _kinship_at(tokens, index)
    if hint:
        found.append((start - index, 0, hint))

    # my sister is Jane
    if _lower(tokens, start - 1) in ("is", "was"):
        hint = _kinship_at(tokens, start - 2)
        if hint:
            found.append((2, 0, hint))

    # Alice is my friend / Alice, my best friend
    n1, n2 = _lower(tokens, end), _lower(tokens, end + 1)
    if n1 in ("is", "was", ",") and n2 in ("my", "our"):
        offset = end + 2
        if _lower(tokens, offset) in KINSHIP_MODIFIERS:
            offset += 1
        if offset - end < WINDOW_AFTER:
            hint = _kinship_at(tokens, offset)
            if hint:
                found.append((offset - end + 1, 1, hint))

    if not found:
        return None
    found.sort()
    return found[0][2]


# ── Occupation ───────────────────────────────────────────────
def occupation_hint(
    tokens: Sequence[Token], start: int, end: int, title: Optional[str] = None
) -> Optional[str]:
    if title is not None and TITLES.get(title):
        return TITLES[title]

    previous = _lower(tokens, start - 1)
    if previous in OCCUPATIONS:
        return previous

    # Alice is a nurse / Alice works as a chef / Alice, a lawyer
    n1 = _lower(tokens, end)
    offset = None
    if n1 in ("is", "was", ","):
        offset = end + 1
    elif n1 in ("works", "worked") and _lower(tokens, end + 1) == "as":
        offset = end + 2
    if offset is None:
        return None
    if _lower(tokens, offset) in ("a", "an", "the", "my", "our"):
        offset += 1
    for index in range(offset, min(offset + 2, len(tokens))):
        word = _lower(tokens, index)
        if word in OCCUPATIONS:
            return word
    return None


# ── Traits ───────────────────────────────────────────────────
def trait_hints(tokens: Sequence[Token], start: int, end: int) -> List[str]:
    traits: List[str] = []

    # Alice is (so) kind and funny
    if _lower(tokens, end) in COPULAS:
        for index in range(end + 1, min(end + 1 + WINDOW_AFTER, len(tokens))):
            word = tokens[index].lower
            if word in TRAITS:
                traits.append(word)
            elif word not in INTENSIFIERS and word not in ("and", ","):
                break

    # my funny friend Alice / funny Alice
    index = start - 1
    if _lower(tokens, index) in KINSHIP:
        index -= 1
    stop = max(-1, start - 1 - WINDOW_BEFORE)
    while index > stop:
        word = tokens[index].lower
        if word in TRAITS:
            traits.insert(0, word)
        elif word not in INTENSIFIERS and word not in KINSHIP_MODIFIERS and word != ",":
            break
        index -= 1

    unique: List[str] = []
    for trait in traits:
        if trait not in unique:
            unique.append(trait)
    return unique


# ── Valence ──────────────────────────────────────────────────
def valence_hint(tokens: Sequence[Token]) -> Optional[Valence]:
    """Clause sentiment; negative outranks concerned outranks positive."""
    words = {t.lower for t in tokens}
    if "can't" in words and "stand" in words:
        return Valence.NEGATIVE
    if words & NEGATIVE_WORDS:
        return Valence.NEGATIVE
    if words & CONCERN_WORDS:
        return Valence.CONCERNED
    if words & POSITIVE_WORDS:
        return Valence.POSITIVE
    return None


# ── Importance ───────────────────────────────────────────────
def importance_score(
    clause_words: AbstractSet[str], relationship: Optional[str], mentions: int = 1
) -> float:
    """0..1 guess of how much this person matters to the user.

    Only the person's own relationship hint and the lowercased words of the
    clauses they are mentioned in count; other people in the message do not.
    """
    score = 0.5
    if relationship in IMPORTANCE_CLOSE_RELATIONSHIPS:
        score += 0.3
    elif relationship in IMPORTANCE_MEDIUM_RELATIONSHIPS:
        score += 0.2
    if clause_words & IMPORTANCE_EMOTION_WORDS:
        score += 0.1
    if mentions > 1:
        score += 0.1 * (mentions - 1)
    return round(min(score, 1.0), 2)
