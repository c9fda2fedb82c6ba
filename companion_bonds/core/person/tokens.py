"""Clause tokenizer for person detection"""

import re
from dataclasses import dataclass
from typing import List

from companion_bonds.core.person.lexicon import (
    COMMON_WORDS,
    CONTRAST_WORDS,
    KINSHIP,
    NAME_ALLOWLIST,
    NON_NAME_SUFFIXES,
    RESERVED_WORDS,
    STOP_WORDS,
    TITLE_ABBREVIATIONS,
    TITLES,
    TRAITS,
)

_TOKEN_RE = re.compile(r"[A-Za-z][A-Za-z'\-]*|[.,;!?:()\"]")
_NAME_RE = re.compile(r"^[A-Z][a-z]*(?:[A-Z][a-z]+)?(?:['\-][A-Z]?[a-z]+)*$")
_CLAUSE_BREAKS = frozenset(".;!?:()\"")


@dataclass
class Token:
    text: str
    lower: str
    possessive: bool = False

    @property
    def bare(self) -> str:
        """Text without a trailing possessive."""
        if self.possessive:
            return self.text[:-2] if self.text.endswith("'s") else self.text[:-1]
        return self.text

    @property
    def is_word(self) -> bool:
        return self.text[0].isalpha()


def _make_token(text: str) -> Token:
    lower = text.lower()
    possessive = (
        (lower.endswith("'s") and len(lower) > 3 and lower not in STOP_WORDS)
        or (lower.endswith("s'") and len(lower) > 3)
    )
    return Token(text=text, lower=lower, possessive=possessive)


def split_clauses(text: str) -> List[List[Token]]:
    """Split text into clauses of tokens.

    Sentence punctuation and contrast words ("but", "although") end a
    clause. Commas stay inside the clause as tokens. A title abbreviation
    keeps its period ("Dr." is one token).
    """
    raw = _TOKEN_RE.findall(text.replace("’", "'"))
    clauses: List[List[Token]] = []
    current: List[Token] = []
    i = 0
    while i < len(raw):
        piece = raw[i]
        if (
            piece[0].isalpha()
            and piece.lower() in TITLE_ABBREVIATIONS
            and i + 1 < len(raw)
            and raw[i + 1] == "."
        ):
            current.append(_make_token(piece + "."))
            i += 2
            continue
        if piece in _CLAUSE_BREAKS or piece.lower() in CONTRAST_WORDS:
            if current:
                clauses.append(current)
            current = []
        else:
            current.append(_make_token(piece))
        i += 1
    if current:
        clauses.append(current)
    return clauses


def is_name_token(token: Token) -> bool:
    """Whether a token can be part of a person's name."""
    if not token.is_word:
        return False
    word = token.bare
    if len(word) < 2 or len(word) > 20 or not _NAME_RE.match(word):
        return False
    lower = word.lower()
    if (
        lower in STOP_WORDS
        or lower in COMMON_WORDS
        or lower in RESERVED_WORDS
        or lower in KINSHIP
        or lower in TITLES
        or lower in TRAITS
        or lower.rstrip(".") in TITLE_ABBREVIATIONS
    ):
        return False
    if lower in NAME_ALLOWLIST:
        return True
    for suffix in NON_NAME_SUFFIXES:
        min_len = 7 if suffix == "ly" else len(suffix) + 3
        if lower.endswith(suffix) and len(lower) >= min_len:
            return False
    return True
