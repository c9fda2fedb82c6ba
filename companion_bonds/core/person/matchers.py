"""Person matcher strategies

Each matcher scans tokenized clauses and yields Mentions: a span of name
tokens plus the cue that justified it. The detector runs them in order and
keeps the first mention for any overlapping span.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from companion_bonds.core.person.lexicon import (
    INTERACTION_VERBS_AFTER,
    INTERACTION_VERBS_BEFORE,
    KINSHIP,
    KINSHIP_MODIFIERS,
    NON_PERSON_SUBJECTS,
    OCCUPATIONS,
    POSSESSED_NOUNS,
    PREPOSITION_VERBS,
    TITLES,
    WEAK_AFTER_VERBS,
)
from companion_bonds.core.person.models import normalize_name
from companion_bonds.core.person.tokens import Token, is_name_token

MAX_NAME_TOKENS = 3

# cue labels
CUE_TITLE = "title"
CUE_RELATIONSHIP = "relationship"
CUE_INTRODUCTION = "introduction"
CUE_INTERACTION = "interaction"
CUE_POSSESSIVE = "possessive"
CUE_KNOWN = "known_name"


@dataclass
class Mention:
    clause: int
    start: int
    end: int  # exclusive
    name: str
    cue: str
    title: Optional[str] = None

    def overlaps(self, other: "Mention") -> bool:
        return (
            self.clause == other.clause
            and self.start < other.end
            and other.start < self.end
        )


def _lower(tokens: Sequence[Token], index: int) -> str:
    if 0 <= index < len(tokens):
        return tokens[index].lower
    return ""


def _span_name(tokens: Sequence[Token], start: int, end: int) -> str:
    return " ".join(tokens[i].bare for i in range(start, end))


def _is_kinship_at(tokens: Sequence[Token], index: int) -> bool:
    return _lower(tokens, index) in KINSHIP


def name_runs(tokens: Sequence[Token]) -> Iterable[Tuple[int, int]]:
    """(start, end) spans of consecutive name-like tokens."""
    i = 0
    while i < len(tokens):
        if not is_name_token(tokens[i]):
            i += 1
            continue
        start = i
        while (
            i < len(tokens)
            and i - start < MAX_NAME_TOKENS
            and is_name_token(tokens[i])
        ):
            i += 1
            if tokens[i - 1].possessive:
                break
        yield start, i


# ── Title matcher ────────────────────────────────────────────
class TitleMatcher:
    """"Dr. Smith", "Coach Taylor": title plus one or two capitalized tokens."""

    name = "title"

    def match(self, clauses: Sequence[Sequence[Token]]) -> List[Mention]:
        mentions: List[Mention] = []
        for ci, tokens in enumerate(clauses):
            for i, token in enumerate(tokens[:-1]):
                if token.lower not in TITLES or not token.text[0].isupper():
                    continue
                end = i + 1
                while end < len(tokens) and end - (i + 1) < 2 and is_name_token(tokens[end]):
                    end += 1
                    if tokens[end - 1].possessive:
                        break
                if end == i + 1:
                    continue
                mentions.append(
                    Mention(
                        clause=ci,
                        start=i + 1,
                        end=end,
                        name=_span_name(tokens, i + 1, end),
                        cue=CUE_TITLE,
                        title=token.lower,
                    )
                )
        return mentions


# ── Cue matcher ──────────────────────────────────────────────
class CueMatcher:
    """Capitalized names backed by a positional cue."""

    name = "cue"

    def match(self, clauses: Sequence[Sequence[Token]]) -> List[Mention]:
        mentions: List[Mention] = []
        for ci, tokens in enumerate(clauses):
            for start, end in name_runs(tokens):
                cue = self.cue_before(tokens, start) or self.cue_after(tokens, start, end)
                if cue is None:
                    continue
                mentions.append(
                    Mention(
                        clause=ci,
                        start=start,
                        end=end,
                        name=_span_name(tokens, start, end),
                        cue=cue,
                    )
                )
        return mentions

    @staticmethod
    def cue_before(tokens: Sequence[Token], start: int) -> Optional[str]:
        p1 = _lower(tokens, start - 1)
        p2 = _lower(tokens, start - 2)
        p3 = _lower(tokens, start - 3)

        # my friend Alice / my friend, Alice
        if p1 in KINSHIP or (p1 == "," and p2 in KINSHIP):
            return CUE_RELATIONSHIP
        # my sister is Jane
        if p1 in ("is", "was") and p2 in KINSHIP and (
            p3 in ("my", "our") or p3 in KINSHIP_MODIFIERS
        ):
            return CUE_INTRODUCTION
        if p1 in INTERACTION_VERBS_BEFORE:
            return CUE_INTERACTION
        # talked to Alice / heard from Bob
        if p1 in PREPOSITION_VERBS and p2 in PREPOSITION_VERBS[p1]:
            return CUE_INTERACTION
        return None

    @staticmethod
    def cue_after(tokens: Sequence[Token], start: int, end: int) -> Optional[str]:
        n1 = _lower(tokens, end)
        n2 = _lower(tokens, end + 1)

        if tokens[end - 1].possessive:
            return CUE_POSSESSIVE if n1 in POSSESSED_NOUNS else None
        if n1 in INTERACTION_VERBS_AFTER:
            # "Summer came early", "Mail arrived"
            if (
                n1 in WEAK_AFTER_VERBS
                and end - start == 1
                and tokens[start].bare.lower() in NON_PERSON_SUBJECTS
            ):
                return None
            return CUE_INTERACTION
        # Alice and I
        if n1 == "and" and n2 in ("i", "me"):
            return CUE_INTERACTION
        # Alice is my friend / Alice, my coworker
        if (n1 in ("is", "was") and n2 in ("my", "our")) or (
            n1 == "," and n2 in ("my", "our")
        ):
            offset = end + 2
            if _lower(tokens, offset) in KINSHIP_MODIFIERS:
                offset += 1
            if _is_kinship_at(tokens, offset):
                return CUE_INTRODUCTION
        # Alice is a nurse / Bob works as a chef
        if n1 in ("is", "was", "works", "worked"):
            following = {_lower(tokens, i) for i in range(end + 1, end + 4)}
            if following & OCCUPATIONS and following & {"a", "an", "as"}:
                return CUE_INTRODUCTION
        return None


# ── Known-name matcher ───────────────────────────────────────
class KnownNameMatcher:
    """Names already in the directory.

    Casing of the stored name is ignored, but every matched token must be
    capitalized in the text: "joy" is a word, "Joy" may be a person.
    """

    name = "known"

    def __init__(self, known_names: Iterable[str] = ()):
        self.known: List[Tuple[List[str], str]] = []
        for known in known_names:
            parts = normalize_name(known).split()
            if parts:
                self.known.append((parts, " ".join(known.split())))
        # longest names first so "Mary Jane" wins over "Mary"
        self.known.sort(key=lambda item: len(item[0]), reverse=True)

    def match(self, clauses: Sequence[Sequence[Token]]) -> List[Mention]:
        mentions: List[Mention] = []
        if not self.known:
            return mentions
        for ci, tokens in enumerate(clauses):
            words = [t.bare.casefold() if t.is_word else t.text for t in tokens]
            for parts, display in self.known:
                width = len(parts)
                for i in range(len(words) - width + 1):
                    if words[i:i + width] != parts:
                        continue
                    if not all(t.text[0].isupper() for t in tokens[i:i + width]):
                        continue
                    mentions.append(
                        Mention(
                            clause=ci,
                            start=i,
                            end=i + width,
                            name=display,
                            cue=CUE_KNOWN,
                        )
                    )
        return mentions


DEFAULT_MATCHERS = (TitleMatcher(), CueMatcher())
