"""Third-party person detection

detect() is pure: text in, candidates out. It never raises; malformed
input gives an empty list.
"""

from typing import Dict, Iterable, List, Optional, Set

from companion_bonds.core.logging import get_logger
from companion_bonds.core.person.hints import (
    importance_score,
    occupation_hint,
    relationship_hint,
    trait_hints,
    valence_hint,
)
from companion_bonds.core.person.lexicon import OCCUPATIONS
from companion_bonds.core.person.matchers import (
    DEFAULT_MATCHERS,
    KnownNameMatcher,
    Mention,
)
from companion_bonds.core.person.models import Candidate, normalize_name
from companion_bonds.core.person.tokens import split_clauses

logger = get_logger(__name__)


def detect(
    text: str,
    known_names: Optional[Iterable[str]] = None,
    exclude: Optional[Iterable[str]] = None,
) -> List[Candidate]:
    """Find people mentioned in text.

    Args:
        text: free-form user message
        known_names: names already in the directory; matched without a cue
        exclude: names never reported (the user's own name)

    Returns:
        One Candidate per distinct normalized name, in order of first mention.
    """
    if not isinstance(text, str) or not text.strip():
        return []
    try:
        return _detect(text, known_names or (), exclude or ())
    except Exception:
        logger.exception("Person detection failed, returning no candidates")
        return []


def _collect_mentions(clauses, known_names: Iterable[str]) -> List[Mention]:
    # title first so "Dr. Smith" keeps its title, then directory names
    matchers = [DEFAULT_MATCHERS[0], KnownNameMatcher(known_names), *DEFAULT_MATCHERS[1:]]
    accepted: List[Mention] = []
    for matcher in matchers:
        for mention in matcher.match(clauses):
            if any(mention.overlaps(kept) for kept in accepted):
                continue
            accepted.append(mention)
    accepted.sort(key=lambda m: (m.clause, m.start))
    return accepted


def _detect(text: str, known_names: Iterable[str], exclude: Iterable[str]) -> List[Candidate]:
    clauses = split_clauses(text)
    excluded = {normalize_name(name) for name in exclude if name}

    candidates: Dict[str, Candidate] = {}
    counts: Dict[str, int] = {}
    windows: Dict[str, Set[str]] = {}
    for mention in _collect_mentions(clauses, known_names):
        key = normalize_name(mention.name)
        if not key or key in excluded:
            continue
        tokens = clauses[mention.clause]

        candidate = candidates.get(key)
        if candidate is None:
            candidate = Candidate(name=mention.name)
            candidates[key] = candidate
            counts[key] = 0
            windows[key] = set()
        counts[key] += 1
        windows[key] |= {t.lower for t in tokens}

        if candidate.relationship_hint is None:
            candidate.relationship_hint = relationship_hint(tokens, mention.start, mention.end)
        if candidate.occupation_hint is None:
            candidate.occupation_hint = occupation_hint(
                tokens, mention.start, mention.end, mention.title
            )
        if candidate.emotional_valence_hint is None:
            candidate.emotional_valence_hint = valence_hint(tokens)
        for trait in trait_hints(tokens, mention.start, mention.end):
            if trait not in candidate.trait_hints:
                candidate.trait_hints.append(trait)
        if mention.cue not in candidate.cues:
            candidate.cues.append(mention.cue)

    for key, candidate in candidates.items():
        if candidate.occupation_hint is None and candidate.relationship_hint in OCCUPATIONS:
            candidate.occupation_hint = candidate.relationship_hint
        candidate.importance_score = importance_score(
            windows[key], candidate.relationship_hint, counts[key]
        )

    if candidates:
        logger.debug(f"Detected persons: {', '.join(c.name for c in candidates.values())}")
    return list(candidates.values())
