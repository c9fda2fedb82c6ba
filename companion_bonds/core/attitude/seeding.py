"""Initial attitude records

New third parties start from a mildly curious baseline and are nudged by
the hints found in the first mention. Every nudge is capped at max_offset
per dimension so seeding alone never leaves the neutral band.
"""

from typing import Dict, List, Optional, Tuple

from companion_bonds.core.attitude.models import (
    DIMENSIONS,
    AttitudeRecord,
    TargetType,
    Valence,
)
from companion_bonds.core.attitude.scoring import normalize_record

# ── Baselines ────────────────────────────────────────────────
THIRD_PARTY_BASELINE: Dict[str, float] = {
    "trust": 5.0,
    "surprise": 15.0,
    "curiosity": 20.0,
    "respect": 10.0,
    "suspicion": 5.0,
    "empathy": 10.0,
}

USER_BASELINE: Dict[str, float] = {
    "attraction": 50.0,
    "trust": 45.0,
    "fear": 5.0,
    "anger": 5.0,
    "joy": 40.0,
    "sorrow": 10.0,
    "disgust": 5.0,
    "surprise": 30.0,
    "curiosity": 60.0,
    "respect": 40.0,
    "suspicion": 15.0,
    "gratitude": 20.0,
    "jealousy": 10.0,
    "empathy": 50.0,
    "lust": 25.0,
    "love": 30.0,
    "anxiety": 20.0,
    "butterflies": 15.0,
    "submissiveness": 30.0,
    "dominance": 35.0,
}

# ── Valence nudges ───────────────────────────────────────────
VALENCE_OFFSETS: Dict[Valence, Dict[str, float]] = {
    Valence.POSITIVE: {"joy": 10.0, "trust": 5.0, "attraction": 5.0},
    Valence.NEGATIVE: {"anger": 10.0, "disgust": 8.0, "trust": -8.0},
    Valence.CONCERNED: {"fear": 8.0, "empathy": 8.0, "anxiety": 5.0},
}

# ── Relationship-hint nudges ─────────────────────────────────
_FAMILY = ("brother", "sister", "mother", "father", "parent", "cousin", "uncle",
           "aunt", "grandmother", "grandfather", "son", "daughter", "family")

RELATIONSHIP_OFFSETS: List[Tuple[Tuple[str, ...], Dict[str, float]]] = [
    (("friend", "best friend"), {"trust": 15.0, "joy": 10.0, "respect": 10.0, "suspicion": -5.0}),
    (_FAMILY, {"trust": 15.0, "joy": 15.0, "respect": 15.0, "empathy": 10.0, "suspicion": -5.0}),
    (("boss", "manager"), {"respect": 15.0, "fear": 10.0, "curiosity": 10.0}),
    (("colleague",), {"trust": 10.0, "respect": 10.0}),
    (("partner", "boyfriend", "girlfriend", "husband", "wife", "spouse"),
     {"trust": 15.0, "joy": 10.0, "jealousy": 5.0}),
]

# ── Persona adjustments (user-facing record) ─────────────────
PERSONA_ADJUSTMENTS: List[Tuple[Tuple[str, ...], Dict[str, float]]] = [
    (("shy", "introverted"), {"curiosity": -10.0, "anxiety": 15.0, "trust": -10.0, "submissiveness": 10.0}),
    (("confident", "outgoing"), {"curiosity": 15.0, "anxiety": -10.0, "dominance": 10.0, "attraction": 5.0}),
    (("friendly", "warm"), {"joy": 15.0, "empathy": 10.0, "trust": 10.0, "gratitude": 10.0}),
    (("cold", "distant"), {"joy": -10.0, "empathy": -15.0, "trust": -15.0, "suspicion": 10.0}),
    (("flirty", "seductive"), {"attraction": 15.0, "lust": 20.0, "butterflies": 10.0}),
    (("aggressive", "dominant"), {"dominance": 15.0, "anger": 10.0, "submissiveness": -10.0}),
    (("submissive", "obedient"), {"submissiveness": 15.0, "dominance": -10.0, "respect": 10.0}),
    (("curious", "inquisitive"), {"curiosity": 20.0, "surprise": 10.0}),
]


def _cap(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


def relationship_offsets(relationship_hint: Optional[str]) -> Dict[str, float]:
    if not relationship_hint:
        return {}
    hint = relationship_hint.lower()
    for keys, offsets in RELATIONSHIP_OFFSETS:
        if hint in keys:
            return dict(offsets)
    return {}


def seed_values(
    target_type: TargetType,
    valence_hint: Optional[Valence] = None,
    relationship_hint: Optional[str] = None,
    max_offset: float = 15.0,
) -> Dict[str, float]:
    """Baseline plus capped hint offsets, keyed by dimension."""
    values = {name: 0.0 for name in DIMENSIONS}
    if target_type == TargetType.THIRD_PARTY:
        values.update(THIRD_PARTY_BASELINE)

    # per-dimension total nudge is capped, not each source separately
    nudges: Dict[str, float] = {}
    for name, offset in relationship_offsets(relationship_hint).items():
        nudges[name] = nudges.get(name, 0.0) + offset
    if valence_hint is not None:
        for name, offset in VALENCE_OFFSETS[Valence(valence_hint)].items():
            nudges[name] = nudges.get(name, 0.0) + offset

    for name, nudge in nudges.items():
        values[name] += _cap(nudge, max_offset)
    return values


def build_seed_record(
    companion_id: str,
    target_id: str,
    target_type: TargetType,
    valence_hint: Optional[Valence] = None,
    relationship_hint: Optional[str] = None,
    max_offset: float = 15.0,
) -> AttitudeRecord:
    """Seeded record with clamped values and computed score."""
    values = seed_values(target_type, valence_hint, relationship_hint, max_offset)
    record = AttitudeRecord(
        companion_id=companion_id,
        target_id=target_id,
        target_type=target_type,
        **values,
    )
    return normalize_record(record)


def build_user_record(companion_id: str, user_id: str, persona: str = "") -> AttitudeRecord:
    """The companion's starting attitude toward its primary user.

    Persona keywords shift the baseline; results are kept in 0..100 like
    the rest of the user-facing defaults.
    """
    values = dict(USER_BASELINE)
    persona_lower = (persona or "").lower()
    for keywords, adjustments in PERSONA_ADJUSTMENTS:
        if any(word in persona_lower for word in keywords):
            for name, offset in adjustments.items():
                values[name] += offset

    values = {name: max(0.0, min(100.0, v)) for name, v in values.items()}
    record = AttitudeRecord(
        companion_id=companion_id,
        target_id=user_id,
        target_type=TargetType.USER,
        **values,
    )
    return normalize_record(record)
