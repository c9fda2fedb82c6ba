"""Attitude value arithmetic

Pure functions, no external dependencies.
"""

import math
from typing import Dict, Mapping, Tuple

from companion_bonds.core.attitude.models import (
    DIMENSION_MAX,
    DIMENSION_MIN,
    DIMENSIONS,
    AttitudeRecord,
)
from companion_bonds.core.errors import InvalidDimensionError, ValidationError

# ── Affect groups ────────────────────────────────────────────
POSITIVE_DIMENSIONS: Tuple[str, ...] = (
    "attraction",
    "trust",
    "joy",
    "respect",
    "gratitude",
    "empathy",
    "love",
    "lust",
    "butterflies",
)
NEGATIVE_DIMENSIONS: Tuple[str, ...] = (
    "fear",
    "anger",
    "sorrow",
    "disgust",
    "suspicion",
    "jealousy",
    "anxiety",
)
NEUTRAL_DIMENSIONS: Tuple[str, ...] = (
    "surprise",
    "curiosity",
    "submissiveness",
    "dominance",
)

# Σ|group| = 16, so all-positive at +100 and all-negative at -100 hits +100 exactly
_SCORE_DIVISOR = float(len(POSITIVE_DIMENSIONS) + len(NEGATIVE_DIMENSIONS))


def clamp_dimension(value: float) -> float:
    """-100 ~ +100 clamp."""
    return max(DIMENSION_MIN, min(DIMENSION_MAX, float(value)))


def check_dimension(name: str) -> str:
    if name not in DIMENSIONS:
        raise InvalidDimensionError(name)
    return name


def check_value(name: str, value: float) -> float:
    """Finite number or ValidationError. Range is left to clamp_dimension."""
    number = float(value)
    if not math.isfinite(number):
        raise ValidationError(f"Non-finite value for {name}: {value!r}")
    return number


def affect_sign(name: str) -> int:
    """+1 for positive affect, -1 for negative affect, 0 for neutral."""
    if name in POSITIVE_DIMENSIONS:
        return 1
    if name in NEGATIVE_DIMENSIONS:
        return -1
    return 0


def compute_relationship_score(values: Mapping[str, float]) -> float:
    """(Σ positive − Σ negative) / 16, clamped.

    Missing dimensions count as 0. Monotonic: raising a positive dimension
    never lowers the score, raising a negative one never raises it.
    """
    positive = sum(float(values.get(name, 0.0)) for name in POSITIVE_DIMENSIONS)
    negative = sum(float(values.get(name, 0.0)) for name in NEGATIVE_DIMENSIONS)
    return round(clamp_dimension((positive - negative) / _SCORE_DIVISOR), 4)


def normalize_record(record: AttitudeRecord) -> AttitudeRecord:
    """Clamp all dimensions and recompute the derived score."""
    clamped = {name: clamp_dimension(getattr(record, name)) for name in DIMENSIONS}
    result = record.with_values(**clamped)
    result.relationship_score = compute_relationship_score(clamped)
    return result


def apply_deltas(record: AttitudeRecord, deltas: Mapping[str, float]) -> AttitudeRecord:
    """Add deltas dimension by dimension, clamping each result."""
    for name, delta in deltas.items():
        check_dimension(name)
        check_value(name, delta)
    updated = {
        name: clamp_dimension(getattr(record, name) + float(delta))
        for name, delta in deltas.items()
    }
    return normalize_record(record.with_values(**updated))


def net_impact(deltas: Mapping[str, float]) -> float:
    """Signed summary of a delta map: Σ positive-affect − Σ negative-affect."""
    return round(sum(affect_sign(name) * float(d) for name, d in deltas.items()), 2)


def diff_dimensions(before: AttitudeRecord, after: AttitudeRecord) -> Dict[str, float]:
    """after − before for every dimension"""
    return {
        name: round(getattr(after, name) - getattr(before, name), 4)
        for name in DIMENSIONS
    }
