"""Relationship score → label mapping"""

from typing import List, Tuple

from companion_bonds.core.attitude.models import RelationshipLabel
from companion_bonds.core.attitude.scoring import clamp_dimension

# (exclusive lower bound, label), evaluated top to bottom, first match wins.
# Integer bands: intimate 81..100, close 61..80, friendly 21..60,
# neutral -20..20, unfriendly -60..-21, hostile -100..-61.
_BANDS: List[Tuple[float, RelationshipLabel]] = [
    (80.0, RelationshipLabel.INTIMATE),
    (60.0, RelationshipLabel.CLOSE),
    (20.0, RelationshipLabel.FRIENDLY),
]
_NEUTRAL_FLOOR = -20.0
_UNFRIENDLY_FLOOR = -60.0


def classify(score: float) -> RelationshipLabel:
    """Total over the reals: the score is clamped to [-100, 100] first."""
    value = clamp_dimension(score)
    for lower, label in _BANDS:
        if value > lower:
            return label
    if value >= _NEUTRAL_FLOOR:
        return RelationshipLabel.NEUTRAL
    if value >= _UNFRIENDLY_FLOOR:
        return RelationshipLabel.UNFRIENDLY
    return RelationshipLabel.HOSTILE
