"""Attitude core package — public API"""

from companion_bonds.core.attitude.models import (
    DIMENSIONS,
    AttitudeMemory,
    AttitudeRecord,
    RelationshipLabel,
    TargetType,
    Valence,
)
from companion_bonds.core.attitude.scoring import (
    NEGATIVE_DIMENSIONS,
    NEUTRAL_DIMENSIONS,
    POSITIVE_DIMENSIONS,
    apply_deltas,
    check_value,
    clamp_dimension,
    compute_relationship_score,
    net_impact,
    normalize_record,
)
from companion_bonds.core.attitude.classifier import classify
from companion_bonds.core.attitude.seeding import (
    build_seed_record,
    build_user_record,
    seed_values,
)
from companion_bonds.core.attitude.memories import (
    detect_significant_change,
    impact_score,
)

__all__ = [
    "DIMENSIONS",
    "AttitudeMemory",
    "AttitudeRecord",
    "RelationshipLabel",
    "TargetType",
    "Valence",
    "NEGATIVE_DIMENSIONS",
    "NEUTRAL_DIMENSIONS",
    "POSITIVE_DIMENSIONS",
    "apply_deltas",
    "check_value",
    "clamp_dimension",
    "compute_relationship_score",
    "net_impact",
    "normalize_record",
    "classify",
    "build_seed_record",
    "build_user_record",
    "seed_values",
    "detect_significant_change",
    "impact_score",
]
