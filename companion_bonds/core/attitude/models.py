"""Attitude domain models

Plain dataclasses, independent of the database layer.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple


class TargetType(str, Enum):
    """Who an attitude record points at"""

    USER = "user"
    THIRD_PARTY = "third_party"


class RelationshipLabel(str, Enum):
    """Relationship bands, ordered from worst to best"""

    HOSTILE = "hostile"
    UNFRIENDLY = "unfriendly"
    NEUTRAL = "neutral"
    FRIENDLY = "friendly"
    CLOSE = "close"
    INTIMATE = "intimate"


class Valence(str, Enum):
    """Emotional tone of a mention; advisory, only used for seeding"""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    CONCERNED = "concerned"


# The 20 recognized dimensions, in storage order
DIMENSIONS: Tuple[str, ...] = (
    "attraction",
    "trust",
    "fear",
    "anger",
    "joy",
    "sorrow",
    "disgust",
    "surprise",
    "curiosity",
    "respect",
    "suspicion",
    "gratitude",
    "jealousy",
    "empathy",
    "lust",
    "love",
    "anxiety",
    "butterflies",
    "submissiveness",
    "dominance",
)

DIMENSION_MIN = -100.0
DIMENSION_MAX = 100.0


@dataclass
class AttitudeRecord:
    """A companion's feelings toward one target.

    Every dimension and relationship_score lies in [-100, 100].
    """

    companion_id: str
    target_id: str
    target_type: TargetType

    attraction: float = 0.0
    trust: float = 0.0
    fear: float = 0.0
    anger: float = 0.0
    joy: float = 0.0
    sorrow: float = 0.0
    disgust: float = 0.0
    surprise: float = 0.0
    curiosity: float = 0.0
    respect: float = 0.0
    suspicion: float = 0.0
    gratitude: float = 0.0
    jealousy: float = 0.0
    empathy: float = 0.0
    lust: float = 0.0
    love: float = 0.0
    anxiety: float = 0.0
    butterflies: float = 0.0
    submissiveness: float = 0.0
    dominance: float = 0.0

    relationship_score: float = 0.0
    record_id: Optional[int] = None
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.companion_id, self.target_id, self.target_type.value)

    def dimensions(self) -> Dict[str, float]:
        """name → value for all 20 dimensions"""
        return {name: getattr(self, name) for name in DIMENSIONS}

    def with_values(self, **values: float) -> "AttitudeRecord":
        """Copy with some dimensions replaced (unclamped)."""
        return replace(self, **values)


@dataclass
class AttitudeMemory:
    """A significant attitude change worth remembering"""

    companion_id: str
    target_id: str
    target_type: TargetType
    memory_type: str
    description: str
    impact_score: float
    priority_score: float
    delta: Dict[str, float] = field(default_factory=dict)
    context: str = ""
    memory_id: Optional[int] = None
    created_at: Optional[datetime] = None
