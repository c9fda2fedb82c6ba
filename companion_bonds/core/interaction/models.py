"""Interaction domain models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional


class InteractionStatus(str, Enum):
    PLANNED = "planned"
    COMPLETED = "completed"


class IntentKind(str, Enum):
    PLANNING = "planning"
    INQUIRY = "inquiry"
    NONE = "none"


class Band(str, Enum):
    """Relationship-score band used for outcome selection"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class Interaction:
    """A planned or completed event between the companion and a person.

    outcome, impact_on_relationship, deltas and completed_at are only set
    by completion.
    """

    id: str
    companion_id: str
    third_party_id: str
    interaction_type: str
    description: str = ""
    planned_date: Optional[str] = None
    status: InteractionStatus = InteractionStatus.PLANNED
    outcome: Optional[str] = None
    impact_on_relationship: Optional[float] = None
    deltas: Dict[str, float] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == InteractionStatus.COMPLETED


@dataclass
class Intent:
    """What a message wants done about an interaction"""

    kind: IntentKind = IntentKind.NONE
    person: Optional[str] = None
    interaction_type_guess: Optional[str] = None
    planned_date: Optional[str] = None
    description: Optional[str] = None


@dataclass
class Outcome:
    band: Band
    category: str
    template_family: str
    narrative: str
    deltas: Dict[str, float]
    impact: float
