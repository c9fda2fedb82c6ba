"""companion-bonds core: attitudes, person detection, interactions"""
__version__ = "0.1.0"

from companion_bonds.core.errors import (
    CompanionBondsError,
    ConflictError,
    InvalidDimensionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from companion_bonds.core.event_bus import EngineEvent, EventBus
from companion_bonds.core.event_types import EventTypes
from companion_bonds.core.attitude import AttitudeRecord, RelationshipLabel, TargetType, classify
from companion_bonds.core.person import Candidate, ThirdPartyPerson, detect
from companion_bonds.core.interaction import Intent, Interaction, Outcome, detect_intent, generate

__all__ = [
    "CompanionBondsError",
    "ConflictError",
    "InvalidDimensionError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
    "EngineEvent",
    "EventBus",
    "EventTypes",
    "AttitudeRecord",
    "RelationshipLabel",
    "TargetType",
    "classify",
    "Candidate",
    "ThirdPartyPerson",
    "detect",
    "Intent",
    "Interaction",
    "Outcome",
    "detect_intent",
    "generate",
]
