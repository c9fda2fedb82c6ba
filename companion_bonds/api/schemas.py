"""API request/response schemas."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


# === Request Schemas ===


class AttitudeUpsertRequest(BaseModel):
    """Overwrite some dimensions; missing record is created"""

    values: dict[str, float] = Field(default_factory=dict, description="dimension → value")


class DimensionDeltaRequest(BaseModel):
    """Relative change of one dimension"""

    dimension: str = Field(..., min_length=1, description="attitude dimension name")
    delta: float


class DetectRequest(BaseModel):
    text: str = Field(..., description="free text to scan for people")


class PlanRequest(BaseModel):
    """New planned interaction"""

    third_party_id: str = Field(..., min_length=1, max_length=64)
    interaction_type: str = Field(..., min_length=1, description="coffee, call, help ...")
    description: str = ""
    planned_date: Optional[str] = None


class CompleteRequest(BaseModel):
    raise_on_conflict: bool = False


class IntentRequest(BaseModel):
    text: str
    known_names: list[str] = []


class UserSeedRequest(BaseModel):
    """Initial attitude toward the user, shaped by the companion persona"""

    persona: str = ""


class ImportanceRequest(BaseModel):
    importance: float = Field(..., description="clamped to [0, 1]")


class PersonMemoryRequest(BaseModel):
    """Something to remember about a person"""

    memory_type: str = Field("fact", description="fact, event, opinion or relationship_change")
    content: str = Field(..., min_length=1)
    importance: float = 0.5
    emotional_valence: float = 0.0


class MessageRequest(BaseModel):
    """One user message to process"""

    text: str = Field(..., description="user message")


# === Response Schemas ===


class AttitudeResponse(BaseModel):
    """Attitude record with its relationship label"""

    companion_id: str
    target_id: str
    target_type: str
    dimensions: dict[str, float]
    relationship_score: float
    label: str
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


class AttitudeMemoryResponse(BaseModel):
    companion_id: str
    target_id: str
    target_type: str
    memory_type: str
    description: str
    impact_score: float
    priority_score: float
    delta: dict[str, float] = {}
    context: str = ""
    created_at: Optional[datetime] = None


class CandidateResponse(BaseModel):
    """Detected person, not yet stored"""

    name: str
    relationship_hint: Optional[str] = None
    occupation_hint: Optional[str] = None
    trait_hints: list[str] = []
    emotional_valence_hint: Optional[str] = None
    cues: list[str] = []
    importance_score: float = 0.5


class PersonResponse(BaseModel):
    """Third party from the directory"""

    id: str
    companion_id: str
    name: str
    relationship_to_user: Optional[str] = None
    relationship_to_companion: Optional[str] = None
    occupation: Optional[str] = None
    personality_traits: list[str] = []
    physical_description: Optional[str] = None
    mention_count: int
    importance_score: float
    evidence: list[dict[str, Any]] = []
    first_mentioned: Optional[datetime] = None
    last_mentioned: Optional[datetime] = None


class PersonMemoryResponse(BaseModel):
    id: int
    person_id: str
    companion_id: str
    memory_type: str
    content: str
    importance: float
    emotional_valence: float
    created_at: Optional[datetime] = None


class InteractionResponse(BaseModel):
    id: str
    companion_id: str
    third_party_id: str
    interaction_type: str
    description: str
    planned_date: Optional[str] = None
    status: str
    outcome: Optional[str] = None
    impact_on_relationship: Optional[float] = None
    deltas: dict[str, float] = {}
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class IntentResponse(BaseModel):
    kind: str
    person: Optional[str] = None
    interaction_type_guess: Optional[str] = None
    planned_date: Optional[str] = None
    description: Optional[str] = None


class TurnResponse(BaseModel):
    """Result of processing one message"""

    persons: list[PersonResponse] = []
    attitudes: list[AttitudeResponse] = []
    intent: IntentResponse
    interaction: Optional[InteractionResponse] = None
    narrative: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body"""

    detail: str
