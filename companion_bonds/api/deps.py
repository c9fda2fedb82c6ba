"""Service injection and error mapping shared by the routers."""

from fastapi import HTTPException, Request

from companion_bonds.core.attitude.classifier import classify
from companion_bonds.core.attitude.models import AttitudeMemory, AttitudeRecord
from companion_bonds.core.errors import (
    CompanionBondsError,
    ConflictError,
    InvalidDimensionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from companion_bonds.core.interaction.models import Intent, Interaction
from companion_bonds.core.logging import get_logger
from companion_bonds.core.person.models import Candidate, PersonMemory, ThirdPartyPerson
from companion_bonds.api.schemas import (
    AttitudeMemoryResponse,
    AttitudeResponse,
    CandidateResponse,
    ErrorResponse,
    IntentResponse,
    InteractionResponse,
    PersonMemoryResponse,
    PersonResponse,
)
from companion_bonds.services.attitude_service import AttitudeService
from companion_bonds.services.conversation_service import ConversationService
from companion_bonds.services.interaction_service import InteractionService
from companion_bonds.services.person_service import PersonService

logger = get_logger(__name__)

ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Not found"},
    409: {"model": ErrorResponse, "description": "Already completed"},
    422: {"model": ErrorResponse, "description": "Invalid input"},
    503: {"model": ErrorResponse, "description": "Storage unavailable"},
}


def get_attitude_service(request: Request) -> AttitudeService:
    """AttitudeService from app state (dependency injection)"""
    service: AttitudeService = request.app.state.attitude_service
    return service


def get_person_service(request: Request) -> PersonService:
    service: PersonService = request.app.state.person_service
    return service


def get_interaction_service(request: Request) -> InteractionService:
    service: InteractionService = request.app.state.interaction_service
    return service


def get_conversation_service(request: Request) -> ConversationService:
    service: ConversationService = request.app.state.conversation_service
    return service


def to_http(exc: CompanionBondsError) -> HTTPException:
    """Map an engine error onto its HTTP status."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (InvalidDimensionError, ValidationError)):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, PersistenceError):
        logger.error(f"Storage failure after {exc.attempts} attempt(s): {exc}")
        return HTTPException(status_code=503, detail="Storage temporarily unavailable")
    logger.error(f"Unmapped engine error: {exc}")
    return HTTPException(status_code=500, detail=str(exc))


# ── response builders ────────────────────────────────────────


def build_attitude(record: AttitudeRecord) -> AttitudeResponse:
    return AttitudeResponse(
        companion_id=record.companion_id,
        target_id=record.target_id,
        target_type=record.target_type.value,
        dimensions=record.dimensions(),
        relationship_score=record.relationship_score,
        label=classify(record.relationship_score).value,
        created_at=record.created_at,
        last_updated=record.last_updated,
    )


def build_memory(memory: AttitudeMemory) -> AttitudeMemoryResponse:
    return AttitudeMemoryResponse(
        companion_id=memory.companion_id,
        target_id=memory.target_id,
        target_type=memory.target_type.value,
        memory_type=memory.memory_type,
        description=memory.description,
        impact_score=memory.impact_score,
        priority_score=memory.priority_score,
        delta=memory.delta,
        context=memory.context,
        created_at=memory.created_at,
    )


def build_candidate(candidate: Candidate) -> CandidateResponse:
    valence = candidate.emotional_valence_hint
    return CandidateResponse(
        name=candidate.name,
        relationship_hint=candidate.relationship_hint,
        occupation_hint=candidate.occupation_hint,
        trait_hints=candidate.trait_hints,
        emotional_valence_hint=valence.value if valence else None,
        cues=candidate.cues,
        importance_score=candidate.importance_score,
    )


def build_person(person: ThirdPartyPerson) -> PersonResponse:
    return PersonResponse(
        id=person.id,
        companion_id=person.companion_id,
        name=person.name,
        relationship_to_user=person.relationship_to_user,
        relationship_to_companion=person.relationship_to_companion,
        occupation=person.occupation,
        personality_traits=person.personality_traits,
        physical_description=person.physical_description,
        mention_count=person.mention_count,
        importance_score=person.importance_score,
        evidence=person.evidence,
        first_mentioned=person.first_mentioned,
        last_mentioned=person.last_mentioned,
    )


def build_person_memory(memory: PersonMemory) -> PersonMemoryResponse:
    return PersonMemoryResponse(
        id=memory.id,
        person_id=memory.person_id,
        companion_id=memory.companion_id,
        memory_type=memory.memory_type.value,
        content=memory.content,
        importance=memory.importance,
        emotional_valence=memory.emotional_valence,
        created_at=memory.created_at,
    )


def build_interaction(interaction: Interaction) -> InteractionResponse:
    return InteractionResponse(
        id=interaction.id,
        companion_id=interaction.companion_id,
        third_party_id=interaction.third_party_id,
        interaction_type=interaction.interaction_type,
        description=interaction.description,
        planned_date=interaction.planned_date,
        status=interaction.status.value,
        outcome=interaction.outcome,
        impact_on_relationship=interaction.impact_on_relationship,
        deltas=interaction.deltas,
        created_at=interaction.created_at,
        completed_at=interaction.completed_at,
    )


def build_intent(intent: Intent) -> IntentResponse:
    return IntentResponse(
        kind=intent.kind.value,
        person=intent.person,
        interaction_type_guess=intent.interaction_type_guess,
        planned_date=intent.planned_date,
        description=intent.description,
    )
