"""Interaction, intent and message API endpoints."""

from fastapi import APIRouter, Depends, Query

from companion_bonds.api.deps import (
    ERROR_RESPONSES,
    build_attitude,
    build_intent,
    build_interaction,
    build_person,
    get_conversation_service,
    get_interaction_service,
    to_http,
)
from companion_bonds.api.schemas import (
    CompleteRequest,
    IntentRequest,
    IntentResponse,
    InteractionResponse,
    MessageRequest,
    PlanRequest,
    TurnResponse,
)
from companion_bonds.core.errors import CompanionBondsError
from companion_bonds.core.interaction.intent import detect_intent
from companion_bonds.services.conversation_service import ConversationService
from companion_bonds.services.interaction_service import InteractionService

router = APIRouter(tags=["interactions"])


@router.post(
    "/companions/{companion_id}/interactions",
    response_model=InteractionResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def plan_interaction(
    companion_id: str,
    body: PlanRequest,
    service: InteractionService = Depends(get_interaction_service),
) -> InteractionResponse:
    """Plan an interaction with a known person."""
    try:
        interaction = service.plan(
            body.third_party_id,
            companion_id,
            body.interaction_type,
            description=body.description,
            planned_date=body.planned_date,
        )
    except CompanionBondsError as e:
        raise to_http(e)
    return build_interaction(interaction)


@router.post(
    "/interactions/{interaction_id}/complete",
    response_model=InteractionResponse,
    responses=ERROR_RESPONSES,
)
def complete_interaction(
    interaction_id: str,
    body: CompleteRequest | None = None,
    service: InteractionService = Depends(get_interaction_service),
) -> InteractionResponse:
    """
    Complete a planned interaction

    Generates the outcome and applies its attitude deltas exactly once.
    Repeating the call returns the stored result, or 409 when
    raise_on_conflict is set.
    """
    try:
        interaction = service.complete(
            interaction_id, raise_on_conflict=body.raise_on_conflict if body else False
        )
    except CompanionBondsError as e:
        raise to_http(e)
    return build_interaction(interaction)


@router.get(
    "/companions/{companion_id}/interactions/planned",
    response_model=list[InteractionResponse],
    responses=ERROR_RESPONSES,
)
def list_planned(
    companion_id: str,
    limit: int | None = Query(None, ge=1),
    service: InteractionService = Depends(get_interaction_service),
) -> list[InteractionResponse]:
    try:
        return [build_interaction(i) for i in service.planned(companion_id, limit=limit)]
    except CompanionBondsError as e:
        raise to_http(e)


@router.get(
    "/companions/{companion_id}/persons/{person_id}/interactions",
    response_model=list[InteractionResponse],
    responses=ERROR_RESPONSES,
)
def interaction_history(
    companion_id: str,
    person_id: str,
    service: InteractionService = Depends(get_interaction_service),
) -> list[InteractionResponse]:
    """Interactions with one person, newest first."""
    try:
        return [build_interaction(i) for i in service.history(companion_id, person_id)]
    except CompanionBondsError as e:
        raise to_http(e)


@router.post("/intent", response_model=IntentResponse)
def detect_message_intent(body: IntentRequest) -> IntentResponse:
    """Classify a message as planning, inquiry or neither."""
    return build_intent(detect_intent(body.text, known_names=body.known_names))


@router.post(
    "/companions/{companion_id}/messages",
    response_model=TurnResponse,
    responses=ERROR_RESPONSES,
)
def process_message(
    companion_id: str,
    body: MessageRequest,
    service: ConversationService = Depends(get_conversation_service),
) -> TurnResponse:
    """
    Process one user message

    Detects and records people, seeds attitudes for newcomers and acts on
    a planning or inquiry intent.
    """
    try:
        result = service.process_message(companion_id, body.text)
    except CompanionBondsError as e:
        raise to_http(e)

    return TurnResponse(
        persons=[build_person(p) for p in result.persons],
        attitudes=[build_attitude(a) for a in result.attitudes],
        intent=build_intent(result.intent),
        interaction=build_interaction(result.interaction) if result.interaction else None,
        narrative=result.narrative,
    )
