"""Third-party person API endpoints."""

from fastapi import APIRouter, Depends, Query

from companion_bonds.api.deps import (
    ERROR_RESPONSES,
    build_candidate,
    build_person,
    build_person_memory,
    get_person_service,
    to_http,
)
from companion_bonds.api.schemas import (
    CandidateResponse,
    DetectRequest,
    ImportanceRequest,
    PersonMemoryRequest,
    PersonMemoryResponse,
    PersonResponse,
)
from companion_bonds.config import settings
from companion_bonds.core.errors import CompanionBondsError
from companion_bonds.core.person.detector import detect
from companion_bonds.services.person_service import PersonService

router = APIRouter(prefix="/companions/{companion_id}/persons", tags=["persons"])


@router.post("/detect", response_model=list[CandidateResponse], responses=ERROR_RESPONSES)
def detect_persons(
    companion_id: str,
    body: DetectRequest,
    service: PersonService = Depends(get_person_service),
) -> list[CandidateResponse]:
    """
    Detect people in text without storing them

    Names already in the companion's directory are matched without a cue.
    """
    try:
        known = service.known_names(companion_id)
    except CompanionBondsError as e:
        raise to_http(e)
    exclude = [settings.USER_NAME] if settings.USER_NAME else []
    return [build_candidate(c) for c in detect(body.text, known_names=known, exclude=exclude)]


@router.get("", response_model=list[PersonResponse], responses=ERROR_RESPONSES)
def list_persons(
    companion_id: str,
    service: PersonService = Depends(get_person_service),
) -> list[PersonResponse]:
    """Known people, most important first."""
    try:
        return [build_person(person) for person in service.list(companion_id)]
    except CompanionBondsError as e:
        raise to_http(e)


@router.get("/by-name/{name}", response_model=PersonResponse, responses=ERROR_RESPONSES)
def get_person_by_name(
    companion_id: str,
    name: str,
    service: PersonService = Depends(get_person_service),
) -> PersonResponse:
    try:
        return build_person(service.get(name, companion_id))
    except CompanionBondsError as e:
        raise to_http(e)


@router.put("/{person_id}/importance", response_model=PersonResponse, responses=ERROR_RESPONSES)
def set_importance(
    companion_id: str,
    person_id: str,
    body: ImportanceRequest,
    service: PersonService = Depends(get_person_service),
) -> PersonResponse:
    try:
        person = service.update_importance(person_id, body.importance, companion_id=companion_id)
    except CompanionBondsError as e:
        raise to_http(e)
    return build_person(person)


@router.get(
    "/{person_id}/memories",
    response_model=list[PersonMemoryResponse],
    responses=ERROR_RESPONSES,
)
def list_person_memories(
    companion_id: str,
    person_id: str,
    limit: int | None = Query(None, ge=1, le=100),
    service: PersonService = Depends(get_person_service),
) -> list[PersonMemoryResponse]:
    """What the companion remembers about a person, most important first."""
    try:
        memories = service.memories(companion_id, person_id, limit=limit)
    except CompanionBondsError as e:
        raise to_http(e)
    return [build_person_memory(memory) for memory in memories]


@router.post(
    "/{person_id}/memories",
    response_model=PersonMemoryResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def add_person_memory(
    companion_id: str,
    person_id: str,
    body: PersonMemoryRequest,
    service: PersonService = Depends(get_person_service),
) -> PersonMemoryResponse:
    try:
        memory = service.add_memory(
            companion_id,
            person_id,
            body.memory_type,
            body.content,
            importance=body.importance,
            emotional_valence=body.emotional_valence,
        )
    except CompanionBondsError as e:
        raise to_http(e)
    return build_person_memory(memory)
