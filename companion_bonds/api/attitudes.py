"""Attitude API endpoints."""

from fastapi import APIRouter, Depends, Query

from companion_bonds.api.deps import (
    ERROR_RESPONSES,
    build_attitude,
    build_memory,
    get_attitude_service,
    to_http,
)
from companion_bonds.api.schemas import (
    AttitudeMemoryResponse,
    AttitudeResponse,
    AttitudeUpsertRequest,
    DimensionDeltaRequest,
    UserSeedRequest,
)
from companion_bonds.core.errors import CompanionBondsError
from companion_bonds.services.attitude_service import AttitudeService

router = APIRouter(prefix="/companions/{companion_id}", tags=["attitudes"])


@router.get("/attitudes", response_model=list[AttitudeResponse], responses=ERROR_RESPONSES)
def list_attitudes(
    companion_id: str,
    service: AttitudeService = Depends(get_attitude_service),
) -> list[AttitudeResponse]:
    """All attitude records of a companion, best relationship first."""
    try:
        return [build_attitude(record) for record in service.list_for_companion(companion_id)]
    except CompanionBondsError as e:
        raise to_http(e)


@router.get(
    "/attitudes/{target_type}/{target_id}",
    response_model=AttitudeResponse,
    responses=ERROR_RESPONSES,
)
def get_attitude(
    companion_id: str,
    target_type: str,
    target_id: str,
    service: AttitudeService = Depends(get_attitude_service),
) -> AttitudeResponse:
    try:
        return build_attitude(service.get(companion_id, target_id, target_type))
    except CompanionBondsError as e:
        raise to_http(e)


@router.put(
    "/attitudes/{target_type}/{target_id}",
    response_model=AttitudeResponse,
    responses=ERROR_RESPONSES,
)
def upsert_attitude(
    companion_id: str,
    target_type: str,
    target_id: str,
    body: AttitudeUpsertRequest,
    service: AttitudeService = Depends(get_attitude_service),
) -> AttitudeResponse:
    """
    Create or overwrite attitude dimensions

    Missing dimensions of a new record start at 0; values outside
    [-100, 100] are clamped.
    """
    try:
        record = service.upsert(companion_id, target_id, target_type, body.values)
    except CompanionBondsError as e:
        raise to_http(e)
    return build_attitude(record)


@router.post(
    "/attitudes/{target_type}/{target_id}/delta",
    response_model=AttitudeResponse,
    responses=ERROR_RESPONSES,
)
def update_dimension(
    companion_id: str,
    target_type: str,
    target_id: str,
    body: DimensionDeltaRequest,
    service: AttitudeService = Depends(get_attitude_service),
) -> AttitudeResponse:
    try:
        record = service.update_dimension(
            companion_id, target_id, target_type, body.dimension, body.delta
        )
    except CompanionBondsError as e:
        raise to_http(e)
    return build_attitude(record)


@router.post(
    "/attitudes/user/{user_id}/seed",
    response_model=AttitudeResponse,
    responses=ERROR_RESPONSES,
)
def seed_user_attitude(
    companion_id: str,
    user_id: str,
    body: UserSeedRequest,
    service: AttitudeService = Depends(get_attitude_service),
) -> AttitudeResponse:
    """
    Create the attitude toward the user from the companion persona

    An existing record is returned unchanged.
    """
    try:
        record = service.seed_user(companion_id, user_id, persona=body.persona)
    except CompanionBondsError as e:
        raise to_http(e)
    return build_attitude(record)


@router.get(
    "/attitude-memories",
    response_model=list[AttitudeMemoryResponse],
    responses=ERROR_RESPONSES,
)
def list_memories(
    companion_id: str,
    limit: int = Query(10, ge=1, le=100),
    service: AttitudeService = Depends(get_attitude_service),
) -> list[AttitudeMemoryResponse]:
    """Most significant remembered attitude changes."""
    try:
        memories = service.priority_memories(companion_id, limit=limit)
    except CompanionBondsError as e:
        raise to_http(e)
    return [build_memory(memory) for memory in memories]
