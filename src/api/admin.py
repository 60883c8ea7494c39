"""Admin console endpoints for companions."""

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import get_actor, get_admin_service, to_http_exception
from src.api.schemas import (
    CompanionInfo,
    CompanionListResponse,
    CompanionResponse,
    ErrorResponse,
    HealthAdjustRequest,
    StatsEditRequest,
)
from src.core.companion.models import Actor
from src.core.errors import CompanionError
from src.core.logging import get_logger
from src.services.companion_admin_service import CompanionAdminService

logger = get_logger(__name__)

router = APIRouter(
    prefix="/admin/companions",
    tags=["admin"],
    responses={403: {"model": ErrorResponse}},
)


@router.get("", response_model=CompanionListResponse)
def list_companions(
    actor: Actor = Depends(get_actor),
    service: CompanionAdminService = Depends(get_admin_service),
) -> CompanionListResponse:
    """All companions, most recently updated first."""
    try:
        companions = service.list_companions(actor)
    except CompanionError as e:
        raise to_http_exception(e)
    items = [CompanionInfo.from_core(c) for c in companions]
    return CompanionListResponse(companions=items, count=len(items))


@router.patch(
    "/{companion_id}",
    response_model=CompanionResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
def edit_companion(
    companion_id: str,
    request: StatsEditRequest,
    actor: Actor = Depends(get_actor),
    service: CompanionAdminService = Depends(get_admin_service),
) -> CompanionResponse:
    """
    Edit a companion

    name/kind and health/level/experience may be changed together in one write.
    Stats are validated, not clamped.
    """
    try:
        companion = service.edit(
            actor,
            companion_id,
            name=request.name,
            kind=request.kind,
            health=request.health,
            level=request.level,
            experience=request.experience,
            expected_version=request.expected_version,
        )
    except CompanionError as e:
        logger.info("Admin edit failed for %s: %s", companion_id, e.tag)
        raise to_http_exception(e)
    return CompanionResponse(companion=CompanionInfo.from_core(companion))


@router.post(
    "/{companion_id}/health",
    response_model=CompanionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def adjust_health(
    companion_id: str,
    request: HealthAdjustRequest,
    actor: Actor = Depends(get_actor),
    service: CompanionAdminService = Depends(get_admin_service),
) -> CompanionResponse:
    """Add or remove health (clamped to 0 ~ 100)."""
    try:
        companion = service.adjust_health(actor, companion_id, request.delta)
    except CompanionError as e:
        raise to_http_exception(e)
    return CompanionResponse(companion=CompanionInfo.from_core(companion))


@router.delete(
    "/{companion_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
def delete_companion(
    companion_id: str,
    actor: Actor = Depends(get_actor),
    service: CompanionAdminService = Depends(get_admin_service),
) -> Response:
    try:
        service.delete(actor, companion_id)
    except CompanionError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
