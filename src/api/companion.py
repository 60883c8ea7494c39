"""Companion API endpoints for the signed-in owner."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_actor,
    get_admin_service,
    get_adoption_service,
    get_care_service,
    to_http_exception,
)
from src.api.schemas import (
    AdoptRequest,
    CompanionInfo,
    CompanionResponse,
    ErrorResponse,
    RenameRequest,
)
from src.core.companion.models import Actor
from src.core.errors import CompanionError
from src.core.logging import get_logger
from src.services.adoption_service import AdoptionService
from src.services.care_service import CareService
from src.services.companion_admin_service import CompanionAdminService

logger = get_logger(__name__)

router = APIRouter(prefix="/companions", tags=["companions"])


@router.get(
    "/me",
    response_model=CompanionResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_my_companion(
    actor: Actor = Depends(get_actor),
    service: CompanionAdminService = Depends(get_admin_service),
) -> CompanionResponse:
    """Current owner's companion."""
    try:
        companion = service.get_for_owner(actor.user_id)
    except CompanionError as e:
        raise to_http_exception(e)
    return CompanionResponse(companion=CompanionInfo.from_core(companion))


@router.post(
    "/me/adopt",
    response_model=CompanionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def adopt_companion(
    request: AdoptRequest,
    actor: Actor = Depends(get_actor),
    service: AdoptionService = Depends(get_adoption_service),
) -> CompanionResponse:
    """
    Adopt a companion

    Replacing an existing companion requires confirm_replace=true.
    """
    try:
        companion = service.adopt(
            actor.user_id,
            request.name,
            request.kind,
            confirm_replace=request.confirm_replace,
        )
    except CompanionError as e:
        logger.info("Adoption failed for %s: %s", actor.user_id, e.tag)
        raise to_http_exception(e)
    return CompanionResponse(companion=CompanionInfo.from_core(companion))


@router.post(
    "/me/care",
    response_model=CompanionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def care_for_companion(
    actor: Actor = Depends(get_actor),
    service: CareService = Depends(get_care_service),
) -> CompanionResponse:
    """Feed & care: health +20, experience +10. No-op at full health."""
    try:
        companion = service.care_for_owner(actor.user_id)
    except CompanionError as e:
        logger.info("Care failed for %s: %s", actor.user_id, e.tag)
        raise to_http_exception(e)
    return CompanionResponse(companion=CompanionInfo.from_core(companion))


@router.patch(
    "/me",
    response_model=CompanionResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def update_my_companion(
    request: RenameRequest,
    actor: Actor = Depends(get_actor),
    service: CompanionAdminService = Depends(get_admin_service),
) -> CompanionResponse:
    """Rename the companion or change its kind."""
    try:
        current = service.get_for_owner(actor.user_id)
        companion = service.rename(
            actor, current.id, name=request.name, kind=request.kind
        )
    except CompanionError as e:
        raise to_http_exception(e)
    return CompanionResponse(companion=CompanionInfo.from_core(companion))
