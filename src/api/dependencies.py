"""Shared FastAPI dependencies and error translation."""

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from src.api.schemas import ErrorResponse
from src.core.companion.models import Actor, Role
from src.core.errors import (
    CompanionError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    StorageTimeoutError,
    ValidationError,
)
from src.core.event_bus import EventBus
from src.db.database import get_db
from src.db.repository import CompanionRepository, SqlCompanionRepository
from src.services.adoption_service import AdoptionService
from src.services.care_service import CareService
from src.services.companion_admin_service import CompanionAdminService

# Most specific first: subclasses before their parents
_STATUS_BY_ERROR: list[tuple[type[CompanionError], int]] = [
    (ValidationError, 422),
    (PermissionDeniedError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StorageTimeoutError, 504),
    (StorageError, 503),
]


def get_actor(
    x_user_id: str = Header(..., alias="X-User-Id", min_length=1),
    x_user_role: Role = Header(Role.USER, alias="X-User-Role"),
) -> Actor:
    """Caller identity from the identity provider headers. Trusted as given."""
    return Actor(user_id=x_user_id, role=x_user_role)


def get_event_bus(request: Request) -> EventBus:
    """EventBus instance (dependency injection)"""
    bus: EventBus = request.app.state.event_bus
    return bus


def get_repository(db: Session = Depends(get_db)) -> CompanionRepository:
    return SqlCompanionRepository(db)


def get_adoption_service(
    repo: CompanionRepository = Depends(get_repository),
    bus: EventBus = Depends(get_event_bus),
) -> AdoptionService:
    return AdoptionService(repo, bus)


def get_care_service(
    repo: CompanionRepository = Depends(get_repository),
    bus: EventBus = Depends(get_event_bus),
) -> CareService:
    return CareService(repo, bus)


def get_admin_service(
    repo: CompanionRepository = Depends(get_repository),
    bus: EventBus = Depends(get_event_bus),
) -> CompanionAdminService:
    return CompanionAdminService(repo, bus)


def to_http_exception(exc: CompanionError) -> HTTPException:
    """CompanionError → HTTPException with an ErrorResponse body as detail."""
    status_code = 500
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break
    body = ErrorResponse(error=exc.tag, detail=exc.message)
    return HTTPException(status_code=status_code, detail=body.model_dump())
