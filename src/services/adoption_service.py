"""Adoption Service — one companion per owner.

Adopting retires any existing companion (after explicit confirmation)
and creates a fresh one at health 0, level 1, experience 0.
"""

import logging
from typing import Optional

from src.config import settings
from src.core.companion.models import Companion, CompanionKind
from src.core.companion.validation import validate_kind, validate_name
from src.core.deadline import Deadline
from src.core.errors import (
    CompanionError,
    ConflictError,
    ReplacementNotConfirmedError,
    RetirementFailedError,
)
from src.core.event_bus import DomainEvent, EventBus
from src.core.event_types import EventTypes
from src.db.repository import CompanionRepository

logger = logging.getLogger(__name__)


class AdoptionService:
    """Adoption workflow"""

    def __init__(self, repository: CompanionRepository, event_bus: EventBus):
        self._repo = repository
        self._bus = event_bus

    def adopt(
        self,
        owner_id: str,
        name: str,
        kind: CompanionKind | str,
        confirm_replace: bool = False,
        timeout: Optional[float] = None,
    ) -> Companion:
        """Adopt a new companion for owner_id.

        1. Validate name/kind (ValidationError, nothing touched)
        2. Look up the current companion
        3. If present: require confirm_replace, then delete it.
           A failed delete is logged and tolerated.
           If the old companion is still stored, creation then fails with
           RetirementFailedError.
        4. Create the new companion
        Returns: the created Companion

        Creation failure after a successful delete leaves the owner without a
        companion; the error is propagated, no automatic re-creation.
        """
        cleaned_name = validate_name(name)
        companion_kind = validate_kind(kind)

        if timeout is None:
            timeout = settings.WORKFLOW_TIMEOUT_SECONDS
        deadline = Deadline.optional(timeout)

        retired = False
        existing = self._repo.find_by_owner(owner_id)
        if existing is not None:
            if not confirm_replace:
                raise ReplacementNotConfirmedError(
                    "Adopting a new companion replaces the current one",
                    detail=existing.id,
                )
            retired = self._retire(existing, deadline)

        try:
            companion = self._repo.create(
                owner_id, cleaned_name, companion_kind, deadline
            )
        except ConflictError as exc:
            if existing is not None and not retired:
                raise RetirementFailedError(
                    "Previous companion could not be retired", detail=existing.id
                ) from exc
            raise

        self._bus.emit(
            DomainEvent(
                event_type=EventTypes.COMPANION_ADOPTED,
                data={
                    "companion_id": companion.id,
                    "owner_id": owner_id,
                    "kind": companion.kind.value,
                    "replaced_id": existing.id if existing is not None else None,
                },
                source="adoption_service",
            )
        )
        logger.info(
            "Companion adopted: owner=%s, companion=%s, kind=%s",
            owner_id,
            companion.id,
            companion.kind.value,
        )
        return companion

    def _retire(self, companion: Companion, deadline: Optional[Deadline]) -> bool:
        """Delete the previous companion. False when the delete itself failed."""
        try:
            deleted = self._repo.delete(companion.id, deadline)
        except CompanionError as exc:
            logger.warning(
                "Retiring companion %s failed, continuing adoption: %s",
                companion.id,
                exc,
            )
            return False

        if not deleted:
            return True

        self._bus.emit(
            DomainEvent(
                event_type=EventTypes.COMPANION_RETIRED,
                data={"companion_id": companion.id, "owner_id": companion.owner_id},
                source="adoption_service",
            )
        )
        logger.info(
            "Companion retired: owner=%s, companion=%s", companion.owner_id, companion.id
        )
        return True
