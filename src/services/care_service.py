"""Care Service — the care action.

health +20 (max 100), experience +10 with level rollover.
Writes are compare-and-swap on the companion version, so two concurrent
care calls cannot both apply on the same starting state: the second one
fails with ConflictError and may be retried after re-reading.
"""

import logging
from typing import Optional

from src.config import settings
from src.core.companion.care import CARE_EXPERIENCE_GAIN, apply_care, can_care
from src.core.companion.models import Companion
from src.core.deadline import Deadline
from src.core.errors import NotFoundError
from src.core.event_bus import DomainEvent, EventBus
from src.core.event_types import EventTypes
from src.db.repository import CompanionRepository

logger = logging.getLogger(__name__)


class CareService:
    """Care workflow"""

    def __init__(self, repository: CompanionRepository, event_bus: EventBus):
        self._repo = repository
        self._bus = event_bus

    def care(self, companion_id: str, timeout: Optional[float] = None) -> Companion:
        """Apply one care action.

        Full-health companions are returned unchanged without a write.
        Raises NotFoundError, ConflictError (stale version), StorageError.
        """
        deadline = self._deadline(timeout)
        current = self._repo.get(companion_id)
        if current is None:
            raise NotFoundError(f"Companion not found: {companion_id}")
        return self._care(current, deadline)

    def care_for_owner(self, owner_id: str, timeout: Optional[float] = None) -> Companion:
        """care() on the owner's companion."""
        deadline = self._deadline(timeout)
        current = self._repo.find_by_owner(owner_id)
        if current is None:
            raise NotFoundError(f"Owner has no companion: {owner_id}")
        return self._care(current, deadline)

    def _care(self, current: Companion, deadline: Optional[Deadline]) -> Companion:
        if not can_care(current):
            logger.debug("Care skipped, full health: %s", current.id)
            return current

        cared = apply_care(current)
        updated = self._repo.update(
            current.id,
            {
                "health": cared.health,
                "level": cared.level,
                "experience": cared.experience,
            },
            expected_version=current.version,
            deadline=deadline,
        )

        self._bus.emit(
            DomainEvent(
                event_type=EventTypes.COMPANION_CARED,
                data={
                    "companion_id": updated.id,
                    "owner_id": updated.owner_id,
                    "health": updated.health,
                    "experience_gain": CARE_EXPERIENCE_GAIN,
                },
                source="care_service",
            )
        )

        if updated.level > current.level:
            self._bus.emit(
                DomainEvent(
                    event_type=EventTypes.COMPANION_LEVELED_UP,
                    data={
                        "companion_id": updated.id,
                        "owner_id": updated.owner_id,
                        "from_level": current.level,
                        "to_level": updated.level,
                    },
                    source="care_service",
                )
            )
            logger.info(
                "Companion leveled up: %s, %d → %d",
                updated.id,
                current.level,
                updated.level,
            )

        logger.info(
            "Companion cared: %s, health=%d, level=%d, exp=%d",
            updated.id,
            updated.health,
            updated.level,
            updated.experience,
        )
        return updated

    @staticmethod
    def _deadline(timeout: Optional[float]) -> Optional[Deadline]:
        if timeout is None:
            timeout = settings.WORKFLOW_TIMEOUT_SECONDS
        return Deadline.optional(timeout)
