"""Companion editing and administration.

Owners may rename their companion or change its kind. Admins may also
edit stats, nudge health, delete companions and list all of them.
"""

import logging
from typing import Optional

from src.config import settings
from src.core.companion.models import Actor, Companion, CompanionKind
from src.core.companion.validation import (
    clamp_health,
    validate_experience,
    validate_health,
    validate_kind,
    validate_level,
    validate_name,
)
from src.core.deadline import Deadline
from src.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from src.core.event_bus import DomainEvent, EventBus
from src.core.event_types import EventTypes
from src.db.repository import CompanionRepository

logger = logging.getLogger(__name__)


class CompanionAdminService:
    """Owner edits + admin console operations"""

    def __init__(self, repository: CompanionRepository, event_bus: EventBus):
        self._repo = repository
        self._bus = event_bus

    # === reads ===

    def get_for_owner(self, owner_id: str) -> Companion:
        companion = self._repo.find_by_owner(owner_id)
        if companion is None:
            raise NotFoundError(f"Owner has no companion: {owner_id}")
        return companion

    def list_companions(self, actor: Actor) -> list[Companion]:
        """All companions, most recently updated first. Admin only."""
        self._require_admin(actor, "list companions")
        return self._repo.list_all()

    # === edits ===

    def edit(
        self,
        actor: Actor,
        companion_id: str,
        name: Optional[str] = None,
        kind: Optional[CompanionKind | str] = None,
        health: Optional[int] = None,
        level: Optional[int] = None,
        experience: Optional[int] = None,
        expected_version: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> Companion:
        """Profile and stat edit in a single write.

        name/kind: owner or admin. health/level/experience: admin only.
        Every field is validated before anything is written, so a rejected
        edit leaves the stored companion untouched. Stats are validated,
        not clamped; experience must already be a remainder (< LEVEL_THRESHOLD).
        """
        deadline = self._deadline(timeout)
        has_stats = any(v is not None for v in (health, level, experience))
        if has_stats:
            self._require_admin(actor, "edit stats")

        companion = self._load(companion_id)
        if not actor.is_admin and actor.user_id != companion.owner_id:
            raise PermissionDeniedError(
                "Only the owner or an admin may edit this companion",
                detail=companion_id,
            )

        fields: dict = {}
        if name is not None:
            fields["name"] = validate_name(name)
        if kind is not None:
            fields["kind"] = validate_kind(kind)
        if health is not None:
            fields["health"] = validate_health(health)
        if level is not None:
            fields["level"] = validate_level(level)
        if experience is not None:
            fields["experience"] = validate_experience(experience)
        if not fields:
            raise ValidationError("Nothing to update", detail=companion_id)

        return self._write(actor, companion, fields, deadline, expected_version)

    def rename(
        self,
        actor: Actor,
        companion_id: str,
        name: Optional[str] = None,
        kind: Optional[CompanionKind | str] = None,
        expected_version: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> Companion:
        """Change name and/or kind. Owner or admin."""
        return self.edit(
            actor,
            companion_id,
            name=name,
            kind=kind,
            expected_version=expected_version,
            timeout=timeout,
        )

    def edit_stats(
        self,
        actor: Actor,
        companion_id: str,
        health: Optional[int] = None,
        level: Optional[int] = None,
        experience: Optional[int] = None,
        expected_version: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> Companion:
        """Direct stat override. Admin only."""
        self._require_admin(actor, "edit stats")
        return self.edit(
            actor,
            companion_id,
            health=health,
            level=level,
            experience=experience,
            expected_version=expected_version,
            timeout=timeout,
        )

    def adjust_health(
        self,
        actor: Actor,
        companion_id: str,
        delta: int,
        timeout: Optional[float] = None,
    ) -> Companion:
        """Add delta to health, clamped to 0 ~ 100. Admin only."""
        deadline = self._deadline(timeout)
        self._require_admin(actor, "adjust health")
        companion = self._load(companion_id)
        new_health = clamp_health(companion.health + delta)
        return self._write(
            actor,
            companion,
            {"health": new_health},
            deadline,
            expected_version=companion.version,
        )

    def delete(
        self, actor: Actor, companion_id: str, timeout: Optional[float] = None
    ) -> None:
        """Admin deletion. NotFoundError when the companion is already gone."""
        deadline = self._deadline(timeout)
        self._require_admin(actor, "delete companions")
        companion = self._load(companion_id)
        deleted = self._repo.delete(companion_id, deadline)
        if not deleted:
            raise NotFoundError(f"Companion not found: {companion_id}")

        self._bus.emit(
            DomainEvent(
                event_type=EventTypes.COMPANION_DELETED,
                data={
                    "companion_id": companion_id,
                    "owner_id": companion.owner_id,
                    "actor_id": actor.user_id,
                },
                source="companion_admin_service",
            )
        )
        logger.info("Companion deleted by %s: %s", actor.user_id, companion_id)

    # === internals ===

    def _load(self, companion_id: str) -> Companion:
        companion = self._repo.get(companion_id)
        if companion is None:
            raise NotFoundError(f"Companion not found: {companion_id}")
        return companion

    def _write(
        self,
        actor: Actor,
        companion: Companion,
        fields: dict,
        deadline: Optional[Deadline],
        expected_version: Optional[int] = None,
    ) -> Companion:
        updated = self._repo.update(
            companion.id,
            fields,
            expected_version=expected_version,
            deadline=deadline,
        )
        self._bus.emit(
            DomainEvent(
                event_type=EventTypes.COMPANION_UPDATED,
                data={
                    "companion_id": updated.id,
                    "owner_id": updated.owner_id,
                    "actor_id": actor.user_id,
                    "fields": sorted(fields),
                },
                source="companion_admin_service",
            )
        )
        logger.info(
            "Companion updated by %s: %s (%s)",
            actor.user_id,
            updated.id,
            ", ".join(sorted(fields)),
        )
        return updated

    @staticmethod
    def _deadline(timeout: Optional[float]) -> Optional[Deadline]:
        if timeout is None:
            timeout = settings.WORKFLOW_TIMEOUT_SECONDS
        return Deadline.optional(timeout)

    @staticmethod
    def _require_admin(actor: Actor, action: str) -> None:
        if not actor.is_admin:
            raise PermissionDeniedError(f"Only admins may {action}", detail=actor.user_id)
