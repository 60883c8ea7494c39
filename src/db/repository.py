"""Companion repository — boundary to the persistent store.

Services talk to CompanionRepository only. SqlCompanionRepository is the
SQLAlchemy implementation; every SQLAlchemyError leaves the session rolled
back and reaches the caller as StorageError.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.companion.models import Companion, CompanionKind
from src.core.companion.validation import (
    validate_experience,
    validate_health,
    validate_kind,
    validate_level,
    validate_name,
)
from src.core.deadline import Deadline
from src.core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from src.db.models import CompanionModel

logger = logging.getLogger(__name__)

# Fields a caller may change through update(). id/owner_id are immutable.
UPDATABLE_FIELDS = ("name", "kind", "health", "level", "experience")


def _utcnow() -> datetime:
    """Naive UTC timestamp (stored without tz info)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CompanionRepository(ABC):
    """Persisted companions keyed by owning user."""

    @abstractmethod
    def find_by_owner(self, owner_id: str) -> Optional[Companion]:
        """Owner's companion, or None. Absence is not an error."""
        ...

    @abstractmethod
    def get(self, companion_id: str) -> Optional[Companion]:
        ...

    @abstractmethod
    def list_all(self) -> list[Companion]:
        """All companions, most recently updated first."""
        ...

    @abstractmethod
    def create(
        self,
        owner_id: str,
        name: str,
        kind: CompanionKind | str,
        deadline: Optional[Deadline] = None,
    ) -> Companion:
        ...

    @abstractmethod
    def update(
        self,
        companion_id: str,
        fields: dict[str, Any],
        expected_version: Optional[int] = None,
        deadline: Optional[Deadline] = None,
    ) -> Companion:
        """Apply a partial update, refresh updated_at and bump version.

        With expected_version set, the write only succeeds when the stored
        version still matches; otherwise ConflictError.
        """
        ...

    @abstractmethod
    def delete(self, companion_id: str, deadline: Optional[Deadline] = None) -> bool:
        """Returns False when the companion did not exist."""
        ...


class SqlCompanionRepository(CompanionRepository):
    def __init__(self, db: Session) -> None:
        self._db = db

    # === reads ===

    def find_by_owner(self, owner_id: str) -> Optional[Companion]:
        try:
            orm = (
                self._db.query(CompanionModel)
                .populate_existing()
                .filter(CompanionModel.owner_id == owner_id)
                .first()
            )
        except SQLAlchemyError as exc:
            raise self._storage_error("find_by_owner", exc) from exc
        return self._to_core(orm) if orm is not None else None

    def get(self, companion_id: str) -> Optional[Companion]:
        orm = self._get_orm(companion_id)
        return self._to_core(orm) if orm is not None else None

    def list_all(self) -> list[Companion]:
        try:
            rows = (
                self._db.query(CompanionModel)
                .order_by(CompanionModel.updated_at.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise self._storage_error("list_all", exc) from exc
        return [self._to_core(orm) for orm in rows]

    # === writes ===

    def create(
        self,
        owner_id: str,
        name: str,
        kind: CompanionKind | str,
        deadline: Optional[Deadline] = None,
    ) -> Companion:
        cleaned_name = validate_name(name)
        companion_kind = validate_kind(kind)

        if self.find_by_owner(owner_id) is not None:
            raise ConflictError(f"Owner already has a companion: {owner_id}")

        now = _utcnow()
        orm = CompanionModel(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=cleaned_name,
            kind=companion_kind.value,
            health=0,
            level=1,
            experience=0,
            version=1,
            created_at=now,
            updated_at=now,
        )
        self._db.add(orm)
        self._commit("create", deadline)

        logger.info("Companion created: id=%s, owner=%s", orm.id, owner_id)
        return self._to_core(orm)

    def update(
        self,
        companion_id: str,
        fields: dict[str, Any],
        expected_version: Optional[int] = None,
        deadline: Optional[Deadline] = None,
    ) -> Companion:
        values = self._clean_fields(fields)
        values["version"] = CompanionModel.version + 1
        values["updated_at"] = _utcnow()

        stmt = update(CompanionModel).where(CompanionModel.id == companion_id)
        if expected_version is not None:
            stmt = stmt.where(CompanionModel.version == expected_version)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        try:
            result = self._db.execute(stmt)
        except SQLAlchemyError as exc:
            raise self._storage_error("update", exc) from exc

        if result.rowcount == 0:
            exists = self._get_orm(companion_id) is not None
            self._db.rollback()
            if exists:
                raise ConflictError(
                    f"Companion was modified concurrently: {companion_id}",
                    detail=f"expected_version={expected_version}",
                )
            raise NotFoundError(f"Companion not found: {companion_id}")

        self._commit("update", deadline)

        updated = self.get(companion_id)
        if updated is None:
            raise NotFoundError(f"Companion not found: {companion_id}")
        return updated

    def delete(self, companion_id: str, deadline: Optional[Deadline] = None) -> bool:
        orm = self._get_orm(companion_id)
        if orm is None:
            logger.info("Delete skipped, companion not found: %s", companion_id)
            return False
        self._db.delete(orm)
        self._commit("delete", deadline)
        logger.info("Companion deleted: %s", companion_id)
        return True

    # === internals ===

    def _get_orm(self, companion_id: str) -> Optional[CompanionModel]:
        try:
            return (
                self._db.query(CompanionModel)
                .populate_existing()
                .filter(CompanionModel.id == companion_id)
                .first()
            )
        except SQLAlchemyError as exc:
            raise self._storage_error("get", exc) from exc

    def _commit(self, operation: str, deadline: Optional[Deadline]) -> None:
        """Commit, or roll back when the deadline passed or the store failed."""
        if deadline is not None and deadline.expired:
            self._db.rollback()
            logger.warning("Companion %s abandoned: deadline exceeded", operation)
            deadline.check(operation)
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            raise ConflictError(
                f"Companion {operation} violates a uniqueness constraint",
                detail=str(exc.orig),
            ) from exc
        except SQLAlchemyError as exc:
            raise self._storage_error(operation, exc) from exc

    def _storage_error(self, operation: str, exc: SQLAlchemyError) -> StorageError:
        try:
            self._db.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed after %s error", operation)
        logger.error("Companion %s failed: %s", operation, exc)
        return StorageError(f"Companion {operation} failed", detail=str(exc))

    @staticmethod
    def _clean_fields(fields: dict[str, Any]) -> dict[str, Any]:
        """Validate a partial update. Keeps persisted invariants intact."""
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            )

        values: dict[str, Any] = {}
        if "name" in fields:
            values["name"] = validate_name(fields["name"])
        if "kind" in fields:
            values["kind"] = validate_kind(fields["kind"]).value
        if "health" in fields:
            values["health"] = validate_health(fields["health"])
        if "level" in fields:
            values["level"] = validate_level(fields["level"])
        if "experience" in fields:
            values["experience"] = validate_experience(fields["experience"])
        return values

    @staticmethod
    def _to_core(orm: CompanionModel) -> Companion:
        """ORM → Core."""
        return Companion(
            id=orm.id,
            owner_id=orm.owner_id,
            name=orm.name,
            kind=CompanionKind(orm.kind),
            health=orm.health,
            level=orm.level,
            experience=orm.experience,
            version=orm.version,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )
