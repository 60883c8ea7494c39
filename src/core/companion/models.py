"""Companion domain models (DB independent)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class CompanionKind(str, Enum):
    FISH = "fish"
    FROG = "frog"


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class Actor:
    """Caller identity as supplied by the identity provider. Trusted as given."""

    user_id: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass
class Companion:
    """A user's river companion.

    experience is always stored in remainder form (< LEVEL_THRESHOLD).
    """

    id: str
    owner_id: str
    name: str
    kind: CompanionKind

    # Progression
    health: int = 0  # 0..100
    level: int = 1
    experience: int = 0

    # Compare-and-swap counter, bumped by every update
    version: int = 1

    # Meta
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
