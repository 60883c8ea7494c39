"""Companion core package

Pure Python logic, DB independent.
"""

from src.core.companion.care import (
    CARE_EXPERIENCE_GAIN,
    CARE_HEALTH_GAIN,
    apply_care,
    can_care,
)
from src.core.companion.display import (
    appearance_color,
    describe,
    health_status,
    needs_attention,
)
from src.core.companion.models import Actor, Companion, CompanionKind, Role
from src.core.companion.progression import (
    LEVEL_THRESHOLD,
    apply_experience,
    experience_progress,
)
from src.core.companion.projection import (
    OptimisticUpdateCoordinator,
    preview_adoption,
    preview_care,
)

__all__ = [
    "Actor",
    "Companion",
    "CompanionKind",
    "Role",
    "LEVEL_THRESHOLD",
    "apply_experience",
    "experience_progress",
    "CARE_HEALTH_GAIN",
    "CARE_EXPERIENCE_GAIN",
    "apply_care",
    "can_care",
    "appearance_color",
    "describe",
    "health_status",
    "needs_attention",
    "OptimisticUpdateCoordinator",
    "preview_adoption",
    "preview_care",
]
