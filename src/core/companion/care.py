"""Care action rules.

Shared by CareService (authoritative) and OptimisticUpdateCoordinator
(projection) so both compute the same result.
"""

from dataclasses import replace

from src.core.companion.models import Companion
from src.core.companion.progression import apply_experience
from src.core.companion.validation import HEALTH_MAX, clamp_health

CARE_HEALTH_GAIN = 20
CARE_EXPERIENCE_GAIN = 10


def can_care(companion: Companion) -> bool:
    """A companion at full health is not eligible for care."""
    return companion.health < HEALTH_MAX


def apply_care(companion: Companion) -> Companion:
    """Return the companion after one care action.

    health +20 (capped at 100), experience +10 with level rollover.
    Full-health companions are returned as-is.
    """
    if not can_care(companion):
        return companion

    level, experience = apply_experience(
        companion.level, companion.experience, CARE_EXPERIENCE_GAIN
    )
    return replace(
        companion,
        health=clamp_health(companion.health + CARE_HEALTH_GAIN),
        level=level,
        experience=experience,
    )
