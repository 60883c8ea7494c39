"""Input validation for companion fields.

Raises ValidationError, never mutates anything.
"""

from src.core.companion.models import CompanionKind
from src.core.companion.progression import LEVEL_THRESHOLD
from src.core.errors import ValidationError

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50

HEALTH_MIN = 0
HEALTH_MAX = 100
LEVEL_MIN = 1


def validate_name(name: str | None) -> str:
    """Strip and check the display name. Returns the cleaned name."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Companion name is required")
    if len(cleaned) < NAME_MIN_LENGTH:
        raise ValidationError(
            f"Companion name must be at least {NAME_MIN_LENGTH} characters",
            detail=cleaned,
        )
    if len(cleaned) > NAME_MAX_LENGTH:
        raise ValidationError(
            f"Companion name must be at most {NAME_MAX_LENGTH} characters"
        )
    return cleaned


def validate_kind(kind: CompanionKind | str) -> CompanionKind:
    try:
        return CompanionKind(kind)
    except ValueError:
        allowed = ", ".join(k.value for k in CompanionKind)
        raise ValidationError(
            f"Unknown companion kind: {kind}", detail=f"allowed: {allowed}"
        ) from None


def validate_health(health: int) -> int:
    if not HEALTH_MIN <= health <= HEALTH_MAX:
        raise ValidationError(
            f"Health must be between {HEALTH_MIN} and {HEALTH_MAX}", detail=str(health)
        )
    return health


def validate_level(level: int) -> int:
    if level < LEVEL_MIN:
        raise ValidationError(f"Level must be at least {LEVEL_MIN}", detail=str(level))
    return level


def validate_experience(experience: int) -> int:
    """Experience is a remainder: 0 <= experience < LEVEL_THRESHOLD."""
    if not 0 <= experience < LEVEL_THRESHOLD:
        raise ValidationError(
            f"Experience must be between 0 and {LEVEL_THRESHOLD - 1}",
            detail=str(experience),
        )
    return experience


def clamp_health(value: int) -> int:
    """0 ~ 100 clamp."""
    return max(HEALTH_MIN, min(HEALTH_MAX, value))
