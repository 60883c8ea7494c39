"""Display helpers for the companion page.

Health labels, appearance colors per level and the low-health warning.
"""

from src.core.companion.models import Companion
from src.core.companion.progression import experience_progress

# Appearance changes with level; display assumes a 5-level ceiling
MAX_DISPLAY_LEVEL = 5

APPEARANCE_BY_LEVEL: dict[int, str] = {
    1: "blue",
    2: "green",
    3: "yellow",
    4: "gold",
    5: "gold",
}

# (lower bound, label), checked top-down
HEALTH_STATUS_TIERS: list[tuple[int, str]] = [
    (80, "very_healthy"),
    (60, "healthy"),
    (40, "unwell"),
    (20, "sick"),
]

LOW_HEALTH_WARNING = 30


def health_status(health: int) -> str:
    for lower, label in HEALTH_STATUS_TIERS:
        if health >= lower:
            return label
    return "very_sick"


def needs_attention(health: int) -> bool:
    """Shown as the 'your companion is sick' warning."""
    return health < LOW_HEALTH_WARNING


def display_level(level: int) -> int:
    return max(1, min(level, MAX_DISPLAY_LEVEL))


def appearance_color(level: int) -> str:
    return APPEARANCE_BY_LEVEL[display_level(level)]


def describe(companion: Companion) -> dict:
    """Derived view fields for API responses."""
    return {
        "health_status": health_status(companion.health),
        "needs_attention": needs_attention(companion.health),
        "appearance": appearance_color(companion.level),
        "display_level": display_level(companion.level),
        "experience_progress": experience_progress(companion.experience),
    }
