"""Experience and level rollover.

All pure functions, no external dependencies.
"""

LEVEL_THRESHOLD = 500  # experience needed per level


def apply_experience(
    level: int,
    experience: int,
    gain: int,
    threshold: int = LEVEL_THRESHOLD,
) -> tuple[int, int]:
    """Add gain to (level, experience) and roll over full levels.

    Callers validate gain >= 0. A gain of 0 returns the input unchanged.

    Returns: (new level, experience remainder)
    """
    total = experience + gain
    new_level = level
    while total >= threshold:
        new_level += 1
        total -= threshold
    return new_level, total


def experience_progress(experience: int, threshold: int = LEVEL_THRESHOLD) -> float:
    """Fraction of the current level completed, 0.0 ~ 1.0."""
    return max(0.0, min(1.0, experience / threshold))
