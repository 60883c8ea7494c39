"""Experience rollover tests."""

import pytest

from src.core.companion.progression import (
    LEVEL_THRESHOLD,
    apply_experience,
    experience_progress,
)


class TestApplyExperience:
    def test_threshold_is_500(self) -> None:
        assert LEVEL_THRESHOLD == 500

    def test_zero_gain_is_noop(self) -> None:
        assert apply_experience(3, 120, 0) == (3, 120)

    def test_gain_below_threshold(self) -> None:
        assert apply_experience(1, 0, 10) == (1, 10)

    def test_exact_level_up(self) -> None:
        """490 + 10 → next level with nothing left over"""
        assert apply_experience(1, 490, 10) == (2, 0)

    def test_multi_level_gain(self) -> None:
        assert apply_experience(1, 0, 1050) == (3, 50)

    def test_carries_remainder(self) -> None:
        assert apply_experience(2, 495, 10) == (3, 5)

    def test_level_is_not_capped(self) -> None:
        assert apply_experience(5, 499, 1) == (6, 0)

    def test_custom_threshold(self) -> None:
        assert apply_experience(1, 40, 10, threshold=50) == (2, 0)

    @pytest.mark.parametrize("level", [1, 2, 5])
    @pytest.mark.parametrize("experience", [0, 1, 250, 499])
    @pytest.mark.parametrize("gain", [0, 1, 10, 499, 500, 501, 2500])
    def test_remainder_below_threshold_and_level_monotonic(
        self, level: int, experience: int, gain: int
    ) -> None:
        new_level, remainder = apply_experience(level, experience, gain)
        assert 0 <= remainder < LEVEL_THRESHOLD
        assert new_level >= level
        # nothing is lost in the rollover
        assert (new_level - level) * LEVEL_THRESHOLD + remainder == experience + gain


class TestExperienceProgress:
    def test_empty(self) -> None:
        assert experience_progress(0) == 0.0

    def test_half(self) -> None:
        assert experience_progress(250) == pytest.approx(0.5)

    def test_clamped_to_one(self) -> None:
        assert experience_progress(900) == 1.0
