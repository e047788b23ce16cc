"""Wheel position over the course of a spin."""

from dataclasses import dataclass

from injury_wheel.animation.easing import Easing, EasingFunc, get_easing


@dataclass(frozen=True)
class SpinAnimation:
    """Eased rotation from start to target over a fixed duration.

    At (or past) the end of the duration the rotation is exactly the
    target, so renderers stop on the segment the controller resolves.
    """

    start_rotation: float
    target_rotation: float
    duration_ms: float
    easing: Easing = Easing.WHEEL

    @property
    def _ease(self) -> EasingFunc:
        return get_easing(self.easing)

    def progress_at(self, elapsed_ms: float) -> float:
        """Normalized time, clamped to [0, 1]."""
        if self.duration_ms <= 0:
            return 1.0
        return min(max(elapsed_ms / self.duration_ms, 0.0), 1.0)

    def is_finished(self, elapsed_ms: float) -> bool:
        return self.progress_at(elapsed_ms) >= 1.0

    def rotation_at(self, elapsed_ms: float) -> float:
        progress = self.progress_at(elapsed_ms)
        if progress >= 1.0:
            return self.target_rotation
        distance = self.target_rotation - self.start_rotation
        return self.start_rotation + distance * self._ease(progress)
