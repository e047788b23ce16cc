"""Easing functions for the spin animation.

All functions take a normalized time t (0.0 to 1.0) and return a normalized value.
"""

from enum import Enum, auto
from typing import Callable

# Type alias for easing functions
EasingFunc = Callable[[float], float]


class Easing(Enum):
    """Available easing function types."""

    LINEAR = auto()
    EASE_OUT_CUBIC = auto()
    EASE_IN_OUT_CUBIC = auto()

    # CSS "ease", the curve the wheel decelerates along
    WHEEL = auto()


def linear(t: float) -> float:
    """Linear interpolation (no easing)."""
    return t


def ease_out_cubic(t: float) -> float:
    """Decelerate to zero velocity (cubic)."""
    return 1 - pow(1 - t, 3)


def ease_in_out_cubic(t: float) -> float:
    """Accelerate then decelerate (cubic)."""
    if t < 0.5:
        return 4 * t * t * t
    return 1 - pow(-2 * t + 2, 3) / 2


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> EasingFunc:
    """Build an easing function matching CSS ``cubic-bezier(x1, y1, x2, y2)``.

    The curve runs from (0, 0) to (1, 1). For a given time t the curve
    parameter is found by Newton iteration on x(s) = t, falling back to
    bisection when the slope is too flat.
    """
    if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
        raise ValueError("cubic-bezier x control points must be within [0, 1]")

    cx = 3 * x1
    bx = 3 * (x2 - x1) - cx
    ax = 1 - cx - bx
    cy = 3 * y1
    by = 3 * (y2 - y1) - cy
    ay = 1 - cy - by

    def sample_x(s: float) -> float:
        return ((ax * s + bx) * s + cx) * s

    def sample_y(s: float) -> float:
        return ((ay * s + by) * s + cy) * s

    def slope_x(s: float) -> float:
        return (3 * ax * s + 2 * bx) * s + cx

    def solve(t: float) -> float:
        s = t
        for _ in range(8):
            error = sample_x(s) - t
            if abs(error) < 1e-7:
                return s
            slope = slope_x(s)
            if abs(slope) < 1e-6:
                break
            s -= error / slope

        lo, hi = 0.0, 1.0
        s = t
        while hi - lo > 1e-7:
            x = sample_x(s)
            if abs(x - t) < 1e-7:
                return s
            if x < t:
                lo = s
            else:
                hi = s
            s = (lo + hi) / 2
        return s

    def ease(t: float) -> float:
        if t <= 0.0:
            return 0.0
        if t >= 1.0:
            return 1.0
        return sample_y(solve(t))

    return ease


wheel_ease = cubic_bezier(0.25, 0.1, 0.25, 1.0)


_EASING_FUNCTIONS: dict[Easing, EasingFunc] = {
    Easing.LINEAR: linear,
    Easing.EASE_OUT_CUBIC: ease_out_cubic,
    Easing.EASE_IN_OUT_CUBIC: ease_in_out_cubic,
    Easing.WHEEL: wheel_ease,
}


def get_easing(easing: Easing | str) -> EasingFunc:
    """Get an easing function by enum or name.

    Args:
        easing: Easing enum value or string name (e.g., "ease_out_cubic")

    Returns:
        The easing function

    Raises:
        ValueError: If easing name is not recognized
    """
    if isinstance(easing, str):
        try:
            easing = Easing[easing.upper()]
        except KeyError:
            raise ValueError(f"Unknown easing function: {easing}") from None
    return _EASING_FUNCTIONS[easing]


def interpolate(start: float, end: float, t: float, easing: Easing | str = Easing.LINEAR) -> float:
    """Interpolate between two values with easing."""
    return start + (end - start) * get_easing(easing)(t)
