"""Animation module for the injury wheel."""

from injury_wheel.animation.easing import Easing, cubic_bezier, get_easing, interpolate
from injury_wheel.animation.spin import SpinAnimation

__all__ = [
    # Easing
    "Easing",
    "cubic_bezier",
    "get_easing",
    "interpolate",
    # Spin
    "SpinAnimation",
]
