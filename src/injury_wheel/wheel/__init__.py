"""Wheel layout, spin math and the spin controller."""

from injury_wheel.wheel.segments import CategorySet, DEFAULT_CATEGORIES
from injury_wheel.wheel.spin import SpinSession, next_target, resolve_segment
from injury_wheel.wheel.controller import SpinController

__all__ = [
    "CategorySet",
    "DEFAULT_CATEGORIES",
    "SpinSession",
    "next_target",
    "resolve_segment",
    "SpinController",
]
