"""Spin randomization and angle-to-segment resolution."""

import itertools
import math
import random
from dataclasses import dataclass, field
from typing import Optional

from injury_wheel.wheel.segments import FULL_TURN

MIN_EXTRA_TURNS = 5
MAX_EXTRA_TURNS = 9

_session_ids = itertools.count(1)


def next_target(
    previous_rotation: float,
    rng: Optional[random.Random] = None,
    min_turns: int = MIN_EXTRA_TURNS,
    max_turns: int = MAX_EXTRA_TURNS,
) -> float:
    """Return the cumulative rotation the wheel should spin to.

    Adds a whole number of extra turns drawn uniformly from
    ``[min_turns, max_turns]`` plus an offset drawn uniformly from
    ``[0, 360)``. The offset is independent of segment boundaries, so every
    segment is equally likely.

    Args:
        previous_rotation: Cumulative rotation before this spin (degrees)
        rng: Random source; the module-level generator when omitted
        min_turns: Fewest extra full turns
        max_turns: Most extra full turns

    Returns:
        New cumulative rotation in degrees
    """
    if previous_rotation < 0:
        raise ValueError(f"Rotation must be non-negative, got {previous_rotation}")
    if min_turns < 1 or max_turns < min_turns:
        raise ValueError(f"Invalid turn range: [{min_turns}, {max_turns}]")

    source = rng or random
    extra_turns = source.randint(min_turns, max_turns)
    offset = source.random() * FULL_TURN
    return previous_rotation + extra_turns * FULL_TURN + offset


def resolve_segment(rotation: float, segment_count: int) -> int:
    """Map a cumulative rotation to the index of the segment under the pointer.

    The wheel turns clockwise under a fixed pointer at the top, so the
    angle read at the pointer runs backwards relative to the rotation.
    """
    if segment_count < 1:
        raise ValueError(f"segment_count must be >= 1, got {segment_count}")

    normalized = rotation % FULL_TURN
    from_pointer = (FULL_TURN - normalized) % FULL_TURN
    index = math.floor(from_pointer / (FULL_TURN / segment_count))

    # Float rounding at an exact boundary can land on segment_count
    return min(max(index, 0), segment_count - 1)


@dataclass
class SpinSession:
    """One spin in flight, from acceptance to displayed outcome."""

    start_rotation: float
    target_rotation: float
    id: int = field(default_factory=lambda: next(_session_ids))
    resolved: bool = False
    segment_index: Optional[int] = None
    category: Optional[str] = None

    @property
    def distance(self) -> float:
        """Degrees travelled by this spin."""
        return self.target_rotation - self.start_rotation

    def resolve(self, segment_index: int, category: str) -> None:
        if self.resolved:
            raise RuntimeError(f"Spin session {self.id} already resolved")
        self.segment_index = segment_index
        self.category = category
        self.resolved = True
