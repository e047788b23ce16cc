"""Wheel segments (the injury "timelines").

Segment ``i`` covers ``[i * 360/N, (i + 1) * 360/N)`` degrees, measured
clockwise from the pointer at the top of the wheel.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from injury_wheel.settings import DEFAULT_SEGMENTS

FULL_TURN = 360.0


@dataclass(frozen=True)
class CategorySet:
    """Immutable, ordered set of wheel labels."""

    labels: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", tuple(self.labels))
        if not self.labels:
            raise ValueError("CategorySet needs at least one label")
        for label in self.labels:
            if not isinstance(label, str) or not label.strip():
                raise ValueError(f"Invalid segment label: {label!r}")

    @classmethod
    def from_labels(cls, labels: Sequence[str]) -> "CategorySet":
        return cls(tuple(labels))

    def __len__(self) -> int:
        return len(self.labels)

    def __getitem__(self, index: int) -> str:
        return self.labels[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels)

    @property
    def segment_angle(self) -> float:
        """Angular width of one segment in degrees."""
        return FULL_TURN / len(self.labels)

    def bounds(self, index: int) -> Tuple[float, float]:
        """Start/end angle of a segment, clockwise from the pointer."""
        if not 0 <= index < len(self.labels):
            raise IndexError(f"Segment index out of range: {index}")
        return index * self.segment_angle, (index + 1) * self.segment_angle

    def center(self, index: int) -> float:
        """Angle of the middle of a segment (where its label sits)."""
        start, end = self.bounds(index)
        return (start + end) / 2


DEFAULT_CATEGORIES = CategorySet.from_labels(DEFAULT_SEGMENTS)
