"""Holder for the most recent injury report."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from injury_wheel.ai.injury_report import OutcomeRecord

logger = logging.getLogger(__name__)


class ResultStore:
    """Keeps the latest outcome record for display.

    Records are frozen, so the store only ever swaps the reference.
    """

    def __init__(self) -> None:
        self._current: OutcomeRecord | None = None
        self._revision = 0

    @property
    def current(self) -> OutcomeRecord | None:
        return self._current

    @property
    def revision(self) -> int:
        """Number of times the record has been replaced."""
        return self._revision

    def replace(self, record: OutcomeRecord) -> None:
        self._current = record
        self._revision += 1
        logger.debug(f"Result store updated (revision {self._revision}): {record.category}")

    def clear(self) -> None:
        self._current = None
