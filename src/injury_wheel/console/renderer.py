"""Terminal front end for the injury wheel.

Listens to the controller's events and draws the spin, the "consulting
medical staff" notice and the final injury report card.
"""

import asyncio
import logging
import sys
import textwrap
from typing import Callable, List, Optional, TextIO

from injury_wheel.ai.injury_report import OutcomeRecord
from injury_wheel.animation.spin import SpinAnimation
from injury_wheel.core.events import Event, EventBus, EventType
from injury_wheel.wheel.segments import CategorySet
from injury_wheel.wheel.spin import resolve_segment

logger = logging.getLogger(__name__)

CARD_WIDTH = 60
FRAME_INTERVAL = 0.1  # seconds between ticker frames


def _boxed(lines: List[str], width: int) -> List[str]:
    inner = width - 4
    border = "+" + "-" * (width - 2) + "+"
    return [border] + [f"| {line:<{inner}} |" for line in lines] + [border]


def _wrap(text: str, width: int, indent: str = "") -> List[str]:
    return textwrap.wrap(
        text,
        width=width,
        initial_indent=indent,
        subsequent_indent=" " * len(indent),
    ) or [indent.rstrip()]


def format_result_card(record: OutcomeRecord, width: int = CARD_WIDTH) -> str:
    """Render an injury report as a boxed text card."""
    inner = width - 4

    header = _boxed(["OFFICIAL STATEMENT - MAPLE LEAFS PR"], width)
    body: List[str] = []
    body += _wrap(record.player_alias.upper(), inner)
    body.append("")
    body += _wrap(record.timeline, inner, "Timeline: ")
    body += _wrap(record.diagnosis, inner, "Probable cause: ")
    body.append("")
    body += _wrap(f'"{record.coach_quote}"', inner)
    body += _wrap("- Head Coach (declining to elaborate)", inner, "  ")
    body.append("")
    body += _wrap(record.cap_implication, inner, "$ ")

    return "\n".join(header + _boxed(body, width)[1:])


class ConsoleRenderer:
    """Draws the wheel's progress to a text stream."""

    def __init__(
        self,
        event_bus: EventBus,
        categories: CategorySet,
        stream: Optional[TextIO] = None,
        animate: bool = True,
        width: int = CARD_WIDTH,
    ):
        self._categories = categories
        self._stream = stream or sys.stdout
        self._animate = animate
        self._width = width
        self._ticker_task: Optional[asyncio.Task] = None

        self._unsubscribers: List[Callable[[], None]] = [
            event_bus.subscribe(EventType.SPIN_STARTED, self._on_spin_started),
            event_bus.subscribe(EventType.SPIN_REJECTED, self._on_spin_rejected),
            event_bus.subscribe(EventType.SPIN_RESOLVED, self._on_spin_resolved),
            event_bus.subscribe(EventType.OUTCOME_READY, self._on_outcome_ready),
        ]

    def close(self) -> None:
        """Stop listening and stop any running ticker."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._stop_ticker()

    def _write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()

    def _on_spin_started(self, event: Event) -> None:
        session = event.data["session"]
        self._write("\nSPINNING...\n")

        if not self._animate:
            return
        animation = SpinAnimation(
            start_rotation=session.start_rotation,
            target_rotation=session.target_rotation,
            duration_ms=event.data.get("duration_ms", 0),
        )
        self._ticker_task = asyncio.get_running_loop().create_task(self._run_ticker(animation))

    async def _run_ticker(self, animation: SpinAnimation) -> None:
        """Show the label passing under the pointer until the wheel stops."""
        loop = asyncio.get_running_loop()
        started = loop.time()
        while True:
            elapsed_ms = (loop.time() - started) * 1000
            rotation = animation.rotation_at(elapsed_ms)
            label = self._categories[resolve_segment(rotation, len(self._categories))]
            self._write(f"\r  > {label:<30}")
            if animation.is_finished(elapsed_ms):
                return
            await asyncio.sleep(FRAME_INTERVAL)

    def _stop_ticker(self) -> None:
        if self._ticker_task is not None and not self._ticker_task.done():
            self._ticker_task.cancel()
        self._ticker_task = None

    def _on_spin_rejected(self, event: Event) -> None:
        self._write("The wheel is still going. Wait for the medical staff.\n")

    def _on_spin_resolved(self, event: Event) -> None:
        self._stop_ticker()
        self._write(f"\r  > {event.data['category']:<30}\n")
        self._write("CONSULTING MEDICAL STAFF...\n")

    def _on_outcome_ready(self, event: Event) -> None:
        record: OutcomeRecord = event.data["record"]
        if event.data.get("failure") is not None:
            logger.debug(f"Showing fallback report ({event.data['failure'].value})")
        self._write(format_result_card(record, self._width) + "\n")
