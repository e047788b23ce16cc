"""Spin controller: owns the wheel's rotation, state and latest result.

Cycle:
    1. spin() - accepted only while IDLE; picks the target rotation and
       schedules resolution after the spin duration
    2. resolution - segment under the pointer is resolved, report requested
    3. report stored - result store updated, then back to IDLE
"""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Optional, Protocol

from injury_wheel.ai.injury_report import FetchResult
from injury_wheel.core.events import Event, EventBus, EventType
from injury_wheel.core.results import ResultStore
from injury_wheel.core.state import SpinState, StateContext, StateMachine
from injury_wheel.wheel.segments import DEFAULT_CATEGORIES, CategorySet
from injury_wheel.wheel.spin import (
    MAX_EXTRA_TURNS,
    MIN_EXTRA_TURNS,
    SpinSession,
    next_target,
    resolve_segment,
)

logger = logging.getLogger(__name__)

SPIN_DURATION_MS = 3000

Sleep = Callable[[float], Awaitable[Any]]


class OutcomeFetcher(Protocol):
    async def fetch_result(self, category: str) -> FetchResult: ...


class SpinController:
    """Single owner of the spin cycle.

    Rotation, state and the result store are only written by the
    transitions below; renderers observe them through the event bus.
    """

    def __init__(
        self,
        fetcher: OutcomeFetcher,
        categories: CategorySet = DEFAULT_CATEGORIES,
        event_bus: Optional[EventBus] = None,
        spin_duration_ms: int = SPIN_DURATION_MS,
        min_extra_turns: int = MIN_EXTRA_TURNS,
        max_extra_turns: int = MAX_EXTRA_TURNS,
        rng: Optional[random.Random] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self._fetcher = fetcher
        self._categories = categories
        self._event_bus = event_bus or EventBus()
        self._spin_duration_ms = spin_duration_ms
        self._min_turns = min_extra_turns
        self._max_turns = max_extra_turns
        self._rng = rng
        self._sleep = sleep

        self._rotation = 0.0
        self._session: Optional[SpinSession] = None
        self._task: Optional[asyncio.Task] = None
        self.results = ResultStore()

        self._state_machine = StateMachine()
        self._state_machine.add_listener(self._on_state_change)

    @classmethod
    def from_settings(
        cls,
        wheel_settings,
        fetcher: OutcomeFetcher,
        event_bus: Optional[EventBus] = None,
    ) -> "SpinController":
        return cls(
            fetcher,
            categories=CategorySet.from_labels(wheel_settings.segments),
            event_bus=event_bus,
            spin_duration_ms=wheel_settings.spin_duration_ms,
            min_extra_turns=wheel_settings.min_extra_turns,
            max_extra_turns=wheel_settings.max_extra_turns,
        )

    @property
    def state(self) -> SpinState:
        return self._state_machine.state

    @property
    def rotation(self) -> float:
        """Cumulative rotation in degrees."""
        return self._rotation

    @property
    def categories(self) -> CategorySet:
        return self._categories

    @property
    def session(self) -> Optional[SpinSession]:
        """The spin in flight, if any."""
        return self._session

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def spin_duration_ms(self) -> int:
        return self._spin_duration_ms

    @property
    def can_spin(self) -> bool:
        return self._state_machine.is_idle

    def spin(self) -> Optional[SpinSession]:
        """Start a spin. Must be called from a running event loop.

        Returns:
            The new session, or None if a spin is already in flight
        """
        loop = asyncio.get_running_loop()

        if not self.can_spin:
            logger.debug(f"Spin rejected while {self.state.name}")
            self._emit(EventType.SPIN_REJECTED, state=self.state)
            return None

        target = next_target(
            self._rotation,
            rng=self._rng,
            min_turns=self._min_turns,
            max_turns=self._max_turns,
        )
        session = SpinSession(start_rotation=self._rotation, target_rotation=target)
        self._rotation = target
        self._session = session

        self._state_machine.transition(SpinState.SPINNING, session_id=session.id)
        logger.info(f"Spin {session.id}: {session.start_rotation:.1f} -> {target:.1f}")
        self._emit(
            EventType.SPIN_STARTED,
            session=session,
            duration_ms=self._spin_duration_ms,
        )

        self._task = loop.create_task(self._run_session(session))
        self._task.add_done_callback(self._on_task_done)
        return session

    async def wait_idle(self) -> None:
        """Wait for the spin in flight (if any) to finish."""
        if self._task is not None:
            await self._task

    async def run_spin(self):
        """Spin and wait for the report.

        Returns:
            The new OutcomeRecord, or None if the spin was rejected
        """
        if self.spin() is None:
            return None
        await self.wait_idle()
        return self.results.current

    async def _run_session(self, session: SpinSession) -> None:
        await self._sleep(self._spin_duration_ms / 1000)
        await self._on_spin_elapsed(session)

    async def _on_spin_elapsed(self, session: SpinSession) -> None:
        if session is not self._session or session.resolved:
            logger.warning(f"Ignoring stale timer for spin {session.id}")
            return

        index = resolve_segment(session.target_rotation, len(self._categories))
        category = self._categories[index]
        session.resolve(index, category)

        self._state_machine.transition(
            SpinState.FETCHING_OUTCOME,
            segment_index=index,
            category=category,
        )
        logger.info(f"Spin {session.id} landed on {category} (segment {index})")
        self._emit(EventType.SPIN_RESOLVED, session=session, index=index, category=category)

        result = await self._fetcher.fetch_result(category)

        self.results.replace(result.record)
        self._emit(
            EventType.OUTCOME_READY,
            session=session,
            record=result.record,
            failure=result.failure,
        )

        self._session = None
        self._state_machine.transition(SpinState.IDLE)

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Spin task failed in {self.state.name}: {error}", exc_info=error)

    def _on_state_change(self, old: SpinState, new: SpinState, context: StateContext) -> None:
        self._emit(EventType.STATE_CHANGED, old_state=old, new_state=new)

    def _emit(self, event_type: EventType, **data: Any) -> None:
        self._event_bus.emit(Event(event_type, data=data, source="wheel"))
