"""
State machine for the spin cycle.

States:
    IDLE: Waiting for a spin (initial state, and terminal state of every cycle)
    SPINNING: Wheel animation running, resolution timer pending
    FETCHING_OUTCOME: Segment resolved, injury report being generated
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Callable
import logging

logger = logging.getLogger(__name__)


class SpinState(Enum):
    """Spin/UI states."""
    IDLE = auto()
    SPINNING = auto()
    FETCHING_OUTCOME = auto()


@dataclass
class StateContext:
    """Context data for the cycle in flight."""
    session_id: int | None = None
    segment_index: int | None = None
    category: str | None = None


StateListener = Callable[[SpinState, SpinState, StateContext], None]


class StateMachine:
    """
    Manages the spin cycle state and transitions.

    Only the forward cycle IDLE -> SPINNING -> FETCHING_OUTCOME -> IDLE
    is valid. There is no error state and no cancel edge.
    """

    VALID_TRANSITIONS: list[tuple[SpinState, SpinState]] = [
        (SpinState.IDLE, SpinState.SPINNING),
        (SpinState.SPINNING, SpinState.FETCHING_OUTCOME),
        (SpinState.FETCHING_OUTCOME, SpinState.IDLE),
    ]

    def __init__(self, initial_state: SpinState = SpinState.IDLE) -> None:
        self._state = initial_state
        self._context = StateContext()
        self._listeners: list[StateListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.info(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> SpinState:
        """Get current state."""
        return self._state

    @property
    def context(self) -> StateContext:
        """Get current context."""
        return self._context

    @property
    def is_idle(self) -> bool:
        return self._state is SpinState.IDLE

    def can_transition(self, to_state: SpinState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: SpinState, **context_updates: Any) -> bool:
        """
        Attempt to transition to a new state.

        Args:
            to_state: Target state
            **context_updates: Updates to apply to context

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state

        if to_state is SpinState.IDLE:
            self._context = StateContext()
        for key, value in context_updates.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

        logger.info(f"State transition: {old_state.name} -> {to_state.name}")

        for listener in list(self._listeners):
            try:
                listener(old_state, to_state, self._context)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")

        return True

    def add_listener(self, callback: StateListener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
