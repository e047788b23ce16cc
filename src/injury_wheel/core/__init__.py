"""Core framework components for the injury wheel."""

from .state import SpinState, StateMachine
from .events import EventBus, Event, EventType
from .results import ResultStore

__all__ = ["SpinState", "StateMachine", "EventBus", "Event", "EventType", "ResultStore"]
