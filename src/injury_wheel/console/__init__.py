"""Terminal front end."""

from injury_wheel.console.renderer import ConsoleRenderer, format_result_card

__all__ = ["ConsoleRenderer", "format_result_card"]
