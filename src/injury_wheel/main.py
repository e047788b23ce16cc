"""
Main entry point for the injury wheel.

Runs the wheel in the terminal: press Enter to spin, q to quit.
Set INJURY_WHEEL_AUTO_SPINS to spin a fixed number of times and exit.
"""

import asyncio
import logging
import sys

from injury_wheel.ai.injury_report import InjuryReportService
from injury_wheel.console.renderer import ConsoleRenderer
from injury_wheel.core.events import EventBus
from injury_wheel.settings import Settings, get_settings
from injury_wheel.wheel.controller import SpinController

logger = logging.getLogger(__name__)

PROMPT = "Press Enter to spin (q to quit): "


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def build_controller(settings: Settings, event_bus: EventBus) -> SpinController:
    """Wire the report service and controller from settings."""
    reporter = InjuryReportService.from_settings(settings.ai)
    return SpinController.from_settings(settings.wheel, reporter, event_bus=event_bus)


async def run_console(settings: Settings) -> None:
    """Run the wheel in the terminal."""
    event_bus = EventBus()
    controller = build_controller(settings, event_bus)
    renderer = ConsoleRenderer(event_bus, controller.categories)

    try:
        if settings.auto_spins:
            for _ in range(settings.auto_spins):
                await controller.run_spin()
            return

        while True:
            line = await asyncio.to_thread(input, PROMPT)
            if line.strip().lower() in ("q", "quit", "exit"):
                break
            controller.spin()

        await controller.wait_idle()
    finally:
        renderer.close()


def main() -> None:
    """Main entry point."""
    from dotenv import find_dotenv, load_dotenv

    # Load environment variables from the working directory
    load_dotenv(find_dotenv(usecwd=True))

    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Injury wheel starting...")

    if not settings.ai_enabled:
        logger.warning("No GEMINI_API_KEY, every spin will show the fallback report")

    try:
        asyncio.run(run_console(settings))
    except (KeyboardInterrupt, EOFError):
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Injury wheel stopped")


if __name__ == "__main__":
    main()
