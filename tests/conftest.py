"""Shared fakes for injury wheel tests."""

import asyncio
import json
from types import SimpleNamespace

import pytest

from injury_wheel.ai.client import GenerationFailure, GenerationResult
from injury_wheel.ai.injury_report import FetchFailure, FetchResult, OutcomeRecord, fallback_record


REPORT_JSON = json.dumps({
    "player_alias": "Top Line Winger",
    "diagnosis": "Lower body, upper ego",
    "timeline": "Week-to-Week (pending vibes)",
    "coach_quote": "He's getting better every day.",
    "cap_implication": "Frees up exactly enough space for nobody.",
})


class FakeGenerator:
    """Stands in for GeminiClient in report service tests."""

    def __init__(self, result=None, available=True, delay=0.0, error=None):
        self.result = result or GenerationResult(text=REPORT_JSON)
        self.available = available
        self.delay = delay
        self.error = error
        self.calls = []

    @property
    def is_available(self):
        return self.available

    async def generate_json(self, prompt, response_schema, system_instruction=None, temperature=None):
        self.calls.append(SimpleNamespace(
            prompt=prompt,
            response_schema=response_schema,
            system_instruction=system_instruction,
        ))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


class FakeFetcher:
    """Stands in for InjuryReportService in controller tests.

    When ``gate`` is set, fetches block until it is released.
    """

    def __init__(self, fail=False):
        self.fail = fail
        self.categories = []
        self.gate = None

    async def fetch_result(self, category):
        self.categories.append(category)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            return FetchResult(record=fallback_record(category), failure=FetchFailure.SERVICE_ERROR)
        return FetchResult(record=OutcomeRecord(
            category=category,
            player_alias="Overpaid Defenceman",
            diagnosis="Hurt feelings",
            timeline=f"{category} (allegedly)",
            coach_quote="We'll know more tomorrow.",
            cap_implication="LTIR, baby.",
        ))


class GatedSleep:
    """Replacement for asyncio.sleep that waits until released."""

    def __init__(self):
        self.delays = []
        self.release = asyncio.Event()

    async def __call__(self, delay):
        self.delays.append(delay)
        await self.release.wait()


async def instant_sleep(delay):
    await asyncio.sleep(0)


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def failed_generation():
    return GenerationResult(failure=GenerationFailure.SERVICE_ERROR, detail="500 Internal")
