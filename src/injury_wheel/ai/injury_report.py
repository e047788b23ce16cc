"""Injury report service using Gemini 2.5 Flash.

Turns a resolved wheel segment (an injury "timeline") into a satirical
Maple Leafs injury update. Whatever goes wrong on the way (no API key,
timeout, service error, malformed JSON) the caller still gets a complete
report: failures collapse into a fixed fallback record here and never
propagate.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from injury_wheel.ai.client import (
    GeminiClient,
    GeminiConfig,
    GenerationFailure,
    GenerationResult,
)

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT = 30.0


class GeneratedReport(BaseModel):
    """The five fields the generation service fills in."""

    model_config = ConfigDict(str_strip_whitespace=True)

    player_alias: str = Field(min_length=1)
    diagnosis: str = Field(min_length=1)
    timeline: str = Field(min_length=1)
    coach_quote: str = Field(min_length=1)
    cap_implication: str = Field(min_length=1)


class OutcomeRecord(GeneratedReport):
    """A complete injury report for one resolved spin."""

    model_config = ConfigDict(frozen=True)

    category: str = Field(min_length=1)

    @classmethod
    def from_generated(cls, category: str, report: GeneratedReport) -> "OutcomeRecord":
        return cls(category=category, **report.model_dump())


class FetchFailure(Enum):
    """Why a report had to fall back."""

    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    SERVICE_ERROR = "service_error"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_RESPONSE = "malformed_response"
    UNEXPECTED = "unexpected"


_GENERATION_FAILURES = {
    GenerationFailure.NOT_CONFIGURED: FetchFailure.UNAVAILABLE,
    GenerationFailure.TIMEOUT: FetchFailure.TIMEOUT,
    GenerationFailure.SERVICE_ERROR: FetchFailure.SERVICE_ERROR,
    GenerationFailure.EMPTY_RESPONSE: FetchFailure.EMPTY_RESPONSE,
}


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one fetch: always a record, plus the failure if any."""

    record: OutcomeRecord
    failure: Optional[FetchFailure] = None

    @property
    def degraded(self) -> bool:
        return self.failure is not None


class TextGenerator(Protocol):
    @property
    def is_available(self) -> bool: ...

    async def generate_json(
        self,
        prompt: str,
        response_schema: object,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> GenerationResult: ...


# Segment labels that are shortened on the wheel
PROMPT_ALIASES = {
    "Robidas Island": "Long Term Injured Reserve (LTIR) / Robidas Island",
}

SYSTEM_PROMPT = (
    "You are a satirical, cynical beat reporter covering the Toronto Maple Leafs. "
    "You write short, punchy, modern NHL-style injury updates."
)

REPORT_PROMPT = """The 'Injury Wheel' has been spun and the official timeline is: "{timeline}".

Write a funny injury update explaining WHY the player is out for exactly this long.
Lean on hockey cliches, salary cap games (LTIR), vague "upper body" wording and the
pressure of the Toronto market.

Return JSON with:
- player_alias: a funny generic name for the player (e.g. "Top Line Winger")
- diagnosis: the absurd medical reason or excuse behind this timeline
- timeline: "{timeline}" with a funny parenthetical added
- coach_quote: a cliche quote from the coach dodging the question
- cap_implication: a snarky line about what this does to the salary cap
"""

# Markdown code fence some models wrap around JSON
_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def build_prompt(category: str) -> str:
    """Build the generation prompt for a wheel segment."""
    timeline = PROMPT_ALIASES.get(category, category)
    return REPORT_PROMPT.format(timeline=timeline)


def parse_report(category: str, text: str) -> OutcomeRecord:
    """Parse the service's JSON into a record.

    Raises:
        ValidationError: if the JSON is malformed or a field is missing/empty
    """
    cleaned = text.strip()
    match = _FENCE_RE.match(cleaned)
    if match:
        cleaned = match.group(1)
    report = GeneratedReport.model_validate_json(cleaned)
    return OutcomeRecord.from_generated(category, report)


def fallback_record(category: str) -> OutcomeRecord:
    """The fixed report shown when the AI can't be reached."""
    return OutcomeRecord(
        category=category,
        player_alias="Core Four Member",
        diagnosis="Failed to load AI wit.",
        timeline=category,
        coach_quote="We're just taking it one error at a time.",
        cap_implication="We are over the limit.",
    )


class InjuryReportService:
    """Fetches injury reports for resolved segments.

    Usage:
        service = InjuryReportService(client)
        record = await service.fetch("Day-to-Day")
    """

    def __init__(
        self,
        client: TextGenerator,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
    ):
        self._client = client
        self._timeout = timeout

    @classmethod
    def from_settings(cls, ai_settings) -> "InjuryReportService":
        client = GeminiClient(GeminiConfig.from_settings(ai_settings))
        return cls(client, timeout=ai_settings.fetch_timeout)

    @property
    def is_available(self) -> bool:
        return self._client.is_available

    async def fetch(self, category: str) -> OutcomeRecord:
        """Get a report for a segment. Never raises."""
        result = await self.fetch_result(category)
        return result.record

    async def fetch_result(self, category: str) -> FetchResult:
        """Get a report plus the reason it fell back, if it did. Never raises."""
        outcome = await self._request(category)

        if isinstance(outcome, OutcomeRecord):
            logger.info(f"Injury report generated for {category}")
            return FetchResult(record=outcome)

        logger.warning(f"Using fallback report for {category} ({outcome.value})")
        return FetchResult(record=fallback_record(category), failure=outcome)

    async def _request(self, category: str) -> "OutcomeRecord | FetchFailure":
        if not self._client.is_available:
            logger.warning("AI not available for injury report")
            return FetchFailure.UNAVAILABLE

        try:
            generation = await asyncio.wait_for(
                self._client.generate_json(
                    prompt=build_prompt(category),
                    response_schema=GeneratedReport,
                    system_instruction=SYSTEM_PROMPT,
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Injury report timed out after {self._timeout}s")
            return FetchFailure.TIMEOUT
        except Exception as e:
            logger.exception(f"Injury report generation failed: {e}")
            return FetchFailure.UNEXPECTED

        if not generation.ok:
            logger.error(f"Injury report generation failed: {generation.detail or generation.failure}")
            return _GENERATION_FAILURES.get(generation.failure, FetchFailure.SERVICE_ERROR)

        try:
            return parse_report(category, generation.text)
        except ValidationError as e:
            logger.error(f"Malformed injury report: {e.error_count()} validation error(s)")
            return FetchFailure.MALFORMED_RESPONSE
