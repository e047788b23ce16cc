"""Tests for InjuryReportService - outcome fetch with fallback."""

import asyncio
import json

import pytest
from pydantic import ValidationError

from conftest import REPORT_JSON, FakeGenerator
from injury_wheel.ai.client import GenerationFailure, GenerationResult
from injury_wheel.ai.injury_report import (
    FetchFailure,
    GeneratedReport,
    InjuryReportService,
    OutcomeRecord,
    build_prompt,
    fallback_record,
    parse_report,
)
from injury_wheel.settings import AISettings

RECORD_FIELDS = {"category", "player_alias", "diagnosis", "timeline", "coach_quote", "cap_implication"}


def assert_complete(record: OutcomeRecord, category: str) -> None:
    data = record.model_dump()
    assert set(data) == RECORD_FIELDS
    assert all(isinstance(value, str) and value for value in data.values())
    assert record.category == category


class TestParsing:
    def test_parse_valid_report(self):
        record = parse_report("Week-to-Week", REPORT_JSON)
        assert_complete(record, "Week-to-Week")
        assert record.player_alias == "Top Line Winger"

    def test_parse_strips_code_fence(self):
        record = parse_report("Indefinite", f"```json\n{REPORT_JSON}\n```")
        assert record.coach_quote == "He's getting better every day."

    def test_parse_strips_whitespace(self):
        payload = json.loads(REPORT_JSON)
        payload["diagnosis"] = "  Hurt feelings  "
        record = parse_report("Indefinite", json.dumps(payload))
        assert record.diagnosis == "Hurt feelings"

    @pytest.mark.parametrize("text", [
        "not json at all",
        "[]",
        json.dumps({"player_alias": "Only one field"}),
        json.dumps({**json.loads(REPORT_JSON), "timeline": "   "}),
        json.dumps({**json.loads(REPORT_JSON), "coach_quote": 42}),
    ])
    def test_parse_rejects_bad_payloads(self, text):
        with pytest.raises(ValidationError):
            parse_report("Indefinite", text)

    def test_record_is_frozen(self):
        record = fallback_record("Indefinite")
        with pytest.raises(ValidationError):
            record.diagnosis = "changed"


class TestFallback:
    def test_fallback_is_complete(self):
        record = fallback_record("Maintenance Day")
        assert_complete(record, "Maintenance Day")
        assert record.timeline == "Maintenance Day"

    def test_fallback_is_deterministic(self):
        assert fallback_record("Indefinite") == fallback_record("Indefinite")

    def test_fallback_has_same_shape_as_success(self):
        success = parse_report("Indefinite", REPORT_JSON)
        assert set(success.model_dump()) == set(fallback_record("Indefinite").model_dump())


class TestPrompt:
    def test_prompt_mentions_category(self):
        assert '"Day-to-Day"' in build_prompt("Day-to-Day")

    def test_prompt_expands_alias(self):
        prompt = build_prompt("Robidas Island")
        assert "Long Term Injured Reserve (LTIR) / Robidas Island" in prompt


class TestFetch:
    @pytest.mark.asyncio
    async def test_success(self):
        client = FakeGenerator()
        service = InjuryReportService(client)

        result = await service.fetch_result("Week-to-Week")

        assert not result.degraded
        assert result.failure is None
        assert_complete(result.record, "Week-to-Week")
        assert result.record.player_alias == "Top Line Winger"
        assert len(client.calls) == 1
        assert client.calls[0].response_schema is GeneratedReport
        assert client.calls[0].system_instruction

    @pytest.mark.asyncio
    async def test_fetch_returns_record(self):
        service = InjuryReportService(FakeGenerator())
        record = await service.fetch("Indefinite")
        assert isinstance(record, OutcomeRecord)
        assert record.category == "Indefinite"

    @pytest.mark.asyncio
    async def test_unavailable_client_skips_request(self):
        client = FakeGenerator(available=False)
        service = InjuryReportService(client)

        result = await service.fetch_result("Indefinite")

        assert result.failure is FetchFailure.UNAVAILABLE
        assert result.record == fallback_record("Indefinite")
        assert client.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("generation_failure, expected", [
        (GenerationFailure.NOT_CONFIGURED, FetchFailure.UNAVAILABLE),
        (GenerationFailure.TIMEOUT, FetchFailure.TIMEOUT),
        (GenerationFailure.SERVICE_ERROR, FetchFailure.SERVICE_ERROR),
        (GenerationFailure.EMPTY_RESPONSE, FetchFailure.EMPTY_RESPONSE),
    ])
    async def test_generation_failures_fall_back(self, generation_failure, expected):
        client = FakeGenerator(result=GenerationResult(failure=generation_failure))
        service = InjuryReportService(client)

        result = await service.fetch_result("Until Playoffs")

        assert result.failure is expected
        assert result.degraded
        assert_complete(result.record, "Until Playoffs")

    @pytest.mark.asyncio
    async def test_malformed_response_falls_back(self):
        client = FakeGenerator(result=GenerationResult(text='{"player_alias": "x"}'))
        service = InjuryReportService(client)

        result = await service.fetch_result("Day-to-Day")

        assert result.failure is FetchFailure.MALFORMED_RESPONSE
        assert result.record == fallback_record("Day-to-Day")

    @pytest.mark.asyncio
    async def test_client_exception_is_absorbed(self):
        client = FakeGenerator(error=ConnectionError("network down"))
        service = InjuryReportService(client)

        record = await service.fetch("Day-to-Day")

        assert record == fallback_record("Day-to-Day")

    @pytest.mark.asyncio
    async def test_slow_service_times_out(self):
        client = FakeGenerator(delay=1.0)
        service = InjuryReportService(client, timeout=0.05)

        result = await service.fetch_result("Month-to-Month")

        assert result.failure is FetchFailure.TIMEOUT
        assert_complete(result.record, "Month-to-Month")

    @pytest.mark.asyncio
    async def test_sequential_fetches_are_independent(self, failed_generation):
        good = InjuryReportService(FakeGenerator())
        bad = InjuryReportService(FakeGenerator(result=failed_generation))

        results = await asyncio.gather(good.fetch_result("Indefinite"), bad.fetch_result("Indefinite"))

        assert [r.degraded for r in results] == [False, True]


class TestFromSettings:
    def test_builds_gemini_backed_service(self):
        settings = AISettings(gemini_api_key="", fetch_timeout=12.0)
        service = InjuryReportService.from_settings(settings)
        assert not service.is_available
        assert service._timeout == 12.0

    @pytest.mark.asyncio
    async def test_no_key_means_fallback(self):
        service = InjuryReportService.from_settings(AISettings(gemini_api_key=""))
        result = await service.fetch_result("Indefinite")
        assert result.failure is FetchFailure.UNAVAILABLE
