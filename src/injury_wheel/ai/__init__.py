"""AI module for the injury wheel - Gemini integration for injury reports."""

from injury_wheel.ai.client import (
    GeminiClient,
    GeminiConfig,
    GenerationFailure,
    GenerationResult,
    get_gemini_client,
)
from injury_wheel.ai.injury_report import (
    FetchFailure,
    FetchResult,
    InjuryReportService,
    OutcomeRecord,
    fallback_record,
)

__all__ = [
    # Client
    "GeminiClient",
    "GeminiConfig",
    "GenerationFailure",
    "GenerationResult",
    "get_gemini_client",
    # Injury reports
    "InjuryReportService",
    "OutcomeRecord",
    "FetchResult",
    "FetchFailure",
    "fallback_record",
]
