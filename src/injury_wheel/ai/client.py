"""Gemini API client for the injury wheel.

Wraps the google-genai SDK behind an async interface that never raises:
every call returns a GenerationResult carrying either the response text
or the reason the request failed.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from google import genai
from google.genai import types

from injury_wheel.ai.logging import AILogger

logger = logging.getLogger(__name__)


class GeminiModel(Enum):
    """Available Gemini models."""

    # Structured text generation (injury reports)
    FLASH = "gemini-2.5-flash"


class GenerationFailure(Enum):
    """Why a generation request produced no text."""

    NOT_CONFIGURED = "not_configured"
    TIMEOUT = "timeout"
    SERVICE_ERROR = "service_error"
    EMPTY_RESPONSE = "empty_response"


@dataclass(frozen=True)
class GenerationResult:
    """Response text or a tagged failure, never both."""

    text: Optional[str] = None
    failure: Optional[GenerationFailure] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None and bool(self.text)


@dataclass
class GeminiConfig:
    """Configuration for Gemini client."""

    api_key: str
    model: str = GeminiModel.FLASH.value
    timeout: float = 15.0  # per attempt
    max_retries: int = 2
    retry_delay: float = 1.0
    temperature: float = 0.9  # Creative responses
    max_output_tokens: int = 1024
    log_dir: Optional[Path] = None

    @classmethod
    def from_settings(cls, ai_settings) -> "GeminiConfig":
        return cls(
            api_key=ai_settings.gemini_api_key,
            model=ai_settings.gemini_model,
            timeout=ai_settings.request_timeout,
            max_retries=ai_settings.max_retries,
            retry_delay=ai_settings.retry_delay,
            temperature=ai_settings.temperature,
            max_output_tokens=ai_settings.max_output_tokens,
            log_dir=ai_settings.log_dir,
        )


def _is_overloaded(error: Exception) -> bool:
    message = str(error).lower()
    return "503" in message or "overloaded" in message or "unavailable" in message


class GeminiClient:
    """Async Gemini client for structured (JSON) text generation."""

    def __init__(self, config: GeminiConfig):
        self.config = config
        self._client: Optional[genai.Client] = None
        self._ai_logger = AILogger(config.log_dir) if config.log_dir else None

        if not config.api_key:
            logger.warning("GEMINI_API_KEY not set, injury reports will use fallbacks")
        logger.info("GeminiClient initialized")

    @property
    def is_available(self) -> bool:
        """Check if AI features are available."""
        return bool(self.config.api_key)

    def _ensure_client(self) -> bool:
        """Create the SDK client on first use."""
        if self._client is not None:
            return True

        if not self.config.api_key:
            logger.error("Cannot initialize client: no API key")
            return False

        try:
            self._client = genai.Client(api_key=self.config.api_key)
            logger.info("Gemini API client connected")
            return True
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {e}")
            return False

    async def generate_json(
        self,
        prompt: str,
        response_schema: Any,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> GenerationResult:
        """Generate JSON text constrained by a schema.

        Args:
            prompt: The user prompt
            response_schema: Pydantic model (or SDK schema) for the output
            system_instruction: Optional system prompt
            temperature: Override default temperature

        Returns:
            GenerationResult with the raw JSON text or a failure tag
        """
        if not self._ensure_client():
            return GenerationResult(
                failure=GenerationFailure.NOT_CONFIGURED,
                detail="Gemini client unavailable",
            )

        config = types.GenerateContentConfig(
            temperature=self.config.temperature if temperature is None else temperature,
            max_output_tokens=self.config.max_output_tokens,
            system_instruction=system_instruction,
            response_mime_type="application/json",
            response_schema=response_schema,
        )

        result = GenerationResult(failure=GenerationFailure.SERVICE_ERROR, detail="no attempts made")

        for attempt in range(1, self.config.max_retries + 1):
            try:
                response = await asyncio.wait_for(
                    asyncio.to_thread(
                        self._client.models.generate_content,
                        model=self.config.model,
                        contents=prompt,
                        config=config,
                    ),
                    timeout=self.config.timeout,
                )
            except asyncio.TimeoutError:
                logger.warning(f"Timeout on attempt {attempt}")
                result = GenerationResult(
                    failure=GenerationFailure.TIMEOUT,
                    detail=f"no response within {self.config.timeout}s",
                )
                continue
            except Exception as e:
                if not _is_overloaded(e):
                    logger.error(f"Text generation failed: {e}")
                    return GenerationResult(failure=GenerationFailure.SERVICE_ERROR, detail=str(e))

                logger.warning(f"Service overloaded, retry {attempt}")
                result = GenerationResult(failure=GenerationFailure.SERVICE_ERROR, detail=str(e))
                if attempt < self.config.max_retries:
                    await asyncio.sleep(self.config.retry_delay * attempt)
                continue

            text = getattr(response, "text", None) if response is not None else None
            if text:
                self._log_generation(prompt, text, {"system_instruction": system_instruction})
                return GenerationResult(text=text)

            logger.warning(f"Empty response on attempt {attempt}")
            result = GenerationResult(failure=GenerationFailure.EMPTY_RESPONSE)

        logger.error(f"All retries exhausted ({result.failure.value})")
        return result

    def _log_generation(self, prompt: str, response: str, metadata: Dict[str, Any]) -> None:
        if self._ai_logger is None:
            return
        self._ai_logger.log_text_generation(
            category="injury_report",
            prompt=prompt,
            response=response,
            model=self.config.model,
            metadata=metadata,
        )


# Module-level shared accessor
_client: Optional[GeminiClient] = None


def get_gemini_client(config: Optional[GeminiConfig] = None) -> GeminiClient:
    """Get the shared Gemini client instance.

    Args:
        config: Optional configuration (only used on first call)

    Returns:
        Shared GeminiClient instance
    """
    global _client
    if _client is None:
        if config is None:
            from injury_wheel.settings import get_settings
            config = GeminiConfig.from_settings(get_settings().ai)
        _client = GeminiClient(config)
    return _client
