"""
Gemini Scoring Oracle

Uses the google.genai SDK through its native async client (client.aio),
so a timeout or cancellation in the caller stops the request.
"""

import logging
from typing import Optional

from google import genai
from google.genai import types

from scribe_matching.domain.matching.interfaces import OracleOptions
from scribe_matching.infrastructure.exceptions import (
    AIServiceError,
    ConfigurationError,
    RateLimitError,
)

logger = logging.getLogger(__name__)


class GeminiOracle:
    """Google Gemini client used as a ScoreOracle."""

    DEFAULT_MODEL = "gemini-2.0-flash"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        client: Optional[genai.Client] = None,
    ):
        if client is None and not api_key:
            raise ConfigurationError(
                "Missing GOOGLE_API_KEY environment variable",
                missing_keys=["GOOGLE_API_KEY"]
            )
        self.model = model
        self._client = client or genai.Client(api_key=api_key)
        logger.info(f"GeminiOracle initialized with model: {self.model}")

    async def score(self, prompt: str, options: OracleOptions) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=options.temperature,
                    max_output_tokens=options.max_output_tokens,
                ),
            )
        except Exception as e:
            error_msg = str(e).lower()

            if "rate" in error_msg or "quota" in error_msg:
                raise RateLimitError(
                    "Gemini API rate limit exceeded",
                    original_error=e
                )

            raise AIServiceError(
                f"Gemini scoring failed: {str(e)}",
                model=self.model,
                operation="score",
                original_error=e
            )

        if not response.text:
            raise AIServiceError("Empty response from Gemini", model=self.model, operation="score")
        return response.text.strip()
