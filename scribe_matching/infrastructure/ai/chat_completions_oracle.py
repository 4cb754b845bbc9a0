"""
Chat Completions Scoring Oracle

Scores matches through any OpenAI-compatible /chat/completions endpoint
(Cerebras by default, Groq works the same way).
"""

import logging
from typing import Optional

import httpx

from scribe_matching.domain.matching.interfaces import OracleOptions
from scribe_matching.infrastructure.exceptions import AIServiceError, RateLimitError

logger = logging.getLogger(__name__)


class ChatCompletionsOracle:
    """
    OpenAI-compatible chat completions client used as a ScoreOracle.

    A new AsyncClient is opened per request; the HTTP timeout is a
    backstop, the score adapter enforces the real per-call timeout.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def score(self, prompt: str, options: OracleOptions) -> str:
        """Send a single-message scoring request and return the reply text."""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "model": self.model,
                        "messages": [{"role": "user", "content": prompt}],
                        "temperature": options.temperature,
                        "max_tokens": options.max_output_tokens,
                    },
                )
                response.raise_for_status()
                data = response.json()

        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429:
                retry_after = e.response.headers.get("retry-after")
                raise RateLimitError(
                    "Chat completions rate limit exceeded",
                    retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                    original_error=e,
                )
            logger.error(f"Chat completions error: {e.response.status_code}")
            raise AIServiceError(
                f"Chat completions returned HTTP {e.response.status_code}",
                model=self.model,
                operation="score",
                original_error=e,
            )
        except httpx.HTTPError as e:
            raise AIServiceError(
                f"Chat completions request failed: {e}",
                model=self.model,
                operation="score",
                original_error=e,
            )

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIServiceError(
                "Unexpected chat completions payload",
                model=self.model,
                operation="score",
                original_error=e,
            )

        if not content:
            raise AIServiceError("Empty response from chat completions", model=self.model, operation="score")

        return content.strip()
