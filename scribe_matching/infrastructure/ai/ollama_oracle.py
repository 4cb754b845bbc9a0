"""
Ollama Scoring Oracle

Local inference via Ollama's /api/generate endpoint (no API costs).
"""

from typing import Optional

import httpx

from scribe_matching.domain.matching.interfaces import OracleOptions
from scribe_matching.infrastructure.exceptions import AIServiceError


class OllamaOracle:
    """Ollama client used as a ScoreOracle."""

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def score(self, prompt: str, options: OracleOptions) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    f"{self.base_url}/api/generate",
                    json={
                        "model": self.model,
                        "prompt": prompt,
                        "stream": False,
                        "options": {
                            "temperature": options.temperature,
                            "num_predict": options.max_output_tokens,
                        },
                    },
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise AIServiceError(
                f"Ollama request failed: {e}",
                model=self.model,
                operation="score",
                original_error=e,
            )

        text = data.get("response", "") if isinstance(data, dict) else ""
        if not text:
            raise AIServiceError("Empty response from Ollama", model=self.model, operation="score")
        return text.strip()
