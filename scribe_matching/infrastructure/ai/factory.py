"""
Oracle factory: picks the scoring oracle for the configured LLM_PROVIDER.
"""

import logging
from typing import Optional

from scribe_matching.config.settings import Settings
from scribe_matching.domain.matching.interfaces import ScoreOracle
from scribe_matching.infrastructure.ai.chat_completions_oracle import ChatCompletionsOracle
from scribe_matching.infrastructure.ai.ollama_oracle import OllamaOracle

logger = logging.getLogger(__name__)


def build_score_oracle(settings: Settings) -> Optional[ScoreOracle]:
    """
    Build the oracle for settings.llm_provider.

    Returns None for "none": the engine then uses weighted scoring only.
    """
    provider = settings.llm_provider

    if provider == "cerebras":
        oracle = ChatCompletionsOracle(
            api_key=settings.cerebras_api_key,
            base_url=settings.cerebras_base_url,
            model=settings.cerebras_model,
        )
    elif provider == "groq":
        oracle = ChatCompletionsOracle(
            api_key=settings.groq_api_key,
            base_url=settings.groq_base_url,
            model=settings.groq_model,
        )
    elif provider == "ollama":
        oracle = OllamaOracle(base_url=settings.ollama_base_url, model=settings.ollama_model)
    elif provider == "gemini":
        # Imported lazily so google-genai is only loaded when selected
        from scribe_matching.infrastructure.ai.gemini_oracle import GeminiOracle
        oracle = GeminiOracle(api_key=settings.google_api_key, model=settings.gemini_model)
    else:
        logger.info("No scoring oracle configured; using weighted scoring")
        return None

    logger.info(f"Scoring oracle: {provider}")
    return oracle
