"""
API Dependencies

FastAPI dependency providers. Tests override get_matching_engine via
app.dependency_overrides.
"""

import logging
from functools import lru_cache

from scribe_matching.config.settings import get_settings
from scribe_matching.domain.matching import OracleOptions, ScribeMatchingEngine
from scribe_matching.infrastructure.ai import build_score_oracle

logger = logging.getLogger(__name__)


@lru_cache
def get_matching_engine() -> ScribeMatchingEngine:
    """Build the engine once from Settings."""
    settings = get_settings()
    return ScribeMatchingEngine(
        config=settings.to_matching_config(),
        oracle=build_score_oracle(settings),
        oracle_options=OracleOptions(
            temperature=settings.oracle_temperature,
            max_output_tokens=settings.oracle_max_output_tokens,
        ),
        oracle_timeout_seconds=settings.oracle_timeout_seconds,
        oracle_concurrency=settings.oracle_concurrency,
        bulk_concurrency=settings.bulk_concurrency,
    )
