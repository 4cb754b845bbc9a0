"""
Application Settings for the Scribe Matching Engine

Centralized configuration using Pydantic Settings with .env support.
All environment variables are validated at startup.
"""

from functools import lru_cache
from typing import Literal, Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scribe_matching.domain.models import (
    EmergencyPolicy,
    MatchingConfig,
    MatchingLimits,
    MatchingThresholds,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    LLM_PROVIDER controls which service acts as the scoring oracle:
    - cerebras: Cerebras chat completions (OpenAI-compatible)
    - groq: Groq chat completions (OpenAI-compatible)
    - ollama: Local inference (no API costs)
    - gemini: Google Gemini
    - none: No oracle, deterministic weighted scoring only
    """

    # Application Settings
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # UNIFIED LLM Provider Configuration
    llm_provider: Literal["cerebras", "groq", "ollama", "gemini", "none"] = "none"

    # Cerebras Configuration (for llm_provider=cerebras)
    cerebras_api_key: Optional[str] = None
    cerebras_base_url: str = "https://api.cerebras.ai/v1"
    cerebras_model: str = "llama3.1-8b"

    # Groq Configuration (for llm_provider=groq)
    groq_api_key: Optional[str] = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.1-8b-instant"

    # Ollama Configuration (for llm_provider=ollama)
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1:8b"

    # Google AI Configuration (accepts GOOGLE_API_KEY or GEMINI_API_KEY)
    google_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"

    # Oracle call behaviour
    oracle_timeout_seconds: float = 5.0
    oracle_temperature: float = 0.3
    oracle_max_output_tokens: int = 10
    oracle_concurrency: int = 4
    bulk_concurrency: int = 2

    # Matching thresholds and limits
    matching_minimum_score: float = 60
    matching_maximum_distance_km: float = 50
    matching_response_time_hours: float = 24
    matching_max_matches: int = 3
    matching_max_active_requests: int = 5
    matching_backup_count: int = 2

    # Emergency backup matching
    emergency_minimum_score: float = 40
    emergency_max_distance_km: float = 25

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_api_keys(self) -> "Settings":
        """Validate API keys based on selected llm_provider."""
        # Normalize gemini_api_key to google_api_key
        if not self.google_api_key and self.gemini_api_key:
            self.google_api_key = self.gemini_api_key

        if self.llm_provider == "cerebras" and not self.cerebras_api_key:
            raise ValueError("CEREBRAS_API_KEY required when LLM_PROVIDER=cerebras")

        if self.llm_provider == "groq" and not self.groq_api_key:
            raise ValueError("GROQ_API_KEY required when LLM_PROVIDER=groq")

        if self.llm_provider == "gemini" and not self.google_api_key:
            raise ValueError(
                "GOOGLE_API_KEY or GEMINI_API_KEY required when LLM_PROVIDER=gemini"
            )

        # ollama and none don't require any API keys

        return self

    def to_matching_config(self) -> MatchingConfig:
        """Build the engine's MatchingConfig. Weights keep their defaults."""
        return MatchingConfig(
            thresholds=MatchingThresholds(
                minimum_score=self.matching_minimum_score,
                maximum_distance=self.matching_maximum_distance_km,
                response_time=self.matching_response_time_hours,
            ),
            limits=MatchingLimits(
                max_matches_per_request=self.matching_max_matches,
                max_active_requests=self.matching_max_active_requests,
                backup_scribe_count=self.matching_backup_count,
            ),
            emergency=EmergencyPolicy(
                minimum_score=self.emergency_minimum_score,
                max_distance_km=self.emergency_max_distance_km,
            ),
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
