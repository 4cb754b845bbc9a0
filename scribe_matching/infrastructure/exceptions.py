"""
Custom Exceptions for the Scribe Matching Engine

Hierarchical exception classes for proper error handling across layers.
Matching outcomes (no eligible scribes, no acceptable score) are NOT
exceptions; they are reported through MatchingResponse.success/message.
"""

from typing import Optional, Dict, Any


class ScribeMatchingError(Exception):
    """Base exception for all scribe matching errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ValidationError(ScribeMatchingError):
    """Raised when input validation fails."""
    pass


class AIServiceError(ScribeMatchingError):
    """Raised when the scoring oracle (Cerebras/Groq/Ollama/Gemini) fails."""

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if model:
            details["model"] = model
        if operation:
            details["operation"] = operation
        super().__init__(message, details, original_error)


class RateLimitError(AIServiceError):
    """Raised when oracle rate limits are exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message, operation="score", original_error=original_error)
        if retry_after:
            self.details["retry_after_seconds"] = retry_after


class OracleResponseError(AIServiceError):
    """Raised when the oracle reply is empty or not a score in [0, 100]."""

    def __init__(
        self,
        message: str,
        raw_reply: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message, operation="parse_score", original_error=original_error)
        if raw_reply is not None:
            self.details["raw_reply"] = raw_reply[:100]


class ConfigurationError(ScribeMatchingError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(message, details, original_error)
