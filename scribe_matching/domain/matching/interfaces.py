"""
Matching Interfaces for the Scribe Matching Engine

Defines protocols and data structures shared by the matching pipeline.
Follows Interface Segregation and Dependency Inversion principles:
the engine depends on the ScoreOracle and WaitlistProvider protocols,
never on a concrete LLM vendor or datastore.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol, runtime_checkable

from scribe_matching.domain.models import (
    ExamRegistration,
    MatchingConfig,
    MatchingFactors,
    ScoreSource,
    ScribeProfile,
    StudentProfile,
)


@dataclass(frozen=True)
class MatchContext:
    """
    Everything a factor needs to score one student-scribe pair.

    Built once per surviving candidate; read-only, so candidates can be
    scored concurrently without sharing mutable state.
    """
    student: StudentProfile
    exam: ExamRegistration
    scribe: ScribeProfile
    config: MatchingConfig
    reference_date: date  # "today" for age arithmetic
    distance_km: float


@dataclass(frozen=True)
class ScoreOutcome:
    """Overall score plus the path that produced it."""
    score: float
    source: ScoreSource


@dataclass(frozen=True)
class ScoredScribe:
    """
    A candidate with computed factors.

    Used between scoring and ranking stages.
    """
    scribe: ScribeProfile
    factors: MatchingFactors
    distance_km: float
    score_source: ScoreSource = ScoreSource.WEIGHTED

    @property
    def overall_score(self) -> float:
        return self.factors.overall_score


@dataclass(frozen=True)
class OracleOptions:
    """Generation options for a scoring request. Low temperature, tiny output."""
    temperature: float = 0.3
    max_output_tokens: int = 10


@runtime_checkable
class ScoreOracle(Protocol):
    """
    External text-completion service consulted for an AI-adjusted score.

    Implementations may raise any exception; the score adapter absorbs
    failures and falls back to the weighted sum.
    """

    async def score(self, prompt: str, options: OracleOptions) -> str:
        """Send the prompt and return the raw reply text."""
        ...


@runtime_checkable
class WaitlistProvider(Protocol):
    """Computes a student's waitlist position when nobody is eligible."""

    async def position(self, exam: ExamRegistration) -> Optional[int]:
        ...


@runtime_checkable
class MatchingFactor(Protocol):
    """
    Protocol for matching factors.

    Each factor calculates a 0-100 score for a specific aspect of a pair.
    New factors can be added without touching the calculator.
    """

    @property
    def name(self) -> str:
        """Factor name, matching the MatchingFactors field it fills."""
        ...

    def calculate(self, context: MatchContext) -> float:
        """Returns: Score from 0-100"""
        ...


class BaseMatchingFactor(ABC):
    """Base class for matching factors with common functionality."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def calculate(self, context: MatchContext) -> float:
        pass

    @staticmethod
    def clamp(score: float) -> float:
        """Clamp a raw score into the 0-100 range."""
        return max(0.0, min(100.0, score))
