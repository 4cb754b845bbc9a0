"""
Factor Calculator

Runs the pluggable matching factors over one student-scribe pair and
assembles the component scores into MatchingFactors. The overall score
is left at 0; the score adapter fills it in.
"""

from typing import Dict, List, Optional

from scribe_matching.domain.matching.factors import (
    AvailabilityFactor,
    DistanceFactor,
    ExperienceFactor,
    LanguageMatchFactor,
    PreferenceFactor,
    RatingFactor,
    SubjectMatchFactor,
)
from scribe_matching.domain.matching.interfaces import MatchContext, MatchingFactor
from scribe_matching.domain.models import MatchingFactors


class FactorCalculator:
    """
    Computes the seven component scores for a pair.

    Uses Strategy pattern for pluggable factors. Pure function of the
    MatchContext: no I/O, no shared state.
    """

    def __init__(self, factors: Optional[List[MatchingFactor]] = None):
        """
        Initialize calculator with factors.

        Args:
            factors: List of matching factors. If None, uses defaults.
        """
        self._factors = factors or self._default_factors()

    def _default_factors(self) -> List[MatchingFactor]:
        """Get default matching factors."""
        return [
            DistanceFactor(),
            AvailabilityFactor(),
            SubjectMatchFactor(),
            LanguageMatchFactor(),
            ExperienceFactor(),
            RatingFactor(),
            PreferenceFactor(),
        ]

    def calculate(self, context: MatchContext) -> MatchingFactors:
        scores: Dict[str, float] = {
            factor.name: factor.calculate(context)
            for factor in self._factors
        }
        return MatchingFactors(**scores)
