"""
Distance Factor

Scores how close the scribe is to the student.
"""

from scribe_matching.domain.matching.interfaces import BaseMatchingFactor, MatchContext


class DistanceFactor(BaseMatchingFactor):
    """
    Distance scoring factor.

    Linear decay from 100 at zero distance to 0 at the configured
    maximum distance (thresholds.maximum_distance). Never negative.
    """

    @property
    def name(self) -> str:
        return "distance_score"

    def calculate(self, context: MatchContext) -> float:
        max_distance = context.config.thresholds.maximum_distance
        return max(0.0, 100.0 - (context.distance_km / max_distance) * 100.0)
