"""
Experience Factors (Experience, Rating)

Scores the scribe's track record.
"""

from scribe_matching.domain.matching.interfaces import BaseMatchingFactor, MatchContext


class ExperienceFactor(BaseMatchingFactor):
    """
    Experience scoring factor.

    Calculates based on:
    - Years of experience: 10 points per year, capped at 40
    - Has scribed this exam type before: +30
    - Success rate (successful / total exams): up to +30

    Capped at 100.
    """

    MAX_YEARS_POINTS = 40.0
    POINTS_PER_YEAR = 10.0
    EXAM_TYPE_BONUS = 30.0
    SUCCESS_RATE_POINTS = 30.0

    @property
    def name(self) -> str:
        return "experience_score"

    def calculate(self, context: MatchContext) -> float:
        experience = context.scribe.experience
        exam_type = context.exam.exam_details.exam_type

        score = min(experience.total_years * self.POINTS_PER_YEAR, self.MAX_YEARS_POINTS)

        if exam_type in experience.exam_types:
            score += self.EXAM_TYPE_BONUS

        success_rate = experience.successful_exams / max(experience.total_exams_scribed, 1)
        score += success_rate * self.SUCCESS_RATE_POINTS

        return min(score, 100.0)


class RatingFactor(BaseMatchingFactor):
    """Average student rating (0-5 stars) mapped onto 0-100."""

    @property
    def name(self) -> str:
        return "rating_score"

    def calculate(self, context: MatchContext) -> float:
        return context.scribe.experience.average_rating / 5.0 * 100.0
