"""
Preference Factor

Soft student preferences that don't disqualify a scribe outright.
Gender preference is a hard constraint and lives in the eligibility filter.
"""

from scribe_matching.domain.matching.geo import age_on
from scribe_matching.domain.matching.interfaces import BaseMatchingFactor, MatchContext


class PreferenceFactor(BaseMatchingFactor):
    """
    Preference match factor.

    Starts at 100 and subtracts a penalty per unmet preference:
    - Scribe age outside the requested inclusive range: -20

    Floored at 0.
    """

    AGE_RANGE_PENALTY = 20.0

    @property
    def name(self) -> str:
        return "preference_match_score"

    def calculate(self, context: MatchContext) -> float:
        score = 100.0

        age_range = context.student.preferences.scribe_age_range
        if age_range is not None:
            min_age, max_age = age_range
            scribe_age = age_on(context.scribe.personal_info.date_of_birth, context.reference_date)
            if scribe_age < min_age or scribe_age > max_age:
                score -= self.AGE_RANGE_PENALTY

        return max(score, 0.0)
