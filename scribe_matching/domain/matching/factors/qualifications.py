"""
Qualification Factors (Subject, Language)

Compare the exam's academic demands with the scribe's qualifications.
"""

from scribe_matching.domain.matching.interfaces import BaseMatchingFactor, MatchContext


class SubjectMatchFactor(BaseMatchingFactor):
    """
    Subject coverage factor.

    Share of exam subjects the scribe is qualified in, as 0-100.
    An exam listing no subjects scores 100.
    """

    @property
    def name(self) -> str:
        return "subject_match_score"

    def calculate(self, context: MatchContext) -> float:
        exam_subjects = context.exam.exam_details.subjects
        if not exam_subjects:
            return 100.0

        scribe_subjects = set(context.scribe.qualifications.subjects)
        matches = [s for s in exam_subjects if s in scribe_subjects]
        return len(matches) / len(exam_subjects) * 100.0


class LanguageMatchFactor(BaseMatchingFactor):
    """
    Exam language factor.

    Always 100 after eligibility filtering; recomputed so the factor
    breakdown stands on its own.
    """

    @property
    def name(self) -> str:
        return "language_match_score"

    def calculate(self, context: MatchContext) -> float:
        language = context.exam.exam_details.language
        return 100.0 if language in context.scribe.qualifications.languages_known else 0.0
