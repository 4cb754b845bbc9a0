"""
Eligibility Filter

Hard pre-filter that removes scribes who cannot serve a given exam,
independent of how well they would score.
"""

import logging
from typing import Callable, List, Optional, Tuple

from scribe_matching.domain.matching.geo import haversine_km
from scribe_matching.domain.models import (
    ExamRegistration,
    GenderPreference,
    ScribeProfile,
    StudentProfile,
)

logger = logging.getLogger(__name__)


def student_scribe_distance(student: StudentProfile, scribe: ScribeProfile) -> float:
    """Haversine distance in km between a student's and a scribe's location."""
    return haversine_km(
        student.location.latitude,
        student.location.longitude,
        scribe.location.latitude,
        scribe.location.longitude,
    )


class EligibilityFilter:
    """
    Eligibility filter for candidate scribes.

    A scribe survives only if ALL rules pass:
    1. verified
    2. within min(student max travel, scribe max willing) km
    3. willing to scribe this exam type
    4. knows the exam language
    5. matches the student's gender preference (unless "any")
    6. exam date is not one of the scribe's blackout dates
    """

    def __init__(self):
        self._rules: List[Tuple[str, Callable[..., bool]]] = [
            ("not_verified", self._is_verified),
            ("too_far", self._within_distance),
            ("exam_type_unwilling", self._accepts_exam_type),
            ("language_unknown", self._knows_language),
            ("gender_mismatch", self._matches_gender),
            ("blackout_date", self._free_on_exam_date),
        ]

    def filter(
        self,
        student: StudentProfile,
        exam: ExamRegistration,
        scribes: List[ScribeProfile],
        distance_cap_km: Optional[float] = None,
    ) -> List[ScribeProfile]:
        """
        Return the scribes that pass every hard constraint, in input order.

        Args:
            student: Student requesting a scribe
            exam: Exam registration
            scribes: Candidate pool
            distance_cap_km: Replaces the student's max travel distance
                (emergency matching). Scribe willingness still applies.

        Returns:
            Eligible scribes. Empty means "no eligible scribes", not an error.
        """
        eligible = []
        for scribe in scribes:
            reason = self.explain(student, exam, scribe, distance_cap_km)
            if reason is None:
                eligible.append(scribe)
            else:
                logger.debug(f"Scribe {scribe.id} rejected for exam {exam.id}: {reason}")
        return eligible

    def explain(
        self,
        student: StudentProfile,
        exam: ExamRegistration,
        scribe: ScribeProfile,
        distance_cap_km: Optional[float] = None,
    ) -> Optional[str]:
        """Return the first failing rule name, or None if the scribe is eligible."""
        for rule_name, rule in self._rules:
            if not rule(student, exam, scribe, distance_cap_km):
                return rule_name
        return None

    # =========================================================================
    # Rules
    # =========================================================================

    @staticmethod
    def _is_verified(student, exam, scribe, distance_cap_km) -> bool:
        return scribe.verification.is_verified is True

    @staticmethod
    def _within_distance(student, exam, scribe, distance_cap_km) -> bool:
        student_cap = (
            distance_cap_km if distance_cap_km is not None
            else student.preferences.max_travel_distance
        )
        limit = min(student_cap, scribe.availability.max_distance_willing)
        return student_scribe_distance(student, scribe) <= limit

    @staticmethod
    def _accepts_exam_type(student, exam, scribe, distance_cap_km) -> bool:
        return exam.exam_details.exam_type in scribe.availability.exam_types_willing

    @staticmethod
    def _knows_language(student, exam, scribe, distance_cap_km) -> bool:
        return exam.exam_details.language in scribe.qualifications.languages_known

    @staticmethod
    def _matches_gender(student, exam, scribe, distance_cap_km) -> bool:
        preference = student.preferences.scribe_gender
        if preference is None or preference == GenderPreference.ANY:
            return True
        return scribe.personal_info.gender.value == preference.value

    @staticmethod
    def _free_on_exam_date(student, exam, scribe, distance_cap_km) -> bool:
        return exam.exam_details.date not in scribe.availability.blackout_dates
