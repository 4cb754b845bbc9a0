"""
Availability Factor

Checks whether the scribe is free for the exam's day and time window.
"""

from scribe_matching.domain.matching.geo import day_of_week_index, time_ranges_overlap
from scribe_matching.domain.matching.interfaces import BaseMatchingFactor, MatchContext
from scribe_matching.domain.models import Weekday


class AvailabilityFactor(BaseMatchingFactor):
    """
    Availability scoring factor.

    Binary score:
    - 100 = exam weekday is in days_available AND a slot on that weekday
      overlaps the exam's [start, end) window
    - 0 = otherwise
    """

    @property
    def name(self) -> str:
        return "availability_score"

    def calculate(self, context: MatchContext) -> float:
        details = context.exam.exam_details
        availability = context.scribe.availability

        exam_day = day_of_week_index(details.date)
        if Weekday.from_index(exam_day) not in availability.days_available:
            return 0.0

        has_overlap = any(
            slot.day_of_week == exam_day
            and time_ranges_overlap(slot.start_time, slot.end_time, details.start_time, details.end_time)
            for slot in availability.time_slots
        )
        return 100.0 if has_overlap else 0.0
