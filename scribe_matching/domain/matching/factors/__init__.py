# Matching factors submodule
from scribe_matching.domain.matching.factors.distance import DistanceFactor
from scribe_matching.domain.matching.factors.availability import AvailabilityFactor
from scribe_matching.domain.matching.factors.qualifications import (
    SubjectMatchFactor,
    LanguageMatchFactor,
)
from scribe_matching.domain.matching.factors.experience import ExperienceFactor, RatingFactor
from scribe_matching.domain.matching.factors.preference import PreferenceFactor

__all__ = [
    "DistanceFactor",
    "AvailabilityFactor",
    "SubjectMatchFactor",
    "LanguageMatchFactor",
    "ExperienceFactor",
    "RatingFactor",
    "PreferenceFactor",
]
