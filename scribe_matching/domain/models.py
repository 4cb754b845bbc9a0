"""
Domain Models for the Scribe Matching Engine

Pure Pydantic models with no framework dependencies.
Profiles and exam registrations are produced and persisted elsewhere
(Firestore documents with camelCase keys); every model accepts both the
camelCase keys and the Python field names.
"""

import math
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

CalendarDate = date

HHMM_PATTERN = r"^([01]?\d|2[0-3]):[0-5]\d$"


class CamelModel(BaseModel):
    """Base model accepting camelCase keys from stored records."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    """Immutable CamelModel for configuration fixed at construction."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# =============================================================================
# ENUMS
# =============================================================================

class DisabilityType(str, Enum):
    BLIND = "blind"
    VISUALLY_IMPAIRED = "visually_impaired"
    LOW_VISION = "low_vision"
    OTHER = "other"


class DisabilitySeverity(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    PROGRESSIVE = "progressive"


class ExamType(str, Enum):
    BOARD = "board"
    COMPETITIVE = "competitive"
    UNIVERSITY = "university"
    ENTRANCE = "entrance"
    CERTIFICATION = "certification"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class GenderPreference(str, Enum):
    MALE = "male"
    FEMALE = "female"
    ANY = "any"


class Weekday(str, Enum):
    """Day names in index order, 0 = Sunday."""
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        return list(cls)[index]


class ExamStatus(str, Enum):
    PENDING = "pending"
    SCRIBE_ASSIGNED = "scribe_assigned"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MatchStatus(str, Enum):
    """Lifecycle of a match proposal. The engine only creates PROPOSED."""
    PROPOSED = "proposed"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class ScoreSource(str, Enum):
    """Which path produced a match score."""
    ORACLE = "oracle"
    WEIGHTED = "weighted"


# =============================================================================
# SHARED VALUE TYPES
# =============================================================================

class Location(CamelModel):
    """Geographic location with optional postal details."""
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    address: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    landmark: Optional[str] = None


class TimeSlot(CamelModel):
    """Recurring weekly availability window."""
    id: Optional[str] = None
    day_of_week: int = Field(..., ge=0, le=6)  # 0 = Sunday
    start_time: str = Field(..., pattern=HHMM_PATTERN)
    end_time: str = Field(..., pattern=HHMM_PATTERN)
    is_recurring: bool = True


# =============================================================================
# STUDENT
# =============================================================================

class Disability(CamelModel):
    type: DisabilityType
    severity: DisabilitySeverity
    details: str = ""
    accommodations_needed: List[str] = Field(default_factory=list)


class StudentAcademic(CamelModel):
    institution: str = ""
    course: str = ""
    year: Optional[int] = None
    previous_exam_experience: bool = False
    preferred_subjects: List[str] = Field(default_factory=list)
    language_preference: List[str] = Field(default_factory=list)


class StudentPreferences(CamelModel):
    scribe_gender: Optional[GenderPreference] = None
    scribe_age_range: Optional[Tuple[int, int]] = None
    max_travel_distance: float = Field(..., ge=0.0)  # km
    special_requirements: str = ""

    @field_validator("scribe_age_range")
    @classmethod
    def validate_age_range(cls, v: Optional[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
        if v is not None and v[0] > v[1]:
            raise ValueError("scribe_age_range minimum must not exceed maximum")
        return v


class StudentVerification(CamelModel):
    is_verified: bool = False
    verification_date: Optional[str] = None


class StudentProfile(CamelModel):
    """Student requesting a scribe. Immutable for the duration of a match call."""
    id: str
    user_id: Optional[str] = None
    name: str = ""
    disability: Disability
    academic: StudentAcademic = Field(default_factory=StudentAcademic)
    location: Location
    preferences: StudentPreferences
    verification: StudentVerification = Field(default_factory=StudentVerification)


# =============================================================================
# SCRIBE
# =============================================================================

class ScribePersonalInfo(CamelModel):
    name: str = ""
    gender: Gender
    date_of_birth: date


class ScribeQualifications(CamelModel):
    education: str = ""
    degree: str = ""
    subjects: List[str] = Field(default_factory=list)
    languages_known: List[str] = Field(default_factory=list)
    specializations: List[str] = Field(default_factory=list)


class ScribeExperience(CamelModel):
    total_years: float = Field(0.0, ge=0.0)
    exam_types: List[ExamType] = Field(default_factory=list)
    total_exams_scribed: int = Field(0, ge=0)
    successful_exams: int = Field(0, ge=0)
    average_rating: float = Field(0.0, ge=0.0, le=5.0)


class ScribeAvailability(CamelModel):
    days_available: List[Weekday] = Field(default_factory=list)
    time_slots: List[TimeSlot] = Field(default_factory=list)
    max_distance_willing: float = Field(..., ge=0.0)  # km
    exam_types_willing: List[ExamType] = Field(default_factory=list)
    blackout_dates: List[date] = Field(default_factory=list)


class ScribeVerification(CamelModel):
    is_verified: bool = False
    verification_date: Optional[str] = None
    background_check: bool = False


class ScribeProfile(CamelModel):
    """Candidate scribe. Immutable for the duration of a match call."""
    id: str
    user_id: Optional[str] = None
    personal_info: ScribePersonalInfo
    qualifications: ScribeQualifications = Field(default_factory=ScribeQualifications)
    experience: ScribeExperience = Field(default_factory=ScribeExperience)
    availability: ScribeAvailability
    location: Location
    verification: ScribeVerification = Field(default_factory=ScribeVerification)


# =============================================================================
# EXAM REGISTRATION
# =============================================================================

class ExamDetails(CamelModel):
    exam_name: str
    exam_type: ExamType
    subjects: List[str] = Field(default_factory=list)
    language: str
    date: CalendarDate
    start_time: str = Field(..., pattern=HHMM_PATTERN)
    end_time: str = Field(..., pattern=HHMM_PATTERN)
    duration: int = Field(0, ge=0)  # minutes
    location: Optional[Location] = None
    exam_center_id: Optional[str] = None


class ExamRequirements(CamelModel):
    scribe_needed: bool = True
    reader_needed: bool = False
    extra_time: int = 0  # percentage
    large_font: bool = False
    separate_room: bool = False
    computer_needed: bool = False
    special_instructions: str = ""


# =============================================================================
# MATCHING OUTPUT
# =============================================================================

class MatchingFactors(CamelModel):
    """Seven component scores plus the derived overall score, all 0-100."""
    distance_score: float = Field(..., ge=0.0, le=100.0)
    availability_score: float = Field(..., ge=0.0, le=100.0)
    subject_match_score: float = Field(..., ge=0.0, le=100.0)
    language_match_score: float = Field(..., ge=0.0, le=100.0)
    experience_score: float = Field(..., ge=0.0, le=100.0)
    rating_score: float = Field(..., ge=0.0, le=100.0)
    preference_match_score: float = Field(..., ge=0.0, le=100.0)
    overall_score: float = Field(0.0, ge=0.0, le=100.0)


class MatchAttempt(CamelModel):
    """A proposed student-scribe pairing for one exam."""
    id: str
    student_id: str
    scribe_id: str
    exam_id: str
    match_score: float
    factors: MatchingFactors
    status: MatchStatus = MatchStatus.PROPOSED
    proposed_at: datetime
    responded_at: Optional[datetime] = None
    notes: Optional[str] = None
    score_source: ScoreSource = ScoreSource.WEIGHTED


class ExamRegistration(CamelModel):
    """Exam for which a scribe is requested. Read-only input to the engine."""
    id: str
    student_id: str
    exam_details: ExamDetails
    requirements: ExamRequirements = Field(default_factory=ExamRequirements)
    status: ExamStatus = ExamStatus.PENDING
    scribe_assigned: Optional[str] = None
    match_history: List[MatchAttempt] = Field(default_factory=list)


class MatchingResponse(CamelModel):
    """Result of a matching call. The engine never raises past this."""
    success: bool
    matches: List[MatchAttempt] = Field(default_factory=list)
    message: str
    alternatives: Optional[List[MatchAttempt]] = None
    waitlist_position: Optional[int] = None


# =============================================================================
# CONFIGURATION
# =============================================================================

class MatchingWeights(FrozenCamelModel):
    """Factor weights for the deterministic weighted sum. Must sum to 1.0."""
    distance: float = Field(0.25, ge=0.0)
    availability: float = Field(0.20, ge=0.0)
    subject: float = Field(0.15, ge=0.0)
    language: float = Field(0.15, ge=0.0)
    experience: float = Field(0.10, ge=0.0)
    rating: float = Field(0.10, ge=0.0)
    preference: float = Field(0.05, ge=0.0)

    @model_validator(mode="after")
    def validate_normalized(self) -> "MatchingWeights":
        # Overall scores stay within 0-100 only for normalized weights
        total = sum(self.model_dump().values())
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ValueError(f"Matching weights sum to {total:.4f}, expected 1.0")
        return self


class MatchingThresholds(FrozenCamelModel):
    minimum_score: float = Field(60, ge=0.0, le=100.0)
    maximum_distance: float = Field(50, gt=0.0)  # km, distance score reaches 0 here
    response_time: float = Field(24, ge=0.0)  # hours, advisory only


class MatchingLimits(FrozenCamelModel):
    max_matches_per_request: int = Field(3, ge=1)
    max_active_requests: int = Field(5, ge=1)
    backup_scribe_count: int = Field(2, ge=0)


class EmergencyPolicy(FrozenCamelModel):
    """Relaxed constraints for short-notice backup matching."""
    minimum_score: float = Field(40, ge=0.0, le=100.0)
    max_distance_km: float = Field(25, gt=0.0)


class MatchingConfig(FrozenCamelModel):
    """Engine configuration, fixed at construction."""
    weights: MatchingWeights = Field(default_factory=MatchingWeights)
    thresholds: MatchingThresholds = Field(default_factory=MatchingThresholds)
    limits: MatchingLimits = Field(default_factory=MatchingLimits)
    emergency: EmergencyPolicy = Field(default_factory=EmergencyPolicy)
