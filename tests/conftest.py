"""
Test configuration and fixtures for the Scribe Matching Engine.

Provides shared fixtures for unit and integration tests. The baseline
scenario is a student in Bangalore sitting a Monday board exam, with one
verified scribe about 5 km away.
"""

import asyncio
from datetime import date, datetime, timezone
from types import SimpleNamespace
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from scribe_matching.domain.matching import MatchContext, OracleOptions, ScribeMatchingEngine
from scribe_matching.domain.models import (
    Disability,
    DisabilitySeverity,
    DisabilityType,
    ExamDetails,
    ExamRegistration,
    ExamType,
    Gender,
    GenderPreference,
    Location,
    MatchingConfig,
    ScribeAvailability,
    ScribeExperience,
    ScribePersonalInfo,
    ScribeProfile,
    ScribeQualifications,
    ScribeVerification,
    StudentAcademic,
    StudentPreferences,
    StudentProfile,
    StudentVerification,
    TimeSlot,
    Weekday,
)


BANGALORE = (12.9716, 77.5946)
KORAMANGALA = (12.9352, 77.6245)  # ~5.2 km from BANGALORE

FIXED_NOW = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
EXAM_DATE = date(2025, 1, 13)  # Monday


# =============================================================================
# Fake Oracles
# =============================================================================

class FixedReplyOracle:
    """Returns the same reply for every prompt and records calls."""

    def __init__(self, reply: str):
        self.reply = reply
        self.prompts: List[str] = []
        self.options: List[OracleOptions] = []

    async def score(self, prompt: str, options: OracleOptions) -> str:
        self.prompts.append(prompt)
        self.options.append(options)
        return self.reply


class FailingOracle:
    """Raises the given exception on every call."""

    def __init__(self, error: BaseException):
        self.error = error
        self.calls = 0

    async def score(self, prompt: str, options: OracleOptions) -> str:
        self.calls += 1
        raise self.error


class SlowOracle:
    """Sleeps before replying."""

    def __init__(self, delay: float, reply: str = "90"):
        self.delay = delay
        self.reply = reply

    async def score(self, prompt: str, options: OracleOptions) -> str:
        await asyncio.sleep(self.delay)
        return self.reply


class FixedWaitlist:
    def __init__(self, position: Optional[int] = None, error: Optional[Exception] = None):
        self._position = position
        self._error = error

    async def position(self, exam: ExamRegistration) -> Optional[int]:
        if self._error is not None:
            raise self._error
        return self._position


@pytest.fixture
def fakes():
    """Fake oracle and waitlist classes for building engines in tests."""
    return SimpleNamespace(
        fixed=FixedReplyOracle,
        failing=FailingOracle,
        slow=SlowOracle,
        waitlist=FixedWaitlist,
    )


# =============================================================================
# Clock
# =============================================================================

@pytest.fixture
def fixed_clock():
    """Clock pinned to 2025-01-01 08:00 UTC."""
    return lambda: FIXED_NOW


# =============================================================================
# Sample Data Factories
# =============================================================================

@pytest.fixture
def make_student():
    """Factory for student profiles. Keyword args override preferences."""

    def _make(
        student_id: str = "student-1",
        location=BANGALORE,
        max_travel_distance: float = 20.0,
        scribe_gender: Optional[GenderPreference] = GenderPreference.ANY,
        scribe_age_range=(20, 40),
    ) -> StudentProfile:
        return StudentProfile(
            id=student_id,
            user_id=f"user-{student_id}",
            name="Ananya Rao",
            disability=Disability(
                type=DisabilityType.BLIND,
                severity=DisabilitySeverity.COMPLETE,
                accommodations_needed=["scribe", "extra time"],
            ),
            academic=StudentAcademic(
                institution="Bangalore University",
                course="B.Sc",
                year=2,
                language_preference=["English", "Kannada"],
            ),
            location=Location(latitude=location[0], longitude=location[1], city="Bangalore"),
            preferences=StudentPreferences(
                scribe_gender=scribe_gender,
                scribe_age_range=scribe_age_range,
                max_travel_distance=max_travel_distance,
            ),
            verification=StudentVerification(is_verified=True),
        )

    return _make


@pytest.fixture
def make_exam():
    """Factory for exam registrations on the baseline Monday."""

    def _make(
        exam_id: str = "exam-1",
        student_id: str = "student-1",
        exam_type: ExamType = ExamType.BOARD,
        subjects=("Mathematics", "Physics"),
        language: str = "English",
        exam_date: date = EXAM_DATE,
        start_time: str = "09:00",
        end_time: str = "12:00",
    ) -> ExamRegistration:
        return ExamRegistration(
            id=exam_id,
            student_id=student_id,
            exam_details=ExamDetails(
                exam_name="Karnataka PUC II",
                exam_type=exam_type,
                subjects=list(subjects),
                language=language,
                date=exam_date,
                start_time=start_time,
                end_time=end_time,
                duration=180,
            ),
        )

    return _make


@pytest.fixture
def make_scribe():
    """Factory for scribe profiles. Defaults pass every eligibility rule."""

    def _make(
        scribe_id: str = "scribe-1",
        location=KORAMANGALA,
        verified: bool = True,
        gender: Gender = Gender.FEMALE,
        date_of_birth: date = date(1995, 6, 15),
        subjects=("Mathematics", "Physics"),
        languages=("English", "Kannada"),
        total_years: float = 3.0,
        exam_types=(ExamType.BOARD,),
        total_exams: int = 20,
        successful_exams: int = 18,
        average_rating: float = 4.5,
        days_available=(Weekday.MONDAY, Weekday.WEDNESDAY),
        time_slots=None,
        max_distance_willing: float = 30.0,
        exam_types_willing=(ExamType.BOARD, ExamType.UNIVERSITY),
        blackout_dates=(),
    ) -> ScribeProfile:
        if time_slots is None:
            time_slots = [
                TimeSlot(day_of_week=1, start_time="08:00", end_time="13:00"),
                TimeSlot(day_of_week=3, start_time="14:00", end_time="18:00"),
            ]
        return ScribeProfile(
            id=scribe_id,
            user_id=f"user-{scribe_id}",
            personal_info=ScribePersonalInfo(
                name="Priya Sharma",
                gender=gender,
                date_of_birth=date_of_birth,
            ),
            qualifications=ScribeQualifications(
                education="Postgraduate",
                degree="M.Sc Mathematics",
                subjects=list(subjects),
                languages_known=list(languages),
            ),
            experience=ScribeExperience(
                total_years=total_years,
                exam_types=list(exam_types),
                total_exams_scribed=total_exams,
                successful_exams=successful_exams,
                average_rating=average_rating,
            ),
            availability=ScribeAvailability(
                days_available=list(days_available),
                time_slots=time_slots,
                max_distance_willing=max_distance_willing,
                exam_types_willing=list(exam_types_willing),
                blackout_dates=list(blackout_dates),
            ),
            location=Location(latitude=location[0], longitude=location[1], city="Bangalore"),
            verification=ScribeVerification(is_verified=verified, background_check=verified),
        )

    return _make


@pytest.fixture
def make_context():
    """Factory for MatchContext with the distance computed from the profiles."""
    from scribe_matching.domain.matching.eligibility import student_scribe_distance

    def _make(student, exam, scribe, config: Optional[MatchingConfig] = None) -> MatchContext:
        return MatchContext(
            student=student,
            exam=exam,
            scribe=scribe,
            config=config or MatchingConfig(),
            reference_date=FIXED_NOW.date(),
            distance_km=student_scribe_distance(student, scribe),
        )

    return _make


@pytest.fixture
def student(make_student):
    return make_student()


@pytest.fixture
def exam(make_exam):
    return make_exam()


@pytest.fixture
def scribe(make_scribe):
    return make_scribe()


# =============================================================================
# Engine and App Fixtures
# =============================================================================

@pytest.fixture
def engine(fixed_clock):
    """Engine with default config and no oracle (weighted scoring only)."""
    return ScribeMatchingEngine(clock=fixed_clock)


@pytest.fixture
def app(engine):
    """Get the FastAPI application with the engine dependency overridden."""
    from scribe_matching.api.dependencies import get_matching_engine
    from scribe_matching.main import app

    app.dependency_overrides[get_matching_engine] = lambda: engine
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Get synchronous test client."""
    return TestClient(app)
