"""
Matching Routes

Endpoints exposing the matching engine. Profiles and exams arrive in the
request body; storing proposals is the caller's job.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import Field, model_validator

from scribe_matching.api.dependencies import get_matching_engine
from scribe_matching.domain.matching import ScribeMatchingEngine
from scribe_matching.domain.models import (
    CamelModel,
    ExamRegistration,
    MatchingFactors,
    MatchingResponse,
    ScoreSource,
    ScribeProfile,
    StudentProfile,
)
from scribe_matching.infrastructure.exceptions import ValidationError


router = APIRouter(prefix="/matching")


# ============================================================================
# Request/Response Models
# ============================================================================

class FindMatchesRequest(CamelModel):
    """Request for matching one student's exam against a scribe pool."""
    student: StudentProfile
    exam: ExamRegistration
    available_scribes: List[ScribeProfile] = Field(default_factory=list)


class EmergencyBackupRequest(FindMatchesRequest):
    """Emergency matching request with scribes to leave out."""
    exclude_scribe_ids: List[str] = Field(default_factory=list)


class BulkMatchRequest(CamelModel):
    """Batch of students and their exams sharing one scribe pool."""
    students: List[StudentProfile] = Field(..., min_length=1)
    exams: List[ExamRegistration] = Field(..., min_length=1)
    available_scribes: List[ScribeProfile] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_students(self) -> "BulkMatchRequest":
        ids = [s.id for s in self.students]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate student ids in bulk request")
        return self


class ScorePairRequest(CamelModel):
    """Request for detailed scoring of one student-scribe pair."""
    student: StudentProfile
    exam: ExamRegistration
    scribe: ScribeProfile


class ScorePairResponse(CamelModel):
    """Detailed scoring for one pair."""
    scribe_id: str
    eligible: bool
    ineligible_reason: Optional[str] = None
    distance_km: Optional[float] = None
    factors: Optional[MatchingFactors] = None
    score_source: Optional[ScoreSource] = None


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/find", response_model=MatchingResponse, response_model_exclude_none=True)
async def find_matches(
    request: FindMatchesRequest,
    engine: ScribeMatchingEngine = Depends(get_matching_engine),
) -> MatchingResponse:
    """Find primary scribe matches and alternatives for an exam."""
    _ensure_exam_belongs_to_student(request.student, request.exam)
    return await engine.find_matches(request.student, request.exam, request.available_scribes)


@router.post("/emergency", response_model=MatchingResponse, response_model_exclude_none=True)
async def find_emergency_backup(
    request: EmergencyBackupRequest,
    engine: ScribeMatchingEngine = Depends(get_matching_engine),
) -> MatchingResponse:
    """Relaxed-constraint matching close to the exam date."""
    _ensure_exam_belongs_to_student(request.student, request.exam)
    return await engine.find_emergency_backup(
        request.student,
        request.exam,
        request.available_scribes,
        exclude_scribe_ids=request.exclude_scribe_ids,
    )


@router.post(
    "/bulk",
    response_model=Dict[str, MatchingResponse],
    response_model_exclude_none=True,
)
async def bulk_match(
    request: BulkMatchRequest,
    engine: ScribeMatchingEngine = Depends(get_matching_engine),
) -> Dict[str, MatchingResponse]:
    """Match every student's exams independently. Keys are "{studentId}-{examId}"."""
    return await engine.bulk_match(request.students, request.exams, request.available_scribes)


@router.post("/score", response_model=ScorePairResponse, response_model_exclude_none=True)
async def score_pair(
    request: ScorePairRequest,
    engine: ScribeMatchingEngine = Depends(get_matching_engine),
) -> ScorePairResponse:
    """Explain how one scribe scores for a student's exam."""
    reason = engine.explain_ineligibility(request.student, request.exam, request.scribe)
    if reason is not None:
        return ScorePairResponse(scribe_id=request.scribe.id, eligible=False, ineligible_reason=reason)

    scored = await engine.score_single_scribe(request.student, request.exam, request.scribe)
    return ScorePairResponse(
        scribe_id=request.scribe.id,
        eligible=True,
        distance_km=round(scored.distance_km, 2),
        factors=scored.factors,
        score_source=scored.score_source,
    )


def _ensure_exam_belongs_to_student(student: StudentProfile, exam: ExamRegistration) -> None:
    if exam.student_id != student.id:
        raise ValidationError(
            "Exam does not belong to student",
            details={"student_id": student.id, "exam_student_id": exam.student_id},
        )
