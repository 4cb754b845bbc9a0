"""
Match Proposal Builder

Converts ranked scribes into MatchAttempt records for the caller to
persist. Pure transformation, no I/O.
"""

import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from scribe_matching.domain.matching.interfaces import ScoredScribe
from scribe_matching.domain.models import MatchAttempt, MatchStatus, ScoreSource


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProposalBuilder:
    """Builds proposed MatchAttempts with audit metadata."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utc_now

    def build(self, student_id: str, exam_id: str, scored: ScoredScribe) -> MatchAttempt:
        score = scored.overall_score
        return MatchAttempt(
            id=str(uuid.uuid4()),
            student_id=student_id,
            scribe_id=scored.scribe.id,
            exam_id=exam_id,
            match_score=score,
            factors=scored.factors,
            status=MatchStatus.PROPOSED,
            proposed_at=self._clock(),
            notes=self._note(score, scored.score_source),
            score_source=scored.score_source,
        )

    def build_all(
        self,
        student_id: str,
        exam_id: str,
        scored: List[ScoredScribe],
    ) -> List[MatchAttempt]:
        return [self.build(student_id, exam_id, s) for s in scored]

    @staticmethod
    def _note(score: float, source: ScoreSource) -> str:
        if source == ScoreSource.ORACLE:
            return f"AI-generated match with {score:g}% compatibility"
        return f"Weighted match with {score:g}% compatibility"
