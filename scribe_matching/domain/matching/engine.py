"""
Scribe Matching Engine

Main orchestrator that combines all matching components into a single pipeline.
This is the primary entry point for pairing students with exam scribes.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from scribe_matching.domain.matching.eligibility import EligibilityFilter, student_scribe_distance
from scribe_matching.domain.matching.factor_calculator import FactorCalculator
from scribe_matching.domain.matching.interfaces import (
    MatchContext,
    OracleOptions,
    ScoreOracle,
    ScoredScribe,
    WaitlistProvider,
)
from scribe_matching.domain.matching.proposal_builder import ProposalBuilder, utc_now
from scribe_matching.domain.matching.ranker import select_matches
from scribe_matching.domain.matching.score_adapter import ScoreOracleAdapter
from scribe_matching.domain.models import (
    ExamRegistration,
    MatchingConfig,
    MatchingResponse,
    ScribeProfile,
    StudentProfile,
)

logger = logging.getLogger(__name__)

SYSTEM_ERROR_MESSAGE = "System error occurred during matching. Please try again."


class ScribeMatchingEngine:
    """
    Main matching engine that orchestrates the pipeline.

    Pipeline flow:
    1. Eligibility Filter - Drop scribes failing any hard constraint
    2. Factor Calculation - Seven 0-100 component scores per candidate
    3. Oracle Scoring - AI-adjusted overall score, weighted-sum fallback
    4. Ranking - Threshold, sort, slice into primary and alternatives
    5. Proposal Building - MatchAttempt records for the caller to persist

    The public coroutines never raise for well-formed input: every failure
    is reported through MatchingResponse.success/message. Caller
    cancellation is the one thing that propagates.
    """

    def __init__(
        self,
        config: Optional[MatchingConfig] = None,
        oracle: Optional[ScoreOracle] = None,
        waitlist: Optional[WaitlistProvider] = None,
        clock: Optional[Callable[[], datetime]] = None,
        oracle_options: Optional[OracleOptions] = None,
        oracle_timeout_seconds: float = 5.0,
        oracle_concurrency: int = 4,
        bulk_concurrency: int = 2,
        factor_calculator: Optional[FactorCalculator] = None,
    ):
        """
        Initialize the matching engine.

        Args:
            config: Weights, thresholds and limits. Defaults if None.
            oracle: Scoring oracle. If None, scores are the weighted sum.
            waitlist: Provides waitlist positions when nobody is eligible.
            clock: Returns "now"; drives proposal timestamps and scribe ages.
            oracle_options: Temperature and output budget for oracle calls.
            oracle_timeout_seconds: Per-call oracle timeout.
            oracle_concurrency: Max in-flight oracle calls per matching call.
            bulk_concurrency: Max concurrent find_matches calls in bulk_match.
            factor_calculator: Custom factor set. Defaults if None.
        """
        self.config = config or MatchingConfig()
        self._waitlist = waitlist
        self._clock = clock or utc_now
        self._oracle_concurrency = max(1, oracle_concurrency)
        self._bulk_concurrency = max(1, bulk_concurrency)

        self._eligibility = EligibilityFilter()
        self._calculator = factor_calculator or FactorCalculator()
        self._scorer = ScoreOracleAdapter(
            weights=self.config.weights,
            oracle=oracle,
            options=oracle_options,
            timeout_seconds=oracle_timeout_seconds,
        )
        self._proposals = ProposalBuilder(clock=self._clock)

    # =========================================================================
    # Public API
    # =========================================================================

    async def find_matches(
        self,
        student: StudentProfile,
        exam: ExamRegistration,
        available_scribes: List[ScribeProfile],
    ) -> MatchingResponse:
        """
        Find the best scribes for a student's exam.

        Args:
            student: Student requesting a scribe
            exam: Exam registration
            available_scribes: Candidate pool

        Returns:
            MatchingResponse with primary matches and alternatives
        """
        logger.info(f"Starting match process for student {student.id} and exam {exam.id}")
        try:
            return await self._run_pipeline(
                student,
                exam,
                available_scribes,
                minimum_score=self.config.thresholds.minimum_score,
            )
        except Exception:
            logger.exception(f"Matching engine error for student {student.id}, exam {exam.id}")
            return MatchingResponse(success=False, matches=[], message=SYSTEM_ERROR_MESSAGE)

    async def find_emergency_backup(
        self,
        student: StudentProfile,
        exam: ExamRegistration,
        available_scribes: List[ScribeProfile],
        exclude_scribe_ids: Iterable[str] = (),
    ) -> MatchingResponse:
        """
        Relaxed matching for when primary matching failed close to the exam.

        Replaces the student's travel preference with the fixed emergency
        distance cap (config.emergency.max_distance_km), which may be looser
        or tighter than the student's own limit. The scribe's own
        max_distance_willing still applies, the minimum score drops to
        config.emergency.minimum_score, and every other hard constraint
        still applies.

        Args:
            student: Student requesting a scribe
            exam: Exam registration
            available_scribes: Candidate pool
            exclude_scribe_ids: Scribes who already declined or were rejected

        Returns:
            MatchingResponse with "Emergency backup" messages
        """
        logger.info(f"Finding emergency backup for student {student.id} and exam {exam.id}")
        try:
            excluded = set(exclude_scribe_ids)
            pool = [s for s in available_scribes if s.id not in excluded]
            emergency = self.config.emergency

            return await self._run_pipeline(
                student,
                exam,
                pool,
                minimum_score=emergency.minimum_score,
                distance_cap_km=emergency.max_distance_km,
                message_prefix="Emergency backup: ",
            )
        except Exception:
            logger.exception(f"Emergency backup error for student {student.id}, exam {exam.id}")
            return MatchingResponse(success=False, matches=[], message=SYSTEM_ERROR_MESSAGE)

    async def bulk_match(
        self,
        students: List[StudentProfile],
        exams: List[ExamRegistration],
        available_scribes: List[ScribeProfile],
    ) -> Dict[str, MatchingResponse]:
        """
        Run find_matches for every (student, exam) pair in a batch.

        Exams are paired with students by exam.student_id. Each call is
        independent: no cross-student conflict resolution, so one scribe
        may be proposed to several students.

        Returns:
            Results keyed "{student_id}-{exam_id}"
        """
        logger.info(
            f"Bulk matching {len(students)} students with {len(available_scribes)} scribes"
        )
        semaphore = asyncio.Semaphore(self._bulk_concurrency)

        async def run(student: StudentProfile, exam: ExamRegistration):
            async with semaphore:
                response = await self.find_matches(student, exam, available_scribes)
            return f"{student.id}-{exam.id}", response

        pairs = [
            (student, exam)
            for student in students
            for exam in exams
            if exam.student_id == student.id
        ]
        results = await asyncio.gather(*(run(student, exam) for student, exam in pairs))
        return dict(results)

    async def score_single_scribe(
        self,
        student: StudentProfile,
        exam: ExamRegistration,
        scribe: ScribeProfile,
    ) -> Optional[ScoredScribe]:
        """
        Score a single scribe for a student's exam.

        Useful for explaining why a specific scribe was or wasn't proposed.

        Returns:
            ScoredScribe, or None if the scribe fails eligibility
        """
        reason = self._eligibility.explain(student, exam, scribe)
        if reason is not None:
            logger.info(f"Scribe {scribe.id} ineligible for exam {exam.id}: {reason}")
            return None

        scored = await self._score_candidates(student, exam, [scribe])
        return scored[0]

    def explain_ineligibility(
        self,
        student: StudentProfile,
        exam: ExamRegistration,
        scribe: ScribeProfile,
    ) -> Optional[str]:
        """Name of the first hard constraint the scribe fails, or None."""
        return self._eligibility.explain(student, exam, scribe)

    # =========================================================================
    # Pipeline
    # =========================================================================

    async def _run_pipeline(
        self,
        student: StudentProfile,
        exam: ExamRegistration,
        available_scribes: List[ScribeProfile],
        minimum_score: float,
        distance_cap_km: Optional[float] = None,
        message_prefix: str = "",
    ) -> MatchingResponse:
        # Step 1: Pre-filter on hard constraints
        eligible = self._eligibility.filter(student, exam, available_scribes, distance_cap_km)

        if not eligible:
            logger.info(f"No eligible scribes for exam {exam.id} ({len(available_scribes)} candidates)")
            return MatchingResponse(
                success=False,
                matches=[],
                message=f"{message_prefix}No eligible scribes found matching your requirements",
                waitlist_position=await self._waitlist_position(exam),
            )

        # Step 2 & 3: Factors and overall score per candidate
        scored = await self._score_candidates(student, exam, eligible)

        # Step 4: Rank and select
        limits = self.config.limits
        selection = select_matches(
            scored,
            minimum_score=minimum_score,
            max_matches=limits.max_matches_per_request,
            backup_count=limits.backup_scribe_count,
        )

        if not selection.primary:
            logger.info(
                f"{len(eligible)} eligible scribes for exam {exam.id}, none scored >= {minimum_score:g}"
            )
            return MatchingResponse(
                success=False,
                matches=[],
                message=f"{message_prefix}No scribes met the minimum compatibility score of {minimum_score:g}",
            )

        # Step 5: Build proposals
        matches = self._proposals.build_all(student.id, exam.id, selection.primary)
        alternatives = self._proposals.build_all(student.id, exam.id, selection.alternatives)

        logger.info(
            f"Matched exam {exam.id}: {len(matches)} primary, {len(alternatives)} alternatives"
        )
        return MatchingResponse(
            success=True,
            matches=matches,
            message=f"{message_prefix}Found {len(matches)} scribe matches for your exam",
            alternatives=alternatives,
        )

    async def _score_candidates(
        self,
        student: StudentProfile,
        exam: ExamRegistration,
        scribes: List[ScribeProfile],
    ) -> List[ScoredScribe]:
        """Score candidates concurrently; results keep input order."""
        semaphore = asyncio.Semaphore(self._oracle_concurrency)
        reference_date = self._clock().date()

        async def score_one(scribe: ScribeProfile) -> ScoredScribe:
            context = MatchContext(
                student=student,
                exam=exam,
                scribe=scribe,
                config=self.config,
                reference_date=reference_date,
                distance_km=student_scribe_distance(student, scribe),
            )
            factors = self._calculator.calculate(context)
            async with semaphore:
                outcome = await self._scorer.score(context, factors)

            return ScoredScribe(
                scribe=scribe,
                factors=factors.model_copy(update={"overall_score": outcome.score}),
                distance_km=context.distance_km,
                score_source=outcome.source,
            )

        tasks = [asyncio.ensure_future(score_one(scribe)) for scribe in scribes]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

    async def _waitlist_position(self, exam: ExamRegistration) -> Optional[int]:
        if self._waitlist is None:
            return None
        try:
            return await self._waitlist.position(exam)
        except Exception as e:
            logger.warning(f"Waitlist lookup failed for exam {exam.id}: {e}")
            return None
