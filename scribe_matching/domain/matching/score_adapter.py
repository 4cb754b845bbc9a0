"""
Score Oracle Adapter

Turns a factor vector into the single 0-100 overall score.

Primary path asks an external text-completion oracle for an AI-adjusted
score. Any oracle problem (network error, HTTP error, timeout, empty or
malformed reply, value outside 0-100) is absorbed here and the
deterministic weighted sum is used instead. Oracle failures never reach
the caller.
"""

import asyncio
import logging
import math
import re
from typing import Optional

from scribe_matching.domain.matching.interfaces import (
    MatchContext,
    OracleOptions,
    ScoreOracle,
    ScoreOutcome,
)
from scribe_matching.domain.models import MatchingFactors, MatchingWeights, ScoreSource
from scribe_matching.infrastructure.exceptions import OracleResponseError

logger = logging.getLogger(__name__)

# Leading decimal number, like JavaScript's parseFloat
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def weighted_score(factors: MatchingFactors, weights: MatchingWeights) -> int:
    """Deterministic fallback: round(sum(factor_i * weight_i))."""
    total = (
        factors.distance_score * weights.distance
        + factors.availability_score * weights.availability
        + factors.subject_match_score * weights.subject
        + factors.language_match_score * weights.language
        + factors.experience_score * weights.experience
        + factors.rating_score * weights.rating
        + factors.preference_match_score * weights.preference
    )
    return round_half_up(total)


def parse_oracle_reply(reply: Optional[str]) -> float:
    """
    Parse an oracle reply as a bare score.

    Raises:
        OracleResponseError: empty reply, no leading number, NaN, or outside 0-100
    """
    if reply is None or not reply.strip():
        raise OracleResponseError("Empty reply from scoring oracle", raw_reply=reply)

    match = _LEADING_NUMBER.match(reply)
    if match is None:
        raise OracleResponseError("Oracle reply is not a number", raw_reply=reply)

    value = float(match.group(0))
    if math.isnan(value) or value < 0 or value > 100:
        raise OracleResponseError(f"Oracle score {value} outside 0-100", raw_reply=reply)

    return value


def build_scoring_prompt(context: MatchContext, factors: MatchingFactors) -> str:
    """Describe the student's needs, the exam, the scribe and the factor scores."""
    student = context.student
    details = context.exam.exam_details
    experience = context.scribe.experience
    success_rate = experience.successful_exams / max(experience.total_exams_scribed, 1) * 100

    accommodations = ", ".join(student.disability.accommodations_needed) or "none listed"
    special_requirements = student.preferences.special_requirements or "none"

    return f"""As an AI matching expert for a scribe-student pairing system, analyze this match and provide an optimal weighted score (0-100).

STUDENT CONTEXT:
- Disability: {student.disability.type.value} ({student.disability.severity.value})
- Exam: {details.exam_name} ({details.exam_type.value})
- Subjects: {", ".join(details.subjects)}
- Duration: {details.duration} minutes
- Special needs: {accommodations}
- Special requirements: {special_requirements}

SCRIBE CONTEXT:
- Experience: {experience.total_years:g} years, {experience.total_exams_scribed} exams
- Specializations: {", ".join(context.scribe.qualifications.subjects)}
- Rating: {experience.average_rating:g}/5 stars
- Success rate: {success_rate:.1f}%

MATCHING SCORES:
- Distance: {factors.distance_score:.1f}/100
- Availability: {factors.availability_score:.1f}/100
- Subject Match: {factors.subject_match_score:.1f}/100
- Language Match: {factors.language_match_score:.1f}/100
- Experience: {factors.experience_score:.1f}/100
- Rating: {factors.rating_score:.1f}/100
- Preference: {factors.preference_match_score:.1f}/100

Consider:
1. Critical factors for this specific exam type and student needs
2. Risk factors (low experience, poor ratings, distance issues)
3. Exceptional strengths that boost compatibility
4. Overall fit and likelihood of successful exam experience

Respond with just a number (0-100) representing the optimal match score."""


class ScoreOracleAdapter:
    """
    Produces the overall score for a factor vector.

    The oracle is optional; without one every score is the weighted sum.
    There is no retry: one failed oracle call means fallback.
    """

    def __init__(
        self,
        weights: MatchingWeights,
        oracle: Optional[ScoreOracle] = None,
        options: Optional[OracleOptions] = None,
        timeout_seconds: float = 5.0,
    ):
        self._weights = weights
        self._oracle = oracle
        self._options = options or OracleOptions()
        self._timeout_seconds = timeout_seconds

    async def score(self, context: MatchContext, factors: MatchingFactors) -> ScoreOutcome:
        """
        Score one pair.

        Cancellation (asyncio.CancelledError) is not absorbed so that a
        cancelled matching call cancels its in-flight oracle requests.
        """
        if self._oracle is None:
            return ScoreOutcome(weighted_score(factors, self._weights), ScoreSource.WEIGHTED)

        prompt = build_scoring_prompt(context, factors)

        try:
            reply = await asyncio.wait_for(
                self._oracle.score(prompt, self._options),
                timeout=self._timeout_seconds,
            )
            value = parse_oracle_reply(reply)
            return ScoreOutcome(round_half_up(value), ScoreSource.ORACLE)

        except asyncio.TimeoutError:
            logger.warning(
                f"Oracle timed out after {self._timeout_seconds}s for scribe "
                f"{context.scribe.id}; using weighted score"
            )
        except OracleResponseError as e:
            logger.warning(
                f"Invalid oracle reply for scribe {context.scribe.id}: {e.message} "
                f"{e.details}; using weighted score"
            )
        except Exception as e:
            logger.warning(
                f"Oracle scoring failed for scribe {context.scribe.id}: {e}; using weighted score"
            )

        return ScoreOutcome(weighted_score(factors, self._weights), ScoreSource.WEIGHTED)
