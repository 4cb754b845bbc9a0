"""
Unit tests for the score oracle adapter.

Tests reply parsing, the weighted fallback and how oracle failures are
absorbed.
"""

import asyncio
import logging

import httpx
import pytest

from scribe_matching.domain.matching.factor_calculator import FactorCalculator
from scribe_matching.domain.matching.interfaces import OracleOptions
from scribe_matching.domain.matching.score_adapter import (
    ScoreOracleAdapter,
    build_scoring_prompt,
    parse_oracle_reply,
    round_half_up,
    weighted_score,
)
from scribe_matching.domain.models import MatchingFactors, MatchingWeights, ScoreSource
from scribe_matching.infrastructure.exceptions import AIServiceError, OracleResponseError


@pytest.fixture
def context(make_context, student, exam, scribe):
    return make_context(student, exam, scribe)


@pytest.fixture
def factors(context):
    return FactorCalculator().calculate(context)


def uniform_factors(value: float) -> MatchingFactors:
    return MatchingFactors(
        distance_score=value,
        availability_score=value,
        subject_match_score=value,
        language_match_score=value,
        experience_score=value,
        rating_score=value,
        preference_match_score=value,
    )


class TestRounding:
    def test_half_rounds_up(self):
        assert round_half_up(87.5) == 88
        assert round_half_up(86.5) == 87

    def test_below_half_rounds_down(self):
        assert round_half_up(87.49) == 87


class TestWeightedScore:
    """Tests for the deterministic fallback."""

    def test_uniform_factors_give_same_score(self):
        assert weighted_score(uniform_factors(70.0), MatchingWeights()) == 70

    def test_baseline_pair(self, factors):
        """22.4 + 20 + 15 + 15 + 8.7 + 9 + 5 rounds to 95."""
        assert weighted_score(factors, MatchingWeights()) == 95

    def test_custom_weights(self):
        weights = MatchingWeights(
            distance=1.0,
            availability=0.0,
            subject=0.0,
            language=0.0,
            experience=0.0,
            rating=0.0,
            preference=0.0,
        )
        factors = uniform_factors(10.0).model_copy(update={"distance_score": 64.0})
        assert weighted_score(factors, weights) == 64


class TestParseOracleReply:
    """Tests for oracle reply parsing."""

    @pytest.mark.parametrize("reply,expected", [
        ("87", 87.0),
        ("  92\n", 92.0),
        ("87.6 points", 87.6),
        ("0", 0.0),
        ("100", 100.0),
    ])
    def test_valid_replies(self, reply, expected):
        assert parse_oracle_reply(reply) == pytest.approx(expected)

    @pytest.mark.parametrize("reply", [None, "", "   ", "Score: 87", "nan", "high"])
    def test_non_numeric_replies(self, reply):
        with pytest.raises(OracleResponseError):
            parse_oracle_reply(reply)

    @pytest.mark.parametrize("reply", ["150", "-5", "100.5"])
    def test_out_of_range_replies(self, reply):
        with pytest.raises(OracleResponseError):
            parse_oracle_reply(reply)

    def test_error_keeps_truncated_reply(self):
        with pytest.raises(OracleResponseError) as exc_info:
            parse_oracle_reply("x" * 500)
        assert exc_info.value.details["raw_reply"] == "x" * 100


class TestScoringPrompt:
    def test_prompt_describes_pair(self, context, factors):
        prompt = build_scoring_prompt(context, factors)

        assert "Karnataka PUC II (board)" in prompt
        assert "Disability: blind (complete)" in prompt
        assert "Rating: 4.5/5 stars" in prompt
        assert "Success rate: 90.0%" in prompt
        assert "Availability: 100.0/100" in prompt
        assert prompt.endswith("Respond with just a number (0-100) representing the optimal match score.")


class TestScoreOracleAdapter:
    """Tests for ScoreOracleAdapter."""

    @pytest.mark.asyncio
    async def test_no_oracle_uses_weighted(self, context, factors):
        adapter = ScoreOracleAdapter(MatchingWeights())

        outcome = await adapter.score(context, factors)

        assert outcome.score == 95
        assert outcome.source == ScoreSource.WEIGHTED

    @pytest.mark.asyncio
    async def test_oracle_reply_is_rounded(self, context, factors, fakes):
        oracle = fakes.fixed("87.5")
        adapter = ScoreOracleAdapter(MatchingWeights(), oracle=oracle)

        outcome = await adapter.score(context, factors)

        assert outcome.score == 88
        assert outcome.source == ScoreSource.ORACLE
        assert len(oracle.prompts) == 1

    @pytest.mark.asyncio
    async def test_options_passed_through(self, context, factors, fakes):
        oracle = fakes.fixed("80")
        options = OracleOptions(temperature=0.1, max_output_tokens=5)
        adapter = ScoreOracleAdapter(MatchingWeights(), oracle=oracle, options=options)

        await adapter.score(context, factors)

        assert oracle.options == [options]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["", "excellent match", "250"])
    async def test_invalid_reply_falls_back(self, context, factors, fakes, reply, caplog):
        adapter = ScoreOracleAdapter(MatchingWeights(), oracle=fakes.fixed(reply))

        with caplog.at_level(logging.WARNING):
            outcome = await adapter.score(context, factors)

        assert outcome.score == weighted_score(factors, MatchingWeights())
        assert outcome.source == ScoreSource.WEIGHTED
        assert "using weighted score" in caplog.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        AIServiceError("HTTP 500", model="llama3.1-8b", operation="score"),
        httpx.ConnectError("connection refused"),
        RuntimeError("unexpected"),
    ])
    async def test_oracle_errors_fall_back(self, context, factors, fakes, error):
        adapter = ScoreOracleAdapter(MatchingWeights(), oracle=fakes.failing(error))

        outcome = await adapter.score(context, factors)

        assert outcome.score == 95
        assert outcome.source == ScoreSource.WEIGHTED

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, context, factors, fakes):
        adapter = ScoreOracleAdapter(
            MatchingWeights(),
            oracle=fakes.slow(delay=1.0),
            timeout_seconds=0.05,
        )

        outcome = await adapter.score(context, factors)

        assert outcome.source == ScoreSource.WEIGHTED
        assert outcome.score == 95

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, context, factors, fakes):
        adapter = ScoreOracleAdapter(MatchingWeights(), oracle=fakes.failing(asyncio.CancelledError()))

        with pytest.raises(asyncio.CancelledError):
            await adapter.score(context, factors)
