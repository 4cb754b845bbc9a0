# Matching module for the Scribe Matching Engine
from scribe_matching.domain.matching.interfaces import (
    MatchContext,
    ScoredScribe,
    ScoreOutcome,
    OracleOptions,
    ScoreOracle,
    WaitlistProvider,
    MatchingFactor,
    BaseMatchingFactor,
)
from scribe_matching.domain.matching.eligibility import EligibilityFilter
from scribe_matching.domain.matching.factor_calculator import FactorCalculator
from scribe_matching.domain.matching.score_adapter import ScoreOracleAdapter, weighted_score
from scribe_matching.domain.matching.ranker import (
    ALTERNATIVE_SCORE_FLOOR,
    RankedSelection,
    select_matches,
)
from scribe_matching.domain.matching.proposal_builder import ProposalBuilder
from scribe_matching.domain.matching.engine import ScribeMatchingEngine

__all__ = [
    "MatchContext",
    "ScoredScribe",
    "ScoreOutcome",
    "OracleOptions",
    "ScoreOracle",
    "WaitlistProvider",
    "MatchingFactor",
    "BaseMatchingFactor",
    "EligibilityFilter",
    "FactorCalculator",
    "ScoreOracleAdapter",
    "weighted_score",
    "ALTERNATIVE_SCORE_FLOOR",
    "RankedSelection",
    "select_matches",
    "ProposalBuilder",
    "ScribeMatchingEngine",
]
