"""
Ranker

Thresholds, sorts and slices scored candidates into primary matches
and alternatives.
"""

from dataclasses import dataclass, field
from typing import List

from scribe_matching.domain.matching.interfaces import ScoredScribe

# Alternatives only need to clear this floor, independent of minimum_score
ALTERNATIVE_SCORE_FLOOR = 40.0


@dataclass
class RankedSelection:
    """Primary matches and backup alternatives. Always disjoint."""
    primary: List[ScoredScribe] = field(default_factory=list)
    alternatives: List[ScoredScribe] = field(default_factory=list)


def rank_candidates(scored: List[ScoredScribe]) -> List[ScoredScribe]:
    """
    Rank candidates by overall score (descending).

    sorted() is stable, so ties keep the original candidate order.
    """
    return sorted(scored, key=lambda s: s.overall_score, reverse=True)


def select_matches(
    scored: List[ScoredScribe],
    minimum_score: float,
    max_matches: int,
    backup_count: int,
    alternative_floor: float = ALTERNATIVE_SCORE_FLOOR,
) -> RankedSelection:
    """
    Split scored candidates into primary matches and alternatives.

    Args:
        scored: All scored candidates, any order
        minimum_score: Primary matches must score at least this
        max_matches: Maximum primary matches
        backup_count: Maximum alternatives
        alternative_floor: Alternatives must score at least this

    Returns:
        RankedSelection with primary and alternatives
    """
    ranked = rank_candidates(scored)

    primary = [s for s in ranked if s.overall_score >= minimum_score][:max_matches]
    primary_ids = {id(s) for s in primary}

    alternatives = [
        s for s in ranked
        if id(s) not in primary_ids and s.overall_score >= alternative_floor
    ][:backup_count]

    return RankedSelection(primary=primary, alternatives=alternatives)
