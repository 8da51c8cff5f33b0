"""
Ranker implementations.

Aggregates verified match scores per player and validates claimed winners.

Available implementations:
- RankingEngine: two-pass per-player aggregation over a match set
- ResultValidator: strict-first-maximum winner check
- ConstantScore, PlayerStatsScore: pluggable per-match scoring
"""

from .scoring import ConstantScore, PlayerStatsScore
from .verified_match_ranker import RankingEngine, ResultValidator

__all__ = ["ConstantScore", "PlayerStatsScore", "RankingEngine", "ResultValidator"]
