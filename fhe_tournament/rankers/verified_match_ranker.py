"""
Ranking over verified matches.

Aggregates per-match scores into per-player totals over a caller-supplied
match set and validates claimed tournament winners against them.
"""

from collections.abc import Sequence

from ..codec import identity_hash
from ..interfaces import ScoringFunction, Store
from ..logging_config import get_logger
from ..models import RankingResult
from .scoring import ConstantScore


class RankingEngine:
    """
    Two-pass aggregation of verified match scores.

    Players whose net total is exactly zero are left out of the output even
    though they count towards unique_players. This is kept as legacy
    behaviour of the ranking contract.
    """

    def __init__(self, store: Store, scoring: ScoringFunction | None = None):
        self.store: Store = store
        self.scoring: ScoringFunction = scoring if scoring is not None else ConstantScore()
        self.logger = get_logger("ranking")

    def calculate_rankings(self, match_ids: Sequence[int]) -> RankingResult:
        """Per-player totals in first-appearance order."""
        with self.store.transaction() as state:
            totals = dict[str, int]()
            seen = set[str]()
            appearance = list[str]()

            for match_id in match_ids:
                record = state.decrypted.get(match_id)
                if record is None or not record.verified:
                    self.logger.debug(f"Skipping unverified match {match_id}")
                    continue
                points = self.scoring.score(record)
                player_id = record.player_id
                if player_id not in seen and points != 0:
                    seen.add(player_id)
                totals[player_id] = totals.get(player_id, 0) + points
                appearance.append(player_id)

            result = RankingResult(unique_players=len(seen))
            for player_id in appearance:
                total = totals[player_id]
                if total == 0:
                    continue
                result.player_ids.append(player_id)
                result.scores.append(total)
                totals[player_id] = 0

        self.logger.info(
            f"Ranked {len(result.player_ids)} player(s) over {len(match_ids)} match id(s)"
        )
        return result


class ResultValidator:
    """Checks a claimed winner against the ranking engine."""

    def __init__(self, engine: RankingEngine):
        self.engine: RankingEngine = engine
        self.logger = get_logger("validator")

    def expected_winner(self, match_ids: Sequence[int]) -> str | None:
        """First player to reach the strictly greatest score, or None."""
        rankings = self.engine.calculate_rankings(match_ids)
        winner: str | None = None
        best = 0
        for player_id, score in zip(rankings.player_ids, rankings.scores):
            if winner is None or score > best:
                winner, best = player_id, score
        return winner

    def validate_tournament_result(self, match_ids: Sequence[int], claimed_winner: str) -> bool:
        expected = self.expected_winner(match_ids)
        if expected is None:
            self.logger.warning("No ranked players; claimed winner cannot be validated")
            return False

        valid = identity_hash(expected) == identity_hash(claimed_winner)
        if valid:
            self.logger.info(f"Claimed winner {claimed_winner!r} confirmed")
        else:
            self.logger.warning(f"Claimed winner {claimed_winner!r} rejected, expected {expected!r}")
        return valid
