"""
Scoring functions for the ranking engine.
"""

from typing_extensions import override

from ..interfaces import ScoringFunction
from ..logging_config import get_logger
from ..models import DecryptedMatchRecord

# Module-level logger
logger = get_logger("scoring")


class ConstantScore(ScoringFunction):
    """Every verified match is worth the same number of points."""

    def __init__(self, points: int = 100):
        self.points: int = points

    @override
    def score(self, record: DecryptedMatchRecord) -> int:
        return self.points


class PlayerStatsScore(ScoringFunction):
    """
    Reads the score from the decrypted player stats.

    Accepts either a bare integer ("95") or a "key=value" list such as
    "kills=3;score=95". Stats without a parseable score are worth default.
    """

    def __init__(self, field: str = "score", default: int = 0):
        self.field: str = field
        self.default: int = default

    @override
    def score(self, record: DecryptedMatchRecord) -> int:
        stats = record.player_stats.strip()
        try:
            return int(stats)
        except ValueError:
            pass

        for part in stats.split(";"):
            key, sep, value = part.partition("=")
            if sep and key.strip() == self.field:
                try:
                    return int(value.strip())
                except ValueError:
                    break

        logger.debug(f"No {self.field!r} in player stats {stats!r}, using {self.default}")
        return self.default
