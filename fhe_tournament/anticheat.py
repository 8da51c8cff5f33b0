"""
Anti-cheat pattern detector.

Compares a verified match's game log against known cheating patterns by
exact content hash. Partial or fuzzy matching is not performed.
"""

from collections.abc import Iterable

from .codec import content_hash
from .exceptions import MatchNotVerified
from .registry import MatchRegistry
from .logging_config import get_logger

# Module-level logger
logger = get_logger("anticheat")


class CheatDetector:
    """Exact-match detector over decrypted game logs."""

    def __init__(self, registry: MatchRegistry):
        self.registry: MatchRegistry = registry

    def detect_cheating_patterns(self, match_id: int, known_patterns: Iterable[str]) -> bool:
        """Return True on the first pattern equal to the match's game log."""
        record = self.registry.get_decrypted(match_id)
        if not record.verified:
            raise MatchNotVerified(f"Match {match_id} is not verified")

        log_hash = content_hash(record.game_log)
        for index, pattern in enumerate(known_patterns):
            if content_hash(pattern) == log_hash:
                logger.warning(f"Match {match_id} matches known cheating pattern #{index}")
                return True

        logger.debug(f"Match {match_id} matches no known pattern")
        return False
