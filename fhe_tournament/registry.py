"""
Match registry.

Stores submitted encrypted match records and assigns their identifiers.
"""

import time
from collections.abc import Callable

from .events import MatchSubmitted
from .exceptions import MatchNotFound, ValidationError
from .interfaces import EncryptedValue, Store
from .logging_config import get_logger
from .models import DecryptedMatchRecord, EncryptedMatchRecord


class MatchRegistry:
    """Owns EncryptedMatchRecords and their unverified decrypted twins."""

    def __init__(self, store: Store, clock: Callable[[], float] = time.time):
        self.store: Store = store
        self.clock: Callable[[], float] = clock
        self.logger = get_logger("registry")

    def submit(
        self,
        encrypted_stats: EncryptedValue,
        encrypted_log: EncryptedValue,
        encrypted_player_id: EncryptedValue,
    ) -> int:
        """
        Store a new match and return its id.

        Ciphertexts are trusted as produced by the client-side encryption
        capability; only their type is checked.
        """
        for value in (encrypted_stats, encrypted_log, encrypted_player_id):
            if not isinstance(value, EncryptedValue):
                raise ValidationError(f"Expected EncryptedValue, got {type(value).__name__}")

        with self.store.transaction() as state:
            match_id = state.next_match_id
            record = EncryptedMatchRecord(
                match_id=match_id,
                encrypted_player_stats=encrypted_stats,
                encrypted_game_log=encrypted_log,
                encrypted_player_id=encrypted_player_id,
                timestamp=self.clock(),
            )
            state.encrypted[match_id] = record
            state.decrypted[match_id] = DecryptedMatchRecord()
            state.next_match_id = match_id + 1
            state.outbox.append(MatchSubmitted(match_id=match_id, timestamp=record.timestamp))

        self.logger.info(f"Match {match_id} submitted")
        return match_id

    def get_encrypted(self, match_id: int) -> EncryptedMatchRecord:
        with self.store.transaction() as state:
            if match_id not in state.encrypted:
                raise MatchNotFound(f"Unknown match id: {match_id}")
            return state.encrypted[match_id]

    def get_decrypted(self, match_id: int) -> DecryptedMatchRecord:
        with self.store.transaction() as state:
            if match_id not in state.decrypted:
                raise MatchNotFound(f"Unknown match id: {match_id}")
            return state.decrypted[match_id]

    def is_verified(self, match_id: int) -> bool:
        return self.get_decrypted(match_id).verified

    def match_count(self) -> int:
        with self.store.transaction() as state:
            return len(state.encrypted)
