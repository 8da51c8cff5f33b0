"""
Player stat ledger.

Keeps one encrypted verified-match counter per player, created lazily on a
player's first verified match, and the decryption path that reveals it.
"""

from .codec import decode_uint, identity_hash
from .correlator import PLAYER_STATS_CALLBACK, DecryptionCorrelator
from .events import PlayerStatsDecryptionRequested, PlayerStatsRevealed
from .exceptions import AlreadyVerified, PlayerNotFound, ProofVerificationFailed
from .interfaces import EncryptedValue, HomomorphicBackend, Store
from .logging_config import get_logger
from .models import CorrelationKey, RequestKind, RequestState
from .oracles.committee import CommitteeProof


class PlayerStatLedger:
    """Encrypted per-player counters plus a direct identity-hash index."""

    def __init__(self, store: Store, backend: HomomorphicBackend, correlator: DecryptionCorrelator):
        self.store: Store = store
        self.backend: HomomorphicBackend = backend
        self.correlator: DecryptionCorrelator = correlator
        self.logger = get_logger("ledger")

    def record_verified_match(self, player_id: str) -> EncryptedValue:
        """
        Count one verified match for player_id.

        Registers the player with an encrypted zero on first sighting, then
        adds an encrypted one. Joins the caller's transaction.
        """
        with self.store.transaction() as state:
            counter = state.counters.get(player_id, self.backend.uninitialized())
            if not self.backend.is_initialized(counter):
                counter = self.backend.zero()
                state.player_list.append(player_id)
                state.player_index[identity_hash(player_id)] = player_id
                self.logger.info(f"Player {player_id!r} added to ledger")
            counter = self.backend.add(counter, self.backend.encrypt_uint(1))
            state.counters[player_id] = counter
        return counter

    def get_encrypted_player_stats(self, player_id: str) -> EncryptedValue:
        """Counter handle; uninitialized for players never verified."""
        with self.store.transaction() as state:
            return state.counters.get(player_id, self.backend.uninitialized())

    def has_player(self, player_id: str) -> bool:
        with self.store.transaction() as state:
            return player_id in state.counters

    def players(self) -> list[str]:
        """Players in the order of their first verified match."""
        with self.store.transaction() as state:
            return list(state.player_list)

    def lookup_hash(self, derived_id: str) -> str:
        with self.store.transaction() as state:
            player_id = state.player_index.get(derived_id)
        if player_id is None:
            raise PlayerNotFound(f"No player for identity hash {derived_id}")
        return player_id

    def request_player_stats_decryption(self, player_id: str) -> int:
        """Ask the oracle to reveal a player's verified-match count."""
        key = CorrelationKey(RequestKind.PLAYER_STATS, identity_hash(player_id))
        with self.store.transaction() as state:
            if player_id not in state.counters:
                raise PlayerNotFound(f"Player {player_id!r} has no ledger entry")
            counter = state.counters[player_id]
            request_id = self.correlator.open_request([counter], PLAYER_STATS_CALLBACK, key)
            state.outbox.append(
                PlayerStatsDecryptionRequested(player_id=player_id, request_id=request_id)
            )
        self.logger.info(f"Stats decryption requested for {player_id!r}: request {request_id}")
        return request_id

    def on_player_stats_result(self, request_id: int, cleartext: bytes, proof: CommitteeProof) -> int:
        """
        Handle the oracle callback for a player-stats request.

        The decrypted count is stored as the player's latest revealed value,
        announced with PlayerStatsRevealed and returned.
        """
        with self.store.transaction() as state:
            pending = self.correlator.resolve(request_id, RequestKind.PLAYER_STATS)
            if pending.state == RequestState.FULFILLED:
                raise AlreadyVerified(f"Request {request_id} was already fulfilled")
            player_id = self.lookup_hash(pending.key.domain_id)

            if not self.correlator.oracle.check_proof(request_id, cleartext, proof):
                raise ProofVerificationFailed(f"Invalid proof for request {request_id}")
            match_count = decode_uint(cleartext)

            state.revealed_stats[player_id] = match_count
            self.correlator.mark_fulfilled(request_id)
            state.outbox.append(
                PlayerStatsRevealed(player_id=player_id, request_id=request_id, match_count=match_count)
            )

        self.logger.info(f"Stats revealed for {player_id!r}: {match_count} verified match(es)")
        return match_count

    def get_revealed_player_stats(self, player_id: str) -> int | None:
        with self.store.transaction() as state:
            return state.revealed_stats.get(player_id)
