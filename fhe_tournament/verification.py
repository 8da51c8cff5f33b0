"""
Verification processor.

Consumes match decryption callbacks. A callback either commits the
decrypted record, the ledger increment, the request transitions and the
MatchVerified event together, or changes nothing. Other open requests for
the same match are rejected as superseded when one is fulfilled.
"""

from .codec import decode_strings
from .correlator import DecryptionCorrelator
from .events import MatchVerified
from .exceptions import AlreadyVerified, ProofVerificationFailed
from .interfaces import DecryptionOracle, Store
from .ledger import PlayerStatLedger
from .logging_config import get_logger
from .models import DecryptedMatchRecord, RequestKind
from .oracles.committee import CommitteeProof

MATCH_FIELDS = 3  # player_stats, game_log, player_id


class VerificationProcessor:
    """Proof-gated, idempotent commit of oracle match decryptions."""

    def __init__(
        self,
        store: Store,
        oracle: DecryptionOracle,
        correlator: DecryptionCorrelator,
        ledger: PlayerStatLedger,
    ):
        self.store: Store = store
        self.oracle: DecryptionOracle = oracle
        self.correlator: DecryptionCorrelator = correlator
        self.ledger: PlayerStatLedger = ledger
        self.logger = get_logger("verification")

    def on_decryption_result(self, request_id: int, cleartext: bytes, proof: CommitteeProof) -> int:
        """
        Verify and commit a match decryption, returning the match id.

        Raises:
            InvalidRequest: request_id is not a known match request
            AlreadyVerified: the match was settled by an earlier callback
            ProofVerificationFailed: proof does not attest cleartext
            CleartextDecodeError: cleartext is not three strings
        """
        with self.store.transaction() as state:
            pending = self.correlator.resolve(request_id, RequestKind.MATCH)
            match_id = int(pending.key.domain_id)

            if state.decrypted[match_id].verified:
                raise AlreadyVerified(f"Match {match_id} is already verified")

            if not self.oracle.check_proof(request_id, cleartext, proof):
                raise ProofVerificationFailed(
                    f"Invalid proof for request {request_id} (match {match_id})"
                )

            player_stats, game_log, player_id = decode_strings(cleartext, MATCH_FIELDS)

            state.decrypted[match_id] = DecryptedMatchRecord(
                player_stats=player_stats,
                game_log=game_log,
                player_id=player_id,
                verified=True,
            )
            self.ledger.record_verified_match(player_id)
            self.correlator.mark_fulfilled(request_id)
            superseded = self.correlator.supersede(pending.key, request_id)
            state.outbox.append(MatchVerified(match_id=match_id))

        self.logger.info(f"Match {match_id} verified via request {request_id} (player {player_id!r})")
        if superseded:
            self.logger.info(f"Match {match_id}: closed superseded request(s) {superseded}")
        return match_id
