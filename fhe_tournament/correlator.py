"""
Decryption correlator.

Maps oracle-issued request ids to namespaced domain ids and tracks each
request through REQUESTED -> FULFILLED | REJECTED. A request is rejected
only once it is superseded; callbacks refused while it is open are kept
on the request as failed attempts. Entries are kept after resolution as an
audit trail.
"""

from collections.abc import Sequence

from .events import VerificationRequested
from .exceptions import AlreadyVerified, InvalidRequest, MatchNotFound
from .interfaces import DecryptionOracle, EncryptedValue, Store
from .logging_config import get_logger
from .models import CorrelationKey, PendingDecryptionRequest, RequestKind, RequestState

MATCH_VERIFICATION_CALLBACK = "match_verification"
PLAYER_STATS_CALLBACK = "player_stats"


class DecryptionCorrelator:
    """Correlation table shared by match verification and player-stat lookups."""

    def __init__(self, store: Store, oracle: DecryptionOracle):
        self.store: Store = store
        self.oracle: DecryptionOracle = oracle
        self.logger = get_logger("correlator")

    def request_verification(self, match_id: int) -> int:
        """
        Ask the oracle to decrypt a match and return the oracle request id.

        Earlier outstanding requests for the same match stay valid; the
        first callback to resolve wins.
        """
        key = CorrelationKey(RequestKind.MATCH, str(match_id))
        with self.store.transaction() as state:
            if match_id not in state.encrypted:
                raise MatchNotFound(f"Unknown match id: {match_id}")
            if state.decrypted[match_id].verified:
                raise AlreadyVerified(f"Match {match_id} is already verified")

            handles = state.encrypted[match_id].handles()
            request_id = self.open_request(handles, MATCH_VERIFICATION_CALLBACK, key)
            state.outbox.append(VerificationRequested(match_id=match_id, request_id=request_id))

        self.logger.info(
            f"Verification requested for match {match_id}: request {request_id} ({self.outstanding_for(key)} outstanding)"
        )
        return request_id

    def open_request(
        self, handles: Sequence[EncryptedValue], callback_id: str, key: CorrelationKey
    ) -> int:
        """
        Send a decryption request and correlate the id the oracle returns.

        Callers validate first: once the oracle holds the request it cannot
        be withdrawn, so registering the id is the only step left after it.
        """
        request_id = self.oracle.request_decryption(handles, callback_id)
        _ = self.register(request_id, key)
        return request_id

    def register(self, request_id: int, key: CorrelationKey) -> PendingDecryptionRequest:
        """Record a new pending request."""
        with self.store.transaction() as state:
            existing = state.requests.get(request_id)
            if existing is not None:
                self.logger.error(
                    f"Oracle reused request id {request_id}: kept {existing.key}, refused {key}"
                )
                raise InvalidRequest(f"Request id {request_id} is already correlated")
            pending = PendingDecryptionRequest(request_id=request_id, key=key)
            state.requests[request_id] = pending
        self.logger.debug(f"Correlated request {request_id} -> {key}")
        return pending

    def resolve(self, request_id: int, kind: RequestKind) -> PendingDecryptionRequest:
        """Look up a request, which must have been registered under kind."""
        with self.store.transaction() as state:
            pending = state.requests.get(request_id)
        if pending is None:
            raise InvalidRequest(f"Unknown request id: {request_id}")
        if pending.key.kind != kind:
            raise InvalidRequest(
                f"Request {request_id} is a {pending.key.kind.value} request, not {kind.value}"
            )
        return pending

    def mark_fulfilled(self, request_id: int) -> None:
        with self.store.transaction() as state:
            pending = state.requests[request_id]
            if pending.state != RequestState.REQUESTED:
                raise InvalidRequest(f"Request {request_id} is already {pending.state.value}")
            state.requests[request_id] = pending.fulfilled()

    def mark_rejected(self, request_id: int, reason: str) -> None:
        """Close an open request that can no longer succeed."""
        with self.store.transaction() as state:
            pending = state.requests.get(request_id)
            if pending is None or pending.state != RequestState.REQUESTED:
                return
            state.requests[request_id] = pending.rejected(reason)
        self.logger.warning(f"Request {request_id} rejected: {reason}")

    def record_failed_attempt(self, request_id: int, reason: str) -> None:
        """Note a refused callback; the request stays open for the real answer."""
        with self.store.transaction() as state:
            pending = state.requests.get(request_id)
            if pending is None:
                return
            state.requests[request_id] = pending.with_failed_attempt(reason)
        self.logger.warning(f"Refused callback for request {request_id}: {reason}")

    def supersede(self, key: CorrelationKey, winner: int) -> list[int]:
        """Reject the other open requests for key once winner has fulfilled it."""
        with self.store.transaction() as state:
            losers = [
                p.request_id
                for p in state.requests.values()
                if p.key == key and p.request_id != winner and p.state == RequestState.REQUESTED
            ]
            for request_id in losers:
                self.mark_rejected(request_id, f"superseded by request {winner}")
        return losers

    def get(self, request_id: int) -> PendingDecryptionRequest | None:
        with self.store.transaction() as state:
            return state.requests.get(request_id)

    def requests_for(self, key: CorrelationKey) -> list[PendingDecryptionRequest]:
        with self.store.transaction() as state:
            return [p for p in state.requests.values() if p.key == key]

    def outstanding_for(self, key: CorrelationKey) -> int:
        return sum(1 for p in self.requests_for(key) if p.state == RequestState.REQUESTED)
