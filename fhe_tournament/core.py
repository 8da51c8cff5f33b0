"""
Tournament core facade.

Wires registry, correlator, verification processor, ledger, anti-cheat
detector and ranking around one Store, and applies oracle callbacks that
arrive as messages on a CallbackInbox.
"""

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from .anticheat import CheatDetector
from .config import CoreConfig
from .correlator import MATCH_VERIFICATION_CALLBACK, PLAYER_STATS_CALLBACK, DecryptionCorrelator
from .encryption.paillier_backend import PaillierBackend
from .exceptions import AlreadyVerified, InvalidRequest, TournamentError
from .interfaces import DecryptionOracle, EncryptedValue, EventSink, HomomorphicBackend, ScoringFunction, Store
from .ledger import PlayerStatLedger
from .logging_config import get_logger
from .models import DecryptionResult, RankingResult
from .oracles.committee import Committee, CommitteeProof
from .oracles.inbox import CallbackInbox
from .oracles.local_oracle import LocalCommitteeOracle
from .rankers.scoring import ConstantScore
from .rankers.verified_match_ranker import RankingEngine, ResultValidator
from .registry import MatchRegistry
from .storage.memory_store import InMemoryStore
from .verification import VerificationProcessor


@dataclass
class DrainReport:
    """Outcome of one drain_callbacks() pass."""

    applied: list[int] = field(default_factory=list)  # request ids
    failures: list[tuple[int, str, str]] = field(default_factory=list)  # (request_id, error type, message)

    @property
    def processed(self) -> int:
        return len(self.applied) + len(self.failures)


class TournamentCore:
    """Entry points of the encrypted match lifecycle."""

    def __init__(
        self,
        store: Store,
        backend: HomomorphicBackend,
        oracle: DecryptionOracle,
        scoring: ScoringFunction | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the core with its external capabilities."""
        self.store: Store = store
        self.backend: HomomorphicBackend = backend
        self.oracle: DecryptionOracle = oracle

        self.registry: MatchRegistry = MatchRegistry(store, clock=clock)
        self.correlator: DecryptionCorrelator = DecryptionCorrelator(store, oracle)
        self.ledger: PlayerStatLedger = PlayerStatLedger(store, backend, self.correlator)
        self.processor: VerificationProcessor = VerificationProcessor(
            store, oracle, self.correlator, self.ledger
        )
        self.detector: CheatDetector = CheatDetector(self.registry)
        self.ranking: RankingEngine = RankingEngine(store, scoring)
        self.validator: ResultValidator = ResultValidator(self.ranking)

        self._handlers: dict[str, Callable[[int, bytes, CommitteeProof], int]] = {
            MATCH_VERIFICATION_CALLBACK: self.processor.on_decryption_result,
            PLAYER_STATS_CALLBACK: self.ledger.on_player_stats_result,
        }
        self.logger = get_logger("core")

    def subscribe(self, sink: EventSink) -> None:
        self.store.subscribe(sink)

    # Submission and requests

    def submit_match(
        self,
        encrypted_stats: EncryptedValue,
        encrypted_log: EncryptedValue,
        encrypted_player_id: EncryptedValue,
    ) -> int:
        return self.registry.submit(encrypted_stats, encrypted_log, encrypted_player_id)

    def request_verification(self, match_id: int) -> int:
        return self.correlator.request_verification(match_id)

    def request_player_stats_decryption(self, player_id: str) -> int:
        return self.ledger.request_player_stats_decryption(player_id)

    # Oracle callbacks

    def on_decryption_result(self, request_id: int, cleartext: bytes, proof: CommitteeProof) -> int:
        return self.processor.on_decryption_result(request_id, cleartext, proof)

    def on_player_stats_result(self, request_id: int, cleartext: bytes, proof: CommitteeProof) -> int:
        return self.ledger.on_player_stats_result(request_id, cleartext, proof)

    def dispatch(self, result: DecryptionResult) -> int:
        """Route one oracle message to its handler."""
        handler = self._handlers.get(result.callback_id)
        if handler is None:
            raise InvalidRequest(f"Unknown callback id {result.callback_id!r}")
        return handler(result.request_id, result.cleartext, result.proof)

    def drain_callbacks(
        self, inbox: CallbackInbox, block: bool = False, timeout: float | None = None
    ) -> DrainReport:
        """
        Apply queued oracle results on the calling thread.

        A refused message is logged and reported, and draining continues with
        the next one. A message that arrives after its match was settled
        closes its request as rejected; any other refusal is only noted on
        the request, which stays open for the oracle's real answer.

        Args:
            inbox: Queue the oracle posts results to
            block: Wait up to timeout for each next message
            timeout: Seconds to wait per message when blocking
        """
        report = DrainReport()
        while True:
            result = inbox.get(block=block, timeout=timeout)
            if result is None:
                break
            try:
                _ = self.dispatch(result)
                report.applied.append(result.request_id)
            except TournamentError as e:
                reason = f"{type(e).__name__}: {e}"
                self.logger.error(f"Callback for request {result.request_id} rejected: {reason}")
                report.failures.append((result.request_id, type(e).__name__, str(e)))
                if isinstance(e, AlreadyVerified):
                    self.correlator.mark_rejected(result.request_id, reason)
                else:
                    self.correlator.record_failed_attempt(result.request_id, reason)

        if report.processed:
            self.logger.info(
                f"Drained {report.processed} callback(s): {len(report.applied)} applied, {len(report.failures)} rejected"
            )
        return report

    # Queries

    def get_decrypted_match_data(self, match_id: int) -> tuple[str, str, str, bool]:
        return self.registry.get_decrypted(match_id).as_tuple()

    def get_encrypted_player_stats(self, player_id: str) -> EncryptedValue:
        return self.ledger.get_encrypted_player_stats(player_id)

    def get_revealed_player_stats(self, player_id: str) -> int | None:
        return self.ledger.get_revealed_player_stats(player_id)

    def detect_cheating_patterns(self, match_id: int, known_patterns: Iterable[str]) -> bool:
        return self.detector.detect_cheating_patterns(match_id, known_patterns)

    def calculate_rankings(self, match_ids: Sequence[int]) -> RankingResult:
        return self.ranking.calculate_rankings(match_ids)

    def validate_tournament_result(self, match_ids: Sequence[int], claimed_winner: str) -> bool:
        return self.validator.validate_tournament_result(match_ids, claimed_winner)


@dataclass
class LocalDeployment:
    """A core wired to the in-process Paillier backend and committee oracle."""

    core: TournamentCore
    backend: PaillierBackend
    oracle: LocalCommitteeOracle
    inbox: CallbackInbox

    def settle(self, timeout: float | None = None) -> DrainReport:
        """Wait for the oracle to answer everything, then apply the answers."""
        self.oracle.wait(timeout=timeout)
        return self.core.drain_callbacks(self.inbox)

    def close(self) -> None:
        self.oracle.close()


def create_local_deployment(
    config: CoreConfig | None = None,
    auto_fulfil: bool = True,
    sinks: Sequence[EventSink] = (),
    scoring: ScoringFunction | None = None,
) -> LocalDeployment:
    """Wire dependency injection components for a local run."""
    config = config if config is not None else CoreConfig()
    logger = get_logger("create_local_deployment")

    logger.info(f"Creating local deployment: {config}")
    backend, decryptor = PaillierBackend.generate(config.key_length)
    committee, members = Committee.generate(config.committee_size, config.threshold)
    inbox = CallbackInbox()
    oracle = LocalCommitteeOracle(
        decryptor,
        committee,
        members,
        inbox,
        max_workers=config.oracle_workers,
        auto_fulfil=auto_fulfil,
    )

    store = InMemoryStore()
    core = TournamentCore(
        store,
        backend,
        oracle,
        scoring=scoring if scoring is not None else ConstantScore(config.match_score),
    )
    for sink in sinks:
        core.subscribe(sink)

    return LocalDeployment(core=core, backend=backend, oracle=oracle, inbox=inbox)
