"""
Core dataclasses for the FHE tournament core.

Defines the encrypted and decrypted match records, the pending decryption
request state machine, oracle callback messages and ranking output.
"""

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

from .exceptions import ValidationError

if TYPE_CHECKING:
    from .interfaces import EncryptedValue
    from .oracles.committee import CommitteeProof


class RequestKind(str, Enum):
    """Namespace of a correlation key."""

    MATCH = "match"
    PLAYER_STATS = "player_stats"


class RequestState(str, Enum):
    """Lifecycle of a pending decryption request."""

    REQUESTED = "requested"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(frozen=True)
class CorrelationKey:
    """Domain identifier a request resolves to, namespaced by kind."""

    kind: RequestKind
    domain_id: str

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.domain_id}"


@dataclass(frozen=True, eq=False)
class EncryptedMatchRecord:
    """Match telemetry as submitted. Immutable once created."""

    match_id: int
    encrypted_player_stats: "EncryptedValue"
    encrypted_game_log: "EncryptedValue"
    encrypted_player_id: "EncryptedValue"
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate match id."""
        if self.match_id < 1:
            raise ValidationError(f"match_id must be positive, got {self.match_id}")

    def handles(self) -> list["EncryptedValue"]:
        """Ciphertexts in the positional order the oracle decrypts them."""
        return [
            self.encrypted_player_stats,
            self.encrypted_game_log,
            self.encrypted_player_id,
        ]


@dataclass(frozen=True)
class DecryptedMatchRecord:
    """Plaintext side of a match, meaningful only once verified."""

    player_stats: str = ""
    game_log: str = ""
    player_id: str = ""
    verified: bool = False

    def as_tuple(self) -> tuple[str, str, str, bool]:
        return (self.player_stats, self.game_log, self.player_id, self.verified)


@dataclass(frozen=True)
class PendingDecryptionRequest:
    """Correlation entry from an oracle request id to a domain id."""

    request_id: int
    key: CorrelationKey
    state: RequestState = RequestState.REQUESTED
    created_at: float = field(default_factory=time.time)
    resolved_at: float | None = None
    reason: str = ""
    # Callbacks refused while the request stayed open
    rejections: tuple[str, ...] = ()

    def fulfilled(self) -> "PendingDecryptionRequest":
        return replace(self, state=RequestState.FULFILLED, resolved_at=time.time())

    def rejected(self, reason: str) -> "PendingDecryptionRequest":
        return replace(
            self, state=RequestState.REJECTED, resolved_at=time.time(), reason=reason
        )

    def with_failed_attempt(self, reason: str) -> "PendingDecryptionRequest":
        return replace(self, rejections=(*self.rejections, reason))


@dataclass(frozen=True)
class DecryptionResult:
    """Oracle callback message."""

    request_id: int
    callback_id: str
    cleartext: bytes
    proof: "CommitteeProof"


@dataclass
class RankingResult:
    """Per-player totals in first-appearance order."""

    player_ids: list[str] = field(default_factory=list)
    scores: list[int] = field(default_factory=list)
    unique_players: int = 0

    def __post_init__(self) -> None:
        """Validate parallel lists."""
        if len(self.player_ids) != len(self.scores):
            raise ValidationError("player_ids and scores must have the same length")

    def as_dict(self) -> dict[str, int]:
        return dict(zip(self.player_ids, self.scores))
