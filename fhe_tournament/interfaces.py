"""
Abstract base classes defining the interfaces for the FHE tournament core.

The homomorphic scheme and the decryption oracle are external capabilities;
the core only depends on the narrow contracts below. All interfaces are
synchronous: oracle callbacks arrive as messages, not re-entrant calls.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .models import (
    DecryptedMatchRecord,
    EncryptedMatchRecord,
    PendingDecryptionRequest,
)

if TYPE_CHECKING:
    from .events import DomainEvent
    from .oracles.committee import CommitteeProof


class EncryptedValue(ABC):
    """Opaque ciphertext handle. The core never sees its plaintext."""

    @property
    @abstractmethod
    def handle(self) -> str:
        """Stable opaque identifier of the ciphertext."""
        pass

    @abstractmethod
    def is_initialized(self) -> bool:
        """Whether the handle refers to an actual ciphertext."""
        pass


class HomomorphicBackend(ABC):
    """Additive homomorphic arithmetic plus client-side encryption."""

    @abstractmethod
    def zero(self) -> EncryptedValue:
        """Fresh encryption of zero."""
        pass

    @abstractmethod
    def add(self, a: EncryptedValue, b: EncryptedValue) -> EncryptedValue:
        """Encryption of the sum of two encrypted integers."""
        pass

    @abstractmethod
    def uninitialized(self) -> EncryptedValue:
        """Handle that refers to no ciphertext."""
        pass

    def is_initialized(self, value: EncryptedValue) -> bool:
        return value.is_initialized()

    @abstractmethod
    def encrypt_uint(self, value: int) -> EncryptedValue:
        """Encrypt a non-negative integer."""
        pass

    @abstractmethod
    def encrypt_text(self, value: str) -> EncryptedValue:
        """Encrypt a UTF-8 string."""
        pass


class DecryptionOracle(ABC):
    """External service that decrypts ciphertexts under committee proof."""

    @abstractmethod
    def request_decryption(
        self, handles: Sequence[EncryptedValue], callback_id: str
    ) -> int:
        """
        Ask for decryption of handles, returning the request id immediately.

        The result is delivered later, possibly out of order, as a
        DecryptionResult message carrying callback_id.
        """
        pass

    @abstractmethod
    def check_proof(
        self, request_id: int, cleartext: bytes, proof: "CommitteeProof"
    ) -> bool:
        """Whether proof attests cleartext as the decryption for request_id."""
        pass


class EventSink(ABC):
    """Receiver of committed domain events."""

    @abstractmethod
    def publish(self, event: "DomainEvent") -> None:
        pass


class ScoringFunction(ABC):
    """Per-match score used by the ranking engine."""

    @abstractmethod
    def score(self, record: DecryptedMatchRecord) -> int:
        pass


@dataclass
class TournamentState:
    """All mutable core state. Only touched inside Store.transaction()."""

    next_match_id: int = 1
    encrypted: dict[int, EncryptedMatchRecord] = field(default_factory=dict)
    decrypted: dict[int, DecryptedMatchRecord] = field(default_factory=dict)
    requests: dict[int, PendingDecryptionRequest] = field(default_factory=dict)
    counters: dict[str, EncryptedValue] = field(default_factory=dict)
    player_list: list[str] = field(default_factory=list)
    player_index: dict[str, str] = field(default_factory=dict)  # identity hash -> player_id
    revealed_stats: dict[str, int] = field(default_factory=dict)
    outbox: list["DomainEvent"] = field(default_factory=list)

    def clone(self) -> "TournamentState":
        """Copy containers; records and handles are immutable and shared."""
        return TournamentState(
            next_match_id=self.next_match_id,
            encrypted=dict(self.encrypted),
            decrypted=dict(self.decrypted),
            requests=dict(self.requests),
            counters=dict(self.counters),
            player_list=list(self.player_list),
            player_index=dict(self.player_index),
            revealed_stats=dict(self.revealed_stats),
            outbox=list(self.outbox),
        )


class Store(ABC):
    """Repository for core state with explicit transaction boundaries."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[TournamentState]:
        """
        Run-to-completion block over the state.

        Commits all mutations together on normal exit and restores the
        previous state if the block raises. Events appended to the outbox
        are published to subscribers only after commit.
        """
        pass

    @abstractmethod
    def subscribe(self, sink: EventSink) -> None:
        """Register a sink for committed events."""
        pass
