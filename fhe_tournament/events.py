"""
Domain events emitted by the core after a transaction commits.
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar

from typing_extensions import override

from .interfaces import EventSink


@dataclass(frozen=True)
class DomainEvent:
    """Base event; name identifies the event type on the wire."""

    name: ClassVar[str] = "event"
    emitted_at: float = field(default_factory=time.time, kw_only=True)

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class MatchSubmitted(DomainEvent):
    name: ClassVar[str] = "match_submitted"
    match_id: int
    timestamp: float


@dataclass(frozen=True)
class VerificationRequested(DomainEvent):
    name: ClassVar[str] = "verification_requested"
    match_id: int
    request_id: int


@dataclass(frozen=True)
class MatchVerified(DomainEvent):
    name: ClassVar[str] = "match_verified"
    match_id: int


@dataclass(frozen=True)
class PlayerStatsDecryptionRequested(DomainEvent):
    name: ClassVar[str] = "player_stats_decryption_requested"
    player_id: str
    request_id: int


@dataclass(frozen=True)
class PlayerStatsRevealed(DomainEvent):
    name: ClassVar[str] = "player_stats_revealed"
    player_id: str
    request_id: int
    match_count: int


EVENT_TYPES: dict[str, type[DomainEvent]] = {
    cls.name: cls
    for cls in (
        MatchSubmitted,
        VerificationRequested,
        MatchVerified,
        PlayerStatsDecryptionRequested,
        PlayerStatsRevealed,
    )
}


def event_from_dict(data: dict[str, Any]) -> DomainEvent:
    """Rebuild an event from its to_dict() form."""
    payload = dict(data)
    name = payload.pop("event")
    if name not in EVENT_TYPES:
        raise ValueError(f"Unknown event type: {name}")
    return EVENT_TYPES[name](**payload)


class EventRecorder(EventSink):
    """Keeps committed events in memory, in publication order."""

    def __init__(self) -> None:
        self.events = list[DomainEvent]()

    @override
    def publish(self, event: DomainEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type[DomainEvent]) -> list[DomainEvent]:
        return [e for e in self.events if isinstance(e, event_type)]
