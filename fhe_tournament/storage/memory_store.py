"""
In-memory store implementation.

Holds the whole core state in a single TournamentState and gives every
entry point an all-or-nothing transaction over it.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from typing_extensions import override

from ..events import DomainEvent
from ..interfaces import EventSink, Store, TournamentState
from ..logging_config import get_logger

# Module-level logger
logger = get_logger("memory_store")


class InMemoryStore(Store):
    """
    Store backed by process memory.

    Transactions are re-entrant on the owning thread: nested blocks join the
    outermost one, which alone snapshots, commits or rolls back. A lock makes
    each outermost transaction run to completion before the next starts.
    """

    def __init__(self, state: TournamentState | None = None):
        self._state: TournamentState = state if state is not None else TournamentState()
        self._lock: threading.RLock = threading.RLock()
        self._depth: int = 0
        self._sinks = list[EventSink]()

    @override
    @contextmanager
    def transaction(self) -> Iterator[TournamentState]:
        with self._lock:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield self._state
                finally:
                    self._depth -= 1
                return

            backup = self._state.clone()
            self._depth = 1
            try:
                yield self._state
            except BaseException:
                self._state = backup
                logger.debug("Transaction rolled back")
                raise
            finally:
                self._depth = 0

            committed = self._state.outbox
            self._state.outbox = []
            if committed:
                logger.debug(f"Transaction committed with {len(committed)} event(s)")
            self._publish(committed)

    @override
    def subscribe(self, sink: EventSink) -> None:
        with self._lock:
            self._sinks.append(sink)

    def _publish(self, events: list[DomainEvent]) -> None:
        """
        Deliver committed events to every sink.

        A failing sink is logged and skipped; the commit it follows stands.
        """
        for event in events:
            for sink in self._sinks:
                try:
                    sink.publish(event)
                except Exception:
                    logger.exception(
                        f"Sink {type(sink).__name__} failed to publish {event.name}; continuing"
                    )
