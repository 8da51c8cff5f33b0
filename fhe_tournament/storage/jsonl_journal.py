"""
JSONL event journal.

Appends committed domain events to a JSONL file and reads them back.
Corrupted lines are skipped on load.
"""

import json
import typing
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from typing_extensions import override

from ..events import DomainEvent, event_from_dict
from ..interfaces import EventSink
from ..logging_config import get_logger

# Module-level logger
logger = get_logger("jsonl_journal")


class JSONLEventJournal(EventSink):
    """
    Append-only event log.

    One JSON object per line, in commit order. Only events from committed
    transactions ever reach the journal.
    """

    events_path: Path

    def __init__(self, events_path: Path):
        """
        Initialize JSONL journal.

        Args:
            events_path: Path to JSONL file for events
        """
        self.events_path = Path(events_path)
        self.events_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"JSONL event journal initialized: events={self.events_path}")

    @override
    def publish(self, event: DomainEvent) -> None:
        """Append one event."""
        with open(self.events_path, "a", encoding="utf-8") as f:
            json.dump(event.to_dict(), f, ensure_ascii=False)
            f.write("\n")
        logger.debug(f"Journaled {event.name}")

    def load_events(self) -> Iterable[DomainEvent]:
        """Yield all journaled events in order."""
        if not self.events_path.exists():
            return

        with open(self.events_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue

                try:
                    data = typing.cast(dict[str, Any], json.loads(line))
                    assert isinstance(data, dict), "event must be an object"
                    assert "event" in data, "Missing required field: event"
                    yield event_from_dict(data)
                except (json.JSONDecodeError, AssertionError, TypeError, ValueError) as e:
                    logger.warning(f"Skipping invalid JSON line in {self.events_path}: {e}")
                    continue

    def get_event_count(self) -> int:
        """Number of stored event lines."""
        if not self.events_path.exists():
            return 0

        count = 0
        with open(self.events_path, "r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    count += 1
        return count

    def clear(self) -> None:
        """Remove the journal file (for testing)."""
        if self.events_path.exists():
            self.events_path.unlink()
