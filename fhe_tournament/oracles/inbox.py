"""
Callback inbox.

Oracle results are delivered as messages and applied later by the core on
its own thread, so core state is only ever mutated by one writer.
"""

import queue

from ..models import DecryptionResult


class CallbackInbox:
    """Thread-safe FIFO of DecryptionResult messages."""

    def __init__(self) -> None:
        self._queue: queue.Queue[DecryptionResult] = queue.Queue()

    def put(self, result: DecryptionResult) -> None:
        self._queue.put(result)

    def get(self, block: bool = False, timeout: float | None = None) -> DecryptionResult | None:
        """Next message, or None when none arrives in time."""
        try:
            return self._queue.get(block=block, timeout=timeout)
        except queue.Empty:
            return None

    def __len__(self) -> int:
        return self._queue.qsize()
