"""
Storage implementations.

Provides the Store used by the core and sinks for committed events.

Available implementations:
- InMemoryStore: transactional in-memory state with rollback on error
- JSONLEventJournal: persists committed domain events to a JSONL file
"""

from .jsonl_journal import JSONLEventJournal
from .memory_store import InMemoryStore

__all__ = ["InMemoryStore", "JSONLEventJournal"]
