"""
Tests for InMemoryStore transactions.

Focus on rollback and commit-only event publication.
"""

import pytest
from typing_extensions import override

from fhe_tournament.events import DomainEvent, EventRecorder, MatchVerified
from fhe_tournament.interfaces import EventSink
from fhe_tournament.storage import InMemoryStore


class TestInMemoryStore:
    """Test InMemoryStore behavior through public interface."""

    def test_commit_keeps_changes_and_publishes(self) -> None:
        # Arrange
        store = InMemoryStore()
        recorder = EventRecorder()
        store.subscribe(recorder)

        # Act
        with store.transaction() as state:
            state.player_list.append("alice")
            state.outbox.append(MatchVerified(match_id=1))

        # Assert
        with store.transaction() as state:
            assert state.player_list == ["alice"]
            assert state.outbox == []
        assert [e.match_id for e in recorder.events] == [1]

    def test_error_rolls_back_everything(self) -> None:
        # Arrange
        store = InMemoryStore()
        recorder = EventRecorder()
        store.subscribe(recorder)

        # Act
        with pytest.raises(RuntimeError):
            with store.transaction() as state:
                state.player_list.append("alice")
                state.next_match_id = 9
                state.outbox.append(MatchVerified(match_id=1))
                raise RuntimeError("boom")

        # Assert
        with store.transaction() as state:
            assert state.player_list == []
            assert state.next_match_id == 1
        assert recorder.events == []

    def test_nested_error_rolls_back_outer_block(self) -> None:
        """Nested blocks join the outermost transaction."""
        # Arrange
        store = InMemoryStore()

        # Act
        with pytest.raises(ValueError):
            with store.transaction() as outer:
                outer.player_list.append("alice")
                with store.transaction() as inner:
                    inner.player_list.append("bob")
                    raise ValueError("inner failure")

        # Assert
        with store.transaction() as state:
            assert state.player_list == []

    def test_nested_events_published_once_on_outer_commit(self) -> None:
        # Arrange
        store = InMemoryStore()
        recorder = EventRecorder()
        store.subscribe(recorder)

        # Act
        with store.transaction() as outer:
            with store.transaction() as inner:
                inner.outbox.append(MatchVerified(match_id=1))
            assert recorder.events == []
            outer.outbox.append(MatchVerified(match_id=2))

        # Assert
        assert [e.match_id for e in recorder.events] == [1, 2]

    def test_failing_sink_does_not_undo_commit(self) -> None:
        """A sink that raises is skipped; the commit and later sinks are unaffected."""
        # Arrange
        class BrokenSink(EventSink):
            @override
            def publish(self, event: DomainEvent) -> None:
                raise OSError("disk full")

        store = InMemoryStore()
        recorder = EventRecorder()
        store.subscribe(BrokenSink())
        store.subscribe(recorder)

        # Act
        with store.transaction() as state:
            state.player_list.append("alice")
            state.outbox.append(MatchVerified(match_id=1))
            state.outbox.append(MatchVerified(match_id=2))

        # Assert
        with store.transaction() as state:
            assert state.player_list == ["alice"]
        assert [e.match_id for e in recorder.events] == [1, 2]
