"""
Tests for the match registry.
"""

import pytest

from conftest import submit
from fhe_tournament.core import LocalDeployment
from fhe_tournament.events import EventRecorder, MatchSubmitted
from fhe_tournament.exceptions import MatchNotFound, ValidationError
from fhe_tournament.registry import MatchRegistry
from fhe_tournament.storage import InMemoryStore


class TestMatchRegistry:
    """Test MatchRegistry behavior through public interface."""

    def test_ids_strictly_increase_from_one(self, deployment: LocalDeployment) -> None:
        # Act
        ids = [submit(deployment, str(i), "log", "p") for i in range(5)]

        # Assert
        assert ids == [1, 2, 3, 4, 5]
        assert deployment.core.registry.match_count() == 5

    def test_submission_creates_unverified_record(
        self, deployment: LocalDeployment, recorder: EventRecorder
    ) -> None:
        # Act
        match_id = submit(deployment, "95", "log-A", "alice")

        # Assert
        assert deployment.core.get_decrypted_match_data(match_id) == ("", "", "", False)
        record = deployment.core.registry.get_encrypted(match_id)
        assert record.match_id == match_id
        assert all(h.is_initialized() for h in record.handles())
        events = recorder.of_type(MatchSubmitted)
        assert [e.match_id for e in events] == [match_id]
        assert events[0].timestamp == record.timestamp

    def test_uses_injected_clock(self, deployment: LocalDeployment) -> None:
        # Arrange
        registry = MatchRegistry(InMemoryStore(), clock=lambda: 1234.5)
        backend = deployment.backend

        # Act
        match_id = registry.submit(backend.zero(), backend.zero(), backend.zero())

        # Assert
        assert registry.get_encrypted(match_id).timestamp == 1234.5

    def test_rejects_non_ciphertext(self) -> None:
        registry = MatchRegistry(InMemoryStore())
        with pytest.raises(ValidationError):
            registry.submit("95", "log", "alice")  # type: ignore[arg-type]
        assert registry.match_count() == 0

    def test_unknown_match(self, deployment: LocalDeployment) -> None:
        with pytest.raises(MatchNotFound):
            deployment.core.get_decrypted_match_data(7)
