"""
Shared fixtures.

Deployments use small Paillier keys so key generation stays fast, and
manual oracle fulfilment so tests decide when callbacks happen.
"""

from collections.abc import Iterator

import pytest

from fhe_tournament.config import CoreConfig
from fhe_tournament.core import LocalDeployment, create_local_deployment
from fhe_tournament.events import EventRecorder

TEST_CONFIG = CoreConfig(key_length=512, committee_size=3, threshold=2, oracle_workers=2)


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def deployment(recorder: EventRecorder) -> Iterator[LocalDeployment]:
    """Deployment whose oracle only answers when fulfil() is called."""
    dep = create_local_deployment(TEST_CONFIG, auto_fulfil=False, sinks=[recorder])
    yield dep
    dep.close()


@pytest.fixture
def async_deployment(recorder: EventRecorder) -> Iterator[LocalDeployment]:
    """Deployment whose oracle answers on its thread pool."""
    dep = create_local_deployment(TEST_CONFIG, auto_fulfil=True, sinks=[recorder])
    yield dep
    dep.close()


def submit(dep: LocalDeployment, stats: str, log: str, player: str) -> int:
    """Client-side encrypt and submit one match."""
    backend = dep.backend
    return dep.core.submit_match(
        backend.encrypt_text(stats), backend.encrypt_text(log), backend.encrypt_text(player)
    )


def counter_value(dep: LocalDeployment, player_id: str) -> int:
    """Decrypt a player's counter with the oracle's key."""
    value = dep.oracle.decryptor.decrypt(dep.core.get_encrypted_player_stats(player_id))
    assert isinstance(value, int)
    return value
