"""
FHE Tournament - proof-gated verification of encrypted match telemetry

Match records are submitted as ciphertexts, opened by an external decryption
oracle under a committee proof and only then counted towards encrypted
per-player statistics, anti-cheat checks and rankings.
"""

from .config import CoreConfig
from .core import DrainReport, LocalDeployment, TournamentCore, create_local_deployment
from .interfaces import DecryptionOracle, EncryptedValue, EventSink, HomomorphicBackend, ScoringFunction, Store
from .models import (
    DecryptedMatchRecord,
    DecryptionResult,
    EncryptedMatchRecord,
    PendingDecryptionRequest,
    RankingResult,
)

__version__ = "0.1.0"
__all__ = [
    "CoreConfig",
    "DecryptedMatchRecord",
    "DecryptionOracle",
    "DecryptionResult",
    "DrainReport",
    "EncryptedMatchRecord",
    "EncryptedValue",
    "EventSink",
    "HomomorphicBackend",
    "LocalDeployment",
    "PendingDecryptionRequest",
    "RankingResult",
    "ScoringFunction",
    "Store",
    "TournamentCore",
    "create_local_deployment",
]
