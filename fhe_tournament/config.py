"""
Configuration for the FHE tournament core and its reference adapters.
"""

from dataclasses import dataclass

from .exceptions import ConfigurationError


@dataclass
class CoreConfig:
    """Configuration for a tournament core instance."""

    match_score: int = 100  # points per verified match for ConstantScore
    key_length: int = 2048  # Paillier modulus bits
    committee_size: int = 3  # decryption committee members
    threshold: int = 2  # signatures required on a decryption proof
    oracle_workers: int = 4  # oracle thread pool size

    def __post_init__(self):
        """Validate configuration."""
        if self.key_length < 256:
            raise ConfigurationError(f"key_length must be at least 256, got {self.key_length}")
        if self.committee_size < 1:
            raise ConfigurationError(f"committee_size must be positive, got {self.committee_size}")
        if not (1 <= self.threshold <= self.committee_size):
            raise ConfigurationError(
                f"threshold must be between 1 and {self.committee_size}, got {self.threshold}"
            )
        if self.oracle_workers <= 0:
            raise ConfigurationError(f"oracle_workers must be positive, got {self.oracle_workers}")
