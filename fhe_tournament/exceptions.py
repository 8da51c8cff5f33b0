"""
Exception classes for the FHE tournament core.

Centralized location for all custom exceptions to avoid circular imports.
Every TournamentError aborts the call that raised it with no partial effects.
"""


class TournamentError(Exception):
    """Base exception for all core state machine errors."""
    pass


class AlreadyVerified(TournamentError):
    """Match or decryption request has already been settled."""
    pass


class InvalidRequest(TournamentError):
    """Unknown correlation id, or id registered under another kind."""
    pass


class MatchNotFound(InvalidRequest):
    """No match with the given id has been submitted."""
    pass


class PlayerNotFound(TournamentError):
    """No ledger entry, or reverse hash lookup failed."""
    pass


class ProofVerificationFailed(TournamentError):
    """Oracle proof did not attest the supplied cleartext."""
    pass


class MatchNotVerified(TournamentError):
    """Query requires a verified match."""
    pass


class ValidationError(Exception):
    """Base exception for validation-related errors."""
    pass


class CleartextDecodeError(ValidationError, TournamentError):
    """Cleartext does not decode to the expected positional values."""
    pass


class ConfigurationError(Exception):
    """Base exception for configuration-related errors."""
    pass
