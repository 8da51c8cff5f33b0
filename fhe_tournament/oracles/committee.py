"""
Threshold committee attestations.

A decryption is accepted only when at least `threshold` distinct committee
members signed (request_id || H(cleartext)) with their Ed25519 keys, so no
single member can forge a result.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from hashlib import blake2b

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ed25519

from ..exceptions import ConfigurationError
from ..logging_config import get_logger

# Module-level logger
logger = get_logger("committee")


def attestation_message(request_id: int, cleartext: bytes) -> bytes:
    """Bytes a committee member signs for one decryption."""
    hasher = blake2b(digest_size=32)
    hasher.update(cleartext)
    return request_id.to_bytes(8, byteorder="big", signed=False) + hasher.digest()


@dataclass(frozen=True, eq=False)
class CommitteeProof:
    """Member id -> Ed25519 signature over the attestation message."""

    signatures: Mapping[str, bytes] = field(default_factory=dict)

    def to_dict(self) -> dict[str, str]:
        return {member_id: sig.hex() for member_id, sig in self.signatures.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, str]) -> "CommitteeProof":
        return cls({member_id: bytes.fromhex(sig) for member_id, sig in data.items()})


class CommitteeMember:
    """One signing party of the decryption committee."""

    def __init__(self, member_id: str, private_key: ed25519.Ed25519PrivateKey):
        self.member_id: str = member_id
        self.private_key: ed25519.Ed25519PrivateKey = private_key

    @property
    def public_key(self) -> ed25519.Ed25519PublicKey:
        return self.private_key.public_key()

    def sign(self, request_id: int, cleartext: bytes) -> bytes:
        return self.private_key.sign(attestation_message(request_id, cleartext))


class Committee:
    """Public view of the committee: member keys and the quorum size."""

    def __init__(self, public_keys: Mapping[str, ed25519.Ed25519PublicKey], threshold: int):
        if not public_keys:
            raise ConfigurationError("Committee needs at least one member")
        if not (1 <= threshold <= len(public_keys)):
            raise ConfigurationError(
                f"threshold must be between 1 and {len(public_keys)}, got {threshold}"
            )
        self.public_keys: dict[str, ed25519.Ed25519PublicKey] = dict(public_keys)
        self.threshold: int = threshold

    @classmethod
    def generate(cls, size: int, threshold: int) -> tuple["Committee", list[CommitteeMember]]:
        """Fresh committee with random member keys."""
        if size < 1:
            raise ConfigurationError(f"committee size must be positive, got {size}")
        members = [
            CommitteeMember(f"member-{i}", ed25519.Ed25519PrivateKey.generate()) for i in range(size)
        ]
        committee = cls({m.member_id: m.public_key for m in members}, threshold)
        logger.info(f"Generated {threshold}-of-{size} decryption committee")
        return committee, members

    @staticmethod
    def attest(members: Sequence[CommitteeMember], request_id: int, cleartext: bytes) -> CommitteeProof:
        return CommitteeProof({m.member_id: m.sign(request_id, cleartext) for m in members})

    def verify(self, request_id: int, cleartext: bytes, proof: CommitteeProof) -> bool:
        """Whether a quorum of known members signed this exact decryption."""
        message = attestation_message(request_id, cleartext)
        valid = 0
        for member_id, signature in proof.signatures.items():
            public_key = self.public_keys.get(member_id)
            if public_key is None:
                logger.debug(f"Ignoring signature from unknown member {member_id}")
                continue
            try:
                public_key.verify(signature, message)
            except InvalidSignature:
                logger.debug(f"Bad signature from {member_id} on request {request_id}")
                continue
            valid += 1

        if valid < self.threshold:
            logger.warning(
                f"Proof for request {request_id} has {valid} valid signature(s), {self.threshold} required"
            )
            return False
        return True
