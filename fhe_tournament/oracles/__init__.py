"""
Decryption oracle adapters.

Available implementations:
- LocalCommitteeOracle: in-process oracle with Paillier decryption and an
  Ed25519 threshold committee, delivering results through a CallbackInbox
"""

from .committee import Committee, CommitteeMember, CommitteeProof
from .inbox import CallbackInbox
from .local_oracle import LocalCommitteeOracle

__all__ = [
    "CallbackInbox",
    "Committee",
    "CommitteeMember",
    "CommitteeProof",
    "LocalCommitteeOracle",
]
