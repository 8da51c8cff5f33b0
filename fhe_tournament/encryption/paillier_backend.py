"""
Paillier homomorphic backend.

Implements the EncryptedValue capability on top of python-paillier (phe).
Integers map to a single Paillier ciphertext and support addition. Text is
UTF-8 encoded and split into prefixed chunks that each fit the plaintext
space; it is opaque to arithmetic. The backend only holds the public key,
decryption lives with the oracle.
"""

import uuid
from collections.abc import Sequence
from enum import Enum

from phe import paillier
from typing_extensions import override

from ..exceptions import ValidationError
from ..interfaces import EncryptedValue, HomomorphicBackend
from ..logging_config import get_logger

# Module-level logger
logger = get_logger("paillier_backend")

CHUNK_PREFIX = b"\x01"  # keeps leading zero bytes of a chunk


class ValueKind(str, Enum):
    """What a ciphertext handle encrypts."""

    NONE = "none"
    UINT = "uint"
    TEXT = "text"


class PaillierValue(EncryptedValue):
    """Handle over one or more Paillier ciphertexts."""

    __slots__ = ("_handle", "kind", "chunks")

    def __init__(self, kind: ValueKind, chunks: Sequence[paillier.EncryptedNumber] = ()):
        self._handle: str = uuid.uuid4().hex if chunks else ""
        self.kind: ValueKind = kind
        self.chunks: tuple[paillier.EncryptedNumber, ...] = tuple(chunks)

    @property
    @override
    def handle(self) -> str:
        return self._handle

    @override
    def is_initialized(self) -> bool:
        return bool(self.chunks)

    def __repr__(self) -> str:
        return f"PaillierValue(kind={self.kind.value}, handle={self._handle[:12] or '-'}, chunks={len(self.chunks)})"


def _require(value: EncryptedValue) -> PaillierValue:
    if not isinstance(value, PaillierValue):
        raise ValidationError(f"Not a Paillier ciphertext: {value!r}")
    return value


class PaillierBackend(HomomorphicBackend):
    """Public-key side of the scheme: encryption and addition."""

    def __init__(self, public_key: paillier.PaillierPublicKey):
        self.public_key: paillier.PaillierPublicKey = public_key
        # Room for the prefix byte below max_int
        self.chunk_size: int = (public_key.max_int.bit_length() - 1) // 8 - len(CHUNK_PREFIX)
        if self.chunk_size < 1:
            raise ValidationError("Paillier key too small to hold text")

    @classmethod
    def generate(cls, key_length: int = 2048) -> tuple["PaillierBackend", "PaillierDecryptor"]:
        """Create a keypair and return the backend with its decryptor."""
        public_key, private_key = paillier.generate_paillier_keypair(n_length=key_length)
        logger.info(f"Generated {key_length}-bit Paillier keypair")
        return cls(public_key), PaillierDecryptor(private_key)

    @override
    def zero(self) -> EncryptedValue:
        return PaillierValue(ValueKind.UINT, [self.public_key.encrypt(0)])

    @override
    def add(self, a: EncryptedValue, b: EncryptedValue) -> EncryptedValue:
        left, right = _require(a), _require(b)
        if left.kind != ValueKind.UINT or right.kind != ValueKind.UINT:
            raise ValidationError(f"Cannot add {left.kind.value} and {right.kind.value} ciphertexts")
        return PaillierValue(ValueKind.UINT, [left.chunks[0] + right.chunks[0]])

    @override
    def uninitialized(self) -> EncryptedValue:
        return PaillierValue(ValueKind.NONE)

    @override
    def encrypt_uint(self, value: int) -> EncryptedValue:
        if value < 0:
            raise ValidationError(f"Expected non-negative integer, got {value}")
        return PaillierValue(ValueKind.UINT, [self.public_key.encrypt(value)])

    @override
    def encrypt_text(self, value: str) -> EncryptedValue:
        data = value.encode("utf-8")
        pieces = [data[i : i + self.chunk_size] for i in range(0, len(data), self.chunk_size)] or [b""]
        chunks = [
            self.public_key.encrypt(int.from_bytes(CHUNK_PREFIX + piece, "big")) for piece in pieces
        ]
        return PaillierValue(ValueKind.TEXT, chunks)


class PaillierDecryptor:
    """Private-key side, held by the decryption oracle."""

    def __init__(self, private_key: paillier.PaillierPrivateKey):
        self.private_key: paillier.PaillierPrivateKey = private_key

    def decrypt(self, value: EncryptedValue) -> int | str:
        """Plaintext of an initialized handle."""
        cipher = _require(value)
        if cipher.kind == ValueKind.UINT:
            return self.private_key.decrypt(cipher.chunks[0])
        if cipher.kind == ValueKind.TEXT:
            data = bytearray()
            for chunk in cipher.chunks:
                number = self.private_key.decrypt(chunk)
                raw = number.to_bytes((number.bit_length() + 7) // 8, "big")
                if not raw.startswith(CHUNK_PREFIX):
                    raise ValidationError("Corrupted text chunk")
                data.extend(raw[len(CHUNK_PREFIX) :])
            return data.decode("utf-8")
        raise ValidationError("Cannot decrypt an uninitialized handle")
