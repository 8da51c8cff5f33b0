"""
Cleartext codec and identity hashing.

Oracle cleartexts are UTF-8 JSON arrays whose positions match the order
of the handles in the decryption request.
"""

import json
from collections.abc import Sequence
from hashlib import blake2b

from .exceptions import CleartextDecodeError


def _digest(data: bytes) -> bytes:
    hasher = blake2b(digest_size=32)
    hasher.update(data)
    return hasher.digest()


def identity_hash(player_id: str) -> str:
    """Deterministic hex hash of a player identity."""
    return _digest(b"player:" + player_id.encode("utf-8")).hex()


def content_hash(content: str) -> bytes:
    """Hash used for exact-content comparisons of game logs."""
    return _digest(content.encode("utf-8"))


def encode_cleartext(values: Sequence[str | int]) -> bytes:
    """Encode decrypted values positionally."""
    return json.dumps(list(values), ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def _decode_array(cleartext: bytes, arity: int) -> list[object]:
    try:
        values = json.loads(cleartext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CleartextDecodeError(f"Cleartext is not a JSON array: {e}") from e
    if not isinstance(values, list) or len(values) != arity:
        raise CleartextDecodeError(f"Expected {arity} positional values, got {values!r}")
    return values


def decode_strings(cleartext: bytes, arity: int) -> tuple[str, ...]:
    """Decode exactly arity strings."""
    values = _decode_array(cleartext, arity)
    for value in values:
        if not isinstance(value, str):
            raise CleartextDecodeError(f"Expected string, got {value!r}")
    return tuple(values)  # type: ignore[arg-type]


def decode_uint(cleartext: bytes) -> int:
    """Decode a single non-negative integer."""
    (value,) = _decode_array(cleartext, 1)
    # bool is an int subclass
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise CleartextDecodeError(f"Expected non-negative integer, got {value!r}")
    return value
