"""
Homomorphic encryption backends.

Available implementations:
- PaillierBackend: additive homomorphic encryption via python-paillier
"""

from .paillier_backend import PaillierBackend, PaillierDecryptor, PaillierValue, ValueKind

__all__ = ["PaillierBackend", "PaillierDecryptor", "PaillierValue", "ValueKind"]
