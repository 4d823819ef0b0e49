"""
Credential Hasher

One-way transform of a plaintext password into a fixed-length hex digest.

KNOWN LIMITATION: Digests are unsalted, so equal passwords produce equal
digests. Login looks the user up by (username, digest) in a single query,
which requires a deterministic digest. Deployments that need stronger
protection should move to a salted, slow hash and verify in Python.
"""

import hashlib
import hmac
from typing import Optional

from fiscalforge.config import ALLOWED_HASH_ALGORITHMS


class HashingError(Exception):
    """The requested digest algorithm is unavailable or too weak."""
    pass


class CredentialHasher:
    """Deterministic password digests using a hashlib algorithm."""

    def __init__(self, algorithm: str = "sha256"):
        if algorithm not in ALLOWED_HASH_ALGORITHMS:
            raise HashingError(f"Digest algorithm not allowed for passwords: {algorithm}")
        try:
            hashlib.new(algorithm)
        except ValueError as e:
            raise HashingError(f"Digest algorithm unavailable: {algorithm}") from e
        self._algorithm = algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def digest_length(self) -> int:
        """Length of the hex digest in characters."""
        return hashlib.new(self._algorithm).digest_size * 2

    def hash(self, password: str) -> str:
        """Return the hex digest of `password` (UTF-8 encoded)."""
        digest = hashlib.new(self._algorithm)
        digest.update(password.encode("utf-8"))
        return digest.hexdigest()

    def matches(self, password: str, password_hash: str) -> bool:
        """Constant-time check of a password against a stored digest."""
        return hmac.compare_digest(self.hash(password), password_hash)


_default_hasher: Optional[CredentialHasher] = None


def hash_password(password: str) -> str:
    """Hash with the default SHA-256 hasher."""
    global _default_hasher
    if _default_hasher is None:
        _default_hasher = CredentialHasher()
    return _default_hasher.hash(password)
