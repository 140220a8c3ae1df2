"""Anti-tamper checksums for score submissions.

The game client and the server both compute a short digest over the
canonical string ``"{name},{score}"`` and the server drops submissions whose
checksum does not match.

Without a secret the digest is a plain SHA-256 hash. Anyone who reads the
client code can reproduce it, so it only keeps naive, hand-crafted requests
out of the board; it does not authenticate the sender. Setting a signing
secret switches to HMAC-SHA256 keyed by that secret, which only the server
and trusted clients know.
"""
from __future__ import annotations

import hashlib
import hmac
from typing import Optional

DEFAULT_CHECKSUM_LENGTH = 16
MAX_CHECKSUM_LENGTH = 64


def canonical_payload(name: str, score: int) -> str:
    return f"{name},{score}"


class SubmissionValidator:
    """Computes and checks submission checksums."""

    def __init__(self, *, secret: Optional[str] = None, length: int = DEFAULT_CHECKSUM_LENGTH):
        if not 1 <= length <= MAX_CHECKSUM_LENGTH:
            raise ValueError(f"Checksum length must be between 1 and {MAX_CHECKSUM_LENGTH}")
        self._key = secret.encode("utf-8") if secret else None
        self.length = length

    @property
    def keyed(self) -> bool:
        return self._key is not None

    def compute_signature(self, name: str, score: int) -> str:
        message = canonical_payload(name, score).encode("utf-8")
        if self._key is not None:
            digest = hmac.new(self._key, message, hashlib.sha256).hexdigest()
        else:
            digest = hashlib.sha256(message).hexdigest()
        return digest[: self.length]

    def is_valid(self, name: str, score: int, supplied: Optional[str]) -> bool:
        if not isinstance(supplied, str) or not supplied:
            return False
        expected = self.compute_signature(name, score)
        return hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))
