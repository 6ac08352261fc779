"""Fingerprint value object"""

import hashlib
from dataclasses import dataclass
from enum import Enum

from quickchat.core.exceptions import HashComputationError
from quickchat.domain.value_objects.message_id import MessageId

DIGEST_DISPLAY_LENGTH = 12
HASH_ERROR_SENTINEL = "HASH_ERR"


class FingerprintScheme(Enum):
    """Supported fingerprint derivations

    The two formats are not compatible on disk; a store uses exactly one.
    """

    SHA256 = "sha256"
    SHORTHAND = "shorthand"


@dataclass(frozen=True)
class Fingerprint:
    """Short display string summarising a message

    Not a security credential. The shorthand scheme in particular collides
    easily and must never be used as a key.
    """

    value: str

    @classmethod
    def sha256(cls, message_id: str, recipient: str, body: str, date: str, time: str) -> "Fingerprint":
        """First 12 hex characters of SHA-256 over the concatenated fields"""
        payload = f"{message_id}{recipient}{body}{date}{time}"
        try:
            digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
        except ValueError as exc:
            raise HashComputationError(f"Could not hash message {message_id}: {exc}") from exc
        return cls(digest[:DIGEST_DISPLAY_LENGTH])

    @classmethod
    def shorthand(cls, message_id: str, body: str) -> "Fingerprint":
        """ID prefix, a colon, then the first and last body characters uppercased

        Bodies of two characters or fewer are uppercased whole, so ``""``
        gives an empty excerpt and ``"x"`` gives ``"X"``.
        Raises ValueError when message_id is not a ten digit ID.
        """
        if len(body) <= 2:
            excerpt = body.upper()
        else:
            excerpt = body[0].upper() + body[-1].upper()
        return cls(f"{MessageId(message_id).prefix}:{excerpt}")

    @classmethod
    def compute(
        cls,
        scheme: FingerprintScheme,
        message_id: str,
        recipient: str,
        body: str,
        date: str,
        time: str,
    ) -> "Fingerprint":
        """Derive a fingerprint with the given scheme"""
        if scheme is FingerprintScheme.SHA256:
            return cls.sha256(message_id, recipient, body, date, time)
        return cls.shorthand(message_id, body)

    @classmethod
    def sentinel(cls) -> "Fingerprint":
        """Placeholder used when the digest is unavailable"""
        return cls(HASH_ERROR_SENTINEL)

    @property
    def is_sentinel(self) -> bool:
        return self.value == HASH_ERROR_SENTINEL

    def __str__(self) -> str:
        return self.value
