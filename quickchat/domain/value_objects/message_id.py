"""Message ID value object"""

import random
from dataclasses import dataclass

MESSAGE_ID_LENGTH = 10
MESSAGE_ID_RANGE = 1_000_000_000


@dataclass(frozen=True)
class MessageId:
    """Ten digit, zero padded message identifier

    Identifiers come from a random draw and are not guaranteed to be unique.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate identifier shape"""
        if len(self.value) != MESSAGE_ID_LENGTH or not self.value.isascii() or not self.value.isdigit():
            raise ValueError(f"Message ID must be {MESSAGE_ID_LENGTH} digits")

    @classmethod
    def generate(cls, rng: random.Random) -> "MessageId":
        """Draw a new identifier from [0, 1_000_000_000)"""
        return cls(f"{rng.randrange(MESSAGE_ID_RANGE):0{MESSAGE_ID_LENGTH}d}")

    @property
    def prefix(self) -> str:
        """First two digits, used by the shorthand fingerprint"""
        return self.value[:2]

    def __str__(self) -> str:
        return self.value
