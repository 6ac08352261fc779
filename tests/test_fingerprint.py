"""Tests for message IDs, fingerprints and record generation"""

import random
import re
from datetime import datetime
from typing import Iterator, List

import pytest

from quickchat.core.exceptions import HashComputationError, ValidationError
from quickchat.domain.services.fingerprint_generator import FingerprintGenerator
from quickchat.domain.value_objects.fingerprint import (
    HASH_ERROR_SENTINEL,
    Fingerprint,
    FingerprintScheme,
)
from quickchat.domain.value_objects.message_id import MessageId

FIXED_NOW = datetime(2024, 1, 2, 12, 30, 45)


class SequenceRandom:
    """Random source returning a fixed sequence of draws"""

    def __init__(self, draws: List[int]) -> None:
        self._draws: Iterator[int] = iter(draws)

    def randrange(self, stop: int) -> int:
        return next(self._draws)


def make_generator(scheme: FingerprintScheme, draws: List[int], max_attempts: int = 10) -> FingerprintGenerator:
    """Generator with a fixed clock and fixed ID draws"""
    return FingerprintGenerator(
        scheme=scheme,
        rng=SequenceRandom(draws),
        clock=lambda: FIXED_NOW,
        max_attempts=max_attempts,
    )


def test_message_id_is_zero_padded() -> None:
    """IDs are rendered as ten digits with leading zeros"""
    assert MessageId.generate(SequenceRandom([42])).value == "0000000042"
    assert MessageId.generate(SequenceRandom([999_999_999])).value == "0999999999"
    assert MessageId.generate(SequenceRandom([0])).value == "0000000000"


def test_message_id_from_real_random_has_ten_digits() -> None:
    """IDs drawn from a real random source always have the right shape"""
    rng = random.Random(1234)
    for _ in range(100):
        assert re.fullmatch(r"0[0-9]{9}", MessageId.generate(rng).value)


@pytest.mark.parametrize("value", ["123", "12345678901", "00000000a1", ""])
def test_message_id_rejects_bad_values(value: str) -> None:
    """Only ten ASCII digits make a message ID"""
    with pytest.raises(ValueError):
        MessageId(value)


def test_sha256_fingerprint_known_value() -> None:
    """Digest over id, recipient, body, date and time, truncated to 12 hex characters"""
    fingerprint = Fingerprint.sha256(
        "0000000042", "+27831234567", "Hello there", "2024-01-02", "12:30:45"
    )
    assert fingerprint.value == "2a70f7191476"


def test_sha256_fingerprint_is_deterministic() -> None:
    """Same inputs always give the same fingerprint"""
    args = ("0000000042", "+27831234567", "Hello there", "2024-01-02", "12:30:45")
    values = {Fingerprint.sha256(*args).value for _ in range(10)}
    assert len(values) == 1
    assert re.fullmatch(r"[0-9a-f]{12}", values.pop())


@pytest.mark.parametrize(
    "changed",
    [
        ("0000000043", "+27831234567", "Hello there", "2024-01-02", "12:30:45"),
        ("0000000042", "+27831234568", "Hello there", "2024-01-02", "12:30:45"),
        ("0000000042", "+27831234567", "Hello therf", "2024-01-02", "12:30:45"),
        ("0000000042", "+27831234567", "Hello there", "2024-01-03", "12:30:45"),
        ("0000000042", "+27831234567", "Hello there", "2024-01-02", "12:30:46"),
    ],
)
def test_sha256_fingerprint_changes_with_any_field(changed: tuple) -> None:
    """Changing any single input changes the fingerprint"""
    original = Fingerprint.sha256(
        "0000000042", "+27831234567", "Hello there", "2024-01-02", "12:30:45"
    )
    assert Fingerprint.sha256(*changed) != original


def test_sha256_fingerprint_raises_on_unencodable_body() -> None:
    """A lone surrogate cannot be UTF-8 encoded"""
    with pytest.raises(HashComputationError):
        Fingerprint.sha256("0000000042", "+27831234567", "bad \ud800", "2024-01-02", "12:30:45")


@pytest.mark.parametrize(
    "body,expected",
    [
        ("Hello there", "12:HE"),
        ("hi", "12:HI"),
        ("x", "12:X"),
        ("", "12:"),
        ("abc", "12:AC"),
    ],
)
def test_shorthand_fingerprint(body: str, expected: str) -> None:
    """ID prefix, colon, then first and last character uppercased"""
    assert Fingerprint.shorthand("1234567890", body).value == expected


def test_shorthand_uses_message_id_prefix() -> None:
    """The shorthand takes its prefix from a well formed message ID"""
    assert MessageId("0987654321").prefix == "09"
    assert Fingerprint.shorthand("0987654321", "yo").value == "09:YO"

    with pytest.raises(ValueError):
        Fingerprint.shorthand("12", "yo")


def test_compute_dispatches_on_scheme() -> None:
    """compute picks the derivation from the scheme"""
    args = ("1234567890", "+27831234567", "Hello there", "2024-01-02", "12:30:45")
    assert Fingerprint.compute(FingerprintScheme.SHORTHAND, *args).value == "12:HE"
    assert len(Fingerprint.compute(FingerprintScheme.SHA256, *args).value) == 12


def test_generator_creates_record_with_captured_timestamp() -> None:
    """Records carry the id, timestamp and a fingerprint over those values"""
    generator = make_generator(FingerprintScheme.SHA256, [42])

    record = generator.create("+27831234567", "Hello there")

    assert record.message_id == "0000000042"
    assert record.date == "2024-01-02"
    assert record.time == "12:30:45"
    assert record.fingerprint == "2a70f7191476"
    assert record.sent_at == FIXED_NOW


def test_generator_shorthand_scheme() -> None:
    """The shorthand scheme uses the generated ID prefix"""
    generator = make_generator(FingerprintScheme.SHORTHAND, [987_654_321])

    record = generator.create("+27831234567", "yo")

    assert record.message_id == "0987654321"
    assert record.fingerprint == "09:YO"


def test_generator_falls_back_to_sentinel() -> None:
    """Hash failures do not abort the send"""
    generator = make_generator(FingerprintScheme.SHA256, [1])

    record = generator.create("+27831234567", "bad \ud800")

    assert record.fingerprint == HASH_ERROR_SENTINEL
    assert Fingerprint(record.fingerprint).is_sentinel


def test_generator_fingerprint_is_fixed_on_record() -> None:
    """The record is frozen; its fingerprint cannot be reassigned"""
    record = make_generator(FingerprintScheme.SHA256, [42]).create("+27831234567", "Hello there")

    with pytest.raises(AttributeError):
        record.fingerprint = "other"  # type: ignore[misc]


def test_generator_allows_duplicate_ids_by_default() -> None:
    """Without taken IDs the generator does not check for collisions"""
    generator = make_generator(FingerprintScheme.SHA256, [5, 5])

    first = generator.create("+27831234567", "one")
    second = generator.create("+27831234567", "two")

    assert first.message_id == second.message_id == "0000000005"


def test_generator_redraws_taken_ids() -> None:
    """Taken IDs are skipped when supplied"""
    generator = make_generator(FingerprintScheme.SHA256, [5, 5, 6])

    record = generator.create("+27831234567", "hello", taken_ids={"0000000005"})

    assert record.message_id == "0000000006"


def test_generator_gives_up_after_max_attempts() -> None:
    """A bounded number of redraws is attempted"""
    generator = make_generator(FingerprintScheme.SHA256, [5, 5, 5], max_attempts=3)

    with pytest.raises(ValidationError):
        generator.create("+27831234567", "hello", taken_ids={"0000000005"})
