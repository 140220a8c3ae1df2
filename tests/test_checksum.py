"""Tests for submission checksums."""

import hashlib
import hmac

import pytest

from scoring.checksum import SubmissionValidator, canonical_payload


def test_canonical_payload():
    assert canonical_payload("Alice", 42) == "Alice,42"
    assert canonical_payload("Bob", -3) == "Bob,-3"


def test_unkeyed_signature_is_truncated_sha256():
    validator = SubmissionValidator()
    expected = hashlib.sha256(b"Alice,42").hexdigest()[:16]
    assert validator.compute_signature("Alice", 42) == expected
    assert not validator.keyed


def test_signature_is_deterministic():
    validator = SubmissionValidator()
    assert validator.compute_signature("Alice", 42) == validator.compute_signature("Alice", 42)
    assert validator.compute_signature("Alice", 42) != validator.compute_signature("Alice", 43)


def test_keyed_signature_uses_hmac():
    validator = SubmissionValidator(secret="s3cret", length=64)
    expected = hmac.new(b"s3cret", b"Alice,42", hashlib.sha256).hexdigest()
    assert validator.keyed
    assert validator.compute_signature("Alice", 42) == expected
    assert validator.compute_signature("Alice", 42) != SubmissionValidator(length=64).compute_signature("Alice", 42)


def test_is_valid_only_for_exact_match():
    validator = SubmissionValidator()
    good = validator.compute_signature("Alice", 42)
    assert validator.is_valid("Alice", 42, good)
    assert not validator.is_valid("Alice", 43, good)
    assert not validator.is_valid("Alicia", 42, good)
    assert not validator.is_valid("Alice", 42, good + "0")
    assert not validator.is_valid("Alice", 42, good[:-1])
    assert not validator.is_valid("Alice", 42, "garbage")
    assert not validator.is_valid("Alice", 42, "")
    assert not validator.is_valid("Alice", 42, None)


def test_is_valid_handles_non_ascii_checksum():
    validator = SubmissionValidator()
    assert not validator.is_valid("Alice", 42, "ключ")


@pytest.mark.parametrize("length", [0, 65])
def test_length_out_of_range(length):
    with pytest.raises(ValueError):
        SubmissionValidator(length=length)
