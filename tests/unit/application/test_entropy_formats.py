"""Unit tests for hex and timestamp format predicates."""

import pytest

from observable_entropy.application.validation.formats import (
    is_iso8601_utc,
    is_sha1_hex,
    is_sha256_hex,
    is_signature_hex,
)


class TestHexFormats:
    """Tests for SHA-1, SHA-256 and signature hex predicates."""

    @pytest.mark.parametrize(
        "value",
        [
            "ab" * 32,
            "AB" * 32,
            "0x" + "ab" * 32,
            "0x0x" + "Ab" * 32,
            "0X" + "ab" * 32,
        ],
    )
    def test_sha256_accepts(self, value: str) -> None:
        assert is_sha256_hex(value)

    @pytest.mark.parametrize(
        "value",
        [
            "ab" * 31,
            "ab" * 33,
            "a" * 63,
            "zz" * 32,
            " " + "ab" * 32,
            "",
        ],
    )
    def test_sha256_rejects(self, value: str) -> None:
        assert not is_sha256_hex(value)

    @pytest.mark.parametrize("value", [None, 123, b"ab" * 32, ["ab" * 32]])
    def test_non_strings_are_rejected_without_raising(self, value: object) -> None:
        assert not is_sha256_hex(value)
        assert not is_sha1_hex(value)
        assert not is_signature_hex(value)

    def test_sha1_length(self) -> None:
        assert is_sha1_hex("678e9cbef4e78eacf042ac886164e31fb72b6fd1")
        assert not is_sha1_hex("678e9cbef4e78eacf042ac886164e31fb72b6fd")
        assert not is_sha1_hex("ab" * 32)

    def test_signature_length(self) -> None:
        assert is_signature_hex("cd" * 64)
        assert not is_signature_hex("cd" * 32)


class TestIso8601Utc:
    """Tests for the UTC timestamp predicate."""

    @pytest.mark.parametrize(
        "value",
        [
            "2021-11-03T19:15:10.131Z",
            "2021-11-03T19:15:10Z",
            "2021-11-03T19:15:10+00:00",
        ],
    )
    def test_accepts_utc(self, value: str) -> None:
        assert is_iso8601_utc(value)

    @pytest.mark.parametrize(
        "value",
        [
            "2021-11-03T19:15:10",
            "2021-11-03T19:15:10+01:00",
            "2021-13-03T19:15:10Z",
            "yesterday Z",
            "",
        ],
    )
    def test_rejects_non_utc_or_invalid(self, value: str) -> None:
        assert not is_iso8601_utc(value)

    def test_rejects_non_string(self) -> None:
        assert not is_iso8601_utc(1635966910)
