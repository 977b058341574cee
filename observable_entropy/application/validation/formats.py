"""String format predicates for entropy records and contributions.

Every predicate is pure, accepts any object, and returns False for
non-strings instead of raising.

Hex formats accept upper or lower case and an optional run of ``0x``
prefixes before the byte pairs, matching the publisher's own checks:

    SHA-1      (0x)*(hex-byte){20}
    SHA-256    (0x)*(hex-byte){32}
    Signature  (0x)*(hex-byte){64}

Timestamps must be ISO 8601 in UTC, checked both textually (ends with
``Z`` or ``+00:00``) and semantically (parses with a zero offset).
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

SHA1_PATTERN = re.compile(r"(?:0x)*(?:[0-9a-f]{2}){20}", re.IGNORECASE)
SHA256_PATTERN = re.compile(r"(?:0x)*(?:[0-9a-f]{2}){32}", re.IGNORECASE)
SIGNATURE_PATTERN = re.compile(r"(?:0x)*(?:[0-9a-f]{2}){64}", re.IGNORECASE)

UTC_SUFFIXES = ("Z", "+00:00")


def _matches(pattern: re.Pattern[str], value: object) -> bool:
    if not isinstance(value, str):
        return False
    return pattern.fullmatch(value) is not None


def is_sha1_hex(value: object) -> bool:
    """True if value is a 20-byte hex string (a git commit id)."""
    return _matches(SHA1_PATTERN, value)


def is_sha256_hex(value: object) -> bool:
    """True if value is a 32-byte hex string."""
    return _matches(SHA256_PATTERN, value)


def is_signature_hex(value: object) -> bool:
    """True if value is a 64-byte hex string (an Ed25519 signature)."""
    return _matches(SIGNATURE_PATTERN, value)


def is_iso8601_utc(value: object) -> bool:
    """True if value is an ISO 8601 date-time explicitly in UTC.

    Both checks are required: a value like ``2022-01-01T00:00:00`` parses
    but carries no zone marker, and ``2022-01-01T00:00:00+01:00`` carries
    one that is not UTC. Either is rejected.
    """
    if not isinstance(value, str):
        return False
    if not value.endswith(UTC_SUFFIXES):
        return False
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return False
    return parsed.tzinfo is not None and parsed.utcoffset() == timedelta(0)
