"""Test helpers for Observable Entropy tests.

Helpers:
    build_record: Signed entropy record factory
    public_key_hex_of: Hex public key of an Ed25519 private key

Usage:
    from tests.helpers import build_record
"""

from tests.helpers.entropy_records import (
    COMMIT_ID,
    OTHER_COMMIT_ID,
    PREV_HASH,
    build_record,
    public_key_hex_of,
    slow_hash,
)

__all__ = [
    "COMMIT_ID",
    "OTHER_COMMIT_ID",
    "PREV_HASH",
    "build_record",
    "public_key_hex_of",
    "slow_hash",
]
