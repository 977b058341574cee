"""Entropy API response models.

Entropy records are returned in their published wire form (camelCase
attributes, optional ones omitted), so record bodies are plain dicts.
"""

from typing import Any

from pydantic import BaseModel, Field


class PublicKeyResponse(BaseModel):
    """Ed25519 public key every published record is signed with."""

    key: str = Field(..., description="Raw 32-byte Ed25519 public key, hex encoded")


class ContributionReceiptResponse(BaseModel):
    """Acknowledgement of an accepted contribution.

    Attributes:
        key: Storage key of the genuine entry (``entry::<uuid7>``).
        entropy: The submitted entropy value.
        expiration: Absolute expiry, unix seconds.
    """

    key: str
    entropy: str
    expiration: int


class VerifiedEntropyResponse(BaseModel):
    """A record that passed signature and chain verification."""

    verified: bool = True
    entropy: dict[str, Any]


class EntropyErrorResponse(BaseModel):
    """RFC 7807 problem detail returned in ``detail`` of error responses.

    Validation failures add the offending ``attribute``, its ``path`` and,
    for malformed values, the rejected ``value``.
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str
    attribute: str | None = None
    path: list[str | int] | None = None
    value: Any = None
