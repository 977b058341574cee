"""API request/response models."""

from observable_entropy.api.models.entropy import (
    ContributionReceiptResponse,
    EntropyErrorResponse,
    PublicKeyResponse,
    VerifiedEntropyResponse,
)

__all__ = [
    "ContributionReceiptResponse",
    "EntropyErrorResponse",
    "PublicKeyResponse",
    "VerifiedEntropyResponse",
]
