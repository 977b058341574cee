"""Domain errors for Observable Entropy.

Expected failures are ``EntropyError`` values tagged with an ``ErrorKind``.
The iterated digest raises ``IteratedDigestError`` subclasses to unwind.
"""

from observable_entropy.domain.errors.entropy import (
    DigestCancelledError,
    EntropyError,
    ErrorKind,
    IteratedDigestError,
    IterationBudgetExceededError,
    SchemaViolation,
    ViolationReason,
)

__all__: list[str] = [
    "DigestCancelledError",
    "EntropyError",
    "ErrorKind",
    "IteratedDigestError",
    "IterationBudgetExceededError",
    "SchemaViolation",
    "ViolationReason",
]
