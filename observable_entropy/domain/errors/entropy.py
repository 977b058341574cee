"""Tagged error values for entropy resolution, verification and the pool.

Errors in this module are plain values. Services return them inside a
``Result`` and call sites branch on ``EntropyError.kind`` instead of
catching and inspecting exceptions.

Error kinds:
    BAD_INPUT: Malformed identifier, hash or body. Caller error, never retried.
    NOT_FOUND: No record at the requested coordinate (or not yet published).
    VERIFICATION_FAILED: Record exists and is well-formed but its signature
        or recomputed hash does not match.
    STORAGE_FAILURE: The key-value store rejected a write or was unreachable.
    UPSTREAM_FAILURE: The content origin errored or returned an unparseable body.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from observable_entropy.domain.exceptions import ObservableEntropyError


class ErrorKind(str, Enum):
    """Kinds of failure a caller can receive."""

    BAD_INPUT = "bad_input"
    NOT_FOUND = "not_found"
    VERIFICATION_FAILED = "verification_failed"
    STORAGE_FAILURE = "storage_failure"
    UPSTREAM_FAILURE = "upstream_failure"


class ViolationReason(str, Enum):
    """Why a field failed validation.

    Values:
        MISSING: A required attribute is absent.
        MALFORMED: The attribute is present but its value is invalid.
        UNRECOGNIZED: The attribute is not part of the schema.
    """

    MISSING = "missing"
    MALFORMED = "malformed"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class SchemaViolation:
    """A single field that failed schema validation.

    Attributes:
        path: Location of the field inside the candidate, outermost first.
        reason: Whether the field was missing, malformed or unrecognized.
        value: The rejected value. Used in messages only.
    """

    path: tuple[str | int, ...]
    reason: ViolationReason
    value: Any = None

    @property
    def attribute(self) -> str:
        """Name of the offending attribute (last path element)."""
        return str(self.path[-1]) if self.path else ""

    def describe(self) -> str:
        """Human-readable description matching the public error messages."""
        if not self.path:
            return "invalid input : malformed document"
        if self.reason == ViolationReason.MISSING:
            return f"missing required attribute : {self.attribute}"
        if self.reason == ViolationReason.UNRECOGNIZED:
            return f"unknown attribute : {self.attribute}"
        return f"invalid attribute value for : {self.attribute}"


@dataclass(frozen=True)
class EntropyError:
    """An expected failure, returned as a value.

    Attributes:
        kind: The tagged error kind.
        message: Human-readable description.
        cause: Kind of an underlying failure that was folded into this one
            (e.g. an UPSTREAM_FAILURE reported as NOT_FOUND).
        violations: Schema violations, when the error came from validation.
    """

    kind: ErrorKind
    message: str
    cause: ErrorKind | None = None
    violations: tuple[SchemaViolation, ...] = field(default_factory=tuple)

    @property
    def violation(self) -> SchemaViolation | None:
        """First schema violation, if any."""
        return self.violations[0] if self.violations else None

    @classmethod
    def bad_input(
        cls, message: str, violations: tuple[SchemaViolation, ...] = ()
    ) -> EntropyError:
        return cls(ErrorKind.BAD_INPUT, message, violations=violations)

    @classmethod
    def not_found(cls, message: str, cause: ErrorKind | None = None) -> EntropyError:
        return cls(ErrorKind.NOT_FOUND, message, cause=cause)

    @classmethod
    def verification_failed(cls, message: str) -> EntropyError:
        return cls(ErrorKind.VERIFICATION_FAILED, message)

    @classmethod
    def storage_failure(cls, message: str) -> EntropyError:
        return cls(ErrorKind.STORAGE_FAILURE, message)

    @classmethod
    def upstream_failure(cls, message: str) -> EntropyError:
        return cls(ErrorKind.UPSTREAM_FAILURE, message)


class IteratedDigestError(ObservableEntropyError):
    """Base class for signals raised by the iterated digest worker."""

    pass


class IterationBudgetExceededError(IteratedDigestError):
    """Requested iteration count is larger than the caller's budget.

    Attributes:
        requested: Iterations the record asked for.
        budget: Maximum iterations the caller allows.
    """

    def __init__(self, requested: int, budget: int) -> None:
        self.requested = requested
        self.budget = budget
        super().__init__(
            f"hashIterations {requested} exceeds iteration budget {budget}"
        )


class DigestCancelledError(IteratedDigestError):
    """The iterated digest was cancelled before completing.

    Attributes:
        completed: Iterations finished before the cancellation was observed.
    """

    def __init__(self, completed: int) -> None:
        self.completed = completed
        super().__init__(f"iterated digest cancelled after {completed} iterations")
