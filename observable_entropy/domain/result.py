"""Result wrapper carrying either a value or an ``EntropyError``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from observable_entropy.domain.errors.entropy import EntropyError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation that can fail in an expected way.

    Exactly one of ``value`` or ``error`` is meaningful. Construct with
    ``Result.ok`` / ``Result.fail`` rather than directly.

    Example:
        result = await resolver.resolve(ByHash(hash))
        if result.is_ok:
            return result.value
        if result.error.kind == ErrorKind.NOT_FOUND:
            ...
    """

    value: T | None = None
    error: EntropyError | None = None

    @classmethod
    def ok(cls, value: T) -> Result[T]:
        return cls(value=value, error=None)

    @classmethod
    def fail(cls, error: EntropyError) -> Result[T]:
        return cls(value=None, error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        """Error kind, or None for a successful result."""
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value, raising ValueError if this is a failure."""
        if self.error is not None:
            raise ValueError(f"{self.error.kind.value}: {self.error.message}")
        return self.value  # type: ignore[return-value]
