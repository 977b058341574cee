"""Schema validation returning ``Result`` values.

Wraps pydantic validation so callers never handle ``ValidationError``
directly: a failure becomes a BAD_INPUT ``EntropyError`` whose
``violations`` say which field failed and why.

Example:
    result = validate(payload, EntropyRecord)
    if not result.is_ok:
        violation = result.error.violation
        print(violation.path, violation.reason, violation.value)
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import ErrorDetails

from observable_entropy.application.validation.schemas import EntropyListAdapter
from observable_entropy.domain.errors.entropy import (
    EntropyError,
    SchemaViolation,
    ViolationReason,
)
from observable_entropy.domain.result import Result

ModelT = TypeVar("ModelT", bound=BaseModel)


def _violation_from(error: ErrorDetails) -> SchemaViolation:
    error_type = error["type"]
    if error_type == "missing":
        return SchemaViolation(
            path=tuple(error["loc"]), reason=ViolationReason.MISSING, value=None
        )
    if error_type == "extra_forbidden":
        reason = ViolationReason.UNRECOGNIZED
    else:
        reason = ViolationReason.MALFORMED
    return SchemaViolation(
        path=tuple(error["loc"]), reason=reason, value=error.get("input")
    )


def _bad_input(exc: ValidationError, expected: str) -> EntropyError:
    violations = tuple(_violation_from(error) for error in exc.errors())
    if not violations:
        message = "invalid input"
    elif not violations[0].path:
        # The candidate itself has the wrong shape
        message = f"invalid input : expected {expected}"
    else:
        message = violations[0].describe()
    return EntropyError.bad_input(message, violations)


def validate(candidate: Any, schema: type[ModelT]) -> Result[ModelT]:
    """Validate a decoded JSON value against a schema.

    Args:
        candidate: Decoded JSON (normally a dict).
        schema: Pydantic model class to validate against.

    Returns:
        Result holding the typed model, or a BAD_INPUT error.
    """
    try:
        return Result.ok(schema.model_validate(candidate))
    except ValidationError as exc:
        return Result.fail(_bad_input(exc, "a JSON object"))


def validate_entropy_list(candidate: Any) -> Result[list[str]]:
    """Validate a pool listing (a list of SHA-256 hex strings)."""
    try:
        return Result.ok(EntropyListAdapter.validate_python(candidate))
    except ValidationError as exc:
        return Result.fail(_bad_input(exc, "a JSON array"))
