"""Conversion of ``EntropyError`` values into HTTP problem responses."""

from typing import Any, NoReturn

from fastapi import HTTPException, Request

from observable_entropy.domain.errors.entropy import (
    EntropyError,
    ErrorKind,
    ViolationReason,
)

ERROR_TYPE_BASE = "https://observable-entropy.truestamp.com/errors"

# kind -> (status, title, type slug)
_PROBLEMS: dict[ErrorKind, tuple[int, str, str]] = {
    ErrorKind.BAD_INPUT: (400, "Invalid parameters", "invalid-parameters"),
    ErrorKind.NOT_FOUND: (404, "Not found", "not-found"),
    ErrorKind.VERIFICATION_FAILED: (406, "Not acceptable", "verification-failed"),
    ErrorKind.STORAGE_FAILURE: (500, "Internal Server Error", "storage-failure"),
    ErrorKind.UPSTREAM_FAILURE: (502, "Bad Gateway", "upstream-failure"),
}


def status_for(kind: ErrorKind) -> int:
    """HTTP status code for an error kind."""
    return _PROBLEMS[kind][0]


def problem_detail(error: EntropyError, request: Request) -> dict[str, Any]:
    """Build the RFC 7807 body for an error value."""
    status, title, slug = _PROBLEMS[error.kind]
    message = error.message
    if error.kind == ErrorKind.STORAGE_FAILURE:
        message = f"Internal Server Error : {message}"

    detail: dict[str, Any] = {
        "type": f"{ERROR_TYPE_BASE}/{slug}",
        "title": title,
        "status": status,
        "detail": message,
        "instance": str(request.url),
    }
    violation = error.violation
    if violation is not None:
        detail["attribute"] = violation.attribute
        detail["path"] = list(violation.path)
        if violation.reason == ViolationReason.MALFORMED:
            detail["value"] = violation.value
    return detail


def raise_for_error(error: EntropyError, request: Request) -> NoReturn:
    """Raise the HTTPException corresponding to an error value."""
    raise HTTPException(
        status_code=status_for(error.kind),
        detail=problem_detail(error, request),
    )
