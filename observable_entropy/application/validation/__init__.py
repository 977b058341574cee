"""Validation of entropy records and contributions.

Format predicates are pure functions over strings; schemas are pydantic
models; ``validate`` turns a decoded JSON value into a typed model or a
BAD_INPUT error value.
"""

from observable_entropy.application.validation.formats import (
    is_iso8601_utc,
    is_sha1_hex,
    is_sha256_hex,
    is_signature_hex,
)
from observable_entropy.application.validation.schemas import (
    ContributionEntry,
    EntropyRecord,
    FileDigest,
    HashIndex,
    SignedEntropyRecord,
)
from observable_entropy.application.validation.validator import (
    validate,
    validate_entropy_list,
)

__all__: list[str] = [
    "ContributionEntry",
    "EntropyRecord",
    "FileDigest",
    "HashIndex",
    "SignedEntropyRecord",
    "is_iso8601_utc",
    "is_sha1_hex",
    "is_sha256_hex",
    "is_signature_hex",
    "validate",
    "validate_entropy_list",
]
