"""Pydantic schemas for entropy records and pool contributions.

Field names are snake_case in Python and camelCase on the wire; every
schema validates by alias and rejects unknown attributes. Dump with
``model_dump(by_alias=True, exclude_none=True)`` to reproduce the
published JSON shape.

Schemas:
    FileDigest: One source file digest inside a record.
    EntropyRecord: A published entropy snapshot.
    SignedEntropyRecord: EntropyRecord with mandatory prevHash and signature.
    ContributionEntry: One externally submitted entropy value.
    HashIndex: Origin index entry mapping an entropy hash to a commit id.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    TypeAdapter,
)

from observable_entropy.application.validation.formats import (
    is_iso8601_utc,
    is_sha1_hex,
    is_sha256_hex,
    is_signature_hex,
)


def _require(predicate: Callable[[object], bool], label: str) -> Callable[[str], str]:
    def check(value: str) -> str:
        if not predicate(value):
            raise ValueError(f"value is not a valid {label}")
        return value

    return check


Sha1Hex = Annotated[StrictStr, AfterValidator(_require(is_sha1_hex, "SHA-1 hex"))]
Sha256Hex = Annotated[
    StrictStr, AfterValidator(_require(is_sha256_hex, "SHA-256 hex"))
]
SignatureHex = Annotated[
    StrictStr, AfterValidator(_require(is_signature_hex, "signature hex"))
]
Iso8601Utc = Annotated[
    StrictStr, AfterValidator(_require(is_iso8601_utc, "ISO 8601 UTC timestamp"))
]


class _WireModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump using the published attribute names, omitting absent fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class FileDigest(_WireModel):
    """Digest of one upstream entropy source file."""

    hash: StrictStr
    hash_type: StrictStr = Field(alias="hashType")
    name: StrictStr


class EntropyRecord(_WireModel):
    """A published entropy snapshot.

    ``hash`` binds ``files`` together: it is the ``hash_type`` digest of
    the concatenated file hashes, iterated ``hash_iterations`` times.
    """

    id: Sha1Hex | None = None
    created_at: Iso8601Utc = Field(alias="createdAt")
    files: list[FileDigest]
    hash: Sha256Hex
    hash_iterations: StrictInt = Field(alias="hashIterations", ge=0)
    hash_type: Literal["sha256"] = Field(alias="hashType")
    prev_hash: Sha256Hex | None = Field(default=None, alias="prevHash")
    signature: SignatureHex | None = None
    for_commit: Sha1Hex | None = Field(default=None, alias="forCommit")


class SignedEntropyRecord(EntropyRecord):
    """An entropy record carrying the chain link and publisher signature."""

    prev_hash: Sha256Hex = Field(alias="prevHash")
    signature: SignatureHex


class ContributionEntry(_WireModel):
    """One unit of externally submitted randomness.

    ``for_`` is only set on shadow entries, where it names the storage key
    of the genuine entry the shadow accompanies.
    """

    entropy: Sha256Hex
    for_: StrictStr | None = Field(default=None, alias="for")


class HashIndex(_WireModel):
    """Origin index document mapping an entropy hash to its commit."""

    id: Sha1Hex


EntropyListAdapter: TypeAdapter[list[str]] = TypeAdapter(list[Sha256Hex])
