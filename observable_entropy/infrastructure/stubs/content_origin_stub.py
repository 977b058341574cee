"""In-memory content origin for development and testing."""

from __future__ import annotations

from typing import Any

from observable_entropy.application.ports.content_origin import ContentOriginPort
from observable_entropy.domain.errors.entropy import EntropyError
from observable_entropy.domain.result import Result


class ContentOriginStub(ContentOriginPort):
    """Serves records and hash-index entries from dictionaries.

    Usage:
        origin = ContentOriginStub()
        origin.publish(commit_id, record_json, latest=True)
        origin.upstream_fails = True  # every fetch fails with UPSTREAM_FAILURE
    """

    def __init__(self) -> None:
        self.records: dict[str, Any] = {}
        self.hash_index: dict[str, Any] = {}
        self.latest: Any = None
        self.upstream_fails = False
        self.calls: list[tuple[str, str]] = []

    def publish(self, commit_id: str, record: Any, *, latest: bool = False) -> None:
        """Publish a record under a commit id and index it by its hash."""
        self.records[commit_id] = record
        if isinstance(record, dict) and "hash" in record:
            self.hash_index[record["hash"]] = {"id": commit_id}
        if latest:
            self.latest = record

    def _lookup(self, table: dict[str, Any], key: str, what: str) -> Result[Any]:
        if self.upstream_fails:
            return Result.fail(EntropyError.upstream_failure("simulated origin failure"))
        if key not in table:
            return Result.fail(EntropyError.not_found(f"origin has no {what} {key}"))
        return Result.ok(table[key])

    async def get_by_commit_id(self, commit_id: str) -> Result[Any]:
        self.calls.append(("commit", commit_id))
        return self._lookup(self.records, commit_id, "commit")

    async def get_hash_index(self, entropy_hash: str) -> Result[Any]:
        self.calls.append(("hash", entropy_hash))
        return self._lookup(self.hash_index, entropy_hash, "hash")

    async def get_latest(self) -> Result[Any]:
        self.calls.append(("latest", ""))
        if self.latest is None:
            return self._lookup({}, "latest", "head record")
        return self._lookup({"latest": self.latest}, "latest", "head record")
