"""Content origin port definition.

The content origin is the content-addressable store that publishes
entropy records: addressable directly by commit id, indirectly through a
hash index, or at its head for the latest record.

Every method returns a ``Result`` holding decoded JSON. Errors are
NOT_FOUND (the origin has nothing at that coordinate) or UPSTREAM_FAILURE
(transport error, server error, unparseable body). Payloads are returned
unvalidated; schema checks belong to the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from observable_entropy.domain.result import Result


class ContentOriginPort(ABC):
    """Abstract protocol for reading published entropy records.

    Implementations:
    - GitHubContentOrigin: raw.githubusercontent.com over httpx
    - ContentOriginStub: in-memory records for tests
    """

    @abstractmethod
    async def get_by_commit_id(self, commit_id: str) -> Result[Any]:
        """Fetch the record published in a specific commit.

        Args:
            commit_id: SHA-1 commit id.

        Returns:
            Result with the decoded record JSON.
        """
        ...

    @abstractmethod
    async def get_hash_index(self, entropy_hash: str) -> Result[Any]:
        """Fetch the index document for an entropy hash.

        Args:
            entropy_hash: SHA-256 hex of a published record.

        Returns:
            Result with the decoded index JSON (expected ``{"id": <sha1>}``).
        """
        ...

    @abstractmethod
    async def get_latest(self) -> Result[Any]:
        """Fetch the head record.

        Returns:
            Result with the decoded record JSON.
        """
        ...
