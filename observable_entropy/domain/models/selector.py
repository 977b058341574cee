"""Selectors naming which entropy record a caller wants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Latest:
    """The most recently published record."""

    def describe(self) -> str:
        return "latest"


@dataclass(frozen=True)
class ByCommitId:
    """The record published in a given source repository commit.

    Attributes:
        commit_id: SHA-1 commit id (validated by the resolver, not here).
    """

    commit_id: str

    def describe(self) -> str:
        return f"commit : {self.commit_id}"


@dataclass(frozen=True)
class ByHash:
    """The record whose top-level ``hash`` equals the given value.

    Attributes:
        entropy_hash: SHA-256 hex (validated by the resolver, not here).
    """

    entropy_hash: str

    def describe(self) -> str:
        return f"hash : {self.entropy_hash}"


EntropySelector = Union[Latest, ByCommitId, ByHash]
