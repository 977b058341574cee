"""Key-value store port definition.

Defines the abstract interface for the persistence substrate that holds
the contribution pool and the cached ``latest`` record. The store is
treated as an opaque read/write/list service with store-enforced expiry;
no multi-key transactions are assumed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from observable_entropy.domain.exceptions import ObservableEntropyError


class KeyValueStoreError(ObservableEntropyError):
    """The store could not be reached or refused a read/list operation."""

    pass


@dataclass(frozen=True)
class KeyValueItem:
    """A stored value and its metadata.

    Attributes:
        value: The stored text (JSON for every key this service writes).
        metadata: Store metadata, e.g. ``{"expiration": 1700000000}``.
    """

    value: str
    metadata: dict[str, Any] = field(default_factory=dict)


class KeyValueStorePort(ABC):
    """Abstract protocol for key-value store operations.

    Implementations:
    - RedisKeyValueStore: production, Redis with EXAT expiry
    - InMemoryKeyValueStore: development and tests
    """

    @abstractmethod
    async def read(self, key: str) -> KeyValueItem | None:
        """Read a key.

        Args:
            key: Storage key.

        Returns:
            The item, or None if the key is absent or expired.

        Raises:
            KeyValueStoreError: If the store is unreachable.
        """
        ...

    @abstractmethod
    async def write(self, key: str, value: str, *, expiration: int) -> bool:
        """Write a key that expires at an absolute time.

        Args:
            key: Storage key.
            value: Text to store.
            expiration: Absolute expiry as unix seconds.

        Returns:
            True if the store accepted the write, False otherwise.
            Implementations never raise for a rejected write.
        """
        ...

    @abstractmethod
    async def list_keys(self, prefix: str) -> list[str]:
        """List every live key starting with ``prefix``.

        Args:
            prefix: Key prefix, e.g. ``entry::``.

        Returns:
            Keys in the store's enumeration order.

        Raises:
            KeyValueStoreError: If the store is unreachable.
        """
        ...
