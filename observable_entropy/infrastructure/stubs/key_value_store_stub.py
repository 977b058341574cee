"""In-memory key-value store for development and testing.

Honors absolute expiry against an injectable clock, keeps insertion order
for listing, and can simulate an unreachable or write-rejecting store.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from observable_entropy.application.ports.key_value_store import (
    KeyValueItem,
    KeyValueStoreError,
    KeyValueStorePort,
)


@dataclass
class StoreFailureMode:
    """Configuration for simulating store failures.

    Attributes:
        read_fails: read() raises KeyValueStoreError.
        list_fails: list_keys() raises KeyValueStoreError.
        write_fails: write() returns False for every key.
        reject_suffixes: write() returns False for keys ending with any of
            these suffixes.
        unreadable_keys: read() raises KeyValueStoreError for these keys.
    """

    read_fails: bool = False
    list_fails: bool = False
    write_fails: bool = False
    reject_suffixes: tuple[str, ...] = ()
    unreadable_keys: frozenset[str] = field(default_factory=frozenset)


@dataclass
class _StoredValue:
    value: str
    expiration: int | None


class InMemoryKeyValueStore(KeyValueStorePort):
    """Dict-backed implementation of KeyValueStorePort.

    Usage:
        store = InMemoryKeyValueStore(clock=lambda: 1_700_000_000)
        await store.write("entry::a", "{}", expiration=1_700_000_600)

        store.set_failure_mode(StoreFailureMode(list_fails=True))
        ...
        store.clear()
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._data: dict[str, _StoredValue] = {}
        self._clock = clock
        self._failure_mode = StoreFailureMode()
        self.write_log: list[str] = []

    def set_failure_mode(self, mode: StoreFailureMode) -> None:
        self._failure_mode = mode

    def clear_failure_mode(self) -> None:
        self._failure_mode = StoreFailureMode()

    def clear(self) -> None:
        """Clear all state for test isolation."""
        self._data.clear()
        self.write_log.clear()
        self._failure_mode = StoreFailureMode()

    def put(self, key: str, value: str, expiration: int | None = None) -> None:
        """Seed a value directly, bypassing failure modes."""
        self._data[key] = _StoredValue(value=value, expiration=expiration)

    def _live(self, key: str) -> _StoredValue | None:
        stored = self._data.get(key)
        if stored is None:
            return None
        if stored.expiration is not None and stored.expiration <= self._clock():
            del self._data[key]
            return None
        return stored

    async def read(self, key: str) -> KeyValueItem | None:
        if self._failure_mode.read_fails or key in self._failure_mode.unreadable_keys:
            raise KeyValueStoreError(f"simulated read failure for {key}")
        stored = self._live(key)
        if stored is None:
            return None
        metadata = {} if stored.expiration is None else {"expiration": stored.expiration}
        return KeyValueItem(value=stored.value, metadata=metadata)

    async def write(self, key: str, value: str, *, expiration: int) -> bool:
        mode = self._failure_mode
        rejected = bool(mode.reject_suffixes) and key.endswith(mode.reject_suffixes)
        if mode.write_fails or rejected:
            return False
        self._data[key] = _StoredValue(value=value, expiration=expiration)
        self.write_log.append(key)
        return True

    async def list_keys(self, prefix: str) -> list[str]:
        if self._failure_mode.list_fails:
            raise KeyValueStoreError("simulated list failure")
        return [
            key
            for key in list(self._data)
            if key.startswith(prefix) and self._live(key) is not None
        ]
