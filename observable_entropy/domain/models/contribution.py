"""Contribution pool value types."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ContributionReceipt:
    """Acknowledgement returned to a contributor after a successful submit.

    Attributes:
        key: Storage key of the genuine entry (``entry::<uuid7>``).
        entropy: The submitted entropy value, echoed back.
        expiration: Unix timestamp (seconds) at which both the entry and
            its shadow expire.
    """

    key: str
    entropy: str
    expiration: int

    def to_dict(self) -> dict[str, str | int]:
        return {
            "key": self.key,
            "entropy": self.entropy,
            "expiration": self.expiration,
        }


@dataclass(frozen=True)
class PoolListing:
    """Best-effort snapshot of the live contribution pool.

    Shadow entries are indistinguishable from genuine ones here and are
    intentionally mixed into ``entropies``.

    Attributes:
        entropies: Entropy values in store enumeration order.
        skipped_keys: Keys that were listed but could not be read or parsed.
    """

    entropies: tuple[str, ...] = field(default_factory=tuple)
    skipped_keys: tuple[str, ...] = field(default_factory=tuple)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_keys)
