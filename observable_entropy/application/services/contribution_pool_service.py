"""Contribution pool service.

Accepts third-party entropy into a short-lived pool and lists the pool's
live contents.

Poisoning defense:
    Every genuine entry is stored alongside a shadow entry whose value is
    ``sha256(K + "::" + expiration + "::" + entropy)``, where ``K`` is the
    freshly minted storage key and ``expiration`` a random expiry. Neither
    is known to the contributor before submission is acknowledged, so no
    contributor can choose a value that alone determines a future entropy
    round. The shadow is written first and the genuine entry only if that
    succeeded: a genuine entry never exists without its shadow.

Expiry:
    Both entries share an expiry drawn uniformly per submission from
    ``now + 60 * [min_minutes, max_minutes)`` seconds (10 to 60 minutes by
    default), so an entry lands unpredictably in one or more rounds.
"""

from __future__ import annotations

import hashlib
import json
import random
import time
from collections.abc import Callable
from typing import Any

from structlog import get_logger
from uuid6 import uuid7

from observable_entropy.application.ports.key_value_store import (
    KeyValueStoreError,
    KeyValueStorePort,
)
from observable_entropy.application.validation.schemas import ContributionEntry
from observable_entropy.application.validation.validator import validate
from observable_entropy.domain.errors.entropy import EntropyError
from observable_entropy.domain.models.contribution import (
    ContributionReceipt,
    PoolListing,
)
from observable_entropy.domain.result import Result

logger = get_logger(__name__)

DEFAULT_ENTRY_PREFIX = "entry::"
SHADOW_SUFFIX = "::hashed"


def mint_contribution_key() -> str:
    """Mint a unique, time-ordered contribution key (UUIDv7)."""
    return str(uuid7())


def shadow_digest(storage_key: str, expiration: int, entropy: str) -> str:
    """Compute the shadow entry value for a submission.

    Args:
        storage_key: Storage key of the genuine entry (``entry::<key>``).
        expiration: Expiry in unix seconds.
        entropy: Submitted entropy value.

    Returns:
        Lower-case SHA-256 hex.
    """
    message = f"{storage_key}::{expiration}::{entropy}"
    return hashlib.sha256(message.encode("utf-8")).hexdigest()


def _encode(entry: ContributionEntry) -> str:
    return json.dumps(entry.to_wire(), separators=(",", ":"))


class ContributionPoolService:
    """Submits contributions to and lists the contribution pool.

    Concurrent submissions never contend: each mints its own key, and the
    two writes per submission touch only that key and its shadow.
    """

    def __init__(
        self,
        store: KeyValueStorePort,
        entry_prefix: str = DEFAULT_ENTRY_PREFIX,
        min_expiry_minutes: int = 10,
        max_expiry_minutes: int = 60,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
        key_factory: Callable[[], str] = mint_contribution_key,
    ) -> None:
        """Initialize the pool service.

        Args:
            store: Key-value store holding the pool.
            entry_prefix: Prefix for every pool key.
            min_expiry_minutes: Inclusive lower bound of the expiry draw.
            max_expiry_minutes: Exclusive upper bound of the expiry draw.
            clock: Returns the current unix time in seconds.
            rng: Random source for expiry. Defaults to the OS CSPRNG.
            key_factory: Mints contribution keys.

        Raises:
            ValueError: If the expiry bounds are inverted or not positive.
        """
        if min_expiry_minutes < 1:
            raise ValueError(
                f"min_expiry_minutes must be positive, got {min_expiry_minutes}"
            )
        if max_expiry_minutes <= min_expiry_minutes:
            raise ValueError(
                f"max_expiry_minutes ({max_expiry_minutes}) must be greater than "
                f"min_expiry_minutes ({min_expiry_minutes})"
            )
        self._store = store
        self._entry_prefix = entry_prefix
        self._min_expiry_minutes = min_expiry_minutes
        self._max_expiry_minutes = max_expiry_minutes
        self._clock = clock
        self._rng = rng or random.SystemRandom()
        self._key_factory = key_factory

    @property
    def entry_prefix(self) -> str:
        return self._entry_prefix

    def storage_key(self, contribution_key: str) -> str:
        return f"{self._entry_prefix}{contribution_key}"

    def draw_expiration(self, now: int) -> int:
        """Draw an absolute expiry (unix seconds) for a submission at ``now``."""
        minutes = self._rng.randrange(self._min_expiry_minutes, self._max_expiry_minutes)
        return now + 60 * minutes

    async def submit(self, candidate: Any) -> Result[ContributionReceipt]:
        """Submit one contribution.

        Args:
            candidate: Decoded request body, expected ``{"entropy": <sha256>}``.

        Returns:
            Result with the receipt, BAD_INPUT for an invalid body (nothing
            is written), or STORAGE_FAILURE if either write was rejected.
        """
        validated = validate(candidate, ContributionEntry)
        if not validated.is_ok:
            logger.info("entry_rejected", detail=validated.error.message)
            return Result.fail(validated.error)
        entry = validated.unwrap()

        key = self.storage_key(self._key_factory())
        expiration = self.draw_expiration(int(self._clock()))
        log = logger.bind(key=key, expiration=expiration)

        shadow = ContributionEntry.model_validate(
            {"entropy": shadow_digest(key, expiration, entry.entropy), "for": key}
        )
        if not await self._store.write(
            f"{key}{SHADOW_SUFFIX}", _encode(shadow), expiration=expiration
        ):
            log.error("shadow_write_failed")
            return Result.fail(
                EntropyError.storage_failure("Failed to write hashed entry.")
            )

        if not await self._store.write(key, _encode(entry), expiration=expiration):
            log.error("entry_write_failed")
            return Result.fail(EntropyError.storage_failure("Failed to write entry."))

        log.info("entry_submitted")
        return Result.ok(
            ContributionReceipt(key=key, entropy=entry.entropy, expiration=expiration)
        )

    async def _read_entropy(self, key: str) -> str | None:
        try:
            item = await self._store.read(key)
        except KeyValueStoreError as e:
            logger.warning("pool_entry_unreadable", key=key, error=str(e))
            return None
        if item is None or not item.value:
            logger.debug("pool_entry_missing", key=key)
            return None
        try:
            decoded = json.loads(item.value)
        except json.JSONDecodeError:
            logger.warning("pool_entry_unparseable", key=key)
            return None
        parsed = validate(decoded, ContributionEntry)
        if not parsed.is_ok:
            logger.warning("pool_entry_invalid", key=key, detail=parsed.error.message)
            return None
        return parsed.unwrap().entropy

    async def list_current(self) -> Result[PoolListing]:
        """List the entropy of every live pool entry, shadows included.

        Entries that vanish, fail to parse or fail validation are skipped
        and reported in ``skipped_keys``. Only an unreachable store fails
        the whole listing.

        Returns:
            Result with the listing, or STORAGE_FAILURE.
        """
        try:
            keys = await self._store.list_keys(self._entry_prefix)
        except KeyValueStoreError as e:
            logger.error("pool_listing_failed", error=str(e))
            return Result.fail(
                EntropyError.storage_failure(f"Failed to list entries : {e}")
            )

        entropies: list[str] = []
        skipped: list[str] = []
        for key in keys:
            entropy = await self._read_entropy(key)
            if entropy is None:
                skipped.append(key)
            else:
                entropies.append(entropy)

        if skipped:
            logger.info(
                "pool_listing_partial",
                listed=len(entropies),
                skipped=len(skipped),
            )
        return Result.ok(
            PoolListing(entropies=tuple(entropies), skipped_keys=tuple(skipped))
        )
