"""Entropy resolution service.

The external-facing façade: resolves a selector to a published entropy
record, verifies records on request, and fronts the contribution pool.

Resolution tiers:
    ByCommitId: origin record for the commit.
    ByHash: origin hash index -> commit id -> ByCommitId.
    Latest: cached ``latest`` key in the key-value store, then the origin
        head record. Any cache problem (absent, expired, unparseable,
        invalid, store unreachable) falls through to the origin.

Every record is validated before it is returned. A malformed payload is
BAD_INPUT, never NOT_FOUND. An origin fault is reported as NOT_FOUND with
``cause=UPSTREAM_FAILURE``. Tiers are never retried.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from structlog import get_logger

from observable_entropy.application.ports.content_origin import ContentOriginPort
from observable_entropy.application.ports.key_value_store import (
    KeyValueStoreError,
    KeyValueStorePort,
)
from observable_entropy.application.services.contribution_pool_service import (
    ContributionPoolService,
)
from observable_entropy.application.services.entropy_verifier import EntropyVerifier
from observable_entropy.application.validation.formats import (
    is_sha1_hex,
    is_sha256_hex,
)
from observable_entropy.application.validation.schemas import (
    EntropyRecord,
    HashIndex,
)
from observable_entropy.application.validation.validator import validate
from observable_entropy.domain.errors.entropy import (
    EntropyError,
    ErrorKind,
    SchemaViolation,
    ViolationReason,
)
from observable_entropy.domain.models.contribution import (
    ContributionReceipt,
    PoolListing,
)
from observable_entropy.domain.models.selector import (
    ByCommitId,
    ByHash,
    EntropySelector,
    Latest,
)
from observable_entropy.domain.result import Result

logger = get_logger(__name__)

DEFAULT_LATEST_KEY = "latest"


@dataclass(frozen=True)
class VerifiedEntropy:
    """A record that passed signature and chain verification."""

    entropy: EntropyRecord
    verified: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"verified": self.verified, "entropy": self.entropy.to_wire()}


def _invalid_parameter(attribute: str, value: str) -> EntropyError:
    violation = SchemaViolation(
        path=(attribute,), reason=ViolationReason.MALFORMED, value=value
    )
    return EntropyError.bad_input(violation.describe(), (violation,))


class EntropyResolutionService:
    """Resolves, verifies and lists entropy for external callers.

    Example:
        service = EntropyResolutionService(origin, store, verifier, pool)
        result = await service.resolve(ByHash(entropy_hash))
        if result.is_ok:
            record = result.value
    """

    def __init__(
        self,
        origin: ContentOriginPort,
        store: KeyValueStorePort,
        verifier: EntropyVerifier,
        pool: ContributionPoolService,
        latest_key: str = DEFAULT_LATEST_KEY,
    ) -> None:
        """Initialize the façade.

        Args:
            origin: Content origin holding published records.
            store: Key-value store holding the cached latest record.
            verifier: Signature and chain verifier.
            pool: Contribution pool service.
            latest_key: Store key of the cached latest record.
        """
        self._origin = origin
        self._store = store
        self._verifier = verifier
        self._pool = pool
        self._latest_key = latest_key

    @property
    def public_key_hex(self) -> str:
        return self._verifier.public_key_hex

    # Resolution

    async def resolve(self, selector: EntropySelector) -> Result[EntropyRecord]:
        """Resolve a selector to a validated entropy record.

        Returns:
            Result with the record, BAD_INPUT or NOT_FOUND.
        """
        if isinstance(selector, ByCommitId):
            return await self._resolve_commit(selector)
        if isinstance(selector, ByHash):
            return await self._resolve_hash(selector)
        if isinstance(selector, Latest):
            return await self._resolve_latest(selector)
        raise TypeError(f"unsupported selector: {selector!r}")

    def _from_origin(
        self, fetched: Result[Any], selector: EntropySelector
    ) -> Result[Any]:
        if fetched.is_ok:
            return fetched
        description = f"No entropy found for {selector.describe()}"
        if fetched.kind == ErrorKind.UPSTREAM_FAILURE:
            logger.warning(
                "origin_fetch_failed",
                selector=selector.describe(),
                detail=fetched.error.message,
            )
            return Result.fail(
                EntropyError.not_found(
                    f"{description} : {fetched.error.message}",
                    cause=ErrorKind.UPSTREAM_FAILURE,
                )
            )
        return Result.fail(EntropyError.not_found(description))

    def _validated_record(
        self, payload: Any, selector: EntropySelector
    ) -> Result[EntropyRecord]:
        record = validate(payload, EntropyRecord)
        if not record.is_ok:
            logger.warning(
                "invalid_entropy_record",
                selector=selector.describe(),
                detail=record.error.message,
            )
        return record

    async def _resolve_commit(self, selector: ByCommitId) -> Result[EntropyRecord]:
        if not is_sha1_hex(selector.commit_id):
            return Result.fail(_invalid_parameter("id", selector.commit_id))

        fetched = self._from_origin(
            await self._origin.get_by_commit_id(selector.commit_id), selector
        )
        if not fetched.is_ok:
            return Result.fail(fetched.error)
        return self._validated_record(fetched.value, selector)

    async def _resolve_hash(self, selector: ByHash) -> Result[EntropyRecord]:
        if not is_sha256_hex(selector.entropy_hash):
            return Result.fail(_invalid_parameter("hash", selector.entropy_hash))

        fetched = self._from_origin(
            await self._origin.get_hash_index(selector.entropy_hash), selector
        )
        if not fetched.is_ok:
            return Result.fail(fetched.error)

        index = validate(fetched.value, HashIndex)
        if not index.is_ok:
            logger.warning(
                "invalid_hash_index",
                entropy_hash=selector.entropy_hash,
                detail=index.error.message,
            )
            return Result.fail(index.error)

        record = await self._resolve_commit(ByCommitId(index.unwrap().id))
        if record.kind == ErrorKind.NOT_FOUND:
            # Report against the coordinate the caller asked for
            return Result.fail(
                EntropyError.not_found(
                    f"No entropy found for {selector.describe()}",
                    cause=record.error.cause,
                )
            )
        return record

    async def _read_cached_latest(self) -> EntropyRecord | None:
        try:
            item = await self._store.read(self._latest_key)
        except KeyValueStoreError as e:
            logger.warning("latest_cache_unavailable", error=str(e))
            return None

        if item is None or not item.value:
            logger.info("latest_cache_miss", key=self._latest_key)
            return None

        try:
            payload = json.loads(item.value)
        except json.JSONDecodeError:
            logger.warning("latest_cache_unparseable", key=self._latest_key)
            return None

        record = validate(payload, EntropyRecord)
        if not record.is_ok:
            logger.warning(
                "latest_cache_invalid",
                key=self._latest_key,
                detail=record.error.message,
            )
            return None
        return record.unwrap()

    async def _resolve_latest(self, selector: Latest) -> Result[EntropyRecord]:
        cached = await self._read_cached_latest()
        if cached is not None:
            logger.debug("latest_cache_hit", hash=cached.hash)
            return Result.ok(cached)

        fetched = self._from_origin(await self._origin.get_latest(), selector)
        if not fetched.is_ok:
            return Result.fail(fetched.error)
        return self._validated_record(fetched.value, selector)

    # Verification

    async def verify(self, selector: EntropySelector) -> Result[VerifiedEntropy]:
        """Resolve a record and verify it.

        For ``ByHash`` the requested hash is the claimed hash, so a record
        reached through a stale or forged index entry fails. Otherwise the
        record's own hash is claimed.

        Returns:
            Result with the verified record, the resolution error, or
            VERIFICATION_FAILED.
        """
        resolved = await self.resolve(selector)
        if not resolved.is_ok:
            return Result.fail(resolved.error)
        record = resolved.unwrap()

        if isinstance(selector, ByHash):
            claimed_hash = selector.entropy_hash
        else:
            claimed_hash = record.hash

        if not await self._verifier.verify(claimed_hash, record):
            return Result.fail(
                EntropyError.verification_failed(
                    f"Entropy failed verification for {selector.describe()}"
                )
            )
        logger.info("entropy_verified", hash=record.hash)
        return Result.ok(VerifiedEntropy(entropy=record))

    async def verify_by_hash(self, entropy_hash: str) -> Result[VerifiedEntropy]:
        return await self.verify(ByHash(entropy_hash))

    async def verify_by_commit(self, commit_id: str) -> Result[VerifiedEntropy]:
        return await self.verify(ByCommitId(commit_id))

    # Contribution pool

    async def submit_entry(self, candidate: Any) -> Result[ContributionReceipt]:
        """Submit a contribution to the pool."""
        return await self._pool.submit(candidate)

    async def list_entries(self) -> Result[PoolListing]:
        """List the pool's current entropy values."""
        return await self._pool.list_current()
