"""Signature and chain verification for entropy records.

A record is trusted only when both checks pass:

1. Provenance: the Ed25519 signature over the hex-decoded ``hash`` verifies
   against the publisher's public key. Cheap, so it runs first.
2. Content integrity: concatenating every ``files[i].hash`` in order and
   applying ``hashType`` ``hashIterations`` times reproduces the claimed
   hash. Expensive (seconds), so it runs only after the signature passed,
   on a worker thread, within the configured iteration budget.

Verification is total: every internal fault, malformed input, budget
overrun or cancellation of the worker yields ``False``. Only cancellation
of the awaiting task itself propagates.
"""

from __future__ import annotations

from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from structlog import get_logger

from observable_entropy.application.services.iterated_digest import (
    DEFAULT_CHECK_INTERVAL,
    IteratedDigest,
)
from observable_entropy.application.validation.schemas import (
    EntropyRecord,
    FileDigest,
    SignedEntropyRecord,
)
from observable_entropy.application.validation.validator import validate
from observable_entropy.domain.errors.entropy import IteratedDigestError

logger = get_logger(__name__)


def concatenate_file_hashes(files: list[FileDigest]) -> str:
    """Join file hashes in array order with no separator."""
    return "".join(file.hash for file in files)


class EntropyVerifier:
    """Verifies signed entropy records against a fixed public key.

    The key is injected at construction so tests and alternate deployments
    can verify against their own key material.

    Example:
        verifier = EntropyVerifier(public_key_hex, max_iterations=1_000_000)
        if await verifier.verify(claimed_hash, record_json):
            ...
    """

    def __init__(
        self,
        public_key_hex: str,
        max_iterations: int | None = None,
        check_interval: int = DEFAULT_CHECK_INTERVAL,
    ) -> None:
        """Initialize the verifier.

        Args:
            public_key_hex: Raw 32-byte Ed25519 public key, hex encoded.
            max_iterations: Iteration budget per verification. None is
                unbounded.
            check_interval: Digest rounds between cancellation checks.

        Raises:
            ValueError: If the public key is not a valid Ed25519 key.
        """
        self._public_key_hex = public_key_hex
        self._public_key = Ed25519PublicKey.from_public_bytes(
            bytes.fromhex(public_key_hex)
        )
        self._max_iterations = max_iterations
        self._check_interval = check_interval

    @property
    def public_key_hex(self) -> str:
        return self._public_key_hex

    def check_signature(self, record: SignedEntropyRecord) -> bool:
        """Verify the detached signature over the record's hash bytes."""
        try:
            self._public_key.verify(
                bytes.fromhex(record.signature),
                bytes.fromhex(record.hash),
            )
        except (InvalidSignature, ValueError):
            return False
        return True

    def _as_signed(self, record: Any) -> SignedEntropyRecord | None:
        if isinstance(record, SignedEntropyRecord):
            return record
        if isinstance(record, EntropyRecord):
            record = record.to_wire()
        result = validate(record, SignedEntropyRecord)
        if not result.is_ok:
            logger.info(
                "verification_failed",
                reason="invalid_record",
                detail=result.error.message,
            )
            return None
        return result.value

    def _prepare(self, claimed_hash: str, record: Any) -> IteratedDigest | None:
        """Run the fast checks and build the slow one.

        Returns None when a fast check already failed.
        """
        signed = self._as_signed(record)
        if signed is None:
            return None

        log = logger.bind(claimed_hash=claimed_hash)

        if claimed_hash != signed.hash:
            log.info("verification_failed", reason="hash_mismatch")
            return None

        if not self.check_signature(signed):
            log.info("verification_failed", reason="bad_signature")
            return None

        return IteratedDigest(
            concatenate_file_hashes(signed.files),
            signed.hash_iterations,
            algorithm=signed.hash_type,
            budget=self._max_iterations,
            check_interval=self._check_interval,
        )

    def _matches(self, claimed_hash: str, computed: str) -> bool:
        if computed != claimed_hash:
            logger.info(
                "verification_failed",
                reason="chain_mismatch",
                claimed_hash=claimed_hash,
            )
            return False
        logger.debug("verification_passed", claimed_hash=claimed_hash)
        return True

    def verify_sync(self, claimed_hash: str, record: Any) -> bool:
        """Verify on the calling thread. See ``verify``."""
        try:
            work = self._prepare(claimed_hash, record)
            if work is None:
                return False
            return self._matches(claimed_hash, work.run())
        except IteratedDigestError as e:
            logger.info("verification_failed", reason="digest_aborted", detail=str(e))
            return False
        except Exception as e:
            logger.error(
                "verification_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def verify(self, claimed_hash: str, record: Any) -> bool:
        """Verify a record against a claimed top-level hash.

        ``claimed_hash`` is typically the hash a client asked for (for
        example through a hash-index lookup); it must equal the record's
        own ``hash`` and the recomputed iterated digest.

        Args:
            claimed_hash: Expected SHA-256 hex.
            record: Decoded record JSON or an EntropyRecord model.

        Returns:
            True only if the record is well-formed, signed by the configured
            key, and its iterated digest reproduces ``claimed_hash``.
        """
        try:
            work = self._prepare(claimed_hash, record)
            if work is None:
                return False
            computed = await work.run_async()
            return self._matches(claimed_hash, computed)
        except IteratedDigestError as e:
            logger.info("verification_failed", reason="digest_aborted", detail=str(e))
            return False
        except Exception as e:
            logger.error(
                "verification_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
