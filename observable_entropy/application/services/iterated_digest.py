"""Iterated digest ("slow hash") computation.

Entropy records bind their source files with a digest applied to its own
hex output hundreds of thousands of times. Recomputing it is deliberately
expensive, so the computation is modelled as a unit of work that:

- refuses to start when the requested iterations exceed a caller budget,
- runs off the event loop (``run_async`` uses ``asyncio.to_thread``),
- can be cancelled, stopping at the next checkpoint.

Each round hashes the UTF-8 bytes of the previous round's lower-case hex
digest. Zero iterations returns the seed unchanged.
"""

from __future__ import annotations

import asyncio
import hashlib
import threading
from collections.abc import Callable
from typing import Any

from observable_entropy.domain.errors.entropy import (
    DigestCancelledError,
    IterationBudgetExceededError,
)

# Iterations between cancellation checks
DEFAULT_CHECK_INTERVAL = 4096


def _digest_factory(algorithm: str) -> Callable[[bytes], Any]:
    if algorithm not in hashlib.algorithms_available:
        raise ValueError(f"unsupported digest algorithm: {algorithm}")
    constructor = getattr(hashlib, algorithm, None)
    if constructor is not None:
        return constructor
    return lambda data: hashlib.new(algorithm, data)


class IteratedDigest:
    """A cancellable, budgeted iterated digest computation.

    Example:
        work = IteratedDigest(seed, iterations=500_000, budget=1_000_000)
        digest = await work.run_async()

        # From another task or thread:
        work.cancel()
    """

    def __init__(
        self,
        seed: str,
        iterations: int,
        algorithm: str = "sha256",
        budget: int | None = None,
        check_interval: int = DEFAULT_CHECK_INTERVAL,
    ) -> None:
        """Initialize the unit of work.

        Args:
            seed: Initial input string.
            iterations: Number of digest rounds (>= 0).
            algorithm: hashlib algorithm name, e.g. ``sha256``.
            budget: Maximum iterations the caller is willing to pay for.
                None means unbounded.
            check_interval: Rounds between cancellation checks.

        Raises:
            ValueError: If iterations is negative, check_interval is not
                positive, or the algorithm is unknown to hashlib.
        """
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")
        if check_interval < 1:
            raise ValueError(
                f"check_interval must be positive, got {check_interval}"
            )
        self._seed = seed
        self._iterations = iterations
        self._algorithm = algorithm
        self._digest = _digest_factory(algorithm)
        self._budget = budget
        self._check_interval = check_interval
        self._cancelled = threading.Event()

    @property
    def iterations(self) -> int:
        return self._iterations

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Request cancellation; the worker stops at its next checkpoint."""
        self._cancelled.set()

    def run(self) -> str:
        """Compute the digest on the calling thread.

        Returns:
            Lower-case hex digest after the final round.

        Raises:
            IterationBudgetExceededError: iterations exceed the budget.
            DigestCancelledError: cancel() was called before completion.
        """
        if self._budget is not None and self._iterations > self._budget:
            raise IterationBudgetExceededError(self._iterations, self._budget)

        digest = self._digest
        interval = self._check_interval
        current = self._seed
        for round_number in range(self._iterations):
            if round_number % interval == 0 and self._cancelled.is_set():
                raise DigestCancelledError(round_number)
            current = digest(current.encode("utf-8")).hexdigest()
        return current

    async def run_async(self) -> str:
        """Compute the digest on a worker thread.

        Cancelling the awaiting task also cancels the worker, so an
        abandoned request stops burning CPU.
        """
        try:
            return await asyncio.to_thread(self.run)
        except asyncio.CancelledError:
            self.cancel()
            raise


def iterated_digest(seed: str, iterations: int, algorithm: str = "sha256") -> str:
    """Compute an iterated digest synchronously with no budget."""
    return IteratedDigest(seed, iterations, algorithm=algorithm).run()
