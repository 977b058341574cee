"""Unit tests for the iterated digest unit of work."""

import asyncio
import hashlib

import pytest

from observable_entropy.application.services.iterated_digest import (
    IteratedDigest,
    iterated_digest,
)
from observable_entropy.domain.errors.entropy import (
    DigestCancelledError,
    IterationBudgetExceededError,
)
from tests.helpers.entropy_records import slow_hash


class TestIteratedDigest:
    """Tests for synchronous computation."""

    def test_zero_iterations_returns_seed(self) -> None:
        assert iterated_digest("seed", 0) == "seed"

    def test_one_iteration_is_plain_sha256(self) -> None:
        assert iterated_digest("seed", 1) == hashlib.sha256(b"seed").hexdigest()

    def test_each_round_hashes_previous_hex(self) -> None:
        assert iterated_digest("abc", 25) == slow_hash("abc", 25)

    def test_deterministic(self) -> None:
        assert IteratedDigest("x", 10).run() == IteratedDigest("x", 10).run()

    def test_negative_iterations_rejected(self) -> None:
        with pytest.raises(ValueError):
            IteratedDigest("x", -1)

    def test_unknown_algorithm_rejected(self) -> None:
        with pytest.raises(ValueError, match="unsupported digest algorithm"):
            IteratedDigest("x", 1, algorithm="not-a-hash")

    def test_non_positive_check_interval_rejected(self) -> None:
        with pytest.raises(ValueError):
            IteratedDigest("x", 1, check_interval=0)


class TestIteratedDigestLimits:
    """Tests for the iteration budget and cancellation."""

    def test_budget_exceeded(self) -> None:
        work = IteratedDigest("x", 11, budget=10)

        with pytest.raises(IterationBudgetExceededError) as exc_info:
            work.run()

        assert exc_info.value.requested == 11
        assert exc_info.value.budget == 10

    def test_budget_equal_to_iterations_is_allowed(self) -> None:
        assert IteratedDigest("x", 10, budget=10).run() == slow_hash("x", 10)

    def test_cancel_before_run_stops_at_first_checkpoint(self) -> None:
        work = IteratedDigest("x", 100, check_interval=10)
        work.cancel()

        with pytest.raises(DigestCancelledError) as exc_info:
            work.run()

        assert work.cancelled
        assert exc_info.value.completed == 0

    def test_cancel_without_checkpoint_reached_still_completes_zero_rounds(self) -> None:
        work = IteratedDigest("x", 0)
        work.cancel()
        assert work.run() == "x"

    async def test_run_async_matches_sync(self) -> None:
        assert await IteratedDigest("x", 50).run_async() == slow_hash("x", 50)

    async def test_cancelling_awaiting_task_cancels_worker(self) -> None:
        work = IteratedDigest("x", 50_000_000, check_interval=64)
        task = asyncio.create_task(work.run_async())
        await asyncio.sleep(0.05)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert work.cancelled
