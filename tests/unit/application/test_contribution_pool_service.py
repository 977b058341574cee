"""Unit tests for the contribution pool service."""

import json
import random

import pytest

from observable_entropy.application.services.contribution_pool_service import (
    ContributionPoolService,
    mint_contribution_key,
    shadow_digest,
)
from observable_entropy.domain.errors.entropy import ErrorKind
from observable_entropy.infrastructure.stubs.key_value_store_stub import (
    InMemoryKeyValueStore,
    StoreFailureMode,
)

NOW = 1_700_000_000
ENTROPY = "bdd1d11b1ab7569c40e07a61b5b6071d80efcf5db176d8ab172e15d5566cb342"


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(clock=lambda: NOW)


@pytest.fixture
def service(store: InMemoryKeyValueStore) -> ContributionPoolService:
    keys = iter(f"key-{i}" for i in range(1000))
    return ContributionPoolService(
        store,
        clock=lambda: NOW,
        rng=random.Random(7),
        key_factory=lambda: next(keys),
    )


class TestSubmit:
    """Tests for submitting contributions."""

    async def test_submit_returns_receipt(self, service: ContributionPoolService) -> None:
        result = await service.submit({"entropy": ENTROPY})

        assert result.is_ok
        receipt = result.unwrap()
        assert receipt.key == "entry::key-0"
        assert receipt.entropy == ENTROPY
        assert NOW + 600 <= receipt.expiration < NOW + 3600

    async def test_submit_writes_entry_and_shadow(
        self, service: ContributionPoolService, store: InMemoryKeyValueStore
    ) -> None:
        receipt = (await service.submit({"entropy": ENTROPY})).unwrap()

        entry = await store.read(receipt.key)
        shadow = await store.read(f"{receipt.key}::hashed")

        assert json.loads(entry.value) == {"entropy": ENTROPY}
        assert json.loads(shadow.value) == {
            "entropy": shadow_digest(receipt.key, receipt.expiration, ENTROPY),
            "for": receipt.key,
        }
        assert entry.metadata["expiration"] == receipt.expiration
        assert shadow.metadata["expiration"] == receipt.expiration

    async def test_shadow_is_written_before_entry(
        self, service: ContributionPoolService, store: InMemoryKeyValueStore
    ) -> None:
        receipt = (await service.submit({"entropy": ENTROPY})).unwrap()
        assert store.write_log == [f"{receipt.key}::hashed", receipt.key]

    async def test_shadow_digest_is_reproducible(self) -> None:
        import hashlib

        expected = hashlib.sha256(f"entry::k::{NOW}::{ENTROPY}".encode()).hexdigest()
        assert shadow_digest("entry::k", NOW, ENTROPY) == expected

    async def test_invalid_body_writes_nothing(
        self, service: ContributionPoolService, store: InMemoryKeyValueStore
    ) -> None:
        result = await service.submit({"entropy": "xyz"})

        assert result.kind == ErrorKind.BAD_INPUT
        assert result.error.message == "invalid attribute value for : entropy"
        assert store.write_log == []

    async def test_unknown_attribute_rejected(self, service: ContributionPoolService) -> None:
        result = await service.submit({"entropy": ENTROPY, "for": "me", "extra": 1})
        assert result.error.message == "unknown attribute : extra"

    async def test_missing_entropy_rejected(self, service: ContributionPoolService) -> None:
        result = await service.submit({})
        assert result.error.message == "missing required attribute : entropy"

    async def test_shadow_write_failure_skips_entry(
        self, service: ContributionPoolService, store: InMemoryKeyValueStore
    ) -> None:
        store.set_failure_mode(StoreFailureMode(reject_suffixes=("::hashed",)))

        result = await service.submit({"entropy": ENTROPY})

        assert result.kind == ErrorKind.STORAGE_FAILURE
        assert result.error.message == "Failed to write hashed entry."
        assert store.write_log == []
        assert await store.list_keys("entry::") == []

    async def test_entry_write_failure_leaves_orphan_shadow(
        self, service: ContributionPoolService, store: InMemoryKeyValueStore
    ) -> None:
        store.set_failure_mode(StoreFailureMode(reject_suffixes=("key-0",)))

        result = await service.submit({"entropy": ENTROPY})

        assert result.error.message == "Failed to write entry."
        assert store.write_log == ["entry::key-0::hashed"]

    async def test_each_submission_mints_a_new_key(
        self, service: ContributionPoolService
    ) -> None:
        first = (await service.submit({"entropy": ENTROPY})).unwrap()
        second = (await service.submit({"entropy": ENTROPY})).unwrap()
        assert first.key != second.key


class TestExpiry:
    """Tests for the expiry draw."""

    def test_expiration_window(self, store: InMemoryKeyValueStore) -> None:
        service = ContributionPoolService(store)
        draws = {service.draw_expiration(NOW) for _ in range(500)}

        assert all(NOW + 600 <= d <= NOW + 59 * 60 for d in draws)
        assert all((d - NOW) % 60 == 0 for d in draws)
        assert len(draws) > 10

    def test_inverted_bounds_rejected(self, store: InMemoryKeyValueStore) -> None:
        with pytest.raises(ValueError):
            ContributionPoolService(store, min_expiry_minutes=30, max_expiry_minutes=30)

    def test_non_positive_minimum_rejected(self, store: InMemoryKeyValueStore) -> None:
        with pytest.raises(ValueError):
            ContributionPoolService(store, min_expiry_minutes=0)


class TestListCurrent:
    """Tests for listing the pool."""

    async def test_lists_entries_and_shadows(self, service: ContributionPoolService) -> None:
        receipt = (await service.submit({"entropy": ENTROPY})).unwrap()

        listing = (await service.list_current()).unwrap()

        shadow = shadow_digest(receipt.key, receipt.expiration, ENTROPY)
        assert sorted(listing.entropies) == sorted([ENTROPY, shadow])
        assert listing.skipped_count == 0

    async def test_empty_pool(self, service: ContributionPoolService) -> None:
        listing = (await service.list_current()).unwrap()
        assert listing.entropies == ()

    async def test_ignores_keys_outside_prefix(
        self, service: ContributionPoolService, store: InMemoryKeyValueStore
    ) -> None:
        store.put("latest", json.dumps({"entropy": ENTROPY}))
        assert (await service.list_current()).unwrap().entropies == ()

    async def test_skips_unparseable_and_invalid_entries(
        self, service: ContributionPoolService, store: InMemoryKeyValueStore
    ) -> None:
        store.put("entry::good", json.dumps({"entropy": ENTROPY}))
        store.put("entry::garbled", "{not json")
        store.put("entry::empty", "")
        store.put("entry::invalid", json.dumps({"entropy": "short"}))

        listing = (await service.list_current()).unwrap()

        assert listing.entropies == (ENTROPY,)
        assert set(listing.skipped_keys) == {
            "entry::garbled",
            "entry::empty",
            "entry::invalid",
        }

    async def test_skips_unreadable_entry(
        self, service: ContributionPoolService, store: InMemoryKeyValueStore
    ) -> None:
        store.put("entry::a", json.dumps({"entropy": ENTROPY}))
        store.put("entry::b", json.dumps({"entropy": ENTROPY}))
        store.set_failure_mode(StoreFailureMode(unreadable_keys=frozenset({"entry::b"})))

        listing = (await service.list_current()).unwrap()

        assert listing.entropies == (ENTROPY,)
        assert listing.skipped_keys == ("entry::b",)

    async def test_expired_entries_are_not_listed(self) -> None:
        now = [NOW]
        store = InMemoryKeyValueStore(clock=lambda: now[0])
        service = ContributionPoolService(store, clock=lambda: now[0])
        await service.submit({"entropy": ENTROPY})

        now[0] = NOW + 3600

        assert (await service.list_current()).unwrap().entropies == ()

    async def test_unreachable_store_is_storage_failure(
        self, service: ContributionPoolService, store: InMemoryKeyValueStore
    ) -> None:
        store.set_failure_mode(StoreFailureMode(list_fails=True))

        result = await service.list_current()

        assert result.kind == ErrorKind.STORAGE_FAILURE


class TestMintContributionKey:
    """Tests for key minting."""

    def test_keys_are_unique_and_sortable(self) -> None:
        keys = [mint_contribution_key() for _ in range(50)]
        assert len(set(keys)) == 50
        assert keys == sorted(keys)
