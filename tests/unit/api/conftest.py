"""Fixtures wiring the API to in-memory adapters."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from observable_entropy.api.dependencies.entropy import (
    get_resolution_service,
    get_service_config,
)
from observable_entropy.api.main import create_app
from observable_entropy.application.services.contribution_pool_service import (
    ContributionPoolService,
)
from observable_entropy.application.services.entropy_resolution_service import (
    EntropyResolutionService,
)
from observable_entropy.application.services.entropy_verifier import EntropyVerifier
from observable_entropy.config.entropy_config import TEST_ENTROPY_CONFIG
from observable_entropy.infrastructure.stubs.content_origin_stub import (
    ContentOriginStub,
)
from observable_entropy.infrastructure.stubs.key_value_store_stub import (
    InMemoryKeyValueStore,
)


@pytest.fixture
def origin() -> ContentOriginStub:
    return ContentOriginStub()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def app(
    origin: ContentOriginStub,
    store: InMemoryKeyValueStore,
    verifier: EntropyVerifier,
) -> FastAPI:
    service = EntropyResolutionService(
        origin, store, verifier, ContributionPoolService(store)
    )
    application = create_app()
    application.dependency_overrides[get_resolution_service] = lambda: service
    application.dependency_overrides[get_service_config] = lambda: TEST_ENTROPY_CONFIG
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    # Not entered as a context manager: the lifespan would reconfigure logging
    return TestClient(app)
