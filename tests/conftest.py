"""
Pytest configuration and shared fixtures for Observable Entropy tests.

Testing Standards:
- Async tests run in pytest-asyncio auto mode (configured in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/<layer>/
- Integration tests go in tests/integration/ and are marked ``integration``
"""

from collections.abc import Iterator
from typing import Any

import pytest
import structlog
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from observable_entropy.application.services.entropy_verifier import EntropyVerifier
from observable_entropy.bootstrap.entropy import reset_entropy_dependencies
from tests.helpers.entropy_records import build_record, public_key_hex_of


@pytest.fixture(autouse=True)
def _isolate_global_state() -> Iterator[None]:
    """Reset structlog configuration and bootstrap singletons after each test."""
    yield
    structlog.reset_defaults()
    reset_entropy_dependencies()


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from observable_entropy import __version__

    return __version__


@pytest.fixture
def signing_key() -> Ed25519PrivateKey:
    """Fresh Ed25519 key standing in for the publisher's key."""
    return Ed25519PrivateKey.generate()


@pytest.fixture
def public_key_hex(signing_key: Ed25519PrivateKey) -> str:
    """Hex public key matching ``signing_key``."""
    return public_key_hex_of(signing_key)


@pytest.fixture
def signed_record(signing_key: Ed25519PrivateKey) -> dict[str, Any]:
    """A valid, signed record with a small iteration count."""
    return build_record(signing_key)


@pytest.fixture
def verifier(public_key_hex: str) -> EntropyVerifier:
    """Verifier bound to the test publisher key."""
    return EntropyVerifier(public_key_hex, max_iterations=10_000, check_interval=8)
