"""In-memory implementations of the application ports."""

from observable_entropy.infrastructure.stubs.content_origin_stub import (
    ContentOriginStub,
)
from observable_entropy.infrastructure.stubs.key_value_store_stub import (
    InMemoryKeyValueStore,
    StoreFailureMode,
)

__all__ = ["ContentOriginStub", "InMemoryKeyValueStore", "StoreFailureMode"]
