"""Ports (abstract interfaces) consumed by the application services."""

from observable_entropy.application.ports.content_origin import ContentOriginPort
from observable_entropy.application.ports.key_value_store import (
    KeyValueItem,
    KeyValueStoreError,
    KeyValueStorePort,
)

__all__: list[str] = [
    "ContentOriginPort",
    "KeyValueItem",
    "KeyValueStoreError",
    "KeyValueStorePort",
]
