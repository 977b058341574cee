"""Application layer: validation, ports and services."""
