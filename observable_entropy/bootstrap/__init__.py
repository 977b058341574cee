"""Composition root for wiring dependencies.

This package centralizes infrastructure-aware wiring so the API and CLI
depend on ports and services without importing infrastructure directly.
"""
