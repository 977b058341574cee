"""Infrastructure: adapters, caches, stubs and observability."""
