"""Content origin adapter for the public entropy repository.

Records are read over HTTPS from the raw content host of the repository
that publishes them:

    {base_url}/{commit_id}/entropy.json                          record by commit
    {base_url}/{branch}/index/by/entropy_hash/{hash}.json        hash index
    {base_url}/{branch}/entropy.json                             head record

Responses go through an ``OriginResponseCache``. Commit-addressed content
is immutable and cached for a long time; the head record and 404s only
briefly; 5xx never.
"""

from __future__ import annotations

from typing import Any

import httpx

from observable_entropy.application.ports.content_origin import ContentOriginPort
from observable_entropy.config.entropy_config import DEFAULT_ORIGIN_BASE_URL
from observable_entropy.domain.errors.entropy import EntropyError
from observable_entropy.domain.result import Result
from observable_entropy.infrastructure.cache.origin_response_cache import (
    CachedResponse,
    OriginResponseCache,
)
from observable_entropy.infrastructure.observability.logging import (
    get_logger_for_component,
)


class GitHubContentOrigin(ContentOriginPort):
    """Reads published entropy records from raw.githubusercontent.com.

    Example:
        async with GitHubContentOrigin() as origin:
            result = await origin.get_latest()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_ORIGIN_BASE_URL,
        branch: str = "main",
        timeout: float = 10.0,
        cache: OriginResponseCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the origin.

        Args:
            base_url: Raw content base URL of the repository.
            branch: Branch holding the head record and hash index.
            timeout: Request timeout in seconds.
            cache: Response cache. Defaults to a fresh cache with the
                standard TTLs.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.branch = branch
        self._cache = cache if cache is not None else OriginResponseCache()
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Cache-Control": "no-cache"},
            transport=transport,
        )
        self._log = get_logger_for_component("github_content_origin")

    async def __aenter__(self) -> GitHubContentOrigin:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def get_by_commit_id(self, commit_id: str) -> Result[Any]:
        return await self._fetch(f"/{commit_id}/entropy.json")

    async def get_hash_index(self, entropy_hash: str) -> Result[Any]:
        return await self._fetch(
            f"/{self.branch}/index/by/entropy_hash/{entropy_hash}.json"
        )

    async def get_latest(self) -> Result[Any]:
        return await self._fetch(f"/{self.branch}/entropy.json", moving=True)

    async def _fetch(self, path: str, *, moving: bool = False) -> Result[Any]:
        """Fetch a JSON document, consulting the cache first.

        Args:
            path: Path relative to the base URL.
            moving: True for content that changes between rounds.

        Returns:
            Result with the decoded JSON, NOT_FOUND or UPSTREAM_FAILURE.
        """
        cached = self._cache.get(path)
        if cached is None:
            fetched = await self._request(path)
            if isinstance(fetched, EntropyError):
                return Result.fail(fetched)
            self._cache.set(path, fetched, moving=moving)
            cached = fetched
        return self._to_result(path, cached)

    async def _request(self, path: str) -> CachedResponse | EntropyError:
        log = self._log.bind(path=path)
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as e:
            log.warning("origin_request_failed", error=str(e), error_type=type(e).__name__)
            return EntropyError.upstream_failure(f"origin request failed : {e}")

        if not response.is_success:
            log.info("origin_response", status_code=response.status_code)
            return CachedResponse(status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError:
            log.warning("origin_body_unparseable", status_code=response.status_code)
            return EntropyError.upstream_failure("origin returned a non-JSON body")

        log.debug("origin_response", status_code=response.status_code)
        return CachedResponse(status_code=response.status_code, payload=payload)

    def _to_result(self, path: str, response: CachedResponse) -> Result[Any]:
        if 200 <= response.status_code < 300:
            return Result.ok(response.payload)
        if response.status_code == 404:
            return Result.fail(EntropyError.not_found(f"origin has no {path}"))
        return Result.fail(
            EntropyError.upstream_failure(
                f"origin returned status {response.status_code} for {path}"
            )
        )
