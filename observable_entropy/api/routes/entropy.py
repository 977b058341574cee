"""Entropy retrieval and verification routes.

Every successful GET carries ``Cache-Control: public, max-age=N,
s-max-age=N`` so edge caches absorb repeated lookups for a few seconds.
"""

from collections.abc import Awaitable
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse

from observable_entropy.api.dependencies.entropy import (
    get_resolution_service,
    get_service_config,
)
from observable_entropy.api.errors import raise_for_error
from observable_entropy.api.models.entropy import (
    EntropyErrorResponse,
    PublicKeyResponse,
    VerifiedEntropyResponse,
)
from observable_entropy.application.services.entropy_resolution_service import (
    EntropyResolutionService,
    VerifiedEntropy,
)
from observable_entropy.config.entropy_config import EntropyServiceConfig
from observable_entropy.domain.models.selector import (
    ByCommitId,
    ByHash,
    EntropySelector,
    Latest,
)
from observable_entropy.domain.result import Result

router = APIRouter(tags=["entropy"])

_LOOKUP_ERRORS: dict[int | str, dict[str, Any]] = {
    400: {"model": EntropyErrorResponse, "description": "Invalid parameters"},
    404: {"model": EntropyErrorResponse, "description": "No entropy found"},
}


async def _resolve(
    selector: EntropySelector,
    request: Request,
    response: Response,
    service: EntropyResolutionService,
    config: EntropyServiceConfig,
) -> dict[str, Any]:
    result = await service.resolve(selector)
    if not result.is_ok:
        raise_for_error(result.error, request)
    response.headers["Cache-Control"] = config.cache_control
    return result.unwrap().to_wire()


async def _verify(
    verification: Awaitable[Result[VerifiedEntropy]],
    request: Request,
    response: Response,
    config: EntropyServiceConfig,
) -> VerifiedEntropyResponse:
    result = await verification
    if not result.is_ok:
        raise_for_error(result.error, request)
    verified = result.unwrap()
    response.headers["Cache-Control"] = config.cache_control
    return VerifiedEntropyResponse(
        verified=verified.verified, entropy=verified.entropy.to_wire()
    )


@router.get("/", status_code=302, include_in_schema=False)
async def home(
    config: EntropyServiceConfig = Depends(get_service_config),
) -> RedirectResponse:
    """Redirect to the project home page."""
    return RedirectResponse(
        config.home_redirect_url,
        status_code=302,
        headers={"Cache-Control": config.cache_control},
    )


@router.get(
    "/pubkey",
    response_model=PublicKeyResponse,
    summary="Get the publisher's Ed25519 public key",
)
async def get_public_key(
    response: Response,
    service: EntropyResolutionService = Depends(get_resolution_service),
    config: EntropyServiceConfig = Depends(get_service_config),
) -> PublicKeyResponse:
    response.headers["Cache-Control"] = config.cache_control
    return PublicKeyResponse(key=service.public_key_hex)


@router.get(
    "/latest",
    responses=_LOOKUP_ERRORS,
    summary="Get the most recent entropy record",
)
async def get_latest(
    request: Request,
    response: Response,
    service: EntropyResolutionService = Depends(get_resolution_service),
    config: EntropyServiceConfig = Depends(get_service_config),
) -> dict[str, Any]:
    """Resolve the head record, preferring the cached copy in the store."""
    return await _resolve(Latest(), request, response, service, config)


@router.get(
    "/commit/{commit_id}",
    responses=_LOOKUP_ERRORS,
    summary="Get the entropy record published in a commit",
)
async def get_by_commit(
    commit_id: str,
    request: Request,
    response: Response,
    service: EntropyResolutionService = Depends(get_resolution_service),
    config: EntropyServiceConfig = Depends(get_service_config),
) -> dict[str, Any]:
    return await _resolve(ByCommitId(commit_id), request, response, service, config)


@router.get(
    "/hash/{entropy_hash}",
    responses=_LOOKUP_ERRORS,
    summary="Get the entropy record with a given hash",
)
async def get_by_hash(
    entropy_hash: str,
    request: Request,
    response: Response,
    service: EntropyResolutionService = Depends(get_resolution_service),
    config: EntropyServiceConfig = Depends(get_service_config),
) -> dict[str, Any]:
    return await _resolve(ByHash(entropy_hash), request, response, service, config)


@router.get(
    "/verify/commit/{commit_id}",
    response_model=VerifiedEntropyResponse,
    responses={
        **_LOOKUP_ERRORS,
        406: {"model": EntropyErrorResponse, "description": "Verification failed"},
    },
    summary="Get and verify the entropy record published in a commit",
)
async def verify_by_commit(
    commit_id: str,
    request: Request,
    response: Response,
    service: EntropyResolutionService = Depends(get_resolution_service),
    config: EntropyServiceConfig = Depends(get_service_config),
) -> VerifiedEntropyResponse:
    """Verify a record against its own claimed hash."""
    return await _verify(
        service.verify_by_commit(commit_id), request, response, config
    )


@router.get(
    "/verify/hash/{entropy_hash}",
    response_model=VerifiedEntropyResponse,
    responses={
        **_LOOKUP_ERRORS,
        406: {"model": EntropyErrorResponse, "description": "Verification failed"},
    },
    summary="Get and verify the entropy record with a given hash",
)
async def verify_by_hash(
    entropy_hash: str,
    request: Request,
    response: Response,
    service: EntropyResolutionService = Depends(get_resolution_service),
    config: EntropyServiceConfig = Depends(get_service_config),
) -> VerifiedEntropyResponse:
    """Verify a record against the requested hash."""
    return await _verify(
        service.verify_by_hash(entropy_hash), request, response, config
    )
