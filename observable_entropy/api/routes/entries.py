"""Contribution pool routes.

POST /entries accepts ``{"entropy": <sha256 hex>}`` and answers 201 with
the storage key and the randomly drawn expiry. GET /entries lists the
entropy of every live entry, shadow entries included.
"""

from json import JSONDecodeError

from fastapi import APIRouter, Depends, Request, Response
from structlog import get_logger

from observable_entropy.api.dependencies.entropy import (
    get_resolution_service,
    get_service_config,
)
from observable_entropy.api.errors import raise_for_error
from observable_entropy.api.models.entropy import (
    ContributionReceiptResponse,
    EntropyErrorResponse,
)
from observable_entropy.application.services.entropy_resolution_service import (
    EntropyResolutionService,
)
from observable_entropy.config.entropy_config import EntropyServiceConfig
from observable_entropy.domain.errors.entropy import EntropyError

logger = get_logger(__name__)

router = APIRouter(prefix="/entries", tags=["entries"])


@router.post(
    "",
    response_model=ContributionReceiptResponse,
    status_code=201,
    responses={
        400: {"model": EntropyErrorResponse, "description": "Invalid parameters"},
        500: {"model": EntropyErrorResponse, "description": "Failed to store entry"},
    },
    summary="Contribute entropy to the next rounds",
)
async def submit_entry(
    request: Request,
    service: EntropyResolutionService = Depends(get_resolution_service),
) -> ContributionReceiptResponse:
    try:
        body = await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        raise_for_error(
            EntropyError.bad_input("request body must be a JSON object"), request
        )
    if not isinstance(body, dict):
        raise_for_error(
            EntropyError.bad_input("request body must be a JSON object"), request
        )

    result = await service.submit_entry(body)
    if not result.is_ok:
        raise_for_error(result.error, request)
    receipt = result.unwrap()
    return ContributionReceiptResponse(**receipt.to_dict())


@router.get(
    "",
    response_model=list[str],
    responses={
        500: {"model": EntropyErrorResponse, "description": "Store unavailable"},
    },
    summary="List the entropy currently in the pool",
)
async def list_entries(
    request: Request,
    response: Response,
    service: EntropyResolutionService = Depends(get_resolution_service),
    config: EntropyServiceConfig = Depends(get_service_config),
) -> list[str]:
    result = await service.list_entries()
    if not result.is_ok:
        raise_for_error(result.error, request)
    listing = result.unwrap()
    if listing.skipped_count:
        logger.info("entries_listed_with_skips", skipped=listing.skipped_count)
    response.headers["Cache-Control"] = config.cache_control
    return list(listing.entropies)
