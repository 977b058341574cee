"""Domain models for Observable Entropy."""

from observable_entropy.domain.models.contribution import (
    ContributionReceipt,
    PoolListing,
)
from observable_entropy.domain.models.selector import (
    ByCommitId,
    ByHash,
    EntropySelector,
    Latest,
)

__all__: list[str] = [
    "ByCommitId",
    "ByHash",
    "ContributionReceipt",
    "EntropySelector",
    "Latest",
    "PoolListing",
]
