"""Application services for Observable Entropy."""

from observable_entropy.application.services.contribution_pool_service import (
    ContributionPoolService,
    mint_contribution_key,
    shadow_digest,
)
from observable_entropy.application.services.entropy_resolution_service import (
    EntropyResolutionService,
    VerifiedEntropy,
)
from observable_entropy.application.services.entropy_verifier import (
    EntropyVerifier,
    concatenate_file_hashes,
)
from observable_entropy.application.services.iterated_digest import (
    IteratedDigest,
    iterated_digest,
)

__all__: list[str] = [
    "ContributionPoolService",
    "EntropyResolutionService",
    "EntropyVerifier",
    "IteratedDigest",
    "VerifiedEntropy",
    "concatenate_file_hashes",
    "iterated_digest",
    "mint_contribution_key",
    "shadow_digest",
]
