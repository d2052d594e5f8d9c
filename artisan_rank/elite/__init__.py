"""Beta-Binomial elite factor.

Components:
- EliteConfig: Pydantic settings for the prior and credible bound
- ElitePosterior: Posterior summary for explainability
- EliteFactorEstimator: Lower credible bound of the elite rate
"""

from artisan_rank.elite.config import EliteConfig
from artisan_rank.elite.schemas import ElitePosterior
from artisan_rank.elite.service import EliteFactorEstimator

__all__ = [
    "EliteConfig",
    "ElitePosterior",
    "EliteFactorEstimator",
]
