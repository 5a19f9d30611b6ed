"""
Core package — record definitions, configuration, errors and shared utilities.
No business logic lives here.
"""

from .schema import (
    ASSET_CLASSES,
    Asset,
    ContributionLimits,
    MonteCarloYearResult,
    ProjectionYear,
    RegionalConfig,
    ScenarioBundle,
    TaxRates,
    WhatIfChanges,
    WhatIfComparison,
)
from .config import ProjectionConfig
from .errors import ConfigNotFound, InvalidInput, ProjectionCancelled, ProjectionError
from .utils import safe_ratio, years_between

__all__ = [
    "ASSET_CLASSES",
    "Asset",
    "ContributionLimits",
    "MonteCarloYearResult",
    "ProjectionYear",
    "RegionalConfig",
    "ScenarioBundle",
    "TaxRates",
    "WhatIfChanges",
    "WhatIfComparison",
    "ProjectionConfig",
    "ConfigNotFound",
    "InvalidInput",
    "ProjectionCancelled",
    "ProjectionError",
    "safe_ratio",
    "years_between",
]
