"""
Baseline capital-market assumptions per asset class.

Long-run nominal expected returns and annual volatilities used when a holding
does not carry its own. These are planning defaults, not forecasts; callers
override them by building a MarketAssumptions with different tables.

Usage:
  - AssetModel looks up return/volatility by canonical asset class
  - Region overrides apply to products whose rate is set locally (term deposits, PPF)
  - Unknown classes fall back to DEFAULT_RETURN / DEFAULT_VOLATILITY
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional

BASELINE_RETURNS: Dict[str, float] = {
    "equity": 0.08,
    "fund": 0.075,
    "bond": 0.04,
    "real_estate": 0.06,
    "digital_asset": 0.12,
    "cash": 0.025,
    "retirement_account": 0.075,
    "term_deposit": 0.055,
    "tax_advantaged_savings": 0.075,
}

BASELINE_VOLATILITIES: Dict[str, float] = {
    "equity": 0.20,
    "fund": 0.15,
    "bond": 0.05,
    "real_estate": 0.12,
    "digital_asset": 0.60,
    "cash": 0.01,
    "retirement_account": 0.15,
    "term_deposit": 0.02,
    "tax_advantaged_savings": 0.03,
}

# Keyed by the asset's own region.
REGIONAL_RETURN_OVERRIDES: Dict[str, Dict[str, float]] = {
    "IN": {
        "term_deposit": 0.065,            # Indian bank FD rates
        "tax_advantaged_savings": 0.071,  # current PPF rate
    },
}

DEFAULT_RETURN = 0.06
DEFAULT_VOLATILITY = 0.15
CURRENCY_RISK_PREMIUM = 0.005


@dataclass(frozen=True)
class MarketAssumptions:
    """Complete set of per-class return/volatility assumptions fed to the AssetModel."""
    returns: Mapping[str, float] = field(default_factory=lambda: dict(BASELINE_RETURNS))
    volatilities: Mapping[str, float] = field(default_factory=lambda: dict(BASELINE_VOLATILITIES))
    regional_overrides: Mapping[str, Mapping[str, float]] = field(
        default_factory=lambda: {k: dict(v) for k, v in REGIONAL_RETURN_OVERRIDES.items()}
    )
    default_return: float = DEFAULT_RETURN
    default_volatility: float = DEFAULT_VOLATILITY
    currency_risk_premium: float = CURRENCY_RISK_PREMIUM

    def base_return(self, asset_class: str, region: Optional[str] = None) -> float:
        override = self.regional_overrides.get(region or "", {})
        if asset_class in override:
            return float(override[asset_class])
        return float(self.returns.get(asset_class, self.default_return))

    def base_volatility(self, asset_class: str) -> float:
        return float(self.volatilities.get(asset_class, self.default_volatility))

    def is_known(self, asset_class: str) -> bool:
        return asset_class in self.returns and asset_class in self.volatilities

    def with_overrides(
        self,
        *,
        returns: Optional[Mapping[str, float]] = None,
        volatilities: Optional[Mapping[str, float]] = None,
        **kwargs,
    ) -> "MarketAssumptions":
        """New assumptions with some class figures (or scalar defaults) replaced."""
        merged_returns = {**self.returns, **(returns or {})}
        merged_vols = {**self.volatilities, **(volatilities or {})}
        return replace(self, returns=merged_returns, volatilities=merged_vols, **kwargs)


def get_market_assumptions() -> MarketAssumptions:
    """Return a fresh copy of the baseline assumptions."""
    return MarketAssumptions()
