"""
AssetModel — per-holding valuation, gain, return/volatility lookup and portfolio scoring.

Constructed for one investor region. The investor's RegionalConfig drives the
currency-risk premium and tax rates; the asset's own region only selects local
return overrides.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from core.schema import Asset, RegionalConfig
from core.utils import DateLike, safe_ratio, years_between

from .assumptions import MarketAssumptions

logger = logging.getLogger(__name__)

# Caps per diversification dimension; they sum to 100.
CLASS_SCORE_STEP, CLASS_SCORE_CAP = 15, 60
REGION_SCORE_STEP, REGION_SCORE_CAP = 10, 25
CURRENCY_SCORE_STEP, CURRENCY_SCORE_CAP = 5, 15


class AssetModel:
    def __init__(
        self,
        regional_config: RegionalConfig,
        assumptions: Optional[MarketAssumptions] = None,
    ):
        self.regional_config = regional_config
        self.assumptions = assumptions or MarketAssumptions()

    # ----- valuation -----

    @staticmethod
    def value(asset: Asset) -> float:
        return asset.quantity * asset.current_price

    def gain(self, asset: Asset) -> Dict[str, float]:
        """Unrealised gain and gain percent; percent is 0 when the cost basis is 0."""
        current = self.value(asset)
        purchase = asset.quantity * asset.purchase_price
        gain = current - purchase
        return {"gain": gain, "gain_percent": safe_ratio(gain, purchase) * 100.0}

    def holding_period_years(self, asset: Asset, as_of: DateLike) -> float:
        if not asset.purchase_date:
            return 0.0
        return max(years_between(asset.purchase_date, as_of), 0.0)

    def annualized_return(self, asset: Asset, as_of: DateLike) -> float:
        """Compound annual growth since purchase. 0 for a zero cost basis or held under a month."""
        purchase = asset.quantity * asset.purchase_price
        years = self.holding_period_years(asset, as_of)
        if purchase <= 0 or years < 1.0 / 12.0:
            return 0.0
        growth = self.value(asset) / purchase
        if growth <= 0:
            return -1.0
        return growth ** (1.0 / years) - 1.0

    # ----- assumptions -----

    def expected_return(self, asset: Asset) -> float:
        if asset.expected_return is not None:
            return float(asset.expected_return)

        if not self.assumptions.is_known(asset.asset_class):
            logger.warning(
                "Unknown asset class %r for %s; using default return %.3f",
                asset.asset_class, asset.asset_id, self.assumptions.default_return,
            )
        expected = self.assumptions.base_return(asset.asset_class, asset.region)
        if asset.currency != self.regional_config.currency:
            expected += self.assumptions.currency_risk_premium
        return expected

    def volatility(self, asset: Asset) -> float:
        if asset.volatility is not None:
            return float(asset.volatility)
        return self.assumptions.base_volatility(asset.asset_class)

    def return_arrays(self, assets: Sequence[Asset], multiplier: float = 1.0):
        """(values, expected_returns, volatilities) as float arrays aligned with `assets`."""
        values = np.array([self.value(a) for a in assets], dtype=float)
        mu = np.array([self.expected_return(a) * multiplier for a in assets], dtype=float)
        sigma = np.array([self.volatility(a) for a in assets], dtype=float)
        return values, mu, sigma

    def project_asset_growth(
        self,
        asset: Asset,
        years: int,
        additional_contributions: float = 0.0,
    ) -> List[int]:
        """Single-holding compound path for years 0..N, rounded to whole currency units."""
        rate = self.expected_return(asset)
        value = self.value(asset)
        path = [int(round(value))]
        for _ in range(years):
            value = value * (1.0 + rate) + additional_contributions
            path.append(int(round(value)))
        return path

    # ----- tax -----

    def tax_on_gain(self, asset: Optional[Asset], gain: float) -> float:
        """
        Tax on a realised gain; 0 for a loss. Pass asset=None for the aggregate
        growth of a whole portfolio, which is taxed at the capital rate.
        """
        if gain <= 0:
            return 0.0
        rates = self.regional_config.tax_rates
        if (
            asset is not None
            and asset.asset_class == "retirement_account"
            and rates.retirement_account is not None
        ):
            return gain * rates.retirement_account
        return gain * rates.capital

    # ----- portfolio scores -----

    def diversification_score(self, assets: Sequence[Asset]) -> int:
        """
        Spread across asset classes, asset regions and currencies, 0..100.

        Each dimension contributes step × distinct count up to its cap
        (classes 60, regions 25, currencies 15).
        """
        if not assets:
            return 0
        n_classes = len({a.asset_class for a in assets})
        n_regions = len({a.region for a in assets})
        n_currencies = len({a.currency for a in assets})

        class_score = min(n_classes * CLASS_SCORE_STEP, CLASS_SCORE_CAP)
        region_score = min(n_regions * REGION_SCORE_STEP, REGION_SCORE_CAP)
        currency_score = min(n_currencies * CURRENCY_SCORE_STEP, CURRENCY_SCORE_CAP)
        return min(class_score + region_score + currency_score, 100)

    def risk_score(self, assets: Sequence[Asset]) -> int:
        """Value-weighted average volatility as a 0..100 integer. 0 when empty or worthless."""
        if not assets:
            return 0
        values = np.array([self.value(a) for a in assets], dtype=float)
        total = float(values.sum())
        if total <= 0:
            return 0
        vols = np.array([self.volatility(a) for a in assets], dtype=float)
        weighted = float((values / total * vols).sum())
        return int(min(max(round(weighted * 100), 0), 100))
