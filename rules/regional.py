"""
Regional rule tables for the supported investor jurisdictions.

Each region carries:
  - a simplified progressive income-tax rate list (walked in fixed-width slices)
  - a flat capital-gains rate and, where one exists, a retirement-account rate
  - inflation and risk-free-rate assumptions
  - concessional / non-concessional contribution limits

These are planning defaults, not a tax engine. Lookups for a region that is
not in the table fail with ConfigNotFound; there is no fallback region.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

import pandas as pd

from core.errors import ConfigNotFound, InvalidInput
from core.schema import (
    GLOBAL_REGION,
    NO_LIMIT,
    Asset,
    ContributionLimits,
    RegionalConfig,
    TaxRates,
)
from core.utils import is_finite_number

# Every income bracket rate applies to at most this much taxable income (local currency)
# before the next rate takes over. The last rate applies to whatever is left.
TAX_BRACKET_WIDTH: float = 50_000.0

TAX_KINDS: Tuple[str, ...] = ("income", "capital", "retirement_account")

REGIONAL_CONFIGS: Dict[str, RegionalConfig] = {
    "AU": RegionalConfig(
        region="AU",
        currency="AUD",
        contribution_cap=27_500.0,
        tax_rates=TaxRates(
            income=(0.0, 0.19, 0.325, 0.37, 0.45),
            capital=0.15,
            retirement_account=0.15,
        ),
        inflation_rate=0.025,
        risk_free_rate=0.035,
    ),
    "IN": RegionalConfig(
        region="IN",
        currency="INR",
        tax_rates=TaxRates(
            income=(0.0, 0.05, 0.20, 0.30),
            capital=0.20,
        ),
        inflation_rate=0.04,
        risk_free_rate=0.065,
    ),
    "US": RegionalConfig(
        region="US",
        currency="USD",
        tax_rates=TaxRates(
            income=(0.0, 0.10, 0.12, 0.22, 0.24, 0.32, 0.35, 0.37),
            capital=0.15,
        ),
        inflation_rate=0.023,
        risk_free_rate=0.045,
    ),
}

CONTRIBUTION_LIMITS: Dict[str, ContributionLimits] = {
    # AU concessional limit is the super contribution cap from the regional config
    "AU": ContributionLimits(concessional=27_500.0, non_concessional=110_000.0),
    # Section 80C deduction limit; no cap on voluntary contributions
    "IN": ContributionLimits(concessional=150_000.0, non_concessional=NO_LIMIT),
    # 401(k) elective deferral / IRA limit
    "US": ContributionLimits(concessional=22_500.0, non_concessional=6_000.0),
}

# Foreign-asset regions an investor may hold in addition to their own region and GLOBAL.
CROSS_BORDER_ACCESS: Dict[str, Tuple[str, ...]] = {
    "AU": ("US",),
    "IN": ("US",),
    "US": (),
}


class RegionalRuleTable:
    """
    Pure lookups over the regional tables.

    Usage:
        rules = RegionalRuleTable()
        cfg = rules.get_config("AU")
        tax = rules.calculate_tax(80_000, "AU", "income")
    """

    def __init__(
        self,
        configs: Optional[Mapping[str, RegionalConfig]] = None,
        limits: Optional[Mapping[str, ContributionLimits]] = None,
        *,
        bracket_width: float = TAX_BRACKET_WIDTH,
    ):
        self._configs = dict(REGIONAL_CONFIGS if configs is None else configs)
        self._limits = dict(CONTRIBUTION_LIMITS if limits is None else limits)
        self.bracket_width = float(bracket_width)

    def supported_regions(self) -> Tuple[str, ...]:
        return tuple(sorted(self._configs))

    def get_config(self, region: str) -> RegionalConfig:
        try:
            return self._configs[region]
        except (KeyError, TypeError):
            raise ConfigNotFound(region) from None

    def calculate_tax(self, amount: float, region: str, kind: str = "income") -> float:
        """
        Tax owed on `amount` in `region`.

        capital / retirement_account: a flat rate (retirement_account falls back to
        the capital rate when the region has no retirement-account rate).
        income: walk the bracket rates, each consuming up to `bracket_width`;
        the last rate takes whatever income is left rather than stopping at
        one more slice, so very high incomes are not left partly untaxed.
        Never negative.
        """
        if kind not in TAX_KINDS:
            raise InvalidInput(f"Unknown tax kind {kind!r}. Available: {list(TAX_KINDS)}")

        cfg = self.get_config(region)
        if not is_finite_number(amount):
            raise InvalidInput(f"amount must be a number, got {amount!r}")
        if amount <= 0:
            return 0.0

        rates = cfg.tax_rates
        if kind == "capital":
            return amount * rates.capital
        if kind == "retirement_account":
            if rates.retirement_account is not None:
                return amount * rates.retirement_account
            return amount * rates.capital

        tax = 0.0
        remaining = float(amount)
        brackets = rates.income
        for i, rate in enumerate(brackets):
            if remaining <= 0:
                break
            last = i == len(brackets) - 1
            taxable = remaining if last else min(remaining, self.bracket_width)
            tax += taxable * rate
            remaining -= taxable
        return max(tax, 0.0)

    def get_contribution_limits(self, region: str) -> ContributionLimits:
        cfg = self.get_config(region)
        limits = self._limits.get(region)
        if limits is None:
            return ContributionLimits(concessional=cfg.contribution_cap or 0.0, non_concessional=0.0)
        if cfg.contribution_cap is not None:
            return ContributionLimits(
                concessional=cfg.contribution_cap,
                non_concessional=limits.non_concessional,
            )
        return limits

    def is_asset_available(self, asset: Asset, user_region: str) -> bool:
        """Whether an investor resident in `user_region` may hold `asset`."""
        self.get_config(user_region)
        if asset.region in (GLOBAL_REGION, user_region):
            return True
        return asset.region in CROSS_BORDER_ACCESS.get(user_region, ())

    @staticmethod
    def currency_impact(asset: Asset, user_currency: str, exchange_rate: float = 1.0) -> float:
        """Conversion factor from the asset's currency into the investor's."""
        if asset.currency == user_currency:
            return 1.0
        return exchange_rate

    def summary(self) -> pd.DataFrame:
        """One row per supported region."""
        rows = []
        for region in self.supported_regions():
            cfg = self._configs[region]
            limits = self.get_contribution_limits(region)
            rows.append({
                "Region": region,
                "Currency": cfg.currency,
                "Inflation": cfg.inflation_rate,
                "Risk Free": cfg.risk_free_rate,
                "Capital Gains": cfg.tax_rates.capital,
                "Retirement Account": cfg.tax_rates.retirement_account,
                "Top Income Rate": max(cfg.tax_rates.income) if cfg.tax_rates.income else 0.0,
                "Concessional Limit": limits.concessional,
                "Non-Concessional Limit": limits.non_concessional,
            })
        return pd.DataFrame(rows)
