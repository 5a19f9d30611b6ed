from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

# Canonical asset-class tags. Every lookup table in models/assumptions.py is keyed by these.
ASSET_CLASSES: Tuple[str, ...] = (
    "equity",
    "fund",
    "bond",
    "real_estate",
    "digital_asset",
    "cash",
    "retirement_account",
    "term_deposit",
    "tax_advantaged_savings",
)

# Spellings seen in holdings exports (hyphenated names and the legacy front-end tags).
ASSET_CLASS_ALIASES: Dict[str, str] = {
    "real-estate": "real_estate",
    "digital-asset": "digital_asset",
    "retirement-account": "retirement_account",
    "term-deposit": "term_deposit",
    "tax-advantaged-savings": "tax_advantaged_savings",
    "stock": "equity",
    "etf": "fund",
    "property": "real_estate",
    "crypto": "digital_asset",
    "super": "retirement_account",
    "fd": "term_deposit",
    "ppf": "tax_advantaged_savings",
}

# Region tag for holdings that are not tied to one jurisdiction.
GLOBAL_REGION = "GLOBAL"

NO_LIMIT = math.inf


def normalize_asset_class(tag: str) -> str:
    key = str(tag).strip().lower()
    return ASSET_CLASS_ALIASES.get(key, key)


@dataclass(frozen=True)
class Asset:
    """
    One holding, as supplied by the caller. Never mutated by the engine.

    expected_return / volatility are optional per-holding overrides; when None
    the AssetModel looks them up from its per-class tables.
    """
    asset_id: str
    asset_class: str
    quantity: float
    purchase_price: float
    current_price: float
    currency: str
    region: str
    purchase_date: Optional[str] = None
    name: str = ""
    expected_return: Optional[float] = None
    volatility: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # hyphenated and legacy tags resolve to the canonical class everywhere downstream
        object.__setattr__(self, "asset_class", normalize_asset_class(self.asset_class))

    @property
    def value(self) -> float:
        return self.quantity * self.current_price

    @property
    def cost_basis(self) -> float:
        return self.quantity * self.purchase_price


@dataclass(frozen=True)
class TaxRates:
    income: Tuple[float, ...]
    capital: float
    retirement_account: Optional[float] = None


@dataclass(frozen=True)
class RegionalConfig:
    region: str
    currency: str
    tax_rates: TaxRates
    inflation_rate: float
    risk_free_rate: float
    contribution_cap: Optional[float] = None


@dataclass(frozen=True)
class ContributionLimits:
    concessional: float
    non_concessional: float = NO_LIMIT

    @property
    def non_concessional_unbounded(self) -> bool:
        return math.isinf(self.non_concessional)


@dataclass
class ProjectionYear:
    """One year of a deterministic scenario walk."""
    year: int
    total_value: float
    asset_breakdown: Dict[str, float]
    contributions: float  # principal at year 0 plus cumulative deposits
    growth: float         # total_value - contributions
    inflation: float
    taxes: float

    def as_dict(self) -> dict:
        return {
            "year": self.year,
            "total_value": self.total_value,
            "contributions": self.contributions,
            "growth": self.growth,
            "inflation": self.inflation,
            "taxes": self.taxes,
            **{f"class_{k}": v for k, v in self.asset_breakdown.items()},
        }


@dataclass
class MonteCarloYearResult:
    year: int
    percentile10: float
    percentile25: float
    percentile50: float
    percentile75: float
    percentile90: float
    mean: float
    std_dev: float
    probability_of_success: float

    def percentiles(self) -> Tuple[float, float, float, float, float]:
        return (
            self.percentile10,
            self.percentile25,
            self.percentile50,
            self.percentile75,
            self.percentile90,
        )


def _rows_to_frame(rows: List[ProjectionYear], scenario: str) -> pd.DataFrame:
    df = pd.DataFrame([r.as_dict() for r in rows])
    df.insert(0, "scenario", scenario)
    return df


@dataclass
class ScenarioBundle:
    base_case: List[ProjectionYear]
    optimistic: List[ProjectionYear]
    pessimistic: List[ProjectionYear]
    monte_carlo: List[MonteCarloYearResult]

    def scenarios(self) -> Dict[str, List[ProjectionYear]]:
        return {
            "base": self.base_case,
            "optimistic": self.optimistic,
            "pessimistic": self.pessimistic,
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Long-format table of the three deterministic legs (one row per scenario-year)."""
        frames = [_rows_to_frame(rows, name) for name, rows in self.scenarios().items()]
        return pd.concat(frames, ignore_index=True).fillna(0.0)

    def monte_carlo_frame(self) -> pd.DataFrame:
        return pd.DataFrame([vars(r) for r in self.monte_carlo])


@dataclass(frozen=True)
class WhatIfChanges:
    """Overrides applied to the baseline plan. None means "unchanged"."""
    monthly_contribution: Optional[float] = None
    retirement_age: Optional[int] = None
    additional_investment: Optional[float] = None


@dataclass
class WhatIfComparison:
    current: List[ProjectionYear]
    what_if: List[ProjectionYear]

    @property
    def final_value_delta(self) -> float:
        return self.what_if[-1].total_value - self.current[-1].total_value

    def to_dataframe(self) -> pd.DataFrame:
        frames = [_rows_to_frame(self.current, "current"), _rows_to_frame(self.what_if, "what_if")]
        return pd.concat(frames, ignore_index=True).fillna(0.0)
