"""
Projection engine — orchestrates deterministic scenario walks, the Monte Carlo
leg and what-if comparisons for one investor region.

Build one per region and hold it for a request or session; it keeps no state
between calls and never mutates the holdings passed in.

Deterministic walk (per scenario, multiplier m):
  year 0: total = current value, contributions = current value (principal), growth = taxes = 0
  year t: every holding adds its current value × expected_return × m (the same amount
          each year), then monthly_contribution × 12 is added to the total;
          taxes = tax_on_gain on that year's aggregate growth
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from core.config import ProjectionConfig
from core.errors import InvalidInput
from core.schema import (
    Asset,
    ProjectionYear,
    ScenarioBundle,
    WhatIfChanges,
    WhatIfComparison,
)
from core.utils import is_finite_number, is_positive_int
from data_prep.validators import require_valid_assets
from models.asset_model import AssetModel
from models.assumptions import MarketAssumptions
from rules.regional import RegionalRuleTable

from .stochastic import StochasticProjector

logger = logging.getLogger(__name__)

LUMP_SUM_ASSET_ID = "additional-investment"


class ProjectionEngine:
    """
    Usage:
        engine = ProjectionEngine("AU", config=ProjectionConfig(seed=42))
        bundle = engine.project_scenarios(assets, monthly_contribution=1000, years=25, goal=1e6)
        bundle.base_case[-1].total_value
        bundle.monte_carlo[-1].probability_of_success
    """

    def __init__(
        self,
        region: str = "AU",
        *,
        rules: Optional[RegionalRuleTable] = None,
        config: Optional[ProjectionConfig] = None,
        assumptions: Optional[MarketAssumptions] = None,
    ):
        self.rules = rules or RegionalRuleTable()
        self.regional_config = self.rules.get_config(region)
        self.config = config or ProjectionConfig()
        self.asset_model = AssetModel(self.regional_config, assumptions=assumptions)
        self.projector = StochasticProjector(self.asset_model, config=self.config)

    @property
    def region(self) -> str:
        return self.regional_config.region

    # ----- standalone portfolio outputs -----

    def value(self, assets: Sequence[Asset]) -> float:
        return float(sum(self.asset_model.value(a) for a in assets))

    def allocation(self, assets: Sequence[Asset]) -> Dict[str, float]:
        """Percent of total value per asset class; {} for an empty or zero-value portfolio."""
        total = self.value(assets)
        if total <= 0:
            return {}
        allocation: Dict[str, float] = {}
        for asset in assets:
            pct = self.asset_model.value(asset) / total * 100.0
            allocation[asset.asset_class] = allocation.get(asset.asset_class, 0.0) + pct
        return allocation

    def diversification_score(self, assets: Sequence[Asset]) -> int:
        return self.asset_model.diversification_score(assets)

    def risk_score(self, assets: Sequence[Asset]) -> int:
        return self.asset_model.risk_score(assets)

    # ----- deterministic legs -----

    def _check_plan(self, monthly_contribution, years) -> None:
        if not is_positive_int(years):
            raise InvalidInput(f"years must be a positive integer, got {years!r}")
        if not is_finite_number(monthly_contribution) or monthly_contribution < 0:
            raise InvalidInput(
                f"monthly_contribution must be a non-negative number, got {monthly_contribution!r}"
            )

    def _breakdown(self, assets: Sequence[Asset], values: np.ndarray) -> Dict[str, float]:
        breakdown: Dict[str, float] = {}
        for asset, v in zip(assets, values):
            breakdown[asset.asset_class] = breakdown.get(asset.asset_class, 0.0) + float(v)
        return breakdown

    def _walk(
        self,
        assets: Sequence[Asset],
        monthly_contribution: float,
        years: int,
        multiplier: float,
    ) -> List[ProjectionYear]:
        values, mu, _ = self.asset_model.return_arrays(assets, multiplier=multiplier)
        start_year = self.config.start_year()
        inflation_rate = self.regional_config.inflation_rate
        yearly_contribution = float(monthly_contribution) * 12.0

        current_value = float(values.sum())
        rows = [
            ProjectionYear(
                year=start_year,
                total_value=current_value,
                asset_breakdown=self._breakdown(assets, values),
                contributions=current_value,
                growth=0.0,
                inflation=0.0,
                taxes=0.0,
            )
        ]

        # Growth is always taken on today's holding values; only the total accumulates.
        growth = values * mu
        yearly_growth = float(growth.sum())
        breakdown = self._breakdown(assets, values + growth)
        taxes = self.asset_model.tax_on_gain(None, yearly_growth)

        portfolio = current_value
        contributions = current_value
        for t in range(1, years + 1):
            portfolio += yearly_growth + yearly_contribution
            contributions += yearly_contribution
            rows.append(
                ProjectionYear(
                    year=start_year + t,
                    total_value=portfolio,
                    asset_breakdown=dict(breakdown),
                    contributions=contributions,
                    growth=portfolio - contributions,
                    inflation=portfolio * inflation_rate,
                    taxes=taxes,
                )
            )
        return rows

    def project_scenario(
        self,
        assets: Sequence[Asset],
        monthly_contribution: float,
        years: int,
        scenario: str = "base",
    ) -> List[ProjectionYear]:
        """One deterministic leg, years 0..N."""
        multiplier = self.config.multiplier(scenario)
        self._check_plan(monthly_contribution, years)
        holdings = require_valid_assets(assets, as_of_date=self.config.as_of())
        rows = self._walk(holdings, monthly_contribution, years, multiplier)
        logger.debug(
            "Scenario %s (x%.2f): %d years, final value %.2f",
            scenario, multiplier, years, rows[-1].total_value,
        )
        return rows

    def project_scenarios(
        self,
        assets: Sequence[Asset],
        monthly_contribution: float,
        years: int,
        goal: Optional[float] = None,
        *,
        iterations: Optional[int] = None,
        cancel_event=None,
    ) -> ScenarioBundle:
        self._check_plan(monthly_contribution, years)
        holdings = require_valid_assets(assets, as_of_date=self.config.as_of())
        logger.info(
            "Projecting %d holdings in %s over %d years (monthly contribution %.2f)",
            len(holdings), self.region, years, monthly_contribution,
        )
        if holdings and self.value(holdings) <= 0:
            logger.warning("Portfolio has zero total value; projection is contributions only.")

        legs = {
            name: self._walk(holdings, monthly_contribution, years, self.config.multiplier(name))
            for name in ("base", "optimistic", "pessimistic")
        }
        monte_carlo = self.projector.simulate(
            holdings,
            monthly_contribution,
            years,
            iterations=iterations,
            goal=goal,
            cancel_event=cancel_event,
        )
        return ScenarioBundle(
            base_case=legs["base"],
            optimistic=legs["optimistic"],
            pessimistic=legs["pessimistic"],
            monte_carlo=monte_carlo,
        )

    # ----- what-if -----

    def _lump_sum_asset(self, amount: float) -> Asset:
        return Asset(
            asset_id=LUMP_SUM_ASSET_ID,
            asset_class="cash",
            name="Additional Investment",
            quantity=1.0,
            purchase_price=amount,
            current_price=amount,
            currency=self.regional_config.currency,
            region=self.regional_config.region,
            purchase_date=str(self.config.as_of().date()),
            volatility=0.0,
        )

    def compare_what_if(
        self,
        assets: Sequence[Asset],
        changes: WhatIfChanges,
        current_age: Optional[int] = None,
    ) -> WhatIfComparison:
        """
        Baseline plan (default contribution over the default horizon) against the
        same holdings re-projected with `changes` applied.
        """
        cfg = self.config
        current_age = cfg.default_current_age if current_age is None else current_age
        holdings = require_valid_assets(assets, as_of_date=cfg.as_of())

        current = self._walk(
            holdings, cfg.default_monthly_contribution, cfg.default_horizon_years, 1.0
        )

        contribution = (
            cfg.default_monthly_contribution
            if changes.monthly_contribution is None
            else changes.monthly_contribution
        )
        if changes.retirement_age is None:
            horizon = cfg.default_horizon_years
        else:
            if not is_positive_int(current_age):
                raise InvalidInput(f"current_age must be a positive integer, got {current_age!r}")
            if not is_positive_int(changes.retirement_age):
                raise InvalidInput(
                    f"retirement_age must be a positive integer, got {changes.retirement_age!r}"
                )
            horizon = changes.retirement_age - current_age
            if not is_positive_int(horizon):
                raise InvalidInput(
                    f"retirement_age ({changes.retirement_age}) must be after current_age ({current_age})"
                )
        self._check_plan(contribution, horizon)

        modified = list(holdings)
        lump_sum = changes.additional_investment
        if lump_sum is not None:
            if not is_finite_number(lump_sum) or lump_sum < 0:
                raise InvalidInput(f"additional_investment must be non-negative, got {lump_sum!r}")
            if lump_sum > 0:
                modified.append(self._lump_sum_asset(float(lump_sum)))

        what_if = self._walk(modified, contribution, horizon, 1.0)
        logger.info(
            "What-if: contribution %.2f -> %.2f, horizon %d -> %d, lump sum %s; final delta %.2f",
            cfg.default_monthly_contribution, contribution,
            cfg.default_horizon_years, horizon, lump_sum,
            what_if[-1].total_value - current[-1].total_value,
        )
        return WhatIfComparison(current=current, what_if=what_if)
