"""
Stochastic projector — Monte Carlo distribution of portfolio value per year.

All trials advance together, one simulated year at a time, and the outcome of
every trial is snapshotted after each year. One walk therefore covers every
horizon 1..N (O(years × iterations × assets) draws).

Per simulated year and trial:
  1. every holding draws its own annual return r ~ N(expected_return, volatility)
     and adds its current value × r to the running total (holding values are
     not carried forward, so every year applies to the same starting values)
  2. twelve months of contribution are added to the running total
  3. the running total is deflated by (1 - inflation_rate)

Expected returns here are always the unscaled base returns; scenario
multipliers only apply to the deterministic legs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from core.config import ProjectionConfig
from core.errors import InvalidInput, ProjectionCancelled
from core.schema import Asset, MonteCarloYearResult
from core.utils import is_finite_number, is_positive_int
from distributions.sampler import ReturnParams, ReturnSampler
from models.asset_model import AssetModel
from pm.aggregator import aggregate_outcomes

logger = logging.getLogger(__name__)


@dataclass
class SimulatedPaths:
    """
    Output of a Monte Carlo run: every trial's portfolio value at the end of every year.
    """
    outcomes: np.ndarray   # shape (iterations, years); column j is year j+1, floored at 0
    start_value: float
    start_year: int

    @property
    def iterations(self) -> int:
        return self.outcomes.shape[0]

    @property
    def years(self) -> int:
        return self.outcomes.shape[1]

    def year_outcomes(self, year: int) -> np.ndarray:
        """Outcomes of every trial at simulated year `year` (1-based)."""
        if not 1 <= year <= self.years:
            raise IndexError(f"year must be in 1..{self.years}, got {year}")
        return self.outcomes[:, year - 1]

    def final_outcomes(self) -> np.ndarray:
        return self.outcomes[:, -1]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({
            "trial": np.repeat(np.arange(self.iterations), self.years),
            "year": np.tile(np.arange(1, self.years + 1), self.iterations),
            "calendar_year": np.tile(
                np.arange(self.start_year + 1, self.start_year + self.years + 1), self.iterations
            ),
            "value": self.outcomes.reshape(-1),
        })


class StochasticProjector:
    """
    Usage:
        projector = StochasticProjector(asset_model, config=ProjectionConfig(seed=7))
        rows = projector.simulate(assets, monthly_contribution=500, years=30, goal=1_000_000)
    """

    def __init__(self, asset_model: AssetModel, config: Optional[ProjectionConfig] = None):
        self.asset_model = asset_model
        self.config = config or ProjectionConfig()

    def _check_args(self, monthly_contribution, years, iterations) -> None:
        if not is_positive_int(years):
            raise InvalidInput(f"years must be a positive integer, got {years!r}")
        if not is_positive_int(iterations):
            raise InvalidInput(f"iterations must be a positive integer, got {iterations!r}")
        if iterations > self.config.max_iterations:
            raise InvalidInput(
                f"iterations={iterations} exceeds the configured cap of {self.config.max_iterations}"
            )
        if not is_finite_number(monthly_contribution) or monthly_contribution < 0:
            raise InvalidInput(
                f"monthly_contribution must be a non-negative number, got {monthly_contribution!r}"
            )

    def run(
        self,
        assets: Sequence[Asset],
        monthly_contribution: float,
        years: int,
        iterations: Optional[int] = None,
        *,
        cancel_event=None,
    ) -> SimulatedPaths:
        """
        Simulate every trial and keep the raw outcome matrix.

        cancel_event: anything with an `is_set()` method (e.g. threading.Event);
        checked between simulated years.
        """
        iterations = self.config.iterations if iterations is None else iterations
        self._check_args(monthly_contribution, years, iterations)

        values, mu, sigma = self.asset_model.return_arrays(list(assets))
        params = ReturnParams(mean=mu, std=sigma)
        sampler = ReturnSampler(seed=self.config.seed)
        deflator = 1.0 - self.asset_model.regional_config.inflation_rate
        yearly_contribution = float(monthly_contribution) * 12.0

        start_value = float(values.sum())
        totals = np.full(iterations, start_value)
        outcomes = np.zeros((iterations, years), dtype=float)

        for y in range(years):
            if cancel_event is not None and cancel_event.is_set():
                raise ProjectionCancelled(f"Monte Carlo cancelled after {y} of {years} years.")

            if params.n_assets:
                returns = sampler.sample(params, iterations)
                # every draw is applied to today's holding values
                totals = totals + returns @ values
            totals = (totals + yearly_contribution) * deflator
            outcomes[:, y] = np.maximum(totals, 0.0)

            logger.debug(
                "MC year %d: median=%.2f mean=%.2f", y + 1,
                float(np.median(outcomes[:, y])), float(outcomes[:, y].mean()),
            )

        return SimulatedPaths(
            outcomes=outcomes,
            start_value=start_value,
            start_year=self.config.start_year(),
        )

    def simulate(
        self,
        assets: Sequence[Asset],
        monthly_contribution: float,
        years: int,
        iterations: Optional[int] = None,
        goal: Optional[float] = None,
        *,
        cancel_event=None,
    ) -> List[MonteCarloYearResult]:
        """One MonteCarloYearResult per year 1..years."""
        if goal is not None and not is_finite_number(goal):
            raise InvalidInput(f"goal must be a number, got {goal!r}")

        assets = list(assets)
        paths = self.run(
            assets, monthly_contribution, years, iterations, cancel_event=cancel_event
        )
        logger.info(
            "Monte Carlo: %d assets, %d years, %d trials, goal=%s",
            len(assets), paths.years, paths.iterations, goal,
        )
        return aggregate_outcomes(
            paths.outcomes, goal=goal, percentiles=self.config.percentiles
        )
