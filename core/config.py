"""
Projection configuration.
Market assumptions (per-class returns/volatilities) live in models/assumptions.py (MarketAssumptions).
Regional tax/inflation tables live in rules/regional.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import pandas as pd

from .errors import InvalidInput

# Multipliers applied to every holding's expected return in the deterministic legs.
SCENARIO_MULTIPLIERS: Dict[str, float] = {
    "base": 1.0,
    "optimistic": 1.3,
    "pessimistic": 0.7,
}


@dataclass(frozen=True)
class ProjectionConfig:
    as_of_date: Optional[pd.Timestamp] = None  # None -> today
    iterations: int = 1000
    max_iterations: int = 100_000
    seed: Optional[int] = None

    scenario_multipliers: Dict[str, float] = field(
        default_factory=lambda: dict(SCENARIO_MULTIPLIERS)
    )
    percentiles: Tuple[float, ...] = (0.10, 0.25, 0.50, 0.75, 0.90)

    # what-if baseline plan
    default_monthly_contribution: float = 500.0
    default_horizon_years: int = 30
    default_current_age: int = 30

    def as_of(self) -> pd.Timestamp:
        if self.as_of_date is None:
            return pd.Timestamp.today().normalize()
        return pd.Timestamp(self.as_of_date)

    def start_year(self) -> int:
        return int(self.as_of().year)

    def multiplier(self, scenario: str) -> float:
        if scenario not in self.scenario_multipliers:
            raise InvalidInput(
                f"Unknown scenario '{scenario}'. "
                f"Available: {list(self.scenario_multipliers.keys())}"
            )
        return float(self.scenario_multipliers[scenario])
