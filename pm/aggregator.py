"""
Aggregate simulated trial outcomes into per-year distribution summaries.

Instead of: "Portfolio in 20 years = $1.2M" (one number, no context)
The planner gets: "median $1.1M, 10th pctl $0.7M, 90th pctl $1.8M, 64% chance of reaching $1M"

Percentiles are read off the sorted outcomes by index floor(n × p), so for a
fixed sorted array p10 ≤ p25 ≤ p50 ≤ p75 ≤ p90 always holds.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from core.errors import InvalidInput
from core.schema import MonteCarloYearResult
from core.utils import is_finite_number

DEFAULT_PERCENTILES: Tuple[float, ...] = (0.10, 0.25, 0.50, 0.75, 0.90)


def percentile_index(n: int, pct: float) -> int:
    return min(int(np.floor(n * pct)), n - 1)


def read_percentiles(sorted_values: np.ndarray, percentiles: Sequence[float]) -> List[float]:
    n = len(sorted_values)
    return [float(sorted_values[percentile_index(n, p)]) for p in percentiles]


def probability_of_success(outcomes: np.ndarray, goal: Optional[float]) -> float:
    """Share of trials at or above the goal; 1.0 without a goal or with a goal ≤ 0."""
    if goal is None:
        return 1.0
    if not is_finite_number(goal):
        raise InvalidInput(f"goal must be a number, got {goal!r}")
    if goal <= 0:
        return 1.0
    return float(np.mean(outcomes >= goal))


def summarize_year(
    year: int,
    outcomes: np.ndarray,
    *,
    goal: Optional[float] = None,
    percentiles: Sequence[float] = DEFAULT_PERCENTILES,
) -> MonteCarloYearResult:
    """
    Summarise one year's trial outcomes.

    `percentiles` must hold exactly five ascending levels; they fill
    percentile10..percentile90 in order.
    """
    if len(percentiles) != 5:
        raise ValueError(f"Expected 5 percentile levels, got {len(percentiles)}")
    values = np.sort(np.asarray(outcomes, dtype=float))
    if len(values) == 0:
        raise ValueError("No trial outcomes to summarise.")

    p10, p25, p50, p75, p90 = read_percentiles(values, sorted(percentiles))
    ddof = 1 if len(values) > 1 else 0
    return MonteCarloYearResult(
        year=year,
        percentile10=p10,
        percentile25=p25,
        percentile50=p50,
        percentile75=p75,
        percentile90=p90,
        mean=float(np.mean(values)),
        std_dev=float(np.std(values, ddof=ddof)),
        probability_of_success=probability_of_success(values, goal),
    )


def aggregate_outcomes(
    outcomes: np.ndarray,
    *,
    goal: Optional[float] = None,
    percentiles: Sequence[float] = DEFAULT_PERCENTILES,
) -> List[MonteCarloYearResult]:
    """
    Parameters
    ----------
    outcomes : np.ndarray
        Shape (n_trials, n_years); column j holds every trial's value at year j+1.
    """
    outcomes = np.asarray(outcomes, dtype=float)
    return [
        summarize_year(j + 1, outcomes[:, j], goal=goal, percentiles=percentiles)
        for j in range(outcomes.shape[1])
    ]
