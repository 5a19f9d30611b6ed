"""
Tail metrics over a set of simulated outcomes (typically the final year of every trial).
"""

from __future__ import annotations

from typing import Dict

import numpy as np

from .aggregator import percentile_index


def _sorted(outcomes) -> np.ndarray:
    values = np.sort(np.asarray(outcomes, dtype=float))
    if len(values) == 0:
        raise ValueError("No outcomes to measure.")
    return values


def confidence_interval(outcomes, confidence_level: float = 0.95) -> Dict[str, float]:
    """Two-sided interval covering `confidence_level` of the outcomes, by sorted index."""
    if not 0.0 < confidence_level < 1.0:
        raise ValueError("confidence_level must be between 0 and 1.")
    values = _sorted(outcomes)
    alpha = 1.0 - confidence_level
    n = len(values)
    return {
        "lower": float(values[percentile_index(n, alpha / 2.0)]),
        "upper": float(values[percentile_index(n, 1.0 - alpha / 2.0)]),
    }


def value_at_risk(outcomes, confidence_level: float = 0.05) -> float:
    """Outcome at the `confidence_level` quantile: only that share of trials ends lower."""
    if not 0.0 <= confidence_level < 1.0:
        raise ValueError("confidence_level must be in [0, 1).")
    values = _sorted(outcomes)
    return float(values[percentile_index(len(values), confidence_level)])


def shortfall_probability(outcomes, goal: float) -> float:
    values = np.asarray(outcomes, dtype=float)
    if len(values) == 0:
        return 0.0
    return float(np.mean(values < goal))
