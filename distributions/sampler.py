"""
Return Sampler — draws annual per-holding returns for the Monte Carlo leg.

Input:  per-holding expected return (mean) and volatility (std)
Output: (n_trials × n_assets) matrix of sampled annual returns for one simulated year

Each row is one trial's draw for every holding:
  Trial 1: equity=+14.2%, bond=+3.1%, cash=+2.6%   (good year)
  Trial 2: equity=-18.7%, bond=+6.0%, cash=+2.4%   (equity drawdown)

Holdings are sampled independently so idiosyncratic shocks offset each other,
which is where diversification lowers the spread of outcomes.

Method:
  Box–Muller: two uniforms u1 in (0, 1], u2 in [0, 1) give
      z = sqrt(-2 ln u1) · cos(2π u2)  ~  N(0, 1)
  then  r = mean + std · z
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class ReturnParams:
    """Mean/std per holding, aligned by position."""
    mean: np.ndarray   # shape (n_assets,)
    std: np.ndarray    # shape (n_assets,)

    @property
    def n_assets(self) -> int:
        return len(self.mean)

    def summary(self) -> pd.DataFrame:
        return pd.DataFrame({"Mean": self.mean, "StdDev": self.std})


class ReturnSampler:
    """
    Generates normally distributed annual returns via Box–Muller.

    Usage:
        sampler = ReturnSampler(seed=42)
        r = sampler.sample(ReturnParams(mean=mu, std=sigma), n_trials=1000)
        # r.shape → (1000, n_assets)
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def standard_normal(self, size: Tuple[int, ...]) -> np.ndarray:
        u1 = 1.0 - self.rng.random(size)  # (0, 1], keeps log finite
        u2 = self.rng.random(size)
        return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)

    def sample(self, params: ReturnParams, n_trials: int) -> np.ndarray:
        z = self.standard_normal((n_trials, params.n_assets))
        return params.mean[np.newaxis, :] + params.std[np.newaxis, :] * z
