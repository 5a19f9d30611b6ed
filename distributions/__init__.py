"""
Distributions package — random sampling of annual returns for the Monte Carlo leg.

  sampler.py — Box–Muller normal draws parameterised per holding (ReturnSampler)
"""

from .sampler import ReturnParams, ReturnSampler

__all__ = [
    "ReturnParams",
    "ReturnSampler",
]
