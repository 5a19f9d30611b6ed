"""
Projection engine — deterministic scenario walks, Monte Carlo projector and what-if comparison.
"""

from .projection import ProjectionEngine
from .stochastic import SimulatedPaths, StochasticProjector

__all__ = ["ProjectionEngine", "SimulatedPaths", "StochasticProjector"]
