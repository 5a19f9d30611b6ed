"""
PM (Planning Metrics) outputs — per-year aggregation and tail metrics of simulated outcomes.
"""

from .aggregator import aggregate_outcomes, summarize_year
from .metrics import confidence_interval, shortfall_probability, value_at_risk

__all__ = [
    "aggregate_outcomes",
    "summarize_year",
    "confidence_interval",
    "shortfall_probability",
    "value_at_risk",
]
