"""
Asset models — per-class market assumptions and per-holding valuation/scoring.

  assumptions.py  — baseline return/volatility tables (MarketAssumptions)
  asset_model.py  — AssetModel: value, gain, expected return, volatility, tax, scores
"""

from .assumptions import MarketAssumptions, get_market_assumptions
from .asset_model import AssetModel

__all__ = [
    "MarketAssumptions",
    "get_market_assumptions",
    "AssetModel",
]
