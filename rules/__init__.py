"""
Regional rules — jurisdiction tax rates, contribution caps, inflation and risk-free assumptions.
"""

from .regional import REGIONAL_CONFIGS, TAX_BRACKET_WIDTH, RegionalRuleTable

__all__ = [
    "REGIONAL_CONFIGS",
    "TAX_BRACKET_WIDTH",
    "RegionalRuleTable",
]
