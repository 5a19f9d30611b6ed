"""
Data preparation — loading holdings tables and validating Asset lists.
"""

from .loader import assets_from_frame, canonicalize_columns, load_holdings_csv
from .validators import ValidationResult, require_valid_assets, validate_assets

__all__ = [
    "assets_from_frame",
    "canonicalize_columns",
    "load_holdings_csv",
    "ValidationResult",
    "require_valid_assets",
    "validate_assets",
]
