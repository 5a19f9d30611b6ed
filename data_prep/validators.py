"""
Data quality validation for holdings before they enter the engine.

Catches problems early:
- Entries that are not Asset records
- Negative or non-finite quantities and prices
- Unknown asset classes (informational: they fall back to default assumptions)
- Purchase dates that are unparseable or in the future
- Duplicate ids
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import pandas as pd

from core.errors import InvalidInput
from core.schema import ASSET_CLASSES, Asset
from core.utils import is_finite_number, to_timestamp

logger = logging.getLogger(__name__)


def _as_list(assets) -> Optional[List]:
    if assets is None or isinstance(assets, (str, bytes, dict)):
        return None
    try:
        return list(assets)
    except TypeError:
        return None


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a holdings list."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  - {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  - {w}")
        if not lines:
            lines.append("All checks passed.")
        return "\n".join(lines)


def validate_assets(
    assets: Iterable[Asset],
    *,
    as_of_date: Optional[pd.Timestamp] = None,
) -> ValidationResult:
    """
    Run all validation checks on a holdings list.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    result = ValidationResult()

    items = _as_list(assets)
    if items is None:
        result.errors.append("Holdings must be a list of Asset records.")
        return result

    as_of = pd.Timestamp(as_of_date) if as_of_date is not None else pd.Timestamp.today().normalize()
    seen_ids = set()

    for i, asset in enumerate(items):
        if not isinstance(asset, Asset):
            result.errors.append(f"Holding #{i} is {type(asset).__name__}, not an Asset.")
            continue

        label = asset.asset_id or f"#{i}"
        if not asset.asset_id:
            result.errors.append(f"Holding #{i} has an empty id.")
        elif asset.asset_id in seen_ids:
            result.warnings.append(f"Duplicate asset id {asset.asset_id!r}.")
        seen_ids.add(asset.asset_id)

        # --- Quantities and prices ---
        for name in ("quantity", "purchase_price", "current_price"):
            val = getattr(asset, name)
            if not is_finite_number(val):
                result.errors.append(f"{label}: {name} is not a finite number ({val!r}).")
            elif val < 0:
                result.errors.append(f"{label}: negative {name} ({val}).")

        # --- Per-holding overrides ---
        if asset.volatility is not None and (
            not is_finite_number(asset.volatility) or asset.volatility < 0
        ):
            result.errors.append(f"{label}: volatility override must be a non-negative number.")
        if asset.expected_return is not None and not is_finite_number(asset.expected_return):
            result.errors.append(f"{label}: expected_return override is not a finite number.")

        # --- Classification ---
        if asset.asset_class not in ASSET_CLASSES:
            result.warnings.append(
                f"{label}: unknown asset class {asset.asset_class!r}; default assumptions apply."
            )

        # --- Dates ---
        if asset.purchase_date:
            ts = to_timestamp(asset.purchase_date)
            if ts is None:
                result.warnings.append(f"{label}: unparseable purchase date {asset.purchase_date!r}.")
            elif ts > as_of:
                result.warnings.append(f"{label}: purchase date {ts.date()} is after {as_of.date()}.")

    return result


def require_valid_assets(
    assets: Iterable[Asset],
    *,
    as_of_date: Optional[pd.Timestamp] = None,
) -> List[Asset]:
    """Validate, log warnings, and raise InvalidInput on any blocking error."""
    items = _as_list(assets)
    result = validate_assets(items, as_of_date=as_of_date)
    if not result.is_valid:
        raise InvalidInput(result.summary())
    for w in result.warnings:
        logger.warning(w)
    return items
