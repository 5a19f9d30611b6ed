"""
Build Asset records from tabular holdings (a DataFrame or a CSV export).

Column names are matched case-insensitively against common aliases; asset-class
tags from older exports (stock, etf, super, fd, ...) are normalised.
"""

from __future__ import annotations

from typing import Dict, List

import numpy as np
import pandas as pd

from core.schema import Asset, normalize_asset_class
from core.utils import require_columns, to_timestamp

_COLUMN_ALIASES: Dict[str, str] = {
    "id": "asset_id",
    "assetid": "asset_id",
    "type": "asset_class",
    "class": "asset_class",
    "assetclass": "asset_class",
    "qty": "quantity",
    "units": "quantity",
    "purchaseprice": "purchase_price",
    "cost": "purchase_price",
    "currentprice": "current_price",
    "price": "current_price",
    "purchasedate": "purchase_date",
    "expectedreturn": "expected_return",
}

REQUIRED_COLUMNS = (
    "asset_id",
    "asset_class",
    "quantity",
    "purchase_price",
    "current_price",
    "currency",
    "region",
)

_KNOWN_FIELDS = set(REQUIRED_COLUMNS) | {
    "purchase_date",
    "name",
    "expected_return",
    "volatility",
}


def canonicalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with column names lower-cased and common aliases normalized."""
    def _canon(col: str) -> str:
        key = str(col).strip().lower().replace(" ", "_")
        return _COLUMN_ALIASES.get(key.replace("_", ""), key)

    return df.rename(columns={c: _canon(c) for c in df.columns}).copy()


def _optional_float(value):
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    return float(value)


def assets_from_frame(df: pd.DataFrame) -> List[Asset]:
    """
    One Asset per row. Columns outside the Asset fields are kept in metadata.
    """
    out = canonicalize_columns(df)
    require_columns(out, REQUIRED_COLUMNS)

    extra_cols = [c for c in out.columns if c not in _KNOWN_FIELDS]
    assets = []
    for row in out.to_dict(orient="records"):
        purchase_date = row.get("purchase_date")
        if purchase_date is not None and pd.isna(purchase_date):
            purchase_date = None
        if purchase_date is not None:
            ts = to_timestamp(purchase_date)
            # unparseable dates are kept verbatim for the validator to report
            purchase_date = str(ts.date()) if ts is not None else str(purchase_date)
        name = row.get("name")
        assets.append(
            Asset(
                asset_id=str(row["asset_id"]),
                asset_class=normalize_asset_class(row["asset_class"]),
                quantity=float(row["quantity"]),
                purchase_price=float(row["purchase_price"]),
                current_price=float(row["current_price"]),
                currency=str(row["currency"]).upper(),
                region=str(row["region"]).upper(),
                purchase_date=purchase_date,
                name="" if name is None or pd.isna(name) else str(name),
                expected_return=_optional_float(row.get("expected_return")),
                volatility=_optional_float(row.get("volatility")),
                metadata={c: row[c] for c in extra_cols if not pd.isna(row[c])},
            )
        )
    return assets


def load_holdings_csv(path: str, **read_csv_kwargs) -> List[Asset]:
    return assets_from_frame(pd.read_csv(path, **read_csv_kwargs))
