from __future__ import annotations

import pandas as pd
import pytest

from core.config import ProjectionConfig
from core.schema import Asset
from engine.projection import ProjectionEngine
from models.asset_model import AssetModel
from rules.regional import RegionalRuleTable

AS_OF = pd.Timestamp("2025-06-30")


def make_asset(asset_id="a1", asset_class="equity", quantity=100.0, purchase_price=95.0,
               current_price=105.0, currency="AUD", region="AU", **kwargs) -> Asset:
    kwargs.setdefault("purchase_date", "2024-01-01")
    return Asset(
        asset_id=asset_id,
        asset_class=asset_class,
        quantity=quantity,
        purchase_price=purchase_price,
        current_price=current_price,
        currency=currency,
        region=region,
        **kwargs,
    )


@pytest.fixture
def config():
    return ProjectionConfig(as_of_date=AS_OF, iterations=500, seed=1234)


@pytest.fixture
def rules():
    return RegionalRuleTable()


@pytest.fixture
def au_model(rules):
    return AssetModel(rules.get_config("AU"))


@pytest.fixture
def engine(config):
    return ProjectionEngine("AU", config=config)


@pytest.fixture
def two_assets():
    return [
        make_asset("1", "equity", 100, 95, 105, name="Commonwealth Bank"),
        make_asset("2", "fund", 200, 85, 90, name="Vanguard Australian Shares"),
    ]


@pytest.fixture
def four_class_assets():
    return [
        make_asset("eq", "equity", 100, 95, 105),
        make_asset("bd", "bond", 50, 100, 98, currency="USD", region="US"),
        make_asset("re", "real_estate", 1, 500_000, 650_000),
        make_asset("btc", "digital_asset", 0.5, 40_000, 90_000, currency="USD", region="GLOBAL"),
    ]
