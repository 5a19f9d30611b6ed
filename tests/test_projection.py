from __future__ import annotations

import threading

import pytest

from core.config import ProjectionConfig
from core.errors import ConfigNotFound, InvalidInput, ProjectionCancelled
from core.schema import RegionalConfig, TaxRates, WhatIfChanges
from engine.projection import LUMP_SUM_ASSET_ID, ProjectionEngine
from rules.regional import RegionalRuleTable
from tests.conftest import AS_OF, make_asset


# ---------------------------------------------------------------------------
# Portfolio outputs
# ---------------------------------------------------------------------------

def test_value_is_sum_of_holdings(engine, two_assets):
    assert engine.value(two_assets) == pytest.approx(28_500)
    assert engine.value([]) == 0.0


def test_allocation(engine, two_assets):
    alloc = engine.allocation(two_assets)
    assert alloc["equity"] == pytest.approx(10_500 / 28_500 * 100)
    assert alloc["fund"] == pytest.approx(18_000 / 28_500 * 100)
    assert sum(alloc.values()) == pytest.approx(100.0)


def test_allocation_groups_by_class(engine):
    assets = [make_asset("a", quantity=1, current_price=300), make_asset("b", quantity=1, current_price=100)]
    assert engine.allocation(assets) == {"equity": pytest.approx(100.0)}


def test_allocation_empty_or_worthless(engine):
    assert engine.allocation([]) == {}
    assert engine.allocation([make_asset(quantity=0)]) == {}


def test_scores_delegate_to_asset_model(engine, four_class_assets):
    assert engine.diversification_score(four_class_assets) == 95
    assert 0 <= engine.risk_score(four_class_assets) <= 100
    assert engine.risk_score([]) == 0


def test_unsupported_region():
    with pytest.raises(ConfigNotFound):
        ProjectionEngine("UK")
    with pytest.raises(LookupError):
        ProjectionEngine("XX")


def test_region_property():
    assert ProjectionEngine("IN").region == "IN"


# ---------------------------------------------------------------------------
# Deterministic scenarios
# ---------------------------------------------------------------------------

def test_first_year_by_hand(engine, two_assets):
    rows = engine.project_scenario(two_assets, 1000, 1)
    start, first = rows

    assert start.year == 2025
    assert start.total_value == pytest.approx(28_500)
    assert start.contributions == pytest.approx(28_500)
    assert start.growth == 0.0
    assert start.taxes == 0.0
    assert start.asset_breakdown == {"equity": pytest.approx(10_500), "fund": pytest.approx(18_000)}

    # equity 10,500 × 8% + fund 18,000 × 7.5% = 2,190 growth
    assert first.year == 2026
    assert first.total_value == pytest.approx(28_500 + 2_190 + 12_000)
    assert first.contributions == pytest.approx(28_500 + 12_000)
    assert first.growth == pytest.approx(2_190)
    assert first.taxes == pytest.approx(2_190 * 0.15)
    assert first.inflation == pytest.approx(first.total_value * 0.025)
    assert first.asset_breakdown["equity"] == pytest.approx(10_500 * 1.08)


def test_growth_identity_every_year(engine, four_class_assets):
    for row in engine.project_scenario(four_class_assets, 750, 15):
        assert row.growth == pytest.approx(row.total_value - row.contributions)
        assert row.taxes >= 0


def test_bundle_shape(engine, two_assets):
    bundle = engine.project_scenarios(two_assets, 1000, 10, goal=100_000, iterations=200)
    for rows in bundle.scenarios().values():
        assert len(rows) == 11
        assert rows[0].total_value == pytest.approx(28_500)
        assert [r.year for r in rows] == list(range(2025, 2036))
    assert len(bundle.monte_carlo) == 10
    assert [r.year for r in bundle.monte_carlo] == list(range(1, 11))


def test_scenario_ordering(engine, four_class_assets):
    bundle = engine.project_scenarios(four_class_assets, 500, 20, iterations=100)
    for opt, base, pess in zip(bundle.optimistic, bundle.base_case, bundle.pessimistic):
        assert opt.total_value >= base.total_value >= pess.total_value
    final = bundle.optimistic[-1], bundle.base_case[-1], bundle.pessimistic[-1]
    assert final[0].total_value > final[1].total_value > final[2].total_value


def test_monte_carlo_rows_are_ordered(engine, four_class_assets):
    bundle = engine.project_scenarios(four_class_assets, 500, 8, goal=800_000)
    for r in bundle.monte_carlo:
        p = r.percentiles()
        assert all(a <= b for a, b in zip(p, p[1:]))
        assert 0.0 <= r.probability_of_success <= 1.0


def test_empty_portfolio_is_contributions_only(engine):
    rows = engine.project_scenario([], 1000, 2)
    assert [r.total_value for r in rows] == [0.0, 12_000.0, 24_000.0]
    assert all(r.growth == 0.0 for r in rows)


def test_negative_return_loses_the_same_amount_each_year(engine):
    falling = make_asset(quantity=1, current_price=1000, expected_return=-0.1)
    rows = engine.project_scenario([falling], 0, 3)
    assert [r.total_value for r in rows] == pytest.approx([1000, 900, 800, 700])
    assert all(r.asset_breakdown["equity"] == pytest.approx(900) for r in rows[1:])
    assert all(r.taxes == 0.0 for r in rows)


def test_growth_is_taken_on_current_value_every_year(engine):
    holding = make_asset(quantity=1, current_price=10_000, expected_return=0.08)
    rows = engine.project_scenario([holding], 0, 2)
    assert rows[-1].total_value == pytest.approx(11_600)

    rows = engine.project_scenario([holding], 100, 3)
    assert [r.total_value for r in rows] == pytest.approx([10_000, 12_000, 14_000, 16_000])
    assert [r.contributions for r in rows] == pytest.approx([10_000, 11_200, 12_400, 13_600])
    assert rows[3].growth == pytest.approx(2_400)
    assert rows[3].taxes == pytest.approx(800 * 0.15)

    optimistic = engine.project_scenario([holding], 0, 2, scenario="optimistic")
    assert optimistic[-1].total_value == pytest.approx(10_000 + 2 * 800 * 1.3)


def test_taxes_apply_capital_rate_to_aggregate_growth():
    cfg = RegionalConfig(
        region="XX", currency="AUD", tax_rates=TaxRates(income=(0.0,), capital=0.25, retirement_account=0.10),
        inflation_rate=0.02, risk_free_rate=0.03,
    )
    engine = ProjectionEngine("XX", rules=RegionalRuleTable(configs={"XX": cfg}, limits={}),
                              config=ProjectionConfig(as_of_date=AS_OF))
    assets = [
        make_asset("s", "retirement-account", quantity=1, current_price=10_000, expected_return=0.05),
        make_asset("e", quantity=1, current_price=10_000, expected_return=0.05),
    ]
    rows = engine.project_scenario(assets, 0, 1)
    assert rows[1].taxes == pytest.approx(1_000 * 0.25)


@pytest.mark.parametrize("kwargs", [
    {"monthly_contribution": "100"},
    {"goal": "1000"},
])
def test_string_numbers_are_invalid_input(engine, two_assets, kwargs):
    args = {"monthly_contribution": 100, "years": 2, "iterations": 50, **kwargs}
    with pytest.raises(InvalidInput):
        engine.project_scenarios(two_assets, **args)


def test_string_holding_fields_are_invalid_input(engine):
    with pytest.raises(InvalidInput, match="quantity is not a finite number"):
        engine.project_scenarios([make_asset(quantity="5")], 100, 2)


def test_unknown_scenario(engine, two_assets):
    with pytest.raises(InvalidInput):
        engine.project_scenario(two_assets, 1000, 5, scenario="apocalyptic")


@pytest.mark.parametrize("years", [0, -3, 1.5, None])
def test_invalid_years(engine, two_assets, years):
    with pytest.raises(InvalidInput):
        engine.project_scenarios(two_assets, 1000, years)


def test_invalid_contribution(engine, two_assets):
    with pytest.raises(InvalidInput):
        engine.project_scenarios(two_assets, -100, 5)


def test_invalid_holding_rejected(engine, two_assets):
    bad = two_assets + [make_asset("bad", quantity=-5)]
    with pytest.raises(InvalidInput, match="negative quantity"):
        engine.project_scenarios(bad, 1000, 5)


def test_cancelled_run(engine, two_assets):
    event = threading.Event()
    event.set()
    with pytest.raises(ProjectionCancelled):
        engine.project_scenarios(two_assets, 1000, 5, cancel_event=event)


def test_inputs_not_mutated(engine, two_assets):
    snapshot = list(two_assets)
    engine.project_scenarios(two_assets, 1000, 5, iterations=50)
    engine.compare_what_if(two_assets, WhatIfChanges(additional_investment=5_000))
    assert two_assets == snapshot


def test_bundle_frames(engine, two_assets):
    bundle = engine.project_scenarios(two_assets, 1000, 4, iterations=50)
    df = bundle.to_dataframe()
    assert len(df) == 15
    assert set(df["scenario"]) == {"base", "optimistic", "pessimistic"}
    assert {"class_equity", "class_fund", "total_value"} <= set(df.columns)
    mc = bundle.monte_carlo_frame()
    assert len(mc) == 4
    assert "probability_of_success" in mc.columns


def test_seeded_engine_is_reproducible(two_assets):
    cfg = ProjectionConfig(as_of_date=AS_OF, seed=5, iterations=100)
    a = ProjectionEngine("US", config=cfg).project_scenarios(two_assets, 200, 6)
    b = ProjectionEngine("US", config=cfg).project_scenarios(two_assets, 200, 6)
    assert a.monte_carlo == b.monte_carlo
    assert a.base_case == b.base_case


# ---------------------------------------------------------------------------
# What-if
# ---------------------------------------------------------------------------

def test_what_if_no_changes_matches_current(engine, two_assets):
    cmp = engine.compare_what_if(two_assets, WhatIfChanges())
    assert len(cmp.current) == 31
    assert cmp.final_value_delta == pytest.approx(0.0)


def test_higher_contribution_dominates(engine, two_assets):
    cmp = engine.compare_what_if(two_assets, WhatIfChanges(monthly_contribution=1500))
    for cur, alt in zip(cmp.current[1:], cmp.what_if[1:]):
        assert alt.total_value > cur.total_value
    assert cmp.final_value_delta > 0


def test_lump_sum_added_as_cash(engine, two_assets):
    cmp = engine.compare_what_if(two_assets, WhatIfChanges(additional_investment=10_000))
    assert cmp.what_if[0].total_value == pytest.approx(cmp.current[0].total_value + 10_000)
    assert cmp.what_if[0].asset_breakdown["cash"] == pytest.approx(10_000)
    assert cmp.what_if[1].asset_breakdown["cash"] == pytest.approx(10_250)
    assert cmp.final_value_delta > 10_000


def test_zero_lump_sum_is_ignored(engine, two_assets):
    cmp = engine.compare_what_if(two_assets, WhatIfChanges(additional_investment=0))
    assert "cash" not in cmp.what_if[0].asset_breakdown


def test_lump_sum_asset(engine):
    asset = engine._lump_sum_asset(2_500)
    assert asset.asset_id == LUMP_SUM_ASSET_ID
    assert asset.asset_class == "cash"
    assert asset.currency == "AUD"
    assert asset.value == pytest.approx(2_500)


def test_retirement_age_sets_horizon(engine, two_assets):
    cmp = engine.compare_what_if(two_assets, WhatIfChanges(retirement_age=45), current_age=35)
    assert len(cmp.what_if) == 11
    assert cmp.what_if[-1].year == 2035
    assert len(cmp.current) == 31


def test_retirement_age_uses_default_current_age(engine, two_assets):
    cmp = engine.compare_what_if(two_assets, WhatIfChanges(retirement_age=60))
    assert len(cmp.what_if) == 31


@pytest.mark.parametrize("changes,age", [
    (WhatIfChanges(retirement_age=30), 30),
    (WhatIfChanges(retirement_age=25), 30),
    (WhatIfChanges(additional_investment=-1), 30),
    (WhatIfChanges(monthly_contribution=-50), 30),
    (WhatIfChanges(retirement_age=65), 0),
    (WhatIfChanges(retirement_age="60"), 30),
    (WhatIfChanges(additional_investment="500"), 30),
])
def test_invalid_what_if(engine, two_assets, changes, age):
    with pytest.raises(InvalidInput):
        engine.compare_what_if(two_assets, changes, current_age=age)


def test_what_if_frame(engine, two_assets):
    cmp = engine.compare_what_if(two_assets, WhatIfChanges(retirement_age=40), current_age=30)
    df = cmp.to_dataframe()
    assert len(df) == 31 + 11
    assert set(df["scenario"]) == {"current", "what_if"}
