"""Property-based tests for autotycoon invariants using Hypothesis.

Random seeds, starting worlds and player decisions must never break the
cross-role relationships checked by ``assert_basic_invariants``.
"""

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from autotycoon import commands
from autotycoon.simulation import Simulation
from tests.helpers.invariants import assert_basic_invariants

seed_strategy = st.integers(min_value=0, max_value=2**31 - 1)
ticks_strategy = st.integers(min_value=1, max_value=400)
target_strategy = st.integers(min_value=0, max_value=200)
price_strategy = st.floats(min_value=1_000.0, max_value=40_000.0)


def _sim(seed: int, **overrides) -> Simulation:
    return Simulation.init(
        seed=seed, companies_per_category=1, logging={"default_level": "ERROR"}, **overrides
    )


class TestSimulationInvariants:
    @given(seed=seed_strategy)
    @settings(max_examples=25, deadline=None)
    def test_initialization_invariants(self, seed):
        sim = _sim(seed)
        assert_basic_invariants(sim)
        assert (sim.mkt.price > 0).all()
        assert len(set(sim.mkt.names)) == len(sim.mkt.names), "duplicate company names"

    @given(seed=seed_strategy, n_ticks=ticks_strategy)
    @settings(max_examples=20, deadline=None)
    def test_idle_world_invariants(self, seed, n_ticks):
        sim = _sim(seed)
        sim.run(n_ticks)
        assert_basic_invariants(sim)
        assert sim.ec.cars_sold == 0

    @given(
        seed=seed_strategy,
        n_ticks=ticks_strategy,
        target=target_strategy,
        price=price_strategy,
    )
    @settings(max_examples=20, deadline=None)
    def test_producing_world_invariants(self, seed, n_ticks, target, price):
        sim = _sim(seed)
        assert commands.create_car_model(
            sim, "Runabout", "A", "small-i4", "frame", "small", "spartan", price=price
        )
        commands.update_factory_settings(sim, "factory-1", model_id="model-1", target=target)

        for _ in range(n_ticks):
            sim.step()
            assert_basic_invariants(sim)

        assert sim.ec.cars_sold <= sim.ec.cars_produced
        assert sim.fac.inventory.sum() == sim.ec.cars_produced - sim.ec.cars_sold


class TestPlayerActionInvariants:
    @given(
        seed=seed_strategy,
        loan=st.floats(min_value=1.0, max_value=1e7),
        repay=st.floats(min_value=1.0, max_value=2e7),
    )
    @settings(max_examples=40, deadline=None)
    def test_loan_never_negative(self, seed, loan, repay):
        sim = _sim(seed)
        commands.take_loan(sim, loan)
        commands.repay_loan(sim, repay)
        assert sim.bank.loan >= 0.0
        assert sim.ec.money >= 0.0
        sim.run(90)
        assert_basic_invariants(sim)

    @given(seed=seed_strategy, trades=st.lists(st.integers(-500, 500), max_size=12))
    @settings(max_examples=30, deadline=None)
    def test_share_trading_keeps_books(self, seed, trades):
        sim = _sim(seed)
        cid = sim.mkt.ids[0]
        held = 0
        for n in trades:
            if n > 0 and commands.buy_shares(sim, cid, n):
                held += n
            elif n < 0 and commands.sell_shares(sim, cid, -n):
                held += n
        h = sim.pf.holdings.get(cid)
        assert (h.shares if h else 0) == held
        assert held >= 0
        assert np.isfinite(sim.ec.money)
        assert sim.pf.total_fees >= 0.0

    @given(seed=seed_strategy, bids=st.lists(st.floats(0.0, 6e6), min_size=1, max_size=6))
    @settings(max_examples=30, deadline=None)
    def test_bids_conserve_cash(self, seed, bids):
        from autotycoon.records import AuctionState

        sim = _sim(seed)
        sim.ec.auction = AuctionState(year=1950, land_value=500_000, rival_bid=550_000)
        start = sim.ec.money
        for bid in bids:
            commands.place_bid(sim, bid)
        assert sim.ec.money + sim.ec.auction.user_bid == pytest.approx(start)
        assert sim.ec.money >= 0.0
