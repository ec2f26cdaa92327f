"""Player commands: preconditions, cash movements and journal entries."""

from datetime import datetime

import numpy as np
import pytest

from autotycoon import commands
from autotycoon.clock import throttle
from autotycoon.records import AuctionResult, AuctionState, ContractOffer
from autotycoon.simulation import Simulation

START_MONEY = 5_000_000.0


def _quiet(**overrides) -> Simulation:
    return Simulation.init(
        seed=11, companies_per_category=1, logging={"default_level": "ERROR"}, **overrides
    )


class TestClockCommands:
    def test_set_speed(self, tiny_sim):
        assert commands.set_speed(tiny_sim, 5)
        assert tiny_sim.clock.speed == 5
        assert not commands.set_speed(tiny_sim, 30)

    def test_toggle_pause(self, tiny_sim):
        assert commands.toggle_pause(tiny_sim)
        assert tiny_sim.clock.paused
        commands.toggle_pause(tiny_sim)
        assert not tiny_sim.clock.paused

    def test_emergency_brake(self, tiny_sim):
        commands.set_speed(tiny_sim, 20)
        assert commands.emergency_brake(tiny_sim)
        assert tiny_sim.clock.speed == 1


class TestDealerships:
    def test_buy(self, tiny_sim):
        assert commands.buy_dealership(tiny_sim)
        assert tiny_sim.ec.money == START_MONEY - commands.DEALERSHIP_PRICE
        assert tiny_sim.dlr.ids == ["dealer-1", "dealer-2"]
        assert tiny_sim.dlr.capacity[1] == 20
        assert tiny_sim.ec.logs[0].kind == "success"

    def test_limit_posts_danger(self):
        sim = _quiet(showroom_limit_base=1)
        assert not commands.buy_dealership(sim)
        assert len(sim.dlr.ids) == 1
        assert sim.ec.logs[0].kind == "danger"
        assert sim.ec.money == START_MONEY

    def test_not_enough_cash(self, tiny_sim):
        tiny_sim.ec.money = 1_000.0
        assert not commands.buy_dealership(tiny_sim)
        assert len(tiny_sim.dlr.ids) == 1

    def test_upgrade(self, tiny_sim):
        assert commands.upgrade_dealership(tiny_sim, "dealer-1")
        assert tiny_sim.dlr.level[0] == 2
        assert tiny_sim.dlr.capacity[0] == 40
        assert tiny_sim.dlr.upgrade_cost[0] == 75_000
        assert tiny_sim.ec.money == START_MONEY - 50_000

    def test_upgrade_refused(self, tiny_sim):
        assert not commands.upgrade_dealership(tiny_sim, "dealer-9")
        tiny_sim.dlr.level[0] = commands.MAX_DEALERSHIP_LEVEL
        assert not commands.upgrade_dealership(tiny_sim, "dealer-1")
        assert tiny_sim.ec.money == START_MONEY

    def test_toggle(self, tiny_sim):
        assert commands.toggle_dealership(tiny_sim, "dealer-1")
        assert not tiny_sim.dlr.active[0]
        assert not commands.toggle_dealership(tiny_sim, "nope")


class TestFactories:
    def test_upgrade(self, tiny_sim):
        assert commands.upgrade_factory(tiny_sim, "factory-1")
        assert tiny_sim.fac.level[0] == 2
        assert tiny_sim.fac.capacity[0] == 110
        assert tiny_sim.fac.workers[0] == 55
        assert tiny_sim.fac.upgrade_cost[0] == 150_000
        assert tiny_sim.ec.money == START_MONEY - 100_000

    def test_upgrade_at_max_level(self, tiny_sim):
        tiny_sim.fac.level[0] = 8
        assert not commands.upgrade_factory(tiny_sim, "factory-1")

    def test_toggle_and_wages(self, tiny_sim):
        assert commands.toggle_factory(tiny_sim, "factory-1")
        assert not tiny_sim.fac.active[0]
        assert commands.raise_factory_wages(tiny_sim, "factory-1")
        assert tiny_sim.fac.efficiency[0] == 83.0
        assert tiny_sim.fac.wage_level[0] == 1.05
        assert not commands.raise_factory_wages(tiny_sim, "factory-7")

    def test_settings(self, producing_sim):
        sim = producing_sim
        assert sim.fac.model[0] == 0
        assert commands.update_factory_settings(sim, "factory-1", target=0)
        assert sim.fac.target[0] == 0
        assert commands.update_factory_settings(sim, "factory-1", model_id=None)
        assert sim.fac.model[0] == -1

    @pytest.mark.parametrize(
        "kwargs", [{"target": -1}, {"target": True}, {"target": 2.5}, {"model_id": "model-9"}]
    )
    def test_settings_refused(self, producing_sim, kwargs):
        assert not commands.update_factory_settings(producing_sim, "factory-1", **kwargs)
        assert producing_sim.fac.model[0] == 0
        assert producing_sim.fac.target[0] == 50

    def test_settings_unknown_factory(self, producing_sim):
        assert not commands.update_factory_settings(producing_sim, "factory-2", target=10)


class TestResearch:
    def test_unlock_class(self, tiny_sim):
        assert commands.unlock_class(tiny_sim, "B")
        assert "B" in tiny_sim.ec.unlocked_classes
        assert tiny_sim.ec.money == START_MONEY - 50_000
        assert not commands.unlock_class(tiny_sim, "B")

    def test_class_not_yet_available(self, tiny_sim):
        assert not commands.unlock_class(tiny_sim, "C")  # 1960
        assert not commands.unlock_class(tiny_sim, "ZZ")

    def test_unlock_part(self, tiny_sim):
        assert commands.unlock_part(tiny_sim, "sedan")
        assert "sedan" in tiny_sim.ec.unlocked_parts
        assert tiny_sim.ec.money == START_MONEY - 20_000
        assert tiny_sim.ec.logs[0].kind == "success"
        assert not commands.unlock_part(tiny_sim, "coupe")  # 1955

    def test_unaffordable(self, tiny_sim):
        tiny_sim.ec.money = 10.0
        assert not commands.unlock_part(tiny_sim, "sedan")


STARTER = ("small-i4", "frame", "small", "spartan")


class TestCarModels:
    def test_create_at_suggested_price(self, tiny_sim):
        assert commands.create_car_model(tiny_sim, "Runabout", "A", *STARTER)
        assert tiny_sim.cars.ids == ["model-1"]
        assert tiny_sim.cars.price[0] == 8150.0
        assert tiny_sim.cars.production_cost[0] == 7900

    def test_create_with_price(self, tiny_sim):
        assert commands.create_car_model(tiny_sim, "Runabout", "A", *STARTER, price=9000)
        assert tiny_sim.cars.price[0] == 9000.0

    @pytest.mark.parametrize(
        "name, class_id, parts, price",
        [
            ("", "A", STARTER, None),
            ("X", "B", STARTER, None),  # locked class
            ("X", "A", ("v8-standard", "frame", "small", "spartan"), None),  # locked part
            ("X", "A", ("frame", "small-i4", "small", "spartan"), None),  # wrong slots
            ("X", "A", STARTER, 0),
            ("X", "A", STARTER, float("nan")),
        ],
    )
    def test_create_refused(self, tiny_sim, name, class_id, parts, price):
        assert not commands.create_car_model(tiny_sim, name, class_id, *parts, price=price)
        assert tiny_sim.cars.ids == []

    def test_zero_synergy_is_refused(self, tiny_sim):
        commands.unlock_part(tiny_sim, "sedan")
        assert not commands.create_car_model(
            tiny_sim, "Sedan A", "A", "small-i4", "frame", "sedan", "spartan"
        )

    def test_rename_and_reprice_keep_record(self, producing_sim):
        cars = producing_sim.cars
        cars.total_sales[0] = 120
        assert commands.update_car_model(
            producing_sim, "model-1", name="Runabout II", price=8500
        )
        assert cars.names[0] == "Runabout II"
        assert cars.price[0] == 8500.0
        assert cars.total_sales[0] == 120

    def test_new_part_restyles(self, producing_sim):
        sim = producing_sim
        sim.cars.total_sales[0] = 120
        commands.unlock_part(sim, "standard")
        assert commands.update_car_model(sim, "model-1", parts={"interior": "standard"})
        assert sim.cars.interior[0] == "standard"
        assert sim.cars.total_sales[0] == 0

    def test_update_refused(self, producing_sim):
        assert not commands.update_car_model(producing_sim, "model-5", name="x")
        assert not commands.update_car_model(producing_sim, "model-1", price=-1)
        assert not commands.update_car_model(producing_sim, "model-1", name="")
        assert not commands.update_car_model(producing_sim, "model-1", class_id="B")
        assert producing_sim.cars.names == ["Runabout"]

    def test_delete_unassigns_factories(self, producing_sim):
        assert commands.delete_car_model(producing_sim, "model-1")
        assert producing_sim.cars.ids == []
        assert producing_sim.fac.model[0] == -1
        assert not commands.delete_car_model(producing_sim, "model-1")

    def test_retrofit(self, tiny_sim):
        assert commands.pay_for_retrofit(tiny_sim, 5_000, "Runabout", 12)
        assert tiny_sim.ec.money == START_MONEY - 5_000
        assert "12 × Runabout" in tiny_sim.ec.logs[0].message
        assert not commands.pay_for_retrofit(tiny_sim, 1e9, "Runabout", 12)


class TestBank:
    def test_take_loan_books_markup(self, tiny_sim):
        assert commands.take_loan(tiny_sim, 100_000)
        assert tiny_sim.ec.money == START_MONEY + 100_000
        assert tiny_sim.bank.loan == 150_000

    @pytest.mark.parametrize("amount", [0, -5, True, float("inf"), "100"])
    def test_bad_loan_amounts(self, tiny_sim, amount):
        assert not commands.take_loan(tiny_sim, amount)
        assert tiny_sim.bank.loan == 0.0

    def test_repay_is_capped_by_loan(self, tiny_sim):
        commands.take_loan(tiny_sim, 100_000)
        assert commands.repay_loan(tiny_sim, 1e9)
        assert tiny_sim.bank.loan == 0.0
        assert tiny_sim.ec.money == START_MONEY - 50_000

    def test_repay_is_capped_by_cash(self, tiny_sim):
        commands.take_loan(tiny_sim, 100_000)
        tiny_sim.ec.money = 1_000.0
        assert commands.repay_loan(tiny_sim, 50_000)
        assert tiny_sim.ec.money == 0.0
        assert tiny_sim.bank.loan == 149_000

    def test_repay_without_loan(self, tiny_sim):
        assert not commands.repay_loan(tiny_sim, 1_000)

    def test_single_deposit(self, tiny_sim):
        assert commands.create_deposit(tiny_sim, 100_000)
        assert tiny_sim.ec.money == START_MONEY - 100_000
        assert not commands.create_deposit(tiny_sim, 100_000)
        assert "already open" in tiny_sim.ec.logs[0].message

    def test_deposit_needs_cash(self, tiny_sim):
        assert not commands.create_deposit(tiny_sim, 1e12)
        assert tiny_sim.bank.deposit is None

    def test_early_withdrawal_returns_principal(self, tiny_sim):
        commands.create_deposit(tiny_sim, 100_000)
        assert commands.withdraw_deposit(tiny_sim)
        assert tiny_sim.ec.money == START_MONEY
        assert tiny_sim.bank.deposit is None
        assert "broken early" in tiny_sim.ec.logs[0].message
        assert not commands.withdraw_deposit(tiny_sim)

    def test_withdrawal_after_a_year(self, tiny_sim):
        commands.create_deposit(tiny_sim, 100_000)
        tiny_sim.clock.date = datetime(1951, 3, 1)
        assert commands.withdraw_deposit(tiny_sim)
        assert tiny_sim.ec.money == START_MONEY + 5_000
        assert tiny_sim.bank.deposit_profit_last_month == 5_000


class TestShares:
    def test_buy_and_sell(self, tiny_sim):
        sim = tiny_sim
        cid = sim.mkt.ids[0]
        price = float(sim.mkt.price[0])

        assert commands.buy_shares(sim, cid, 10)
        assert sim.pf.holdings[cid].shares == 10
        assert sim.ec.money == pytest.approx(START_MONEY - price * 10 * 1.01)

        assert commands.sell_shares(sim, cid, 4)
        assert sim.pf.holdings[cid].shares == 6
        assert sim.ec.logs[0].kind == "success"

    @pytest.mark.parametrize("amount", [0, -3, 1.5, True])
    def test_bad_share_counts(self, tiny_sim, amount):
        assert not commands.buy_shares(tiny_sim, tiny_sim.mkt.ids[0], amount)
        assert not commands.sell_shares(tiny_sim, tiny_sim.mkt.ids[0], amount)

    def test_unknown_company(self, tiny_sim):
        assert not commands.buy_shares(tiny_sim, "acme", 1)
        assert not commands.sell_shares(tiny_sim, "acme", 1)

    def test_cannot_oversell(self, tiny_sim):
        cid = tiny_sim.mkt.ids[0]
        assert not commands.sell_shares(tiny_sim, cid, 1)
        commands.buy_shares(tiny_sim, cid, 2)
        assert not commands.sell_shares(tiny_sim, cid, 3)

    def test_max_shares(self):
        sim = _quiet(max_shares=5)
        cid = sim.mkt.ids[0]
        assert commands.buy_shares(sim, cid, 5)
        assert not commands.buy_shares(sim, cid, 1)

    def test_not_enough_cash(self, tiny_sim):
        tiny_sim.ec.money = 0.0
        assert not commands.buy_shares(tiny_sim, tiny_sim.mkt.ids[0], 1)
        assert tiny_sim.pf.holdings == {}


class TestLand:
    def test_bid_moves_only_the_difference(self, tiny_sim):
        ec = tiny_sim.ec
        assert not commands.place_bid(tiny_sim, 1_000)  # no auction open
        ec.auction = AuctionState(year=1950, land_value=500_000, rival_bid=550_000)

        assert commands.place_bid(tiny_sim, 600_000)
        assert ec.money == START_MONEY - 600_000
        assert commands.place_bid(tiny_sim, 100_000)
        assert ec.money == START_MONEY - 100_000
        assert commands.place_bid(tiny_sim, 0)
        assert ec.money == START_MONEY
        assert not commands.place_bid(tiny_sim, -1)
        assert not commands.place_bid(tiny_sim, 1e12)

    def test_developer_land(self, tiny_sim):
        assert commands.buy_land_from_developer(tiny_sim)
        assert tiny_sim.ec.money == START_MONEY - 2_500_000
        assert len(tiny_sim.fac.ids) == 2
        assert tiny_sim.fac.capacity[1] == 20
        assert tiny_sim.fac.target[1] == 16

    def test_developer_land_limits(self, tiny_sim):
        tiny_sim.ec.money = 100.0
        assert not commands.buy_land_from_developer(tiny_sim)

        sim = _quiet(factory_limit_base=1)
        assert not commands.buy_land_from_developer(sim)
        assert sim.ec.logs[0].kind == "danger"

    def test_developer_plot_fills_the_site_won_at_auction(self):
        sim = _quiet(factory_limit_base=2, start_date="1950-12-31")
        sim.ec.auction = AuctionState(year=1950, land_value=500_000, rival_bid=550_000)
        assert commands.place_bid(sim, 600_000)
        assert commands.buy_land_from_developer(sim)
        assert len(sim.fac.ids) == 2

        sim.run(3)  # into 1951-01-01

        assert sim.clock.year == 1951
        assert len(sim.fac.ids) == 2
        assert sim.ec.auction is None
        assert sim.ec.auction_result is not None
        assert not sim.ec.auction_result.won
        assert any("bid refunded" in e.message for e in sim.ec.logs)

    def test_dismiss_result(self, tiny_sim):
        assert not commands.dismiss_auction_result(tiny_sim)
        tiny_sim.ec.auction_result = AuctionResult(
            year=1950, won=False, user_bid=0.0, rival_bid=1
        )
        assert commands.dismiss_auction_result(tiny_sim)
        assert tiny_sim.ec.auction_result is None

    def test_expansions_from_2025(self, tiny_sim):
        sim = tiny_sim
        assert not commands.buy_factory_expansion(sim)

        sim.clock.date = datetime(2025, 1, 1)
        sim.ec.money = 1e10
        assert commands.buy_factory_expansion(sim)
        assert commands.buy_showroom_expansion(sim)
        assert sim.ec.factory_expansion_level == 1
        assert sim.ec.showroom_expansion_level == 1
        assert sim.ec.money == 1e10 - 750_000_000
        assert commands.buy_factory_expansion(sim)
        assert sim.ec.money == 1e10 - 1_350_000_000

    def test_expansion_unlocks_showrooms(self):
        sim = _quiet(showroom_limit_base=1, start_date="2025-01-01")
        sim.ec.money = 1e10
        assert not commands.buy_dealership(sim)
        assert commands.buy_showroom_expansion(sim)
        assert commands.buy_dealership(sim)


def _offer(quantity: int = 10) -> ContractOffer:
    return ContractOffer(
        kind="domestic",
        contractor="City Taxi Co.",
        class_id="A",
        model_name="Runabout",
        quantity=quantity,
        base_price=8150,
        unit_price=9000,
        unit_cost=7900,
        date="1950-02-01",
    )


class TestContractOffers:
    def test_nothing_pending(self, producing_sim):
        assert not commands.accept_contract_offer(producing_sim)
        assert not commands.reject_contract_offer(producing_sim)

    def test_accept_delivers_what_is_in_stock(self, producing_sim):
        sim = producing_sim
        sim.fac.inventory[0] = 4
        sim.ec.pending_offer = _offer(10)
        commands.set_speed(sim, 10)
        throttle(sim.clock)

        assert commands.accept_contract_offer(sim)

        assert sim.fac.inventory[0] == 0
        assert sim.ec.money == START_MONEY + 36_000
        assert sim.ec.pending_offer is None
        assert sim.ec.contract_history[0].fulfilled == 4
        assert sim.ec.domestic_contracts_this_year == 1
        assert not sim.clock.auto_throttled
        assert sim.clock.speed == 10
        assert sim.ec.cars_sold == 0

    def test_accept_without_stock_keeps_offer_pending(self, producing_sim):
        sim = producing_sim
        offer = _offer()
        sim.ec.pending_offer = offer
        throttle(sim.clock)

        assert not commands.accept_contract_offer(sim)
        assert sim.ec.pending_offer is offer
        assert sim.clock.auto_throttled
        assert sim.ec.money == START_MONEY
        assert sim.ec.contract_history == []
        np.testing.assert_array_equal(sim.fac.inventory, [0])

        assert commands.reject_contract_offer(sim)
        assert sim.ec.pending_offer is None
        assert not sim.clock.auto_throttled

    def test_reject(self, producing_sim):
        producing_sim.ec.pending_offer = _offer()
        throttle(producing_sim.clock)
        assert commands.reject_contract_offer(producing_sim)
        assert producing_sim.ec.pending_offer is None
        assert not producing_sim.clock.auto_throttled
