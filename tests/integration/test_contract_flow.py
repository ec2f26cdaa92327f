"""Domestic fleet orders in automatic and offer resolution modes."""

import pytest

from autotycoon import commands
from autotycoon.simulation import Simulation

TICKS_TO_MARCH = 84


def _middle_class_maker(**overrides) -> Simulation:
    """A plant building a B-class car with contracts guaranteed every month."""
    sim = Simulation.init(
        seed=21,
        companies_per_category=1,
        domestic_min_rank=1,
        domestic_contract_chance=1.0,
        logging={"default_level": "ERROR"},
        **overrides,
    )
    assert commands.unlock_class(sim, "B")
    assert commands.create_car_model(
        sim, "Courier", "B", "small-i4", "frame", "small", "spartan"
    )
    assert commands.update_factory_settings(sim, "factory-1", model_id="model-1")
    return sim


def test_offer_mode_throttles_until_decided():
    sim = _middle_class_maker(contract_resolution="offer")
    commands.set_speed(sim, 5)

    sim.run(TICKS_TO_MARCH)

    offer = sim.ec.pending_offer
    assert offer is not None
    assert offer.kind == "domestic"
    assert offer.class_id == "B"
    assert 5 <= offer.quantity <= 50
    assert offer.unit_price >= offer.unit_cost
    assert sim.clock.auto_throttled
    assert sim.clock.speed == 1
    assert not commands.set_speed(sim, 10)

    money = sim.ec.money
    stock = int(sim.fac.inventory[0])
    assert commands.accept_contract_offer(sim)

    delivered = min(stock, offer.quantity)
    assert sim.fac.inventory[0] == stock - delivered
    assert sim.ec.money == money + delivered * offer.unit_price
    assert sim.ec.pending_offer is None
    assert sim.clock.speed == 5
    assert sim.ec.total_contract_units == delivered


def test_offer_blocks_new_rolls():
    sim = _middle_class_maker(contract_resolution="offer")
    sim.run(TICKS_TO_MARCH)
    first = sim.ec.pending_offer

    sim.run(31 * 3)  # into April
    assert sim.ec.pending_offer is first


def test_auto_mode_resolves_immediately():
    sim = _middle_class_maker()
    sim.run(TICKS_TO_MARCH)

    assert sim.ec.pending_offer is None
    assert not sim.clock.auto_throttled
    fulfilled = len(sim.ec.contract_history) == 1
    lost = any("order lost" in e.message for e in sim.ec.logs)
    assert fulfilled != lost
    if fulfilled:
        assert sim.ec.domestic_contracts_this_year == 1
        # fleet units never count toward prestige
        assert sim.ec.cars_sold == sim.ec.sales_history[-1].sales


@pytest.mark.parametrize("mode", ["auto", "offer"])
def test_yearly_cap(mode):
    sim = _middle_class_maker(contract_resolution=mode, domestic_contracts_per_year=0)
    sim.run(TICKS_TO_MARCH)
    assert sim.ec.pending_offer is None
    assert sim.ec.contract_history == []


def test_new_year_contract_counts_toward_closing_year():
    sim = _middle_class_maker(start_date="1950-12-31")
    sim.fac.inventory[0] = 200

    sim.run(3)  # into 1951-01-01

    assert sim.clock.year == 1951
    assert len(sim.ec.contract_history) == 1
    assert sim.ec.contract_history[0].date == "1951-01-01"
    # rolled before the annual reset, so the new year starts at zero
    assert sim.ec.domestic_contracts_this_year == 0
