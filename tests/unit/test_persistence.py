"""Save/load round trips, all-or-nothing loading and save slots."""

import json

import pytest

from autotycoon import commands
from autotycoon.persistence import (
    SlotInfo,
    delete_slot,
    list_slots,
    load_from_data,
    load_from_slot,
    save_to_slot,
    serialize,
    snapshot,
)
from autotycoon.records import AuctionResult, ContractOffer
from autotycoon.simulation import Simulation


def _fresh() -> Simulation:
    return Simulation.init(seed=999, companies_per_category=2, logging={"default_level": "ERROR"})


def _state(sim: Simulation) -> dict:
    return json.loads(serialize(sim))


@pytest.fixture
def played(producing_sim):
    sim = producing_sim
    commands.take_loan(sim, 200_000)
    commands.create_deposit(sim, 100_000)
    commands.buy_shares(sim, sim.mkt.ids[0], 50)
    sim.run(300)
    return sim


def test_snapshot_has_every_section(tiny_sim):
    snap = snapshot(tiny_sim)
    assert set(snap) == {
        "version", "t", "clock", "economy", "bank", "factories", "dealerships",
        "car_models", "stock_market", "portfolio", "rng",
    }
    assert "pending_offer" not in snap["economy"]
    assert "auction_result" not in snap["economy"]


def test_round_trip(played):
    other = _fresh()
    assert load_from_data(other, serialize(played))
    assert _state(other) == _state(played)
    assert other.cars.names == ["Runabout"]
    assert other.pf.holdings.keys() == played.pf.holdings.keys()
    assert other.bank.deposit is not None


def test_loaded_game_continues_identically(played):
    other = _fresh()
    load_from_data(other, snapshot(played))
    other.clock.paused = False

    played.run(84)
    other.run(84)

    assert _state(other) == _state(played)


def test_load_resets_transient_state(played):
    other = _fresh()
    other.ec.pending_offer = ContractOffer(
        kind="export", contractor="x", class_id="A", model_name="m",
        quantity=1, base_price=1, unit_price=1, unit_cost=1, date="1950-01-01",
    )
    other.ec.auction_result = AuctionResult(year=1950, won=True, user_bid=1.0, rival_bid=0)
    other.clock.auto_throttled = True

    assert load_from_data(other, serialize(played))

    assert other.clock.paused
    assert not other.clock.auto_throttled
    assert other.ec.pending_offer is None
    assert other.ec.auction_result is None


def _drop_factory_field(data):
    del data["factories"]["capacity"]
    return data


def _short_column(data):
    data["dealerships"]["capacity"] = []
    return data


def _dangling_model(data):
    data["factories"]["model"] = [7]
    return data


def _bad_money(data):
    data["economy"]["money"] = "lots"
    return data


def _bad_version(data):
    data["version"] = 99
    return data


def _stalled_clock(data):
    data["clock"]["speed"] = 0
    return data


def _runaway_clock(data):
    data["clock"]["speed"] = 100
    return data


def _negative_model(data):
    data["factories"]["model"] = [-3]
    return data


def _unknown_holding(data):
    data["portfolio"]["holdings"] = {"no-such-co": {"shares": 10, "avg_price": 1.0, "listing": 0}}
    return data


def _empty_holding(data):
    cid = data["stock_market"]["ids"][0]
    data["portfolio"]["holdings"] = {cid: {"shares": 0, "avg_price": 1.0, "listing": 0}}
    return data


@pytest.mark.parametrize(
    "corrupt",
    [
        _drop_factory_field,
        _short_column,
        _dangling_model,
        _bad_money,
        _bad_version,
        _stalled_clock,
        _runaway_clock,
        _negative_model,
        _unknown_holding,
        _empty_holding,
    ],
)
def test_bad_data_leaves_state_untouched(played, corrupt):
    target = _fresh()
    target.run(10)
    before = _state(target)

    assert not load_from_data(target, corrupt(_state(played)))
    assert _state(target) == before


@pytest.mark.parametrize("payload", ["{not json", "[]", b"42", "null"])
def test_unparseable_payloads(tiny_sim, payload):
    assert not load_from_data(tiny_sim, payload)
    assert tiny_sim.t == 0


class TestSlots:
    def test_save_list_load_delete(self, played, tmp_path):
        path = save_to_slot(played, "career_1", tmp_path / "saves")
        assert path.name == "career_1.json"
        assert path.is_file()

        slots = list_slots(tmp_path / "saves")
        assert slots == [
            SlotInfo(
                name="career_1",
                game_date=f"{played.clock.date:%Y-%m-%d}",
                money=played.ec.money,
            )
        ]

        other = _fresh()
        assert load_from_slot(other, "career_1", tmp_path / "saves")
        assert other.t == played.t

        assert delete_slot("career_1", tmp_path / "saves")
        assert not delete_slot("career_1", tmp_path / "saves")
        assert list_slots(tmp_path / "saves") == []

    def test_missing_slot(self, tiny_sim, tmp_path):
        assert not load_from_slot(tiny_sim, "nothing", tmp_path)

    def test_list_skips_unreadable_files(self, tiny_sim, tmp_path):
        save_to_slot(tiny_sim, "b", tmp_path)
        save_to_slot(tiny_sim, "a", tmp_path)
        (tmp_path / "junk.json").write_text("{oops")
        (tmp_path / "notes.txt").write_text("hello")

        assert [s.name for s in list_slots(tmp_path)] == ["a", "b"]

    def test_list_missing_directory(self, tmp_path):
        assert list_slots(tmp_path / "absent") == []

    @pytest.mark.parametrize("name", ["", "../evil", "a b", "x" * 65, "slot.json"])
    def test_invalid_slot_names(self, tiny_sim, tmp_path, name):
        with pytest.raises(ValueError, match="Invalid save slot"):
            save_to_slot(tiny_sim, name, tmp_path)
        with pytest.raises(ValueError):
            load_from_slot(tiny_sim, name, tmp_path)
        with pytest.raises(ValueError):
            delete_slot(name, tmp_path)
