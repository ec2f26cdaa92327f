"""Configuration merging and validation through Simulation.init()."""

from datetime import date, datetime

import pytest
from numpy.random import default_rng

from autotycoon.config import Config, ConfigValidator
from autotycoon.helpers import economic_multiplier
from autotycoon.simulation import Simulation


class TestPrecedence:
    def test_defaults(self):
        sim = Simulation.init(seed=0)
        assert isinstance(sim.config, Config)
        assert sim.config.seasonality[0] == 0.8
        assert sim.config.contract_resolution == "auto"
        assert sim.n_ticks == 2160
        assert sim.ec.money == 5_000_000.0
        assert sim.clock.date == datetime(1950, 2, 1)

    def test_yaml_then_kwargs(self, tmp_path):
        path = tmp_path / "game.yml"
        path.write_text("population: 60000\nmarket_noise: 0.1\n")

        sim = Simulation.init(path, seed=0, population=70_000)

        assert sim.ec.population == 70_000
        assert sim.config.market_noise == 0.1

    def test_mapping_config(self):
        sim = Simulation.init({"loan_markup": 2.0}, seed=0)
        assert sim.config.loan_markup == 2.0

    def test_yaml_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(TypeError, match="mapping"):
            Simulation.init(path)

    def test_config_is_frozen(self):
        sim = Simulation.init(seed=0)
        with pytest.raises(AttributeError):
            sim.config.market_noise = 0.5  # type: ignore[misc]

    def test_start_date_sets_price_level(self):
        sim = Simulation.init(seed=0, start_date=date(1960, 1, 1))
        assert sim.clock.year == 1960
        assert sim.ec.multiplier == pytest.approx(economic_multiplier(1960))

    def test_generator_seed_is_used_as_is(self):
        rng = default_rng(5)
        sim = Simulation.init(seed=rng)
        assert sim.rng is rng


class TestValidation:
    @pytest.mark.parametrize(
        "overrides, match",
        [
            ({"population": "big"}, "must be int"),
            ({"starting_money": True}, "must be int"),
            ({"market_noise": "x"}, "must be float"),
            ({"market_noise": 1.5}, "<= 1.0"),
            ({"population": 0}, ">= 1"),
            ({"seasonality": [1.0] * 11}, "list of 12"),
            ({"segment_shares": [0.5, -0.1, 0.6]}, "non-negative"),
            ({"unlocked_parts": ["small-i4", 3]}, "list of ids"),
            ({"overhead_min": 60_000}, "overhead_min"),
            ({"crisis_min_rank": 21}, "crisis_min_rank"),
            ({"contract_resolution": "manual"}, "contract_resolution"),
            ({"start_date": "1950-13-01"}, "YYYY-MM-DD"),
            ({"start_date": 1950}, "ISO date"),
            ({"pipeline_path": 3}, "str or None"),
            ({"logging": {"default_level": "LOUD"}}, "Invalid log level"),
            ({"logging": {"events": {"grow_population": 10}}}, "must be str"),
        ],
    )
    def test_invalid_values_raise(self, overrides, match):
        with pytest.raises(ValueError, match=match):
            Simulation.init(seed=0, **overrides)

    def test_unknown_unlock_raises(self):
        with pytest.raises(ValueError, match="Unknown catalog ids"):
            Simulation.init(seed=0, unlocked_classes=["A", "Q"])

    def test_missing_pipeline_file(self, tmp_path):
        with pytest.raises(ValueError, match="does not exist"):
            Simulation.init(seed=0, pipeline_path=str(tmp_path / "nope.yml"))

    def test_pipeline_path_must_be_file(self, tmp_path):
        with pytest.raises(ValueError, match="not a file"):
            ConfigValidator.validate_pipeline_path(str(tmp_path))

    def test_pipeline_suffix_warns(self, tmp_path):
        path = tmp_path / "pipeline.txt"
        path.write_text("events:\n  - advance_clock\n")
        with pytest.warns(UserWarning, match="extension"):
            ConfigValidator.validate_pipeline_path(str(path))

    def test_segment_shares_sum_warns(self):
        with pytest.warns(UserWarning, match="segment_shares"):
            Simulation.init(seed=0, segment_shares=[0.5, 0.5, 0.5])

    def test_overcrowded_city_warns(self):
        with pytest.warns(UserWarning, match="city_capacity"):
            ConfigValidator.validate_config({"population": 10, "city_capacity": 5})

    def test_growth_rates_warn(self):
        with pytest.warns(UserWarning, match="min_growth_rate"):
            ConfigValidator.validate_config(
                {"min_growth_rate": 0.5, "base_growth_rate": 0.1}
            )
