# src/autotycoon/simulation.py
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping

# noinspection PyPackageRequirements
import yaml

# noinspection PyPackageRequirements
from numpy.random import Generator, default_rng

import autotycoon.events  # noqa: F401 - needed to register events
from autotycoon.catalog import Catalog, load_catalog
from autotycoon.clock import Clock
from autotycoon.config import Config
from autotycoon.core.default_pipeline import create_default_pipeline
from autotycoon.core.pipeline import Pipeline
from autotycoon.helpers import economic_multiplier
from autotycoon.logging import getLogger
from autotycoon.roles import (
    Bank,
    CarModel,
    Dealership,
    Economy,
    Factory,
    Portfolio,
    StockMarket,
)
from autotycoon.systems.design import new_car_models
from autotycoon.systems.goods_market import new_dealerships, open_dealership
from autotycoon.systems.production import new_factories, open_factory
from autotycoon.systems.stock_market import init_stock_market
from autotycoon.systems.valuation import (
    PrestigeStatus,
    company_valuation,
    prestige_rank,
    prestige_tier,
)

__all__ = ["Simulation"]

log = getLogger(__name__)


# helpers
# ---------------------------------------------------------------------------
def _read_yaml(obj: str | Path | Mapping[str, Any] | None) -> Dict[str, Any]:
    """Return a plain dict – {} if *obj* is None."""
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    p = Path(obj)
    with p.open("rt", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, Mapping):
        raise TypeError(f"config root must be mapping, got {type(data)!r}")
    return dict(data)


def _package_defaults() -> Dict[str, Any]:
    """Load autotycoon/defaults.yml"""
    txt = resources.files("autotycoon").joinpath("defaults.yml").read_text()
    return yaml.safe_load(txt) or {}


def _to_datetime(val: str | date | datetime) -> datetime:
    if isinstance(val, datetime):
        return val
    if isinstance(val, date):
        return datetime(val.year, val.month, val.day)
    return datetime.fromisoformat(str(val))


def _check_unlocks(catalog: Catalog, classes: list[str], parts: list[str]) -> None:
    unknown = [c for c in classes if c not in catalog.classes]
    unknown += [p for p in parts if p not in catalog.parts]
    if unknown:
        raise ValueError(f"Unknown catalog ids in unlocked_classes/unlocked_parts: {unknown}")


# Simulation
# ---------------------------------------------------------------------
@dataclass(slots=True)
class Simulation:
    """
    Facade that owns the one game world and drives it tick by tick.

    One call to `run` → *n* calls to `step`; one `step` is one 8-hour tick
    of the event pipeline. Player actions live in :mod:`autotycoon.commands`.
    """

    # core state
    rng: Generator
    clock: Clock
    ec: Economy
    fac: Factory
    dlr: Dealership
    cars: CarModel
    mkt: StockMarket
    pf: Portfolio
    bank: Bank

    # static data and configuration
    catalog: Catalog
    config: Config

    # event pipeline
    pipeline: Pipeline

    # ticks
    n_ticks: int  # run length
    t: int  # ticks executed

    # Constructor
    # ---------------------------------------------------------------------
    @classmethod
    def init(
        cls,
        config: str | Path | Mapping[str, Any] | None = None,
        **overrides: Any,  # anything here wins last
    ) -> "Simulation":
        """
        Build a Simulation.

        Order of precedence (later overrides earlier):

            1. package defaults  (autotycoon/defaults.yml)
            2. *config*  (Path / str / Mapping / None)
            3. explicit keyword arguments (**overrides)
        """
        # 1 + 2 + 3 → one merged dict
        cfg_dict: Dict[str, Any] = _package_defaults()
        cfg_dict.update(_read_yaml(config))
        cfg_dict.update(overrides)

        from autotycoon.config import ConfigValidator

        ConfigValidator.validate_config(cfg_dict)

        pipeline_path = cfg_dict.get("pipeline_path")
        if pipeline_path is not None:
            ConfigValidator.validate_pipeline_path(pipeline_path)

        # Random-seed handling
        seed_val = cfg_dict.pop("seed", None)
        rng: Generator = (
            seed_val if isinstance(seed_val, Generator) else default_rng(seed_val)
        )

        catalog = load_catalog(cfg_dict.pop("catalog_path", None))
        _check_unlocks(catalog, cfg_dict["unlocked_classes"], cfg_dict["unlocked_parts"])

        return cls._from_params(rng=rng, catalog=catalog, **cfg_dict)

    @staticmethod
    def _configure_logging(log_config: Dict[str, Any]) -> None:
        """
        Configure logging levels for autotycoon loggers.

        Parameters
        ----------
        log_config : dict
            Logging configuration with keys:
            - default_level: str (e.g., 'INFO', 'DEBUG')
            - events: dict[str, str] (per-event overrides)
        """
        import logging

        from autotycoon.logging import DEEP_DEBUG

        def _level(name: str) -> int:
            name = name.upper()
            return DEEP_DEBUG if name == "DEEP_DEBUG" else getattr(logging, name)

        default_level = log_config.get("default_level", "INFO")
        logging.getLogger("autotycoon").setLevel(_level(default_level))

        event_levels = log_config.get("events", {})
        for event_name, level in event_levels.items():
            logger_name = f"autotycoon.events.{event_name}"
            logging.getLogger(logger_name).setLevel(_level(level))

    @classmethod
    def _from_params(cls, *, rng: Generator, catalog: Catalog, **p: Any) -> "Simulation":
        start = _to_datetime(p["start_date"])

        ec = Economy(
            money=float(p["starting_money"]),
            population=int(p["population"]),
            city_capacity=int(p["city_capacity"]),
            base_growth_rate=float(p["base_growth_rate"]),
            min_growth_rate=float(p["min_growth_rate"]),
            multiplier=economic_multiplier(start.year, p["inflation_base"]),
            unlocked_classes=list(p["unlocked_classes"]),
            unlocked_parts=list(p["unlocked_parts"]),
        )

        fac = new_factories()
        open_factory(
            fac,
            name="Main Factory",
            capacity=100,
            efficiency=78.0,
            workers=50,
            upgrade_cost=100_000,
            target=50,
        )
        dlr = new_dealerships()
        open_dealership(dlr, name="City Center", capacity=30, workers=20, upgrade_cost=50_000)

        mkt = init_stock_market(
            catalog, year=start.year, per_category=p["companies_per_category"], rng=rng
        )

        cfg_values = {f.name: p[f.name] for f in fields(Config)}
        cfg_values["seasonality"] = tuple(float(x) for x in p["seasonality"])
        cfg_values["segment_shares"] = tuple(float(x) for x in p["segment_shares"])
        cfg = Config(**cfg_values)

        pipeline_path = p.get("pipeline_path")
        if pipeline_path is not None:
            pipeline = Pipeline.from_yaml(pipeline_path)
        else:
            pipeline = create_default_pipeline()

        if "logging" in p:
            cls._configure_logging(p["logging"])

        log.info(f"New game on {start:%Y-%m-%d} with {ec.money:,.0f} in cash")
        return cls(
            rng=rng,
            clock=Clock(date=start),
            ec=ec,
            fac=fac,
            dlr=dlr,
            cars=new_car_models(),
            mkt=mkt,
            pf=Portfolio(),
            bank=Bank(),
            catalog=catalog,
            config=cfg,
            pipeline=pipeline,
            n_ticks=int(p["n_ticks"]),
            t=0,
        )

    # derived views
    # ---------------------------------------------------------------------
    @property
    def prestige_rank(self) -> int:
        """Prestige rank (1..21) from lifetime market sales."""
        return prestige_rank(self.catalog.prestige, self.ec.cars_sold)

    @property
    def prestige(self) -> PrestigeStatus:
        return prestige_tier(self.catalog.prestige, self.ec.cars_sold)

    @property
    def valuation(self) -> float:
        """Book value: cash, deposit, facilities, inventory and shares."""
        return company_valuation(
            self.ec, self.bank, self.fac, self.dlr, self.cars, self.mkt, self.pf
        )

    # public API
    # ---------------------------------------------------------------------
    def run(self, n_ticks: int | None = None) -> None:
        """
        Advance the simulation *n_ticks* ticks
        (defaults to the ``n_ticks`` passed at construction).

        Returns
        -------
        None   (state is mutated in-place)
        """
        n = n_ticks if n_ticks is not None else self.n_ticks
        for _ in range(int(n)):
            self.step()

    def step(self) -> None:
        """
        Advance the world by exactly one tick using the event pipeline.

        Does nothing while the clock is paused.
        """
        if self.clock.paused:
            return

        self.t += 1
        self.pipeline.execute(self)

    def get_role(self, name: str) -> Any:
        """
        Get role instance by name.

        Parameters
        ----------
        name : str
            Role name (case-insensitive): 'Factory', 'Dealership', 'CarModel',
            'StockMarket'.

        Raises
        ------
        ValueError
            If role name not found.

        Examples
        --------
        >>> sim = Simulation.init(seed=1)
        >>> fac = sim.get_role("Factory")
        >>> assert fac is sim.fac
        """
        role_map = {
            "factory": self.fac,
            "dealership": self.dlr,
            "carmodel": self.cars,
            "stockmarket": self.mkt,
        }

        name_lower = name.lower()
        if name_lower not in role_map:
            available = list(role_map.keys())
            raise ValueError(f"Role '{name}' not found. Available roles: {available}")

        return role_map[name_lower]

    def get_event(self, name: str) -> Any:
        """
        Get event instance from pipeline by name.

        Raises
        ------
        KeyError
            If event not found in pipeline.

        Examples
        --------
        >>> sim = Simulation.init(seed=1)
        >>> market = sim.get_event("resolve_car_market")
        """
        for event in self.pipeline.events:
            if event.name == name:
                return event

        available = [e.name for e in self.pipeline.events[:5]]
        raise KeyError(
            f"Event '{name}' not found in pipeline. "
            f"Available (first 5): {available}..."
        )
