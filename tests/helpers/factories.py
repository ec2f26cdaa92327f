"""
Reusable builders for role instances in unit / property tests.

* They construct the **full** dataclasses from `autotycoon.roles`.
* All vectors are initialised with small, deterministic defaults.
* You can override any field via keyword arguments.

Example
-------
>>> fac = mock_factory(3, inventory=np.array([0, 10, 1200]))
>>> cars = mock_car_models(2, price=np.array([8000.0, 9500.0]))
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import numpy as np

from autotycoon.roles import (
    Bank,
    CarModel,
    Dealership,
    Economy,
    Factory,
    Portfolio,
    StockMarket,
)

# ───────────────────────── default dictionaries ────────────────────────── #


def _economy_defaults() -> dict[str, Any]:
    return dict(
        money=5_000_000.0,
        population=50_000,
        city_capacity=1_600_000,
        base_growth_rate=0.02,
        min_growth_rate=0.001,
        multiplier=1.0,
        unlocked_classes=["A"],
        unlocked_parts=["small-i4", "frame", "small", "spartan"],
    )


def _factory_defaults(n: int) -> dict[str, Any]:
    return dict(
        ids=[f"factory-{i + 1}" for i in range(n)],
        names=[f"Factory {i + 1}" for i in range(n)],
        capacity=np.full(n, 100, dtype=np.int64),
        level=np.ones(n, dtype=np.int64),
        efficiency=np.full(n, 78.0, dtype=np.float64),
        wage_level=np.ones(n, dtype=np.float64),
        workers=np.full(n, 50, dtype=np.int64),
        upgrade_cost=np.full(n, 100_000, dtype=np.int64),
        active=np.ones(n, dtype=np.bool_),
        model=np.full(n, -1, dtype=np.intp),
        target=np.full(n, 50, dtype=np.int64),
        inventory=np.zeros(n, dtype=np.int64),
        production=np.zeros(n, dtype=np.int64),
    )


def _dealership_defaults(n: int) -> dict[str, Any]:
    return dict(
        ids=[f"dealer-{i + 1}" for i in range(n)],
        names=[f"Showroom {i + 1}" for i in range(n)],
        capacity=np.full(n, 30, dtype=np.int64),
        level=np.ones(n, dtype=np.int64),
        workers=np.full(n, 20, dtype=np.int64),
        upgrade_cost=np.full(n, 50_000, dtype=np.int64),
        active=np.ones(n, dtype=np.bool_),
        sales=np.zeros(n, dtype=np.int64),
    )


def _car_model_defaults(n: int) -> dict[str, Any]:
    f64 = lambda v: np.full(n, v, dtype=np.float64)  # noqa: E731
    i64 = lambda v: np.full(n, v, dtype=np.int64)  # noqa: E731
    # the starter build: A / small-i4 / frame / small / spartan
    return dict(
        ids=[f"model-{j + 1}" for j in range(n)],
        names=[f"Model {j + 1}" for j in range(n)],
        class_id=["A"] * n,
        engine=["small-i4"] * n,
        chassis=["frame"] * n,
        body=["small"] * n,
        interior=["spartan"] * n,
        price=f64(8150.0),
        production_cost=i64(7900),
        sensitivity=f64(0.35),
        power=f64(50.0),
        weight=f64(900.0),
        safety=f64(10.0),
        style=f64(15.0),
        reliability=f64(80.0),
        interior_quality=f64(5.0),
        synergy=f64(105.0),
        popularity=f64(50.0),
        demand=i64(0),
        desirability=f64(0.0),
        sales=i64(0),
        breakdown=np.zeros((n, 3), dtype=np.int64),
        total_sales=i64(0),
        total_profit=f64(0.0),
        year_sales=i64(0),
        year_revenue=f64(0.0),
        year_profit=f64(0.0),
        year_cogs=f64(0.0),
        last_year_sales=i64(0),
        last_year_revenue=f64(0.0),
        last_year_profit=f64(0.0),
        last_year_cogs=f64(0.0),
        year_introduced=i64(1950),
    )


def _stock_market_defaults(n: int) -> dict[str, Any]:
    return dict(
        ids=[f"automotive-{i}" for i in range(n)],
        names=[f"Apex Motors {i}" for i in range(n)],
        categories=["Automotive"] * n,
        sectors=["Automotive"] * n,
        history=[[2.0] for _ in range(n)],
        price=np.full(n, 2.0, dtype=np.float64),
        start_price=np.full(n, 2.0, dtype=np.float64),
        volatility=np.full(n, 0.1, dtype=np.float64),
        is_etf=np.zeros(n, dtype=np.bool_),
        protected=np.zeros(n, dtype=np.bool_),
        cycle_end=np.full(n, 1955, dtype=np.int64),
        cycle_target=np.full(n, 2.0, dtype=np.float64),
        formation_year=np.full(n, 1950, dtype=np.int64),
        listing=np.zeros(n, dtype=np.int64),
    )


# ───────────────────────── public factory helpers ──────────────────────── #


def mock_economy(**overrides: Any) -> Economy:
    """
    Return a fully-typed `Economy` at the default game start.

    Parameters
    ----------
    **overrides
        Field-value pairs that overwrite defaults.
    """
    return Economy(**(_economy_defaults() | overrides))


def mock_factory(n: int = 1, **overrides: Any) -> Factory:
    """
    Return a `Factory` role with *n* active, unassigned level-1 plants
    shaped like the main factory (capacity 100, efficiency 78%).
    """
    return Factory(**(_factory_defaults(n) | overrides))


def mock_dealership(n: int = 1, **overrides: Any) -> Dealership:
    """Return a `Dealership` role with *n* active 30-car showrooms."""
    return Dealership(**(_dealership_defaults(n) | overrides))


def mock_car_models(n: int = 1, **overrides: Any) -> CarModel:
    """
    Return a `CarModel` role with *n* copies of the starter class-A build,
    priced at the 1950 suggested price.
    """
    return CarModel(**(_car_model_defaults(n) | overrides))


def mock_stock_market(n: int = 1, **overrides: Any) -> StockMarket:
    """Return a `StockMarket` with *n* unprotected Automotive companies at 2.00."""
    return StockMarket(**(_stock_market_defaults(n) | overrides))


def mock_bank(**overrides: Any) -> Bank:
    return Bank(**overrides)


def mock_portfolio(**overrides: Any) -> Portfolio:
    return Portfolio(**overrides)


def at(year: int, month: int = 1, day: int = 1, hour: int = 0) -> datetime:
    """Shorthand for a simulated timestamp."""
    return datetime(year, month, day, hour)
