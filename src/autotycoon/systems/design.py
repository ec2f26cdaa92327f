# src/autotycoon/systems/design.py
"""
Car model design: create, restyle and retire player models.
"""
from __future__ import annotations

import logging
from typing import Mapping

import numpy as np

from autotycoon.catalog import PART_KINDS, Catalog, derive_model_stats, synergy_score
from autotycoon.helpers import append_slot, drop_slot
from autotycoon.roles import CarModel, Factory

log = logging.getLogger("autotycoon")

INITIAL_POPULARITY = 50.0


def new_car_models() -> CarModel:
    """An empty CarModel role (no slots)."""
    f64 = lambda: np.empty(0, np.float64)  # noqa: E731
    i64 = lambda: np.empty(0, np.int64)  # noqa: E731
    return CarModel(
        ids=[],
        names=[],
        class_id=[],
        engine=[],
        chassis=[],
        body=[],
        interior=[],
        price=f64(),
        production_cost=i64(),
        sensitivity=f64(),
        power=f64(),
        weight=f64(),
        safety=f64(),
        style=f64(),
        reliability=f64(),
        interior_quality=f64(),
        synergy=f64(),
        popularity=f64(),
        demand=i64(),
        desirability=f64(),
        sales=i64(),
        breakdown=np.empty((0, 3), np.int64),
        total_sales=i64(),
        total_profit=f64(),
        year_sales=i64(),
        year_revenue=f64(),
        year_profit=f64(),
        year_cogs=f64(),
        last_year_sales=i64(),
        last_year_revenue=f64(),
        last_year_profit=f64(),
        last_year_cogs=f64(),
        year_introduced=i64(),
    )


def _next_id(cars: CarModel) -> str:
    used = [int(i.split("-")[1]) for i in cars.ids if i.startswith("model-")]
    return f"model-{max(used, default=0) + 1}"


def model_synergy(catalog: Catalog, class_id: str, parts: Mapping[str, str]) -> tuple[int, list[str]]:
    """Synergy score and feedback of a class with a ``kind -> part id`` build."""
    return synergy_score(
        catalog.car_class(class_id), [catalog.part(parts[k]) for k in PART_KINDS]
    )


def add_car_model(
    cars: CarModel,
    catalog: Catalog,
    *,
    name: str,
    class_id: str,
    parts: Mapping[str, str],
    price: float,
    year: int,
) -> int:
    """
    Append a new model built from *parts* (``kind -> part id``).

    Stats are derived from the catalog; popularity starts at 50 and all
    sales counters at zero.

    Returns
    -------
    int
        Slot of the new model.
    """
    cc = catalog.car_class(class_id)
    chosen = [catalog.part(parts[k]) for k in PART_KINDS]
    stats = derive_model_stats(cc, chosen)
    synergy, _ = synergy_score(cc, chosen)
    idx = append_slot(
        cars,
        ids=_next_id(cars),
        names=name,
        class_id=class_id,
        engine=parts["engine"],
        chassis=parts["chassis"],
        body=parts["body"],
        interior=parts["interior"],
        price=price,
        production_cost=stats.production_cost,
        sensitivity=stats.sensitivity,
        power=stats.power,
        weight=stats.weight,
        safety=stats.safety,
        style=stats.style,
        reliability=stats.reliability,
        interior_quality=stats.interior_quality,
        synergy=synergy,
        popularity=INITIAL_POPULARITY,
        demand=0,
        desirability=0.0,
        sales=0,
        breakdown=[0, 0, 0],
        total_sales=0,
        total_profit=0.0,
        year_sales=0,
        year_revenue=0.0,
        year_profit=0.0,
        year_cogs=0.0,
        last_year_sales=0,
        last_year_revenue=0.0,
        last_year_profit=0.0,
        last_year_cogs=0.0,
        year_introduced=year,
    )
    log.info(
        f"  New model '{name}' (class {class_id}): cost={stats.production_cost}, "
        f"synergy={synergy}, price={price:,.0f}"
    )
    return idx


def restyle(
    cars: CarModel,
    catalog: Catalog,
    j: int,
    *,
    class_id: str,
    parts: Mapping[str, str],
    year: int,
) -> None:
    """
    Re-engineer model *j* with a new class and/or parts.

    Derived stats are recomputed and the model starts over as a new
    introduction: monthly, breakdown and all-time sales and profit reset.
    """
    cc = catalog.car_class(class_id)
    chosen = [catalog.part(parts[k]) for k in PART_KINDS]
    stats = derive_model_stats(cc, chosen)
    synergy, _ = synergy_score(cc, chosen)

    cars.class_id[j] = class_id
    cars.engine[j] = parts["engine"]
    cars.chassis[j] = parts["chassis"]
    cars.body[j] = parts["body"]
    cars.interior[j] = parts["interior"]

    cars.production_cost[j] = stats.production_cost
    cars.sensitivity[j] = stats.sensitivity
    cars.power[j] = stats.power
    cars.weight[j] = stats.weight
    cars.safety[j] = stats.safety
    cars.style[j] = stats.style
    cars.reliability[j] = stats.reliability
    cars.interior_quality[j] = stats.interior_quality
    cars.synergy[j] = synergy

    cars.sales[j] = 0
    cars.breakdown[j] = 0
    cars.total_sales[j] = 0
    cars.total_profit[j] = 0.0
    cars.year_introduced[j] = year


def is_structural_change(cars: CarModel, j: int, class_id: str, parts: Mapping[str, str]) -> bool:
    """Whether a new class or part set differs from model *j*'s current build."""
    if cars.class_id[j] != class_id:
        return True
    return any(getattr(cars, k)[j] != parts[k] for k in PART_KINDS)


def model_parts(cars: CarModel, j: int) -> dict[str, str]:
    return {k: getattr(cars, k)[j] for k in PART_KINDS}


def remove_car_model(cars: CarModel, fac: Factory, j: int) -> None:
    """
    Delete model *j*. Factories building it become unassigned; factories
    building later slots are re-indexed.
    """
    fac.model[fac.model == j] = -1
    fac.model[fac.model > j] -= 1
    log.info(f"  Model '{cars.names[j]}' retired")
    drop_slot(cars, j)
