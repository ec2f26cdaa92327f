# src/autotycoon/systems/goods_market.py
"""
Market demand engine: population, segmented buyer pools, desirability,
demand allocation and sales against dealership throughput and inventory.
"""
from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np
from numpy.random import Generator

from autotycoon.catalog import Catalog, engine_mismatch
from autotycoon.helpers import append_slot, apply_inflation, apportion_cumulative
from autotycoon.logging import DEEP_DEBUG, getLogger
from autotycoon.roles import CarModel, Dealership, Economy, Factory
from autotycoon.systems.production import draw_inventory, inventory_by_model
from autotycoon.typing import Bool1D, Float1D, Float2D, Int1D, Int2D

log = getLogger("autotycoon")

SEGMENTS = ("Lower", "Middle", "Higher")
_SEG = {name: k for k, name in enumerate(SEGMENTS)}
MIDDLE = _SEG["Middle"]

MIN_DESIRABILITY = 5.0
#: gate: never sell above hard cap × this factor
HARD_CAP_TOLERANCE = 1.5
#: gate: never sell above inflated unit cost × this factor
MAX_MARKUP = 10


def new_dealerships() -> Dealership:
    """An empty Dealership role (no slots)."""
    return Dealership(
        ids=[],
        names=[],
        capacity=np.empty(0, np.int64),
        level=np.empty(0, np.int64),
        workers=np.empty(0, np.int64),
        upgrade_cost=np.empty(0, np.int64),
        active=np.empty(0, np.bool_),
        sales=np.empty(0, np.int64),
    )


def open_dealership(
    dlr: Dealership,
    *,
    name: str,
    capacity: int,
    workers: int,
    upgrade_cost: int,
) -> int:
    """Append a new active level-1 dealership; return its slot."""
    slot = len(dlr.ids)
    return append_slot(
        dlr,
        ids=f"dealer-{slot + 1}",
        names=name,
        capacity=capacity,
        level=1,
        workers=workers,
        upgrade_cost=upgrade_cost,
        active=True,
        sales=0,
    )


def upgrade_dealership(dlr: Dealership, i: int) -> None:
    """+1 level, +10 capacity, upgrade cost ×1.5 (floored)."""
    dlr.level[i] += 1
    dlr.capacity[i] += 10
    dlr.upgrade_cost[i] = int(np.floor(dlr.upgrade_cost[i] * 1.5))


# ───────────────────────── population & demand ─────────────────────────
def grow_population(ec: Economy) -> int:
    """
    Logistic monthly growth with a floor rate::

        r   = max(r_min, r_base · (1 − pop / capacity))
        pop = floor(pop · (1 + r / 12))
    """
    rate = max(
        ec.min_growth_rate,
        ec.base_growth_rate * (1.0 - ec.population / ec.city_capacity),
    )
    ec.population = math.floor(ec.population * (1.0 + rate / 12.0))
    log.info(f"  Population grew to {ec.population:,} (rate={rate:.4f})")
    return ec.population


def calc_segment_demand(
    population: int,
    month: int,
    *,
    seasonality: Sequence[float],
    per_thousand: float,
    shares: Sequence[float],
    noise: float,
    rng: Generator,
) -> Int1D:
    """
    Buyers this month per social segment.

    Rule
    ----
        D   = round(pop / 1000 · per_thousand · season[month] · U(1−noise, 1+noise))
        D_s = floor(D · share_s)
    """
    shock = rng.uniform(1.0 - noise, 1.0 + noise)
    total = math.floor(
        population / 1000.0 * per_thousand * seasonality[month - 1] * shock + 0.5
    )
    buyers = np.floor(total * np.asarray(shares, dtype=np.float64)).astype(np.int64)
    log.info(
        f"  Market demand: {total} buyers "
        f"(Lower={buyers[0]}, Middle={buyers[1]}, Higher={buyers[2]})"
    )
    return buyers


def calc_desirability(cars: CarModel, catalog: Catalog, *, multiplier: float) -> Float1D:
    """
    Desirability score per model (before segmentation).

    Starts at 100, then in order: class-priority bonus, price penalty
    (linear between max price and hard cap, quartic beyond hard cap),
    engine/class mismatch, interior quality, synergy; floored at 5.
    """
    n = len(cars.ids)
    out = np.empty(n, dtype=np.float64)
    for j in range(n):
        cc = catalog.car_class(cars.class_id[j])
        price = float(cars.price[j])
        score = 100.0

        if cc.priority == "Economy":
            score += min(50.0, max(0.0, 1500.0 - price) / 10.0)
        elif cc.priority in ("Performance", "Power"):
            score += (cars.power[j] - 50.0) * 0.5
        elif cc.priority in ("Luxury", "Status"):
            score += cars.style[j] - 20.0

        hard_cap = cc.hard_cap * multiplier
        max_price = cc.max_price * multiplier
        if price > hard_cap:
            score *= 1.0 / (price / hard_cap) ** 4
        elif price > max_price:
            band = max(hard_cap - max_price, 1.0)
            score *= max(0.1, 1.0 - 0.5 * (price - max_price) / band)

        score *= engine_mismatch(cc.id, float(cars.power[j]))
        score *= 1.0 + (cars.interior_quality[j] - 10.0) / 200.0
        score *= cars.synergy[j] / 100.0
        out[j] = max(MIN_DESIRABILITY, score)

    cars.desirability[:] = out
    return out


def segment_weights(cars: CarModel, catalog: Catalog, desirability: Float1D) -> Float2D:
    """Place each model's desirability in its primary and secondary segments."""
    w = np.zeros((len(cars.ids), len(SEGMENTS)), dtype=np.float64)
    for j, class_id in enumerate(cars.class_id):
        cc = catalog.car_class(class_id)
        w[j, _SEG[cc.segment]] = desirability[j]
        for sm in cc.secondary:
            w[j, _SEG[sm.segment]] = desirability[j] * sm.multiplier
    return w


def allocate_model_demand(
    buyers: Int1D,
    weights: Float2D,
    *,
    jitter: float,
    rng: Generator,
) -> Int2D:
    """
    Split each segment's buyers across models by desirability share.

    Rule
    ----
        d_js = floor(B_s · w_js / Σ_k w_ks · U(1−jitter, 1+jitter))

    Returns
    -------
    Int2D
        Per-model, per-segment demand, shape ``(n_models, 3)``.
    """
    col_sum = weights.sum(axis=0)
    share = np.divide(weights, col_sum, out=np.zeros_like(weights), where=col_sum > 0)
    noise = rng.uniform(1.0 - jitter, 1.0 + jitter, size=weights.shape)
    return np.floor(buyers * share * noise).astype(np.int64)


def sales_gate(cars: CarModel, catalog: Catalog, *, multiplier: float) -> Bool1D:
    """
    Whether each model is sellable at its current price.

    A model is withdrawn from sale when priced above 1.5× its inflated class
    hard cap or above 10× its inflated unit cost.
    """
    ok = np.ones(len(cars.ids), dtype=np.bool_)
    for j, class_id in enumerate(cars.class_id):
        cc = catalog.car_class(class_id)
        cap = apply_inflation(cc.hard_cap, cc.sensitivity, multiplier) * HARD_CAP_TOLERANCE
        markup = math.floor(cars.production_cost[j] * multiplier * MAX_MARKUP)
        ok[j] = cars.price[j] <= cap and cars.price[j] <= markup
    return ok


def unit_costs(cars: CarModel, *, multiplier: float) -> Float1D:
    """Inflated unit cost (COGS) per model."""
    return np.array(
        [
            apply_inflation(c, s, multiplier)
            for c, s in zip(cars.production_cost, cars.sensitivity)
        ],
        dtype=np.float64,
    )


def cars_sell_to_market(
    cars: CarModel,
    fac: Factory,
    dlr: Dealership,
    demand: Int2D,
    *,
    multiplier: float,
    sellable: Bool1D,
) -> int:
    """
    Turn per-model demand into realised sales.

    Models are served in slot order against a running pool of active
    dealership capacity, then capped by the inventory of the factories
    building them; sold units are drained from those factories in slot
    order. Counters (monthly, breakdown, annual, all-time) and popularity
    are updated in place.

    Returns
    -------
    int
        Units sold this month.
    """
    n = len(cars.ids)
    wanted = demand.sum(axis=1)
    cars.demand[:] = wanted

    throughput = int(dlr.capacity[dlr.active].sum())
    stock = inventory_by_model(fac, n)
    cogs = unit_costs(cars, multiplier=multiplier)

    cars.sales[:] = 0
    cars.breakdown[:] = 0
    for j in range(n):
        if not sellable[j] or wanted[j] <= 0:
            continue
        sold = min(int(wanted[j]), throughput, int(stock[j]))
        if sold <= 0:
            continue
        draw_inventory(fac, fac.model == j, sold)
        throughput -= sold

        split = np.floor(sold * demand[j] / wanted[j]).astype(np.int64)
        split[MIDDLE] += sold - int(split.sum())
        cars.breakdown[j] = split
        cars.sales[j] = sold
        if log.isEnabledFor(DEEP_DEBUG):
            log.deep(
                f"    {cars.names[j]}: wanted={int(wanted[j])} sold={sold} "
                f"breakdown={split.tolist()} throughput left={throughput}"
            )

    revenue = cars.sales * cars.price
    profit = cars.sales * (cars.price - cogs)
    cars.total_sales += cars.sales
    cars.total_profit += profit
    cars.year_sales += cars.sales
    cars.year_revenue += revenue
    cars.year_profit += profit
    cars.year_cogs += cars.sales * cogs
    cars.popularity[:] = np.floor(cars.popularity * 0.9 + cars.desirability * 0.1)

    total = int(cars.sales.sum())
    log.info(f"  Cars sold: {total} (demand={int(wanted.sum())}, left throughput={throughput})")
    if log.isEnabledFor(logging.DEBUG):
        log.debug(f"  Per-model sales: {cars.sales.tolist()}")
        log.debug(f"  Unsellable models: {np.flatnonzero(~sellable).tolist()}")
    return total


def dealerships_book_sales(dlr: Dealership, total: int) -> None:
    """
    Distribute *total* sales over active dealerships by capacity share,
    using cumulative floors so the parts sum exactly to *total*.
    """
    weights = np.where(dlr.active, dlr.capacity, 0).astype(np.float64)
    dlr.sales[:] = apportion_cumulative(total, weights)
