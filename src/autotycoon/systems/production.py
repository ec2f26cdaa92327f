# src/autotycoon/systems/production.py
"""
Production allocator: factory output, parking space and plant upgrades.
"""
from __future__ import annotations

import logging

import numpy as np

from autotycoon.catalog import Catalog
from autotycoon.helpers import append_slot
from autotycoon.logging import DEEP_DEBUG, getLogger
from autotycoon.roles import CarModel, Factory
from autotycoon.typing import Float1D, Int1D

log = getLogger("autotycoon")

PARKING_BASE = 1200
PARKING_PER_LEVEL = 200
MAX_FACTORY_LEVEL = 8


def new_factories() -> Factory:
    """An empty Factory role (no slots)."""
    return Factory(
        ids=[],
        names=[],
        capacity=np.empty(0, np.int64),
        level=np.empty(0, np.int64),
        efficiency=np.empty(0, np.float64),
        wage_level=np.empty(0, np.float64),
        workers=np.empty(0, np.int64),
        upgrade_cost=np.empty(0, np.int64),
        active=np.empty(0, np.bool_),
        model=np.empty(0, np.intp),
        target=np.empty(0, np.int64),
        inventory=np.empty(0, np.int64),
        production=np.empty(0, np.int64),
    )


def parking_capacity(
    level: Int1D,
    *,
    base: int = PARKING_BASE,
    per_level: int = PARKING_PER_LEVEL,
) -> Int1D:
    """Parking cap per factory: ``base + per_level * (level - 1)``."""
    return base + per_level * (np.asarray(level, dtype=np.int64) - 1)


def assigned_complexity(fac: Factory, cars: CarModel, catalog: Catalog) -> Float1D:
    """Complexity of each factory's assigned model class; 1.0 when unassigned."""
    out = np.ones(fac.model.size, dtype=np.float64)
    for i, j in enumerate(fac.model):
        if j >= 0:
            out[i] = catalog.car_class(cars.class_id[j]).complexity
    return out


def factories_run_production(
    fac: Factory,
    cars: CarModel,
    catalog: Catalog,
    *,
    parking_base: int = PARKING_BASE,
    parking_per_level: int = PARKING_PER_LEVEL,
) -> int:
    """
    Produce one month of output into factory inventory.

    Rule
    ----
        C_eff = floor(capacity / complexity)
        Y_max = floor(C_eff · efficiency / 100)
        Y     = clamp(min(target, Y_max, parking − S), 0, ∞)
        S    += Y

    Idle factories and factories without a model produce nothing; a full
    lot stalls production until inventory is drawn down.

    Returns
    -------
    int
        Units produced across all factories.
    """
    running = fac.active & (fac.model >= 0)
    complexity = assigned_complexity(fac, cars, catalog)

    eff_cap = np.floor(fac.capacity / complexity)
    max_prod = np.floor(eff_cap * (fac.efficiency / 100.0))
    planned = np.minimum(fac.target, max_prod)
    space = parking_capacity(fac.level, base=parking_base, per_level=parking_per_level)
    space = space - fac.inventory

    out = np.clip(np.minimum(planned, space), 0, None).astype(np.int64)
    out[~running] = 0

    fac.production[:] = out
    fac.inventory += out

    total = int(out.sum())
    log.info(f"  Factories produced {total} units ({int(running.sum())} running)")
    if log.isEnabledFor(logging.DEBUG):
        stalled = np.where(running & (space <= 0))[0]
        if stalled.size:
            log.debug(f"  Parking full, production stalled at factories {stalled.tolist()}")
        log.debug(f"  Inventory after production: {fac.inventory.tolist()}")
    if log.isEnabledFor(DEEP_DEBUG):
        for i in np.flatnonzero(running):
            log.deep(
                f"    {fac.ids[i]}: planned={int(planned[i])} space={int(space[i])} "
                f"made={int(out[i])}"
            )
    return total


def open_factory(
    fac: Factory,
    *,
    name: str,
    capacity: int,
    efficiency: float,
    workers: int,
    upgrade_cost: int,
    target: int,
) -> int:
    """Append a new active, unassigned level-1 factory; return its slot."""
    slot = len(fac.ids)
    idx = append_slot(
        fac,
        ids=f"factory-{slot + 1}",
        names=name,
        capacity=capacity,
        level=1,
        efficiency=efficiency,
        wage_level=1.0,
        workers=workers,
        upgrade_cost=upgrade_cost,
        active=True,
        model=-1,
        target=target,
        inventory=0,
        production=0,
    )
    log.info(f"  Opened factory '{name}' (capacity={capacity}, target={target})")
    return idx


def upgrade_factory(fac: Factory, i: int) -> None:
    """+1 level, +10 capacity, +5 workers, upgrade cost ×1.5 (floored)."""
    fac.level[i] += 1
    fac.capacity[i] += 10
    fac.workers[i] += 5
    fac.upgrade_cost[i] = int(np.floor(fac.upgrade_cost[i] * 1.5))


def raise_wages(fac: Factory, i: int) -> None:
    """Pay more for better work: efficiency +5 (max 100), wage level +0.05."""
    fac.efficiency[i] = min(100.0, fac.efficiency[i] + 5.0)
    fac.wage_level[i] = round(fac.wage_level[i] + 0.05, 2)


def inventory_by_model(fac: Factory, n_models: int) -> Int1D:
    """Total inventory per car-model slot (unassigned factories ignored)."""
    assigned = fac.model >= 0
    return np.bincount(
        fac.model[assigned], weights=fac.inventory[assigned], minlength=n_models
    ).astype(np.int64)


def draw_inventory(fac: Factory, mask: np.ndarray, quantity: int) -> int:
    """
    Remove up to *quantity* units from the factories selected by *mask*,
    draining them in slot order.

    Returns
    -------
    int
        Units actually removed.
    """
    remaining = int(quantity)
    for i in np.flatnonzero(mask):
        if remaining <= 0:
            break
        take = min(remaining, int(fac.inventory[i]))
        fac.inventory[i] -= take
        remaining -= take
    return int(quantity) - remaining
