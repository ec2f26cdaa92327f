# src/autotycoon/systems/contracts.py
"""
Event generator: domestic fleet contracts, export contracts and crises.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime

import numpy as np
from numpy.random import Generator

from autotycoon.catalog import Catalog
from autotycoon.helpers import apply_inflation, round2
from autotycoon.records import (
    ContractHistoryEntry,
    ContractKind,
    ContractOffer,
    TransactionDetails,
)
from autotycoon.roles import CarModel, Economy, Factory
from autotycoon.systems.journal import post
from autotycoon.systems.production import draw_inventory
from autotycoon.typing import Bool1D

log = logging.getLogger("autotycoon")

CONTRACT_HISTORY_CAP = 50
PRICE_SWING = 0.15
MIN_MARGIN = 1.05
DOMESTIC_QTY = (5, 46)
EXPORT_QTY = (25, 476)
CRISIS_STEP = 10_000


def class_models(cars: CarModel, class_id: str) -> list[int]:
    """Slots of the car models of *class_id*, in slot order."""
    return [j for j, c in enumerate(cars.class_id) if c == class_id]


def class_factories(fac: Factory, cars: CarModel, class_id: str) -> Bool1D:
    """Factories currently building a model of *class_id*."""
    models = class_models(cars, class_id)
    return np.isin(fac.model, models) if models else np.zeros(fac.model.size, np.bool_)


def available_inventory(fac: Factory, cars: CarModel, class_id: str) -> int:
    """Units of *class_id* sitting in factory lots."""
    return int(fac.inventory[class_factories(fac, cars, class_id)].sum())


def pick_class(
    cars: CarModel, catalog: Catalog, segment: str, *, rng: Generator
) -> str | None:
    """A random class of *segment* that has at least one model; None if none."""
    candidates = [c.id for c in catalog.classes_in(segment) if class_models(cars, c.id)]
    if not candidates:
        return None
    return candidates[int(rng.integers(len(candidates)))]


def draft_contract(
    kind: ContractKind,
    cars: CarModel,
    *,
    contractor: str,
    class_id: str,
    quantity: int,
    multiplier: float,
    date: datetime,
    rng: Generator,
) -> ContractOffer:
    """
    Price a contract for *quantity* cars of *class_id*.

    Rule
    ----
        unit = max(floor(list · (1 + U(−0.15, 0.15))), floor(COGS · 1.05))

    The list price and COGS come from the first model of the class.
    """
    j = class_models(cars, class_id)[0]
    base = int(cars.price[j])
    cogs = apply_inflation(
        float(cars.production_cost[j]), float(cars.sensitivity[j]), multiplier
    )
    unit = math.floor(cars.price[j] * (1.0 + rng.uniform(-PRICE_SWING, PRICE_SWING)))
    unit = max(unit, math.floor(cogs * MIN_MARGIN))
    return ContractOffer(
        kind=kind,
        contractor=contractor,
        class_id=class_id,
        model_name=cars.names[j],
        quantity=int(quantity),
        base_price=base,
        unit_price=int(unit),
        unit_cost=int(cogs),
        date=date.date().isoformat(),
    )


def roll_domestic_contract(
    ec: Economy,
    cars: CarModel,
    catalog: Catalog,
    *,
    rank: int,
    date: datetime,
    multiplier: float,
    chance: float,
    per_year: int,
    min_rank: int,
    rng: Generator,
) -> ContractOffer | None:
    """
    Monthly roll for a domestic fleet order of a Middle-segment class.

    Fires when ``rank >= min_rank``, fewer than *per_year* domestic contracts
    were signed this year, no offer is pending, and a draw beats *chance*.
    """
    if rank < min_rank or ec.domestic_contracts_this_year >= per_year:
        return None
    if ec.pending_offer is not None:
        return None
    if rng.random() >= chance:
        return None
    class_id = pick_class(cars, catalog, "Middle", rng=rng)
    if class_id is None:
        return None
    contractor = catalog.contractors[int(rng.integers(len(catalog.contractors)))]
    lo, span = DOMESTIC_QTY
    quantity = math.floor(lo + span * rng.random())
    return draft_contract(
        "domestic",
        cars,
        contractor=contractor,
        class_id=class_id,
        quantity=quantity,
        multiplier=multiplier,
        date=date,
        rng=rng,
    )


def roll_export_contract(
    ec: Economy,
    cars: CarModel,
    catalog: Catalog,
    *,
    rank: int,
    date: datetime,
    multiplier: float,
    min_rank: int,
    rng: Generator,
) -> ContractOffer | None:
    """
    Yearly export order of a Higher-segment class.

    ``last_export_year`` is stamped as soon as the roll fires, whether or not
    the contract is eventually fulfilled.
    """
    year = date.year
    if rank < min_rank or ec.last_export_year == year or ec.pending_offer is not None:
        return None
    ec.last_export_year = year
    class_id = pick_class(cars, catalog, "Higher", rng=rng)
    if class_id is None:
        return None
    country = catalog.export_countries[int(rng.integers(len(catalog.export_countries)))]
    lo, span = EXPORT_QTY
    quantity = math.floor(lo + span * rng.random())
    return draft_contract(
        "export",
        cars,
        contractor=country,
        class_id=class_id,
        quantity=quantity,
        multiplier=multiplier,
        date=date,
        rng=rng,
    )


def fulfil_contract(
    ec: Economy,
    fac: Factory,
    cars: CarModel,
    offer: ContractOffer,
    *,
    quantity: int,
    date: datetime,
) -> int:
    """
    Deliver up to *quantity* units of an offer from factory inventory.

    Inventory is drawn factory by factory from plants building the class.
    Revenue goes straight to cash and this month's revenue; contract units
    do not count as market sales.

    Returns
    -------
    int
        Units delivered.
    """
    mask = class_factories(fac, cars, offer.class_id)
    before = int(fac.inventory[mask].sum())
    delivered = draw_inventory(fac, mask, quantity)
    after = before - delivered
    revenue = delivered * offer.unit_price

    ec.money += revenue
    ec.monthly_revenue += revenue
    ec.total_contract_revenue += revenue
    ec.total_contract_units += delivered
    if offer.kind == "domestic":
        ec.domestic_contracts_this_year += 1

    ec.contract_history.insert(
        0,
        ContractHistoryEntry(
            kind=offer.kind,
            contractor=offer.contractor,
            class_id=offer.class_id,
            requested=offer.quantity,
            fulfilled=delivered,
            unit_price=offer.unit_price,
            revenue=revenue,
            inventory_before=before,
            inventory_after=after,
            date=date.date().isoformat(),
        ),
    )
    del ec.contract_history[CONTRACT_HISTORY_CAP:]

    pct = round2((offer.unit_price / offer.base_price - 1.0) * 100.0) if offer.base_price else 0.0
    details = TransactionDetails(
        model_name=offer.model_name,
        quantity=delivered,
        base_price=offer.base_price,
        final_price=offer.unit_price,
        negotiation_pct=pct,
        revenue=revenue,
        profit=delivered * (offer.unit_price - offer.unit_cost),
    )
    label = "Export" if offer.kind == "export" else "Fleet"
    post(
        ec,
        date,
        "success",
        f"{label} contract with {offer.contractor}: {delivered} × {offer.model_name} "
        f"for {revenue:,}",
        details=details,
    )
    return delivered


def settle_contract(
    ec: Economy,
    fac: Factory,
    cars: CarModel,
    offer: ContractOffer,
    *,
    date: datetime,
) -> bool:
    """
    Auto-resolve an offer: fulfil it in full when inventory allows,
    otherwise journal the lost order.
    """
    stock = available_inventory(fac, cars, offer.class_id)
    if stock < offer.quantity:
        post(
            ec,
            date,
            "info",
            f"{offer.contractor} wanted {offer.quantity} × {offer.model_name}, "
            f"only {stock} in stock; order lost",
        )
        return False
    fulfil_contract(ec, fac, cars, offer, quantity=offer.quantity, date=date)
    return True


def crisis_cost(rank: int, *, rng: Generator) -> int:
    """
    Cost of a yearly crisis.

    Rule
    ----
        base   = 10 000 · U{1..10}
        factor = 1 at rank 5, 4 · (rank − 5) above
    """
    base = CRISIS_STEP * int(rng.integers(1, 11))
    factor = 1 if rank <= 5 else 4 * (rank - 5)
    return base * factor


def apply_crisis(
    ec: Economy,
    catalog: Catalog,
    *,
    rank: int,
    date: datetime,
    min_rank: int,
    max_rank: int,
    rng: Generator,
) -> int:
    """
    Yearly misfortune for mid-sized companies (rank within
    ``[min_rank, max_rank]``), deducted automatically.

    Returns
    -------
    int
        Amount deducted (0 when no crisis hit).
    """
    year = date.year
    if not (min_rank <= rank <= max_rank) or ec.last_crisis_year == year:
        return 0
    ec.last_crisis_year = year
    cost = crisis_cost(rank, rng=rng)
    scenario = catalog.crises[int(rng.integers(len(catalog.crises)))]
    ec.money -= cost
    ec.total_crisis_cost += cost
    post(ec, date, "danger", f"Crisis: {scenario}. Damage: {cost:,}")
    return cost
