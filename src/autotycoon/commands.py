# src/autotycoon/commands.py
"""
Player commands.

Every command takes the :class:`~autotycoon.simulation.Simulation` first and
returns ``True`` when it changed the world. A command whose preconditions do
not hold (not enough cash, a limit reached, an unknown id, an invalid
amount) returns ``False`` and leaves the state untouched; some also explain
the refusal in the player journal.

Amounts must be finite, positive real numbers; share counts must be
positive integers. Booleans are never accepted as numbers.
"""
from __future__ import annotations

import math
from numbers import Integral, Real
from typing import TYPE_CHECKING, Any

from autotycoon import clock as _clock
from autotycoon.catalog import PART_KINDS, suggested_price
from autotycoon.systems import auction as _auction
from autotycoon.systems import bank as _bank
from autotycoon.systems import contracts as _contracts
from autotycoon.systems import design as _design
from autotycoon.systems import goods_market as _market
from autotycoon.systems import production as _production
from autotycoon.systems import stock_market as _stocks
from autotycoon.systems.journal import post

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation

DEALERSHIP_PRICE = 75_000
MAX_DEALERSHIP_LEVEL = 5

_UNSET: Any = object()


# validation
# ---------------------------------------------------------------------------
def _is_amount(x: Any, *, allow_zero: bool = False) -> bool:
    """Finite real number, strictly positive unless *allow_zero*."""
    if isinstance(x, bool) or not isinstance(x, Real):
        return False
    x = float(x)
    if not math.isfinite(x):
        return False
    return x >= 0.0 if allow_zero else x > 0.0


def _is_share_count(n: Any) -> bool:
    return not isinstance(n, bool) and isinstance(n, Integral) and n > 0


def _is_zero_int(n: Any) -> bool:
    return not isinstance(n, bool) and isinstance(n, Integral) and n == 0


def _slot(ids: list[str], item_id: str) -> int:
    try:
        return ids.index(item_id)
    except ValueError:
        return -1


# clock
# ---------------------------------------------------------------------------
def set_speed(sim: Simulation, speed: int) -> bool:
    """Set the tick rate (1–25×). Refused above 1× while a decision is pending."""
    return _clock.set_speed(sim.clock, speed)


def toggle_pause(sim: Simulation) -> bool:
    sim.clock.paused = not sim.clock.paused
    return True


def emergency_brake(sim: Simulation) -> bool:
    """Drop to 1× at once."""
    _clock.emergency_brake(sim.clock)
    return True


# dealerships
# ---------------------------------------------------------------------------
def buy_dealership(sim: Simulation) -> bool:
    """Open a 20-car showroom for 75 000, within the showroom limit."""
    ec, cfg = sim.ec, sim.config
    limit = _auction.showroom_limit(
        ec.showroom_expansion_level,
        base=cfg.showroom_limit_base,
        per_expansion=cfg.showroom_limit_per_expansion,
    )
    if len(sim.dlr.ids) >= limit:
        post(ec, sim.clock.date, "danger", "Showroom limit reached; buy a network expansion")
        return False
    if ec.money < DEALERSHIP_PRICE:
        return False
    ec.money -= DEALERSHIP_PRICE
    _market.open_dealership(
        sim.dlr,
        name=f"Showroom {len(sim.dlr.ids) + 1}",
        capacity=20,
        workers=20,
        upgrade_cost=50_000,
    )
    post(ec, sim.clock.date, "success", f"New showroom opened (-{DEALERSHIP_PRICE:,})")
    return True


def upgrade_dealership(sim: Simulation, dealer_id: str) -> bool:
    i = _slot(sim.dlr.ids, dealer_id)
    if i < 0 or sim.dlr.level[i] >= MAX_DEALERSHIP_LEVEL:
        return False
    cost = int(sim.dlr.upgrade_cost[i])
    if sim.ec.money < cost:
        return False
    sim.ec.money -= cost
    _market.upgrade_dealership(sim.dlr, i)
    return True


def toggle_dealership(sim: Simulation, dealer_id: str) -> bool:
    i = _slot(sim.dlr.ids, dealer_id)
    if i < 0:
        return False
    sim.dlr.active[i] = not sim.dlr.active[i]
    return True


# factories
# ---------------------------------------------------------------------------
def upgrade_factory(sim: Simulation, factory_id: str) -> bool:
    i = _slot(sim.fac.ids, factory_id)
    if i < 0 or sim.fac.level[i] >= _production.MAX_FACTORY_LEVEL:
        return False
    cost = int(sim.fac.upgrade_cost[i])
    if sim.ec.money < cost:
        return False
    sim.ec.money -= cost
    _production.upgrade_factory(sim.fac, i)
    return True


def toggle_factory(sim: Simulation, factory_id: str) -> bool:
    i = _slot(sim.fac.ids, factory_id)
    if i < 0:
        return False
    sim.fac.active[i] = not sim.fac.active[i]
    return True


def raise_factory_wages(sim: Simulation, factory_id: str) -> bool:
    i = _slot(sim.fac.ids, factory_id)
    if i < 0:
        return False
    _production.raise_wages(sim.fac, i)
    return True


def update_factory_settings(
    sim: Simulation,
    factory_id: str,
    *,
    model_id: str | None = _UNSET,
    target: int = _UNSET,
) -> bool:
    """
    Assign a car model (``None`` to unassign) and/or set the monthly
    production target.
    """
    i = _slot(sim.fac.ids, factory_id)
    if i < 0:
        return False
    j = -1
    if model_id is not _UNSET and model_id is not None:
        j = _slot(sim.cars.ids, model_id)
        if j < 0:
            return False
    if target is not _UNSET and not (_is_share_count(target) or _is_zero_int(target)):
        return False
    if model_id is not _UNSET:
        sim.fac.model[i] = j
    if target is not _UNSET:
        sim.fac.target[i] = int(target)
    return True


# research
# ---------------------------------------------------------------------------
def unlock_class(sim: Simulation, class_id: str) -> bool:
    """Research a car class: must exist, be locked, be due this year and affordable."""
    ec = sim.ec
    cc = sim.catalog.classes.get(class_id)
    if cc is None or class_id in ec.unlocked_classes:
        return False
    if sim.clock.year < cc.unlock_year or ec.money < cc.research_cost:
        return False
    ec.money -= cc.research_cost
    ec.unlocked_classes.append(class_id)
    post(ec, sim.clock.date, "success", f"Research complete: {cc.name} class unlocked")
    return True


def unlock_part(sim: Simulation, part_id: str) -> bool:
    ec = sim.ec
    part = sim.catalog.parts.get(part_id)
    if part is None or part_id in ec.unlocked_parts:
        return False
    if sim.clock.year < part.unlock_year or ec.money < part.research_cost:
        return False
    ec.money -= part.research_cost
    ec.unlocked_parts.append(part_id)
    post(ec, sim.clock.date, "success", f"New component developed: {part.name}")
    return True


# car models
# ---------------------------------------------------------------------------
def _valid_build(sim: Simulation, class_id: str, parts: dict[str, str]) -> bool:
    ec, catalog = sim.ec, sim.catalog
    if class_id not in catalog.classes or class_id not in ec.unlocked_classes:
        return False
    for kind in PART_KINDS:
        part = catalog.parts.get(parts.get(kind, ""))
        if part is None or part.kind != kind or part.id not in ec.unlocked_parts:
            return False
    synergy, _ = _design.model_synergy(catalog, class_id, parts)
    return synergy > 0


def create_car_model(
    sim: Simulation,
    name: str,
    class_id: str,
    engine: str,
    chassis: str,
    body: str,
    interior: str,
    price: float | None = None,
) -> bool:
    """
    Design a new model from an unlocked class and unlocked parts.

    The build must have positive synergy. Without *price* the model is
    listed at the suggested price of its class.
    """
    parts = {"engine": engine, "chassis": chassis, "body": body, "interior": interior}
    if not name or not _valid_build(sim, class_id, parts):
        return False
    if price is None:
        price = suggested_price(sim.catalog.car_class(class_id), sim.ec.multiplier)
    if not _is_amount(price):
        return False
    _design.add_car_model(
        sim.cars,
        sim.catalog,
        name=name,
        class_id=class_id,
        parts=parts,
        price=float(price),
        year=sim.clock.year,
    )
    return True


def update_car_model(
    sim: Simulation,
    model_id: str,
    *,
    name: str | None = None,
    price: float | None = None,
    class_id: str | None = None,
    parts: dict[str, str] | None = None,
) -> bool:
    """
    Edit a model. Renaming or repricing touches nothing else; a new class
    or any new part re-engineers the model and resets its sales record.
    """
    j = _slot(sim.cars.ids, model_id)
    if j < 0:
        return False
    if price is not None and not _is_amount(price):
        return False
    if name is not None and not name:
        return False

    new_class = class_id if class_id is not None else sim.cars.class_id[j]
    new_parts = _design.model_parts(sim.cars, j)
    new_parts.update(parts or {})
    structural = _design.is_structural_change(sim.cars, j, new_class, new_parts)
    if structural and not _valid_build(sim, new_class, new_parts):
        return False

    if structural:
        _design.restyle(
            sim.cars, sim.catalog, j, class_id=new_class, parts=new_parts, year=sim.clock.year
        )
    if name is not None:
        sim.cars.names[j] = name
    if price is not None:
        sim.cars.price[j] = float(price)
    return True


def delete_car_model(sim: Simulation, model_id: str) -> bool:
    j = _slot(sim.cars.ids, model_id)
    if j < 0:
        return False
    _design.remove_car_model(sim.cars, sim.fac, j)
    return True


def pay_for_retrofit(sim: Simulation, amount: float, model_name: str, count: int) -> bool:
    """Pay for refitting *count* units of a model; journalled as an expense."""
    if not _is_amount(amount) or sim.ec.money < amount:
        return False
    sim.ec.money -= amount
    post(
        sim.ec,
        sim.clock.date,
        "info",
        f"Retrofit of {count} × {model_name}. Cost: -{amount:,.0f}",
    )
    return True


# bank
# ---------------------------------------------------------------------------
def take_loan(sim: Simulation, amount: float) -> bool:
    """Borrow *amount*; the debt booked is ``amount · loan_markup``."""
    if not _is_amount(amount):
        return False
    debt = amount * sim.config.loan_markup
    sim.ec.money += amount
    sim.bank.loan += debt
    post(
        sim.ec,
        sim.clock.date,
        "info",
        f"Loan taken: {amount:,.0f} (to repay: {debt:,.0f})",
    )
    return True


def repay_loan(sim: Simulation, amount: float) -> bool:
    """Repay ``min(amount, loan, money)``."""
    if not _is_amount(amount):
        return False
    paid = min(float(amount), sim.bank.loan, sim.ec.money)
    if paid <= 0:
        return False
    sim.ec.money -= paid
    sim.bank.loan -= paid
    if sim.bank.loan <= 0:
        sim.bank.loan = 0.0
        sim.bank.last_loan_payment = 0.0
    post(sim.ec, sim.clock.date, "info", f"Debt repaid: {paid:,.0f}")
    return True


def create_deposit(sim: Simulation, amount: float) -> bool:
    """Open the single term deposit."""
    if sim.bank.deposit is not None:
        post(
            sim.ec,
            sim.clock.date,
            "info",
            "A deposit is already open; withdraw it before opening a new one",
        )
        return False
    if not _is_amount(amount) or sim.ec.money < amount:
        return False
    sim.ec.money -= amount
    _bank.open_deposit(sim.bank, float(amount), sim.clock.date, rate=sim.config.deposit_rate)
    post(sim.ec, sim.clock.date, "info", f"Deposit opened: {amount:,.0f}")
    return True


def withdraw_deposit(sim: Simulation) -> bool:
    """Close the deposit, paying interest for completed years only."""
    dep = sim.bank.deposit
    if dep is None:
        return False
    now = sim.clock.date
    payout = _bank.deposit_payout(dep, now)
    years = _bank.completed_years(dep, now)
    sim.ec.money += payout
    sim.bank.deposit = None
    sim.bank.deposit_profit_last_month = payout - dep.initial
    if years > 0:
        msg = f"Deposit withdrawn: {payout:,} (profit {payout - dep.initial:,.0f} over {years} years)"
    else:
        msg = f"Deposit broken early: {payout:,} (no full year completed)"
    post(sim.ec, now, "info", msg)
    return True


# stock market
# ---------------------------------------------------------------------------
def buy_shares(sim: Simulation, company_id: str, amount: int) -> bool:
    """Buy *amount* shares at market price plus the brokerage fee."""
    if not _is_share_count(amount):
        return False
    mkt, pf = sim.mkt, sim.pf
    i = _stocks.slot_of(mkt, company_id)
    if i < 0:
        return False
    held = _stocks.live_holding(mkt, pf, i)
    if (held.shares if held else 0) + amount > sim.config.max_shares:
        return False
    cost = float(mkt.price[i]) * amount * (1.0 + sim.config.brokerage_fee)
    if sim.ec.money < cost:
        return False
    sim.ec.money -= _stocks.buy_shares(mkt, pf, i, int(amount), fee=sim.config.brokerage_fee)
    post(
        sim.ec,
        sim.clock.date,
        "info",
        f"Bought {amount:,} shares of {mkt.names[i]} for {cost:,.2f}",
    )
    return True


def sell_shares(sim: Simulation, company_id: str, amount: int) -> bool:
    """Sell *amount* shares at market price less the brokerage fee."""
    if not _is_share_count(amount):
        return False
    mkt, pf = sim.mkt, sim.pf
    i = _stocks.slot_of(mkt, company_id)
    if i < 0:
        return False
    held = _stocks.live_holding(mkt, pf, i)
    if held is None or held.shares < amount:
        return False
    basis = held.avg_price * amount
    proceeds = _stocks.sell_shares(mkt, pf, i, int(amount), fee=sim.config.brokerage_fee)
    sim.ec.money += proceeds
    profit = proceeds - basis
    result = f"Profit: {profit:,.2f}" if profit >= 0 else f"Loss: {-profit:,.2f}"
    post(sim.ec, sim.clock.date, "success", f"Sold {amount:,} shares of {mkt.names[i]}. {result}")
    return True


# land
# ---------------------------------------------------------------------------
def place_bid(sim: Simulation, bid: float) -> bool:
    """Set the sealed bid; only the change versus the current bid moves cash."""
    if not _is_amount(bid, allow_zero=True):
        return False
    return _auction.place_bid(sim.ec, float(bid))


def _factory_limit(sim: Simulation) -> int:
    cfg = sim.config
    return _auction.factory_limit(
        sim.ec.factory_expansion_level,
        base=cfg.factory_limit_base,
        per_expansion=cfg.factory_limit_per_expansion,
    )


def buy_land_from_developer(sim: Simulation) -> bool:
    """Buy a plot at the developer's markup and open a factory on it."""
    ec, cfg = sim.ec, sim.config
    if len(sim.fac.ids) >= _factory_limit(sim):
        post(ec, sim.clock.date, "danger", "Factory limit reached; buy an industrial expansion")
        return False
    price = _auction.developer_price(
        sim.clock.year,
        base=cfg.land_base_value,
        growth=cfg.land_growth,
        markup=cfg.developer_markup,
    )
    if ec.money < price:
        return False
    _auction.buy_land_from_developer(ec, sim.fac, price=price)
    post(ec, sim.clock.date, "success", f"Land bought from a developer for {price:,}")
    return True


def dismiss_auction_result(sim: Simulation) -> bool:
    if sim.ec.auction_result is None:
        return False
    sim.ec.auction_result = None
    return True


def _buy_expansion(sim: Simulation, attr: str, base: int, label: str) -> bool:
    ec = sim.ec
    if sim.clock.year < _auction.EXPANSION_YEAR:
        return False
    level = getattr(ec, attr)
    cost = _auction.expansion_cost(level, base)
    if ec.money < cost:
        return False
    ec.money -= cost
    setattr(ec, attr, level + 1)
    post(ec, sim.clock.date, "success", f"{label} expansion level {level + 1} bought for {cost:,}")
    return True


def buy_factory_expansion(sim: Simulation) -> bool:
    """Raise the factory limit by 4 (from 2025)."""
    return _buy_expansion(
        sim, "factory_expansion_level", _auction.FACTORY_EXPANSION_BASE, "Industrial"
    )


def buy_showroom_expansion(sim: Simulation) -> bool:
    """Raise the showroom limit by 7 (from 2025)."""
    return _buy_expansion(
        sim, "showroom_expansion_level", _auction.SHOWROOM_EXPANSION_BASE, "Network"
    )


# contracts
# ---------------------------------------------------------------------------
def accept_contract_offer(sim: Simulation) -> bool:
    """
    Fulfil the pending offer with ``min(available, requested)`` units.
    With no stock at all nothing happens and the offer stays pending.
    """
    offer = sim.ec.pending_offer
    if offer is None:
        return False
    available = _contracts.available_inventory(sim.fac, sim.cars, offer.class_id)
    quantity = min(available, offer.quantity)
    if quantity <= 0:
        return False
    _contracts.fulfil_contract(
        sim.ec, sim.fac, sim.cars, offer, quantity=quantity, date=sim.clock.date
    )
    sim.ec.pending_offer = None
    _clock.release_throttle(sim.clock)
    return True


def reject_contract_offer(sim: Simulation) -> bool:
    if sim.ec.pending_offer is None:
        return False
    sim.ec.pending_offer = None
    _clock.release_throttle(sim.clock)
    return True
