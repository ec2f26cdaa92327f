# src/autotycoon/systems/valuation.py
"""
Reporting: prestige tiers, company valuation and market dominance.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from autotycoon.catalog import PrestigeTier
from autotycoon.roles import Bank, CarModel, Dealership, Economy, Factory, Portfolio, StockMarket
from autotycoon.systems.production import inventory_by_model
from autotycoon.systems.stock_market import portfolio_value

FACTORY_BOOK_VALUE = 150_000
DEALERSHIP_BOOK_VALUE = 75_000


@dataclass(slots=True, frozen=True)
class PrestigeStatus:
    rank: int
    title: str
    next_threshold: int | None  # None at the top tier
    progress: float  # 0..100 toward the next tier


@dataclass(slots=True, frozen=True)
class ClassShare:
    class_id: str
    sales: int
    revenue: float
    cogs: float


def prestige_rank(tiers: Sequence[PrestigeTier], cars_sold: int) -> int:
    """Highest rank whose threshold *cars_sold* has reached (1-based)."""
    rank = 1
    for tier in tiers:
        if cars_sold >= tier.min_sales:
            rank = tier.rank
    return rank


def prestige_tier(tiers: Sequence[PrestigeTier], cars_sold: int) -> PrestigeStatus:
    rank = prestige_rank(tiers, cars_sold)
    tier = tiers[rank - 1]
    if rank >= len(tiers):
        return PrestigeStatus(rank, tier.title, None, 100.0)
    nxt = tiers[rank].min_sales
    span = nxt - tier.min_sales
    progress = 100.0 * (cars_sold - tier.min_sales) / span if span > 0 else 100.0
    return PrestigeStatus(rank, tier.title, nxt, min(100.0, max(0.0, progress)))


def company_valuation(
    ec: Economy,
    bank: Bank,
    fac: Factory,
    dlr: Dealership,
    cars: CarModel,
    mkt: StockMarket,
    pf: Portfolio,
) -> float:
    """
    Book value of the company.

    Liquid assets (cash plus the deposit's current value), a flat value per
    factory and dealership, unsold inventory at list price and the share
    portfolio at market prices.
    """
    liquid = ec.money + (bank.deposit.current if bank.deposit is not None else 0.0)
    plants = FACTORY_BOOK_VALUE * len(fac.ids) + DEALERSHIP_BOOK_VALUE * len(dlr.ids)
    stock = inventory_by_model(fac, len(cars.ids))
    inventory = float((stock * cars.price).sum())
    return liquid + plants + inventory + portfolio_value(mkt, pf)


def market_dominance(cars: CarModel) -> list[ClassShare]:
    """This year's sales, revenue and COGS per class, largest seller first."""
    agg: dict[str, list[float]] = {}
    for j, class_id in enumerate(cars.class_id):
        row = agg.setdefault(class_id, [0, 0.0, 0.0])
        row[0] += int(cars.year_sales[j])
        row[1] += float(cars.year_revenue[j])
        row[2] += float(cars.year_cogs[j])
    shares = [ClassShare(c, int(s), r, g) for c, (s, r, g) in agg.items()]
    return sorted(shares, key=lambda s: s.sales, reverse=True)
