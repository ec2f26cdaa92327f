# src/autotycoon/systems/stock_market.py
"""
Stock market simulator.

Weekly price update for regular companies (multi-year cycle target plus
volatility noise, bankruptcy and re-listing) and sector ETFs (drift toward
the sector mean), and the share-trading ledger.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Mapping

import numpy as np
from numpy.random import Generator

from autotycoon.catalog import Catalog, StockCategory
from autotycoon.helpers import append_slot, round2
from autotycoon.logging import DEEP_DEBUG, getLogger
from autotycoon.records import BankruptcyRecord
from autotycoon.roles import Holding, Portfolio, StockMarket
from autotycoon.typing import Float1D

log = getLogger("autotycoon")

WEEKS_PER_YEAR = 48
HISTORY_CAP = 1300
BANKRUPTCY_PRICE = 0.10
PROTECTED_FLOOR = 1.00
PROTECTED_VOL_FACTOR = 0.3
ETF_PULL = 0.05
ETF_NOISE = 0.2
ETF_MIN_PRICE = 0.01
#: ETF target when its sector has no companies
ETF_FALLBACK_TARGET = 50.0
GLOBAL_SECTOR = "Finance"


def _round2_vec(x: Float1D) -> Float1D:
    return np.floor(x * 100.0 + 0.5) / 100.0


def new_stock_market() -> StockMarket:
    """An empty StockMarket role (no slots)."""
    return StockMarket(
        ids=[],
        names=[],
        categories=[],
        sectors=[],
        history=[],
        price=np.empty(0, np.float64),
        start_price=np.empty(0, np.float64),
        volatility=np.empty(0, np.float64),
        is_etf=np.empty(0, np.bool_),
        protected=np.empty(0, np.bool_),
        cycle_end=np.empty(0, np.int64),
        cycle_target=np.empty(0, np.float64),
        formation_year=np.empty(0, np.int64),
        listing=np.empty(0, np.int64),
    )


def generate_cycle(price: float, year: int, *, rng: Generator) -> tuple[int, float]:
    """
    Draw a new market cycle starting at *price*.

    Lasts 3–7 years; outcome weights: stable growth 40% (×1.2–1.8),
    boom 20% (×2–4), decline 30% (×0.3–0.7), crash 10% (→ 0.01).

    Returns
    -------
    tuple[int, float]
        ``(end_year, target_price)``.
    """
    duration = 3 + int(rng.integers(0, 5))
    r = rng.random()
    if r < 0.4:
        target = price * (1.2 + 0.6 * rng.random())
    elif r < 0.6:
        target = price * (2.0 + 2.0 * rng.random())
    elif r < 0.9:
        target = price * (0.3 + 0.4 * rng.random())
    else:
        target = 0.01
    return year + duration, round2(target)


def company_name(category: StockCategory, taken: set[str], *, rng: Generator) -> str:
    """Random ``"<Prefix> <Suffix>"`` name, avoiding names already listed."""
    name = ""
    for _ in range(20):
        prefix = category.prefixes[int(rng.integers(len(category.prefixes)))]
        suffix = category.suffixes[int(rng.integers(len(category.suffixes)))]
        name = f"{prefix} {suffix}"
        if name not in taken:
            break
    return name


def _random_volatility(rng: Generator) -> float:
    return 0.05 + 0.15 * rng.random()


def init_stock_market(
    catalog: Catalog,
    *,
    year: int,
    per_category: int,
    rng: Generator,
) -> StockMarket:
    """
    List the opening companies and ETFs.

    Each category gets *per_category* companies with ids
    ``<category>-<i>``; the first ``category.protected`` of them are blue
    chips immune to bankruptcy.
    """
    mkt = new_stock_market()
    taken: set[str] = set()
    for cat in catalog.stock_categories:
        prefix = cat.name.lower().replace(" ", "-")
        for i in range(per_category):
            price = round2(0.5 + 4.5 * rng.random())
            vol = _random_volatility(rng)
            end, target = generate_cycle(price, year, rng=rng)
            name = company_name(cat, taken, rng=rng)
            taken.add(name)
            append_slot(
                mkt,
                ids=f"{prefix}-{i}",
                names=name,
                categories=cat.name,
                sectors=cat.sector,
                history=[price],
                price=price,
                start_price=price,
                volatility=vol,
                is_etf=False,
                protected=i < cat.protected,
                cycle_end=end,
                cycle_target=target,
                formation_year=year,
                listing=0,
            )
    for etf in catalog.etfs:
        append_slot(
            mkt,
            ids=etf.id,
            names=etf.name,
            categories="ETF",
            sectors=etf.sector,
            history=[etf.price],
            price=etf.price,
            start_price=etf.price,
            volatility=etf.volatility,
            is_etf=True,
            protected=False,
            cycle_end=year,
            cycle_target=etf.price,
            formation_year=year,
            listing=0,
        )
    log.info(f"  Stock market opened with {len(mkt.ids)} listings")
    return mkt


def _push_history(mkt: StockMarket, i: int, price: float, cap: int) -> None:
    hist = mkt.history[i]
    hist.append(price)
    if len(hist) > cap:
        del hist[: len(hist) - cap]


def sector_means(mkt: StockMarket) -> dict[str, float]:
    """Mean price of regular companies per sector, plus the global mean."""
    regular = ~mkt.is_etf
    means: dict[str, float] = {}
    for sector in {mkt.sectors[i] for i in np.flatnonzero(regular)}:
        mask = regular & np.array([s == sector for s in mkt.sectors])
        means[sector] = float(mkt.price[mask].mean())
    if regular.any():
        means[GLOBAL_SECTOR] = float(mkt.price[regular].mean())
    return means


def update_etfs(
    mkt: StockMarket,
    means: Mapping[str, float],
    *,
    history_cap: int = HISTORY_CAP,
    rng: Generator,
) -> None:
    """
    Drift every ETF 5% of the way toward its sector mean, plus noise.

    Rule
    ----
        p ← max(0.01, round2(p + 0.05 · (target − p) + U(−0.2, 0.2)))
    """
    for i in np.flatnonzero(mkt.is_etf):
        target = means.get(mkt.sectors[i], ETF_FALLBACK_TARGET)
        p = float(mkt.price[i])
        new = p + ETF_PULL * (target - p) + rng.uniform(-ETF_NOISE, ETF_NOISE)
        new = max(ETF_MIN_PRICE, round2(new))
        mkt.price[i] = new
        _push_history(mkt, int(i), new, history_cap)


def regenerate_company(
    mkt: StockMarket,
    pf: Portfolio,
    i: int,
    *,
    date: datetime,
    categories: Mapping[str, StockCategory],
    rng: Generator,
) -> BankruptcyRecord:
    """
    Bankrupt slot *i* and re-list it under a fresh identity.

    One transition: the player's holding in the slot is removed, the
    listing generation is bumped, and name, IPO price (2.00–5.00),
    volatility, cycle and formation year are redrawn. Sector and category
    are preserved.
    """
    company_id = mkt.ids[i]
    year = date.year

    holding = pf.holdings.pop(company_id, None)
    if holding is not None and holding.listing != mkt.listing[i]:
        holding = None
    shares = holding.shares if holding is not None else 0
    lost = holding.avg_price * shares if holding is not None else 0.0

    old_name = mkt.names[i]
    category = mkt.categories[i]
    years_active = year - int(mkt.formation_year[i])

    taken = set(mkt.names)
    new_name = company_name(categories[category], taken, rng=rng)
    ipo = round2(2.0 + 3.0 * rng.random())
    end, target = generate_cycle(ipo, year, rng=rng)

    mkt.names[i] = new_name
    mkt.price[i] = ipo
    mkt.start_price[i] = ipo
    mkt.volatility[i] = _random_volatility(rng)
    mkt.cycle_end[i] = end
    mkt.cycle_target[i] = target
    mkt.formation_year[i] = year
    mkt.history[i] = [ipo]
    mkt.listing[i] += 1

    log.info(
        f"  BANKRUPTCY: {old_name} ({company_id}) re-listed as {new_name} "
        f"at IPO {ipo:.2f}; player shares lost: {shares}"
    )
    return BankruptcyRecord(
        company_id=company_id,
        old_name=old_name,
        old_category=category,
        date=date.date().isoformat(),
        years_active=years_active,
        player_had_shares=shares > 0,
        shares_owned=shares,
        money_lost=lost,
        new_name=new_name,
        new_category=category,
        ipo_price=ipo,
    )


def update_companies(
    mkt: StockMarket,
    pf: Portfolio,
    *,
    date: datetime,
    categories: Mapping[str, StockCategory],
    history_cap: int = HISTORY_CAP,
    bankruptcy_price: float = BANKRUPTCY_PRICE,
    protected_floor: float = PROTECTED_FLOOR,
    rng: Generator,
) -> list[BankruptcyRecord]:
    """
    Weekly step for regular companies.

    Rule
    ----
        W     = max(1, max(0, end − year) · 48 + (48 − week))
        p'    = round2(p + (target − p) / W + U(−1, 1) · 0.5 · σ · p)

    σ is damped to 0.3× for protected companies, which bounce to
    1.05–1.15 instead of falling below 1.00. An unprotected company whose
    new price is at or below 0.10 is re-listed in the same update.

    Returns
    -------
    list[BankruptcyRecord]
        One record per company re-listed this week.
    """
    year = date.year
    regular = np.flatnonzero(~mkt.is_etf)
    if regular.size == 0:
        return []

    for i in regular:
        if year >= mkt.cycle_end[i]:
            mkt.cycle_end[i], mkt.cycle_target[i] = generate_cycle(
                float(mkt.price[i]), year, rng=rng
            )

    week = ((date.month - 1) * 30 + date.day) // 7 + 1
    years_left = np.maximum(0, mkt.cycle_end[regular] - year)
    weeks_left = np.maximum(1, years_left * WEEKS_PER_YEAR + (WEEKS_PER_YEAR - week))

    price = mkt.price[regular]
    protected = mkt.protected[regular]
    step = (mkt.cycle_target[regular] - price) / weeks_left
    vol = mkt.volatility[regular] * np.where(protected, PROTECTED_VOL_FACTOR, 1.0)
    noise = rng.uniform(-1.0, 1.0, size=regular.size) * vol * 0.5 * price
    new = _round2_vec(price + step + noise)

    bounce = protected & (new < protected_floor)
    if bounce.any():
        new[bounce] = _round2_vec(1.05 + 0.10 * rng.random(int(bounce.sum())))
    bust = ~protected & (new <= bankruptcy_price)

    records: list[BankruptcyRecord] = []
    for k, i in enumerate(regular):
        if bust[k]:
            records.append(
                regenerate_company(mkt, pf, int(i), date=date, categories=categories, rng=rng)
            )
            continue
        mkt.price[i] = new[k]
        _push_history(mkt, int(i), float(new[k]), history_cap)
        if log.isEnabledFor(DEEP_DEBUG):
            log.deep(
                f"    {mkt.ids[i]}: {price[k]:.2f} -> {new[k]:.2f} "
                f"(target {mkt.cycle_target[i]:.2f}, {int(weeks_left[k])} weeks left)"
            )

    if log.isEnabledFor(logging.DEBUG):
        log.debug(f"  Week {week}: {int(bounce.sum())} blue-chip bounces, {len(records)} bankruptcies")
    return records


# ───────────────────────── trading ─────────────────────────
def slot_of(mkt: StockMarket, company_id: str) -> int:
    """Slot index of *company_id*, or -1 when not listed."""
    try:
        return mkt.ids.index(company_id)
    except ValueError:
        return -1


def live_holding(mkt: StockMarket, pf: Portfolio, i: int) -> Holding | None:
    """The player's holding in slot *i*, ignoring holdings from a previous listing."""
    h = pf.holdings.get(mkt.ids[i])
    if h is None or h.listing != mkt.listing[i]:
        return None
    return h


def buy_shares(mkt: StockMarket, pf: Portfolio, i: int, amount: int, *, fee: float) -> float:
    """
    Record a purchase and return its cash cost ``price · n · (1 + fee)``.

    The holding's average price is share-weighted and rounded to cents.
    """
    price = float(mkt.price[i])
    gross = price * amount
    cost = gross * (1.0 + fee)

    h = live_holding(mkt, pf, i)
    if h is None:
        pf.holdings[mkt.ids[i]] = Holding(
            shares=amount, avg_price=round2(price), listing=int(mkt.listing[i])
        )
    else:
        total = h.shares + amount
        h.avg_price = round2((h.shares * h.avg_price + amount * price) / total)
        h.shares = total

    pf.month_spend += cost
    pf.month_fees += gross * fee
    pf.total_fees += gross * fee
    return cost


def sell_shares(mkt: StockMarket, pf: Portfolio, i: int, amount: int, *, fee: float) -> float:
    """
    Record a sale and return its cash proceeds ``price · n · (1 − fee)``.

    Realised profit is measured against the holding's average price; the
    holding is dropped once it reaches zero shares.
    """
    h = live_holding(mkt, pf, i)
    if h is None or h.shares < amount:
        raise ValueError(f"Cannot sell {amount} shares of {mkt.ids[i]}")
    price = float(mkt.price[i])
    gross = price * amount
    proceeds = gross * (1.0 - fee)

    pf.realized_profit += proceeds - amount * h.avg_price
    h.shares -= amount
    if h.shares == 0:
        del pf.holdings[mkt.ids[i]]

    pf.month_revenue += proceeds
    pf.month_fees += gross * fee
    pf.total_fees += gross * fee
    return proceeds


def portfolio_value(mkt: StockMarket, pf: Portfolio) -> float:
    """Market value of all live holdings."""
    total = 0.0
    for company_id, h in pf.holdings.items():
        i = slot_of(mkt, company_id)
        if i >= 0 and h.listing == mkt.listing[i]:
            total += h.shares * float(mkt.price[i])
    return total


def reset_month_trackers(pf: Portfolio) -> None:
    pf.month_revenue = 0.0
    pf.month_spend = 0.0
    pf.month_fees = 0.0


def update_stock_prices(
    mkt: StockMarket,
    pf: Portfolio,
    *,
    date: datetime,
    categories: Mapping[str, StockCategory],
    history_cap: int = HISTORY_CAP,
    bankruptcy_price: float = BANKRUPTCY_PRICE,
    protected_floor: float = PROTECTED_FLOOR,
    rng: Generator,
) -> list[BankruptcyRecord]:
    """
    One weekly market session: ETFs chase the sector means taken before
    the session, then every regular company steps.
    """
    means = sector_means(mkt)
    update_etfs(mkt, means, history_cap=history_cap, rng=rng)
    return update_companies(
        mkt,
        pf,
        date=date,
        categories=categories,
        history_cap=history_cap,
        bankruptcy_price=bankruptcy_price,
        protected_floor=protected_floor,
        rng=rng,
    )
