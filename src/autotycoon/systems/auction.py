# src/autotycoon/systems/auction.py
"""
Land auctions, developer land purchases and site-limit expansions.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime

from numpy.random import Generator

from autotycoon.helpers import BASE_YEAR, round_half_up
from autotycoon.records import AuctionResult, AuctionState
from autotycoon.roles import Economy, Factory
from autotycoon.systems.journal import post
from autotycoon.systems.production import open_factory

log = logging.getLogger("autotycoon")

LAND_BASE_VALUE = 500_000
LAND_GROWTH = 1.03
DEVELOPER_MARKUP = 5
DEVELOPER_MAX_YEARS = 100
EXPANSION_YEAR = 2025
FACTORY_EXPANSION_BASE = 500_000_000
SHOWROOM_EXPANSION_BASE = 250_000_000
EXPANSION_GROWTH = 1.2


def land_value(year: int, *, base: int = LAND_BASE_VALUE, growth: float = LAND_GROWTH) -> int:
    """``floor(base · growth^(year − 1950))``."""
    return math.floor(base * growth ** (year - BASE_YEAR))


def developer_price(
    year: int,
    *,
    base: int = LAND_BASE_VALUE,
    growth: float = LAND_GROWTH,
    markup: int = DEVELOPER_MARKUP,
) -> int:
    """Land value (capped at 100 years of growth) times the developer markup."""
    years = min(DEVELOPER_MAX_YEARS, year - BASE_YEAR)
    return math.floor(base * growth**years) * markup


def factory_limit(expansion_level: int, *, base: int = 9, per_expansion: int = 4) -> int:
    return base + per_expansion * expansion_level


def showroom_limit(expansion_level: int, *, base: int = 14, per_expansion: int = 7) -> int:
    return base + per_expansion * expansion_level


def expansion_cost(level: int, base: int) -> int:
    """``round(base · 1.2^level / 1e6) · 1e6``."""
    return round_half_up(base * EXPANSION_GROWTH**level / 1_000_000) * 1_000_000


def open_auction(
    ec: Economy,
    n_factories: int,
    *,
    year: int,
    interval: int,
    max_attempts: int,
    limit: int,
    land_base: int = LAND_BASE_VALUE,
    land_growth: float = LAND_GROWTH,
    rng: Generator,
) -> AuctionState | None:
    """
    Open a land auction in auction years.

    Rule
    ----
        land  = floor(500 000 · 1.03^(year − 1950))
        rival = floor(land · U(0.9, 1.2))
    """
    if year % interval != 0 or ec.auction is not None:
        return None
    if ec.auction_attempts >= max_attempts or n_factories >= limit:
        return None
    land = land_value(year, base=land_base, growth=land_growth)
    rival = math.floor(land * rng.uniform(0.9, 1.2))
    ec.auction = AuctionState(year=year, land_value=land, rival_bid=rival)
    log.info(f"  Land auction opened for {year}: land value {land:,}")
    if log.isEnabledFor(logging.DEBUG):
        log.debug(f"  Rival bid sealed at {rival:,}")
    return ec.auction


def place_bid(ec: Economy, bid: float) -> bool:
    """
    Replace the player's sealed bid.

    Only the difference to the current bid moves: a higher bid takes more
    cash, a lower one refunds. Refused when cash does not cover the raise.
    """
    auction = ec.auction
    if auction is None:
        return False
    delta = bid - auction.user_bid
    if delta > ec.money:
        return False
    ec.money -= delta
    auction.user_bid = float(bid)
    return True


def resolve_auction(
    ec: Economy,
    fac: Factory,
    *,
    date: datetime,
    limit: int | None = None,
) -> AuctionResult | None:
    """
    Close the open auction once its year is over.

    A bid strictly above the rival's wins a small factory and stays spent;
    any other bid is refunded. A winning bid is refunded too when the
    company reached its factory *limit* while the auction was open.
    Attempts count either way.
    """
    auction = ec.auction
    if auction is None or date.year <= auction.year:
        return None
    won = auction.user_bid > auction.rival_bid
    if won and limit is not None and len(fac.ids) >= limit:
        won = False
        ec.money += auction.user_bid
        post(ec, date, "info", "Land auction won but no factory site is left; bid refunded")
    elif won:
        open_factory(
            fac,
            name=f"Factory {len(fac.ids) + 1}",
            capacity=30,
            efficiency=80.0,
            workers=20,
            upgrade_cost=50_000,
            target=15,
        )
        post(ec, date, "success", f"Land auction won with {auction.user_bid:,.0f}")
    else:
        ec.money += auction.user_bid
        if auction.user_bid > 0:
            post(
                ec,
                date,
                "info",
                f"Land auction lost to a bid of {auction.rival_bid:,}; bid refunded",
            )
    ec.auction_attempts += 1
    ec.auction = None
    ec.auction_result = AuctionResult(
        year=auction.year, won=won, user_bid=auction.user_bid, rival_bid=auction.rival_bid
    )
    return ec.auction_result


def buy_land_from_developer(ec: Economy, fac: Factory, *, price: int) -> int:
    """
    Pay *price* and open a factory on developer land.

    The first factory of a company is full-size; later ones are starter
    plants. Any open auction is left alone.
    """
    first = len(fac.ids) == 0
    ec.money -= price
    idx = open_factory(
        fac,
        name=f"Factory {len(fac.ids) + 1}",
        capacity=100 if first else 20,
        efficiency=80.0,
        workers=50,
        upgrade_cost=50_000,
        target=80 if first else 16,
    )
    return idx
