"""
Land auction events: resolve last round's auction, open a new one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from autotycoon.core.decorators import event

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation


@event
class ResolveLandAuction:
    """
    At the first new year after the auction year, compare the player's
    sealed bid with the rival's. A strictly higher bid wins a factory
    while the company is under its factory limit; otherwise the bid is
    refunded.
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_year:
            return
        from autotycoon.systems.auction import factory_limit, resolve_auction

        cfg = sim.config
        limit = factory_limit(
            sim.ec.factory_expansion_level,
            base=cfg.factory_limit_base,
            per_expansion=cfg.factory_limit_per_expansion,
        )
        result = resolve_auction(sim.ec, sim.fac, date=sim.clock.date, limit=limit)
        if result is not None:
            outcome = "won" if result.won else "lost"
            self.get_logger().info(
                f"Auction {result.year} {outcome}: bid={result.user_bid:,.0f} "
                f"rival={result.rival_bid:,}"
            )


@event
class OpenLandAuction:
    """
    Open a land auction every 5th year while attempts remain and the
    company is below its factory limit.

    Rule
    ----
        land  = floor(500 000 · 1.03^(year − 1950))
        rival = floor(land · U(0.9, 1.2))
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_year:
            return
        from autotycoon.systems.auction import factory_limit, open_auction
        from autotycoon.systems.journal import post

        cfg = sim.config
        auction = open_auction(
            sim.ec,
            len(sim.fac.ids),
            year=sim.clock.year,
            interval=cfg.auction_interval,
            max_attempts=cfg.auction_max_attempts,
            limit=factory_limit(
                sim.ec.factory_expansion_level,
                base=cfg.factory_limit_base,
                per_expansion=cfg.factory_limit_per_expansion,
            ),
            land_base=cfg.land_base_value,
            land_growth=cfg.land_growth,
            rng=sim.rng,
        )
        if auction is not None:
            post(
                sim.ec,
                sim.clock.date,
                "info",
                f"Land auction open: plot valued at {auction.land_value:,}",
            )
