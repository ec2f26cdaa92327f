"""
Stock market events: weekly price session and monthly P&L trackers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from autotycoon.core.decorators import event

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation


@event
class ResetStockMonthTrackers:
    """Zero the portfolio's monthly revenue, spend and fee trackers on a new month."""

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_month:
            return
        from autotycoon.systems.stock_market import reset_month_trackers

        reset_month_trackers(sim.pf)


@event
class UpdateStockMarket:
    """
    Weekly market session (on crossing into Monday).

    ETFs drift toward their sector means; regular companies move toward
    their cycle targets with volatility noise. Unprotected companies that
    collapse are re-listed and journalled, as a danger entry when the
    player held shares in them.
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_week:
            return
        from autotycoon.systems.journal import post
        from autotycoon.systems.stock_market import update_stock_prices

        cfg = sim.config
        records = update_stock_prices(
            sim.mkt,
            sim.pf,
            date=sim.clock.date,
            categories={c.name: c for c in sim.catalog.stock_categories},
            history_cap=cfg.history_cap,
            bankruptcy_price=cfg.bankruptcy_price,
            protected_floor=cfg.protected_floor,
            rng=sim.rng,
        )
        for rec in records:
            if rec.player_had_shares:
                msg = (
                    f"{rec.old_name} went bankrupt; {rec.shares_owned:,} shares "
                    f"worth {rec.money_lost:,.0f} wiped out"
                )
                post(sim.ec, sim.clock.date, "danger", msg, details=rec)
            else:
                msg = f"{rec.old_name} went bankrupt and re-listed as {rec.new_name}"
                post(sim.ec, sim.clock.date, "info", msg, details=rec)
