"""
Clock events: advance simulated time and refresh the price level.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from autotycoon.core.decorators import event

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation


@event
class AdvanceClock:
    """
    Move the clock forward by one 8-hour tick and record which calendar
    boundaries (week, month, year) were crossed. Every later event in the
    tick reads those boundaries from ``sim.clock.last``.
    """

    def execute(self, sim: Simulation) -> None:
        from autotycoon.clock import advance_clock

        crossed = advance_clock(sim.clock)
        logger = self.get_logger()
        if crossed.new_month:
            logger.info(f"--- {sim.clock.date:%Y-%m} ---")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Tick -> {sim.clock.date:%Y-%m-%d %H:%M} {crossed}")


@event
class UpdateEconomicMultiplier:
    """
    Recompute the price-level multiplier for the current year.

    Rule
    ----
        m = 1.008^(year − 1950)
    """

    def execute(self, sim: Simulation) -> None:
        from autotycoon.helpers import economic_multiplier

        sim.ec.multiplier = economic_multiplier(sim.clock.year, sim.config.inflation_base)
