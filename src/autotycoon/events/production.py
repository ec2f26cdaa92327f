"""
Production event: monthly factory output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from autotycoon.core.decorators import event

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation


@event
class RunProduction:
    """
    Produce one month of cars into factory lots.

    Rule
    ----
        Y_max = floor(floor(capacity / complexity) · efficiency / 100)
        Y     = clamp(min(target, Y_max, parking − S), 0, ∞)
        S    += Y
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_month:
            return
        from autotycoon.systems.production import factories_run_production

        factories_run_production(
            sim.fac,
            sim.cars,
            sim.catalog,
            parking_base=sim.config.parking_base,
            parking_per_level=sim.config.parking_per_level,
        )
