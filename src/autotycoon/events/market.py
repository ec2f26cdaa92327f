"""
Market events: city growth and the monthly car market.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from autotycoon.core.decorators import event

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation


@event
class GrowPopulation:
    """
    Grow the city once a month.

    Rule
    ----
        r   = max(r_min, r_base · (1 − pop / capacity))
        pop = floor(pop · (1 + r / 12))
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_month:
            return
        from autotycoon.systems.goods_market import grow_population

        grow_population(sim.ec)


@event
class ResolveCarMarket:
    """
    Monthly car market: aggregate demand, desirability, per-model demand,
    then sales capped by dealership throughput and factory inventory.

    Rule
    ----
        D_s  = floor(D · share_s)
        d_js = floor(D_s · w_js / Σ w_s · U(0.95, 1.05))
        q_j  = min(Σ_s d_js, throughput left, inventory_j)
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_month:
            return
        from autotycoon.systems.goods_market import (
            allocate_model_demand,
            calc_desirability,
            calc_segment_demand,
            cars_sell_to_market,
            dealerships_book_sales,
            sales_gate,
            segment_weights,
        )

        cfg = sim.config
        cars = sim.cars
        mult = sim.ec.multiplier
        logger = self.get_logger()

        buyers = calc_segment_demand(
            sim.ec.population,
            sim.clock.month,
            seasonality=cfg.seasonality,
            per_thousand=cfg.demand_per_thousand,
            shares=cfg.segment_shares,
            noise=cfg.market_noise,
            rng=sim.rng,
        )
        if not cars.ids:
            dealerships_book_sales(sim.dlr, 0)
            logger.info("No car models on sale")
            return

        desirability = calc_desirability(cars, sim.catalog, multiplier=mult)
        weights = segment_weights(cars, sim.catalog, desirability)
        demand = allocate_model_demand(buyers, weights, jitter=cfg.model_jitter, rng=sim.rng)
        sellable = sales_gate(cars, sim.catalog, multiplier=mult)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Desirability: {desirability.round(1).tolist()}")
            logger.debug(f"Demand per model/segment: {demand.tolist()}")

        sold = cars_sell_to_market(
            cars, sim.fac, sim.dlr, demand, multiplier=mult, sellable=sellable
        )
        dealerships_book_sales(sim.dlr, sold)
