"""
Finance events: term deposit compounding, monthly costs and books,
and the yearly statistics rollover.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from autotycoon.core.decorators import event

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation


@event
class CompoundTermDeposit:
    """
    Credit a year of interest once 365 days have passed since the last
    compounding (checked every tick).

    Rule
    ----
        current += floor(current · rate)
    """

    def execute(self, sim: Simulation) -> None:
        dep = sim.bank.deposit
        if dep is None:
            return
        from autotycoon.systems.bank import compound_deposit

        before = dep.current
        if compound_deposit(sim.bank, sim.clock.date):
            sim.bank.deposit_profit_last_month = dep.current - before


@event
class SettleOperatingCosts:
    """
    Take the monthly loan payment and price this month's operating costs.

    Rule
    ----
        P = ceil(L / term)
        E = (wages + maintenance) / 3 + overhead + materials + P

    The costs are held on ``ec.month_costs`` until the books close.
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_month:
            return
        from autotycoon.systems.bank import service_loan
        from autotycoon.systems.finance import calc_operating_costs
        from autotycoon.systems.production import assigned_complexity

        cfg = sim.config
        payment = service_loan(sim.bank, term_months=cfg.loan_term_months)
        sim.ec.month_costs = calc_operating_costs(
            sim.fac,
            sim.dlr,
            sim.cars,
            assigned_complexity(sim.fac, sim.cars, sim.catalog),
            multiplier=sim.ec.multiplier,
            loan_payment=payment,
            factory_wage=cfg.factory_wage,
            dealer_wage=cfg.dealer_wage,
            factory_upkeep=cfg.factory_maintenance,
            dealer_upkeep=cfg.dealer_maintenance,
            idle_ratio=cfg.idle_cost_ratio,
            overhead_range=(cfg.overhead_min, cfg.overhead_max),
            facility_divisor=cfg.facility_cost_divisor,
            rng=sim.rng,
        )
        logger = self.get_logger()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Operating costs: {sim.ec.month_costs}")


@event
class CloseMonthlyBooks:
    """
    Book market revenue against this month's costs.

    Rule
    ----
        R      = Σ sales · price
        money += R − E
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_month:
            return
        from autotycoon.records import OperatingCosts
        from autotycoon.systems.finance import close_monthly_books

        costs = sim.ec.month_costs or OperatingCosts(0.0, 0.0, 0.0, 0.0, 0.0)
        close_monthly_books(
            sim.ec,
            sim.cars,
            costs,
            date=sim.clock.date,
            produced=int(sim.fac.production.sum()),
        )
        sim.ec.month_costs = None


@event
class RolloverAnnualStats:
    """On January 1st, archive per-model yearly counters and reset them."""

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_year:
            return
        from autotycoon.systems.finance import rollover_annual_stats

        rollover_annual_stats(sim.ec, sim.cars)
