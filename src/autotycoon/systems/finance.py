# src/autotycoon/systems/finance.py
"""
Financial ledger: monthly operating costs and closing the books.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime

import numpy as np
from numpy.random import Generator

from autotycoon.records import OperatingCosts, SalesRecord
from autotycoon.roles import CarModel, Dealership, Economy, Factory
from autotycoon.systems.goods_market import unit_costs
from autotycoon.typing import Float1D

log = logging.getLogger("autotycoon")

SALES_HISTORY_LEN = 12


def _idle_scaled(amount: Float1D, active: np.ndarray, idle_ratio: float) -> Float1D:
    return np.floor(np.where(active, amount, amount * idle_ratio))


def factory_wages(
    fac: Factory,
    complexity: Float1D,
    *,
    multiplier: float,
    base_wage: float,
    idle_ratio: float,
) -> Float1D:
    """``floor(workers · wage · mult · wage_level · complexity)``, idle pays a fraction."""
    full = fac.workers * base_wage * multiplier * fac.wage_level * complexity
    return _idle_scaled(full, fac.active, idle_ratio)


def factory_maintenance(
    fac: Factory,
    complexity: Float1D,
    *,
    multiplier: float,
    base_cost: float,
    idle_ratio: float,
) -> Float1D:
    """``floor(base · (1 + 0.01·(level−1)) · mult · complexity)``, idle pays a fraction."""
    full = base_cost * (1.0 + 0.01 * (fac.level - 1)) * multiplier * complexity
    return _idle_scaled(full, fac.active, idle_ratio)


def dealership_wages(
    dlr: Dealership, *, multiplier: float, base_wage: float, idle_ratio: float
) -> Float1D:
    full = dlr.workers * base_wage * multiplier
    return _idle_scaled(full, dlr.active, idle_ratio)


def dealership_maintenance(
    dlr: Dealership, *, multiplier: float, base_cost: float, idle_ratio: float
) -> Float1D:
    full = np.full(dlr.active.size, base_cost * multiplier)
    return _idle_scaled(full, dlr.active, idle_ratio)


def materials_cost(fac: Factory, cars: CarModel, *, multiplier: float) -> float:
    """Inflated unit cost of every unit produced this month."""
    assigned = fac.model >= 0
    if not assigned.any():
        return 0.0
    cogs = unit_costs(cars, multiplier=multiplier)
    return float((fac.production[assigned] * cogs[fac.model[assigned]]).sum())


def overhead_cost(
    n_factories: int,
    *,
    multiplier: float,
    low: int,
    high: int,
    rng: Generator,
) -> float:
    """Random overhead ``floor(U{low..high} · mult · max(1, n_factories))``."""
    base = int(rng.integers(low, high, endpoint=True))
    return float(math.floor(base * multiplier * max(1, n_factories)))


def close_monthly_books(
    ec: Economy,
    cars: CarModel,
    costs: OperatingCosts,
    *,
    date: datetime,
    produced: int,
) -> float:
    """
    Book revenue and expenses for the month.

    Rule
    ----
        R      = Σ sales_j · price_j
        money += R − E

    Also appends the month to the rolling 12-month sales history and
    updates the all-time counters.

    Returns
    -------
    float
        Net result ``R − E``.
    """
    revenue = float((cars.sales * cars.price).sum())
    sold = int(cars.sales.sum())
    expenses = costs.total

    ec.monthly_revenue = revenue
    ec.monthly_expenses = expenses
    ec.monthly_sales = sold
    ec.money += revenue - expenses

    ec.total_revenue += revenue
    ec.total_expenses += expenses
    ec.cars_produced += produced
    ec.cars_sold += sold

    ec.sales_history.append(
        SalesRecord(month=f"{date:%Y-%m}", sales=sold, revenue=revenue, expenses=expenses)
    )
    del ec.sales_history[:-SALES_HISTORY_LEN]

    log.info(
        f"  Books closed: revenue={revenue:,.0f}, expenses={expenses:,.0f}, "
        f"net={revenue - expenses:,.0f}, cash={ec.money:,.0f}"
    )
    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            f"  Expense breakdown: wages={costs.wages:,.0f} "
            f"maintenance={costs.maintenance:,.0f} overhead={costs.overhead:,.0f} "
            f"materials={costs.materials:,.0f} loan={costs.loan_payment:,.0f}"
        )
    return revenue - expenses


def calc_operating_costs(
    fac: Factory,
    dlr: Dealership,
    cars: CarModel,
    complexity: Float1D,
    *,
    multiplier: float,
    loan_payment: float,
    factory_wage: float,
    dealer_wage: float,
    factory_upkeep: float,
    dealer_upkeep: float,
    idle_ratio: float,
    overhead_range: tuple[int, int],
    facility_divisor: float,
    rng: Generator,
) -> OperatingCosts:
    """Aggregate one month of facility, material and overhead costs."""
    kw = dict(multiplier=multiplier, idle_ratio=idle_ratio)
    wages = factory_wages(fac, complexity, base_wage=factory_wage, **kw).sum()
    wages += dealership_wages(dlr, base_wage=dealer_wage, **kw).sum()
    upkeep = factory_maintenance(fac, complexity, base_cost=factory_upkeep, **kw).sum()
    upkeep += dealership_maintenance(dlr, base_cost=dealer_upkeep, **kw).sum()
    return OperatingCosts(
        wages=float(wages),
        maintenance=float(upkeep),
        overhead=overhead_cost(
            len(fac.ids),
            multiplier=multiplier,
            low=overhead_range[0],
            high=overhead_range[1],
            rng=rng,
        ),
        materials=materials_cost(fac, cars, multiplier=multiplier),
        loan_payment=float(loan_payment),
        facility_divisor=facility_divisor,
    )


def rollover_annual_stats(ec: Economy, cars: CarModel) -> None:
    """Move this year's per-model counters into ``last_year_*`` and reset them."""
    cars.last_year_sales[:] = cars.year_sales
    cars.last_year_revenue[:] = cars.year_revenue
    cars.last_year_profit[:] = cars.year_profit
    cars.last_year_cogs[:] = cars.year_cogs
    cars.year_sales[:] = 0
    cars.year_revenue[:] = 0.0
    cars.year_profit[:] = 0.0
    cars.year_cogs[:] = 0.0
    ec.domestic_contracts_this_year = 0
    log.info(f"  Annual rollover: last year sold {int(cars.last_year_sales.sum())} cars")
