"""
Configuration dataclass for simulation parameters.

Config instances are created by Simulation.init() after merging defaults,
user config, and kwargs, and are never modified afterwards. Validation
happens in ConfigValidator.

See Also
--------
ConfigValidator : Centralized validation for configuration parameters
autotycoon.simulation.Simulation.init : Creates Config from merged parameters
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Config:
    """
    Immutable configuration for the tycoon simulation.

    Starting-world values (money, population, unlocks, start date) are
    consumed once by ``Simulation._from_params``; everything kept here is
    read by events and commands on every tick.

    Parameters
    ----------
    demand_per_thousand : float
        New-car buyers per thousand inhabitants per month.
    seasonality : tuple[float, ...]
        Twelve monthly demand factors, January first.
    segment_shares : tuple[float, float, float]
        Lower / Middle / Higher share of aggregate demand.
    market_noise : float
        Half-width of the uniform aggregate demand shock.
    model_jitter : float
        Half-width of the uniform per-model demand shock.
    inflation_base : float
        Yearly price-level growth; the multiplier is ``base ** (year - 1950)``.
    factory_wage, dealer_wage : float
        Monthly base wage per worker.
    idle_cost_ratio : float
        Share of wages and maintenance an idle facility still pays.
    factory_maintenance, dealer_maintenance : float
        Monthly base upkeep per facility.
    overhead_min, overhead_max : int
        Bounds of the monthly random overhead draw.
    facility_cost_divisor : float
        Wages and maintenance are booked divided by this value.
    loan_term_months : int
        Amortisation horizon; each month repays ``ceil(loan / term)``.
    loan_markup : float
        Debt booked per unit of cash borrowed.
    deposit_rate : float
        Yearly term-deposit interest.
    companies_per_category : int
        Listed companies per stock category.
    history_cap : int
        Longest price history kept per security.
    bankruptcy_price : float
        An unprotected company at or below this price is re-listed.
    protected_floor : float
        Blue chips bounce when falling below this price.
    brokerage_fee : float
        Fee on both sides of a share trade.
    max_shares : int
        Largest holding per company.
    contract_resolution : str
        ``"auto"`` fulfils or drops contracts immediately, ``"offer"`` parks
        them for an accept/reject decision.
    domestic_contract_chance : float
        Monthly probability of a domestic order.
    domestic_contracts_per_year : int
        Cap on fulfilled domestic orders per calendar year.
    domestic_min_rank, export_min_rank : int
        Prestige needed before contracts are offered.
    crisis_min_rank, crisis_max_rank : int
        Prestige band exposed to yearly crises.
    auction_interval : int
        Auctions open in years divisible by this value.
    auction_max_attempts : int
        Auctions resolved before land is only sold by developers.
    land_base_value : int
        1950 land value.
    land_growth : float
        Yearly land value growth.
    developer_markup : int
        Developer price as a multiple of land value.
    factory_limit_base, factory_limit_per_expansion : int
        Factory cap ``base + per_expansion * level``.
    showroom_limit_base, showroom_limit_per_expansion : int
        Dealership cap ``base + per_expansion * level``.
    parking_base, parking_per_level : int
        Factory lot size ``base + per_level * (level - 1)``.
    """

    demand_per_thousand: float
    seasonality: tuple[float, ...]
    segment_shares: tuple[float, ...]
    market_noise: float
    model_jitter: float

    inflation_base: float
    factory_wage: float
    dealer_wage: float
    idle_cost_ratio: float
    factory_maintenance: float
    dealer_maintenance: float
    overhead_min: int
    overhead_max: int
    facility_cost_divisor: float

    loan_term_months: int
    loan_markup: float
    deposit_rate: float

    companies_per_category: int
    history_cap: int
    bankruptcy_price: float
    protected_floor: float
    brokerage_fee: float
    max_shares: int

    contract_resolution: str
    domestic_contract_chance: float
    domestic_contracts_per_year: int
    domestic_min_rank: int
    export_min_rank: int
    crisis_min_rank: int
    crisis_max_rank: int

    auction_interval: int
    auction_max_attempts: int
    land_base_value: int
    land_growth: float
    developer_markup: int

    factory_limit_base: int
    factory_limit_per_expansion: int
    showroom_limit_base: int
    showroom_limit_per_expansion: int
    parking_base: int
    parking_per_level: int
