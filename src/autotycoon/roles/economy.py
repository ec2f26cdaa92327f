from __future__ import annotations

from dataclasses import dataclass, field

from autotycoon.records import (
    AuctionResult,
    AuctionState,
    ContractHistoryEntry,
    ContractOffer,
    LogEntry,
    OperatingCosts,
    SalesRecord,
)


@dataclass(slots=True)
class Economy:
    """
    Pure *state* container for the company and its market.
    """

    # ── cash & city ──────────────────────────────────────────────────────
    money: float
    population: int
    city_capacity: int
    base_growth_rate: float
    min_growth_rate: float
    multiplier: float = 1.0

    # ── this month ───────────────────────────────────────────────────────
    monthly_revenue: float = 0.0
    monthly_expenses: float = 0.0
    monthly_sales: int = 0

    # ── all-time ─────────────────────────────────────────────────────────
    total_revenue: float = 0.0
    total_expenses: float = 0.0
    cars_produced: int = 0
    cars_sold: int = 0  # drives prestige
    total_contract_revenue: float = 0.0
    total_contract_units: int = 0
    total_crisis_cost: float = 0.0

    # ── research ─────────────────────────────────────────────────────────
    unlocked_classes: list[str] = field(default_factory=list)
    unlocked_parts: list[str] = field(default_factory=list)

    # ── journals (newest first) ──────────────────────────────────────────
    logs: list[LogEntry] = field(default_factory=list)
    contract_history: list[ContractHistoryEntry] = field(default_factory=list)
    sales_history: list[SalesRecord] = field(default_factory=list)  # oldest first

    # ── event gates ──────────────────────────────────────────────────────
    domestic_contracts_this_year: int = 0
    last_export_year: int | None = None
    last_crisis_year: int | None = None
    pending_offer: ContractOffer | None = None
    month_costs: OperatingCosts | None = None  # transient, within a tick

    # ── land & expansions ────────────────────────────────────────────────
    auction: AuctionState | None = None
    auction_attempts: int = 0
    auction_result: AuctionResult | None = None
    factory_expansion_level: int = 0
    showroom_expansion_level: int = 0
