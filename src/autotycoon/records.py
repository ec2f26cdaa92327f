"""Immutable records emitted by the engine (journal, contracts, auctions)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

EntryKind = Literal["success", "danger", "info"]
ContractKind = Literal["domestic", "export"]


@dataclass(slots=True, frozen=True)
class TransactionDetails:
    """Breakdown attached to a fulfilled contract journal entry."""

    model_name: str
    quantity: int
    base_price: int
    final_price: int
    negotiation_pct: float
    revenue: int
    profit: int


@dataclass(slots=True, frozen=True)
class BankruptcyRecord:
    """What happened when a listed company went under and was re-listed."""

    company_id: str
    old_name: str
    old_category: str
    date: str
    years_active: int
    player_had_shares: bool
    shares_owned: int
    money_lost: float
    new_name: str
    new_category: str
    ipo_price: float


@dataclass(slots=True, frozen=True)
class LogEntry:
    date: str
    kind: EntryKind
    message: str
    details: TransactionDetails | BankruptcyRecord | None = None


@dataclass(slots=True, frozen=True)
class SalesRecord:
    month: str  # "YYYY-MM"
    sales: int
    revenue: float
    expenses: float


@dataclass(slots=True, frozen=True)
class ContractOffer:
    """
    A drafted contract: who wants how many cars of which class, at what price.

    ``base_price`` is the list price of the reference model; ``unit_price``
    is the negotiated price after the random swing and the cost floor.
    """

    kind: ContractKind
    contractor: str
    class_id: str
    model_name: str
    quantity: int
    base_price: int
    unit_price: int
    unit_cost: int
    date: str


@dataclass(slots=True, frozen=True)
class ContractHistoryEntry:
    kind: ContractKind
    contractor: str
    class_id: str
    requested: int
    fulfilled: int
    unit_price: int
    revenue: int
    inventory_before: int
    inventory_after: int
    date: str


@dataclass(slots=True)
class AuctionState:
    """Open land auction. ``user_bid`` is already held out of cash."""

    year: int
    land_value: int
    rival_bid: int
    user_bid: float = 0.0


@dataclass(slots=True, frozen=True)
class AuctionResult:
    year: int
    won: bool
    user_bid: float
    rival_bid: int


@dataclass(slots=True, frozen=True)
class OperatingCosts:
    """
    One month of costs.

    Wages and maintenance are booked at a third of their nominal value
    (``facility_divisor``); overhead, materials and the loan payment in full.
    """

    wages: float
    maintenance: float
    overhead: float
    materials: float
    loan_payment: float
    facility_divisor: float = 3.0

    @property
    def total(self) -> float:
        return (
            (self.wages + self.maintenance) / self.facility_divisor
            + self.overhead
            + self.materials
            + self.loan_payment
        )
