from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class TermDeposit:
    """
    A single fixed-rate deposit.

    ``current`` compounds once per full 365 days since ``last_compound``
    (or ``start``); ``years`` counts completed compounding periods.
    """

    initial: float
    current: float
    start: datetime
    last_compound: datetime | None = None
    years: int = 0
    rate: float = 0.05


@dataclass(slots=True)
class Bank:
    """Outstanding loan balance and the (at most one) term deposit."""

    loan: float = 0.0
    deposit: TermDeposit | None = None
    last_loan_payment: float = 0.0
    deposit_profit_last_month: float = 0.0
