# src/autotycoon/systems/bank.py
"""
Bank subsystem: decaying loan amortisation and the single term deposit.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta

from autotycoon.roles import Bank, TermDeposit

log = logging.getLogger("autotycoon")

DEPOSIT_PERIOD = timedelta(days=365)


def service_loan(bank: Bank, *, term_months: int) -> float:
    """
    Take this month's loan payment.

    Rule
    ----
        P = ceil(L / term)
        L = max(0, L − P)

    Payments shrink with the balance, so a voluntary repayment lowers every
    future payment.
    """
    if bank.loan <= 0:
        bank.last_loan_payment = 0.0
        return 0.0
    payment = float(math.ceil(bank.loan / term_months))
    bank.loan = max(0.0, bank.loan - payment)
    bank.last_loan_payment = payment
    log.info(f"  Loan payment {payment:,.0f}, balance now {bank.loan:,.0f}")
    return payment


def open_deposit(bank: Bank, amount: float, now: datetime, *, rate: float) -> TermDeposit:
    bank.deposit = TermDeposit(initial=amount, current=amount, start=now, rate=rate)
    return bank.deposit


def compound_deposit(bank: Bank, now: datetime) -> bool:
    """
    Compound the deposit once a full 365-day period has elapsed since the
    last compounding (or the opening date).

    Returns
    -------
    bool
        True when interest was credited on this call.
    """
    dep = bank.deposit
    if dep is None:
        return False
    anchor = dep.last_compound or dep.start
    if now - anchor < DEPOSIT_PERIOD:
        return False
    interest = math.floor(dep.current * dep.rate)
    dep.current += interest
    dep.last_compound = now
    dep.years += 1
    log.info(f"  Deposit compounded: +{interest:,} (year {dep.years})")
    return True


def completed_years(dep: TermDeposit, now: datetime) -> int:
    """Full 365-day periods since the deposit was opened."""
    return max(0, (now - dep.start).days // 365)


def deposit_payout(dep: TermDeposit, now: datetime) -> int:
    """
    Early-withdrawal value: ``floor(initial · (1 + rate) ** N)`` with N the
    number of completed years. The partial year in progress earns nothing.
    """
    return math.floor(dep.initial * (1.0 + dep.rate) ** completed_years(dep, now))
