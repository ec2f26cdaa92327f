# src/autotycoon/persistence.py
"""
Save and load a game as JSON.

A snapshot holds every durable field of the world: clock, company
finances and counters, journals, facilities, car models, the stock market
with its price histories, the portfolio, the bank and the random
generator state. Transient UI state (pause, auto-throttle, a pending
contract offer, an undismissed auction result) is never saved.

Loading is all-or-nothing: the complete new state is built first and only
swapped into the simulation when every part parsed cleanly.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Mapping

import numpy as np

from autotycoon.clock import MAX_SPEED, MIN_SPEED, Clock
from autotycoon.helpers import n_slots
from autotycoon.records import (
    AuctionState,
    BankruptcyRecord,
    ContractHistoryEntry,
    LogEntry,
    SalesRecord,
    TransactionDetails,
)
from autotycoon.roles import Bank, Economy, Holding, Portfolio, TermDeposit
from autotycoon.systems.design import new_car_models
from autotycoon.systems.goods_market import new_dealerships
from autotycoon.systems.production import new_factories
from autotycoon.systems.stock_market import new_stock_market

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation

log = logging.getLogger("autotycoon")

SNAPSHOT_VERSION = 1
SLOT_SUFFIX = ".json"
_SLOT_NAME = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

# never persisted
_TRANSIENT = {"pending_offer", "month_costs", "auction_result"}
_RECORD_LISTS = {"logs", "contract_history", "sales_history"}


# encoding
# ---------------------------------------------------------------------------
def _role_to_dict(role: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(role):
        col = getattr(role, f.name)
        out[f.name] = col.tolist() if isinstance(col, np.ndarray) else list(col)
    return out


def _deposit_to_dict(dep: TermDeposit | None) -> dict[str, Any] | None:
    if dep is None:
        return None
    return {
        "initial": dep.initial,
        "current": dep.current,
        "start": dep.start.isoformat(),
        "last_compound": dep.last_compound.isoformat() if dep.last_compound else None,
        "years": dep.years,
        "rate": dep.rate,
    }


def _economy_to_dict(ec: Economy) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(ec):
        if f.name in _TRANSIENT:
            continue
        val = getattr(ec, f.name)
        if f.name in _RECORD_LISTS:
            out[f.name] = [asdict(r) for r in val]
        elif f.name == "auction":
            out[f.name] = asdict(val) if val is not None else None
        elif isinstance(val, list):
            out[f.name] = list(val)
        else:
            out[f.name] = val
    return out


def snapshot(sim: Simulation) -> dict[str, Any]:
    """JSON-ready dict of the durable game state."""
    pf = sim.pf
    return {
        "version": SNAPSHOT_VERSION,
        "t": sim.t,
        "clock": {"date": sim.clock.date.isoformat(), "speed": sim.clock.speed},
        "economy": _economy_to_dict(sim.ec),
        "bank": {
            "loan": sim.bank.loan,
            "last_loan_payment": sim.bank.last_loan_payment,
            "deposit_profit_last_month": sim.bank.deposit_profit_last_month,
            "deposit": _deposit_to_dict(sim.bank.deposit),
        },
        "factories": _role_to_dict(sim.fac),
        "dealerships": _role_to_dict(sim.dlr),
        "car_models": _role_to_dict(sim.cars),
        "stock_market": _role_to_dict(sim.mkt),
        "portfolio": {
            "holdings": {cid: asdict(h) for cid, h in pf.holdings.items()},
            "month_revenue": pf.month_revenue,
            "month_spend": pf.month_spend,
            "month_fees": pf.month_fees,
            "total_fees": pf.total_fees,
            "realized_profit": pf.realized_profit,
        },
        "rng": sim.rng.bit_generator.state,
    }


def _json_default(obj: Any) -> Any:
    # numpy scalars leak into counters and records
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def serialize(sim: Simulation) -> str:
    """The snapshot as a JSON string."""
    return json.dumps(snapshot(sim), default=_json_default)


# decoding
# ---------------------------------------------------------------------------
def _role_from_dict(factory: Callable[[], Any], data: Mapping[str, Any]) -> Any:
    role = factory()
    for f in fields(role):
        col = getattr(role, f.name)
        raw = data[f.name]
        if isinstance(col, np.ndarray):
            arr = np.asarray(raw, dtype=col.dtype)
            if col.ndim == 2:
                arr = arr.reshape(-1, col.shape[1])
            elif arr.ndim != 1:
                raise ValueError(f"Field '{f.name}' must be a flat list")
            setattr(role, f.name, arr)
        else:
            if not isinstance(raw, list):
                raise TypeError(f"Field '{f.name}' must be a list")
            setattr(role, f.name, list(raw))

    n = n_slots(role)
    for f in fields(role):
        if len(getattr(role, f.name)) != n:
            raise ValueError(
                f"{type(role).__name__}.{f.name} has {len(getattr(role, f.name))} "
                f"slots, expected {n}"
            )
    return role


def _details_from(d: Mapping[str, Any] | None) -> TransactionDetails | BankruptcyRecord | None:
    if d is None:
        return None
    if "company_id" in d:
        return BankruptcyRecord(**d)
    return TransactionDetails(**d)


def _economy_from(data: Mapping[str, Any]) -> Economy:
    kw = dict(data)
    for key in _TRANSIENT:
        kw.pop(key, None)
    kw["logs"] = [
        LogEntry(
            date=e["date"],
            kind=e["kind"],
            message=e["message"],
            details=_details_from(e.get("details")),
        )
        for e in kw.get("logs", [])
    ]
    kw["contract_history"] = [ContractHistoryEntry(**e) for e in kw.get("contract_history", [])]
    kw["sales_history"] = [SalesRecord(**e) for e in kw.get("sales_history", [])]
    auction = kw.get("auction")
    kw["auction"] = AuctionState(**auction) if auction is not None else None
    ec = Economy(**kw)
    if not isinstance(ec.money, (int, float)) or isinstance(ec.money, bool):
        raise TypeError("economy.money must be a number")
    return ec


def _deposit_from(d: Mapping[str, Any] | None) -> TermDeposit | None:
    if d is None:
        return None
    last = d.get("last_compound")
    return TermDeposit(
        initial=float(d["initial"]),
        current=float(d["current"]),
        start=datetime.fromisoformat(d["start"]),
        last_compound=datetime.fromisoformat(last) if last else None,
        years=int(d["years"]),
        rate=float(d["rate"]),
    )


def _build_state(sim: Simulation, data: Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"save data must be a mapping, got {type(data).__name__}")
    if data.get("version") != SNAPSHOT_VERSION:
        raise ValueError(f"unsupported save version {data.get('version')!r}")

    clock_d = data["clock"]
    speed = int(clock_d["speed"])
    if not MIN_SPEED <= speed <= MAX_SPEED:
        raise ValueError(f"clock speed {speed} outside {MIN_SPEED}..{MAX_SPEED}")
    clock = Clock(
        date=datetime.fromisoformat(clock_d["date"]),
        speed=speed,
        paused=True,
    )

    bank_d = data["bank"]
    bank = Bank(
        loan=float(bank_d["loan"]),
        deposit=_deposit_from(bank_d["deposit"]),
        last_loan_payment=float(bank_d["last_loan_payment"]),
        deposit_profit_last_month=float(bank_d["deposit_profit_last_month"]),
    )

    pf_d = data["portfolio"]
    pf = Portfolio(
        holdings={cid: Holding(**h) for cid, h in pf_d["holdings"].items()},
        month_revenue=float(pf_d["month_revenue"]),
        month_spend=float(pf_d["month_spend"]),
        month_fees=float(pf_d["month_fees"]),
        total_fees=float(pf_d["total_fees"]),
        realized_profit=float(pf_d["realized_profit"]),
    )

    fac = _role_from_dict(new_factories, data["factories"])
    dlr = _role_from_dict(new_dealerships, data["dealerships"])
    cars = _role_from_dict(new_car_models, data["car_models"])
    mkt = _role_from_dict(new_stock_market, data["stock_market"])
    if ((fac.model < -1) | (fac.model >= len(cars.ids))).any():
        raise ValueError("factory assigned to a car model that does not exist")
    for cid, h in pf.holdings.items():
        if cid not in mkt.ids:
            raise ValueError(f"holding in unknown company {cid!r}")
        if h.shares <= 0:
            raise ValueError(f"holding in {cid!r} has {h.shares} shares")

    rng = np.random.Generator(type(sim.rng.bit_generator)())
    if "rng" in data:
        rng.bit_generator.state = data["rng"]

    return {
        "t": int(data["t"]),
        "clock": clock,
        "ec": _economy_from(data["economy"]),
        "bank": bank,
        "pf": pf,
        "fac": fac,
        "dlr": dlr,
        "cars": cars,
        "mkt": mkt,
        "rng": rng,
    }


def load_from_data(sim: Simulation, data: str | bytes | Mapping[str, Any]) -> bool:
    """
    Replace the world of *sim* with a saved one.

    Returns
    -------
    bool
        False (state untouched) when the data cannot be parsed or has the
        wrong shape. On success the game is paused, unthrottled, and has no
        pending offer or auction result.
    """
    try:
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        state = _build_state(sim, data)  # type: ignore[arg-type]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
        log.warning(f"Save data rejected: {exc}")
        return False

    for name, value in state.items():
        setattr(sim, name, value)
    sim.clock.paused = True
    sim.clock.auto_throttled = False
    sim.ec.pending_offer = None
    sim.ec.auction_result = None
    log.info(f"Game loaded at {sim.clock.date:%Y-%m-%d}")
    return True


# slots
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class SlotInfo:
    name: str
    game_date: str
    money: float


def _slot_path(directory: str | Path, slot: str) -> Path:
    if not _SLOT_NAME.match(slot):
        raise ValueError(f"Invalid save slot name {slot!r}")
    return Path(directory) / f"{slot}{SLOT_SUFFIX}"


def save_to_slot(sim: Simulation, slot: str, directory: str | Path) -> Path:
    """Write the game to ``<directory>/<slot>.json``, creating the directory."""
    path = _slot_path(directory, slot)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(sim), encoding="utf-8")
    log.info(f"Game saved to slot '{slot}'")
    return path


def load_from_slot(sim: Simulation, slot: str, directory: str | Path) -> bool:
    """Load a slot; False when it is missing or unreadable."""
    path = _slot_path(directory, slot)
    if not path.is_file():
        return False
    return load_from_data(sim, path.read_text(encoding="utf-8"))


def delete_slot(slot: str, directory: str | Path) -> bool:
    path = _slot_path(directory, slot)
    if not path.is_file():
        return False
    path.unlink()
    return True


def list_slots(directory: str | Path) -> list[SlotInfo]:
    """Saved slots in *directory*, by name. Unreadable files are skipped."""
    root = Path(directory)
    if not root.is_dir():
        return []
    out = []
    for path in sorted(root.glob(f"*{SLOT_SUFFIX}")):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            info = SlotInfo(
                name=path.stem,
                game_date=data["clock"]["date"][:10],
                money=float(data["economy"]["money"]),
            )
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            log.warning(f"Skipping unreadable save file {path.name}")
            continue
        out.append(info)
    return out
