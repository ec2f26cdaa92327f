"""Event classes for the tycoon tick.

Events wrap systems functions, are auto-registered via the
``__init_subclass__`` hook and are composed into a Pipeline.

Each event module corresponds to a system module:
- clock.py        → autotycoon/clock.py, helpers.economic_multiplier
- stock_market.py → systems/stock_market.py
- finance.py      → systems/bank.py, systems/finance.py
- market.py       → systems/goods_market.py
- production.py   → systems/production.py
- contracts.py    → systems/contracts.py
- auction.py      → systems/auction.py
"""

# Import all events to trigger auto-registration
from autotycoon.events.auction import OpenLandAuction, ResolveLandAuction
from autotycoon.events.clock import AdvanceClock, UpdateEconomicMultiplier
from autotycoon.events.contracts import (
    ApplyCrisis,
    ResolveExportContract,
    RollDomesticContract,
)
from autotycoon.events.finance import (
    CloseMonthlyBooks,
    CompoundTermDeposit,
    RolloverAnnualStats,
    SettleOperatingCosts,
)
from autotycoon.events.market import GrowPopulation, ResolveCarMarket
from autotycoon.events.production import RunProduction
from autotycoon.events.stock_market import ResetStockMonthTrackers, UpdateStockMarket

__all__ = [
    "AdvanceClock",
    "ApplyCrisis",
    "CloseMonthlyBooks",
    "CompoundTermDeposit",
    "GrowPopulation",
    "OpenLandAuction",
    "ResetStockMonthTrackers",
    "ResolveCarMarket",
    "ResolveExportContract",
    "ResolveLandAuction",
    "RollDomesticContract",
    "RolloverAnnualStats",
    "RunProduction",
    "SettleOperatingCosts",
    "UpdateEconomicMultiplier",
    "UpdateStockMarket",
]
