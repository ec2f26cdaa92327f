from __future__ import annotations

from dataclasses import dataclass, field

from autotycoon.core.decorators import role
from autotycoon.typing import Bool1D, Float1D, Int1D


@role
class StockMarket:
    """
    Listed securities, one slot per company or ETF.

    A slot keeps its id for the whole game. When an unprotected company goes
    bankrupt the slot is re-listed under a new identity and its ``listing``
    generation is bumped; holdings remember the generation they were bought
    in, so a holding from an older listing is void.
    """

    ids: list[str]
    names: list[str]
    categories: list[str]
    sectors: list[str]
    history: list[list[float]]
    price: Float1D
    start_price: Float1D
    volatility: Float1D
    is_etf: Bool1D
    protected: Bool1D
    cycle_end: Int1D
    cycle_target: Float1D
    formation_year: Int1D
    listing: Int1D


@dataclass(slots=True)
class Holding:
    shares: int
    avg_price: float
    listing: int = 0


@dataclass(slots=True)
class Portfolio:
    """
    The player's shareholdings keyed by company id, plus trading cash flow.

    ``month_*`` trackers reset on each new month; ``total_fees`` and
    ``realized_profit`` accumulate for the whole game.
    """

    holdings: dict[str, Holding] = field(default_factory=dict)
    month_revenue: float = 0.0
    month_spend: float = 0.0
    month_fees: float = 0.0
    total_fees: float = 0.0
    realized_profit: float = 0.0
