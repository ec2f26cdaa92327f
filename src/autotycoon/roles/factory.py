from autotycoon.core.decorators import role
from autotycoon.typing import Bool1D, Float1D, Idx1D, Int1D


@role
class Factory:
    """
    Production plants, one slot per factory.

    Factories are opened (initial plant, auction win, developer purchase)
    and upgraded in place; they are never closed. ``model`` is the slot of
    the car model being built, ``-1`` when nothing is assigned.
    """

    ids: list[str]
    names: list[str]
    capacity: Int1D
    level: Int1D
    efficiency: Float1D  # percent
    wage_level: Float1D
    workers: Int1D
    upgrade_cost: Int1D
    active: Bool1D
    model: Idx1D
    target: Int1D
    inventory: Int1D
    production: Int1D  # this month's output
