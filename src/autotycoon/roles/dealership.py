from autotycoon.core.decorators import role
from autotycoon.typing import Bool1D, Int1D


@role
class Dealership:
    """
    Showrooms. Active capacity bounds how many cars can be sold per month.
    """

    ids: list[str]
    names: list[str]
    capacity: Int1D
    level: Int1D
    workers: Int1D
    upgrade_cost: Int1D
    active: Bool1D
    sales: Int1D  # this month
