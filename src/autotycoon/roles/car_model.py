from autotycoon.core.decorators import role
from autotycoon.typing import Float1D, Int1D, Int2D


@role
class CarModel:
    """
    Player-designed car models.

    Parts are referenced by stable catalog ids. Derived stats are cached at
    design time and refreshed whenever the class or a part changes.

    Sales counters come in three horizons: this month (``sales``,
    ``breakdown`` per Lower/Middle/Higher segment), this year (``year_*``,
    rolled into ``last_year_*`` on January 1st) and all time (``total_*``).
    """

    ids: list[str]
    names: list[str]
    class_id: list[str]
    engine: list[str]
    chassis: list[str]
    body: list[str]
    interior: list[str]

    price: Float1D
    production_cost: Int1D
    sensitivity: Float1D
    power: Float1D
    weight: Float1D
    safety: Float1D
    style: Float1D
    reliability: Float1D
    interior_quality: Float1D
    synergy: Float1D
    popularity: Float1D

    demand: Int1D
    desirability: Float1D
    sales: Int1D
    breakdown: Int2D  # shape (n, 3)
    total_sales: Int1D
    total_profit: Float1D

    year_sales: Int1D
    year_revenue: Float1D
    year_profit: Float1D
    year_cogs: Float1D
    last_year_sales: Int1D
    last_year_revenue: Float1D
    last_year_profit: Float1D
    last_year_cogs: Float1D
    year_introduced: Int1D
