"""
autotycoon - Economic simulation core for an automotive tycoon game
===================================================================

The engine advances a single game world in 8-hour ticks. Each tick runs an
ordered pipeline of events: the clock moves, month/week/year boundaries
trigger population growth, the car market, production, operating costs,
the stock market, contracts and land auctions. Player actions are plain
functions in :mod:`autotycoon.commands` that validate, mutate and journal.

Quick Start
-----------
>>> import autotycoon as at
>>> sim = at.Simulation.init(seed=42)
>>> at.commands.create_car_model(sim, "Runabout", "A", "small-i4", "frame", "small", "spartan")
True
>>> at.commands.update_factory_settings(sim, "factory-1", model_id="model-1")
True
>>> sim.run(n_ticks=3 * 31)

Custom configuration via YAML file or kwargs:

>>> sim = at.Simulation.init(config="my_game.yml", starting_money=5_000_000)

Key Concepts
------------
**Roles**
  Factories, dealerships, car models and listed companies are stored as
  parallel NumPy arrays, one index per slot.

**Event Pipeline**
  ``default_pipeline.yml`` lists the events in execution order. Events
  gate themselves on the calendar boundary the tick crossed.

**Deterministic RNG**
  Every stochastic decision draws from ``sim.rng``; a fixed seed replays
  the same game.

Notes
-----
- Time scale: 1 tick = 8 hours, 3 ticks per day
- Configuration precedence: defaults.yml → user config → kwargs
- Save games are JSON, see :mod:`autotycoon.persistence`
"""

from __future__ import annotations

__version__: str = "0.1.0"

import numpy as np

from .typing import Rng

from . import logging  # noqa: E402 (circular‑safe)


def make_rng(seed: int | None = None) -> Rng:
    """Create a new random number generator.

    Parameters
    ----------
    seed : int | None
        Seed for reproducibility. If `None`, uses a random seed.

    Returns
    -------
    Rng
        A NumPy random number generator (np.random.Generator).

    Examples
    --------
    >>> import autotycoon as at
    >>> sim = at.Simulation.init(seed=at.make_rng(7))
    """
    return np.random.default_rng(seed)


from .core import Event, Role, event, get_event, get_role, role  # noqa: E402
from .simulation import Simulation  # noqa: E402  (circular‑safe)

from . import commands, persistence  # noqa: E402

__all__ = [
    "Simulation",
    "__version__",
    "Event",
    "Role",
    "event",
    "role",
    "get_event",
    "get_role",
    "Rng",
    "make_rng",
    "commands",
    "persistence",
    "logging",
]
