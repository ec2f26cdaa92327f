"""Event base class definition."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation


def _camel_to_snake(name: str) -> str:
    """Convert CamelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


@dataclass(slots=True)
class Event(ABC):
    """
    Base class for one step of the tick.

    An Event reads the clock boundaries of the current tick, decides whether
    it is due (every tick, Monday, new month or new year) and calls the
    systems functions that mutate the simulation state in place. Events run
    in the exact order listed by the Pipeline.

    Notes
    -----
    Events are registered automatically via ``__init_subclass__`` under the
    snake_case form of the class name.
    """

    name: ClassVar[str] = ""

    def __init_subclass__(cls, name: str = "", **kwargs: Any) -> None:
        super(Event, cls).__init_subclass__(**kwargs)

        # see Role.__init_subclass__ for the double-call caveat
        if name != "":
            cls.name = name
        elif cls.name == "":
            cls.name = _camel_to_snake(cls.__name__)

        from autotycoon.core.registry import _EVENT_REGISTRY

        _EVENT_REGISTRY[cls.name] = cls

    def get_logger(self) -> logging.Logger:
        """
        Logger for this event, named ``autotycoon.events.{event_name}``.

        Per-event levels are configured through the ``logging.events``
        config section:

        logging:
          events:
            update_stock_market: DEBUG
            resolve_car_market: WARNING
        """
        return logging.getLogger(f"autotycoon.events.{self.name}")

    @abstractmethod
    def execute(self, sim: Simulation) -> None:
        """
        Run the event against *sim*, mutating it in place.

        Use ``self.get_logger()`` for output and guard expensive messages::

            logger = self.get_logger()
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Demand per model: %s", sim.cars.demand)
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
