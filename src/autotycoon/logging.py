"""
Custom logging configuration for autotycoon.

Extends Python's standard logging with a DEEP_DEBUG level (5) for very
verbose tick-by-tick output.

Log Levels
----------
- CRITICAL (50): Critical errors
- ERROR (40): Errors
- WARNING (30): Warnings, danger journal entries
- INFO (20): Informational messages (default)
- DEBUG (10): Debug messages
- DEEP_DEBUG (5): Per-tick detail

Examples
--------
>>> from autotycoon import logging
>>> logger = logging.getLogger("autotycoon.events.resolve_car_market")
>>> logger.info("Market resolved")
>>> logger.deep("Per-model demand: %s", [12, 4, 0])

Per-event levels are set through the ``logging`` config section:

>>> import autotycoon as at
>>> sim = at.Simulation.init(
...     logging={"default_level": "INFO",
...              "events": {"update_stock_market": "DEBUG"}}
... )

See Also
--------
autotycoon.core.event.Event.get_logger : Logger for a specific event
"""

import logging
from typing import Any

(CRITICAL, ERROR, WARNING, INFO, DEBUG) = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
)
DEEP_DEBUG = 5
logging.addLevelName(DEEP_DEBUG, "DEEP")


class TycoonLogger(logging.Logger):
    """
    Logger with DEEP_DEBUG level support.

    Adds a ``deep()`` method for very verbose output (level 5).
    """

    def deep(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log *msg* at DEEP_DEBUG level (5)."""
        if self.isEnabledFor(DEEP_DEBUG):
            self._log(DEEP_DEBUG, msg, args, **kwargs)


logging.setLoggerClass(TycoonLogger)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)


def getLogger(name: str | None = None) -> TycoonLogger:
    """
    Get a TycoonLogger instance.

    Parameters
    ----------
    name : str, optional
        Logger name. If None, returns the root logger.

    Returns
    -------
    TycoonLogger
        Logger instance with ``deep()`` method.
    """
    return logging.getLogger(name)  # type: ignore[return-value]
