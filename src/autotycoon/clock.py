"""
Simulated clock.

One tick is 8 simulated hours (3 ticks per day). The host is expected to
schedule ticks every ``1000 / speed`` milliseconds; the engine itself never
sleeps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Sequence

log = logging.getLogger("autotycoon")

HOURS_PER_TICK = 8
TICKS_PER_DAY = 24 // HOURS_PER_TICK
MIN_SPEED = 1
MAX_SPEED = 25
START_DATE = datetime(1950, 2, 1)

_TICK = timedelta(hours=HOURS_PER_TICK)
_MONDAY = 0


@dataclass(slots=True, frozen=True)
class Boundaries:
    """Calendar boundaries crossed by the most recent tick."""

    new_month: bool = False
    new_week: bool = False
    new_year: bool = False


@dataclass(slots=True)
class Clock:
    """
    Current simulated date plus scheduler controls.

    Attributes
    ----------
    date : datetime
        Current simulated timestamp.
    speed : int
        Tick-rate multiplier in ``[1, 25]``.
    paused : bool
        When set, ticks are ignored.
    auto_throttled : bool
        Set while a blocking decision is pending; speed is pinned to 1x.
    speed_before_throttle : int or None
        Speed to restore once the throttle or brake is released.
    last : Boundaries
        Boundaries crossed by the latest tick; read by month/week/year events.
    """

    date: datetime = START_DATE
    speed: int = 1
    paused: bool = False
    auto_throttled: bool = False
    speed_before_throttle: int | None = None
    last: Boundaries = field(default_factory=Boundaries)

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def month(self) -> int:
        return self.date.month


def advance_clock(clock: Clock) -> Boundaries:
    """
    Move the clock forward by one tick and record crossed boundaries.

    ``new_week`` fires only when crossing *into* Monday; ``new_year``
    always implies ``new_month``.
    """
    old = clock.date
    new = old + _TICK
    new_year = new.year != old.year
    crossed = Boundaries(
        new_month=new_year or new.month != old.month,
        new_week=old.weekday() != _MONDAY and new.weekday() == _MONDAY,
        new_year=new_year,
    )
    clock.date = new
    clock.last = crossed
    return crossed


def tick_interval_ms(speed: int) -> float:
    """Scheduler period for *speed*."""
    return 1000.0 / speed


def era_name(year: int, eras: Sequence[tuple[int | None, str]]) -> str:
    """Name of the historical era *year* falls into."""
    for until, name in eras:
        if until is None or year < until:
            return name
    return eras[-1][1]


def set_speed(clock: Clock, speed: int) -> bool:
    """Change speed; refused while throttled unless going back to 1x."""
    if isinstance(speed, bool) or not isinstance(speed, int):
        return False
    if not MIN_SPEED <= speed <= MAX_SPEED:
        return False
    if clock.auto_throttled and speed > MIN_SPEED:
        log.debug("Speed change to %dx refused: decision pending", speed)
        return False
    clock.speed = speed
    return True


def throttle(clock: Clock) -> None:
    """Pin speed to 1x while a blocking decision is pending."""
    if clock.auto_throttled:
        return
    if clock.speed > MIN_SPEED:
        clock.speed_before_throttle = clock.speed
    clock.speed = MIN_SPEED
    clock.auto_throttled = True


def release_throttle(clock: Clock) -> None:
    """Clear the throttle and restore the remembered speed, if any."""
    if not clock.auto_throttled:
        return
    clock.auto_throttled = False
    if clock.speed_before_throttle is not None:
        clock.speed = clock.speed_before_throttle
        clock.speed_before_throttle = None


def emergency_brake(clock: Clock) -> None:
    """Drop to 1x immediately, remembering the previous speed."""
    if clock.speed > MIN_SPEED:
        clock.speed_before_throttle = clock.speed
    clock.speed = MIN_SPEED
