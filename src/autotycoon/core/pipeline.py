"""Event Pipeline with explicit execution order."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from autotycoon.core.event import Event
from autotycoon.core.registry import get_event

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation

_REPEAT = re.compile(r"^(.+?)\s+x\s+(\d+)$")


@dataclass(slots=True)
class Pipeline:
    """
    Ordered list of events executed once per tick.

    Attributes
    ----------
    events : list[Event]
        Event instances in execution order.

    See Also
    --------
    Pipeline.from_event_list : Build pipeline from event names
    Pipeline.from_yaml : Build pipeline from a YAML file
    """

    events: list[Event] = field(default_factory=list)
    _event_map: dict[str, Event] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._event_map = {e.name: e for e in self.events}

    @classmethod
    def from_event_list(cls, event_names: list[str]) -> Pipeline:
        """
        Build pipeline from an ordered list of registered event names.

        Raises
        ------
        KeyError
            If an event name is not registered.
        """
        return cls(events=[get_event(name)() for name in event_names])

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> Pipeline:
        """
        Build pipeline from a YAML file with an ``events`` list.

        Each entry is either ``event_name`` or ``event_name x N`` (run the
        event N times in a row).

        Raises
        ------
        ValueError
            If the file has no ``events`` key.
        """
        yaml_path = Path(yaml_path)
        with open(yaml_path) as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict) or "events" not in config:
            raise ValueError(f"YAML file must have 'events' key: {yaml_path}")

        names: list[str] = []
        for spec in config["events"]:
            names.extend(cls._parse_event_spec(spec))
        return cls.from_event_list(names)

    @staticmethod
    def _parse_event_spec(spec: str) -> list[str]:
        """``'a'`` -> ``['a']``; ``'a x 3'`` -> ``['a', 'a', 'a']``."""
        spec = spec.strip()
        match = _REPEAT.match(spec)
        if match:
            return [match.group(1).strip()] * int(match.group(2))
        return [spec]

    def execute(self, sim: Simulation) -> None:
        """Run every event in order."""
        for event in self.events:
            event.execute(sim)

    def insert_after(self, after: str, event: Event | str) -> None:
        """
        Insert *event* right after the event named *after*.

        Raises
        ------
        ValueError
            If *after* is not in the pipeline.
        """
        if after not in self._event_map:
            raise ValueError(f"Event '{after}' not found in pipeline")
        if isinstance(event, str):
            event = get_event(event)()
        idx = self.events.index(self._event_map[after])
        self.events.insert(idx + 1, event)
        self._event_map[event.name] = event

    def remove(self, event_name: str) -> None:
        """
        Remove an event from the pipeline.

        Raises
        ------
        ValueError
            If the event is not in the pipeline.
        """
        if event_name not in self._event_map:
            raise ValueError(f"Event '{event_name}' not found in pipeline")
        self.events.remove(self._event_map.pop(event_name))

    def replace(self, old_name: str, new_event: Event | str) -> None:
        """
        Swap the event named *old_name* for *new_event*.

        Raises
        ------
        ValueError
            If the old event is not in the pipeline.
        """
        if old_name not in self._event_map:
            raise ValueError(f"Event '{old_name}' not found in pipeline")
        if isinstance(new_event, str):
            new_event = get_event(new_event)()
        idx = self.events.index(self._event_map.pop(old_name))
        self.events[idx] = new_event
        self._event_map[new_event.name] = new_event

    def __len__(self) -> int:
        return len(self.events)

    def __repr__(self) -> str:
        return f"Pipeline(n_events={len(self.events)})"
