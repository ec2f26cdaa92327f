"""Core infrastructure: roles, events, registry and pipeline."""

from typing import Any, Callable

from autotycoon.core.decorators import event as event_decorator
from autotycoon.core.decorators import role as role_decorator
from autotycoon.core.event import Event
from autotycoon.core.pipeline import Pipeline
from autotycoon.core.registry import get_event, get_role, list_events, list_roles
from autotycoon.core.role import Role

event: Callable[..., Any] = event_decorator
role: Callable[..., Any] = role_decorator

__all__ = [
    "Event",
    "Pipeline",
    "Role",
    "event",
    "get_event",
    "get_role",
    "list_events",
    "list_roles",
    "role",
]
