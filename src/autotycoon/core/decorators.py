"""
Decorators for declaring Roles and Events.

Usage
-----
>>> from autotycoon.core import role, event
>>> from autotycoon.typing import Int1D
>>>
>>> @role
... class Warehouse:
...     stock: Int1D
>>>
>>> @event
... class RestockWarehouses:
...     def execute(self, sim):
...         ...

Both decorators make the class inherit from the right base (if it does not
already), apply ``@dataclass(slots=True)`` and so trigger registration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def _rebase(cls: type, base: type) -> type:
    """
    Re-create *cls* with *base* as its only parent.

    Annotations and non-dunder attributes are copied over; single
    inheritance keeps ``slots=True`` working.
    """
    if issubclass(cls, base):
        return cls
    namespace: dict[str, Any] = {
        "__module__": cls.__module__,
        "__qualname__": cls.__qualname__,
        "__annotations__": getattr(cls, "__annotations__", {}),
    }
    if cls.__doc__:
        namespace["__doc__"] = cls.__doc__
    for attr_name in dir(cls):
        if not attr_name.startswith("__"):
            namespace[attr_name] = getattr(cls, attr_name)
    return type(cls.__name__, (base,), namespace)


def _make_decorator(
    base: type,
    cls: type[T] | None,
    name: str | None,
    dataclass_kwargs: dict[str, Any],
) -> type[T] | Callable[[type[T]], type[T]]:
    dataclass_kwargs.setdefault("slots", True)

    def decorator(target: type[T]) -> type[T]:
        new_cls = _rebase(target, base)
        # set before @dataclass so __init_subclass__ sees it
        if name is not None:
            new_cls.name = name  # type: ignore[attr-defined]
        return dataclass(**dataclass_kwargs)(new_cls)  # type: ignore[no-any-return]

    if cls is None:
        return decorator
    return decorator(cls)


def role(
    cls: type[T] | None = None,
    *,
    name: str | None = None,
    **dataclass_kwargs: Any,
) -> type[T] | Callable[[type[T]], type[T]]:
    """
    Define a Role with automatic inheritance and dataclass.

    Parameters
    ----------
    cls : type | None
        The class to decorate (provided automatically without parens).
    name : str | None
        Custom registry name. Defaults to the class name.
    **dataclass_kwargs : Any
        Forwarded to ``@dataclass``; ``slots=True`` by default.
    """
    from autotycoon.core.role import Role

    return _make_decorator(Role, cls, name, dataclass_kwargs)


def event(
    cls: type[T] | None = None,
    *,
    name: str | None = None,
    **dataclass_kwargs: Any,
) -> type[T] | Callable[[type[T]], type[T]]:
    """
    Define an Event with automatic inheritance and dataclass.

    Parameters
    ----------
    cls : type | None
        The class to decorate (provided automatically without parens).
    name : str | None
        Custom registry name. Defaults to the snake_case class name.
    **dataclass_kwargs : Any
        Forwarded to ``@dataclass``; ``slots=True`` by default.
    """
    from autotycoon.core.event import Event

    return _make_decorator(Event, cls, name, dataclass_kwargs)
