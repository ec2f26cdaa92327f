"""Role base class definition."""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(slots=True)
class Role(ABC):
    """
    Base class for slot-indexed entity state.

    A Role is a dataclass of parallel NumPy arrays (and, for labels, plain
    lists); index ``i`` of every field describes the same entity. For
    example ``Factory.capacity[2]`` and ``Factory.inventory[2]`` both belong
    to the third factory.

    Design Guidelines
    -----------------
    - Numeric state is NumPy arrays (Float1D, Int1D, Bool1D, Idx1D)
    - Cross-role references are slot indices, ``-1`` meaning unassigned
    - No mutating methods; systems functions own the behaviour
    - Declare roles with the ``@role`` decorator

    Notes
    -----
    ``__init_subclass__`` registers every subclass in the global registry
    under its class name (or a custom ``name=``).
    """

    name: ClassVar[str | None] = None

    def __init_subclass__(cls, name: str | None = None, **kwargs: Any) -> None:
        super(Role, cls).__init_subclass__(**kwargs)

        # @dataclass(slots=True) re-creates the class and triggers this hook
        # a second time without the custom name
        if name is not None:
            cls.name = name
        elif cls.name is None:
            cls.name = cls.__name__

        from autotycoon.core.registry import _ROLE_REGISTRY

        _ROLE_REGISTRY[cls.name] = cls

    def __repr__(self) -> str:
        fields = getattr(self, "__dataclass_fields__", {})
        role_name = self.name or self.__class__.__name__
        return f"{role_name}(fields={len(fields)})"
