"""
Type aliases for autotycoon.

Entity state lives in parallel NumPy arrays, one index per slot
(factory, dealership, car model, listed company).

Examples
--------
>>> from autotycoon.core import role
>>> from autotycoon.typing import Float1D, Idx1D
>>>
>>> @role
... class Warehouse:
...     stock: Float1D
...     factory: Idx1D
"""

from typing import TypeAlias

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

Float1D: TypeAlias = NDArray[np.float64]
Int1D: TypeAlias = NDArray[np.int64]
Bool1D: TypeAlias = NDArray[np.bool_]
Idx1D: TypeAlias = NDArray[np.intp]

Float2D: TypeAlias = NDArray[np.float64]
Int2D: TypeAlias = NDArray[np.int64]

Rng: TypeAlias = Generator
"""Random number generator driving every stochastic decision."""

__all__ = [
    "Float1D",
    "Int1D",
    "Bool1D",
    "Idx1D",
    "Float2D",
    "Int2D",
    "Rng",
]
