"""Small numeric and array helpers shared by the systems."""

from __future__ import annotations

import math
from dataclasses import fields
from typing import Any

import numpy as np

from autotycoon.typing import Float1D, Int1D

BASE_YEAR = 1950


def round_half_up(x: float) -> int:
    """Round to the nearest integer, halves upwards (0.5 -> 1, -0.5 -> 0)."""
    return math.floor(x + 0.5)


def round2(x: float) -> float:
    """Round to cents, halves upwards."""
    return math.floor(x * 100.0 + 0.5) / 100.0


def economic_multiplier(year: int, base: float = 1.008) -> float:
    """Price-level multiplier ``base ** (year - 1950)``."""
    return float(base ** (year - BASE_YEAR))


def apply_inflation(base: float, sensitivity: float, multiplier: float) -> int:
    """
    Inflate a base amount with a per-item sensitivity.

    Deflation (``multiplier <= 1``) applies in full; inflation is damped or
    amplified by *sensitivity*::

        floor(b * m)                    if m <= 1
        floor(b * (1 + (m - 1) * s))    otherwise
    """
    if multiplier <= 1.0:
        return math.floor(base * multiplier)
    return math.floor(base * (1.0 + (multiplier - 1.0) * sensitivity))


def apportion_cumulative(total: int, weights: Float1D) -> Int1D:
    """
    Split an integer *total* across slots proportionally to *weights*.

    Each slot receives ``floor(total * W_i / W) - floor(total * W_{i-1} / W)``
    where ``W_i`` is the running weight sum, so the parts always add up to
    *total* without rounding drift. Zero-weight slots receive nothing.
    """
    weights = np.asarray(weights, dtype=np.float64)
    out = np.zeros(weights.size, dtype=np.int64)
    if weights.size == 0 or total <= 0:
        return out
    cum = np.cumsum(weights)
    if cum[-1] <= 0.0:
        return out
    bounds = np.floor(total * cum / cum[-1]).astype(np.int64)
    out[:] = np.diff(bounds, prepend=0)
    return out


def append_slot(role: Any, **values: Any) -> int:
    """
    Append one slot to every array/list field of *role*.

    Every field must be given; 2-D arrays take a row of matching width.

    Returns
    -------
    int
        Index of the new slot.
    """
    n = -1
    for f in fields(role):
        col = getattr(role, f.name)
        if isinstance(col, np.ndarray):
            if f.name not in values:
                raise KeyError(f"append_slot: missing value for '{f.name}'")
            row = np.asarray(values[f.name], dtype=col.dtype).reshape(
                (1,) + col.shape[1:]
            )
            setattr(role, f.name, np.concatenate([col, row]))
            n = col.shape[0]
        elif isinstance(col, list):
            if f.name not in values:
                raise KeyError(f"append_slot: missing value for '{f.name}'")
            col.append(values[f.name])
            n = len(col) - 1
    return n


def drop_slot(role: Any, idx: int) -> None:
    """Remove slot *idx* from every array/list field of *role*."""
    for f in fields(role):
        col = getattr(role, f.name)
        if isinstance(col, np.ndarray):
            setattr(role, f.name, np.delete(col, idx, axis=0))
        elif isinstance(col, list):
            del col[idx]


def n_slots(role: Any) -> int:
    """Number of slots held by *role* (length of its first field)."""
    first = fields(role)[0].name
    return len(getattr(role, first))
