"""
Static catalog of car classes, parts and world flavour.

The catalog is immutable input: it is read once from ``catalog.yml``
(or a user-supplied YAML with the same shape) and shared by the
production, demand and synergy calculations.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Sequence

import yaml

from autotycoon.helpers import apply_inflation, round2, round_half_up

PART_KINDS = ("engine", "chassis", "body", "interior")

#: flat production overhead per unit, scaled by class complexity
ASSEMBLY_COST = 3000
BASE_RELIABILITY = 80.0


@dataclass(slots=True, frozen=True)
class SecondaryMarket:
    segment: str
    multiplier: float


@dataclass(slots=True, frozen=True)
class CarClass:
    """
    One market class (A, B, ..., RS).

    Attributes
    ----------
    min_price, max_price : int
        Nominal 1950 price band; above ``max_price`` demand starts to fall.
    hard_cap : int
        Price beyond which demand collapses quartically.
    complexity : float
        Manufacturing difficulty; divides factory capacity and scales
        wages, maintenance and assembly cost.
    priority : str
        What buyers of the class value (Economy, Performance, Luxury, ...).
    segment : str
        Primary social segment (Lower / Middle / Higher).
    """

    id: str
    name: str
    min_price: int
    max_price: int
    hard_cap: int
    complexity: float
    priority: str
    segment: str
    secondary: tuple[SecondaryMarket, ...]
    sensitivity: float
    research_cost: int
    unlock_year: int
    required_bodies: tuple[str, ...]
    preferred_tags: frozenset[str]
    forbidden_tags: frozenset[str]


@dataclass(slots=True, frozen=True)
class Part:
    id: str
    name: str
    kind: str
    cost: int
    unlock_year: int
    research_cost: int
    power: float
    weight: float
    safety: float
    style: float
    sensitivity: float
    tags: frozenset[str]


@dataclass(slots=True, frozen=True)
class PrestigeTier:
    rank: int
    title: str
    min_sales: int


@dataclass(slots=True, frozen=True)
class StockCategory:
    name: str
    sector: str
    prefixes: tuple[str, ...]
    suffixes: tuple[str, ...]
    protected: int


@dataclass(slots=True, frozen=True)
class EtfSpec:
    id: str
    name: str
    sector: str
    price: float
    volatility: float


@dataclass(slots=True, frozen=True)
class ModelStats:
    """Values derived from a class and its four parts."""

    production_cost: int
    sensitivity: float
    power: float
    weight: float
    safety: float
    style: float
    reliability: float
    interior_quality: float


@dataclass(slots=True, frozen=True)
class Catalog:
    classes: dict[str, CarClass]
    parts: dict[str, Part]
    prestige: tuple[PrestigeTier, ...]
    eras: tuple[tuple[int | None, str], ...]
    stock_categories: tuple[StockCategory, ...]
    etfs: tuple[EtfSpec, ...]
    contractors: tuple[str, ...]
    export_countries: tuple[str, ...]
    crises: tuple[str, ...]

    def car_class(self, class_id: str) -> CarClass:
        if class_id not in self.classes:
            raise KeyError(
                f"Car class '{class_id}' not in catalog. "
                f"Available classes: {list(self.classes)}"
            )
        return self.classes[class_id]

    def part(self, part_id: str) -> Part:
        if part_id not in self.parts:
            raise KeyError(f"Part '{part_id}' not in catalog")
        return self.parts[part_id]

    def parts_of(self, kind: str) -> list[Part]:
        return [p for p in self.parts.values() if p.kind == kind]

    def classes_in(self, segment: str) -> list[CarClass]:
        return [c for c in self.classes.values() if c.segment == segment]


# loading
# ---------------------------------------------------------------------------
def _class_from(d: dict[str, Any]) -> CarClass:
    return CarClass(
        id=str(d["id"]),
        name=d["name"],
        min_price=int(d["min_price"]),
        max_price=int(d["max_price"]),
        hard_cap=int(d["hard_cap"]),
        complexity=float(d["complexity"]),
        priority=d["priority"],
        segment=d["segment"],
        secondary=tuple(
            SecondaryMarket(s["segment"], float(s["multiplier"]))
            for s in d.get("secondary") or []
        ),
        sensitivity=float(d["sensitivity"]),
        research_cost=int(d["research_cost"]),
        unlock_year=int(d["unlock_year"]),
        required_bodies=tuple(d["required_bodies"]),
        preferred_tags=frozenset(d.get("preferred_tags") or ()),
        forbidden_tags=frozenset(d.get("forbidden_tags") or ()),
    )


def _part_from(kind: str, d: dict[str, Any]) -> Part:
    return Part(
        id=str(d["id"]),
        name=d.get("name", d["id"]),
        kind=kind,
        cost=int(d["cost"]),
        unlock_year=int(d["unlock_year"]),
        research_cost=int(d["research_cost"]),
        power=float(d.get("power", 0)),
        weight=float(d.get("weight", 0)),
        safety=float(d.get("safety", 0)),
        style=float(d.get("style", 0)),
        sensitivity=float(d["sensitivity"]),
        tags=frozenset(d.get("tags") or ()),
    )


def catalog_from_dict(data: dict[str, Any]) -> Catalog:
    """Build a :class:`Catalog` from the parsed YAML document."""
    classes = {c.id: c for c in map(_class_from, data["classes"])}
    parts: dict[str, Part] = {}
    for kind in PART_KINDS:
        for d in data["parts"][kind]:
            part = _part_from(kind, d)
            parts[part.id] = part

    stocks = data["stocks"]
    protected = stocks.get("protected") or {}
    categories = tuple(
        StockCategory(
            name=c["name"],
            sector=c["sector"],
            prefixes=tuple(c["prefixes"]),
            suffixes=tuple(c["suffixes"]),
            protected=int(protected.get(c["name"], 0)),
        )
        for c in stocks["categories"]
    )
    etfs = tuple(
        EtfSpec(
            id=e["id"],
            name=e["name"],
            sector=e["sector"],
            price=float(e["price"]),
            volatility=float(e["volatility"]),
        )
        for e in stocks["etfs"]
    )

    return Catalog(
        classes=classes,
        parts=parts,
        prestige=tuple(
            PrestigeTier(rank=i + 1, title=title, min_sales=int(min_sales))
            for i, (min_sales, title) in enumerate(data["prestige"])
        ),
        eras=tuple((None if y is None else int(y), name) for y, name in data["eras"]),
        stock_categories=categories,
        etfs=etfs,
        contractors=tuple(data["contractors"]),
        export_countries=tuple(data["export_countries"]),
        crises=tuple(data["crises"]),
    )


@lru_cache(maxsize=1)
def _packaged_catalog() -> Catalog:
    txt = resources.files("autotycoon").joinpath("catalog.yml").read_text()
    return catalog_from_dict(yaml.safe_load(txt))


def load_catalog(path: str | Path | None = None) -> Catalog:
    """
    Load the catalog.

    Parameters
    ----------
    path : str | Path, optional
        Custom catalog YAML. If None, the packaged ``catalog.yml`` is used
        (parsed once and cached).
    """
    if path is None:
        return _packaged_catalog()
    with Path(path).open("rt", encoding="utf-8") as fh:
        return catalog_from_dict(yaml.safe_load(fh))


# derived quantities
# ---------------------------------------------------------------------------
def engine_mismatch(class_id: str, power: float) -> float:
    """
    Demand multiplier for an engine's power in a given class.

    Economy classes punish big engines; performance and luxury classes
    punish weak ones and reward very strong ones.
    """
    if class_id in ("A", "B"):
        if power <= 130:
            return 1.0
        return 0.5 if power > 200 else 0.9
    if class_id in ("C", "M"):
        if power < 90:
            return 0.8
        if power <= 180:
            return 1.0
        return 0.6 if power > 300 else 0.9
    if class_id in ("D", "J"):
        if power < 110:
            return 0.7
        return 1.0 if power <= 400 else 0.6
    if class_id == "P":
        if power < 140:
            return 0.7
        return 1.2 if power >= 300 else 1.0
    if class_id in ("E", "S"):
        if power < 160:
            return 0.4
        if power < 250:
            return 0.9
        return 1.3 if power >= 350 else 1.0
    if class_id in ("F", "X"):
        if power < 300:
            return 0.1
        return 0.8 if power < 500 else 1.4
    if class_id == "RS":
        if power < 400:
            return 0.1
        return 0.6 if power < 550 else 1.5
    return 1.0


def synergy_score(car_class: CarClass, parts: Sequence[Part]) -> tuple[int, list[str]]:
    """
    Rate how well *parts* fit *car_class*.

    Starts at 100, +10 per part carrying a preferred tag, -25 per part
    carrying a forbidden tag, clamped to [0, 150]. A body outside the
    class's required body types scores 0.

    Returns
    -------
    tuple[int, list[str]]
        The score and human-readable feedback lines.
    """
    score = 100
    feedback: list[str] = []
    for part in parts:
        if part.tags & car_class.preferred_tags:
            score += 10
            feedback.append(f"+10 {part.name}: fits the {car_class.name} profile")
        if part.tags & car_class.forbidden_tags:
            score -= 25
            feedback.append(f"-25 {part.name}: clashes with {car_class.name} buyers")

    body = next((p for p in parts if p.kind == "body"), None)
    if body is None or body.id not in car_class.required_bodies:
        label = body.name if body is not None else "missing body"
        feedback.append(f"{label} is not a valid body for class {car_class.id}")
        return 0, feedback

    return max(0, min(150, score)), feedback


def derive_model_stats(car_class: CarClass, parts: Sequence[Part]) -> ModelStats:
    """Aggregate cost, sensitivity and stats of a four-part build."""
    by_kind = {p.kind: p for p in parts}
    total_cost = sum(p.cost for p in parts)
    weighted = sum(p.cost * p.sensitivity for p in parts)
    sensitivity = round2(weighted / total_cost) if total_cost > 0 else 0.5

    engine = by_kind.get("engine")
    chassis = by_kind.get("chassis")
    body = by_kind.get("body")
    interior = by_kind.get("interior")
    return ModelStats(
        production_cost=round_half_up(total_cost + ASSEMBLY_COST * car_class.complexity),
        sensitivity=sensitivity,
        power=engine.power if engine else 0.0,
        weight=float(sum(p.weight for p in parts)),
        safety=(chassis.safety if chassis else 0.0) + (body.safety if body else 0.0),
        style=(body.style if body else 0.0) + (interior.style if interior else 0.0),
        reliability=BASE_RELIABILITY,
        interior_quality=interior.style if interior else 10.0,
    )


def suggested_price(car_class: CarClass, multiplier: float) -> int:
    """Midpoint of the class price band at today's price level."""
    lo = apply_inflation(car_class.min_price, car_class.sensitivity, multiplier)
    hi = apply_inflation(car_class.max_price, car_class.sensitivity, multiplier)
    return math.floor((lo + hi) / 2)
