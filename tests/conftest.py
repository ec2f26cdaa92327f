"""Pytest configuration and fixtures for autotycoon tests."""

import os

import pytest

import autotycoon.events  # noqa: F401 - register all events
from autotycoon import logging
from autotycoon.core.registry import clear_registry
from autotycoon.simulation import Simulation


@pytest.fixture
def clean_registry():
    """
    Save registry state, clear it for the test, then restore it.

    Request it explicitly from tests that declare throwaway roles or
    events; the built-in events must stay registered for everything else.
    """
    # noinspection PyProtectedMember
    from autotycoon.core.registry import _EVENT_REGISTRY, _ROLE_REGISTRY

    saved_roles = dict(_ROLE_REGISTRY)
    saved_events = dict(_EVENT_REGISTRY)

    clear_registry()

    yield

    _ROLE_REGISTRY.clear()
    _ROLE_REGISTRY.update(saved_roles)
    _EVENT_REGISTRY.clear()
    _EVENT_REGISTRY.update(saved_events)


@pytest.fixture
def tiny_sim() -> Simulation:
    """A small deterministic game for fast integration tests."""
    return Simulation.init(
        seed=123,
        companies_per_category=2,
        logging={"default_level": "ERROR"},
    )


@pytest.fixture
def producing_sim(tiny_sim: Simulation) -> Simulation:
    """``tiny_sim`` with a starter model assigned to the main factory."""
    from autotycoon import commands

    assert commands.create_car_model(
        tiny_sim, "Runabout", "A", "small-i4", "frame", "small", "spartan"
    )
    assert commands.update_factory_settings(tiny_sim, "factory-1", model_id="model-1")
    return tiny_sim


@pytest.fixture(autouse=True)
def mute_autotycoon_logs(caplog):
    # COVERAGE_RUN=true executes every debug branch for accurate coverage;
    # everything else runs quiet
    if os.environ.get("COVERAGE_RUN") == "true":
        level = logging.DEBUG
    else:
        level = logging.ERROR

    caplog.set_level(level, logger="autotycoon")
    logging.getLogger("autotycoon").setLevel(level)
