"""Default tick pipeline."""

from importlib import resources
from pathlib import Path

from autotycoon.core.pipeline import Pipeline


def create_default_pipeline() -> Pipeline:
    """
    Create the default tick pipeline from ``default_pipeline.yml``.

    The order encodes the tick contract: clock first, then the every-tick
    and weekly bookkeeping, then the monthly block (population, production,
    costs, market, books, domestic contracts), then the yearly block
    (annual rollover, export, crisis, auction resolution, auction opening).
    Users can reshape it with insert_after(), remove() and replace().
    """
    traversable = resources.files("autotycoon") / "default_pipeline.yml"
    with resources.as_file(traversable) as yaml_fs_path:
        return Pipeline.from_yaml(Path(yaml_fs_path))
