"""Command‑line demo runner for autotycoon."""

from __future__ import annotations

import argparse
import logging

from autotycoon import commands
from autotycoon.clock import TICKS_PER_DAY
from autotycoon.simulation import Simulation

DAYS_PER_YEAR = 365


def _cli(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a headless autotycoon game.")
    p.add_argument("--years", type=int, default=2, help="Simulated years to run")
    p.add_argument("--seed", type=int, default=42, help="RNG seed")
    p.add_argument("--config", default=None, help="YAML config file")
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEEP_DEBUG", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="Engine log level",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _cli(argv)
    log = logging.getLogger(__name__)

    sim = Simulation.init(
        config=args.config,
        seed=args.seed,
        logging={"default_level": args.log_level},
    )

    # one starter model on the main line
    if commands.create_car_model(
        sim, "Runabout", "A", "small-i4", "frame", "small", "spartan"
    ):
        commands.update_factory_settings(
            sim, sim.fac.ids[0], model_id=sim.cars.ids[-1]
        )

    n_ticks = args.years * DAYS_PER_YEAR * TICKS_PER_DAY
    for _ in range(n_ticks):
        sim.step()
        if sim.clock.last.new_month and sim.ec.sales_history:
            rec = sim.ec.sales_history[-1]
            log.info(
                f"{rec.month}: sold={rec.sales} revenue={rec.revenue:,.0f} "
                f"expenses={rec.expenses:,.0f} cash={sim.ec.money:,.0f} "
                f"rank={sim.prestige_rank}"
            )

    log.info(
        f"Finished on {sim.clock.date:%Y-%m-%d}: valuation={sim.valuation:,.0f}, "
        f"cars sold={sim.ec.cars_sold}"
    )


if __name__ == "__main__":
    main()
