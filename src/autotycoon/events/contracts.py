"""
Contract and crisis events.

With ``contract_resolution: auto`` a drafted contract is fulfilled at once
when inventory allows and journalled as lost otherwise. With ``offer`` it is
parked on ``ec.pending_offer`` and the clock is throttled to 1x until the
player accepts or rejects it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from autotycoon.core.decorators import event
from autotycoon.records import ContractOffer

if TYPE_CHECKING:
    from autotycoon.simulation import Simulation


def _dispatch(sim: Simulation, offer: ContractOffer) -> None:
    from autotycoon.clock import throttle
    from autotycoon.systems.contracts import settle_contract
    from autotycoon.systems.journal import post

    if sim.config.contract_resolution == "offer":
        sim.ec.pending_offer = offer
        throttle(sim.clock)
        post(
            sim.ec,
            sim.clock.date,
            "info",
            f"{offer.contractor} offers {offer.unit_price:,} each for "
            f"{offer.quantity} × {offer.model_name}",
        )
        return
    settle_contract(sim.ec, sim.fac, sim.cars, offer, date=sim.clock.date)


@event
class RollDomesticContract:
    """
    Monthly chance of a domestic fleet order for a Middle-segment class.

    Rule
    ----
        fires if rank ≥ 5, contracts this year < 2, U < 0.1667
        q     = floor(5 + 46 · U)
        price = max(floor(list · (1 + U(−0.15, 0.15))), floor(COGS · 1.05))
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_month:
            return
        from autotycoon.systems.contracts import roll_domestic_contract

        cfg = sim.config
        offer = roll_domestic_contract(
            sim.ec,
            sim.cars,
            sim.catalog,
            rank=sim.prestige_rank,
            date=sim.clock.date,
            multiplier=sim.ec.multiplier,
            chance=cfg.domestic_contract_chance,
            per_year=cfg.domestic_contracts_per_year,
            min_rank=cfg.domestic_min_rank,
            rng=sim.rng,
        )
        if offer is not None:
            self.get_logger().info(
                f"Domestic order from {offer.contractor}: {offer.quantity} × {offer.class_id}"
            )
            _dispatch(sim, offer)


@event
class ResolveExportContract:
    """
    Yearly export order for a Higher-segment class once rank reaches 10.

    Rule
    ----
        q = floor(25 + 476 · U)
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_year:
            return
        from autotycoon.systems.contracts import roll_export_contract

        offer = roll_export_contract(
            sim.ec,
            sim.cars,
            sim.catalog,
            rank=sim.prestige_rank,
            date=sim.clock.date,
            multiplier=sim.ec.multiplier,
            min_rank=sim.config.export_min_rank,
            rng=sim.rng,
        )
        if offer is not None:
            self.get_logger().info(
                f"Export order from {offer.contractor}: {offer.quantity} × {offer.class_id}"
            )
            _dispatch(sim, offer)


@event
class ApplyCrisis:
    """
    Yearly crisis for companies ranked 5 to 20, deducted automatically.

    Rule
    ----
        cost = 10 000 · U{1..10} · (1 if rank = 5 else 4 · (rank − 5))
    """

    def execute(self, sim: Simulation) -> None:
        if not sim.clock.last.new_year:
            return
        from autotycoon.systems.contracts import apply_crisis

        apply_crisis(
            sim.ec,
            sim.catalog,
            rank=sim.prestige_rank,
            date=sim.clock.date,
            min_rank=sim.config.crisis_min_rank,
            max_rank=sim.config.crisis_max_rank,
            rng=sim.rng,
        )
