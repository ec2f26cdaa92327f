"""State containers: slot-indexed roles and scalar state dataclasses."""

from autotycoon.roles.bank import Bank, TermDeposit
from autotycoon.roles.car_model import CarModel
from autotycoon.roles.dealership import Dealership
from autotycoon.roles.economy import Economy
from autotycoon.roles.factory import Factory
from autotycoon.roles.stock_market import Holding, Portfolio, StockMarket

__all__ = [
    "Bank",
    "CarModel",
    "Dealership",
    "Economy",
    "Factory",
    "Holding",
    "Portfolio",
    "StockMarket",
    "TermDeposit",
]
