"""Configuration module for autotycoon."""

from autotycoon.config.schema import Config
from autotycoon.config.validator import ConfigValidator

__all__ = ["Config", "ConfigValidator"]
