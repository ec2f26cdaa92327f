"""Centralized configuration validation for autotycoon."""

from __future__ import annotations

import warnings
from datetime import date
from typing import Any

from numpy.random import Generator


class ConfigValidator:
    """
    Centralized validation for simulation configuration.

    All validation happens once at Simulation.init() to ensure:
    - Type correctness
    - Valid parameter ranges
    - Relationship constraints between parameters
    - Clear error messages with actionable feedback
    """

    # Valid log levels for logging configuration
    VALID_LOG_LEVELS = {"DEEP_DEBUG", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    VALID_CONTRACT_RESOLUTIONS = {"auto", "offer"}

    @staticmethod
    def validate_config(cfg: dict[str, Any]) -> None:
        """
        Validate all configuration parameters.

        Parameters
        ----------
        cfg : dict
            Configuration dictionary to validate.

        Raises
        ------
        ValueError
            If any validation check fails.
        """
        # Type checking
        ConfigValidator._validate_types(cfg)

        # Range validation
        ConfigValidator._validate_ranges(cfg)

        # Vector-valued parameters
        ConfigValidator._validate_sequences(cfg)

        # Relationship constraints
        ConfigValidator._validate_relationships(cfg)

        # Logging configuration
        if "logging" in cfg:
            ConfigValidator._validate_logging(cfg["logging"])

    @staticmethod
    def _validate_types(cfg: dict[str, Any]) -> None:
        """
        Ensure correct types for configuration parameters.

        Raises
        ------
        ValueError
            If any parameter has incorrect type.
        """
        # Integer parameters
        int_params = [
            "n_ticks",
            "seed",
            "starting_money",
            "population",
            "city_capacity",
            "overhead_min",
            "overhead_max",
            "loan_term_months",
            "companies_per_category",
            "history_cap",
            "max_shares",
            "domestic_contracts_per_year",
            "domestic_min_rank",
            "export_min_rank",
            "crisis_min_rank",
            "crisis_max_rank",
            "auction_interval",
            "auction_max_attempts",
            "land_base_value",
            "developer_markup",
            "factory_limit_base",
            "factory_limit_per_expansion",
            "showroom_limit_base",
            "showroom_limit_per_expansion",
            "parking_base",
            "parking_per_level",
        ]

        # Float parameters
        float_params = [
            "base_growth_rate",
            "min_growth_rate",
            "demand_per_thousand",
            "market_noise",
            "model_jitter",
            "inflation_base",
            "factory_wage",
            "dealer_wage",
            "idle_cost_ratio",
            "factory_maintenance",
            "dealer_maintenance",
            "facility_cost_divisor",
            "loan_markup",
            "deposit_rate",
            "bankruptcy_price",
            "protected_floor",
            "brokerage_fee",
            "domestic_contract_chance",
            "land_growth",
        ]

        # Check integers
        for key in int_params:
            if key not in cfg:
                continue
            val = cfg[key]
            if key == "seed" and isinstance(val, Generator):
                continue
            if val is not None and (not isinstance(val, int) or isinstance(val, bool)):
                raise ValueError(
                    f"Config parameter '{key}' must be int, got {type(val).__name__}"
                )

        # Check floats (accept int or float)
        for key in float_params:
            if key not in cfg:
                continue
            val = cfg[key]
            if not isinstance(val, (int, float)) or isinstance(val, bool):
                raise ValueError(
                    f"Config parameter '{key}' must be float, got {type(val).__name__}"
                )

        # Check optional paths (str or None)
        for key in ("pipeline_path", "catalog_path"):
            if key in cfg:
                val = cfg[key]
                if val is not None and not isinstance(val, str):
                    raise ValueError(
                        f"Config parameter '{key}' must be str or None, "
                        f"got {type(val).__name__}"
                    )

        if "contract_resolution" in cfg:
            val = cfg["contract_resolution"]
            if val not in ConfigValidator.VALID_CONTRACT_RESOLUTIONS:
                raise ValueError(
                    f"Config parameter 'contract_resolution' must be one of "
                    f"{sorted(ConfigValidator.VALID_CONTRACT_RESOLUTIONS)}, got {val!r}"
                )

        if "start_date" in cfg:
            val = cfg["start_date"]
            if isinstance(val, date):
                return
            if not isinstance(val, str):
                raise ValueError(
                    f"Config parameter 'start_date' must be an ISO date string, "
                    f"got {type(val).__name__}"
                )
            try:
                date.fromisoformat(val)
            except ValueError as exc:
                raise ValueError(
                    f"Config parameter 'start_date' must be YYYY-MM-DD, got {val!r}"
                ) from exc

    @staticmethod
    def _validate_ranges(cfg: dict[str, Any]) -> None:
        """
        Ensure parameters are in valid ranges.

        Raises
        ------
        ValueError
            If any parameter is out of valid range.
        """
        # (min_val, max_val); None means unbounded
        constraints = {
            "n_ticks": (0, None),
            "starting_money": (0, None),
            "population": (1, None),
            "city_capacity": (1, None),
            "base_growth_rate": (0.0, 1.0),
            "min_growth_rate": (0.0, 1.0),
            "demand_per_thousand": (0.0, None),
            "market_noise": (0.0, 1.0),
            "model_jitter": (0.0, 1.0),
            "inflation_base": (0.5, 2.0),
            "factory_wage": (0.0, None),
            "dealer_wage": (0.0, None),
            "idle_cost_ratio": (0.0, 1.0),
            "factory_maintenance": (0.0, None),
            "dealer_maintenance": (0.0, None),
            "overhead_min": (0, None),
            "overhead_max": (0, None),
            "facility_cost_divisor": (1.0, None),
            "loan_term_months": (1, None),
            "loan_markup": (1.0, None),
            "deposit_rate": (0.0, 1.0),
            "companies_per_category": (1, None),
            "history_cap": (1, None),
            "bankruptcy_price": (0.0, None),
            "protected_floor": (0.0, None),
            "brokerage_fee": (0.0, 0.5),
            "max_shares": (1, None),
            "domestic_contract_chance": (0.0, 1.0),
            "domestic_contracts_per_year": (0, None),
            "domestic_min_rank": (1, None),
            "export_min_rank": (1, None),
            "crisis_min_rank": (1, None),
            "crisis_max_rank": (1, None),
            "auction_interval": (1, None),
            "auction_max_attempts": (0, None),
            "land_base_value": (1, None),
            "land_growth": (1.0, None),
            "developer_markup": (1, None),
            "factory_limit_base": (1, None),
            "factory_limit_per_expansion": (0, None),
            "showroom_limit_base": (1, None),
            "showroom_limit_per_expansion": (0, None),
            "parking_base": (1, None),
            "parking_per_level": (0, None),
        }

        for key, (min_val, max_val) in constraints.items():
            if key not in cfg:
                continue

            val = cfg[key]

            # Skip None values for optional parameters
            if val is None:
                continue

            if min_val is not None and val < min_val:
                raise ValueError(
                    f"Config parameter '{key}' must be >= {min_val}, got {val}"
                )

            if max_val is not None and val > max_val:
                raise ValueError(
                    f"Config parameter '{key}' must be <= {max_val}, got {val}"
                )

    @staticmethod
    def _validate_sequences(cfg: dict[str, Any]) -> None:
        """
        Check list-valued parameters: lengths, element types and signs.

        Raises
        ------
        ValueError
            If a list parameter has the wrong shape or content.
        """
        expected_len = {"seasonality": 12, "segment_shares": 3}
        for key, n in expected_len.items():
            if key not in cfg:
                continue
            val = cfg[key]
            if not isinstance(val, (list, tuple)) or len(val) != n:
                raise ValueError(
                    f"Config parameter '{key}' must be a list of {n} numbers, got {val!r}"
                )
            for x in val:
                if not isinstance(x, (int, float)) or isinstance(x, bool) or x < 0:
                    raise ValueError(
                        f"Config parameter '{key}' must hold non-negative numbers, "
                        f"got {x!r}"
                    )

        for key in ("unlocked_classes", "unlocked_parts"):
            if key not in cfg:
                continue
            val = cfg[key]
            if not isinstance(val, (list, tuple)) or not all(
                isinstance(x, str) for x in val
            ):
                raise ValueError(f"Config parameter '{key}' must be a list of ids")

    @staticmethod
    def _validate_relationships(cfg: dict[str, Any]) -> None:
        """
        Validate cross-parameter constraints.

        Hard conflicts raise; unusual but workable combinations warn.
        """
        lo = cfg.get("overhead_min", 0)
        hi = cfg.get("overhead_max", lo)
        if lo > hi:
            raise ValueError(
                f"overhead_min ({lo}) must be <= overhead_max ({hi})"
            )

        c_lo = cfg.get("crisis_min_rank", 1)
        c_hi = cfg.get("crisis_max_rank", c_lo)
        if c_lo > c_hi:
            raise ValueError(
                f"crisis_min_rank ({c_lo}) must be <= crisis_max_rank ({c_hi})"
            )

        shares = cfg.get("segment_shares")
        if shares is not None and abs(sum(shares) - 1.0) > 1e-6:
            warnings.warn(
                f"segment_shares sum to {sum(shares):.3f}, not 1. "
                "Aggregate demand will be scaled accordingly.",
                UserWarning,
                stacklevel=3,
            )

        population = cfg.get("population", 0)
        capacity = cfg.get("city_capacity", float("inf"))
        if population > capacity:
            warnings.warn(
                f"population ({population}) > city_capacity ({capacity}). "
                "The city will only grow at min_growth_rate.",
                UserWarning,
                stacklevel=3,
            )

        if cfg.get("min_growth_rate", 0.0) > cfg.get("base_growth_rate", 1.0):
            warnings.warn(
                "min_growth_rate exceeds base_growth_rate; "
                "population growth will be constant.",
                UserWarning,
                stacklevel=3,
            )

    @staticmethod
    def _validate_logging(log_config: dict[str, Any]) -> None:
        """
        Validate logging configuration.

        Parameters
        ----------
        log_config : dict
            Logging configuration dictionary with keys:
            - default_level: str (e.g., 'INFO', 'DEBUG')
            - events: dict[str, str] (per-event overrides)

        Raises
        ------
        ValueError
            If logging configuration is invalid.
        """
        if not isinstance(log_config, dict):
            raise ValueError(
                f"Logging config must be dict, got {type(log_config).__name__}"
            )

        if "default_level" in log_config:
            level = log_config["default_level"]
            if not isinstance(level, str):
                raise ValueError(
                    f"Logging default_level must be str, got {type(level).__name__}"
                )

            if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                raise ValueError(
                    f"Invalid log level '{level}'. "
                    f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                )

        if "events" in log_config:
            events = log_config["events"]
            if not isinstance(events, dict):
                raise ValueError(
                    f"Logging events must be dict, got {type(events).__name__}"
                )

            for event_name, level in events.items():
                if not isinstance(event_name, str):
                    raise ValueError(
                        f"Event name must be str, got {type(event_name).__name__}"
                    )

                if not isinstance(level, str):
                    raise ValueError(
                        f"Log level for event '{event_name}' must be str, "
                        f"got {type(level).__name__}"
                    )

                if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                    raise ValueError(
                        f"Invalid log level '{level}' for event '{event_name}'. "
                        f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                    )

    @staticmethod
    def validate_pipeline_path(pipeline_path: str) -> None:
        """
        Validate pipeline path exists and is readable.

        Raises
        ------
        ValueError
            If path does not exist or is not a file.
        """
        from pathlib import Path

        path = Path(pipeline_path)

        if not path.exists():
            raise ValueError(f"Pipeline path '{pipeline_path}' does not exist")

        if not path.is_file():
            raise ValueError(f"Pipeline path '{pipeline_path}' is not a file")

        if path.suffix not in (".yml", ".yaml"):
            warnings.warn(
                f"Pipeline path '{pipeline_path}' does not have .yml/.yaml extension",
                UserWarning,
                stacklevel=2,
            )
