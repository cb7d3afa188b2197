"""
Configuration management for Balancer.

Loads and validates TOML config against strict bounds.
All tunable parameters are bounded and validated at startup.
"""

import copy
import os
from pathlib import Path
from typing import Dict, Any, Optional
import toml
import logging

from .balance.sizing import SizingPolicy

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when config validation fails."""
    pass


class Config:
    """Configuration loader and validator."""

    # Side count when neither sizing.sides nor sizing.side_seconds is set
    DEFAULT_SIDES = 2

    # Integer bounds; None marks a non-numeric parameter, a set lists choices
    PARAM_BOUNDS = {
        "sizing": {
            "sides": (0, 64),
            "side_seconds": (0, 86400),
            "even": None,
        },
        "shuffle": {
            "enabled": None,
            "trials": (1, 100000),
            "workers": (1, 64),
            "swap_attempts": (0, 10000),
        },
        "input": {
            "separator": None,
        },
        "output": {
            "format": {"hms", "plain"},
            "csv": None,
            "separator": None,
            "summary": None,
        },
    }

    DEFAULT_CONFIG = {
        "config_version": "1.0",
        "sizing": {
            "sides": 0,
            "side_seconds": 0,
            "even": False,
        },
        "shuffle": {
            "enabled": False,
            "trials": 500,
            "workers": 1,
            "swap_attempts": 0,
        },
        "input": {
            "separator": "|",
        },
        "output": {
            "format": "hms",
            "csv": False,
            "separator": "|",
            "summary": False,
        },
    }

    def __init__(self, config_dict: Dict[str, Any]):
        """Initialize config from dictionary."""
        self.data = config_dict
        self._validate()

    @classmethod
    def defaults(cls) -> "Config":
        return cls(copy.deepcopy(cls.DEFAULT_CONFIG))

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load config from TOML file.

        Args:
            config_path: Path to balancer.toml. If None, uses BALANCER_CONFIG_PATH env var
                        or defaults to configs/balancer.toml.

        Returns:
            Config instance.

        Raises:
            ConfigError: If config is invalid or unreadable.
        """
        if config_path is None:
            config_path = os.getenv("BALANCER_CONFIG_PATH", "configs/balancer.toml")

        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
            return cls.defaults()

        try:
            config_dict = toml.load(config_path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}") from e

        logger.info(f"Loaded config from {config_path}")
        return cls(config_dict)

    def _validate(self) -> None:
        """
        Validate all config parameters against their bounds.

        Raises:
            ConfigError: If any parameter is out of bounds.
        """
        for section, params in self.PARAM_BOUNDS.items():
            if section not in self.data:
                logger.warning(f"Missing config section: {section}. Using defaults.")
                self.data[section] = copy.deepcopy(self.DEFAULT_CONFIG.get(section, {}))
                continue

            section_data = self.data[section]

            for param, bounds in params.items():
                if param not in section_data:
                    default_val = self.DEFAULT_CONFIG.get(section, {}).get(param)
                    if default_val is not None:
                        logger.warning(f"Missing param {section}.{param}. Using default: {default_val}")
                        section_data[param] = default_val
                    continue

                value = section_data[param]

                if bounds is None:
                    continue

                if isinstance(bounds, set):
                    if value not in bounds:
                        raise ConfigError(
                            f"Parameter {section}.{param}={value!r} not one of {sorted(bounds)}"
                        )
                    continue

                # Integer ranges
                min_val, max_val = bounds
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigError(f"Parameter {section}.{param}={value!r} is not an integer")
                if not (min_val <= value <= max_val):
                    raise ConfigError(
                        f"Parameter {section}.{param}={value} out of bounds "
                        f"[{min_val}, {max_val}]"
                    )

        seed = self.get("shuffle", "seed")
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise ConfigError(f"Parameter shuffle.seed={seed!r} is not an integer")

        logger.debug("Config validation passed")

    def get(self, section: str, param: str, default: Any = None) -> Any:
        """Get a config parameter safely."""
        return self.data.get(section, {}).get(param, default)

    def sizing_policy(self) -> SizingPolicy:
        """
        Build the sizing policy.

        An explicit side count takes precedence over a side duration when both
        are set (non-zero). With neither set, DEFAULT_SIDES sides are used.
        """
        sides = self.get("sizing", "sides", 0) or None
        side_seconds = self.get("sizing", "side_seconds", 0) or None
        even = bool(self.get("sizing", "even", False))

        if sides is None and side_seconds is None:
            sides = self.DEFAULT_SIDES
        elif sides is not None and side_seconds is not None:
            logger.warning(
                f"Both sizing.sides={sides} and sizing.side_seconds={side_seconds} set; "
                f"using the side count"
            )
            side_seconds = None

        return SizingPolicy(side_count=sides, side_seconds=side_seconds, even=even)

    def __getitem__(self, section: str) -> Dict[str, Any]:
        """Allow dict-like access: config["sizing"]"""
        return self.data.get(section, {})

    def __repr__(self) -> str:
        version = self.data.get('config_version', 'unknown')
        return f"Config(version={version})"
