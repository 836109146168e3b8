"""core.config
---------------

Configuration loader/manager for palmcarbon. Provides a central API for
loading settings from YAML/TOML/JSON and retrieving them via
:py:meth:`ConfigManager.get`.
"""

import os
import json
import yaml
import toml


class ConfigValidationError(Exception):
    """Raised when configuration loading or validation fails."""


class ConfigManager:
    """
    Loads and manages configuration from file, environment, or defaults.
    Provides a central entry point for calculator and client parameters.
    """

    # Carbon credit pricing and multi-year growth assumptions
    DEFAULT_PRICE_PER_TON: float = 15.0
    DEFAULT_GROWTH_RATE: float = 0.05
    DEFAULT_CUMULATIVE_GROWTH_RATE: float = 0.02
    DEFAULT_EQUIVALENCE_PRESET: str = "canonical"

    # Sentinel Hub client defaults
    DEFAULT_SENTINEL_HUB_URL: str = "https://services.sentinel-hub.com"
    DEFAULT_MAX_CLOUD_COVER: int = 20
    DEFAULT_REQUEST_TIMEOUT: float = 30.0
    DEFAULT_MAX_RETRIES: int = 3

    API_KEY_ENV: str = "SENTINEL_HUB_API_KEY"

    def __init__(self, config_path=None):
        self.config = {
            "price_per_ton": self.DEFAULT_PRICE_PER_TON,
            "growth_rate": self.DEFAULT_GROWTH_RATE,
            "cumulative_growth_rate": self.DEFAULT_CUMULATIVE_GROWTH_RATE,
            "equivalence_preset": self.DEFAULT_EQUIVALENCE_PRESET,
            "sentinel_hub_base_url": self.DEFAULT_SENTINEL_HUB_URL,
            "max_cloud_cover": self.DEFAULT_MAX_CLOUD_COVER,
            "request_timeout": self.DEFAULT_REQUEST_TIMEOUT,
            "max_retries": self.DEFAULT_MAX_RETRIES,
        }
        if config_path:
            self.load(config_path)

    def load(self, path: str) -> None:
        """
        Load configuration from a file (YAML, TOML, or JSON).
        Overwrites existing keys in self.config.
        """
        ext = os.path.splitext(path)[1].lower()
        try:
            with open(path, "r", encoding="utf-8") as f:
                if ext in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                elif ext == ".toml":
                    data = toml.load(f)
                elif ext == ".json":
                    data = json.load(f)
                else:
                    raise ConfigValidationError(f"Unsupported config format: {ext}")
        except Exception as e:
            raise ConfigValidationError(
                f"Failed to load config from {path}: {e}"
            ) from e
        if not isinstance(data, dict):
            raise ConfigValidationError(f"Config file {path} did not produce a dict")
        self.config.update(data)

    def get(self, key, default=None):
        """
        Retrieve a configuration value by key, or return `default` if not present.

        Args:
            key (str): The configuration parameter to look up.
            default:  The value to return if `key` is not found.
        """
        return self.config.get(key, default)

    def merge(self, other: "ConfigManager") -> None:
        """
        Merge another ConfigManager into this one.
        Values in other.config override this.config.
        """
        if not isinstance(other, ConfigManager):
            raise TypeError("Can only merge ConfigManager instances")
        self.config.update(other.config)

    def get_price_per_ton(self) -> float:
        """Return the carbon credit price per ton of CO2."""
        return self._get_number("price_per_ton", self.DEFAULT_PRICE_PER_TON)

    def get_growth_rate(self) -> float:
        """Return the annual growth rate used by growth projections."""
        return self._get_number("growth_rate", self.DEFAULT_GROWTH_RATE)

    def get_cumulative_growth_rate(self) -> float:
        """Return the annual rate increase used for cumulative sums."""
        return self._get_number(
            "cumulative_growth_rate", self.DEFAULT_CUMULATIVE_GROWTH_RATE
        )

    def get_api_key(self) -> str | None:
        """Return the Sentinel Hub API key from config or the environment."""
        return self.get("sentinel_hub_api_key") or os.getenv(self.API_KEY_ENV)

    def _get_number(self, key: str, default: float) -> float:
        value = self.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(
                f"Config key '{key}' must be numeric, got {value!r}"
            ) from e
