"""Configuration management system for SampleIQ.

Config files are YAML or JSON mappings. Only the ``estimator`` section is
interpreted; it is validated whenever a file is loaded, so a bad value fails
at load time rather than on the first estimate.

Example::

    estimator:
      percentiles: [0.5, 0.95, 0.99]
      valid_range: [0, 1000]
      pre_sorted: false
      high_precision: false
"""

import copy
import json
import os
from dataclasses import dataclass, replace
from typing import Any

import yaml

from sampleiq.schemas import ValidRange
from sampleiq.utils.errors import ConfigError, InvalidArgumentError

ESTIMATOR_SECTION = "estimator"

DEFAULT_CONFIG: dict[str, Any] = {
    ESTIMATOR_SECTION: {
        "percentiles": [0.5, 0.95, 0.99],
        "valid_range": None,
        "pre_sorted": False,
        "high_precision": False,
    },
}


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class Config:
    """Nested configuration mapping with dotted-key lookup."""

    def __init__(self, config_dict: dict[str, Any] | None = None):
        self.config = copy.deepcopy(config_dict or {})

    @classmethod
    def defaults(cls) -> "Config":
        return cls(DEFAULT_CONFIG)

    def update(self, config_dict: dict[str, Any]) -> None:
        """Deep-merge overrides into this configuration."""
        self.config = _merge(self.config, config_dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key (e.g. 'estimator.valid_range').

        Missing keys and explicit nulls both return default.
        """
        node: Any = self.config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return default if node is None else node

    def section(self, name: str) -> dict[str, Any]:
        """Return a copy of a top-level section (empty if absent)."""
        value = self.config.get(name)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ConfigError(f"Config section '{name}' must be a mapping, got {type(value).__name__}")
        return copy.deepcopy(value)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self.config)


@dataclass(frozen=True)
class EstimatorSettings:
    """Typed view of the ``estimator`` configuration section."""

    percentiles: tuple[float, ...] = (0.5, 0.95, 0.99)
    valid_range: ValidRange | None = None
    pre_sorted: bool = False
    high_precision: bool = False

    @classmethod
    def from_config(cls, config: Config | None) -> "EstimatorSettings":
        """Read estimator settings, falling back to defaults for missing keys.

        Raises:
            ConfigError: If a value has the wrong shape or type
        """
        if config is None:
            return cls()
        section = config.section(ESTIMATOR_SECTION)

        percentiles = section.get("percentiles")
        if percentiles is None:
            percentiles = list(cls.percentiles)
        if isinstance(percentiles, (int, float)) and not isinstance(percentiles, bool):
            percentiles = [percentiles]
        if not isinstance(percentiles, (list, tuple)) or not percentiles:
            raise ConfigError(f"estimator.percentiles must be a non-empty list, got {percentiles!r}")
        for p in percentiles:
            if isinstance(p, bool) or not isinstance(p, (int, float)) or not 0.0 <= p <= 1.0:
                raise ConfigError(f"estimator.percentiles entries must be fractions in [0, 1], got {p!r}")

        raw_range = section.get("valid_range")
        try:
            valid_range = ValidRange.coerce(raw_range) if raw_range is not None else None
        except InvalidArgumentError as e:
            raise ConfigError(f"estimator.valid_range: {e}") from e

        flags = {}
        for name in ("pre_sorted", "high_precision"):
            value = section.get(name)
            if value is None:
                value = False
            if not isinstance(value, bool):
                raise ConfigError(f"estimator.{name} must be true or false, got {value!r}")
            flags[name] = value

        return cls(
            percentiles=tuple(float(p) for p in percentiles),
            valid_range=valid_range,
            **flags,
        )

    def with_unbounded_range(self) -> "EstimatorSettings":
        """Settings that treat NaN as missing when no valid_range is configured."""
        if self.valid_range is not None:
            return self
        return replace(self, valid_range=ValidRange.unbounded())

    def estimate_kwargs(self) -> dict[str, Any]:
        """Keyword options shared by ``estimate`` and ``estimate_many``."""
        return {
            "valid_range": self.valid_range,
            "pre_sorted": self.pre_sorted,
            "high_precision": self.high_precision,
        }


class ConfigManager:
    """Loads and saves configuration files, validating the estimator section."""

    @staticmethod
    def _read(filepath: str) -> dict[str, Any]:
        if not os.path.exists(filepath):
            raise ConfigError(f"Config file not found: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            if filepath.endswith((".yaml", ".yml")):
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ConfigError(f"Invalid YAML in {filepath}: {e}") from e
            elif filepath.endswith(".json"):
                try:
                    data = json.load(f)
                except ValueError as e:
                    raise ConfigError(f"Invalid JSON in {filepath}: {e}") from e
            else:
                raise ConfigError(f"Unsupported config format (use .yaml, .yml or .json): {filepath}")
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {filepath} must be a mapping")
        return data

    @staticmethod
    def load(filepath: str) -> Config:
        """Load a YAML or JSON file, chosen by extension.

        Raises:
            ConfigError: If the file is missing, unparsable, has an unknown
                extension, or carries an invalid estimator section
        """
        config = Config(ConfigManager._read(filepath))
        EstimatorSettings.from_config(config)
        return config

    @staticmethod
    def save(config: Config, filepath: str) -> None:
        """Write configuration as YAML or JSON, chosen by extension."""
        as_yaml = filepath.endswith((".yaml", ".yml"))
        if not as_yaml and not filepath.endswith(".json"):
            raise ConfigError(f"Unsupported config format (use .yaml, .yml or .json): {filepath}")
        os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            if as_yaml:
                yaml.safe_dump(config.to_dict(), f, default_flow_style=False)
            else:
                json.dump(config.to_dict(), f, indent=2)

    @staticmethod
    def load_or_default(filepath: str | None = None) -> Config:
        """Load configuration merged over DEFAULT_CONFIG.

        Args:
            filepath: Optional path to configuration file; a missing file
                yields the defaults

        Returns:
            Config object
        """
        config = Config.defaults()
        if filepath and os.path.exists(filepath):
            config.update(ConfigManager.load(filepath).config)
        return config
