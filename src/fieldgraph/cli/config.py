"""
Configuration loading and validation for fieldgraph projects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..core.errors import ConfigError
from ..core.formatter import BUILTIN_FORMATTERS

logger = logging.getLogger(__name__)


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_CONFIG_PATH = "fieldgraph.yaml"


@dataclass
class FieldgraphConfig:
    """Main fieldgraph configuration."""
    version: int = 1
    schema: str = "schema.yaml"
    input_field_formatter: str = "camel_case"
    output_field_formatter: str = "camel_case"
    log_level: str = "WARNING"

    def __post_init__(self):
        for option in ("input_field_formatter", "output_field_formatter"):
            value = getattr(self, option)
            if value not in BUILTIN_FORMATTERS:
                raise ConfigError(
                    f"Invalid {option} '{value}', must be one of {sorted(BUILTIN_FORMATTERS)}"
                )
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Invalid log_level '{self.log_level}', must be one of {LOG_LEVELS}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldgraphConfig":
        """Create config from dictionary."""
        known = {"version", "schema", "input_field_formatter", "output_field_formatter", "log_level"}
        for key in data:
            if key not in known:
                logger.warning(f"Ignoring unknown config key '{key}'")

        return cls(
            version=data.get("version", 1),
            schema=data.get("schema", "schema.yaml"),
            input_field_formatter=data.get("input_field_formatter", "camel_case"),
            output_field_formatter=data.get("output_field_formatter", "camel_case"),
            log_level=data.get("log_level", "WARNING"),
        )

    def schema_path(self, base: Path | str = ".") -> Path:
        """Schema location, relative paths resolved against ``base``."""
        path = Path(self.schema)
        return path if path.is_absolute() else Path(base) / path

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for YAML serialization."""
        return {
            "version": self.version,
            "schema": self.schema,
            "input_field_formatter": self.input_field_formatter,
            "output_field_formatter": self.output_field_formatter,
            "log_level": self.log_level,
        }

    def save(self, path: Path | str = DEFAULT_CONFIG_PATH) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        content = yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)
        path.write_text(content)


def load_config(path: Path | str = DEFAULT_CONFIG_PATH) -> FieldgraphConfig | None:
    """Load configuration from YAML file."""
    path = Path(path)
    if not path.exists():
        return None

    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")

    config = FieldgraphConfig.from_dict(data)
    logger.info(f"Loaded config from {path}")
    return config
