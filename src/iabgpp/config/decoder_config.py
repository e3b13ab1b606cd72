"""
Decoder Configuration Management

Loads decoder settings from an optional YAML file with environment
variable overrides. Settings cover padding strictness, an input length
guard, logging, and CLI output formatting.
"""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from ..logging import get_logger

logger = get_logger(__name__)

# Environment variable -> config field
ENV_OVERRIDES = {
    "IABGPP_STRICT_PADDING": "strict_padding",
    "IABGPP_MAX_LENGTH": "max_length",
    "LOG_LEVEL": "log_level",
    "LOG_FORMAT": "log_format",
    "IABGPP_JSON_INDENT": "json_indent",
}

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class DecoderConfig:
    """Settings for parsing and decoding GPP strings."""

    # Reject non-zero bits after the last field of a segment
    strict_padding: bool = True
    # Reject inputs longer than this many characters (0 = unlimited)
    max_length: int = 0
    log_level: str = "INFO"
    log_format: str = "json"
    # Indentation of CLI JSON output (0 = compact)
    json_indent: int = 2

    def __post_init__(self):
        if self.max_length < 0:
            raise ValueError("max_length must be >= 0")
        if self.json_indent < 0:
            raise ValueError("json_indent must be >= 0")
        if self.log_format not in ("json", "console"):
            raise ValueError(f"unknown log_format {self.log_format!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DecoderConfig":
        """Create a config from a dict, coercing values to field types."""
        known = {f.name: f for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("Unknown config key ignored", key=key)
                continue
            values[key] = _coerce(key, value, known[key].type)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _coerce(key: str, value: Any, field_type: Any) -> Any:
    if field_type is bool and isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"invalid boolean for {key}: {value!r}")
    if field_type is int and not isinstance(value, bool):
        return int(value)
    if field_type is str:
        return str(value)
    return value


def load_config(path: str | Path | None = None) -> DecoderConfig:
    """
    Load decoder configuration.

    Args:
        path: YAML file to read. Defaults to $IABGPP_CONFIG; when neither
              is set only defaults and environment overrides apply.

    Returns:
        DecoderConfig with environment overrides applied
    """
    if path is None:
        path = os.environ.get("IABGPP_CONFIG")

    data: dict[str, Any] = {}
    if path:
        config_path = Path(path)
        with open(config_path) as f:
            loaded = yaml.safe_load(f)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{config_path} must contain a mapping")
        data.update(loaded.get("iabgpp", loaded))
        logger.debug("Loaded config file", path=str(config_path))

    for env_var, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[key] = value

    return DecoderConfig.from_dict(data)


# Global instance for easy access
_config: DecoderConfig | None = None


def get_decoder_config() -> DecoderConfig:
    """Get the global decoder config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(path: str | Path | None = None) -> DecoderConfig:
    """Re-read the global decoder config."""
    global _config
    _config = load_config(path)
    return _config
