"""Centralized application configuration."""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_CONFIG_DIR = Path.home() / ".kv"

# (section, key) in config.toml -> Config field
_TOML_FIELDS: dict[tuple[str, str], str] = {
    ("server", "host"): "host",
    ("server", "port"): "port",
    ("server", "timeout_ms"): "timeout_ms",
    ("output", "format"): "output_format",
    ("output", "color"): "color",
}

# Config field -> environment variables, first match wins
_ENV_VARS: dict[str, tuple[str, ...]] = {
    "host": ("KV_HOST", "KV_SERVER_HOST"),
    "port": ("KV_PORT", "KV_SERVER_PORT"),
    "timeout_ms": ("KV_TIMEOUT_MS", "KV_SERVER_TIMEOUT_MS"),
    "output_format": ("KV_FORMAT", "KV_OUTPUT_FORMAT"),
    "color": ("KV_COLOR", "KV_OUTPUT_COLOR"),
}

class ConfigFileError(ValueError):
    """config.toml exists but cannot be parsed."""


DEFAULT_CONFIG_TOML = """\
# KV Storage Engine CLI Configuration

[server]
# Server connection settings
host = "127.0.0.1"
port = 9000
timeout_ms = 3000

[output]
# Output format: text or json
format = "text"

# Enable colored output (only applies to text format)
color = true
"""


class Config(BaseModel):
    """Resolved client settings."""

    model_config = ConfigDict(frozen=True)

    config_dir: Path = Field(description="Directory holding config.toml and the log file")
    host: str = Field(default="127.0.0.1", min_length=1, description="Server host")
    port: int = Field(default=9000, ge=1, le=65535, description="Server TCP port")
    timeout_ms: int = Field(default=3000, ge=0, description="Per-operation timeout in milliseconds (0 = none)")
    output_format: Literal["text", "json"] = Field(default="text", description="Output format")
    color: bool = Field(default=True, description="Colored text output")

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.config_dir / "config.toml"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.config_dir / "kv.log"

    @property
    def timeout(self) -> float:
        """Per-operation timeout in seconds."""
        return self.timeout_ms / 1000

    def display(self) -> dict[str, object]:
        """Flatten settings into dotted keys, as written in config.toml."""
        return {
            "server.host": self.host,
            "server.port": self.port,
            "server.timeout_ms": self.timeout_ms,
            "output.format": self.output_format,
            "output.color": self.color,
        }

    @staticmethod
    def build(config_dir: Path | None = None, **overrides: Any) -> "Config":  # noqa: ANN401
        """Build a Config from defaults, config.toml, environment and explicit overrides.

        Later layers win. Overrides set to None are ignored.

        Raises:
            ConfigFileError: config.toml is malformed.
            ValidationError: A resolved value is out of range.

        """
        resolved_dir = config_dir if config_dir is not None else DEFAULT_CONFIG_DIR
        kwargs: dict[str, Any] = {"config_dir": resolved_dir}
        kwargs.update(_load_toml(resolved_dir / "config.toml"))
        kwargs.update(_load_env(os.environ))
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return Config(**kwargs)


def _load_toml(config_path: Path) -> dict[str, Any]:
    """Read known settings from config.toml, if present.

    Raises:
        ConfigFileError: The file is not valid UTF-8 TOML.

    """
    if not config_path.is_file():
        return {}
    try:
        with config_path.open("rb") as f:
            toml_data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        msg = f"cannot parse {config_path}: {e}"
        raise ConfigFileError(msg) from e
    result: dict[str, Any] = {}
    for (section, key), field_name in _TOML_FIELDS.items():
        table = toml_data.get(section)
        if isinstance(table, dict) and key in table:
            result[field_name] = table[key]
    return result


def _load_env(environ: Mapping[str, str]) -> dict[str, Any]:
    """Read settings from environment variables."""
    result: dict[str, Any] = {}
    for field_name, names in _ENV_VARS.items():
        for name in names:
            if environ.get(name):
                result[field_name] = environ[name]
                break
    return result


def env_output_format() -> str | None:
    """Output format requested through the environment, if any."""
    return _load_env(os.environ).get("output_format")


def write_default_config(config_dir: Path) -> Path:
    """Create a default config.toml in config_dir.

    Raises:
        FileExistsError: A config file already exists.

    """
    config_path = config_dir / "config.toml"
    if config_path.exists():
        msg = f"config file already exists at {config_path}"
        raise FileExistsError(msg)
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG_TOML)
    return config_path
