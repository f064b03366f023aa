"""Configuration system for flowpath.

Router settings and the ordered query bindings live in a TOML file
(``flowpath.toml`` by default) with typed dataclasses and defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

import tomli_w

if sys.version_info >= (3, 12):
    import tomllib
else:
    import tomli as tomllib

from flowpath.exceptions import ConfigurationError
from flowpath.types import OutputMode

if TYPE_CHECKING:
    from pathlib import Path

_T = TypeVar("_T")

__all__ = [
    "CONFIG_FILE",
    "DEFAULT_BATCH_SIZE",
    "FlowpathConfig",
    "RouterConfig",
    "default_config",
    "load_config",
    "save_config",
]

logger = logging.getLogger(__name__)

CONFIG_FILE = "flowpath.toml"
DEFAULT_BATCH_SIZE = 50


@dataclass
class RouterConfig:
    """[router] section."""

    destination: str = OutputMode.CONTENT.value
    batch_size: int = DEFAULT_BATCH_SIZE
    document_format: str = "json"
    query_language: str = "jsonpath"

    @property
    def output_mode(self) -> OutputMode:
        try:
            return OutputMode(self.destination)
        except ValueError as e:
            allowed = ", ".join(m.value for m in OutputMode)
            raise ConfigurationError(
                f"Invalid destination {self.destination!r}. Allowed: {allowed}"
            ) from e


@dataclass
class FlowpathConfig:
    """Root configuration.

    ``queries`` maps binding name → JSONPath expression; its insertion
    order is the evaluation order.
    """

    router: RouterConfig = field(default_factory=RouterConfig)
    queries: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Check scalar settings.

        Raises:
            ConfigurationError: If the destination or batch size is invalid.
        """
        _ = self.router.output_mode
        batch_size = self.router.batch_size
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
            raise ConfigurationError(
                f"batch_size must be a positive integer, got {self.router.batch_size!r}"
            )


def default_config() -> FlowpathConfig:
    """Return a config with all default values."""
    return FlowpathConfig()


def _config_to_dict(config: FlowpathConfig) -> dict[str, object]:
    """Convert FlowpathConfig to a nested dict suitable for TOML serialization."""
    return {
        "router": dict(vars(config.router)),
        "queries": dict(config.queries),
    }


def save_config(config: FlowpathConfig, path: Path) -> None:
    """Save configuration to a TOML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = _config_to_dict(config)
    try:
        with path.open("wb") as f:
            tomli_w.dump(data, f)
        logger.info("Saved config to %s", path)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise ConfigurationError(f"Failed to save config to {path}: {e}") from e


def _load_section(cls: type[_T], data: dict[str, object]) -> _T:
    """Load a dataclass section from a dict, ignoring unknown keys."""
    known_fields = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
    filtered = {k: v for k, v in data.items() if k in known_fields}
    return cls(**filtered)


def _load_queries(data: object) -> dict[str, str]:
    if not isinstance(data, dict):
        raise ConfigurationError("[queries] must be a table of name = expression pairs")

    queries: dict[str, str] = {}
    for name, expression in data.items():
        if not isinstance(expression, str):
            raise ConfigurationError(
                f"Query {name!r} must be a string expression, got {type(expression).__name__}"
            )
        queries[name] = expression
    return queries


def load_config(path: Path) -> FlowpathConfig:
    """Load configuration from a TOML file.

    Missing sections or keys get default values.

    Raises:
        ConfigurationError: If the file is missing, malformed, or invalid.
    """
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        raw = path.read_bytes()
        data = tomllib.loads(raw.decode("utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        raise ConfigurationError(f"Failed to load config from {path}: {e}") from e

    config = FlowpathConfig()
    if "router" in data:
        if not isinstance(data["router"], dict):
            raise ConfigurationError("[router] must be a table")
        config.router = _load_section(RouterConfig, data["router"])
    if "queries" in data:
        config.queries = _load_queries(data["queries"])

    config.validate()

    logger.info("Loaded config from %s (%d queries)", path, len(config.queries))
    return config
