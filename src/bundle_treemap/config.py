"""Configuration loading and management for bundle-treemap.

Configuration sources are merged in priority order:
    1. Defaults (defined in TreemapConfig)
    2. Global config (~/.bundle-treemap.toml)
    3. Project config (./bundle-treemap.toml)
    4. Explicit config file
    5. Environment variables (TREEMAP_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True, max_concurrent_fetches=4)
    >>> config.verbosity
    'verbose'
    >>> config.max_concurrent_fetches
    4
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .tree import UNMAPPED_SOURCE

Verbosity = Literal["quiet", "normal", "verbose"]

_VERBOSITIES = ("quiet", "normal", "verbose")

GLOBAL_CONFIG_NAME = ".bundle-treemap.toml"
PROJECT_CONFIG_NAME = "bundle-treemap.toml"
ENV_PREFIX = "TREEMAP_"


@dataclass(frozen=True)
class TreemapConfig:
    """Configuration for treemap assembly and output.

    Attributes:
        Tree construction:
            unmapped_source: Name filed for sources without a path
            collapse_chains: Collapse runs of single-child nodes

        Assembly:
            max_concurrent_fetches: Unused-bytes summaries requested at once

        Output control:
            json_indent: Indentation of emitted JSON (None = compact)
            wrap_output: Emit the audit ``debugdata`` details block instead
                of the bare list of root nodes
            verbosity: Logging verbosity level
    """

    # Tree construction
    unmapped_source: str = UNMAPPED_SOURCE
    collapse_chains: bool = True

    # Assembly
    max_concurrent_fetches: int = 8

    # Output control
    json_indent: Optional[int] = 2
    wrap_output: bool = False
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.unmapped_source:
            raise ValueError("unmapped_source must not be empty")
        if "/" in self.unmapped_source:
            raise ValueError("unmapped_source must be a single path segment")

        if self.max_concurrent_fetches < 1:
            raise ValueError("max_concurrent_fetches must be at least 1")

        if self.json_indent is not None and self.json_indent < 0:
            raise ValueError("json_indent must be non-negative")
        if self.verbosity not in _VERBOSITIES:
            raise ValueError(f"verbosity must be one of {', '.join(_VERBOSITIES)}")


DEFAULT_CONFIG = TreemapConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> TreemapConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``verbose``
            and ``quiet`` booleans are translated to ``verbosity``; ``None``
            values are ignored.

    Returns:
        Validated TreemapConfig instance

    Raises:
        ConfigurationError: If a config file, environment variable or
            override is invalid

    Example:
        >>> config = load_config(config_file=Path("custom.toml"))
    """
    merged: dict = {}

    # 1. Global config
    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_config_file(global_config, "global config"))

    # 2. Project config
    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_config_file(project_config, "project config"))

    # 3. Explicit config file (highest priority from files)
    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_config_file(config_file, "config file"))

    # 4. Environment variables
    merged.update(_load_env_vars())

    # 5. CLI overrides
    overrides = dict(overrides)
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return TreemapConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_config_file(path: Path, label: str) -> dict:
    """Read the ``[treemap]`` table of a TOML file (or its top level)."""
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")

    section = data.get("treemap", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid {label} '{path}': [treemap] must be a table")
    return section


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from TREEMAP_* environment variables.

    Supported environment variables:
        TREEMAP_UNMAPPED_SOURCE: str
        TREEMAP_COLLAPSE_CHAINS: bool (true/false/1/0)
        TREEMAP_MAX_CONCURRENT_FETCHES: int
        TREEMAP_JSON_INDENT: int, or "none" for compact output
        TREEMAP_WRAP_OUTPUT: bool
        TREEMAP_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any TREEMAP_* vars found.
    """
    type_hints = get_type_hints(TreemapConfig)

    result: dict[str, Any] = {}

    for field_name in TreemapConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            result[field_name] = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        if value.lower() in ("", "none", "null"):
            return None
        type_hint = next(t for t in args if t is not type(None))

    # Bool: accept true/false/1/0/yes/no
    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # String (including Literal types like Verbosity)
    return value


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
