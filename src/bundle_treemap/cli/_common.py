"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import TreemapConfig, load_config

console = Console()
err_console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    wrap: Optional[bool] = None,
    indent: Optional[int] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> TreemapConfig:
    """Build configuration from CLI options."""
    overrides: dict = {}
    if wrap is not None:
        overrides["wrap_output"] = wrap
    if indent is not None:
        overrides["json_indent"] = indent
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)


def format_bytes(count: int) -> str:
    """Human-readable byte count: ``512 B``, ``1.5 KiB``, ``2.0 MiB``."""
    if count < 1024:
        return f"{count:,} B"
    if count < 1024 * 1024:
        return f"{count / 1024:.1f} KiB"
    return f"{count / (1024 * 1024):.1f} MiB"
