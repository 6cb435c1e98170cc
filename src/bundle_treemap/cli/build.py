"""Build CLI command -- assemble treemap data from an artifacts file."""

from pathlib import Path
from typing import Optional

import typer

from ..artifacts import load_artifacts
from ..assembler import make_root_nodes
from ..exceptions import TreemapError
from ..logging_config import setup_logging
from ..report import dump_treemap, write_treemap
from . import app
from ._common import err_console, format_bytes, resolve_config


@app.command()
def build(
    artifacts: Path = typer.Argument(
        ...,
        help="Artifacts JSON gathered from a page load",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write treemap JSON to this file instead of stdout",
        dir_okay=False,
    ),
    wrap: Optional[bool] = typer.Option(
        None,
        "--wrap/--no-wrap",
        help="Wrap the root nodes in the audit 'debugdata' details block",
    ),
    indent: Optional[int] = typer.Option(
        None,
        "--indent",
        help="JSON indentation (default from config: 2)",
        min=0,
        max=8,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
):
    """
    Build treemap data: one root node per script of the page.

    Scripts with a source map and coverage become directory trees of their
    original sources; the rest become single nodes. Inline scripts are
    merged into one node named after the page.

    [bold cyan]Examples:[/bold cyan]

      bundle-treemap build artifacts.json

      bundle-treemap build artifacts.json --output treemap.json --wrap
    """
    if verbose and quiet:
        err_console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(
            config=config, wrap=wrap, indent=indent, verbose=verbose, quiet=quiet
        )
        logger.debug(f"Loaded settings: {settings}")

        loaded = load_artifacts(artifacts)
        containers = make_root_nodes(
            loaded.page, loaded.summarize, loaded.duplication, settings
        )

        if output is None:
            print(dump_treemap(containers, indent=settings.json_indent, wrap=settings.wrap_output))
            return

        path = write_treemap(
            output, containers, indent=settings.json_indent, wrap=settings.wrap_output
        )
        total = sum(c.node.resource_bytes for c in containers)
        err_console.print(
            f"{len(containers)} root nodes ({format_bytes(total)}) saved to: "
            f"[bold green]{path}[/bold green]"
        )

    except TreemapError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
