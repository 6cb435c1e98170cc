"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="bundle-treemap",
    help="bundle-treemap - JavaScript size and coverage treemaps from source maps",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True, no_args_is_help=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        is_eager=True,
    ),
):
    """Build and inspect treemap data for the scripts of a page."""
    if version:
        console.print(f"[bold cyan]bundle-treemap[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


# Import subcommands to register them
from .build import build as _build  # noqa: F401, E402
from .show import show as _show  # noqa: F401, E402
