"""Show CLI command -- render treemap JSON as a tree in the terminal."""

from pathlib import Path

import typer
from rich.markup import escape
from rich.tree import Tree

from ..exceptions import TreemapError
from ..models import TreeNode
from ..report import load_treemap
from . import app
from ._common import console, err_console, format_bytes


def _label(node: TreeNode, total: int) -> str:
    share = (node.resource_bytes / total * 100) if total else 0.0
    label = f"{escape(node.name)}  [cyan]{format_bytes(node.resource_bytes)}[/cyan] [dim]{share:.1f}%[/dim]"
    if node.unused_bytes is not None:
        label += f"  [yellow]{format_bytes(node.unused_bytes)} unused[/yellow]"
    if node.duplicate_key is not None:
        label += f"  [magenta]duplicate of {escape(node.duplicate_key)}[/magenta]"
    return label


def _add_children(branch: Tree, node: TreeNode, total: int, depth: int, min_bytes: int) -> None:
    if depth == 0 or not node.children:
        return

    hidden = 0
    for child in sorted(node.children, key=lambda c: c.resource_bytes, reverse=True):
        if child.resource_bytes < min_bytes:
            hidden += 1
            continue
        sub = branch.add(_label(child, total))
        _add_children(sub, child, total, depth - 1, min_bytes)

    if hidden:
        branch.add(f"[dim]… {hidden} smaller[/dim]")


@app.command()
def show(
    treemap: Path = typer.Argument(
        ...,
        help="Treemap JSON produced by 'build'",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    depth: int = typer.Option(
        3,
        "--depth",
        "-d",
        help="Levels shown below each root node",
        min=0,
        max=64,
    ),
    min_bytes: int = typer.Option(
        0,
        "--min-bytes",
        help="Hide nodes smaller than this many bytes",
        min=0,
    ),
):
    """
    Render treemap data as a tree, largest nodes first.

    [bold cyan]Examples:[/bold cyan]

      bundle-treemap show treemap.json

      bundle-treemap show treemap.json --depth 1 --min-bytes 1024
    """
    try:
        containers = load_treemap(treemap)
    except TreemapError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    page_total = sum(c.node.resource_bytes for c in containers)
    root = Tree(
        f"[bold]{len(containers)} scripts[/bold]  [cyan]{format_bytes(page_total)}[/cyan]"
    )
    for container in containers:
        branch = root.add(f"[bold]{escape(container.name)}[/bold]")
        node_branch = branch.add(_label(container.node, container.node.resource_bytes))
        _add_children(node_branch, container.node, container.node.resource_bytes, depth, min_bytes)

    console.print(root)
