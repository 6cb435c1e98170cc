"""Build a compressed directory tree from flat per-source metrics.

Leaves of the tree are the sources of a bundle (real files from the source
tree), internal nodes are directories. Every node carries the sum of the
metrics of the leaves below it::

    build_tree("", {
        "a/b.js": LeafMetrics(100),
        "a/c.js": LeafMetrics(50),
    }, collapse=False)

    ""  (150)
    └── a  (150)
        ├── b.js  (100)
        └── c.js  (50)

By default chains of single-child nodes are then collapsed into one node whose
name is the ``/``-joined run of segments: the tree above becomes a root
named ``a`` holding both files, and ``x/y/z.js`` alone becomes a single node
named ``x/y/z.js``.
"""

from __future__ import annotations

import re
from typing import List, Mapping

from .models import LeafMetrics, TreeNode

UNMAPPED_SOURCE = "<unmapped>"

_SEGMENT_SEPARATOR = re.compile(r"/+")


def split_source_path(source_root: str, source: str) -> List[str]:
    """Strip the shared ``source_root`` and split the rest into segments.

    A root that does not prefix ``source`` leaves it untouched.
    """
    if source_root and source.startswith(source_root):
        source = source[len(source_root):]
    return _SEGMENT_SEPARATOR.split(source)


def build_tree(
    source_root: str,
    sources: Mapping[str, LeafMetrics],
    *,
    unmapped_source: str = UNMAPPED_SOURCE,
    collapse: bool = True,
) -> TreeNode:
    """Aggregate per-source metrics into a tree rooted at ``source_root``.

    Args:
        source_root: Prefix shared by the sources, stripped before splitting.
            Also used as the name of the root node.
        sources: Mapping of source path -> metrics. Falsy paths are filed
            under ``unmapped_source``. Must not be empty.
        unmapped_source: Name given to sources without a path.
        collapse: Collapse single-child chains (see :func:`collapse_chains`).

    Returns:
        The root node. Children keep first-seen order of their names.
    """
    root = TreeNode(name=source_root)
    for source, metrics in sources.items():
        _add_source_path(root, source_root, source or unmapped_source, metrics)

    if collapse:
        return collapse_chains(root)
    return root


def _add_source_path(root: TreeNode, source_root: str, source: str, metrics: LeafMetrics) -> None:
    """Apply ``metrics`` to the root and every node along ``source``.

    Ex: ``path/to/file.js`` finds or creates ``path`` under the root, adds the
    metrics, then continues with ``to`` and finally ``file.js``.
    """
    root.add_metrics(metrics)

    node = root
    for segment in split_source_path(source_root, source):
        child = node.find_child(segment)
        if child is None:
            child = node.add_child(TreeNode(name=segment))
        node = child
        node.add_metrics(metrics)

    # Only the node of the source itself may be tagged as a duplicate.
    if metrics.duplicate_key is not None:
        node.duplicate_key = metrics.duplicate_key


def collapse_chains(node: TreeNode) -> TreeNode:
    """Return a copy of ``node`` with every single-child chain collapsed.

    A node with exactly one child absorbs it: the names are joined with
    ``/`` and the node takes over the child's children and duplicate tag.
    This repeats until the node has zero or several children, after which
    the remaining children are collapsed the same way. Metrics are never
    changed, so the sum invariant still holds on the result.

    An unnamed root (empty source root) takes the name of what it absorbs
    without a leading ``/``. Everywhere else an empty segment is kept, so
    ``/x/a.js`` and ``x/b.js`` stay distinct.
    """
    return _collapse(node, is_root=True)


def _collapse(node: TreeNode, is_root: bool = False) -> TreeNode:
    segments = [node.name]
    duplicate_key = node.duplicate_key
    children = node.children
    while children is not None and len(children) == 1:
        only = children[0]
        segments.append(only.name)
        duplicate_key = only.duplicate_key
        children = only.children

    if is_root and not node.name and len(segments) > 1:
        segments = segments[1:]

    return TreeNode(
        name="/".join(segments),
        resource_bytes=node.resource_bytes,
        unused_bytes=node.unused_bytes,
        duplicate_key=duplicate_key,
        children=[_collapse(child) for child in children] if children is not None else None,
    )
