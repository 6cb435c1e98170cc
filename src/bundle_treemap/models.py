"""Data models for treemap output: nodes, leaf metrics and root containers.

Optional metrics use ``None`` for "no data". A node with ``unused_bytes=0``
is fully used; a node with ``unused_bytes=None`` has no coverage data at all.
The two are never conflated, and ``None`` fields are omitted from the wire
format entirely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class LeafMetrics:
    """Pre-computed metrics for a single source file of a bundle."""

    resource_bytes: int
    unused_bytes: Optional[int] = None
    duplicate_key: Optional[str] = None  # normalized source, see duplication.normalize_source


@dataclass
class TreeNode:
    """One rectangle of the treemap.

    Leaves are real source files; internal nodes are directory-like groupings
    carrying the sum of their descendants' metrics. After chain compression a
    node's ``name`` may hold several ``/``-joined path segments.
    """

    name: str
    resource_bytes: int = 0
    unused_bytes: Optional[int] = None
    duplicate_key: Optional[str] = None
    children: Optional[List[TreeNode]] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def find_child(self, name: str) -> Optional[TreeNode]:
        """Return the first child named ``name`` in insertion order."""
        for child in self.children or ():
            if child.name == name:
                return child
        return None

    def add_child(self, child: TreeNode) -> TreeNode:
        if self.children is None:
            self.children = []
        self.children.append(child)
        return child

    def add_metrics(self, metrics: LeafMetrics) -> None:
        """Accumulate a leaf's bytes into this node."""
        self.resource_bytes += metrics.resource_bytes
        if metrics.unused_bytes is not None:
            self.unused_bytes = (self.unused_bytes or 0) + metrics.unused_bytes

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and every descendant, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def leaves(self) -> Iterator[TreeNode]:
        return (node for node in self.walk() if node.is_leaf)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase record consumed by treemap renderers."""
        data: Dict[str, Any] = {
            "name": self.name,
            "resourceBytes": self.resource_bytes,
        }
        if self.unused_bytes is not None:
            data["unusedBytes"] = self.unused_bytes
        if self.duplicate_key is not None:
            data["duplicateKey"] = self.duplicate_key
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TreeNode:
        children = data.get("children")
        return cls(
            name=data["name"],
            resource_bytes=data.get("resourceBytes", 0),
            unused_bytes=data.get("unusedBytes"),
            duplicate_key=data.get("duplicateKey"),
            children=[cls.from_dict(c) for c in children] if children is not None else None,
        )


@dataclass
class RootNodeContainer:
    """Top-level entry of the treemap: one per script, or one for all inline scripts."""

    name: str  # script URL, or the page URL for merged inline scripts
    node: TreeNode

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "node": self.node.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RootNodeContainer:
        return cls(name=data["name"], node=TreeNode.from_dict(data["node"]))
