"""
bundle-treemap - Hierarchical size and coverage data for page JavaScript

Breaks the bytes of every script delivered to a page down by original
source file and directory, with unused and duplicated code marked, for
treemap renderers to draw as nested rectangles.
"""

__version__ = "0.1.0"

from .assembler import RootNodeAssembler, make_root_nodes
from .models import LeafMetrics, RootNodeContainer, TreeNode
from .tree import build_tree, collapse_chains

__all__ = [
    "build_tree",  # Source paths -> compressed tree
    "collapse_chains",
    "RootNodeAssembler",  # Scripts of a page -> root nodes
    "make_root_nodes",
    "LeafMetrics",
    "TreeNode",
    "RootNodeContainer",
]
