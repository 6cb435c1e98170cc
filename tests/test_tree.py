"""Tests for tree.py - path tree construction and chain compression."""

import pytest

from bundle_treemap.models import LeafMetrics, TreeNode
from bundle_treemap.tree import (
    UNMAPPED_SOURCE,
    build_tree,
    collapse_chains,
    split_source_path,
)


def assert_sums(root: TreeNode) -> None:
    """Every internal node carries the sum of its children."""
    for node in root.walk():
        if not node.children:
            continue
        assert node.resource_bytes == sum(c.resource_bytes for c in node.children), node.name
        if any(c.unused_bytes is not None for c in node.children):
            assert node.unused_bytes == sum(c.unused_bytes or 0 for c in node.children), node.name


def leaf_paths(root: TreeNode):
    """Map reconstructed source path -> leaf, for an uncompressed tree."""
    paths = {}

    def visit(node, segments):
        if not node.children:
            paths[root.name + "/".join(segments)] = node
            return
        for child in node.children:
            visit(child, segments + [child.name])

    visit(root, [])
    return paths


class TestSplitSourcePath:
    """Test split_source_path function."""

    def test_strips_root(self):
        assert split_source_path("webpack:///", "webpack:///src/a.js") == ["src", "a.js"]

    def test_empty_root(self):
        assert split_source_path("", "src/a.js") == ["src", "a.js"]

    def test_non_matching_root_is_noop(self):
        assert split_source_path("webpack:///", "src/a.js") == ["src", "a.js"]

    def test_root_only_stripped_from_front(self):
        assert split_source_path("lib", "src/lib/a.js") == ["src", "lib", "a.js"]

    def test_repeated_slashes_are_one_separator(self):
        assert split_source_path("", "src//deep///a.js") == ["src", "deep", "a.js"]

    def test_no_slash_is_single_segment(self):
        assert split_source_path("", "main.js") == ["main.js"]


class TestBuildTreeExamples:
    """Worked examples of tree construction."""

    def test_shared_directory_uncompressed(self, two_files):
        """Root has one child 'a' holding both files."""
        root = build_tree("", two_files, collapse=False)
        assert root.name == ""
        assert root.resource_bytes == 150
        assert [c.name for c in root.children] == ["a"]

        a = root.children[0]
        assert a.resource_bytes == 150
        assert [(c.name, c.resource_bytes) for c in a.children] == [("b.js", 100), ("c.js", 50)]

    def test_shared_directory_keeps_both_files(self, two_files):
        """'a' has two children so it is never collapsed away."""
        root = build_tree("", two_files)
        assert root.name == "a"
        assert root.resource_bytes == 150
        assert [(c.name, c.resource_bytes) for c in root.children] == [("b.js", 100), ("c.js", 50)]
        assert all(c.children is None for c in root.children)

    def test_single_chain_collapses_to_one_node(self, single_chain):
        root = build_tree("", single_chain)
        assert root.name == "x/y/z.js"
        assert root.resource_bytes == 10
        assert root.unused_bytes == 5
        assert root.children is None

    def test_empty_source_is_unmapped(self):
        root = build_tree(
            "",
            {"": LeafMetrics(resource_bytes=7), "src/a.js": LeafMetrics(resource_bytes=3)},
        )
        names = [c.name for c in root.children]
        assert UNMAPPED_SOURCE in names
        unmapped = root.find_child(UNMAPPED_SOURCE)
        assert unmapped.resource_bytes == 7

    def test_custom_unmapped_name(self):
        root = build_tree(
            "",
            {"": LeafMetrics(resource_bytes=7), "a.js": LeafMetrics(resource_bytes=3)},
            unmapped_source="(no path)",
        )
        assert root.find_child("(no path)") is not None

    def test_path_without_slash_is_direct_child(self):
        root = build_tree(
            "",
            {"a.js": LeafMetrics(resource_bytes=1), "b.js": LeafMetrics(resource_bytes=2)},
        )
        assert [c.name for c in root.children] == ["a.js", "b.js"]
        assert root.resource_bytes == 3


class TestBuildTreeAggregation:
    """Metrics aggregation along source paths."""

    def test_root_named_after_source_root(self, webpack_sources):
        root = build_tree("webpack:///", webpack_sources)
        assert root.name == "webpack:///"

    def test_root_totals(self, webpack_sources):
        root = build_tree("webpack:///", webpack_sources)
        assert root.resource_bytes == 7720
        assert root.unused_bytes == 5000

    def test_children_in_first_seen_order(self, webpack_sources):
        root = build_tree("webpack:///", webpack_sources)
        assert [c.name for c in root.children] == ["src", "node_modules", UNMAPPED_SOURCE]

        src = root.find_child("src")
        assert [c.name for c in src.children] == ["index.js", "components"]

    def test_directory_sums(self, webpack_sources):
        root = build_tree("webpack:///", webpack_sources)
        components = root.find_child("src").find_child("components")
        assert components.resource_bytes == 1200
        assert components.unused_bytes == 400

    def test_zero_unused_is_present(self, webpack_sources):
        """A fully used file reports 0 rather than omitting the field."""
        root = build_tree("webpack:///", webpack_sources)
        header = root.find_child("src").find_child("components").find_child("header.js")
        assert header.unused_bytes == 0

    def test_unused_absent_without_data(self, webpack_sources):
        root = build_tree("webpack:///", webpack_sources)
        react = root.find_child("node_modules").find_child("react/index.js")
        assert react.resource_bytes == 300
        assert react.unused_bytes is None
        assert root.find_child(UNMAPPED_SOURCE).unused_bytes is None

    def test_unused_absent_everywhere_without_data(self, two_files):
        root = build_tree("", two_files)
        assert all(node.unused_bytes is None for node in root.walk())

    def test_sum_invariant_before_compression(self, webpack_sources):
        assert_sums(build_tree("webpack:///", webpack_sources, collapse=False))

    def test_sum_invariant_after_compression(self, webpack_sources):
        assert_sums(build_tree("webpack:///", webpack_sources))

    def test_insertion_order_does_not_change_totals(self, webpack_sources):
        forward = build_tree("webpack:///", webpack_sources)
        backward = build_tree("webpack:///", dict(reversed(list(webpack_sources.items()))))
        assert forward.resource_bytes == backward.resource_bytes
        assert forward.unused_bytes == backward.unused_bytes
        assert {c.name: c.resource_bytes for c in forward.children} == {
            c.name: c.resource_bytes for c in backward.children
        }


class TestDuplicateTagging:
    """Only source leaves carry duplicate keys."""

    def test_leaf_tagged(self, webpack_sources):
        root = build_tree("webpack:///", webpack_sources, collapse=False)
        lodash_js = root.find_child("node_modules").find_child("lodash").find_child("lodash.js")
        assert lodash_js.duplicate_key == "node_modules/lodash/lodash.js"

    def test_internal_nodes_untagged(self, webpack_sources):
        root = build_tree("webpack:///", webpack_sources, collapse=False)
        for node in root.walk():
            if node.children:
                assert node.duplicate_key is None, node.name

    def test_tag_survives_collapse_onto_leaf(self, webpack_sources):
        root = build_tree("webpack:///", webpack_sources)
        lodash = root.find_child("node_modules").find_child("lodash/lodash.js")
        assert lodash.children is None
        assert lodash.duplicate_key == "node_modules/lodash/lodash.js"

    def test_single_tagged_source_collapses_with_tag(self):
        root = build_tree(
            "",
            {"node_modules/a/a.js": LeafMetrics(resource_bytes=4, duplicate_key="node_modules/a/a.js")},
        )
        assert root.name == "node_modules/a/a.js"
        assert root.duplicate_key == "node_modules/a/a.js"


class TestPathReconstruction:
    """Root-to-leaf names rebuild the original source paths."""

    def test_every_source_reconstructed(self, webpack_sources):
        root = build_tree("webpack:///", webpack_sources, collapse=False)
        paths = leaf_paths(root)
        for source in webpack_sources:
            if source:
                assert source in paths

    def test_reconstruction_with_empty_root(self, two_files):
        paths = leaf_paths(build_tree("", two_files, collapse=False))
        assert set(paths) == {"a/b.js", "a/c.js"}
        assert paths["a/b.js"].resource_bytes == 100


class TestCollapseChains:
    """Test collapse_chains function."""

    def _chain_tree(self):
        return TreeNode(
            name="root",
            resource_bytes=30,
            children=[
                TreeNode(
                    name="a",
                    resource_bytes=30,
                    children=[
                        TreeNode(
                            name="b",
                            resource_bytes=30,
                            children=[
                                TreeNode(name="c.js", resource_bytes=10),
                                TreeNode(
                                    name="d",
                                    resource_bytes=20,
                                    children=[TreeNode(name="e.js", resource_bytes=20)],
                                ),
                            ],
                        )
                    ],
                )
            ],
        )

    def test_collapses_whole_run(self):
        tree = collapse_chains(self._chain_tree())
        assert tree.name == "root/a/b"
        assert [c.name for c in tree.children] == ["c.js", "d/e.js"]

    def test_leading_slash_kept_apart_below_root(self):
        tree = build_tree("", {"/x/a.js": LeafMetrics(1), "x/b.js": LeafMetrics(2)})
        assert tree.name == ""
        assert [c.name for c in tree.children] == ["/x/a.js", "x/b.js"]

    def test_unnamed_root_absorbs_leading_slash_source(self):
        tree = build_tree("", {"/x/a.js": LeafMetrics(1)})
        assert tree.name == "/x/a.js"
        assert collapse_chains(tree) == tree

    def test_does_not_mutate_input(self):
        original = self._chain_tree()
        collapse_chains(original)
        assert original.name == "root"
        assert original.children[0].name == "a"

    def test_idempotent(self, webpack_sources):
        once = collapse_chains(build_tree("webpack:///", webpack_sources, collapse=False))
        twice = collapse_chains(once)
        assert once == twice

    def test_no_single_child_nodes_remain(self, webpack_sources):
        tree = build_tree("webpack:///", webpack_sources)
        for node in tree.walk():
            assert node.children is None or len(node.children) != 1

    def test_leaves_preserved(self, webpack_sources):
        raw = build_tree("webpack:///", webpack_sources, collapse=False)
        collapsed = collapse_chains(raw)

        def signature(tree):
            return sorted(
                (leaf.resource_bytes, leaf.unused_bytes or -1, leaf.duplicate_key or "")
                for leaf in tree.leaves()
            )

        assert signature(raw) == signature(collapsed)

    def test_leaf_unchanged(self):
        leaf = TreeNode(name="a.js", resource_bytes=5, unused_bytes=1, duplicate_key="a.js")
        assert collapse_chains(leaf) == leaf

    @pytest.mark.parametrize("collapse", [True, False])
    def test_build_tree_respects_flag(self, single_chain, collapse):
        root = build_tree("", single_chain, collapse=collapse)
        assert (root.children is None) == collapse
