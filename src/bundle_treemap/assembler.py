"""Assemble the root nodes of a page's treemap, one per delivered script.

Every external script gets the most detailed node its artifacts allow:

* a source-mapped bundle with per-source coverage becomes a full directory
  tree (see :mod:`bundle_treemap.tree`);
* a script whose unused-bytes estimate has no per-source breakdown becomes
  a single node with the aggregate totals;
* a script without a bundle or without coverage becomes a placeholder leaf
  sized by the length of its URL, meaning "no size data".

All inline ``<script>`` content of the page is merged into one root node
named after the page URL, placed before the external scripts.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from .collaborators import (
    DuplicationIndex,
    JsBundle,
    PageArtifacts,
    ScriptElement,
    SummaryProvider,
    SummaryRequest,
    UnusedJavaScriptSummary,
)
from .config import DEFAULT_CONFIG, TreemapConfig
from .models import LeafMetrics, RootNodeContainer, TreeNode
from .tree import build_tree

logger = logging.getLogger(__name__)


class RootNodeAssembler:
    """Builds the ordered list of :class:`RootNodeContainer` for a page.

    Args:
        summarize: Async provider of unused-bytes summaries.
        duplication: Duplicate-module keys of the page.
        config: Tree and concurrency settings.
    """

    def __init__(
        self,
        summarize: SummaryProvider,
        duplication: DuplicationIndex,
        config: Optional[TreemapConfig] = None,
    ):
        self.summarize = summarize
        self.duplication = duplication
        self.config = config or DEFAULT_CONFIG

    async def assemble(self, artifacts: PageArtifacts) -> List[RootNodeContainer]:
        """Return the inline container (if any) then one container per external script.

        Summaries are requested concurrently; each result goes back into the
        slot of its script so the output follows script encounter order.
        """
        containers: List[RootNodeContainer] = []

        inline = self._inline_container(artifacts)
        if inline is not None:
            containers.append(inline)

        external = [el for el in artifacts.script_elements if not el.is_inline]
        semaphore = asyncio.Semaphore(self.config.max_concurrent_fetches)

        async def bounded(element: ScriptElement) -> RootNodeContainer:
            async with semaphore:
                return await self._script_container(element, artifacts)

        containers.extend(await asyncio.gather(*(bounded(el) for el in external)))

        logger.debug(
            f"Assembled {len(containers)} root nodes for {artifacts.final_url} "
            f"({len(external)} external scripts)"
        )
        return containers

    def _inline_container(self, artifacts: PageArtifacts) -> Optional[RootNodeContainer]:
        # No src means the script is inline; all of them share one root node.
        inline_length = sum(
            len(el.content or "") for el in artifacts.script_elements if el.is_inline
        )
        if not inline_length:
            return None

        name = artifacts.final_url
        return RootNodeContainer(name=name, node=TreeNode(name=name, resource_bytes=inline_length))

    async def _script_container(
        self, element: ScriptElement, artifacts: PageArtifacts
    ) -> RootNodeContainer:
        src = element.src or ""
        bundle = artifacts.find_bundle(src)
        coverages = artifacts.coverage_for(src)
        if bundle is None or coverages is None:
            logger.debug(f"No bundle or coverage for {src}, using placeholder node")
            return _placeholder(src)

        try:
            node = await self._summarized_node(src, bundle, coverages)
        except Exception as e:
            logger.warning(f"Could not build treemap node for {src}: {e}")
            return _placeholder(src)

        return RootNodeContainer(name=src, node=node)

    async def _summarized_node(self, src: str, bundle: JsBundle, coverages: List[Any]) -> TreeNode:
        """Detailed tree when the summary breaks bytes down per source, else one node."""
        summary = await self.summarize(
            SummaryRequest(url=src, script_coverages=coverages, bundle=bundle)
        )

        if summary.sources_wasted_bytes is not None:
            return build_tree(
                bundle.raw_source_root or "",
                self._sources_metrics(bundle, summary),
                unmapped_source=self.config.unmapped_source,
                collapse=self.config.collapse_chains,
            )

        # No per-source breakdown, so the script can only be one node.
        return TreeNode(
            name=src,
            resource_bytes=summary.total_bytes,
            unused_bytes=summary.wasted_bytes,
        )

    def _sources_metrics(
        self, bundle: JsBundle, summary: UnusedJavaScriptSummary
    ) -> Dict[str, LeafMetrics]:
        """Pair each source of the bundle with its wasted bytes and duplicate key."""
        wasted = summary.sources_wasted_bytes or {}
        sources: Dict[str, LeafMetrics] = {}
        for source, size in bundle.file_sizes.items():
            metrics = LeafMetrics(resource_bytes=size, unused_bytes=wasted.get(source))

            key = self.duplication.normalize(source)
            if key in self.duplication:
                metrics.duplicate_key = key

            sources[source] = metrics
        return sources


def _placeholder(src: str) -> RootNodeContainer:
    """Leaf for a script with no size data, sized by its URL length."""
    return RootNodeContainer(name=src, node=TreeNode(name=src, resource_bytes=len(src)))


def make_root_nodes(
    artifacts: PageArtifacts,
    summarize: SummaryProvider,
    duplication: DuplicationIndex,
    config: Optional[TreemapConfig] = None,
) -> List[RootNodeContainer]:
    """Synchronous entry point: run :meth:`RootNodeAssembler.assemble` to completion."""
    assembler = RootNodeAssembler(summarize, duplication, config)
    return asyncio.run(assembler.assemble(artifacts))
