"""Interfaces of the collaborators the treemap is assembled from.

Bundles (source-map composition), unused-bytes summaries (coverage
estimates) and duplicate-module detection are produced elsewhere. This
module only describes the shape in which their results are handed over.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol


@dataclass(frozen=True)
class ScriptElement:
    """A ``<script>`` element of the page: external when ``src`` is set."""

    src: Optional[str] = None
    content: Optional[str] = None

    @property
    def is_inline(self) -> bool:
        return not self.src


@dataclass
class JsBundle:
    """A delivered script mapped back to its original sources.

    Attributes:
        script_src: URL of the script this bundle was reconstructed from.
        file_sizes: Mapping of source path -> bytes it contributes.
        source_root: Resolved source root of the source map.
        raw_source_root: The ``sourceRoot`` field exactly as the map declares
            it (``None`` when the map has none). Paths in ``file_sizes`` are
            prefixed with it, so the tree is built relative to it.
    """

    script_src: str
    file_sizes: Dict[str, int] = field(default_factory=dict)
    source_root: str = ""
    raw_source_root: Optional[str] = None


@dataclass(frozen=True)
class SummaryRequest:
    """Input of an unused-bytes summary for one script."""

    url: str
    script_coverages: List[Any]
    bundle: JsBundle


@dataclass
class UnusedJavaScriptSummary:
    """Unused-bytes estimate of one script.

    ``sources_wasted_bytes`` is only present when the estimate could be
    broken down per source; it decides whether a detailed tree is built.
    """

    url: str
    total_bytes: int
    wasted_bytes: int
    sources_wasted_bytes: Optional[Dict[str, int]] = None


SummaryProvider = Callable[[SummaryRequest], Awaitable[UnusedJavaScriptSummary]]


class DuplicationIndex(Protocol):
    """Duplicate-module detector results."""

    def normalize(self, source: str) -> str:
        """Map a source path to its duplicate-group key."""
        ...

    def __contains__(self, key: object) -> bool:
        ...


@dataclass
class PageArtifacts:
    """Everything gathered from one page load."""

    final_url: str
    script_elements: List[ScriptElement] = field(default_factory=list)
    bundles: List[JsBundle] = field(default_factory=list)
    js_usage: Dict[str, List[Any]] = field(default_factory=dict)

    def find_bundle(self, src: str) -> Optional[JsBundle]:
        """Return the first bundle reconstructed from ``src``."""
        for bundle in self.bundles:
            if bundle.script_src == src:
                return bundle
        return None

    def coverage_for(self, src: str) -> Optional[List[Any]]:
        return self.js_usage.get(src)
