"""Read collaborator results from a JSON artifacts document.

The document gathers what the page load produced (script elements, final
URL), the reconstructed bundles, the raw coverage per script, the pre-computed
unused-bytes summaries and the duplicate-group keys. Keys are camelCase, as
emitted by the gatherers::

    {
      "finalUrl": "https://example.com/",
      "scriptElements": [{"src": null, "content": "..."}, {"src": "https://example.com/app.js"}],
      "bundles": [{"scriptSrc": "https://example.com/app.js", "rawSourceRoot": "webpack:///",
                   "files": {"src/a.js": 120}}],
      "jsUsage": {"https://example.com/app.js": [{"functionName": "", "ranges": []}]},
      "unusedJavaScript": {"https://example.com/app.js": {"totalBytes": 120, "wastedBytes": 40,
                           "sourcesWastedBytes": {"src/a.js": 40}}},
      "duplicates": ["node_modules/lodash/lodash.js"]
    }

Only ``finalUrl`` is required.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .collaborators import (
    JsBundle,
    PageArtifacts,
    ScriptElement,
    SummaryRequest,
    UnusedJavaScriptSummary,
)
from .duplication import ModuleDuplication
from .exceptions import ArtifactError, MissingArtifactError

logger = logging.getLogger(__name__)


class StaticSummaryProvider:
    """Serves unused-bytes summaries computed ahead of time, keyed by script URL."""

    def __init__(self, summaries: Mapping[str, UnusedJavaScriptSummary]):
        self._summaries = dict(summaries)

    async def __call__(self, request: SummaryRequest) -> UnusedJavaScriptSummary:
        summary = self._summaries.get(request.url)
        if summary is None:
            raise MissingArtifactError("unused-javascript summary", request.url)
        return summary

    def __len__(self) -> int:
        return len(self._summaries)


@dataclass
class ArtifactSet:
    """Everything the assembler needs for one page."""

    page: PageArtifacts
    summarize: StaticSummaryProvider
    duplication: ModuleDuplication


def load_artifacts(path: Path) -> ArtifactSet:
    """Read and parse an artifacts JSON file.

    Raises:
        ArtifactError: If the file is unreadable, not JSON, or malformed
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ArtifactError(f"cannot read file: {e}", source=Path(path))
    except json.JSONDecodeError as e:
        raise ArtifactError(f"not valid JSON: {e}", source=Path(path))

    try:
        artifacts = parse_artifacts(data)
    except ArtifactError as e:
        e.source = Path(path)
        raise e.with_detail("source", path)

    logger.info(
        f"Loaded {len(artifacts.page.script_elements)} scripts, "
        f"{len(artifacts.page.bundles)} bundles from {path}"
    )
    return artifacts


def parse_artifacts(data: Any) -> ArtifactSet:
    """Build an :class:`ArtifactSet` from an already-decoded document."""
    if not isinstance(data, dict):
        raise ArtifactError("top level must be an object")

    final_url = data.get("finalUrl")
    if not isinstance(final_url, str) or not final_url:
        raise ArtifactError("'finalUrl' must be a non-empty string")

    page = PageArtifacts(
        final_url=final_url,
        script_elements=[_parse_script(s) for s in _list(data, "scriptElements")],
        bundles=[_parse_bundle(b) for b in _list(data, "bundles")],
        js_usage=_parse_js_usage(_object(data, "jsUsage")),
    )
    summaries = {
        url: _parse_summary(url, raw) for url, raw in _object(data, "unusedJavaScript").items()
    }
    duplicates = _list(data, "duplicates")
    if not all(isinstance(key, str) for key in duplicates):
        raise ArtifactError("'duplicates' must be a list of strings")

    return ArtifactSet(
        page=page,
        summarize=StaticSummaryProvider(summaries),
        duplication=ModuleDuplication(duplicates),
    )


def _list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ArtifactError(f"'{key}' must be a list")
    return value


def _object(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ArtifactError(f"'{key}' must be an object")
    return value


def _byte_count(value: Any, where: str) -> int:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ArtifactError(f"{where} must be a non-negative integer, got {value!r}")
    return value


def _parse_script(raw: Any) -> ScriptElement:
    if not isinstance(raw, dict):
        raise ArtifactError("script elements must be objects")
    src = raw.get("src")
    content = raw.get("content")
    if src is not None and not isinstance(src, str):
        raise ArtifactError(f"script 'src' must be a string, got {src!r}")
    if content is not None and not isinstance(content, str):
        raise ArtifactError("script 'content' must be a string")
    return ScriptElement(src=src or None, content=content)


def _parse_bundle(raw: Any) -> JsBundle:
    if not isinstance(raw, dict):
        raise ArtifactError("bundles must be objects")
    script_src = raw.get("scriptSrc")
    if not isinstance(script_src, str) or not script_src:
        raise ArtifactError("bundle 'scriptSrc' must be a non-empty string")

    files = _object(raw, "files")
    file_sizes = {
        source: _byte_count(size, f"size of '{source}' in {script_src}")
        for source, size in files.items()
    }
    return JsBundle(
        script_src=script_src,
        file_sizes=file_sizes,
        source_root=_optional_string(raw, "sourceRoot", script_src) or "",
        raw_source_root=_optional_string(raw, "rawSourceRoot", script_src),
    )


def _optional_string(raw: Dict[str, Any], key: str, script_src: str) -> Optional[str]:
    value = raw.get(key)
    if value is not None and not isinstance(value, str):
        raise ArtifactError(f"bundle '{key}' of {script_src} must be a string, got {value!r}")
    return value


def _parse_js_usage(raw: Dict[str, Any]) -> Dict[str, List[Any]]:
    usage: Dict[str, List[Any]] = {}
    for url, coverages in raw.items():
        if not isinstance(coverages, list):
            raise ArtifactError(f"coverage of {url} must be a list")
        usage[url] = coverages
    return usage


def _parse_summary(url: str, raw: Any) -> UnusedJavaScriptSummary:
    if not isinstance(raw, dict):
        raise ArtifactError(f"summary of {url} must be an object")

    sources_wasted: Optional[Dict[str, int]] = None
    if raw.get("sourcesWastedBytes") is not None:
        sources_wasted = {
            source: _byte_count(wasted, f"wasted bytes of '{source}' in {url}")
            for source, wasted in _object(raw, "sourcesWastedBytes").items()
        }

    return UnusedJavaScriptSummary(
        url=url,
        total_bytes=_byte_count(raw.get("totalBytes", 0), f"totalBytes of {url}"),
        wasted_bytes=_byte_count(raw.get("wastedBytes", 0), f"wastedBytes of {url}"),
        sources_wasted_bytes=sources_wasted,
    )
