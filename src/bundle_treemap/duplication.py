"""Duplicate-module keys.

Detecting duplicates is done by whoever gathers the bundles; what the
treemap needs is the normalization that turns a source path into the key of
its duplicate group, and a way to ask whether a key is duplicated.
"""

from typing import Iterable

_NODE_MODULES = "node_modules"


def normalize_source(source: str) -> str:
    """Return the duplicate-group key of ``source``.

    Trailing ``?`` markers (left by webpack) are dropped, and dependency
    paths keep only what follows the last ``node_modules``, so the same
    package vendored by two bundles maps to the same key.

    >>> normalize_source("webpack:///./node_modules/lodash/lodash.js?")
    'node_modules/lodash/lodash.js'
    """
    if source.endswith("?"):
        source = source[:-1]

    index = source.rfind(_NODE_MODULES)
    if index != -1:
        source = source[index:]
    return source


class ModuleDuplication:
    """Set of duplicate-group keys known to occur in two or more bundles."""

    def __init__(self, keys: Iterable[str] = ()):
        self._keys = frozenset(keys)

    def normalize(self, source: str) -> str:
        return normalize_source(source)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"ModuleDuplication({sorted(self._keys)!r})"
