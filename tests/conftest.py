"""Shared test fixtures for bundle-treemap tests."""

import json
import os

import pytest

from bundle_treemap.models import LeafMetrics

APP_JS = "https://example.com/app.js"
VENDOR_JS = "https://example.com/vendor.js"
NO_MAP_JS = "https://example.com/no-map.js"
PAGE_URL = "https://example.com/"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user/project config files and TREEMAP_* variables out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("TREEMAP_"):
            monkeypatch.delenv(key)


@pytest.fixture
def two_files():
    """Two sources sharing one directory."""
    return {
        "a/b.js": LeafMetrics(resource_bytes=100),
        "a/c.js": LeafMetrics(resource_bytes=50),
    }


@pytest.fixture
def single_chain():
    """One deeply nested source."""
    return {"x/y/z.js": LeafMetrics(resource_bytes=10, unused_bytes=5)}


@pytest.fixture
def webpack_sources():
    """A realistic webpack bundle with app code and vendored dependencies."""
    return {
        "webpack:///src/index.js": LeafMetrics(resource_bytes=1200, unused_bytes=100),
        "webpack:///src/components/header.js": LeafMetrics(resource_bytes=800, unused_bytes=0),
        "webpack:///src/components/footer.js": LeafMetrics(resource_bytes=400, unused_bytes=400),
        "webpack:///node_modules/lodash/lodash.js": LeafMetrics(
            resource_bytes=5000,
            unused_bytes=4500,
            duplicate_key="node_modules/lodash/lodash.js",
        ),
        "webpack:///node_modules/react/index.js": LeafMetrics(resource_bytes=300),
        "": LeafMetrics(resource_bytes=20),
    }


@pytest.fixture
def artifacts_document():
    """Artifacts of a page with inline scripts, a mapped bundle and unmapped scripts."""
    return {
        "finalUrl": PAGE_URL,
        "scriptElements": [
            {"src": None, "content": "console.log('hi');"},
            {"src": APP_JS},
            {"src": None, "content": "window.x = 1;"},
            {"src": VENDOR_JS},
            {"src": NO_MAP_JS},
        ],
        "bundles": [
            {
                "scriptSrc": APP_JS,
                "rawSourceRoot": "webpack:///",
                "files": {
                    "webpack:///src/main.js": 600,
                    "webpack:///src/util/format.js": 200,
                    "webpack:///node_modules/lodash/lodash.js": 1000,
                },
            },
        ],
        "jsUsage": {
            APP_JS: [{"functionName": "", "ranges": [{"startOffset": 0, "endOffset": 1800, "count": 1}]}],
            VENDOR_JS: [{"functionName": "", "ranges": []}],
        },
        "unusedJavaScript": {
            APP_JS: {
                "totalBytes": 1800,
                "wastedBytes": 700,
                "sourcesWastedBytes": {
                    "webpack:///src/main.js": 100,
                    "webpack:///node_modules/lodash/lodash.js": 600,
                },
            },
        },
        "duplicates": ["node_modules/lodash/lodash.js"],
    }


@pytest.fixture
def artifacts_file(tmp_path, artifacts_document):
    """The artifacts document written to disk."""
    path = tmp_path / "artifacts.json"
    path.write_text(json.dumps(artifacts_document), encoding="utf-8")
    return path
