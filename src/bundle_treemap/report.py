"""Serialize assembled root nodes into the treemap payload.

The payload is a list of plain records, one per root node::

    [{"name": "https://example.com/app.js",
      "node": {"name": "webpack:///", "resourceBytes": 150, "unusedBytes": 40,
               "children": [...]}}]

As the details of the treemap-data audit it is wrapped in a ``debugdata``
block, which :func:`load_treemap` also accepts.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .exceptions import ArtifactError
from .models import RootNodeContainer

DETAILS_TYPE = "debugdata"


def treemap_data(containers: Sequence[RootNodeContainer]) -> List[Dict[str, Any]]:
    return [container.to_dict() for container in containers]


def debug_data(containers: Sequence[RootNodeContainer]) -> Dict[str, Any]:
    """Audit details block carrying the treemap."""
    return {"type": DETAILS_TYPE, "treemapData": treemap_data(containers)}


def audit_product(containers: Sequence[RootNodeContainer]) -> Dict[str, Any]:
    """Informative audit result: always passes, data lives in the details."""
    return {"score": 1, "details": debug_data(containers)}


def dump_treemap(
    containers: Sequence[RootNodeContainer],
    indent: Optional[int] = 2,
    wrap: bool = False,
) -> str:
    payload: Any = debug_data(containers) if wrap else treemap_data(containers)
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def write_treemap(
    path: Union[str, Path],
    containers: Sequence[RootNodeContainer],
    indent: Optional[int] = 2,
    wrap: bool = False,
) -> str:
    """Write the treemap JSON to ``path``.

    Returns:
        Absolute path of the written file.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(dump_treemap(containers, indent=indent, wrap=wrap) + "\n", encoding="utf-8")
    return str(out.resolve())


def load_treemap(source: Union[str, Path]) -> List[RootNodeContainer]:
    """Read a treemap payload from a file path or a JSON string.

    Accepts the bare list, the ``debugdata`` block, or a whole audit product.

    Raises:
        ArtifactError: If the payload is not a treemap
    """
    if isinstance(source, Path) or not source.lstrip().startswith(("[", "{")):
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as e:
            raise ArtifactError(f"cannot read treemap: {e}", source=Path(source))
    else:
        text = source

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ArtifactError(f"treemap is not valid JSON: {e}")

    if isinstance(payload, dict) and "details" in payload:
        payload = payload["details"]
    if isinstance(payload, dict):
        payload = payload.get("treemapData")
    if not isinstance(payload, list):
        raise ArtifactError("treemap must be a list of root nodes")

    try:
        return [RootNodeContainer.from_dict(entry) for entry in payload]
    except (AttributeError, KeyError, TypeError) as e:
        raise ArtifactError(f"malformed root node: {e}")
