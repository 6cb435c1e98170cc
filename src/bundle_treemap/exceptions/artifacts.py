"""Artifact exceptions: malformed or incomplete collaborator data."""

from pathlib import Path
from typing import Optional

from .base import TreemapError


class ArtifactError(TreemapError):
    """Raised when an artifacts document cannot be interpreted."""

    def __init__(self, reason: str, source: Optional[Path] = None):
        details = {"reason": reason}
        if source is not None:
            details["source"] = str(source)

        super().__init__(f"Invalid artifacts: {reason}", details=details)
        self.reason = reason
        self.source = source


class MissingArtifactError(ArtifactError):
    """Raised when a collaborator has no data for a requested script."""

    def __init__(self, artifact: str, url: str):
        super().__init__(f"no {artifact} for {url}")
        self.with_detail("artifact", artifact).with_detail("url", url)
        self.artifact = artifact
        self.url = url
