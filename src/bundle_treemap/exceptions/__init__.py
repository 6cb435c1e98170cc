"""Exception hierarchy for bundle-treemap."""

from .artifacts import ArtifactError, MissingArtifactError
from .base import TreemapError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "TreemapError",
    "ConfigurationError",
    "InvalidConfigError",
    "ArtifactError",
    "MissingArtifactError",
]
