"""Root of the bundle-treemap error hierarchy."""

from typing import Any, Dict, Optional


class TreemapError(Exception):
    """Base exception for all bundle-treemap errors.

    ``details`` holds machine-readable context (file, URL, config key) and is
    appended to the message as ``key=value`` pairs.
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, str] = dict(details or {})

    def with_detail(self, key: str, value: Any) -> "TreemapError":
        """Record one more piece of context and return the error for re-raising."""
        self.details[key] = str(value)
        return self

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
