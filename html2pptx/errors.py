"""Custom exceptions for scene loading."""

from __future__ import annotations


class SceneLoadError(ValueError):
    """Raised when a scene snapshot cannot be read or has no usable slides."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
