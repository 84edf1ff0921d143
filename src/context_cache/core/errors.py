"""Exception types raised by context cache."""

from pathlib import Path


class ContextCacheError(Exception):
    """Base class for context cache errors."""


class ContextCopyError(ContextCacheError):
    """Raised when copying a context directory fails.

    Attributes:
        path: The file or directory that could not be read or written.
    """

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class LifecycleError(ContextCacheError):
    """Raised when a lifecycle operation is called in the wrong state."""
