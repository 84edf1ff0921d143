"""Models describing context directories and what happened to them.

These are plain value objects returned by the lifecycle and store
operations so callers can report on a run without re-reading the disk.
"""

from dataclasses import dataclass
from pathlib import Path

from playwright.sync_api import BrowserContext, Page
from pydantic import BaseModel, ConfigDict

from context_cache.core.store import format_byte_count


class ContextInfo(BaseModel):
    """Size snapshot of a context directory.

    Attributes:
        path: The context directory.
        size_bytes: Total bytes of regular files under ``path`` at
            measurement time (0 when missing or unreadable).
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    size_bytes: int

    @property
    def formatted_size(self) -> str:
        """Human-readable size, e.g. ``"1.50 KB"``."""
        return format_byte_count(self.size_bytes)

    @property
    def is_empty(self) -> bool:
        """True when nothing was measured; the directory may also be missing."""
        return self.size_bytes == 0


class WarmupResult(BaseModel):
    """Outcome of warming a base context.

    Attributes:
        url: The page that was navigated.
        context_path: The base context directory that was populated.
        assets_detected: Whether a large asset response was seen before the
            asset wait timed out. Advisory only.
        asset_url: URL of the detected asset response, if any.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    context_path: Path
    assets_detected: bool = False
    asset_url: str | None = None


class NavigationTiming(BaseModel):
    """Elapsed time of a navigation on a reused context."""

    model_config = ConfigDict(frozen=True)

    url: str
    load_time_ms: float


@dataclass
class SessionContext:
    """A live persistent context opened on an existing directory.

    The caller owns ``context`` and must close it.

    Attributes:
        context: The Playwright persistent context.
        path: The directory the context was launched on.
        page: The page opened for navigation, if a URL was given.
        timing: Navigation timing, if a URL was given.
    """

    context: BrowserContext
    path: Path
    page: Page | None = None
    timing: NavigationTiming | None = None

    def close(self) -> None:
        self.context.close()
