"""Shared test fixtures for context_cache tests."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from context_cache.core.config import Settings


@pytest.fixture
def base_context(tmp_path: Path) -> Path:
    """A small context directory: a.txt (10 bytes) and sub/b.txt (20 bytes)."""
    base = tmp_path / "contexts" / "base-context"
    (base / "sub").mkdir(parents=True)
    (base / "a.txt").write_bytes(b"0123456789")
    (base / "sub" / "b.txt").write_bytes(b"abcdefghijklmnopqrst")
    return base


@pytest.fixture
def fast_settings(tmp_path: Path) -> Settings:
    return Settings(
        contexts_dir=tmp_path / "contexts",
        screenshots_dir=tmp_path / "screenshots",
        headless=True,
        cache_grace_ms=0,
        settle_ms=0,
        hold_open_ms=0,
        assets_timeout_ms=100,
    )


@pytest.fixture
def mock_page() -> MagicMock:
    """Create a mock Playwright Page object."""
    page = MagicMock()
    page.url = "https://sql.js.org/examples/GUI/"
    page.goto = MagicMock()
    page.wait_for_timeout = MagicMock()
    page.wait_for_event = MagicMock(side_effect=PlaywrightTimeoutError("Timeout 100ms exceeded"))
    return page


@pytest.fixture
def mock_context(mock_page: MagicMock) -> MagicMock:
    """Create a mock persistent BrowserContext."""
    context = MagicMock()
    context.new_page = MagicMock(return_value=mock_page)
    return context


@pytest.fixture
def mock_playwright(mock_context: MagicMock) -> MagicMock:
    """Create a mock Playwright handle.

    Every ``chromium.launch`` call returns a new browser mock so tests can
    tell the original driver from a restored one.
    """
    playwright = MagicMock()
    playwright.chromium.launch = MagicMock(side_effect=lambda **kwargs: MagicMock())
    playwright.chromium.launch_persistent_context = MagicMock(return_value=mock_context)
    return playwright
