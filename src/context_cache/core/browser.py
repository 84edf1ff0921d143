"""Playwright launch helpers.

This module wraps the two ways context cache starts Chromium: a plain
browser for operations that need no profile, and a persistent context whose
profile directory (cookies, localStorage, HTTP cache) survives on disk.
"""

from pathlib import Path

from playwright.sync_api import Browser, BrowserContext, Playwright


def launch_persistent_context(
    playwright: Playwright,
    user_data_dir: str | Path,
    headless: bool = False,
) -> BrowserContext:
    """Launch a browser with persistent storage for session data.

    Args:
        playwright: The Playwright instance (from sync_playwright()).
        user_data_dir: Path to the profile directory. Chromium creates it
                      on first launch if it doesn't exist.
        headless: If False (default), launches in visible (headful) mode.
                 If True, launches in headless mode without UI.

    Returns:
        A BrowserContext instance. Closing it also closes the browser and
        flushes the profile to disk.

    Note:
        - Only ONE browser instance can use a given user_data_dir at a time.
        - Never copy a user_data_dir while a context launched on it is open.
    """
    context = playwright.chromium.launch_persistent_context(
        user_data_dir=str(user_data_dir),
        headless=headless,
    )
    return context


def launch_browser(playwright: Playwright, headless: bool = False) -> Browser:
    """Launch a non-persistent Chromium browser."""
    return playwright.chromium.launch(headless=headless)
