"""Browser lifecycle around persistent contexts.

ContextLifecycle owns one Playwright handle and at most one persistent
context at a time. It keeps an ambient non-persistent browser (the
"driver") for work that needs no profile, closing it while a persistent
context is launched and restoring it afterwards.

States:
    UNINITIALIZED -> DRIVER_READY -> (PERSISTENT_OPEN -> DRIVER_READY)* -> UNINITIALIZED
"""

import time
from enum import Enum
from pathlib import Path
from typing import Any

from playwright.sync_api import Browser, BrowserContext, Page, Playwright, Response
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from context_cache.core.browser import launch_browser, launch_persistent_context
from context_cache.core.config import Settings
from context_cache.core.errors import LifecycleError
from context_cache.core.logging import ErrorIds, logError, logEvent, logForDebugging
from context_cache.core.store import ensure_directory
from context_cache.models.context import NavigationTiming, SessionContext, WarmupResult

LARGE_ASSET_MARKERS = (".db", ".wasm")


class LifecycleState(str, Enum):
    """Observable state of a ContextLifecycle."""

    UNINITIALIZED = "uninitialized"
    DRIVER_READY = "driver_ready"
    PERSISTENT_OPEN = "persistent_open"


def is_large_asset_url(url: str) -> bool:
    """Guess whether a response URL is a large cacheable asset.

    Matches database and WebAssembly files plus sql.js scripts. This is a
    substring heuristic, so treat a match as a hint that the cache is warm,
    never as proof.
    """
    if any(marker in url for marker in LARGE_ASSET_MARKERS):
        return True
    return ".js" in url and "sql" in url


class ContextLifecycle:
    """Launches, warms, and reopens persistent browser contexts.

    Example:
        from playwright.sync_api import sync_playwright

        with sync_playwright() as p, ContextLifecycle(p) as lifecycle:
            lifecycle.open_base_context("contexts/base-context", url)
            copy_context_tree("contexts/base-context", "contexts/session-1")
            session = lifecycle.open_existing_context("contexts/session-1", url)
            ...
            session.close()
    """

    def __init__(
        self,
        playwright: Playwright,
        settings: Settings | None = None,
        headless: bool | None = None,
    ) -> None:
        """Initialize the lifecycle.

        Args:
            playwright: The started Playwright instance.
            settings: Timeouts and waits. Defaults to ``Settings()``.
            headless: Overrides ``settings.headless`` when given.
        """
        self._playwright = playwright
        self._settings = settings or Settings()
        self._headless = self._settings.headless if headless is None else headless
        self._browser: Browser | None = None
        self._driver_enabled = False
        self._persistent: BrowserContext | None = None

    def __enter__(self) -> "ContextLifecycle":
        self.initialize_driver()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.teardown_driver()

    @property
    def state(self) -> LifecycleState:
        if self._persistent is not None:
            return LifecycleState.PERSISTENT_OPEN
        if self._browser is not None:
            return LifecycleState.DRIVER_READY
        return LifecycleState.UNINITIALIZED

    @property
    def browser(self) -> Browser | None:
        """The ambient non-persistent browser, if running."""
        return self._browser

    def initialize_driver(self) -> Browser:
        """Start the ambient browser, replacing any running one.

        Returns:
            The newly launched Browser.
        """
        self._close_driver()
        self._browser = launch_browser(self._playwright, headless=self._headless)
        self._driver_enabled = True
        logForDebugging("Driver browser launched", extra={"headless": self._headless})
        return self._browser

    def teardown_driver(self) -> None:
        """Close the ambient browser. Safe to call more than once."""
        self._driver_enabled = False
        self._close_driver()

    def open_base_context(self, path: str | Path, url: str) -> WarmupResult:
        """Warm the cache of a base context by visiting ``url`` once.

        The directory is created if missing. The persistent context is always
        closed before returning so the profile is flushed to disk, and the
        ambient browser is restored if it was running.

        Args:
            path: The base context directory.
            url: Page whose assets should be cached.

        Returns:
            WarmupResult describing whether a large asset was seen.

        Raises:
            LifecycleError: If a persistent context is already open.
            playwright.sync_api.TimeoutError: If the page does not reach
                network idle within the navigation timeout.
        """
        context_path = ensure_directory(path)
        context = self._launch_persistent(context_path)
        try:
            page = context.new_page()
            logForDebugging(f"Navigating to {url}", level="info")
            page.goto(
                url,
                wait_until="networkidle",
                timeout=self._settings.base_navigation_timeout_ms,
            )

            logForDebugging("Waiting for assets to be cached", level="info")
            page.wait_for_timeout(self._settings.cache_grace_ms)

            asset_url = None
            if self._settings.wait_for_assets:
                asset_url = self._wait_for_large_asset(page)
        except PlaywrightTimeoutError:
            logError(
                ErrorIds.NAVIGATION_FAILED,
                f"Timeout navigating to {url!r}",
                extra={"context": context_path},
            )
            raise
        finally:
            try:
                self._close_persistent(context)
            finally:
                self._restore_driver()

        logEvent(
            "base_context_warmed",
            {"path": context_path, "assets_detected": asset_url is not None},
        )
        return WarmupResult(
            url=url,
            context_path=context_path,
            assets_detected=asset_url is not None,
            asset_url=asset_url,
        )

    def open_existing_context(self, path: str | Path, url: str | None = None) -> SessionContext:
        """Launch a persistent context on ``path`` and optionally open ``url``.

        The returned context stays open; the caller must close it (closing it
        returns this lifecycle to DRIVER_READY).

        Args:
            path: The context directory. Created if it does not exist.
            url: Page to open. Navigation waits only for DOMContentLoaded,
                since cached assets leave little network work.

        Returns:
            SessionContext holding the live context, page, and timing.

        Raises:
            LifecycleError: If a persistent context is already open.
            playwright.sync_api.TimeoutError: If navigation times out. The
                context is closed before the error propagates.
        """
        context_path = ensure_directory(path)
        context = self._launch_persistent(context_path)
        session = SessionContext(context=context, path=context_path)
        try:
            if url:
                session.page = context.new_page()
                logForDebugging(f"Navigating to {url} with cached assets", level="info")
                start = time.perf_counter()
                session.page.goto(
                    url,
                    wait_until="domcontentloaded",
                    timeout=self._settings.session_navigation_timeout_ms,
                )
                elapsed_ms = (time.perf_counter() - start) * 1000
                session.timing = NavigationTiming(url=url, load_time_ms=elapsed_ms)
                logEvent("session_page_loaded", {"url": url, "load_time_ms": round(elapsed_ms)})
        except Exception:
            logError(
                ErrorIds.NAVIGATION_FAILED,
                f"Could not open {url!r} on existing context",
                exc_info=True,
                extra={"context": context_path},
            )
            self._close_persistent(context)
            raise
        finally:
            self._restore_driver()

        return session

    def _launch_persistent(self, context_path: Path) -> BrowserContext:
        if self._persistent is not None:
            logError(ErrorIds.LIFECYCLE_MISUSE, "Persistent context already open")
            raise LifecycleError(
                "A persistent context is already open; close it before opening another"
            )

        # Launching a persistent context replaces the ambient browser.
        self._close_driver()
        try:
            context = launch_persistent_context(
                self._playwright,
                user_data_dir=context_path,
                headless=self._headless,
            )
        except Exception:
            logError(
                ErrorIds.CONTEXT_LAUNCH_FAILED,
                "Could not launch persistent context",
                exc_info=True,
                extra={"context": context_path},
            )
            self._restore_driver()
            raise
        self._persistent = context
        context.on("close", lambda _context: self._forget_persistent(context))
        logEvent("persistent_context_opened", {"path": context_path})
        return context

    def _forget_persistent(self, context: BrowserContext) -> None:
        if self._persistent is context:
            self._persistent = None

    def _close_persistent(self, context: BrowserContext) -> None:
        try:
            context.close()
        except Exception:
            logError(
                ErrorIds.CONTEXT_CLOSE_FAILED,
                "Could not close persistent context",
                exc_info=True,
            )
            raise
        finally:
            self._forget_persistent(context)

    def _wait_for_large_asset(self, page: Page) -> str | None:
        """Wait for a large asset response; None if none arrives in time."""
        try:
            response: Response = page.wait_for_event(
                "response",
                predicate=lambda r: is_large_asset_url(r.url),
                timeout=self._settings.assets_timeout_ms,
            )
        except PlaywrightTimeoutError:
            logForDebugging("No large assets detected within timeout", level="info")
            return None

        logForDebugging(f"Large asset detected: {response.url}", level="info")
        return response.url

    def _restore_driver(self) -> None:
        if self._driver_enabled and self._browser is None:
            self._browser = launch_browser(self._playwright, headless=self._headless)

    def _close_driver(self) -> None:
        if self._browser is not None:
            browser, self._browser = self._browser, None
            browser.close()
