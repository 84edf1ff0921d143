"""Best-effort page checks on a reused context.

Failures here never abort a run: they are logged and reported as
"unknown" so the caller can carry on with the session.
"""

from playwright.sync_api import Page

from context_cache.core.logging import ErrorIds, logError


def read_page_title(page: Page) -> str | None:
    """Return the page title, or None if it cannot be read."""
    try:
        return page.title()
    except Exception as e:
        logError(ErrorIds.PAGE_TITLE_FAILED, f"Could not read page title: {e}")
        return None


def detect_global(page: Page, name: str) -> bool:
    """Check whether ``window[name]`` is defined on the page.

    Args:
        page: The Playwright Page object.
        name: Global variable name, e.g. ``"SQL"`` for sql.js.

    Returns:
        True if the global exists. False if it is undefined or the
        evaluation failed.
    """
    try:
        return bool(page.evaluate("name => typeof window[name] !== 'undefined'", name))
    except Exception as e:
        logError(
            ErrorIds.PAGE_EVALUATE_FAILED,
            f"Could not evaluate global {name!r}: {e}",
        )
        return False
