"""Screenshot capture for session diagnostics.

Each copy-and-run session saves one viewport screenshot, named after the
session, as evidence that the copied context rendered the page.
"""

from pathlib import Path

from playwright.sync_api import Page


def capture_screenshot(page: Page, output_path: Path | str) -> Path:
    """Save a viewport screenshot of ``page`` to ``output_path``.

    Missing parent directories (usually ``screenshots/``) are created.

    Returns:
        The path the screenshot was written to.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    page.screenshot(path=str(output_path))
    return output_path
