"""CLI entry points for context-cache.

``context-cache-init`` warms the shared base context.
``context-cache-copy-and-run`` copies it into a fresh session directory and
opens the page again on the copy.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Callable

from playwright.sync_api import Page, sync_playwright
from rich.console import Console

from context_cache.core.config import Settings, load_settings
from context_cache.core.lifecycle import ContextLifecycle
from context_cache.core.logging import (
    ErrorIds,
    enable_file_logging,
    logError,
    set_log_level,
)
from context_cache.core.store import (
    copy_context_tree,
    measure_tree_size,
    new_session_id,
    session_context_path,
    session_screenshot_path,
)
from context_cache.models import ContextInfo
from context_cache.tools import capture_screenshot, detect_global, read_page_title

console = Console()


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="Page to cache (default: sql.js GUI demo with large .wasm/.db assets)",
    )
    parser.add_argument(
        "--contexts-dir",
        type=Path,
        default=None,
        help="Directory holding base and session contexts (default: ./contexts)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        default=None,
        help="Run in headless mode (default: visible browser)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging on the console",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write debug logs to this file",
    )


def _configure_logging(args: argparse.Namespace) -> None:
    if args.verbose:
        set_log_level("debug")
    if args.log_file:
        enable_file_logging(args.log_file)


def build_init_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="context-cache-init",
        description=(
            "Launch a browser with a persistent context, visit the target URL, "
            "and keep the downloaded assets (including large .db and .wasm files) "
            "in the base context for later reuse."
        ),
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--no-wait-for-assets",
        dest="wait_for_assets",
        action="store_false",
        default=None,
        help="Skip waiting for a large asset response after the page loads",
    )
    return parser


def build_copy_and_run_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="context-cache-copy-and-run",
        description=(
            "Copy the base context into a new session-specific directory, launch "
            "a browser on the copy, and load the target URL from the warm cache. "
            "Run context-cache-init first."
        ),
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--screenshots-dir",
        type=Path,
        default=None,
        help="Directory for session screenshots (default: ./screenshots)",
    )
    return parser


def run_init(settings: Settings) -> int:
    """Create or refresh the base context.

    Returns:
        Process exit code.
    """
    base_path = settings.base_context_path
    console.print("[bold cyan]Initializing persistent context[/bold cyan]")
    console.print(f"Target URL: [dim]{settings.target_url}[/dim]")
    console.print(f"Context path: [dim]{base_path}[/dim]\n")

    with sync_playwright() as p, ContextLifecycle(p, settings) as lifecycle:
        console.print("[yellow]Creating base context and caching assets...[/yellow]")
        result = lifecycle.open_base_context(base_path, settings.target_url)

    if result.assets_detected:
        console.print(f"[green]Large assets detected and cached:[/green] {result.asset_url}")
    else:
        console.print("[yellow]No large assets detected within timeout[/yellow]")

    info = ContextInfo(path=base_path, size_bytes=measure_tree_size(base_path))
    console.print(f"Context size: [bold]{info.formatted_size}[/bold]\n")
    console.print("[green]Initialization complete![/green]")
    console.print("Next: run [bold]context-cache-copy-and-run[/bold] to copy the context and reuse it")
    return 0


def run_copy_and_run(settings: Settings, session_id: str | None = None) -> int:
    """Copy the base context into a new session and open the page on it.

    Returns:
        Process exit code. 1 when the base context is missing or empty.
    """
    session_id = session_id or new_session_id()
    base_path = settings.base_context_path
    target_path = session_context_path(settings.contexts_dir, session_id).resolve()
    screenshot_path = session_screenshot_path(settings.screenshots_dir, session_id).resolve()

    console.print("[bold cyan]Copying and running with persistent context[/bold cyan]")
    console.print(f"Source context: [dim]{base_path}[/dim]")
    console.print(f"Target context: [dim]{target_path}[/dim]")
    console.print(f"Session ID: [dim]{session_id}[/dim]\n")

    base_info = ContextInfo(path=base_path, size_bytes=measure_tree_size(base_path))
    if base_info.is_empty:
        logError(ErrorIds.BASE_CONTEXT_MISSING, "Base context not found or empty", extra={"path": base_path})
        console.print("[red]Base context not found or empty![/red]")
        console.print("Please run [bold]context-cache-init[/bold] first to create the base context.")
        return 1
    console.print(f"Base context size: [bold]{base_info.formatted_size}[/bold]")

    copy_context_tree(base_path, target_path)
    copied_info = ContextInfo(path=target_path, size_bytes=measure_tree_size(target_path))
    console.print(f"Copied context size: [bold]{copied_info.formatted_size}[/bold]\n")

    with sync_playwright() as p, ContextLifecycle(p, settings) as lifecycle:
        console.print("[yellow]Loading page with cached assets...[/yellow]")
        session = lifecycle.open_existing_context(target_path, settings.target_url)
        try:
            if session.timing is not None:
                console.print(f"Page loaded in [bold]{session.timing.load_time_ms:.0f}ms[/bold]")
            if session.page is not None:
                _inspect_session_page(session.page, screenshot_path, settings)
                session.page.wait_for_timeout(settings.hold_open_ms)
        finally:
            session.close()

    console.print("\n[green]Success! The context has been copied and used.[/green]")
    console.print(f"Session context: [dim]{copied_info.path}[/dim]")
    console.print(f"Size: {copied_info.formatted_size}")
    return 0


def _inspect_session_page(page: Page, screenshot_path: Path, settings: Settings) -> None:
    page.wait_for_timeout(settings.settle_ms)

    title = read_page_title(page)
    if title is not None:
        console.print(f"Page title: {title}")

    if detect_global(page, "SQL"):
        console.print("[green]SQL.js loaded from cache[/green]")

    try:
        saved = capture_screenshot(page, screenshot_path)
        console.print(f"Screenshot saved: [dim]{saved}[/dim]")
    except Exception as e:
        logError(ErrorIds.SCREENSHOT_CAPTURE_FAILED, f"Could not save screenshot: {e}")
        console.print("[yellow]Could not interact with page content, but context is working[/yellow]")


def _run(
    command: Callable[[Settings], int],
    args: argparse.Namespace,
    **overrides: Any,
) -> int:
    _configure_logging(args)
    try:
        settings = load_settings(
            target_url=args.url,
            contexts_dir=args.contexts_dir,
            headless=args.headless,
            **overrides,
        )
        return command(settings)
    except KeyboardInterrupt:
        logError(ErrorIds.KEYBOARD_INTERRUPT, "Interrupted by user")
        console.print("\n[yellow]Interrupted.[/yellow]")
        return 1
    except Exception as e:
        logError(ErrorIds.UNEXPECTED_ERROR, str(e), exc_info=args.verbose)
        console.print(f"[red]Error:[/red] {e}")
        return 1


def init_main(argv: list[str] | None = None) -> int:
    """Entry point for context-cache-init."""
    args = build_init_parser().parse_args(argv)
    return _run(run_init, args, wait_for_assets=args.wait_for_assets)


def copy_and_run_main(argv: list[str] | None = None) -> int:
    """Entry point for context-cache-copy-and-run."""
    args = build_copy_and_run_parser().parse_args(argv)
    return _run(run_copy_and_run, args, screenshots_dir=args.screenshots_dir)


COMMANDS = {
    "init": init_main,
    "copy-and-run": copy_and_run_main,
}


def main(argv: list[str] | None = None) -> int:
    """Dispatch ``python -m context_cache <command>``."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in COMMANDS:
        console.print(f"Usage: python -m context_cache {{{','.join(COMMANDS)}}} [options]")
        return 0 if argv and argv[0] in ("-h", "--help") else 1
    return COMMANDS[argv[0]](argv[1:])


def run_init_cli() -> None:
    sys.exit(init_main())


def run_copy_and_run_cli() -> None:
    sys.exit(copy_and_run_main())


if __name__ == "__main__":
    sys.exit(main())
