#!/usr/bin/env python3
"""End-to-end demo: warm a base context, copy it, reuse the copy."""

import argparse
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from playwright.sync_api import sync_playwright
from rich.console import Console
from rich.panel import Panel

from context_cache.core import copy_context_tree, format_byte_count, load_settings, measure_tree_size
from context_cache.core.lifecycle import ContextLifecycle

console = Console()


def main() -> int:
    parser = argparse.ArgumentParser(description="Persistent context cache demo")
    parser.add_argument("--url", default=None, help="Page to cache")
    parser.add_argument(
        "--session-name",
        default="my-session",
        help="Name of the session context directory (default: my-session)",
    )
    parser.add_argument("--headless", action="store_true", default=None)
    args = parser.parse_args()

    settings = load_settings(target_url=args.url, headless=args.headless)
    base_path = settings.base_context_path
    session_path = (settings.contexts_dir / args.session_name).resolve()

    console.print(Panel.fit(
        "[bold cyan]Context Cache Demo[/bold cyan]\n"
        f"[dim]{settings.target_url}[/dim]",
        title="Welcome"
    ))

    with sync_playwright() as p, ContextLifecycle(p, settings) as lifecycle:
        # Step 1: warm the base context (once)
        console.print("\n[yellow]Creating base context...[/yellow]")
        lifecycle.open_base_context(base_path, settings.target_url)
        console.print(f"Base size: {format_byte_count(measure_tree_size(base_path))}")

        # Step 2: one copy per session
        console.print("[yellow]Copying context for session...[/yellow]")
        copy_context_tree(base_path, session_path)

        # Step 3: reuse the copy
        console.print("[yellow]Using copied context...[/yellow]")
        session = lifecycle.open_existing_context(session_path, settings.target_url)
        try:
            if session.timing is not None:
                console.print(f"[green]Loaded in {session.timing.load_time_ms:.0f}ms[/green]")
        finally:
            session.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
