"""Filesystem operations on persistent context directories.

A context directory is a browser profile owned by the browser engine. This
module never edits files inside one; it only creates directories, duplicates
whole trees, and measures their size.
"""

import secrets
import shutil
from pathlib import Path

from context_cache.core.errors import ContextCopyError
from context_cache.core.logging import ErrorIds, logError, logEvent, logForDebugging

BYTE_UNITS = ("Bytes", "KB", "MB", "GB")


def ensure_directory(path: str | Path) -> Path:
    """Create a directory and its parents if it does not exist.

    Args:
        path: Directory to create.

    Returns:
        The resolved directory path.

    Raises:
        OSError: If the directory cannot be created (permissions, a file in
            the way, invalid path).
    """
    resolved = Path(path).resolve()
    try:
        resolved.mkdir(parents=True, exist_ok=True)
    except OSError:
        logError(
            ErrorIds.DIRECTORY_CREATE_FAILED,
            "Could not create directory",
            extra={"path": resolved},
        )
        raise
    return resolved


def copy_context_tree(source: str | Path, target: str | Path) -> None:
    """Replace ``target`` with an independent copy of ``source``.

    Any existing ``target`` tree is removed first, so repeated copies never
    merge with stale content. Files are duplicated byte for byte; no links are
    created. The source must not be in use by a live browser while it is
    copied. A failed copy is not rolled back.

    Args:
        source: The context directory to copy from.
        target: The context directory to create.

    Raises:
        ContextCopyError: If ``target`` is ``source`` or lies inside it, or if
            any entry cannot be read or written. The error names the
            offending path and chains the underlying OSError.
    """
    source_path = Path(source).resolve()
    target_path = Path(target).resolve()
    logForDebugging(f"Copying context from {source_path} to {target_path}", level="info")

    if target_path == source_path or source_path in target_path.parents:
        logError(
            ErrorIds.CONTEXT_COPY_FAILED,
            "Target overlaps source",
            extra={"source": source_path, "target": target_path},
        )
        raise ContextCopyError(target_path, "Target must not be the source or inside it")

    _remove_tree(target_path)
    try:
        ensure_directory(target_path)
    except OSError as e:
        raise ContextCopyError(target_path, "Could not create target directory") from e

    try:
        _copy_directory(source_path, target_path)
    except ContextCopyError as e:
        logError(ErrorIds.CONTEXT_COPY_FAILED, str(e), extra={"source": source_path})
        raise

    logEvent("context_copied", {"source": source_path, "target": target_path})


def _remove_tree(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise ContextCopyError(path, "Could not remove existing target") from e


def _copy_directory(source: Path, target: Path) -> None:
    """Copy the children of ``source`` into the existing ``target``, depth first."""
    try:
        entries = sorted(source.iterdir())
    except OSError as e:
        raise ContextCopyError(source, "Could not list directory") from e

    for entry in entries:
        destination = target / entry.name
        if entry.is_dir():
            try:
                destination.mkdir(exist_ok=True)
            except OSError as e:
                raise ContextCopyError(destination, "Could not create directory") from e
            _copy_directory(entry, destination)
        else:
            try:
                shutil.copyfile(entry, destination)
            except OSError as e:
                raise ContextCopyError(entry, "Could not copy file") from e


def measure_tree_size(path: str | Path) -> int:
    """Sum the size in bytes of every regular file under ``path``.

    This is a best-effort metric: a missing path counts as 0 and unreadable
    entries are skipped. A result of 0 does not distinguish an empty
    directory from one that could not be read.

    Args:
        path: The directory to measure.

    Returns:
        Total byte count of the files found.
    """
    return _directory_size(Path(path).resolve())


def _directory_size(path: Path) -> int:
    size = 0
    try:
        for entry in path.iterdir():
            if entry.is_dir():
                size += _directory_size(entry)
            elif entry.is_file():
                size += entry.stat().st_size
    except OSError as e:
        logForDebugging(f"Size walk stopped at {path}: {e}")
    return size


def format_byte_count(num_bytes: int | float) -> str:
    """Format a byte count with 1024-based units.

    Examples:
        >>> format_byte_count(0)
        '0 Bytes'
        >>> format_byte_count(1536)
        '1.50 KB'
    """
    if num_bytes == 0:
        return "0 Bytes"

    value = float(num_bytes)
    unit_index = 0
    while value >= 1024 and unit_index < len(BYTE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.2f} {BYTE_UNITS[unit_index]}"


def new_session_id() -> str:
    """Return a random 16 character hex token for naming a session."""
    return secrets.token_hex(8)


def session_context_path(contexts_dir: str | Path, session_id: str) -> Path:
    """Path of the per-session copy of the base context."""
    return Path(contexts_dir) / f"session-{session_id}"


def session_screenshot_path(screenshots_dir: str | Path, session_id: str) -> Path:
    return Path(screenshots_dir) / f"session-{session_id}.png"
