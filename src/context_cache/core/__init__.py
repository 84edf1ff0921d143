"""Context cache core components.

The lifecycle wrapper lives in ``context_cache.core.lifecycle`` and is
imported from there; it depends on the models package, which depends on
this one.
"""

from context_cache.core.browser import launch_browser, launch_persistent_context
from context_cache.core.config import Settings, load_settings
from context_cache.core.errors import ContextCacheError, ContextCopyError, LifecycleError
from context_cache.core.store import (
    copy_context_tree,
    ensure_directory,
    format_byte_count,
    measure_tree_size,
    new_session_id,
    session_context_path,
    session_screenshot_path,
)

__all__ = [
    "launch_browser",
    "launch_persistent_context",
    "Settings",
    "load_settings",
    "ContextCacheError",
    "ContextCopyError",
    "LifecycleError",
    "copy_context_tree",
    "ensure_directory",
    "format_byte_count",
    "measure_tree_size",
    "new_session_id",
    "session_context_path",
    "session_screenshot_path",
]
