"""Context cache page tools."""

from context_cache.tools.inspect import detect_global, read_page_title
from context_cache.tools.screenshot import capture_screenshot

__all__ = [
    "capture_screenshot",
    "detect_global",
    "read_page_title",
]
