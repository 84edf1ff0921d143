"""Context cache data models."""

from context_cache.models.context import (
    ContextInfo,
    NavigationTiming,
    SessionContext,
    WarmupResult,
)

__all__ = [
    "ContextInfo",
    "NavigationTiming",
    "SessionContext",
    "WarmupResult",
]
