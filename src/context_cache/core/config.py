"""Run settings for context cache.

Defaults can be overridden with ``CONTEXT_CACHE_*`` environment variables,
and explicit keyword overrides (usually from CLI flags) win over both.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TARGET_URL = "https://sql.js.org/examples/GUI/"
ENV_PREFIX = "CONTEXT_CACHE_"


class Settings(BaseModel):
    """Settings for warming and reusing persistent contexts.

    Attributes:
        target_url: Page navigated to when warming and reusing a context.
        contexts_dir: Directory holding the base and session contexts.
        screenshots_dir: Directory for per-session screenshots.
        base_context_name: Name of the base context directory.
        headless: Launch browsers without a visible window.
        base_navigation_timeout_ms: Timeout for the network-idle navigation
            that warms the base context.
        session_navigation_timeout_ms: Timeout for the DOM-content-loaded
            navigation on a copied context.
        cache_grace_ms: Wait after warming navigation so deferred asset
            downloads can land in the cache.
        wait_for_assets: Wait for a large asset response after the grace
            interval.
        assets_timeout_ms: Upper bound on the asset wait.
        settle_ms: Wait after opening a session page before inspecting it.
        hold_open_ms: How long the session page stays open before closing.
    """

    model_config = ConfigDict(frozen=True)

    target_url: str = DEFAULT_TARGET_URL
    contexts_dir: Path = Path("contexts")
    screenshots_dir: Path = Path("screenshots")
    base_context_name: str = "base-context"
    headless: bool = False
    base_navigation_timeout_ms: float = Field(default=60000, gt=0)
    session_navigation_timeout_ms: float = Field(default=30000, gt=0)
    cache_grace_ms: float = Field(default=5000, ge=0)
    wait_for_assets: bool = True
    assets_timeout_ms: float = Field(default=30000, gt=0)
    settle_ms: float = Field(default=2000, ge=0)
    hold_open_ms: float = Field(default=5000, ge=0)

    @property
    def base_context_path(self) -> Path:
        """Resolved path of the shared base context."""
        return (self.contexts_dir / self.base_context_name).resolve()


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for field_name in Settings.model_fields:
        key = ENV_PREFIX + field_name.upper()
        if key in environ:
            overrides[field_name] = environ[key]
    return overrides


def load_settings(
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> Settings:
    """Build Settings from the environment plus explicit overrides.

    Args:
        environ: Environment mapping to read. Defaults to ``os.environ``.
        **overrides: Field values that take precedence over the environment.
            ``None`` values are ignored so unset CLI flags fall through.

    Returns:
        A validated Settings instance.

    Raises:
        pydantic.ValidationError: If a value cannot be coerced to its field type.
    """
    values = _env_overrides(os.environ if environ is None else environ)
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
