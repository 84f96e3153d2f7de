"""Access to the `[custom]` settings of the sharing domain configuration."""

from protean.utils.globals import current_domain

_DEFAULTS = {
    "SCHEDULED_WINDOW_HOURS": 24,
    "CONTENT_PREVIEW_LENGTH": 200,
    "DELIVERY_TIMEOUT_SECONDS": 5,
}


def setting(name: str):
    """Return a custom setting, falling back to the built-in default."""
    custom = current_domain.config.get("custom") or {}
    return custom.get(name, _DEFAULTS[name])
