"""Conference deadline aggregation package bootstrap."""

from .settings import DuplicatePolicy, Settings, SourceMode, get_settings, reset_settings_cache  # noqa: F401

__all__ = [
    "DuplicatePolicy",
    "Settings",
    "SourceMode",
    "get_settings",
    "reset_settings_cache",
]
