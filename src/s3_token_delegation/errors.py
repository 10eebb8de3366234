"""Exceptions shared across the plugin."""

from __future__ import annotations


class InvalidConfigError(ValueError):
    """Raised when the filesystem configuration cannot be used as given."""
