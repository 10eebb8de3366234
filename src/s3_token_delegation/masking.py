"""Log-safe renderings of credential material."""

from __future__ import annotations


def mask_access_key(access_key: str | None) -> str:
    """Return a log-safe form of an access key id."""
    if not access_key:
        return "<unset>"
    return f"{access_key[:4]}***"
