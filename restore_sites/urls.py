"""URL cleanup helpers for sites entered by hand."""

from __future__ import annotations

from urllib.parse import urlparse


def is_valid_url(url: str) -> bool:
    """Only ``http://`` and ``https://`` URLs are accepted."""
    return url.startswith(("http://", "https://"))


def clean_url(url: str) -> str | None:
    """Trim *url* and add ``https://`` to bare domains.

    Returns ``None`` for empty input and for anything that is neither a
    web URL nor looks like a domain.
    """
    trimmed = url.strip()
    if not trimmed:
        return None
    if not is_valid_url(trimmed) and (trimmed.startswith("www.") or "." in trimmed):
        return f"https://{trimmed}"
    return trimmed if is_valid_url(trimmed) else None


def extract_domain(url: str) -> str:
    """Host part of *url*, for display."""
    host = urlparse(url).hostname
    if host:
        return host
    bare = url
    for prefix in ("https://", "http://", "www."):
        bare = bare.removeprefix(prefix)
    return bare.split("/", 1)[0] or url
