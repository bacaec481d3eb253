from __future__ import annotations

from urllib.parse import urlsplit


def normalize_base_url(url: str) -> str:
    """Validate an ``http(s)`` server address and strip trailing slashes.

    Raises:
        ValueError: If the address has no host, a non-HTTP scheme, or carries
            a query string or fragment.
    """
    text = str(url or "").strip()
    if not text:
        raise ValueError("Server address is required.")
    parts = urlsplit(text)
    if parts.scheme.lower() not in ("http", "https"):
        raise ValueError(f"Server address must start with http:// or https://: {text}")
    if not parts.hostname:
        raise ValueError(f"Server address has no host: {text}")
    if parts.query or parts.fragment:
        raise ValueError(f"Server address must not contain a query or fragment: {text}")
    return text.rstrip("/")
