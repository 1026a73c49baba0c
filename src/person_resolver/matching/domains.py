"""
Domain helpers shared by the relevance and feature scorers.
"""

from __future__ import annotations

from urllib.parse import urlparse


def domain_from_url(url: str) -> str:
    """
    Return the lower-cased host of ``url`` without ``www.`` or port.

    Invalid or host-less URLs yield ``""``, which is still a usable
    (lowest-trust) grouping key.
    """
    if not url or not isinstance(url, str):
        return ""
    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname or ""
    except ValueError:
        return ""

    host = host.lower().strip(".")
    if host.startswith("www."):
        host = host[4:]
    return host


def domain_matches(domain: str, pattern: str) -> bool:
    """
    Suffix-aware domain matching.

    ``.edu`` matches any domain ending in ``.edu``; ``github.com`` matches
    ``github.com`` and ``gist.github.com`` but not ``notgithub.com``.
    """
    domain = (domain or "").lower().strip()
    pattern = (pattern or "").lower().strip()
    if not domain or not pattern:
        return False
    if pattern.startswith("."):
        return domain.endswith(pattern)
    return domain == pattern or domain.endswith("." + pattern)
