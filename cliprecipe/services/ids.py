# cliprecipe/services/ids.py
from __future__ import annotations

import hashlib
from typing import Literal, Optional
from urllib.parse import urlsplit

Platform = Literal["youtube", "tiktok"]

_YOUTUBE_HOSTS = ("youtube.com", "youtu.be")
_TIKTOK_HOSTS = ("tiktok.com",)


def derive_recipe_id(source_link: str) -> str:
    """Return the SHA-256 hex digest of the exact link bytes.

    No normalisation is applied: links that differ in any character
    (case, trailing slash, query order) produce different ids.
    """
    return hashlib.sha256(source_link.encode("utf-8")).hexdigest()


def link_hostname(url: str) -> Optional[str]:
    """Hostname of an absolute URL, or None when the link is not well formed."""
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return None
    if not parts.scheme or not hostname:
        return None
    return hostname


def detect_platform(url: str) -> Optional[Platform]:
    hostname = link_hostname(url)
    if hostname is None:
        return None
    if any(host in hostname for host in _YOUTUBE_HOSTS):
        return "youtube"
    if any(host in hostname for host in _TIKTOK_HOSTS):
        return "tiktok"
    return None
