from __future__ import annotations

import re

WHITESPACE_PATTERN = re.compile(r"\s+")
DISALLOWED_CHARS_PATTERN = re.compile(r"[^\w\s.,!?;:()\-]")


def normalize_text(raw: str) -> str:
    """Collapse whitespace, drop characters outside the allow-list and trim.

    The allow-list is word characters, whitespace and ``. , ! ? ; : ( ) -``.
    Characters are removed before whitespace is collapsed so that a dropped
    symbol between two spaces never leaves a double space behind.
    """
    if not raw:
        return ""
    kept = DISALLOWED_CHARS_PATTERN.sub("", raw)
    return WHITESPACE_PATTERN.sub(" ", kept).strip()
