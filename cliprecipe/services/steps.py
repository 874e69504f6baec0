from __future__ import annotations

import re
from typing import Callable, Optional

from cliprecipe.app.domain.models import StepEntry
from cliprecipe.services.vocabulary import (
    DURATION_UNITS,
    MAX_STEPS,
    ORDINAL_WORDS,
    alternation,
)

MIN_LINE_CHARS = 10
FALLBACK_MIN_CHARS = 20
FALLBACK_EXCLUDED = "ingredient"

STEP_WORD_PATTERN = re.compile(r"^step(?:\s*\d+)?\s*[:\-]?(?:\s|$)", re.IGNORECASE)
NUMBERED_PATTERN = re.compile(r"^\d+[.)]")
ORDINAL_PATTERN = re.compile(rf"^({alternation(ORDINAL_WORDS)})[:\-]?", re.IGNORECASE)
DURATION_PATTERN = re.compile(
    rf"(\d+)\s*({alternation(list(DURATION_UNITS))})\b",
    re.IGNORECASE,
)


def match_step_word(line: str) -> bool:
    """``Step 3: ...``, ``step - ...``."""
    return STEP_WORD_PATTERN.match(line) is not None


def match_numbered(line: str) -> bool:
    """``1. ...`` or ``2) ...``."""
    return NUMBERED_PATTERN.match(line) is not None


def match_ordinal(line: str) -> bool:
    return ORDINAL_PATTERN.match(line) is not None


def match_long_line(line: str) -> bool:
    return len(line) > FALLBACK_MIN_CHARS and FALLBACK_EXCLUDED not in line


STEP_MATCHERS: tuple[Callable[[str], bool], ...] = (
    match_step_word,
    match_ordinal,
    match_numbered,
    match_long_line,
)


def is_step_line(line: str) -> bool:
    return any(matcher(line) for matcher in STEP_MATCHERS)


def parse_duration_seconds(line: str) -> Optional[int]:
    """First ``<int> <unit>`` expression in ``line`` converted to seconds."""
    match = DURATION_PATTERN.search(line)
    if not match:
        return None
    value = int(match.group(1))
    return value * DURATION_UNITS[match.group(2).lower()]


def extract_steps(text: str, limit: int = MAX_STEPS) -> list[StepEntry]:
    """Collect step lines in order; indices are positional, not parsed."""
    steps: list[StepEntry] = []

    for raw_line in text.split("\n"):
        if len(steps) >= limit:
            break

        line = raw_line.strip()
        if len(line) < MIN_LINE_CHARS:
            continue
        if not is_step_line(line):
            continue

        steps.append(
            StepEntry(
                index=len(steps) + 1,
                text=line,
                duration_sec=parse_duration_seconds(line),
            )
        )

    return steps
