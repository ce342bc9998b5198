"""Field cleanup helpers for noisy OCR text."""

from __future__ import annotations

import re

from .tables import TEAMS_BY_LENGTH

MIN_POSITION = 1
MAX_POSITION = 30

# Characters OCR commonly returns in place of digits on the results font.
_POSITION_SUBSTITUTIONS = str.maketrans(
    {
        "o": "0",
        "O": "0",
        "l": "1",
        "I": "1",
        "|": "1",
        "é": "6",
        "®": "9",
        "@": "0",
    }
)
_NON_DIGIT_RE = re.compile(r"[^0-9]")

_FLAG_RE = re.compile("[\U0001F1E6-\U0001F1FF]")
_PICTOGRAPH_RE = re.compile("[\U0001F300-\U0001FAFF]")
_MARKS_RE = re.compile("[™©®]")
_TRAILING_DIGITS_RE = re.compile(r"[0-9]+$")
_DISALLOWED_NAME_RE = re.compile(r"[^a-zA-ZÀ-ÿ\s'.,-]")
_WHITESPACE_RE = re.compile(r"\s+")
_CAMEL_CASE_RE = re.compile(r"([a-z])([A-Z])")

_NON_TEAM_CHARS_RE = re.compile(r"[^A-Z ]")


def normalize_position(raw: str) -> str:
    """Map an OCR'd position to "1".."30", or "" when it is not a valid position."""
    digits = _NON_DIGIT_RE.sub("", raw.translate(_POSITION_SUBSTITUTIONS))
    if not digits:
        return ""
    value = int(digits)
    if MIN_POSITION <= value <= MAX_POSITION:
        return str(value)
    return ""


def clean_driver_name(raw: str) -> str:
    """Strip glyphs, marks and trailing numbers, then split glued words."""
    name = _FLAG_RE.sub("", raw)
    name = _PICTOGRAPH_RE.sub("", name)
    name = _MARKS_RE.sub("", name)
    name = _TRAILING_DIGITS_RE.sub("", name)
    name = _DISALLOWED_NAME_RE.sub(" ", name)
    name = _WHITESPACE_RE.sub(" ", name).strip()
    # "JohnDoe" -> "John Doe"
    return _CAMEL_CASE_RE.sub(r"\1 \2", name)


def _normalize_team_text(raw: str) -> str:
    upper = _NON_TEAM_CHARS_RE.sub(" ", raw.upper())
    return _WHITESPACE_RE.sub(" ", upper).strip()


def match_team(raw: str) -> str:
    """Return the canonical roster team contained in ``raw``.

    Candidates are tried longest first, first with spaces squeezed out of
    both sides and then as a plain substring. Unmatched text comes back
    stripped but otherwise untouched.
    """
    normalized = _normalize_team_text(raw)
    compressed = normalized.replace(" ", "")
    for team in TEAMS_BY_LENGTH:
        if team.replace(" ", "") in compressed:
            return team
    for team in TEAMS_BY_LENGTH:
        if team in normalized:
            return team
    return raw.strip()
