"""
Pure rules that turn Factbook free text into short display values.

Each rule takes the raw field text and returns a display string; none of them
raise on odd input.
"""

from __future__ import annotations

import html
import re
from typing import Optional

NOT_AVAILABLE = "Not Available"
POSITION_VACANT = "Position Vacant/Acting"

_TAG_RE = re.compile(r"<[^>]+>")
_PERCENT_TAIL_RE = re.compile(r"\s*\d+(?:\.\d+)?\s*%.*$")
_TITLE_RE = re.compile(r"^\s*(?:President|Prime Minister|Chief of State|Head of Government)\s+", re.IGNORECASE)
_SINCE_RE = re.compile(r"\s*\(since\b.*$", re.IGNORECASE | re.DOTALL)
_FULL_DATE_RE = re.compile(r"\b\d{1,2}\s+[A-Za-z]+\s+\d{4}\b")
_YEAR_RE = re.compile(r"\b\d{4}\b")


def clean_markup(text: Optional[str]) -> str:
    """Drop HTML tags, unescape entities and collapse whitespace."""
    if not text:
        return ""
    text = _TAG_RE.sub(" ", text)
    text = html.unescape(text)
    return " ".join(text.split())


def parse_religion(text: Optional[str]) -> str:
    """
    Dominant religion: the first comma-separated item without its share.

    >>> parse_religion("Roman Catholic 47.8%, Muslim 4.4%")
    'Roman Catholic'
    """
    first = clean_markup(text).split(",")[0]
    first = _PERCENT_TAIL_RE.sub("", first)
    return first.strip(" \t;:.-") or NOT_AVAILABLE


def parse_head_of_state(text: Optional[str]) -> str:
    """
    Officeholder name from a ``chief of state`` entry.

    >>> parse_head_of_state("President Emmanuel MACRON (since 14 May 2017)")
    'Emmanuel MACRON'
    """
    value = clean_markup(text)
    value = _TITLE_RE.sub("", value)
    value = _SINCE_RE.sub("", value).strip(" ;,")
    lowered = value.lower()
    if "vacant" in lowered or "acting" in lowered:
        return POSITION_VACANT
    return value or NOT_AVAILABLE


def parse_independence(text: Optional[str]) -> str:
    """Full date if present, else a bare year, else the text before the first parenthesis."""
    value = clean_markup(text)
    match = _FULL_DATE_RE.search(value)
    if match:
        return match.group(0)
    match = _YEAR_RE.search(value)
    if match:
        return match.group(0)
    return value.split("(")[0].strip() or NOT_AVAILABLE
