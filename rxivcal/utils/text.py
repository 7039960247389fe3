"""Text helpers for DOIs, dates and summary bullets."""

import html
import re
from datetime import date, datetime
from typing import Optional

# Leading bullet marker in LLM output: "-", "*" or "•"
BULLET_RE = re.compile(r"^[-*•]\s*")


def normalize_doi(doi: str) -> str:
    """Strip ``https://doi.org/`` style prefixes and surrounding whitespace.

    bioRxiv DOIs are already lowercase, so case is left untouched.
    """
    doi = doi.strip()
    for prefix in (
        "https://doi.org/",
        "http://doi.org/",
        "https://dx.doi.org/",
        "http://dx.doi.org/",
        "doi:",
    ):
        if doi.lower().startswith(prefix):
            doi = doi[len(prefix):]
            break
    return doi.strip()


def split_bullets(text: Optional[str]) -> list[str]:
    """Turn newline-delimited LLM output into display lines.

    Each line loses a leading ``-``/``*``/``•`` marker; blank lines are
    dropped.

    >>> split_bullets("* one\\n\\n- two\\n• three")
    ['one', 'two', 'three']
    """
    if not text:
        return []
    lines = []
    for line in text.split("\n"):
        clean = BULLET_RE.sub("", line.strip()).strip()
        if clean:
            lines.append(clean)
    return lines


def parse_day(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Raises:
        ValueError: On any other format.
    """
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def format_long_date(day: date) -> str:
    """Format a date as ``Tuesday, March 5``."""
    return f"{day.strftime('%A, %B')} {day.day}"


def clean_abstract(text: Optional[str]) -> str:
    """Unescape HTML entities and collapse whitespace in an abstract."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", html.unescape(text)).strip()
