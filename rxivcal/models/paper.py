"""Paper, month and calendar-cell data models."""

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

# Every month in this range can be drawn with its neighbouring-month filler
MIN_YEAR = 2
MAX_YEAR = 9998

HEAT_TIERS = ("none", "low", "medium", "high")


def heat_tier(count: int) -> str:
    """Classify a day's paper count.

    ``high`` > 10, ``medium`` 6 to 10, ``low`` 1 to 5, ``none`` 0.
    """
    if count > 10:
        return "high"
    if count > 5:
        return "medium"
    if count > 0:
        return "low"
    return "none"


@dataclass(frozen=True)
class Paper:
    """A bioRxiv/medRxiv preprint as returned by the details endpoint."""

    doi: str
    title: str = ""
    authors: str = ""
    author_corresponding: str = ""
    author_corresponding_institution: str = ""
    date: str = ""  # record date, YYYY-MM-DD
    date_published: str = ""
    abstract: str = ""
    category: str = ""
    version: str = ""
    type: str = ""
    license: str = ""
    server: str = ""

    @classmethod
    def from_api(cls, record: dict[str, Any]) -> "Paper":
        """Build a Paper from one ``collection`` record of the API."""

        def text(key: str) -> str:
            value = record.get(key)
            return "" if value is None else str(value)

        return cls(
            doi=text("doi"),
            title=text("title"),
            authors=text("authors"),
            author_corresponding=text("author_corresponding"),
            author_corresponding_institution=text("author_corresponding_institution"),
            date=text("date"),
            date_published=text("date_published"),
            abstract=text("abstract"),
            category=text("category"),
            version=text("version"),
            type=text("type"),
            license=text("license"),
            server=text("server"),
        )

    @property
    def doi_url(self) -> str:
        return f"https://doi.org/{self.doi}"


@dataclass(frozen=True)
class MonthQuery:
    """A displayed month: calendar year plus **zero-based** month (0 = January)."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 0 <= self.month <= 11:
            raise ValueError(f"month must be in 0..11, got {self.month}")
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError(f"year must be in {MIN_YEAR}..{MAX_YEAR}, got {self.year}")

    # ── Derived dates ─────────────────────────────────────────────────

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month + 1)[1]

    @property
    def start_date(self) -> date:
        return date(self.year, self.month + 1, 1)

    @property
    def end_date(self) -> date:
        return date(self.year, self.month + 1, self.days_in_month)

    @property
    def start_str(self) -> str:
        return self.start_date.isoformat()

    @property
    def end_str(self) -> str:
        return self.end_date.isoformat()

    @property
    def label(self) -> str:
        """Human label, e.g. ``March 2024``."""
        return f"{calendar.month_name[self.month + 1]} {self.year}"

    @property
    def key(self) -> str:
        """1-based ``YYYY-MM`` form used in URLs and on the command line."""
        return f"{self.year:04d}-{self.month + 1:02d}"

    # ── Navigation / construction ─────────────────────────────────────

    def shift(self, delta: int) -> "MonthQuery":
        """Return the month *delta* months away (negative = earlier)."""
        index = self.year * 12 + self.month + delta
        return MonthQuery(index // 12, index % 12)

    @classmethod
    def today(cls, today: Optional[date] = None) -> "MonthQuery":
        today = today or date.today()
        return cls(today.year, today.month - 1)

    @classmethod
    def parse(cls, value: str) -> "MonthQuery":
        """Parse ``YYYY-MM`` (1-based month).

        Raises:
            ValueError: If *value* is not a valid ``YYYY-MM`` string.
        """
        parts = value.strip().split("-")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError(f"expected YYYY-MM, got {value!r}")
        return cls(int(parts[0]), int(parts[1]) - 1)


@dataclass(frozen=True)
class CalendarDay:
    """One cell of the 6x7 calendar grid (derived, never mutated)."""

    date: date
    is_current_month: bool
    is_today: bool
    papers: tuple[Paper, ...] = field(default_factory=tuple)

    @property
    def key(self) -> str:
        return self.date.isoformat()

    @property
    def count(self) -> int:
        return len(self.papers)

    @property
    def tier(self) -> str:
        return heat_tier(len(self.papers))
