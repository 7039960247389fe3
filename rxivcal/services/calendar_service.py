"""Calendar grid derivation and heatmap tiers.

The grid is always 6 rows × 7 columns, Sunday first.  Only cells of
the displayed month carry papers; filler cells from the neighbouring
months are always empty.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional

from rxivcal.models.paper import HEAT_TIERS, CalendarDay, MonthQuery, Paper, heat_tier

__all__ = [
    "GRID_SIZE",
    "HEAT_TIERS",
    "WEEKDAYS",
    "build_grid",
    "find_day",
    "heat_tier",
    "month_weeks",
    "sunday_weekday",
    "tier_counts",
]

GRID_ROWS = 6
GRID_COLS = 7
GRID_SIZE = GRID_ROWS * GRID_COLS
WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def sunday_weekday(day: date) -> int:
    """Weekday index with 0 = Sunday … 6 = Saturday."""
    return (day.weekday() + 1) % 7


def build_grid(
    year: int,
    month: int,
    papers: Iterable[Paper],
    today: Optional[date] = None,
) -> list[CalendarDay]:
    """Build the 42-cell grid for (year, zero-based month).

    Args:
        year: Displayed year
        month: Displayed month, zero-based
        papers: Fetched (and possibly filtered) papers
        today: Override for the real current date (tests)

    Returns:
        Exactly 42 :class:`CalendarDay` cells in date order.
    """
    query = MonthQuery(year, month)
    today = today or date.today()
    first = query.start_date

    by_day: dict[str, list[Paper]] = defaultdict(list)
    for paper in papers:
        by_day[paper.date].append(paper)

    days: list[CalendarDay] = []

    # Previous month fill
    offset = sunday_weekday(first)
    for i in range(offset, 0, -1):
        days.append(CalendarDay(first - timedelta(days=i), False, False, ()))

    # Current month
    for n in range(query.days_in_month):
        d = first + timedelta(days=n)
        days.append(
            CalendarDay(
                date=d,
                is_current_month=True,
                is_today=d == today,
                papers=tuple(by_day.get(d.isoformat(), ())),
            )
        )

    # Next month fill
    after = query.end_date
    for i in range(1, GRID_SIZE - len(days) + 1):
        days.append(CalendarDay(after + timedelta(days=i), False, False, ()))

    return days


def month_weeks(days: list[CalendarDay]) -> list[list[CalendarDay]]:
    """Split a grid into rows of seven."""
    return [days[i:i + GRID_COLS] for i in range(0, len(days), GRID_COLS)]


def find_day(days: list[CalendarDay], target: date) -> CalendarDay:
    """Return the cell for *target*, or an empty current-month cell if absent."""
    for day in days:
        if day.date == target:
            return day
    return CalendarDay(target, True, False, ())


def tier_counts(days: list[CalendarDay]) -> dict[str, int]:
    """Number of current-month cells per heat tier (for the legend)."""
    counts = {tier: 0 for tier in HEAT_TIERS}
    for day in days:
        if day.is_current_month:
            counts[day.tier] += 1
    return counts
