"""Application state, templates, and the calendar session."""

import logging
import os
from datetime import date
from typing import Optional

from fastapi.templating import Jinja2Templates

from rxivcal import __version__
from rxivcal.config import Settings
from rxivcal.gui.helpers import filter_papers, parse_authors
from rxivcal.models.paper import CalendarDay, MonthQuery, Paper
from rxivcal.models.summary import SummaryBook, SummaryState
from rxivcal.services.biorxiv_service import BiorxivService
from rxivcal.services.calendar_service import (
    WEEKDAYS,
    build_grid,
    find_day,
    month_weeks,
    tier_counts,
)
from rxivcal.services.summary_service import SummarizationError, SummaryService
from rxivcal.utils.text import clean_abstract, format_long_date

logger = logging.getLogger(__name__)

SUMMARY_FAILED = "Failed to summarize."
EXPLAIN_FAILED = "Failed to explain terms."


# ============================================================================
# Calendar Session
# ============================================================================


class CalendarSession:
    """All UI state for one browsing session.

    Derived values (``filtered``, ``days``) are recomputed explicitly by
    :meth:`recompute` after every mutation: month change, search change
    and fetch completion.

    Each :meth:`load_month` call is tagged with a generation number; a
    fetch that resolves after the user navigated to another month is
    discarded instead of overwriting the newer state.
    """

    def __init__(self, query: Optional[MonthQuery] = None):
        self.query: MonthQuery = query or MonthQuery.today()
        self.papers: list[Paper] = []
        self.search: str = ""
        self.filtered: list[Paper] = []
        self.days: list[CalendarDay] = []
        self.selected: Optional[date] = None
        self.summaries = SummaryBook()
        self.explanations = SummaryBook()
        self.loading: bool = False
        self.loaded_query: Optional[MonthQuery] = None
        self._generation = 0
        self.recompute()

    # ── Derived state ─────────────────────────────────────────────────

    def recompute(self, today: Optional[date] = None) -> None:
        """Re-derive the filtered list and the 42-cell grid."""
        self.filtered = filter_papers(self.papers, self.search)
        self.days = build_grid(self.query.year, self.query.month, self.filtered, today=today)

    @property
    def weeks(self) -> list[list[CalendarDay]]:
        return month_weeks(self.days)

    @property
    def tiers(self) -> dict[str, int]:
        return tier_counts(self.days)

    @property
    def needs_fetch(self) -> bool:
        return not self.loading and self.loaded_query != self.query

    @property
    def selected_day(self) -> Optional[CalendarDay]:
        if self.selected is None:
            return None
        return find_day(self.days, self.selected)

    # ── Mutations ─────────────────────────────────────────────────────

    def set_month(self, query: MonthQuery) -> bool:
        """Switch the displayed month.  Returns True if it changed."""
        if query == self.query:
            return False
        self.query = query
        self.papers = []
        self.loading = False
        self.close_day()
        self.recompute()
        return True

    def set_search(self, text: Optional[str]) -> None:
        self.search = (text or "").strip()
        self.recompute()

    def select_day(self, day: date) -> CalendarDay:
        if self.selected != day:
            self.summaries.clear()
            self.explanations.clear()
        self.selected = day
        return find_day(self.days, day)

    def close_day(self) -> None:
        self.selected = None
        self.summaries.clear()
        self.explanations.clear()

    def find_paper(self, doi: str) -> Optional[Paper]:
        return next((p for p in self.papers if p.doi == doi), None)

    # ── Async operations ──────────────────────────────────────────────

    async def load_month(
        self, fetcher: BiorxivService, query: Optional[MonthQuery] = None
    ) -> bool:
        """Fetch *query* (default: the displayed month) and install the result.

        Returns:
            True if the result was applied, False if it went stale.
        """
        query = query or self.query
        self._generation += 1
        generation = self._generation
        self.loading = True

        try:
            papers = await fetcher.fetch_papers_by_month(query.year, query.month)
        except Exception:
            if generation == self._generation:
                self.loading = False
            raise

        if generation != self._generation or query != self.query:
            logger.info("Discarding stale fetch for %s", query.key)
            return False

        self.papers = papers
        self.loaded_query = query
        self.loading = False
        self.recompute()
        return True

    async def summarize(self, doi: str, service: SummaryService) -> SummaryState:
        """Request a summary for *doi* unless one is loading or ready."""
        return await self._generate(
            self.summaries, doi, service.summarize, lambda p: p.abstract, SUMMARY_FAILED
        )

    async def explain(self, doi: str, service: SummaryService) -> SummaryState:
        """Request a jargon explanation for *doi*'s abstract."""
        return await self._generate(
            self.explanations, doi, service.explain_jargon, lambda p: p.abstract, EXPLAIN_FAILED
        )

    async def _generate(self, book, doi, call, source, failure) -> SummaryState:
        paper = self.find_paper(doi)
        if paper is None or not book.should_request(doi):
            return book.get(doi)

        book.mark_loading(doi)
        try:
            text = await call(source(paper))
        except SummarizationError as e:
            logger.warning("Generation failed for %s: %s", doi, e)
            if doi in book:
                book.mark_failed(doi, failure)
            return book.get(doi)

        # Panel may have been closed while the request was in flight
        if doi in book:
            book.mark_ready(doi, text)
        return book.get(doi)


# ============================================================================
# Global State
# ============================================================================


class AppState:
    """Mutable singleton holding runtime services and the session."""

    settings: Settings
    fetcher: BiorxivService
    summarizer: SummaryService
    session: CalendarSession


state = AppState()


def init_state(settings: Optional[Settings] = None) -> AppState:
    """(Re)build services and a fresh session from *settings*."""
    state.settings = settings or Settings.load()
    state.fetcher = BiorxivService(
        base_url=state.settings.api_base,
        server=state.settings.server,
        max_papers=state.settings.max_papers,
        timeout=state.settings.timeout,
    )
    state.summarizer = SummaryService(
        api_key=state.settings.gemini_api_key,
        model=state.settings.gemini_model,
    )
    state.session = CalendarSession()
    return state


# ============================================================================
# Templates & Filters
# ============================================================================

base_dir = os.path.dirname(__file__)
templates = Jinja2Templates(directory=os.path.join(base_dir, "templates"))

templates.env.filters["clean_abstract"] = clean_abstract
templates.env.filters["long_date"] = format_long_date
templates.env.filters["authors_list"] = parse_authors
templates.env.globals["WEEKDAYS"] = WEEKDAYS
templates.env.globals["version"] = __version__

# Tailwind classes per heat tier (count badge)
TIER_CLASSES = {
    "high": "bg-emerald-600 text-white",
    "medium": "bg-emerald-400 text-white",
    "low": "bg-emerald-200 text-emerald-800",
    "none": "bg-slate-100 text-slate-600",
}
templates.env.filters["tier_class"] = lambda tier: TIER_CLASSES.get(tier, TIER_CLASSES["none"])
