"""Service layer."""

from rxivcal.services.biorxiv_service import BiorxivService, fetch_papers_by_month
from rxivcal.services.calendar_service import build_grid, heat_tier
from rxivcal.services.summary_service import SummarizationError, SummaryService

__all__ = [
    "BiorxivService",
    "SummarizationError",
    "SummaryService",
    "build_grid",
    "fetch_papers_by_month",
    "heat_tier",
]
