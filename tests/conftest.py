"""Shared fixtures and fakes."""

import httpx
import pytest

from rxivcal.config import Settings
from rxivcal.models.paper import Paper
from rxivcal.services.summary_service import SummarizationError


def record(i: int, day: str = "2024-03-05", **overrides) -> dict:
    """A raw ``collection`` record as the bioRxiv API returns it."""
    data = {
        "doi": f"10.1101/2024.03.{i:05d}",
        "title": f"Paper {i}",
        "authors": "Smith, J.; Doe, A.",
        "author_corresponding": "Jane Smith",
        "author_corresponding_institution": "Cold Spring Harbor",
        "date": day,
        "date_published": "",
        "abstract": f"Abstract number {i}.",
        "category": "neuroscience",
        "version": "1",
        "type": "new results",
        "license": "cc_by",
        "server": "biorxiv",
    }
    data.update(overrides)
    return data


def make_paper(i: int = 1, day: str = "2024-03-05", **overrides) -> Paper:
    return Paper.from_api(record(i, day, **overrides))


def page_response(records: list, total) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "messages": [{"status": "ok", "cursor": 0, "count": len(records), "total": total}],
            "collection": records,
        },
    )


def cursor_of(request: httpx.Request) -> int:
    # .../{start}/{end}/{cursor}/json
    return int(request.url.path.rstrip("/").split("/")[-2])


class FakeFetcher:
    """Stands in for BiorxivService; records requested months."""

    def __init__(self, papers=None):
        self.papers = list(papers or [])
        self.calls: list[tuple[int, int]] = []

    async def fetch_papers_by_month(self, year, month):
        self.calls.append((year, month))
        return [p for p in self.papers if p.date.startswith(f"{year:04d}-{month + 1:02d}")]


class FakeSummarizer:
    """Stands in for SummaryService; can be told to fail."""

    def __init__(self, text="- first point\n* second point\n• third point", fail=False):
        self.text = text
        self.fail = fail
        self.calls: list[str] = []
        self.api_key = None
        self.model = None

    def configure(self, api_key, model=None):
        self.api_key = api_key
        self.model = model

    async def summarize(self, abstract):
        self.calls.append(abstract)
        if self.fail:
            raise SummarizationError("Failed to generate summary.")
        return self.text

    async def explain_jargon(self, text):
        self.calls.append(text)
        if self.fail:
            raise SummarizationError("Failed to explain terms.")
        return "- Term: meaning"


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Keep the Settings singleton and API-key env vars out of other tests."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    Settings.reset()
    yield
    Settings.reset()
