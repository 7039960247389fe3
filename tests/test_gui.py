"""FastAPI routes rendered through TestClient (lifespan bypassed)."""

import pytest
import yaml
from fastapi.testclient import TestClient

from rxivcal.config import Settings
from rxivcal.gui.app import app
from rxivcal.gui.state import CalendarSession, init_state, state
from rxivcal.models.paper import MAX_YEAR, MIN_YEAR, MonthQuery
from tests.conftest import FakeFetcher, FakeSummarizer, make_paper

PAPERS = [
    make_paper(1, "2024-03-05", title="Zebrafish fin regeneration"),
    make_paper(2, "2024-03-05", title="Mouse cortex mapping"),
    make_paper(3, "2024-03-20", title="Yeast CRISPR screen"),
    make_paper(4, "2024-04-02", title="April preprint"),
]


@pytest.fixture
def client(tmp_path):
    init_state(Settings(metadata_dir=tmp_path))
    state.fetcher = FakeFetcher(PAPERS)
    state.summarizer = FakeSummarizer()
    state.session = CalendarSession(MonthQuery(2024, 2))
    return TestClient(app)


def test_index_renders_and_fetches_in_background(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "March 2024" in response.text
    assert 'data-date="2024-03-05"' in response.text
    # background task ran after the response
    assert state.fetcher.calls == [(2024, 2)]
    assert state.session.loaded_query == MonthQuery(2024, 2)


def test_calendar_partial_shows_counts_after_load(client):
    client.get("/")
    response = client.get("/calendar")

    assert "2 Papers" in response.text
    assert 'data-tier="low"' in response.text
    assert response.headers["X-Paper-Count"] == "3"
    assert state.fetcher.calls == [(2024, 2)]


def test_calendar_month_param(client):
    response = client.get("/calendar", params={"month": "2024-04"})

    assert "April 2024" in response.text
    assert state.session.query == MonthQuery(2024, 3)
    assert state.fetcher.calls == [(2024, 3)]


def test_calendar_bad_month(client):
    response = client.get("/calendar", params={"month": "2024-13"})

    assert response.status_code == 400
    assert "Invalid month" in response.text


def test_prev_and_next(client):
    assert "April 2024" in client.get("/calendar/next").text
    assert "March 2024" in client.get("/calendar/prev").text
    assert "February 2024" in client.get("/calendar/prev").text


def test_search_filters_grid(client):
    client.get("/")
    response = client.get("/search", params={"q": "zebrafish"})

    assert response.headers["X-Paper-Count"] == "1"
    assert "zebrafish" in response.text
    assert state.session.search == "zebrafish"


def test_status_triggers_month_loaded_when_idle(client):
    client.get("/")
    response = client.get("/calendar/status")

    assert response.headers["HX-Trigger"] == "monthLoaded"


def test_status_polls_while_loading(client):
    state.session.loading = True
    response = client.get("/calendar/status")

    assert "HX-Trigger" not in response.headers
    assert 'hx-trigger="every 1s"' in response.text


def test_day_panel_lists_papers(client):
    client.get("/")
    response = client.get("/day/2024-03-05")

    assert response.status_code == 200
    assert "Tuesday, March 5" in response.text
    assert "Zebrafish fin regeneration" in response.text
    assert "Mouse cortex mapping" in response.text
    assert "Generate" in response.text


def test_day_panel_empty_day(client):
    client.get("/")
    response = client.get("/day/2024-03-06")

    assert "No papers found for this date." in response.text


def test_day_panel_bad_date(client):
    assert client.get("/day/yesterday").status_code == 400


def test_summary_flow(client):
    client.get("/")
    client.get("/day/2024-03-05")
    doi = PAPERS[0].doi

    response = client.post("/papers/summary", data={"doi": doi})
    assert "<li>first point</li>" in response.text
    assert "<li>third point</li>" in response.text

    client.post("/papers/summary", data={"doi": doi})
    assert state.summarizer.calls == [PAPERS[0].abstract]


def test_summary_failure_shows_retry(client):
    client.get("/")
    state.summarizer.fail = True

    response = client.post("/papers/summary", data={"doi": PAPERS[0].doi})

    assert "Failed to summarize." in response.text
    assert "Retry" in response.text


def test_explain_flow(client):
    client.get("/")
    response = client.post("/papers/explain", data={"doi": PAPERS[2].doi})

    assert "<li>Term: meaning</li>" in response.text


def test_summary_unknown_doi(client):
    client.get("/")
    response = client.post("/papers/summary", data={"doi": "10.1101/nope"})

    assert "Paper not found" in response.text
    assert state.summarizer.calls == []


def test_close_day_clears_summaries(client):
    client.get("/")
    client.get("/day/2024-03-05")
    client.post("/papers/summary", data={"doi": PAPERS[0].doi})

    response = client.post("/day/close")

    assert response.text == ""
    assert state.session.selected is None
    assert len(state.session.summaries) == 0


def test_month_json(client):
    response = client.get("/api/month", params={"month": "2024-03", "q": "crispr"})
    data = response.json()

    assert data["month"] == "2024-03"
    assert data["total"] == 3
    assert data["matched"] == 1
    assert len(data["days"]) == 42
    hits = [d for d in data["days"] if d["count"]]
    assert [(d["date"], d["dois"]) for d in hits] == [("2024-03-20", [PAPERS[2].doi])]


def test_month_json_bad_month(client):
    assert client.get("/api/month", params={"month": "x"}).status_code == 400


def test_session_info(client):
    client.get("/")
    data = client.get("/api/session").json()

    assert data["month"] == "2024-03"
    assert data["papers"] == 3
    assert data["loading"] is False


def test_gemini_settings_update(client, tmp_path):
    assert client.get("/api/gemini").json() == {"configured": False, "model": "gemini-2.5-flash"}

    response = client.put("/api/gemini", json={"api_key": "secret", "model": "gemini-pro"})

    assert response.json() == {"configured": True, "model": "gemini-pro"}
    saved = yaml.safe_load((tmp_path / "gemini.yaml").read_text(encoding="utf-8"))
    assert saved == {"api_key": "secret", "model": "gemini-pro"}


def test_calendar_renders_tier_legend(client):
    client.get("/")
    response = client.get("/calendar")

    assert 'data-legend="low"' in response.text
    assert '<span class="tier-days">2 days</span>' in response.text
    assert '<span class="tier-days">0 days</span>' in response.text


def test_next_past_last_supported_month(client):
    state.session = CalendarSession(MonthQuery(MAX_YEAR, 11))

    response = client.get("/calendar/next")

    assert response.status_code == 400
    assert state.session.query == MonthQuery(MAX_YEAR, 11)


def test_prev_before_first_supported_month(client):
    state.session = CalendarSession(MonthQuery(MIN_YEAR, 0))

    assert client.get("/calendar/prev").status_code == 400


def test_last_supported_month_renders(client):
    response = client.get("/calendar", params={"month": f"{MAX_YEAR}-12"})

    assert response.status_code == 200
    assert f"December {MAX_YEAR}" in response.text
