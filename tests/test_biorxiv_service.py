"""Pagination loop of the bioRxiv client (httpx.MockTransport backed)."""

import asyncio

import httpx

from rxivcal.services.biorxiv_service import BiorxivService
from tests.conftest import cursor_of, page_response, record


def run_fetch(handler, year=2024, month=2, **kwargs):
    """Run one month fetch against *handler*; returns (papers, requests)."""
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(recording)) as client:
            service = BiorxivService(client=client, **kwargs)
            return await service.fetch_papers_by_month(year, month)

    return asyncio.run(go()), seen


def paged(total, fail_at=None, status=500):
    """Handler serving *total* records in pages of 100."""

    def handler(request):
        cursor = cursor_of(request)
        if fail_at is not None and cursor >= fail_at:
            return httpx.Response(status)
        batch = [record(i) for i in range(cursor, min(cursor + 100, total))]
        return page_response(batch, total)

    return handler


def test_fetches_all_pages_until_total():
    papers, requests = run_fetch(paged(250))

    assert len(papers) == 250
    assert [cursor_of(r) for r in requests] == [0, 100, 200]
    assert len({p.doi for p in papers}) == 250


def test_requests_month_range_url():
    _, requests = run_fetch(paged(10), year=2024, month=1)

    assert str(requests[0].url) == (
        "https://api.biorxiv.org/details/biorxiv/2024-02-01/2024-02-29/0/json"
    )


def test_server_is_part_of_url():
    _, requests = run_fetch(paged(10), server="medrxiv", base_url="https://example.org/details/")

    assert str(requests[0].url).startswith("https://example.org/details/medrxiv/2024-03-01/2024-03-31/")


def test_second_page_failure_returns_first_page():
    papers, requests = run_fetch(paged(250, fail_at=100))

    assert len(papers) == 100
    assert len(requests) == 2


def test_transport_error_returns_partial_result():
    def handler(request):
        if cursor_of(request) >= 200:
            raise httpx.ConnectError("connection reset", request=request)
        return paged(450)(request)

    papers, requests = run_fetch(handler)

    assert len(papers) == 200
    assert len(requests) == 3


def test_malformed_payload_stops_loop():
    def handler(request):
        if cursor_of(request) == 0:
            return paged(300)(request)
        return httpx.Response(200, json={"messages": [{"total": 300}], "collection": "oops"})

    papers, requests = run_fetch(handler)

    assert len(papers) == 100
    assert len(requests) == 2


def test_non_json_body_stops_loop():
    papers, requests = run_fetch(lambda r: httpx.Response(200, text="<html>busy</html>"))

    assert papers == []
    assert len(requests) == 1


def test_safety_cap_stops_loop():
    papers, requests = run_fetch(paged(5000))

    assert len(papers) == 2000
    assert len(requests) == 20


def test_custom_cap():
    papers, requests = run_fetch(paged(5000), max_papers=300)

    assert len(papers) == 300
    assert len(requests) == 3


def test_total_sent_as_string():
    def handler(request):
        cursor = cursor_of(request)
        batch = [record(i) for i in range(cursor, min(cursor + 100, 150))]
        return page_response(batch, "150")

    papers, requests = run_fetch(handler)

    assert len(papers) == 150
    assert len(requests) == 2


def test_empty_page_does_not_spin():
    papers, requests = run_fetch(lambda r: page_response([], 500))

    assert papers == []
    assert len(requests) == 1


def test_no_results_month():
    papers, requests = run_fetch(lambda r: page_response([], 0))

    assert papers == []
    assert len(requests) == 1


def test_records_become_papers():
    papers, _ = run_fetch(paged(1))

    paper = papers[0]
    assert paper.doi == "10.1101/2024.03.00000"
    assert paper.date == "2024-03-05"
    assert paper.category == "neuroscience"
    assert paper.doi_url == "https://doi.org/10.1101/2024.03.00000"


def test_invalid_url_is_logged_not_raised():
    def handler(request):
        raise httpx.InvalidURL("Invalid port: 'notaport'")

    papers, requests = run_fetch(handler)

    assert papers == []
    assert len(requests) == 1
