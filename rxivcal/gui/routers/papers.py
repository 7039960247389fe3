"""Day panel and per-paper AI summary routes (HTMX partials)."""

import html

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse

from rxivcal.gui.state import state, templates
from rxivcal.utils.text import normalize_doi, parse_day

router = APIRouter()


def _paper_not_found() -> HTMLResponse:
    return HTMLResponse(
        "<p class='text-xs text-red-500'>Paper not found in the loaded month.</p>"
    )


# ============================================================================
# Day Panel
# ============================================================================


@router.get("/day/{day}", response_class=HTMLResponse)
async def day_panel(request: Request, day: str):
    """Side panel listing the (filtered) papers recorded on *day*."""
    try:
        target = parse_day(day)
    except ValueError:
        return HTMLResponse(
            f"<div class='p-4 text-sm text-red-600'>Invalid date: {html.escape(day)}</div>",
            status_code=400,
        )

    session = state.session
    cell = session.select_day(target)
    return templates.TemplateResponse(
        request,
        "partials/day_panel.html",
        {
            "day": cell,
            "summaries": session.summaries,
            "explanations": session.explanations,
        },
    )


@router.post("/day/close", response_class=HTMLResponse)
async def close_day(request: Request):
    """Close the panel; transient summary state is discarded."""
    state.session.close_day()
    return HTMLResponse("")


# ============================================================================
# Gemini Summary / Jargon
# ============================================================================


@router.post("/papers/summary", response_class=HTMLResponse)
async def summarize_paper(request: Request, doi: str = Form(...)):
    """Generate (or re-show) the bullet summary for one paper."""
    doi = normalize_doi(doi)
    session = state.session
    if session.find_paper(doi) is None:
        return _paper_not_found()

    result = await session.summarize(doi, state.summarizer)
    return templates.TemplateResponse(
        request,
        "partials/summary.html",
        {"doi": doi, "summary": result, "kind": "summary"},
    )


@router.post("/papers/explain", response_class=HTMLResponse)
async def explain_paper(request: Request, doi: str = Form(...)):
    """Explain the hardest technical terms in one paper's abstract."""
    doi = normalize_doi(doi)
    session = state.session
    if session.find_paper(doi) is None:
        return _paper_not_found()

    result = await session.explain(doi, state.summarizer)
    return templates.TemplateResponse(
        request,
        "partials/summary.html",
        {"doi": doi, "summary": result, "kind": "explain"},
    )
