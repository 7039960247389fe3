"""Calendar routes: index page, month navigation, search, fetch status."""

import html

from fastapi import APIRouter, BackgroundTasks, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse

from rxivcal.gui.helpers import filter_papers
from rxivcal.gui.state import state, templates
from rxivcal.models.paper import MonthQuery
from rxivcal.services.calendar_service import build_grid

router = APIRouter()


# ============================================================================
# Helpers
# ============================================================================


def _bad_request(message: str) -> HTMLResponse:
    return HTMLResponse(
        f"<div class='p-4 text-sm text-red-600'>{html.escape(message)}</div>", status_code=400
    )


def _schedule_fetch(background_tasks: BackgroundTasks) -> None:
    """Queue a month fetch if the displayed month is not loaded yet."""
    session = state.session
    if session.needs_fetch:
        session.loading = True
        background_tasks.add_task(session.load_month, state.fetcher, session.query)


def _calendar_response(request: Request, background_tasks: BackgroundTasks) -> HTMLResponse:
    _schedule_fetch(background_tasks)
    session = state.session
    response = templates.TemplateResponse(
        request,
        "partials/calendar.html",
        {"session": session},
    )
    response.headers["X-Paper-Count"] = str(len(session.filtered))
    return response


# ============================================================================
# Main Page
# ============================================================================


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, background_tasks: BackgroundTasks):
    """Main calendar page for the current session month."""
    _schedule_fetch(background_tasks)
    return templates.TemplateResponse(
        request,
        "index.html",
        {"session": state.session},
    )


# ============================================================================
# Calendar Partials
# ============================================================================


@router.get("/calendar", response_class=HTMLResponse)
async def calendar_view(
    request: Request,
    background_tasks: BackgroundTasks,
    month: str = Query("", description="Month to show (YYYY-MM)"),
    q: str | None = Query(None, description="Search query"),
):
    """Calendar grid partial; switches month and/or search when given."""
    session = state.session
    if month:
        try:
            session.set_month(MonthQuery.parse(month))
        except ValueError:
            return _bad_request(f"Invalid month: {month}")
    if q is not None:
        session.set_search(q)
    return _calendar_response(request, background_tasks)


@router.get("/calendar/prev", response_class=HTMLResponse)
async def calendar_prev(request: Request, background_tasks: BackgroundTasks):
    """Show the previous month."""
    try:
        state.session.set_month(state.session.query.shift(-1))
    except ValueError as e:
        return _bad_request(str(e))
    return _calendar_response(request, background_tasks)


@router.get("/calendar/next", response_class=HTMLResponse)
async def calendar_next(request: Request, background_tasks: BackgroundTasks):
    """Show the next month."""
    try:
        state.session.set_month(state.session.query.shift(1))
    except ValueError as e:
        return _bad_request(str(e))
    return _calendar_response(request, background_tasks)


@router.get("/calendar/today", response_class=HTMLResponse)
async def calendar_today(request: Request, background_tasks: BackgroundTasks):
    """Jump back to the current month."""
    state.session.set_month(MonthQuery.today())
    return _calendar_response(request, background_tasks)


@router.get("/search", response_class=HTMLResponse)
async def search(
    request: Request,
    background_tasks: BackgroundTasks,
    q: str = Query("", description="Search query"),
):
    """Apply a search query and return the re-derived grid."""
    state.session.set_search(q)
    return _calendar_response(request, background_tasks)


@router.get("/calendar/status", response_class=HTMLResponse)
async def calendar_status(request: Request):
    """Loading indicator; fires ``monthLoaded`` once the fetch is done."""
    session = state.session
    response = templates.TemplateResponse(
        request,
        "partials/fetch_status.html",
        {"session": session},
    )
    if not session.loading:
        response.headers["HX-Trigger"] = "monthLoaded"
    return response


# ============================================================================
# JSON
# ============================================================================


@router.get("/api/month")
async def month_json(
    month: str = Query("", description="Month (YYYY-MM); defaults to session month"),
    q: str = Query("", description="Search query"),
):
    """Fetch a month directly and return its grid as JSON (session untouched)."""
    try:
        query = MonthQuery.parse(month) if month else state.session.query
    except ValueError:
        return JSONResponse({"error": f"Invalid month: {month}"}, status_code=400)

    papers = await state.fetcher.fetch_papers_by_month(query.year, query.month)
    filtered = filter_papers(papers, q)
    days = build_grid(query.year, query.month, filtered)
    return JSONResponse({
        "month": query.key,
        "label": query.label,
        "total": len(papers),
        "matched": len(filtered),
        "days": [
            {
                "date": d.key,
                "current_month": d.is_current_month,
                "today": d.is_today,
                "count": d.count,
                "tier": d.tier,
                "dois": [p.doi for p in d.papers],
            }
            for d in days
        ],
    })
