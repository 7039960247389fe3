"""FastAPI + HTMX GUI for rxivcal."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from rxivcal.gui.routers import calendar, common, papers
from rxivcal.gui.state import init_state


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize services and a fresh calendar session on startup."""
    init_state()
    yield


app = FastAPI(title="rxivcal", lifespan=lifespan)
app.include_router(calendar.router)
app.include_router(papers.router)
app.include_router(common.router)
