"""Common routes: Gemini credentials, session info."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from rxivcal import __version__
from rxivcal.config import save_gemini
from rxivcal.gui.state import state

router = APIRouter()


# ============================================================================
# Session Info
# ============================================================================


@router.get("/api/session")
async def session_info():
    """Return the displayed month, search and load state as JSON."""
    s = state.session
    return JSONResponse({
        "version": __version__,
        "month": s.query.key,
        "label": s.query.label,
        "search": s.search,
        "loading": s.loading,
        "loaded": s.loaded_query.key if s.loaded_query else None,
        "papers": len(s.papers),
        "matched": len(s.filtered),
        "selected": s.selected.isoformat() if s.selected else None,
    })


# ============================================================================
# Gemini Credentials
# ============================================================================


class GeminiPayload(BaseModel):
    """Request body for updating the Gemini key / model."""
    api_key: str
    model: str | None = None


@router.get("/api/gemini")
async def get_gemini():
    """Report whether a key is configured (the key itself is never echoed)."""
    return JSONResponse({
        "configured": state.settings.has_gemini_key,
        "model": state.settings.gemini_model,
    })


@router.put("/api/gemini")
async def update_gemini(body: GeminiPayload):
    """Update the Gemini key/model and persist to ``gemini.yaml``."""
    settings = state.settings
    api_key = body.api_key.strip() or None
    model = (body.model or "").strip() or settings.gemini_model
    settings.update(gemini_api_key=api_key, gemini_model=model)
    state.summarizer.configure(api_key, model)
    save_gemini(settings.metadata_dir / "gemini.yaml", api_key, model)
    return JSONResponse({"configured": settings.has_gemini_key, "model": model})
