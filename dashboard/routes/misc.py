"""
Miscellaneous routes: health check and JSON state.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import config, state
from ..schemas import DashboardStateResponse
from .deps import SessionDep

router = APIRouter(tags=["misc"])


# ─────────────────────────────────────────────────────────────
# Health Check
# ─────────────────────────────────────────────────────────────

@router.get("/status")
async def health_check() -> dict:
    """Health check."""
    return {
        "status": "ok",
        "version": __version__,
        "backend_configured": config.has_backend(),
        "active_sessions": len(state.sessions) if state.sessions is not None else 0,
    }


# ─────────────────────────────────────────────────────────────
# State
# ─────────────────────────────────────────────────────────────

@router.get("/api/state")
async def session_state(handle: SessionDep):
    """JSON snapshot of this session's dashboard state."""
    payload = DashboardStateResponse.from_view(handle.controller.view)
    return handle.attach(JSONResponse(payload.model_dump()))
