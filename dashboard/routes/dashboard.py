"""
Dashboard page and seed-data action.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import HTMLResponse, RedirectResponse

from ..pages import DEFAULT_TAB, render_page
from .deps import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


@router.get("/", response_class=HTMLResponse)
async def dashboard_page(handle: SessionDep, tab: str = DEFAULT_TAB) -> HTMLResponse:
    """Render the loading, sign-in or dashboard page for this session."""
    response = HTMLResponse(render_page(handle.controller.view, tab))
    return handle.attach(response)


@router.post("/seed")
async def seed_data(handle: SessionDep) -> RedirectResponse:
    """Insert one test article, comment and analytics row, then reload."""
    controller = handle.controller
    if controller.view.user is None:
        return handle.attach(RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER))

    result = await controller.run_seed()
    await controller.settle()
    if result is not None and not result.ok:
        logger.warning(f"Seed action failed: {controller.view.error}")
    return handle.attach(
        RedirectResponse("/?tab=articles", status_code=status.HTTP_303_SEE_OTHER)
    )
