"""
Sign-in, sign-up and sign-out form actions.

Each action updates the session's view model and redirects back to the
dashboard page, which renders the outcome.
"""

from typing import Annotated

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import RedirectResponse

from ..rate_limit import auth_limit, limiter
from .deps import SessionDep

router = APIRouter(prefix="/auth", tags=["auth"])


def _back_to_dashboard(handle) -> RedirectResponse:
    return handle.attach(RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER))


@router.post("/submit")
@limiter.limit(auth_limit)
async def submit(
    request: Request,
    handle: SessionDep,
    email: Annotated[str, Form()],
    password: Annotated[str, Form()],
) -> RedirectResponse:
    """Sign in or sign up, depending on the form mode."""
    await handle.controller.submit_credentials(email, password)
    await handle.controller.settle()
    return _back_to_dashboard(handle)


@router.post("/toggle")
async def toggle(handle: SessionDep) -> RedirectResponse:
    """Switch the form between sign-in and sign-up."""
    handle.controller.toggle_mode()
    return _back_to_dashboard(handle)


@router.post("/logout")
async def logout(handle: SessionDep) -> RedirectResponse:
    await handle.controller.sign_out()
    await handle.controller.settle()
    return _back_to_dashboard(handle)
