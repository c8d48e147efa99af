"""
Shared route dependencies.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..config import get_sessions
from ..sessions import SESSION_COOKIE, SessionHandle, SessionRegistry


async def get_session_handle(
    request: Request,
    sessions: Annotated[SessionRegistry, Depends(get_sessions)],
) -> SessionHandle:
    """Resolve the browser session cookie to its mounted controller."""
    handle = await sessions.get_or_create(request.cookies.get(SESSION_COOKIE))
    await handle.controller.settle()
    return handle


SessionDep = Annotated[SessionHandle, Depends(get_session_handle)]
