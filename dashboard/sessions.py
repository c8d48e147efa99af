"""
Browser session registry.

Each browser gets a random session id in a signed cookie. The id maps to a
SessionController holding that browser's own Supabase client, so auth state
is never shared between visitors.
"""

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from fastapi import HTTPException, Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from .config import config
from .exceptions import BackendError
from .gateway import BackendGateway
from .session_controller import SessionController

logger = logging.getLogger(__name__)

SESSION_COOKIE = "dashboard_session"

GatewayFactory = Callable[[], Awaitable[BackendGateway]]

# Session serializer for signed cookies
_serializer: Optional[URLSafeTimedSerializer] = None
_serializer_secret: Optional[str] = None


def get_serializer() -> URLSafeTimedSerializer:
    """Get the session serializer, creating it if needed."""
    global _serializer, _serializer_secret
    if not config.SESSION_SECRET:
        raise HTTPException(status_code=500, detail="SESSION_SECRET not configured")
    if _serializer is None or _serializer_secret != config.SESSION_SECRET:
        _serializer = URLSafeTimedSerializer(config.SESSION_SECRET, salt="dashboard-session")
        _serializer_secret = config.SESSION_SECRET
    return _serializer


def sign_session_id(session_id: str) -> str:
    return get_serializer().dumps(session_id)


def read_session_id(token: str | None) -> str | None:
    """Validate a session cookie and return the session id inside it."""
    if not token:
        return None
    try:
        return get_serializer().loads(token, max_age=config.SESSION_MAX_AGE)
    except SignatureExpired:
        logger.debug("Session cookie expired")
        return None
    except BadSignature:
        logger.warning("Invalid session cookie signature")
        return None


def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=sign_session_id(session_id),
        max_age=config.SESSION_MAX_AGE,
        httponly=True,
        secure=config.SESSION_SECURE,
        samesite="lax",
        path="/",
    )


@dataclass
class SessionHandle:
    """Controller bound to the current request's browser session."""
    session_id: str
    controller: SessionController
    is_new: bool = False

    def attach(self, response: Response) -> Response:
        """Set the session cookie on the response when the session was just created."""
        if self.is_new:
            set_session_cookie(response, self.session_id)
        return response


@dataclass
class _Entry:
    controller: SessionController
    last_seen: float


class SessionRegistry:
    """Maps session ids to mounted controllers."""

    def __init__(self, gateway_factory: GatewayFactory, max_idle: int | None = None):
        self._gateway_factory = gateway_factory
        self._max_idle = max_idle if max_idle is not None else config.SESSION_MAX_AGE
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._entries

    async def get_or_create(self, token: str | None) -> SessionHandle:
        """
        Resolve a session cookie to a controller.

        Unknown, expired or tampered cookies start a new session; the new
        controller is mounted before it is returned.
        """
        get_serializer()  # fail before creating a client if the secret is missing
        await self.prune()

        session_id = read_session_id(token)
        entry = self._entries.get(session_id) if session_id else None
        if entry is not None:
            entry.last_seen = time.monotonic()
            return SessionHandle(session_id, entry.controller)

        session_id = secrets.token_urlsafe(32)
        try:
            gateway = await self._gateway_factory()
        except BackendError as e:
            logger.error(f"Cannot start browser session: {e}")
            raise HTTPException(status_code=500, detail=e.message)
        controller = SessionController(gateway)
        await controller.mount()
        self._entries[session_id] = _Entry(controller, time.monotonic())
        logger.info(f"Started browser session ({len(self._entries)} active)")
        return SessionHandle(session_id, controller, is_new=True)

    async def dispose(self, session_id: str) -> None:
        entry = self._entries.pop(session_id, None)
        if entry is not None:
            await entry.controller.dispose()

    async def prune(self) -> int:
        """Dispose controllers idle for longer than the session max age."""
        cutoff = time.monotonic() - self._max_idle
        stale = [sid for sid, entry in self._entries.items() if entry.last_seen < cutoff]
        for session_id in stale:
            await self.dispose(session_id)
        if stale:
            logger.info(f"Disposed {len(stale)} idle browser session(s)")
        return len(stale)

    async def dispose_all(self) -> None:
        for session_id in list(self._entries):
            await self.dispose(session_id)
