"""
Configuration and application state management.
"""

import os
from typing import TYPE_CHECKING, Awaitable, Callable

from dotenv import load_dotenv
from fastapi import HTTPException

if TYPE_CHECKING:
    from .gateway import BackendGateway
    from .sessions import SessionRegistry

# Load environment variables
load_dotenv()


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


class Config:
    """Application configuration from environment."""
    # Supabase project
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")

    # Browser session cookie signing
    SESSION_SECRET: str = os.getenv("SESSION_SECRET", "")
    SESSION_MAX_AGE: int = int(os.getenv("SESSION_MAX_AGE", str(7 * 24 * 3600)))  # seconds
    SESSION_SECURE: bool = _parse_bool(os.getenv("SESSION_SECURE"), default=False)

    PORT: int = int(os.getenv("PORT", "3000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Requests per minute per client IP, 0 disables
    RATE_LIMIT_PER_MINUTE: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))
    # Sign-in and sign-up submissions per minute per client IP
    AUTH_RATE_LIMIT_PER_MINUTE: int = int(os.getenv("AUTH_RATE_LIMIT_PER_MINUTE", "10"))

    def has_backend(self) -> bool:
        """Check if the Supabase project is configured."""
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)


config = Config()


class AppState:
    """Shared application state."""
    sessions: "SessionRegistry | None" = None
    gateway_factory: "Callable[[], Awaitable[BackendGateway]] | None" = None


state = AppState()


def get_sessions() -> "SessionRegistry":
    """Dependency to get the browser session registry."""
    if state.sessions is None:
        raise HTTPException(status_code=500, detail="Session registry not initialized")
    return state.sessions
