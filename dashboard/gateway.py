"""
Supabase gateway.

The only module that talks to the Supabase SDK. Everything above it works
with the dataclasses in ``models`` and the result types defined here, so the
session controller never inspects raw PostgREST error codes.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol

from postgrest.exceptions import APIError
from supabase import AsyncClient, AuthError, acreate_client

from .config import config
from .converters import row_to_auth_user, row_to_profile
from .exceptions import AuthFailure, BackendError
from .models import AuthUser, Profile

logger = logging.getLogger(__name__)

# PostgREST error code for ".single()" matching zero rows
NO_ROWS_CODE = "PGRST116"

PROFILES_TABLE = "profiles"
CATEGORIES_TABLE = "categories"
ARTICLES_TABLE = "articles"
TAGS_TABLE = "tags"
COMMENTS_TABLE = "comments"
ANALYTICS_TABLE = "article_analytics"


class AuthEvent(str, Enum):
    """Auth state change kinds emitted by Supabase."""
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    INITIAL_SESSION = "INITIAL_SESSION"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    USER_DELETED = "USER_DELETED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    MFA_CHALLENGE_VERIFIED = "MFA_CHALLENGE_VERIFIED"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Any) -> "AuthEvent":
        try:
            return cls(str(value))
        except ValueError:
            return cls.OTHER


AuthListener = Callable[[AuthEvent, AuthUser | None], None]


class Subscription(Protocol):
    def unsubscribe(self) -> None: ...


# ─────────────────────────────────────────────────────────────
# Profile lookup result
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProfileFound:
    profile: Profile


@dataclass(frozen=True)
class ProfileNotFound:
    pass


@dataclass(frozen=True)
class ProfileLookupFailed:
    message: str
    code: str | None = None


ProfileLookup = ProfileFound | ProfileNotFound | ProfileLookupFailed


class BackendGateway:
    """Auth and table operations against one Supabase client."""

    def __init__(self, client: AsyncClient):
        self._client = client

    # ─────────────────────────────────────────────────────────────
    # Auth
    # ─────────────────────────────────────────────────────────────

    async def get_session_user(self) -> AuthUser | None:
        """Get the user of the current session, if any."""
        session = await self._client.auth.get_session()
        return row_to_auth_user(session.user) if session else None

    async def get_current_user(self) -> AuthUser | None:
        """Get the authenticated identity from the auth server."""
        response = await self._client.auth.get_user()
        return row_to_auth_user(response.user) if response else None

    async def sign_in_with_password(self, email: str, password: str) -> None:
        try:
            await self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            raise AuthFailure(e.message, getattr(e, "code", None)) from e

    async def sign_up(self, email: str, password: str) -> None:
        try:
            await self._client.auth.sign_up({"email": email, "password": password})
        except AuthError as e:
            raise AuthFailure(e.message, getattr(e, "code", None)) from e

    async def sign_out(self) -> None:
        try:
            await self._client.auth.sign_out()
        except AuthError as e:
            raise AuthFailure(e.message, getattr(e, "code", None)) from e

    def on_auth_change(self, listener: AuthListener) -> Subscription:
        """
        Subscribe to auth state changes.

        Supabase invokes the callback synchronously from inside the auth
        call that caused the change. The returned handle's ``unsubscribe()``
        detaches the listener.
        """
        def _callback(event: Any, session: Any) -> None:
            user = row_to_auth_user(session.user) if session else None
            listener(AuthEvent.parse(event), user)

        return self._client.auth.on_auth_state_change(_callback)

    # ─────────────────────────────────────────────────────────────
    # Tables
    # ─────────────────────────────────────────────────────────────

    async def find_profile(self, user_id: str) -> ProfileLookup:
        """Look up the profile row for a user id."""
        try:
            response = await (
                self._client.table(PROFILES_TABLE)
                .select("*")
                .eq("id", user_id)
                .single()
                .execute()
            )
        except APIError as e:
            if e.code == NO_ROWS_CODE:
                return ProfileNotFound()
            return ProfileLookupFailed(e.message or str(e), e.code)

        if not response.data:
            return ProfileNotFound()
        return ProfileFound(row_to_profile(response.data))

    async def select_rows(
        self,
        table: str,
        columns: str = "*",
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict] | None:
        """
        Select all rows of a table.

        Returns None when the backend rejects the query; the error is logged.
        Transport failures propagate.
        """
        query = self._client.table(table).select(columns)
        if order_by:
            query = query.order(order_by, desc=descending)
        try:
            response = await query.execute()
        except APIError as e:
            logger.error(f"Error selecting from {table}: {e.message} ({e.code})")
            return None
        return response.data

    async def insert_row(self, table: str, row: dict) -> dict:
        """Insert one row and return its stored representation."""
        try:
            response = await self._client.table(table).insert(row).execute()
        except APIError as e:
            raise BackendError(e.message or str(e), e.code) from e
        if not response.data:
            raise BackendError(f"Insert into {table} returned no rows")
        return response.data[0]

    async def delete_row(self, table: str, row_id: str) -> None:
        try:
            await self._client.table(table).delete().eq("id", row_id).execute()
        except APIError as e:
            raise BackendError(e.message or str(e), e.code) from e


async def create_gateway() -> BackendGateway:
    """Create a gateway with its own Supabase client (one per browser session)."""
    if not config.has_backend():
        raise BackendError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured")
    client = await acreate_client(config.SUPABASE_URL, config.SUPABASE_ANON_KEY)
    return BackendGateway(client)
