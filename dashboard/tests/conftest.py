"""
Pytest fixtures for dashboard tests.

Supabase is replaced by an in-memory backend: ``FakeBackend`` holds the
tables, registered users and failure switches shared by every client, and
``FakeGateway`` is one client's view of it with its own auth session and
auth-change listeners, mirroring how each browser session owns a Supabase
client.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from dashboard.config import config, state
from dashboard.exceptions import AuthFailure, BackendError
from dashboard.gateway import (
    AuthEvent,
    ProfileFound,
    ProfileLookupFailed,
    ProfileNotFound,
)
from dashboard.converters import row_to_profile
from dashboard.models import AuthUser
from dashboard.rate_limit import limiter
from dashboard.server import app
from dashboard.sessions import SessionRegistry

TABLES = ("profiles", "categories", "articles", "tags", "comments", "article_analytics")


class FakeBackend:
    """Shared tables, users and failure switches."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {name: [] for name in TABLES}
        self.users: dict[str, tuple[str, AuthUser]] = {}  # email -> (password, user)
        self.confirmed: set[str] = set()
        self.calls: list[tuple] = []

        # Failure switches
        self.select_errors: set[str] = set()        # tables whose select is rejected
        self.select_raises: dict[str, Exception] = {}  # tables whose select raises
        self.insert_errors: dict[str, BackendError] = {}
        self.delete_errors: dict[str, BackendError] = {}
        self.profile_lookup_error: ProfileLookupFailed | None = None
        self.session_error: Exception | None = None
        self.sign_out_error: AuthFailure | None = None

    def calls_of(self, kind: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == kind]

    def add_user(
        self,
        email: str,
        password: str,
        user_id: str | None = None,
        full_name: str | None = None,
        confirmed: bool = True,
    ) -> AuthUser:
        metadata = {"full_name": full_name} if full_name else {}
        user = AuthUser(id=user_id or str(uuid.uuid4()), email=email, user_metadata=metadata)
        self.users[email] = (password, user)
        if confirmed:
            self.confirmed.add(email)
        return user

    def add_row(self, table: str, **values) -> dict:
        row = {"id": str(uuid.uuid4()), **values}
        self.tables[table].append(row)
        return row


class FakeSubscription:
    def __init__(self, gateway: "FakeGateway", listener):
        self._gateway = gateway
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._gateway.listeners.remove(self._listener)
            self.active = False


class FakeGateway:
    """One Supabase client's view of the fake backend."""

    def __init__(self, backend: FakeBackend, session_user: AuthUser | None = None):
        self.backend = backend
        self.session_user = session_user
        self.listeners: list = []

    def emit(self, event: AuthEvent, user: AuthUser | None) -> None:
        for listener in list(self.listeners):
            listener(event, user)

    # Auth

    async def get_session_user(self):
        if self.backend.session_error:
            raise self.backend.session_error
        return self.session_user

    async def get_current_user(self):
        return self.session_user

    async def sign_in_with_password(self, email, password):
        self.backend.calls.append(("sign_in", email))
        entry = self.backend.users.get(email)
        if entry is None or entry[0] != password:
            raise AuthFailure("Invalid login credentials", "invalid_credentials")
        if email not in self.backend.confirmed:
            raise AuthFailure("Email not confirmed", "email_not_confirmed")
        self.session_user = entry[1]
        self.emit(AuthEvent.SIGNED_IN, self.session_user)

    async def sign_up(self, email, password):
        self.backend.calls.append(("sign_up", email))
        if email in self.backend.users:
            raise AuthFailure("User already registered", "user_already_exists")
        self.backend.add_user(email, password, confirmed=False)

    async def sign_out(self):
        self.backend.calls.append(("sign_out",))
        if self.backend.sign_out_error:
            raise self.backend.sign_out_error
        self.session_user = None
        self.emit(AuthEvent.SIGNED_OUT, None)

    def on_auth_change(self, listener):
        self.listeners.append(listener)
        return FakeSubscription(self, listener)

    # Tables

    async def find_profile(self, user_id):
        self.backend.calls.append(("find_profile", user_id))
        if self.backend.profile_lookup_error:
            return self.backend.profile_lookup_error
        for row in self.backend.tables["profiles"]:
            if row["id"] == user_id:
                return ProfileFound(row_to_profile(row))
        return ProfileNotFound()

    async def select_rows(self, table, columns="*", order_by=None, descending=False):
        self.backend.calls.append(("select", table, columns, order_by, descending))
        if table in self.backend.select_raises:
            raise self.backend.select_raises[table]
        if table in self.backend.select_errors:
            return None
        rows = [dict(row) for row in self.backend.tables[table]]
        if "categories(" in columns:
            for row in rows:
                row["categories"] = self._embed("categories", row.get("category_id"), ("name", "slug"))
        if "profiles(" in columns:
            for row in rows:
                row["profiles"] = self._embed("profiles", row.get("author_id"), ("full_name", "email"))
        if order_by:
            rows.sort(key=lambda row: (row.get(order_by) is None, row.get(order_by)), reverse=descending)
        return rows

    def _embed(self, table, row_id, fields):
        for row in self.backend.tables[table]:
            if row["id"] == row_id:
                return {name: row.get(name) for name in fields}
        return None

    async def insert_row(self, table, row):
        self.backend.calls.append(("insert", table, dict(row)))
        if table in self.backend.insert_errors:
            raise self.backend.insert_errors[table]
        stored = {"id": str(uuid.uuid4()), "created_at": _now_iso(), **row}
        self.backend.tables[table].append(stored)
        return dict(stored)

    async def delete_row(self, table, row_id):
        self.backend.calls.append(("delete", table, row_id))
        if table in self.backend.delete_errors:
            raise self.backend.delete_errors[table]
        self.backend.tables[table] = [
            row for row in self.backend.tables[table] if row["id"] != row_id
        ]


_clock = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _now_iso() -> str:
    """Strictly increasing timestamps so ordering by created_at is stable."""
    global _clock
    _clock += timedelta(seconds=1)
    return _clock.isoformat()


@pytest.fixture
def backend():
    """Empty fake Supabase backend."""
    return FakeBackend()


@pytest.fixture
def seeded_backend(backend):
    """Backend with a confirmed user, a profile and some content."""
    user = backend.add_user("editor@example.com", "secret123", user_id="user-1", full_name="Ed Itor")
    backend.add_row("profiles", id=user.id, email=user.email, full_name="Ed Itor", role="editor")
    news = backend.add_row("categories", name="News", slug="news", priority=1)
    backend.add_row("categories", name="Opinion", slug="opinion", priority=2)
    article = backend.add_row(
        "articles",
        title="Hello World",
        slug="hello-world",
        status="published",
        language="en",
        ai_generated=False,
        category_id=news["id"],
        author_id=user.id,
        created_at="2024-01-01T10:00:00+00:00",
    )
    backend.add_row("tags", name="python", slug="python")
    backend.add_row("tags", name="ai", slug="ai")
    backend.add_row(
        "comments",
        article_id=article["id"],
        author_id=user.id,
        content="Nice post",
        status="approved",
        created_at="2024-01-02T10:00:00+00:00",
    )
    backend.add_row("article_analytics", article_id=article["id"], views=10, shares=2, date="2024-01-02")
    backend.user = user
    return backend


@pytest.fixture
def gateway(backend):
    return FakeGateway(backend)


@pytest.fixture
def client(backend):
    """Test client whose browser sessions talk to the fake backend."""
    original_sessions = state.sessions
    original_factory = state.gateway_factory
    original_secret = config.SESSION_SECRET

    async def factory():
        return FakeGateway(backend)

    config.SESSION_SECRET = "test-secret-for-signing-sessions"
    state.gateway_factory = factory
    state.sessions = SessionRegistry(factory)
    limiter.reset()

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    state.sessions = original_sessions
    state.gateway_factory = original_factory
    config.SESSION_SECRET = original_secret


@pytest.fixture
def seeded_client(seeded_backend, client):
    """Test client over the seeded backend."""
    return client


@pytest.fixture
def make_gateway(backend):
    """Factory for additional clients of the same fake backend."""
    return lambda: FakeGateway(backend)
