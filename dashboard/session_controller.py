"""
Session controller: auth lifecycle and data bootstrap for one browser session.

Owns the view model, the data loader and the seed transaction, and is the
only caller of the loader. Supabase reports sign-in and sign-out through its
auth-change callback; each notification is handled as a task on the running
loop, and callers await ``settle()`` before reading the view model.
"""

import asyncio
import logging

from .converters import row_to_profile
from .data_loader import DataLoader
from .exceptions import error_message
from .gateway import (
    PROFILES_TABLE,
    AuthEvent,
    BackendGateway,
    ProfileFound,
    ProfileLookupFailed,
    Subscription,
)
from .models import DEFAULT_PROFILE_ROLE, AuthUser, Profile
from .seed import SeedResult, SeedTransaction
from .view_model import DashboardViewModel

logger = logging.getLogger(__name__)

SIGNED_IN_MESSAGE = "Successfully logged in"
SIGNED_OUT_MESSAGE = "Successfully logged out"
SIGN_UP_MESSAGE = "Check your email for the confirmation link!"
SEED_SUCCESS_MESSAGE = "Test operations completed successfully!"


class SessionController:
    """Drives the dashboard view model from Supabase auth and table data."""

    def __init__(self, gateway: BackendGateway, view: DashboardViewModel | None = None):
        self.gateway = gateway
        self.view = view or DashboardViewModel()
        self.loader = DataLoader(gateway, self.view)
        self.seeder = SeedTransaction(gateway)
        self._subscription: Subscription | None = None
        self._pending: set[asyncio.Task] = set()
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ─────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────

    async def mount(self) -> None:
        """
        Subscribe to auth changes and restore the current session.

        The loading flag is always cleared, even when the session check
        fails; the failure is only logged.
        """
        self._subscription = self.gateway.on_auth_change(self._on_auth_change)
        try:
            user = await self.gateway.get_session_user()
            self.view.user = user
            if user:
                await self.load_user_data(user.id)
        except Exception as e:
            logger.error(f"Error getting session: {e}")
        finally:
            self.view.loading = False

    async def dispose(self) -> None:
        """Detach the auth listener and drop pending notifications."""
        if self._disposed:
            return
        self._disposed = True
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._pending.clear()

    async def settle(self) -> None:
        """Wait until every scheduled auth notification has been handled."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _on_auth_change(self, event: AuthEvent, user: AuthUser | None) -> None:
        if self._disposed:
            return
        task = asyncio.get_running_loop().create_task(self.handle_auth_event(event, user))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def handle_auth_event(self, event: AuthEvent, user: AuthUser | None) -> None:
        """React to a Supabase auth state change."""
        if self._disposed:
            return

        if event is AuthEvent.SIGNED_OUT:
            self.view.reset()
            self.view.loading = False
            self.view.show_message(SIGNED_OUT_MESSAGE)
        elif event is AuthEvent.SIGNED_IN and user is not None:
            self.view.user = user
            self.view.loading = False
            self.view.show_message(SIGNED_IN_MESSAGE)
            await self.load_user_data(user.id)
        else:
            logger.debug(f"Ignoring auth event {event.value}")

    # ─────────────────────────────────────────────────────────────
    # Data bootstrap
    # ─────────────────────────────────────────────────────────────

    async def load_user_data(self, user_id: str) -> None:
        """Bootstrap the profile, then bulk-load every list."""
        generation = self.view.begin_generation()
        self.view.data_loading = True
        try:
            profile = await self.bootstrap_profile(user_id)
            self.view.replace_profile(profile, generation)
            await self.loader.load_all(generation)
        except Exception as e:
            logger.error(f"Error loading user data: {e}")
        finally:
            if self.view.is_current(generation):
                self.view.data_loading = False

    async def bootstrap_profile(self, user_id: str) -> Profile | None:
        """
        Return the user's profile, creating it on first login.

        A missing row is created with the default role from the auth
        identity's email and metadata. Insert failures and any other lookup
        failure leave the profile as None; nothing is retried.
        """
        lookup = await self.gateway.find_profile(user_id)
        if isinstance(lookup, ProfileFound):
            return lookup.profile
        if isinstance(lookup, ProfileLookupFailed):
            logger.error(f"Error loading profile {user_id}: {lookup.message} ({lookup.code})")
            return None

        identity = await self.gateway.get_current_user()
        row = {
            "id": user_id,
            "email": (identity.email if identity else None) or "",
            "full_name": identity.user_metadata.get("full_name") if identity else None,
            "role": DEFAULT_PROFILE_ROLE,
        }
        try:
            created = await self.gateway.insert_row(PROFILES_TABLE, row)
        except Exception as e:
            logger.error(f"Error creating profile: {e}")
            return None

        logger.info(f"Created profile for user {user_id}")
        return row_to_profile(created)

    # ─────────────────────────────────────────────────────────────
    # Auth actions
    # ─────────────────────────────────────────────────────────────

    async def submit_credentials(self, email: str, password: str) -> None:
        """Sign in or sign up with the form credentials, depending on the form mode."""
        form = self.view.form
        form.email = email
        form.password = password

        self.view.auth_loading = True
        self.view.clear_feedback()
        try:
            if form.is_login:
                await self.gateway.sign_in_with_password(email, password)
            else:
                await self.gateway.sign_up(email, password)
                self.view.show_message(SIGN_UP_MESSAGE)
        except Exception as e:
            self.view.show_error(error_message(e, "An error occurred"))
        finally:
            self.view.auth_loading = False

    async def sign_out(self) -> None:
        self.view.auth_loading = True
        try:
            await self.gateway.sign_out()
            self.view.form.clear()
        except Exception as e:
            self.view.show_error(error_message(e, "Error logging out"))
        finally:
            self.view.auth_loading = False

    def toggle_mode(self) -> None:
        """Switch the form between sign-in and sign-up."""
        self.view.form.is_login = not self.view.form.is_login
        self.view.clear_feedback()

    # ─────────────────────────────────────────────────────────────
    # Seed data
    # ─────────────────────────────────────────────────────────────

    async def run_seed(self) -> SeedResult | None:
        """
        Insert a test article, comment and analytics row, then reload.

        Does nothing unless a user is signed in and has a profile. The reload
        is skipped when a sign-out or a newer load overtook the inserts.
        """
        user = self.view.user
        if user is None or self.view.profile is None:
            return None

        generation = self.view.begin_generation()
        self.view.data_loading = True
        self.view.clear_feedback()
        try:
            result = await self.seeder.run(user, self.view.categories)
            if not self.view.is_current(generation):
                logger.info("Seed finished after the session moved on, skipping reload")
            elif result.ok:
                self.view.show_message(SEED_SUCCESS_MESSAGE)
                await self.loader.load_all(generation)
            else:
                self.view.show_error(
                    error_message(result.error, "Error testing database operations")
                )
            return result
        finally:
            if self.view.is_current(generation):
                self.view.data_loading = False
