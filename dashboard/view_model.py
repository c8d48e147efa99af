"""
Dashboard view model.

Holds everything a page render needs for one browser session. Lists are
only ever replaced wholesale, and every replace carries the load generation
it was issued under so that responses arriving after a sign-out (or after a
newer load started) are dropped instead of resurrecting stale rows.
"""

import logging
from dataclasses import dataclass, field

from .models import AnalyticsRow, Article, AuthUser, Category, Comment, Profile, Tag

logger = logging.getLogger(__name__)

LIST_NAMES = ("categories", "articles", "tags", "comments", "analytics")


@dataclass
class AuthForm:
    """Locally held credentials for the sign-in / sign-up form."""
    email: str = ""
    password: str = ""
    is_login: bool = True

    def clear(self) -> None:
        self.email = ""
        self.password = ""


@dataclass
class DashboardViewModel:
    user: AuthUser | None = None
    profile: Profile | None = None
    categories: tuple[Category, ...] = ()
    articles: tuple[Article, ...] = ()
    tags: tuple[Tag, ...] = ()
    comments: tuple[Comment, ...] = ()
    analytics: tuple[AnalyticsRow, ...] = ()

    message: str = ""
    error: str | None = None

    loading: bool = True
    auth_loading: bool = False
    data_loading: bool = False

    form: AuthForm = field(default_factory=AuthForm)
    generation: int = 0

    def begin_generation(self) -> int:
        """Start a new load; earlier in-flight loads become stale."""
        self.generation += 1
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def replace_list(self, name: str, rows, generation: int) -> bool:
        """
        Replace one entity list.

        Returns False (and leaves state untouched) when the write belongs to
        a stale generation.
        """
        if name not in LIST_NAMES:
            raise ValueError(f"Unknown list: {name}")
        if not self.is_current(generation):
            logger.debug(f"Discarding stale {name} (generation {generation} != {self.generation})")
            return False
        setattr(self, name, tuple(rows or ()))
        return True

    def replace_profile(self, profile: Profile | None, generation: int) -> bool:
        if not self.is_current(generation):
            logger.debug(f"Discarding stale profile (generation {generation} != {self.generation})")
            return False
        self.profile = profile
        return True

    def reset(self) -> None:
        """Clear user, profile and every list."""
        self.begin_generation()
        self.user = None
        self.profile = None
        for name in LIST_NAMES:
            setattr(self, name, ())
        self.data_loading = False

    def counts(self) -> dict[str, int]:
        return {name: len(getattr(self, name)) for name in LIST_NAMES}

    def show_message(self, message: str) -> None:
        self.message = message

    def show_error(self, error: str | None) -> None:
        self.error = error

    def clear_feedback(self) -> None:
        self.error = None
        self.message = ""
