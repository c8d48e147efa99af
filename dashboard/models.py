"""
Row models - dataclasses mirroring Supabase rows.

The backend is the system of record; these are read-only snapshots.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

DEFAULT_PROFILE_ROLE = "reader"


@dataclass(frozen=True)
class AuthUser:
    """Identity returned by Supabase auth."""
    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Profile:
    id: str
    email: str
    role: str = DEFAULT_PROFILE_ROLE
    full_name: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    slug: str
    priority: int = 0
    description: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class CategorySummary:
    """Category fields embedded in an article row."""
    name: str | None = None
    slug: str | None = None


@dataclass(frozen=True)
class AuthorSummary:
    """Profile fields embedded in article and comment rows."""
    full_name: str | None = None
    email: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "Unknown"


@dataclass(frozen=True)
class Article:
    id: str
    title: str
    slug: str
    status: str = "draft"
    language: str = "en"
    ai_generated: bool = False
    content: str | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    category_id: str | None = None
    author_id: str | None = None
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    category: CategorySummary | None = None
    author: AuthorSummary | None = None


@dataclass(frozen=True)
class Tag:
    id: str
    name: str
    slug: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class Comment:
    id: str
    article_id: str
    content: str
    status: str = "pending"
    author_id: str | None = None
    created_at: datetime | None = None
    author: AuthorSummary | None = None


@dataclass(frozen=True)
class AnalyticsRow:
    id: str
    article_id: str
    views: int = 0
    shares: int = 0
    date: str | None = None  # YYYY-MM-DD
