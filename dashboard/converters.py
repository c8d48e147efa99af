"""
Row converters - convert Supabase row dicts to dataclasses.
"""

from datetime import datetime
from typing import Any

from .models import (
    DEFAULT_PROFILE_ROLE,
    AnalyticsRow,
    Article,
    AuthorSummary,
    AuthUser,
    Category,
    CategorySummary,
    Comment,
    Profile,
    Tag,
)

Row = dict[str, Any]


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO timestamp, returning None when absent or malformed."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        # PostgREST emits a trailing "Z" for UTC on some columns
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value) if value is not None else default
    except (TypeError, ValueError):
        return default


def _embedded(row: Row, key: str) -> Row | None:
    """Return an embedded relation, which PostgREST may send as an object or a list."""
    value = row.get(key)
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, dict) else None


def row_to_auth_user(user: Any) -> AuthUser | None:
    """Convert a Supabase auth user (SDK object or dict) to an AuthUser."""
    if user is None:
        return None
    if isinstance(user, dict):
        return AuthUser(
            id=str(user["id"]),
            email=user.get("email"),
            user_metadata=dict(user.get("user_metadata") or {}),
        )
    return AuthUser(
        id=str(user.id),
        email=getattr(user, "email", None),
        user_metadata=dict(getattr(user, "user_metadata", None) or {}),
    )


def row_to_profile(row: Row) -> Profile:
    return Profile(
        id=str(row["id"]),
        email=row.get("email") or "",
        role=row.get("role") or DEFAULT_PROFILE_ROLE,
        full_name=row.get("full_name"),
        avatar_url=row.get("avatar_url"),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def row_to_category(row: Row) -> Category:
    return Category(
        id=str(row["id"]),
        name=row.get("name") or "",
        slug=row.get("slug") or "",
        priority=_as_int(row.get("priority")),
        description=row.get("description"),
        created_at=_parse_timestamp(row.get("created_at")),
    )


def _author_summary(row: Row) -> AuthorSummary | None:
    embedded = _embedded(row, "profiles")
    if embedded is None:
        return None
    return AuthorSummary(full_name=embedded.get("full_name"), email=embedded.get("email"))


def row_to_article(row: Row) -> Article:
    category = _embedded(row, "categories")
    return Article(
        id=str(row["id"]),
        title=row.get("title") or "",
        slug=row.get("slug") or "",
        status=row.get("status") or "draft",
        language=row.get("language") or "en",
        ai_generated=bool(row.get("ai_generated")),
        content=row.get("content"),
        excerpt=row.get("excerpt"),
        featured_image=row.get("featured_image"),
        category_id=row.get("category_id"),
        author_id=row.get("author_id"),
        published_at=_parse_timestamp(row.get("published_at")),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
        category=(
            CategorySummary(name=category.get("name"), slug=category.get("slug"))
            if category else None
        ),
        author=_author_summary(row),
    )


def row_to_tag(row: Row) -> Tag:
    return Tag(
        id=str(row["id"]),
        name=row.get("name") or "",
        slug=row.get("slug") or "",
        created_at=_parse_timestamp(row.get("created_at")),
    )


def row_to_comment(row: Row) -> Comment:
    return Comment(
        id=str(row["id"]),
        article_id=str(row.get("article_id") or ""),
        content=row.get("content") or "",
        status=row.get("status") or "pending",
        author_id=row.get("author_id"),
        created_at=_parse_timestamp(row.get("created_at")),
        author=_author_summary(row),
    )


def row_to_analytics(row: Row) -> AnalyticsRow:
    return AnalyticsRow(
        id=str(row["id"]),
        article_id=str(row.get("article_id") or ""),
        views=_as_int(row.get("views")),
        shares=_as_int(row.get("shares")),
        date=row.get("date"),
    )
