"""
Pydantic models for the JSON state endpoint.
"""

from dataclasses import asdict

from pydantic import BaseModel

from .models import AnalyticsRow, Article, Category, Comment, Profile, Tag
from .view_model import DashboardViewModel


class UserResponse(BaseModel):
    id: str
    email: str | None = None


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str | None = None
    avatar_url: str | None = None
    role: str
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_model(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            email=profile.email,
            full_name=profile.full_name,
            avatar_url=profile.avatar_url,
            role=profile.role,
            created_at=profile.created_at.isoformat() if profile.created_at else None,
            updated_at=profile.updated_at.isoformat() if profile.updated_at else None,
        )


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    priority: int

    @classmethod
    def from_model(cls, category: Category) -> "CategoryResponse":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            priority=category.priority,
        )


class ArticleResponse(BaseModel):
    id: str
    title: str
    slug: str
    excerpt: str | None = None
    status: str
    language: str
    ai_generated: bool
    category_id: str | None = None
    author_id: str | None = None
    category_name: str | None = None
    author_name: str | None = None
    created_at: str | None = None

    @classmethod
    def from_model(cls, article: Article) -> "ArticleResponse":
        return cls(
            id=article.id,
            title=article.title,
            slug=article.slug,
            excerpt=article.excerpt,
            status=article.status,
            language=article.language,
            ai_generated=article.ai_generated,
            category_id=article.category_id,
            author_id=article.author_id,
            category_name=article.category.name if article.category else None,
            author_name=article.author.display_name if article.author else None,
            created_at=article.created_at.isoformat() if article.created_at else None,
        )


class TagResponse(BaseModel):
    id: str
    name: str
    slug: str

    @classmethod
    def from_model(cls, tag: Tag) -> "TagResponse":
        return cls(id=tag.id, name=tag.name, slug=tag.slug)


class CommentResponse(BaseModel):
    id: str
    article_id: str
    author_id: str | None = None
    author_name: str | None = None
    content: str
    status: str
    created_at: str | None = None

    @classmethod
    def from_model(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            article_id=comment.article_id,
            author_id=comment.author_id,
            author_name=comment.author.display_name if comment.author else None,
            content=comment.content,
            status=comment.status,
            created_at=comment.created_at.isoformat() if comment.created_at else None,
        )


class AnalyticsResponse(BaseModel):
    id: str
    article_id: str
    views: int
    shares: int
    date: str | None = None

    @classmethod
    def from_model(cls, row: AnalyticsRow) -> "AnalyticsResponse":
        return cls(**asdict(row))


class DashboardStateResponse(BaseModel):
    """Snapshot of one browser session's view model."""
    user: UserResponse | None = None
    profile: ProfileResponse | None = None
    categories: list[CategoryResponse] = []
    articles: list[ArticleResponse] = []
    tags: list[TagResponse] = []
    comments: list[CommentResponse] = []
    analytics: list[AnalyticsResponse] = []
    counts: dict[str, int] = {}
    message: str = ""
    error: str | None = None
    loading: bool = False
    auth_loading: bool = False
    data_loading: bool = False
    is_login: bool = True

    @classmethod
    def from_view(cls, view: DashboardViewModel) -> "DashboardStateResponse":
        return cls(
            user=UserResponse(id=view.user.id, email=view.user.email) if view.user else None,
            profile=ProfileResponse.from_model(view.profile) if view.profile else None,
            categories=[CategoryResponse.from_model(c) for c in view.categories],
            articles=[ArticleResponse.from_model(a) for a in view.articles],
            tags=[TagResponse.from_model(t) for t in view.tags],
            comments=[CommentResponse.from_model(c) for c in view.comments],
            analytics=[AnalyticsResponse.from_model(a) for a in view.analytics],
            counts=view.counts(),
            message=view.message,
            error=view.error,
            loading=view.loading,
            auth_loading=view.auth_loading,
            data_loading=view.data_loading,
            is_login=view.form.is_login,
        )
