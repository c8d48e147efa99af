"""
Seed-data test action.

Inserts one article, one comment on it and one analytics row for it. The
three inserts are dependent and run in order; the first failure stops the
sequence and the rows already written are deleted again, newest first.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .gateway import ANALYTICS_TABLE, ARTICLES_TABLE, COMMENTS_TABLE, BackendGateway
from .models import AuthUser, Category

logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    """Outcome of one seed run."""
    article_id: str | None = None
    inserted: list[tuple[str, str]] = field(default_factory=list)  # (table, row id)
    error: Exception | None = None
    rolled_back: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def build_article_row(user: AuthUser, categories: tuple[Category, ...] | list[Category]) -> dict:
    return {
        "title": "Test Article",
        "slug": f"test-article-{int(time.time() * 1000)}",
        "content": "This is a test article content.",
        "excerpt": "Test excerpt",
        "author_id": user.id,
        "category_id": categories[0].id if categories else None,
        "status": "draft",
        "language": "en",
    }


def build_comment_row(user: AuthUser, article_id: str) -> dict:
    return {
        "article_id": article_id,
        "author_id": user.id,
        "content": "This is a test comment.",
        "status": "pending",
    }


def build_analytics_row(article_id: str) -> dict:
    return {
        "article_id": article_id,
        "views": 1,
        "shares": 0,
        "date": datetime.now(timezone.utc).date().isoformat(),
    }


class SeedTransaction:
    """Three dependent inserts with reverse-order cleanup on failure."""

    def __init__(self, gateway: BackendGateway):
        self.gateway = gateway

    async def run(
        self,
        user: AuthUser,
        categories: tuple[Category, ...] | list[Category] = (),
    ) -> SeedResult:
        result = SeedResult()
        try:
            article = await self._insert(result, ARTICLES_TABLE, build_article_row(user, categories))
            result.article_id = str(article["id"])
            await self._insert(result, COMMENTS_TABLE, build_comment_row(user, result.article_id))
            await self._insert(result, ANALYTICS_TABLE, build_analytics_row(result.article_id))
        except Exception as e:
            logger.error(f"Seed insert failed after {len(result.inserted)} step(s): {e}")
            result.error = e
            result.rolled_back = await self._compensate(result.inserted)
        return result

    async def _insert(self, result: SeedResult, table: str, row: dict) -> dict:
        stored = await self.gateway.insert_row(table, row)
        result.inserted.append((table, str(stored.get("id"))))
        return stored

    async def _compensate(self, inserted: list[tuple[str, str]]) -> bool:
        """Delete already inserted rows, newest first. Returns True if all were removed."""
        clean = True
        for table, row_id in reversed(inserted):
            try:
                await self.gateway.delete_row(table, row_id)
                logger.info(f"Rolled back {table} row {row_id}")
            except Exception as e:
                clean = False
                logger.error(f"Could not roll back {table} row {row_id}: {e}")
        return clean
