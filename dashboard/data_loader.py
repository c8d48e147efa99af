"""
Bulk loader for the dashboard's entity lists.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .converters import (
    row_to_analytics,
    row_to_article,
    row_to_category,
    row_to_comment,
    row_to_tag,
)
from .gateway import (
    ANALYTICS_TABLE,
    ARTICLES_TABLE,
    CATEGORIES_TABLE,
    COMMENTS_TABLE,
    TAGS_TABLE,
    BackendGateway,
)
from .view_model import DashboardViewModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListQuery:
    """One read issued by the loader and the view-model list it fills."""
    list_name: str
    table: str
    columns: str
    order_by: str
    descending: bool
    convert: Callable[[dict], Any]


# Issued in this order, one after another
LIST_QUERIES = (
    ListQuery("categories", CATEGORIES_TABLE, "*", "priority", False, row_to_category),
    ListQuery(
        "articles",
        ARTICLES_TABLE,
        "*, categories(name, slug), profiles(full_name, email)",
        "created_at",
        True,
        row_to_article,
    ),
    ListQuery("tags", TAGS_TABLE, "*", "name", False, row_to_tag),
    ListQuery(
        "comments",
        COMMENTS_TABLE,
        "*, profiles(full_name, email)",
        "created_at",
        True,
        row_to_comment,
    ),
    ListQuery("analytics", ANALYTICS_TABLE, "*", "date", True, row_to_analytics),
)


class DataLoader:
    """Populates every list in the view model from the backend."""

    def __init__(self, gateway: BackendGateway, view: DashboardViewModel):
        self.gateway = gateway
        self.view = view

    async def load_all(self, generation: int | None = None) -> None:
        """
        Run the five list queries sequentially.

        A query the backend rejects yields an empty list and does not stop
        the remaining queries. Lists replaced before an unexpected failure
        keep their new contents.

        Args:
            generation: Load generation the results belong to; defaults to
                the view model's current generation
        """
        if generation is None:
            generation = self.view.generation
        try:
            for query in LIST_QUERIES:
                rows = await self.gateway.select_rows(
                    query.table,
                    columns=query.columns,
                    order_by=query.order_by,
                    descending=query.descending,
                )
                self.view.replace_list(
                    query.list_name,
                    [query.convert(row) for row in rows or []],
                    generation,
                )
        except Exception as e:
            logger.error(f"Error loading data: {e}")
