"""
Content store access for the agent tools.

Responsibility: Define the read interface the tools depend on (plants, articles)
and provide the default store. The real document database is an external
collaborator; the SQLite store stands in for it locally.
"""

import logging
from functools import lru_cache
from typing import Iterable, Protocol

from app.core.config import CONTENT_DB_PATH
from app.core.content_db import SQLiteContentStore
from app.schemas.content import Article, Plant

logger = logging.getLogger(__name__)


class ContentStore(Protocol):
    def list_plants(self) -> list[Plant]: ...

    def get_plant(self, plant_id: str) -> Plant | None: ...

    def list_articles(self) -> list[Article]: ...

    def get_article(self, article_id: str) -> Article | None: ...


class InMemoryContentStore:
    """Dict-backed store; iteration order is insertion order."""

    def __init__(self, plants: Iterable[Plant | dict] = (), articles: Iterable[Article | dict] = ()) -> None:
        self._plants: dict[str, Plant] = {}
        self._articles: dict[str, Article] = {}
        for p in plants:
            plant = p if isinstance(p, Plant) else Plant.model_validate(p)
            self._plants[plant.id] = plant
        for a in articles:
            article = a if isinstance(a, Article) else Article.model_validate(a)
            self._articles[article.id] = article

    def list_plants(self) -> list[Plant]:
        return list(self._plants.values())

    def get_plant(self, plant_id: str) -> Plant | None:
        return self._plants.get(plant_id)

    def list_articles(self) -> list[Article]:
        return list(self._articles.values())

    def get_article(self, article_id: str) -> Article | None:
        return self._articles.get(article_id)


@lru_cache(maxsize=1)
def get_content_store() -> ContentStore:
    """Process-wide default store (SQLite at CONTENT_DB_PATH)."""
    store = SQLiteContentStore(CONTENT_DB_PATH)
    logger.info("[content_store] using SQLite store at %s", store.db_path)
    return store
