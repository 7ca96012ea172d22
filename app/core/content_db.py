"""
Lightweight SQLite content store for plants and articles.

Creates data/content.db (relative to project root) unless another path is given.
Tables: plants, articles (id, data, created_at). `data` holds the record as JSON
with camelCase keys; bilingual fields are written as {"primary", "secondary"}
and {"en", "es"} is accepted on read.
"""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from app.schemas.content import Article, Plant

logger = logging.getLogger(__name__)

# Project root (one level above app/)
_ROOT = Path(__file__).resolve().parent.parent.parent
_TABLES = ("plants", "articles")


class SQLiteContentStore:
    """Read side used by the agent tools, plus the upserts used by the seed script."""

    def __init__(self, db_path: str | Path) -> None:
        path = Path(db_path)
        self.db_path = path if path.is_absolute() else _ROOT / path

    def _get_conn(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(str(self.db_path))

    def init_db(self) -> None:
        """Create the plants and articles tables if they do not exist."""
        conn = self._get_conn()
        try:
            for table in _TABLES:
                conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        seq INTEGER PRIMARY KEY AUTOINCREMENT,
                        id TEXT NOT NULL UNIQUE,
                        data TEXT NOT NULL,
                        created_at TEXT NOT NULL
                    )
                    """
                )
            conn.commit()
        finally:
            conn.close()

    def _upsert(self, table: str, item_id: str, data: dict) -> None:
        self.init_db()
        conn = self._get_conn()
        try:
            conn.execute(
                f"INSERT INTO {table} (id, data, created_at) VALUES (?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET data = excluded.data",
                (item_id, json.dumps(data), datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()
            logger.info("[content_db] upserted %s id=%s", table, item_id)
        finally:
            conn.close()

    def _all(self, table: str) -> list[dict]:
        self.init_db()
        conn = self._get_conn()
        try:
            cur = conn.execute(f"SELECT data FROM {table} ORDER BY seq ASC")
            return [json.loads(row[0]) for row in cur.fetchall()]
        finally:
            conn.close()

    def _one(self, table: str, item_id: str) -> dict | None:
        self.init_db()
        conn = self._get_conn()
        try:
            row = conn.execute(f"SELECT data FROM {table} WHERE id = ?", (item_id,)).fetchone()
        finally:
            conn.close()
        return json.loads(row[0]) if row else None

    def upsert_plant(self, plant: Plant) -> None:
        self._upsert("plants", plant.id, plant.model_dump(by_alias=True, exclude_none=True))

    def upsert_article(self, article: Article) -> None:
        self._upsert("articles", article.id, article.model_dump(by_alias=True, exclude_none=True))

    def list_plants(self) -> list[Plant]:
        """Return all plants, oldest first."""
        return [Plant.model_validate(d) for d in self._all("plants")]

    def get_plant(self, plant_id: str) -> Plant | None:
        data = self._one("plants", plant_id)
        return Plant.model_validate(data) if data else None

    def list_articles(self) -> list[Article]:
        """Return all articles, oldest first."""
        return [Article.model_validate(d) for d in self._all("articles")]

    def get_article(self, article_id: str) -> Article | None:
        data = self._one("articles", article_id)
        return Article.model_validate(data) if data else None

    def clear_all(self) -> None:
        """Delete all rows from both tables."""
        self.init_db()
        conn = self._get_conn()
        try:
            for table in _TABLES:
                conn.execute(f"DELETE FROM {table}")
            conn.commit()
            logger.info("[content_db] cleared plants and articles")
        finally:
            conn.close()
