#!/usr/bin/env python3
"""
Seed the content SQLite DB for demos or tests.

Creates data/content.db (if missing), ensures the plants and articles tables
exist, and upserts seed records. Use --reset to clear existing rows first, or
--file to load records from a JSON file shaped {"plants": [...], "articles": [...]}.

Run from project root:

    python scripts/seed_content_db.py
    python scripts/seed_content_db.py --reset
    python scripts/seed_content_db.py --file exports/content.json
"""

import argparse
import json
import sys
from pathlib import Path

# Project root on path so "app" resolves
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from app.core.config import CONTENT_DB_PATH
from app.core.content_db import SQLiteContentStore
from app.schemas.content import Article, Plant

# Records in the stored shape (bilingual {"en", "es"} fields, camelCase keys).
SEED_PLANTS = [
    {
        "id": "chaya",
        "name": {"en": "Chaya", "es": "Chaya"},
        "scientificName": "Cnidoscolus aconitifolius",
        "description": {
            "en": "A leafy green used for centuries in Mayan cooking and medicine, valued as a tonic for digestion and circulation.",
            "es": "Una hoja verde usada durante siglos en la cocina y medicina maya, apreciada como tónico para la digestión y la circulación.",
        },
        "tags": ["digestion", "circulation"],
    },
    {
        "id": "ruda",
        "name": {"en": "Rue", "es": "Ruda"},
        "scientificName": "Ruta graveolens",
        "description": {
            "en": "An aromatic herb used in traditional cleansing rituals and for easing menstrual cramps.",
            "es": "Una hierba aromática usada en limpias tradicionales y para aliviar cólicos menstruales.",
        },
        "tags": ["cramps", "ritual"],
    },
]

SEED_ARTICLES = [
    {
        "id": "mayan-herbal-traditions",
        "title": {"en": "An Introduction to Mayan Herbal Traditions", "es": "Introducción a las tradiciones herbolarias mayas"},
        "content": {
            "en": "<p>Mayan healers (h-men) combine plant knowledge with ritual and prayer.</p>",
            "es": "<p>Los curanderos mayas (h-men) combinan el conocimiento de las plantas con rituales y oraciones.</p>",
        },
        "relatedPlants": ["chaya", "ruda"],
    },
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the content DB (data/content.db) with plants and articles.")
    parser.add_argument("--reset", action="store_true", help="Clear all existing rows before seeding.")
    parser.add_argument("--file", type=Path, help="JSON file with {\"plants\": [...], \"articles\": [...]}.")
    parser.add_argument("--db", default=CONTENT_DB_PATH, help="Database path (default: CONTENT_DB_PATH).")
    args = parser.parse_args()

    plants, articles = SEED_PLANTS, SEED_ARTICLES
    if args.file:
        data = json.loads(args.file.read_text(encoding="utf-8"))
        plants, articles = data.get("plants") or [], data.get("articles") or []

    store = SQLiteContentStore(args.db)
    store.init_db()
    if args.reset:
        store.clear_all()
        print("Cleared existing plants and articles.")

    for record in plants:
        store.upsert_plant(Plant.model_validate(record))
    for record in articles:
        store.upsert_article(Article.model_validate(record))

    print(f"Seeded {len(plants)} plant(s) and {len(articles)} article(s) into {store.db_path}.")


if __name__ == "__main__":
    main()
