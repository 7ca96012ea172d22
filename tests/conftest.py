"""Shared fixtures: a small in-memory content store."""

import pytest

from app.services.content_store import InMemoryContentStore

PLANTS = [
    {
        "id": "p1",
        "name": {"en": "Chaya", "es": "Chaya"},
        "scientificName": "Cnidoscolus aconitifolius",
        "description": {"en": "A leafy green used for digestion and circulation.", "es": "Una hoja verde."},
    },
    {
        "id": "p2",
        "name": {"en": "Rue", "es": "Ruda"},
        "description": {"en": "An aromatic herb used for cramps."},
    },
]

ARTICLES = [
    {
        "id": "a1",
        "title": {"en": "Mayan Herbal Traditions", "es": "Tradiciones herbolarias mayas"},
        "content": {"en": "<p>Healers combine plants and ritual.</p>", "es": "<p>Curanderos.</p>"},
    },
]


@pytest.fixture
def store() -> InMemoryContentStore:
    return InMemoryContentStore(plants=PLANTS, articles=ARTICLES)
