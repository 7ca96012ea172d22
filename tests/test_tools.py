"""
Unit tests for the four guide tools and the GuideTools executor.
"""

import pytest

from app.agent.tools import (
    AGENT_TOOLS,
    TOOL_NAMES,
    GuideTools,
    get_article_details,
    get_plant_details,
    list_articles,
    list_plants,
)
from app.core.errors import ContentNotFoundError
from app.services.content_store import InMemoryContentStore


def test_declarations_cover_the_four_tools() -> None:
    assert TOOL_NAMES == ("listPlants", "getPlantDetails", "listArticles", "getArticleDetails")
    for tool in AGENT_TOOLS:
        assert tool["type"] == "function"
        assert tool["function"]["parameters"]["type"] == "object"
    detail = {t["function"]["name"]: t["function"] for t in AGENT_TOOLS}
    assert detail["getPlantDetails"]["parameters"]["required"] == ["id"]
    assert detail["getArticleDetails"]["parameters"]["required"] == ["id"]


class TestListTools:
    """listPlants / listArticles return {id, label} pairs in store order."""

    def test_list_plants_primary_names_in_order(self, store: InMemoryContentStore) -> None:
        result = list_plants(store)
        assert [p.model_dump() for p in result] == [
            {"id": "p1", "name": "Chaya"},
            {"id": "p2", "name": "Rue"},
        ]

    def test_list_articles_primary_titles(self, store: InMemoryContentStore) -> None:
        assert [a.model_dump() for a in list_articles(store)] == [
            {"id": "a1", "title": "Mayan Herbal Traditions"},
        ]

    def test_empty_store(self) -> None:
        empty = InMemoryContentStore()
        assert list_plants(empty) == []
        assert list_articles(empty) == []


class TestDetailTools:
    """getPlantDetails / getArticleDetails project records or raise ContentNotFoundError."""

    def test_plant_detail_projection(self, store: InMemoryContentStore) -> None:
        detail = get_plant_details(store, "p1")
        assert detail.id == "p1"
        assert detail.name.primary == "Chaya"
        assert detail.scientific_name == "Cnidoscolus aconitifolius"
        assert detail.description.primary.startswith("A leafy green used for")

    def test_plant_without_secondary_or_scientific_name(self, store: InMemoryContentStore) -> None:
        detail = get_plant_details(store, "p2")
        assert detail.scientific_name is None
        assert detail.description.secondary == ""

    def test_article_detail_projection(self, store: InMemoryContentStore) -> None:
        detail = get_article_details(store, "a1")
        assert detail.title.secondary == "Tradiciones herbolarias mayas"
        assert "<p>" in detail.content.primary

    def test_unknown_plant_raises(self, store: InMemoryContentStore) -> None:
        with pytest.raises(ContentNotFoundError) as exc:
            get_plant_details(store, "missing")
        assert exc.value.message == "Plant not found"
        assert exc.value.item_id == "missing"

    def test_unknown_article_raises(self, store: InMemoryContentStore) -> None:
        with pytest.raises(ContentNotFoundError):
            get_article_details(store, "missing")

    def test_blank_id_is_not_found(self, store: InMemoryContentStore) -> None:
        with pytest.raises(ContentNotFoundError):
            get_plant_details(store, "")


class TestGuideToolsExecute:
    """GuideTools.execute dispatches by wire name and logs calls."""

    def test_execute_returns_plain_data(self, store: InMemoryContentStore) -> None:
        tools = GuideTools(store)
        plants = tools.execute("listPlants")
        detail = tools.execute("getPlantDetails", {"id": "p1"})
        assert plants[0] == {"id": "p1", "name": "Chaya"}
        assert detail["description"]["primary"].startswith("A leafy green used for")
        assert tools.calls == ["listPlants", "getPlantDetails"]

    def test_execute_strips_id(self, store: InMemoryContentStore) -> None:
        tools = GuideTools(store)
        assert tools.execute("getArticleDetails", {"id": "  a1 "})["id"] == "a1"

    def test_execute_not_found_propagates(self, store: InMemoryContentStore) -> None:
        tools = GuideTools(store)
        with pytest.raises(ContentNotFoundError):
            tools.execute("getPlantDetails", {"id": "nope"})
        assert tools.calls == ["getPlantDetails"]

    def test_unknown_tool_raises_value_error(self, store: InMemoryContentStore) -> None:
        tools = GuideTools(store)
        with pytest.raises(ValueError):
            tools.execute("web_search", {"query": "x"})
        assert tools.calls == []

    def test_instances_do_not_share_call_log(self, store: InMemoryContentStore) -> None:
        first, second = GuideTools(store), GuideTools(store)
        first.execute("listArticles")
        assert second.calls == []

    def test_plant_details_wire_keys(self, store: InMemoryContentStore) -> None:
        tools = GuideTools(store)
        detail = tools.execute("getPlantDetails", {"id": "p1"})
        assert set(detail) == {"id", "name", "scientificName", "description"}
        assert detail["scientificName"] == "Cnidoscolus aconitifolius"
        assert set(detail["name"]) == {"primary", "secondary"}

    def test_plant_details_omit_missing_scientific_name(self, store: InMemoryContentStore) -> None:
        detail = GuideTools(store).execute("getPlantDetails", {"id": "p2"})
        assert set(detail) == {"id", "name", "description"}

    def test_execute_after_cancel_raises(self, store: InMemoryContentStore) -> None:
        tools = GuideTools(store)
        tools.cancel()
        assert tools.cancelled
        with pytest.raises(RuntimeError):
            tools.execute("listPlants")
        assert tools.calls == []
