"""
Agent tools: definitions and execution for the guide's tool-calling loop.

Tools: listPlants, getPlantDetails, listArticles, getArticleDetails.
All four are read-only lookups against the content store. List tools return
only {id, label} pairs; detail tools are fetched once the model has picked an item.
"""

import logging
import threading
from typing import Any

from app.core.errors import ContentNotFoundError
from app.schemas.content import ArticleDetail, ArticleSummary, PlantDetail, PlantSummary
from app.services.content_store import ContentStore

logger = logging.getLogger(__name__)

LIST_PLANTS = "listPlants"
GET_PLANT_DETAILS = "getPlantDetails"
LIST_ARTICLES = "listArticles"
GET_ARTICLE_DETAILS = "getArticleDetails"

# OpenAI function-calling format: list of tool definitions
AGENT_TOOLS = [
    {
        "type": "function",
        "function": {
            "name": LIST_PLANTS,
            "description": "List all available medicinal plants. Returns id and name for each plant. Use to browse, or to find the id of a plant before calling getPlantDetails.",
            "parameters": {"type": "object", "properties": {}},
        },
    },
    {
        "type": "function",
        "function": {
            "name": GET_PLANT_DETAILS,
            "description": "Get detailed information for a specific plant by its ID: bilingual name, scientific name, and description.",
            "parameters": {
                "type": "object",
                "properties": {
                    "id": {
                        "type": "string",
                        "description": "Plant id (from listPlants results)",
                    }
                },
                "required": ["id"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": LIST_ARTICLES,
            "description": "List all available articles and educational content. Returns id and title for each article.",
            "parameters": {"type": "object", "properties": {}},
        },
    },
    {
        "type": "function",
        "function": {
            "name": GET_ARTICLE_DETAILS,
            "description": "Get the full content for a specific article by its ID: bilingual title and content.",
            "parameters": {
                "type": "object",
                "properties": {
                    "id": {
                        "type": "string",
                        "description": "Article id (from listArticles results)",
                    }
                },
                "required": ["id"],
            },
        },
    },
]

TOOL_NAMES: tuple[str, ...] = tuple(t["function"]["name"] for t in AGENT_TOOLS)


def list_plants(store: ContentStore) -> list[PlantSummary]:
    plants = store.list_plants()
    return [PlantSummary(id=p.id, name=p.name.primary) for p in plants]


def get_plant_details(store: ContentStore, plant_id: str) -> PlantDetail:
    """Raises ContentNotFoundError if the id does not resolve."""
    plant = store.get_plant(plant_id) if plant_id else None
    if plant is None:
        raise ContentNotFoundError("Plant not found", plant_id)
    return PlantDetail.from_plant(plant)


def list_articles(store: ContentStore) -> list[ArticleSummary]:
    articles = store.list_articles()
    return [ArticleSummary(id=a.id, title=a.title.primary) for a in articles]


def get_article_details(store: ContentStore, article_id: str) -> ArticleDetail:
    """Raises ContentNotFoundError if the id does not resolve."""
    article = store.get_article(article_id) if article_id else None
    if article is None:
        raise ContentNotFoundError("Article not found", article_id)
    return ArticleDetail.from_article(article)


class GuideTools:
    """
    The four tools bound to one content store, for one agent call.

    `declarations` is what the runtime sends to the model; `execute` is what it
    calls back. `calls` records tool names in invocation order. After `cancel()`
    (the caller stopped waiting) `execute` refuses further calls and the runtime
    stops looping at its next step.
    """

    declarations = AGENT_TOOLS

    def __init__(self, store: ContentStore) -> None:
        self.store = store
        self.calls: list[str] = []
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def list_plants(self) -> list[PlantSummary]:
        return list_plants(self.store)

    def get_plant_details(self, plant_id: str) -> PlantDetail:
        return get_plant_details(self.store, plant_id)

    def list_articles(self) -> list[ArticleSummary]:
        return list_articles(self.store)

    def get_article_details(self, article_id: str) -> ArticleDetail:
        return get_article_details(self.store, article_id)

    def execute(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        """
        Execute a tool by name with the given arguments. Returns JSON-serializable data for the LLM.
        Raises ContentNotFoundError from the detail tools, ValueError for unknown tools
        and RuntimeError once the call has been cancelled.
        """
        if self.cancelled:
            raise RuntimeError(f"Tool call {name} after cancellation")
        args = arguments or {}
        logger.info("[tools] execute name=%r arguments=%r", name, args)
        if name not in TOOL_NAMES:
            raise ValueError(f"Unknown tool: {name}")
        self.calls.append(name)

        if name == LIST_PLANTS:
            return [p.model_dump() for p in self.list_plants()]

        if name == GET_PLANT_DETAILS:
            plant_id = str(args.get("id") or "").strip()
            return self.get_plant_details(plant_id).to_tool_output()

        if name == LIST_ARTICLES:
            return [a.model_dump() for a in self.list_articles()]

        article_id = str(args.get("id") or "").strip()
        return self.get_article_details(article_id).model_dump()
