"""
Minimal MCP-style tool server: exposes the guide's four lookup tools
(listPlants, getPlantDetails, listArticles, getArticleDetails) through a
standardized HTTP interface, so external agents can browse the same content.
"""

import logging
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from app.agent.tools import (
    AGENT_TOOLS,
    get_article_details,
    get_plant_details,
    list_articles,
    list_plants,
)
from app.core.errors import ContentNotFoundError
from app.services.content_store import get_content_store

logger = logging.getLogger(__name__)

mcp_router = APIRouter(tags=["mcp"])


class GetByIdRequest(BaseModel):
    """Request body for the detail tools."""
    id: str


@mcp_router.get(
    "/tools",
    summary="MCP tool discovery",
    description="List the tool declarations (name, description, JSON-schema parameters).",
)
def mcp_list_tools() -> dict[str, list[dict[str, Any]]]:
    return {"tools": [t["function"] for t in AGENT_TOOLS]}


# --- plants ---

@mcp_router.post(
    "/tools/listPlants",
    summary="MCP tool: listPlants",
    description="List all plants as {id, name} pairs in store order.",
)
def mcp_list_plants() -> dict[str, list[dict[str, Any]]]:
    logger.info("MCP tool called: listPlants")
    plants = list_plants(get_content_store())
    return {"plants": [p.model_dump() for p in plants]}


@mcp_router.post(
    "/tools/getPlantDetails",
    summary="MCP tool: getPlantDetails",
    description="Fetch a plant's name, scientific name and description by id.",
)
def mcp_get_plant_details(body: GetByIdRequest) -> dict[str, Any]:
    """Returns {plant: null} if the id does not resolve."""
    logger.info("MCP tool called: getPlantDetails")
    try:
        plant = get_plant_details(get_content_store(), body.id)
    except ContentNotFoundError:
        return {"plant": None}
    return {"plant": plant.to_tool_output()}


# --- articles ---

@mcp_router.post(
    "/tools/listArticles",
    summary="MCP tool: listArticles",
    description="List all articles as {id, title} pairs in store order.",
)
def mcp_list_articles() -> dict[str, list[dict[str, Any]]]:
    logger.info("MCP tool called: listArticles")
    articles = list_articles(get_content_store())
    return {"articles": [a.model_dump() for a in articles]}


@mcp_router.post(
    "/tools/getArticleDetails",
    summary="MCP tool: getArticleDetails",
    description="Fetch an article's title and content by id.",
)
def mcp_get_article_details(body: GetByIdRequest) -> dict[str, Any]:
    """Returns {article: null} if the id does not resolve."""
    logger.info("MCP tool called: getArticleDetails")
    try:
        article = get_article_details(get_content_store(), body.id)
    except ContentNotFoundError:
        return {"article": None}
    return {"article": article.model_dump()}
