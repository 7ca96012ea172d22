"""
API route aggregator: register endpoints and delegate to the guide agent.
"""

import logging

from fastapi import APIRouter

from app.agent.guide import answer_user_query_with_tools
from app.schemas.query import QueryRequest, QueryResponse, UserQuery

logger = logging.getLogger(__name__)
router = APIRouter()


# --- System ---

@router.get("/", tags=["system"])
def root():
    return {"status": "Mayan Medicine Guide backend running"}


@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Query ---

@router.post(
    "/query",
    response_model=QueryResponse,
    tags=["query"],
    summary="Ask the medicine guide",
    description="Send a question or symptoms (and optional prior turns); receive a Markdown answer and the tools used. 422 on invalid input. Agent failures return a fallback answer, not an error.",
)
def post_query(body: QueryRequest) -> QueryResponse:
    logger.info("[api:post_query] IN  question=%r history_len=%d", body.question, len(body.history or []))
    output, tools_used = answer_user_query_with_tools(UserQuery(text=body.question, history=body.history))
    logger.info("[api:post_query] OUT tools_used=%s answer_len=%d", tools_used, len(output.answer))
    return QueryResponse(answer=output.answer, tools_used=tools_used)
