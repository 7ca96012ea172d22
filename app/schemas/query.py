"""Schemas for the guide agent and the query endpoint."""

from typing import Literal

from pydantic import BaseModel, Field

from app.core.config import MIN_QUESTION_LENGTH


class HistoryTurn(BaseModel):
    """One prior turn of the conversation, supplied (and persisted) by the caller."""

    role: Literal["user", "agent"] = Field(..., description="Who said it.")
    text: str = Field(..., description="What was said.")


class UserQuery(BaseModel):
    """Input to answer_user_query."""

    text: str = Field(..., description="The user question or symptoms.")
    history: list[HistoryTurn] | None = Field(None, description="Prior turns, oldest first.")


class UserQueryOutput(BaseModel):
    """Output of answer_user_query."""

    answer: str = Field(..., min_length=1, description="The answer to the user query, formatted in Markdown.")


class QueryRequest(BaseModel):
    """Request body for POST /query. History is kept by the client and sent with each request."""

    question: str = Field(
        ...,
        min_length=MIN_QUESTION_LENGTH,
        description="User question or description of symptoms.",
    )
    history: list[HistoryTurn] | None = Field(None, description="Prior turns of this conversation, oldest first.")


class QueryResponse(BaseModel):
    """Response for POST /query."""

    answer: str = Field(..., description="Final Markdown answer from the guide.")
    tools_used: list[str] = Field(default_factory=list, description="Tools the model called (e.g. listPlants, getPlantDetails).")
