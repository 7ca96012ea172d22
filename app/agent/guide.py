"""
Mayan medicine guide: answer a user question from the plant and article tools.

answer_user_query is the only entry point the rest of the app calls. It sends the
system instruction, the four tools, the question and any prior turns to the
runtime in one call, then validates the {"answer": str} reply. It never raises:
runtime errors, timeouts, empty or malformed output all become FALLBACK_ANSWER.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any

from pydantic import ValidationError

from app.agent.llm import LangGraphToolRuntime, ToolRuntime
from app.agent.prompts import SYSTEM_INSTRUCTION
from app.agent.tools import GuideTools
from app.core.config import AGENT_TIMEOUT_SECONDS
from app.schemas.query import HistoryTurn, UserQuery, UserQueryOutput
from app.services.content_store import ContentStore, get_content_store

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = (
    "I'm sorry, I encountered a problem while trying to find an answer. "
    "Please try rephrasing your question."
)

# HistoryTurn.role -> chat message role
_ROLE_MAP = {"user": "user", "agent": "assistant"}


def _fallback() -> UserQueryOutput:
    return UserQueryOutput(answer=FALLBACK_ANSWER)


def map_history(history: list[HistoryTurn] | None) -> list[dict[str, str]]:
    """Map prior turns to chat messages, oldest first. Turns with no text are dropped."""
    messages = []
    for turn in history or []:
        content = (turn.text or "").strip()
        if not content:
            continue
        messages.append({"role": _ROLE_MAP[turn.role], "content": content})
    return messages


def _coerce_query(query: UserQuery | dict | str) -> UserQuery:
    if isinstance(query, UserQuery):
        return query
    if isinstance(query, str):
        return UserQuery(text=query)
    return UserQuery.model_validate(query)


def _generate_with_timeout(runtime: ToolRuntime, timeout: float, *args: Any) -> Any:
    """
    Run runtime.generate on a worker thread and wait at most `timeout` seconds.

    Python cannot kill the worker: on timeout it keeps running until its current
    LLM HTTP request returns (bounded by LLM_API_TIMEOUT). The caller cancels the
    GuideTools it passed in so the tool loop stops at its next step.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="guide-agent")
    try:
        future = executor.submit(runtime.generate, *args)
        return future.result(timeout=timeout)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def answer_user_query_with_tools(
    query: UserQuery | dict | str,
    *,
    runtime: ToolRuntime | None = None,
    store: ContentStore | None = None,
    timeout: float | None = None,
) -> tuple[UserQueryOutput, list[str]]:
    """Like answer_user_query, but also returns the names of the tools the model called."""
    try:
        q = _coerce_query(query)
    except ValidationError as e:
        logger.warning("[guide] invalid query %r: %s", query, e)
        return _fallback(), []
    text = q.text.strip()
    if not text:
        logger.warning("[guide] empty query; returning fallback")
        return _fallback(), []

    history = map_history(q.history)
    limit = timeout if timeout is not None else AGENT_TIMEOUT_SECONDS
    logger.info("[guide] START query=%r history_len=%d timeout=%.1fs", text, len(history), limit)

    tools = GuideTools(store if store is not None else get_content_store())
    runtime = runtime if runtime is not None else LangGraphToolRuntime()
    try:
        raw = _generate_with_timeout(runtime, limit, SYSTEM_INSTRUCTION, tools, text, history)
    except FuturesTimeoutError:
        logger.warning("[guide] runtime timed out after %.1fs", limit)
        tools.cancel()
        return _fallback(), list(tools.calls)
    except Exception:
        logger.exception("[guide] runtime failed")
        return _fallback(), list(tools.calls)

    if raw is None:
        logger.warning("[guide] runtime returned no output")
        return _fallback(), list(tools.calls)
    try:
        output = UserQueryOutput.model_validate(raw)
    except ValidationError as e:
        logger.warning("[guide] output failed validation: %s", e)
        return _fallback(), list(tools.calls)
    if not output.answer.strip():
        logger.warning("[guide] runtime returned a blank answer")
        return _fallback(), list(tools.calls)

    logger.info("[guide] END tools_used=%s answer_len=%d", tools.calls, len(output.answer))
    return output, list(tools.calls)


def answer_user_query(
    query: UserQuery | dict | str,
    *,
    runtime: ToolRuntime | None = None,
    store: ContentStore | None = None,
    timeout: float | None = None,
) -> UserQueryOutput:
    """
    Answer a question about Mayan medicinal plants and articles.

    query: UserQuery, a {"text", "history"} dict, or the question text.
    runtime: tool-calling runtime (default LangGraphToolRuntime over OpenAI/HF).
    store: content store the tools read from (default SQLite store).
    timeout: seconds to wait for the runtime (default AGENT_TIMEOUT_SECONDS).
    Always returns an answer; FALLBACK_ANSWER when none could be produced.
    """
    output, _ = answer_user_query_with_tools(query, runtime=runtime, store=store, timeout=timeout)
    return output
