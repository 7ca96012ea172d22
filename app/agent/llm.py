"""
Agent LLM runtime: OpenAI (primary) or Hugging Face router (fallback), with tools.

chat_with_tools makes one chat-completions call. LangGraphToolRuntime owns the
whole tool-calling loop (model -> tools -> model ...) and returns the model's
final structured output; callers see a single generate() call.
"""

import json
import logging
import re
from typing import Any, Callable, Protocol, TypedDict

import httpx
from langgraph.graph import END, StateGraph
from openai import OpenAI

from app.agent.tools import GuideTools
from app.core.config import (
    AGENT_MAX_TOKENS,
    HF_API_KEY,
    HF_CHAT_URL,
    HF_LLM_MODEL,
    LLM_API_TIMEOUT,
    MAX_AGENTIC_ROUNDS,
    OPENAI_API_KEY,
    OPENAI_LLM_MODEL,
)
from app.core.errors import AnswerValidationError, ContentNotFoundError, RuntimeUnavailableError

logger = logging.getLogger(__name__)

ChatFn = Callable[[list[dict[str, Any]], list[dict[str, Any]], int], tuple[str | None, list[dict[str, Any]] | None]]

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class ToolRuntime(Protocol):
    def generate(
        self,
        system_instruction: str,
        tools: GuideTools,
        query: str,
        history: list[dict[str, str]] | None = None,
    ) -> dict[str, Any] | None: ...


def _parse_tool_calls(raw_tool_calls: list[Any]) -> list[dict[str, Any]]:
    """Normalize SDK objects or raw JSON dicts to [{"id", "name", "arguments"}]."""
    tool_calls = []
    for tc in raw_tool_calls or []:
        if isinstance(tc, dict):
            fid = tc.get("id") or ""
            fn = tc.get("function") or {}
            fname = fn.get("name") or ""
            fargs = fn.get("arguments") or "{}"
        else:
            fid = getattr(tc, "id", None) or ""
            fn = getattr(tc, "function", None)
            if not fn:
                continue
            fname = getattr(fn, "name", None) or ""
            fargs = getattr(fn, "arguments", None) or "{}"
        if not fname:
            continue
        try:
            args = json.loads(fargs) if isinstance(fargs, str) else fargs
        except json.JSONDecodeError:
            args = {}
        tool_calls.append({"id": fid, "name": fname, "arguments": args if isinstance(args, dict) else {}})
    return tool_calls


def _call_openai(messages: list[dict[str, Any]], tools: list[dict[str, Any]], max_tokens: int):
    client = OpenAI(api_key=OPENAI_API_KEY, timeout=LLM_API_TIMEOUT)
    response = client.chat.completions.create(
        model=OPENAI_LLM_MODEL,
        messages=messages,
        tools=tools,
        max_tokens=max_tokens,
        response_format={"type": "json_object"},
    )
    msg = response.choices[0].message if response.choices else None
    if not msg:
        return None, []
    return getattr(msg, "content", None), getattr(msg, "tool_calls", None) or []


def _call_hf(messages: list[dict[str, Any]], tools: list[dict[str, Any]], max_tokens: int):
    headers = {"Authorization": f"Bearer {HF_API_KEY}", "Content-Type": "application/json"}
    payload = {
        "model": HF_LLM_MODEL,
        "messages": messages,
        "tools": tools,
        "tool_choice": "auto",
        "max_tokens": max_tokens,
    }
    with httpx.Client(timeout=LLM_API_TIMEOUT) as client:
        response = client.post(HF_CHAT_URL, json=payload, headers=headers)
    if response.status_code != 200:
        raise RuntimeUnavailableError(f"HF LLM error {response.status_code}: {response.text[:200]}")
    choices = response.json().get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return None, []
    msg = choices[0].get("message") or {}
    return msg.get("content"), msg.get("tool_calls") or []


def chat_with_tools(
    messages: list[dict[str, Any]],
    tools: list[dict[str, Any]],
    max_tokens: int = AGENT_MAX_TOKENS,
) -> tuple[str | None, list[dict[str, Any]] | None]:
    """
    Call the chat model with tools. Uses OpenAI when OPENAI_API_KEY is set, else Hugging Face.
    Returns (content, tool_calls). If tool_calls is non-empty, the caller should execute
    them and call again with tool results; content without tool_calls is the final answer.
    Raises RuntimeUnavailableError when no provider is configured.
    """
    if OPENAI_API_KEY:
        content, raw_tool_calls = _call_openai(messages, tools, max_tokens)
        provider = "openai"
    elif HF_API_KEY:
        content, raw_tool_calls = _call_hf(messages, tools, max_tokens)
        provider = "hf"
    else:
        raise RuntimeUnavailableError("No LLM provider configured (set OPENAI_API_KEY or HF_API_KEY)")
    content = (content or "").strip() or None
    tool_calls = _parse_tool_calls(raw_tool_calls)
    if tool_calls:
        logger.info("[llm:chat_with_tools:%s] OUT tool_calls=%s", provider, [t["name"] for t in tool_calls])
    if content:
        logger.info("[llm:chat_with_tools:%s] OUT content_len=%d", provider, len(content))
    return content, tool_calls or None


def parse_structured_output(content: str | None) -> dict[str, Any]:
    """
    Parse the model's final reply as a JSON object. A surrounding ```json fence is tolerated.
    Raises AnswerValidationError when the reply is empty or not a JSON object.
    """
    text = (content or "").strip()
    if not text:
        raise AnswerValidationError("empty model output")
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise AnswerValidationError(f"model output is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise AnswerValidationError(f"model output is {type(data).__name__}, expected object")
    return data


class ToolLoopState(TypedDict):
    messages: list
    pending_tool_calls: list
    final_content: str | None
    rounds: int


class LangGraphToolRuntime:
    """
    Tool-calling runtime: call_model -> (run_tools -> call_model)* -> END.

    Tool failures are reported back to the model as {"error": ...} tool messages so
    it can pick another id or leave the item out. Returns None when the model
    never produced a final reply within max_rounds.
    """

    def __init__(
        self,
        chat: ChatFn | None = None,
        max_rounds: int = MAX_AGENTIC_ROUNDS,
        max_tokens: int = AGENT_MAX_TOKENS,
    ) -> None:
        self.chat = chat or chat_with_tools
        self.max_rounds = max_rounds
        self.max_tokens = max_tokens

    def _build_graph(self, tools: GuideTools):
        def call_model(state: ToolLoopState) -> dict:
            rounds = state["rounds"] + 1
            logger.info("[llm:call_model] IN  round=%d messages=%d", rounds, len(state["messages"]))
            content, tool_calls = self.chat(state["messages"], tools.declarations, self.max_tokens)
            if not tool_calls:
                return {"final_content": content, "pending_tool_calls": [], "rounds": rounds}
            assistant_msg: dict = {"role": "assistant", "content": content or ""}
            assistant_msg["tool_calls"] = [
                {"id": tc["id"], "type": "function", "function": {"name": tc["name"], "arguments": json.dumps(tc.get("arguments") or {})}}
                for tc in tool_calls
            ]
            return {
                "messages": state["messages"] + [assistant_msg],
                "pending_tool_calls": tool_calls,
                "rounds": rounds,
            }

        def run_tools(state: ToolLoopState) -> dict:
            messages = list(state["messages"])
            for tc in state["pending_tool_calls"]:
                name = tc.get("name", "")
                try:
                    result = tools.execute(name, tc.get("arguments") or {})
                except ContentNotFoundError as e:
                    logger.info("[llm:run_tools] %s not found id=%r", name, e.item_id)
                    result = {"error": e.message, "id": e.item_id}
                except ValueError as e:
                    logger.warning("[llm:run_tools] %s rejected: %s", name, e)
                    result = {"error": str(e)}
                messages.append({
                    "role": "tool",
                    "tool_call_id": tc.get("id", ""),
                    "content": json.dumps(result, ensure_ascii=False),
                })
            return {"messages": messages, "pending_tool_calls": []}

        def route_after_model(state: ToolLoopState) -> str:
            if not state["pending_tool_calls"]:
                return END
            if tools.cancelled:
                logger.warning("[llm:route_after_model] cancelled; dropping pending tool calls")
                return END
            if state["rounds"] >= self.max_rounds:
                logger.warning("[llm:route_after_model] max_rounds=%d reached with pending tool calls", self.max_rounds)
                return END
            return "run_tools"

        def route_after_tools(state: ToolLoopState) -> str:
            if tools.cancelled:
                logger.warning("[llm:route_after_tools] cancelled; not calling the model again")
                return END
            return "call_model"

        graph = StateGraph(ToolLoopState)
        graph.add_node("call_model", call_model)
        graph.add_node("run_tools", run_tools)
        graph.set_entry_point("call_model")
        graph.add_conditional_edges("call_model", route_after_model)
        graph.add_conditional_edges("run_tools", route_after_tools)
        return graph.compile()

    def generate(
        self,
        system_instruction: str,
        tools: GuideTools,
        query: str,
        history: list[dict[str, str]] | None = None,
    ) -> dict[str, Any] | None:
        messages: list[dict] = [{"role": "system", "content": system_instruction}]
        messages.extend(history or [])
        messages.append({"role": "user", "content": query})
        initial: ToolLoopState = {
            "messages": messages,
            "pending_tool_calls": [],
            "final_content": None,
            "rounds": 0,
        }
        final = self._build_graph(tools).invoke(
            initial, config={"recursion_limit": 2 * self.max_rounds + 5}
        )
        content = final.get("final_content")
        logger.info("[llm:generate] OUT rounds=%d tools_used=%s has_content=%s", final.get("rounds", 0), tools.calls, bool(content))
        if content is None:
            return None
        return parse_structured_output(content)
