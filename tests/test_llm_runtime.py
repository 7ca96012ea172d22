"""
Tests for the LangGraph tool loop and structured output parsing.

A scripted chat function stands in for OpenAI/HF, so no API key is needed.
"""

import json
from unittest.mock import patch

import pytest

from app.agent.llm import (
    LangGraphToolRuntime,
    _parse_tool_calls,
    chat_with_tools,
    parse_structured_output,
)
from app.agent.tools import AGENT_TOOLS, GuideTools
from app.core.errors import AnswerValidationError, RuntimeUnavailableError
from app.services.content_store import InMemoryContentStore


class ScriptedChat:
    """Returns the scripted (content, tool_calls) replies in order and keeps the messages it saw."""

    def __init__(self, replies: list) -> None:
        self.replies = list(replies)
        self.seen: list[list[dict]] = []

    def __call__(self, messages, tools, max_tokens):
        self.seen.append([dict(m) for m in messages])
        return self.replies.pop(0)


def _tool_call(call_id: str, name: str, **arguments) -> dict:
    return {"id": call_id, "name": name, "arguments": arguments}


class TestLangGraphToolRuntime:
    """call_model -> run_tools -> call_model loop."""

    def test_not_found_is_fed_back_and_model_recovers(self, store: InMemoryContentStore) -> None:
        chat = ScriptedChat([
            (None, [_tool_call("c1", "getPlantDetails", id="missing")]),
            (None, [_tool_call("c2", "getPlantDetails", id="p1")]),
            ('{"answer": "**Chaya** is a leafy green used for digestion."}', None),
        ])
        tools = GuideTools(store)
        result = LangGraphToolRuntime(chat=chat).generate("system", tools, "What is Chaya good for?")

        assert result == {"answer": "**Chaya** is a leafy green used for digestion."}
        assert tools.calls == ["getPlantDetails", "getPlantDetails"]
        error_msg = chat.seen[1][-1]
        assert error_msg["role"] == "tool"
        assert error_msg["tool_call_id"] == "c1"
        assert json.loads(error_msg["content"]) == {"error": "Plant not found", "id": "missing"}
        detail_msg = chat.seen[2][-1]
        assert json.loads(detail_msg["content"])["description"]["primary"].startswith("A leafy green used for")

    def test_assistant_tool_call_message_precedes_results(self, store: InMemoryContentStore) -> None:
        chat = ScriptedChat([
            (None, [_tool_call("c1", "listPlants"), _tool_call("c2", "listArticles")]),
            ('{"answer": "Here is what we have."}', None),
        ])
        LangGraphToolRuntime(chat=chat).generate("system", GuideTools(store), "What do you have?")
        roles = [m["role"] for m in chat.seen[1]]
        assert roles == ["system", "user", "assistant", "tool", "tool"]
        assert [tc["function"]["name"] for tc in chat.seen[1][2]["tool_calls"]] == ["listPlants", "listArticles"]

    def test_history_sits_between_system_and_query(self, store: InMemoryContentStore) -> None:
        chat = ScriptedChat([('{"answer": "Hello again!"}', None)])
        history = [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Hello!"}]
        LangGraphToolRuntime(chat=chat).generate("system", GuideTools(store), "Remember me?", history)
        assert chat.seen[0] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello!"},
            {"role": "user", "content": "Remember me?"},
        ]

    def test_unknown_tool_is_reported_to_model(self, store: InMemoryContentStore) -> None:
        chat = ScriptedChat([
            (None, [_tool_call("c1", "web_search", query="chaya")]),
            ('{"answer": "Only plants and articles."}', None),
        ])
        result = LangGraphToolRuntime(chat=chat).generate("system", GuideTools(store), "search the web")
        assert result == {"answer": "Only plants and articles."}
        assert "Unknown tool" in json.loads(chat.seen[1][-1]["content"])["error"]

    def test_round_limit_returns_none(self, store: InMemoryContentStore) -> None:
        chat = ScriptedChat([(None, [_tool_call(f"c{i}", "listPlants")]) for i in range(3)])
        result = LangGraphToolRuntime(chat=chat, max_rounds=3).generate("system", GuideTools(store), "loop")
        assert result is None
        assert len(chat.seen) == 3

    def test_cancel_stops_the_loop(self, store: InMemoryContentStore) -> None:
        tools = GuideTools(store)

        def chat(messages, declarations, max_tokens):
            chat.count += 1
            tools.cancel()
            return None, [_tool_call("c1", "listPlants")]

        chat.count = 0
        result = LangGraphToolRuntime(chat=chat).generate("system", tools, "loop")
        assert result is None
        assert chat.count == 1
        assert tools.calls == []


    def test_non_json_final_reply_raises(self, store: InMemoryContentStore) -> None:
        chat = ScriptedChat([("Chaya is great.", None)])
        with pytest.raises(AnswerValidationError):
            LangGraphToolRuntime(chat=chat).generate("system", GuideTools(store), "Chaya?")


class TestParseStructuredOutput:
    def test_plain_json(self) -> None:
        assert parse_structured_output('{"answer": "# Chaya"}') == {"answer": "# Chaya"}

    def test_code_fence(self) -> None:
        assert parse_structured_output('```json\n{"answer": "ok"}\n```') == {"answer": "ok"}

    def test_empty(self) -> None:
        with pytest.raises(AnswerValidationError):
            parse_structured_output(None)

    def test_not_an_object(self) -> None:
        with pytest.raises(AnswerValidationError):
            parse_structured_output('["answer"]')


def test_parse_tool_calls_from_raw_json() -> None:
    raw = [
        {"id": "c1", "type": "function", "function": {"name": "getPlantDetails", "arguments": '{"id": "p1"}'}},
        {"id": "c2", "type": "function", "function": {"name": "listPlants", "arguments": "not json"}},
        {"id": "c3", "type": "function", "function": {"name": "", "arguments": "{}"}},
    ]
    assert _parse_tool_calls(raw) == [
        {"id": "c1", "name": "getPlantDetails", "arguments": {"id": "p1"}},
        {"id": "c2", "name": "listPlants", "arguments": {}},
    ]


def test_chat_with_tools_without_provider_raises() -> None:
    with patch("app.agent.llm.OPENAI_API_KEY", ""), patch("app.agent.llm.HF_API_KEY", ""):
        with pytest.raises(RuntimeUnavailableError):
            chat_with_tools([{"role": "user", "content": "hi"}], AGENT_TOOLS)


def test_chat_with_tools_uses_hf_when_no_openai_key() -> None:
    with patch("app.agent.llm.OPENAI_API_KEY", ""), patch("app.agent.llm.HF_API_KEY", "hf-test"), patch(
        "app.agent.llm._call_hf",
        return_value=(None, [{"id": "c1", "function": {"name": "listPlants", "arguments": "{}"}}]),
    ) as mock_hf:
        content, tool_calls = chat_with_tools([{"role": "user", "content": "hi"}], AGENT_TOOLS)
    mock_hf.assert_called_once()
    assert content is None
    assert tool_calls == [{"id": "c1", "name": "listPlants", "arguments": {}}]
