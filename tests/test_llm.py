"""Tests for buccaneer.llm — HttpChatLLM and EchoChatLLM."""

import json
import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock, patch

from buccaneer.llm import EchoChatLLM, HttpChatLLM, LLMError
from buccaneer.models import ChatMessage, ToolCall

TOOLS = [{"type": "function", "function": {"name": "listItemTypes", "description": "", "parameters": {}}}]


def _user(content: str = "Describe the harbor.") -> list[ChatMessage]:
    return [ChatMessage(role="user", content=content)]


def _mock_response(body, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body
    resp.raise_for_status = MagicMock(
        side_effect=None if status < 400 else httpx.HTTPStatusError(
            "", request=MagicMock(), response=resp
        )
    )
    return resp


# ---------------------------------------------------------------------------
# EchoChatLLM
# ---------------------------------------------------------------------------

class TestEchoChatLLM:
    async def test_returns_last_user_message(self) -> None:
        llm = EchoChatLLM()
        messages = [
            ChatMessage(role="system", content="narrate"),
            ChatMessage(role="user", content="first"),
            ChatMessage(role="assistant", content="reply"),
            ChatMessage(role="user", content="ahoy"),
        ]
        reply = await llm("tools", messages, TOOLS)
        assert reply.content == "ahoy"
        assert reply.tool_calls == []

    async def test_no_user_message_gives_empty_reply(self) -> None:
        reply = await EchoChatLLM()("narrative", [ChatMessage(role="system", content="x")])
        assert reply.content == ""


# ---------------------------------------------------------------------------
# HttpChatLLM — Ollama format
# ---------------------------------------------------------------------------

class TestHttpChatLLMOllama:
    @pytest.fixture
    def llm(self) -> HttpChatLLM:
        return HttpChatLLM(provider_url="http://localhost:11434", model="gpt-oss:20b")

    async def test_happy_path(self, llm: HttpChatLLM) -> None:
        body = {"message": {"role": "assistant", "content": "Gulls wheel over the masts."}}
        mock_post = AsyncMock(return_value=_mock_response(body))
        with patch("httpx.AsyncClient.post", mock_post):
            reply = await llm("tools", _user())
        assert reply.content == "Gulls wheel over the masts."
        assert reply.tool_calls == []

    async def test_posts_to_chat_endpoint_without_streaming(self, llm: HttpChatLLM) -> None:
        mock_post = AsyncMock(return_value=_mock_response({"message": {"content": "ok"}}))
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("tools", _user(), TOOLS)
        assert mock_post.call_args[0][0] == "http://localhost:11434/api/chat"
        sent = mock_post.call_args.kwargs["json"]
        assert sent["model"] == "gpt-oss:20b"
        assert sent["stream"] is False
        assert sent["tools"] == TOOLS
        assert sent["messages"] == [{"role": "user", "content": "Describe the harbor."}]

    async def test_no_tools_key_when_tools_absent(self, llm: HttpChatLLM) -> None:
        mock_post = AsyncMock(return_value=_mock_response({"message": {"content": "ok"}}))
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("narrative", _user(), None)
        assert "tools" not in mock_post.call_args.kwargs["json"]

    async def test_parses_tool_calls_with_object_arguments(self, llm: HttpChatLLM) -> None:
        body = {"message": {"content": "", "tool_calls": [
            {"function": {"name": "get_item_info", "arguments": {"name": "cutlass"}}},
        ]}}
        mock_post = AsyncMock(return_value=_mock_response(body))
        with patch("httpx.AsyncClient.post", mock_post):
            reply = await llm("tools", _user(), TOOLS)
        assert reply.tool_calls == [ToolCall(id="", name="get_item_info", arguments={"name": "cutlass"})]

    async def test_tool_messages_carry_tool_name(self, llm: HttpChatLLM) -> None:
        history = _user() + [
            ChatMessage(role="assistant", tool_calls=[
                ToolCall(id="call_0_0", name="get_item_info", arguments={"name": "Grog"}),
            ]),
            ChatMessage(role="tool", tool_call_id="call_0_0", name="get_item_info", content="{}"),
        ]
        mock_post = AsyncMock(return_value=_mock_response({"message": {"content": "ok"}}))
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("tools", history, TOOLS)
        sent = mock_post.call_args.kwargs["json"]["messages"]
        assert sent[1]["tool_calls"] == [
            {"function": {"name": "get_item_info", "arguments": {"name": "Grog"}}}
        ]
        assert sent[2] == {"role": "tool", "content": "{}", "tool_name": "get_item_info"}

    async def test_bearer_token_sent_when_api_key_set(self) -> None:
        llm = HttpChatLLM(provider_url="http://localhost:11434", model="m", api_key="secret")
        mock_post = AsyncMock(return_value=_mock_response({"message": {"content": "ok"}}))
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("tools", _user())
        assert mock_post.call_args.kwargs["headers"].get("Authorization") == "Bearer secret"

    async def test_no_auth_header_when_no_api_key(self, llm: HttpChatLLM) -> None:
        mock_post = AsyncMock(return_value=_mock_response({"message": {"content": "ok"}}))
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("tools", _user())
        assert "Authorization" not in mock_post.call_args.kwargs["headers"]

    async def test_trailing_slash_stripped_from_url(self) -> None:
        llm = HttpChatLLM(provider_url="http://localhost:11434/", model="m")
        mock_post = AsyncMock(return_value=_mock_response({"message": {"content": "ok"}}))
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("tools", _user())
        assert mock_post.call_args[0][0] == "http://localhost:11434/api/chat"

    async def test_connect_error_raises_llm_error(self, llm: HttpChatLLM) -> None:
        mock_post = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(LLMError, match="Cannot connect to LLM backend at http://localhost:11434"):
                await llm("tools", _user())

    async def test_timeout_raises_llm_error(self, llm: HttpChatLLM) -> None:
        mock_post = AsyncMock(side_effect=httpx.TimeoutException("timeout"))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(LLMError, match="timed out"):
                await llm("tools", _user())

    @pytest.mark.parametrize("error", [
        httpx.ReadError("connection reset"),
        httpx.RemoteProtocolError("server disconnected"),
        httpx.WriteError("broken pipe"),
    ])
    async def test_other_transport_errors_raise_llm_error(self, llm: HttpChatLLM, error) -> None:
        mock_post = AsyncMock(side_effect=error)
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(LLMError, match=f"request failed: {type(error).__name__}"):
                await llm("tools", _user())

    async def test_http_error_raises_llm_error(self, llm: HttpChatLLM) -> None:
        mock_post = AsyncMock(return_value=_mock_response({}, status=503))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(LLMError, match="HTTP 503"):
                await llm("tools", _user())

    async def test_invalid_json_raises_llm_error(self, llm: HttpChatLLM) -> None:
        resp = _mock_response(None)
        resp.json.side_effect = json.JSONDecodeError("bad", "<html>", 0)
        with patch("httpx.AsyncClient.post", AsyncMock(return_value=resp)):
            with pytest.raises(LLMError, match="invalid JSON"):
                await llm("tools", _user())

    async def test_malformed_response_raises_llm_error(self, llm: HttpChatLLM) -> None:
        mock_post = AsyncMock(return_value=_mock_response({"unexpected": "format"}))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(LLMError, match="Unexpected response format"):
                await llm("tools", _user())

    async def test_nameless_tool_call_raises_llm_error(self, llm: HttpChatLLM) -> None:
        body = {"message": {"content": "", "tool_calls": [{"function": {"arguments": {}}}]}}
        mock_post = AsyncMock(return_value=_mock_response(body))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(LLMError, match="without a function name"):
                await llm("tools", _user())


# ---------------------------------------------------------------------------
# HttpChatLLM — OpenAI format
# ---------------------------------------------------------------------------

class TestHttpChatLLMOpenAI:
    @pytest.fixture
    def llm(self) -> HttpChatLLM:
        return HttpChatLLM(
            provider_url="http://localhost:8080",
            provider_format="openai",
            model="mistral-7b",
        )

    async def test_posts_to_correct_url(self, llm: HttpChatLLM) -> None:
        body = {"choices": [{"message": {"content": "ok"}}]}
        mock_post = AsyncMock(return_value=_mock_response(body))
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("tools", _user())
        assert mock_post.call_args[0][0] == "http://localhost:8080/v1/chat/completions"
        sent = mock_post.call_args.kwargs["json"]
        assert sent["model"] == "mistral-7b"
        assert "stream" not in sent

    async def test_happy_path(self, llm: HttpChatLLM) -> None:
        body = {"choices": [{"message": {"content": "A stormy night."}}]}
        mock_post = AsyncMock(return_value=_mock_response(body))
        with patch("httpx.AsyncClient.post", mock_post):
            reply = await llm("tools", _user())
        assert reply.content == "A stormy night."

    async def test_null_content_with_tool_calls(self, llm: HttpChatLLM) -> None:
        body = {"choices": [{"message": {"content": None, "tool_calls": [
            {"id": "abc", "type": "function",
             "function": {"name": "createEnemy", "arguments": '{"category": "mythical"}'}},
        ]}}]}
        mock_post = AsyncMock(return_value=_mock_response(body))
        with patch("httpx.AsyncClient.post", mock_post):
            reply = await llm("tools", _user(), TOOLS)
        assert reply.content == ""
        assert reply.tool_calls == [
            ToolCall(id="abc", name="createEnemy", arguments={"category": "mythical"})
        ]

    async def test_undecodable_arguments_kept_as_text(self, llm: HttpChatLLM) -> None:
        body = {"choices": [{"message": {"tool_calls": [
            {"id": "x", "function": {"name": "getShopItems", "arguments": "{type: weapon"}},
        ]}}]}
        mock_post = AsyncMock(return_value=_mock_response(body))
        with patch("httpx.AsyncClient.post", mock_post):
            reply = await llm("tools", _user(), TOOLS)
        assert reply.tool_calls[0].arguments == "{type: weapon"

    async def test_tool_history_encoded_with_string_arguments(self, llm: HttpChatLLM) -> None:
        history = _user() + [
            ChatMessage(role="assistant", tool_calls=[
                ToolCall(id="call_0_0", name="get_item_info", arguments={"name": "Grog"}),
            ]),
            ChatMessage(role="tool", tool_call_id="call_0_0", name="get_item_info", content="{}"),
        ]
        body = {"choices": [{"message": {"content": "ok"}}]}
        mock_post = AsyncMock(return_value=_mock_response(body))
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("tools", history, TOOLS)
        sent = mock_post.call_args.kwargs["json"]["messages"]
        call = sent[1]["tool_calls"][0]
        assert call["id"] == "call_0_0"
        assert call["type"] == "function"
        assert json.loads(call["function"]["arguments"]) == {"name": "Grog"}
        assert sent[2]["tool_call_id"] == "call_0_0"

    async def test_malformed_response_raises_llm_error(self, llm: HttpChatLLM) -> None:
        body = {"message": {"content": "ollama format accidentally"}}
        mock_post = AsyncMock(return_value=_mock_response(body))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(LLMError, match="Unexpected response format"):
                await llm("tools", _user())

    async def test_empty_choices_raises_llm_error(self, llm: HttpChatLLM) -> None:
        mock_post = AsyncMock(return_value=_mock_response({"choices": []}))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(LLMError, match="Unexpected response format"):
                await llm("tools", _user())
