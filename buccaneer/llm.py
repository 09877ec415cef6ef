"""LLM client — HTTP connection to a chat-completion backend.

The orchestrator injects an LLM callable matching the protocol:

    async def __call__(self, stage, messages, tools=None) -> AssistantReply: ...

`stage` identifies which orchestration step is calling ("tools" for the
tool-bound round call, "narrative" for synthesis). `tools` is the list of
tool schemas to offer; when it is None the backend is given no tool-call
capability at all.

Two implementations are provided:

    HttpChatLLM  — real HTTP client, supports Ollama and OpenAI-compatible
                   chat backends. Selected by provider_format.
    EchoChatLLM  — answers with the last user message and never calls tools.
                   Useful for smoke-testing the server wiring without a model.

Production code constructs an HttpChatLLM from Settings and passes it to
run_chat(). Tests use a scripted stub instead.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal, Protocol

import httpx

from buccaneer.models import AssistantReply, ChatMessage, ToolCall

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol — every LLM implementation must match this signature
# ---------------------------------------------------------------------------

class ChatLLM(Protocol):
    async def __call__(
        self,
        stage: str,
        messages: list[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
    ) -> AssistantReply: ...


# ---------------------------------------------------------------------------
# HttpChatLLM — connects to a real backend
# ---------------------------------------------------------------------------

ProviderFormat = Literal["ollama", "openai"]


class HttpChatLLM:
    """Async HTTP client for chat backends with tool calling.

    Supported formats:
      "ollama"  — POST /api/chat  {"model", "messages", "tools", "stream": false}
                  Response: {"message": {"content": ..., "tool_calls": [...]}}
                  Tool call arguments arrive as JSON objects.
      "openai"  — POST /v1/chat/completions  {"model", "messages", "tools"}
                  Response: {"choices": [{"message": {...}}]}
                  Tool call arguments arrive as JSON-encoded strings.

    Args:
        provider_url:    Base URL of the backend, e.g. "http://localhost:11434".
        model:           Model identifier sent with every request.
        api_key:         Bearer token, or empty string if not required.
        provider_format: Wire format to use. Defaults to "ollama".
        timeout:         HTTP timeout in seconds. Defaults to 120.
    """

    def __init__(
        self,
        provider_url: str,
        model: str,
        api_key: str = "",
        provider_format: ProviderFormat = "ollama",
        timeout: float = 120.0,
    ) -> None:
        self._base_url = provider_url.rstrip("/")
        self._model = model
        self._api_key = api_key
        self._format = provider_format
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _build_request(
        self, messages: list[ChatMessage], tools: list[dict[str, Any]] | None
    ) -> tuple[str, dict]:
        """Return (url, body) for the configured format."""
        if self._format == "openai":
            url = f"{self._base_url}/v1/chat/completions"
            body: dict = {
                "model": self._model,
                "messages": [_openai_message(m) for m in messages],
            }
        else:
            url = f"{self._base_url}/api/chat"
            body = {
                "model": self._model,
                "messages": [_ollama_message(m) for m in messages],
                "stream": False,
            }
        if tools:
            body["tools"] = tools
        return url, body

    def _parse_response(self, data: Any) -> AssistantReply:
        """Extract the reply message from the response body."""
        if not isinstance(data, dict):
            raise LLMError("Unexpected response format from LLM backend")

        if self._format == "openai":
            choices = data.get("choices")
            if (
                not isinstance(choices, list) or not choices
                or not isinstance(choices[0], dict)
                or not isinstance(choices[0].get("message"), dict)
            ):
                raise LLMError("Unexpected response format from OpenAI-compatible backend")
            message = choices[0]["message"]
        else:
            message = data.get("message")
            if not isinstance(message, dict):
                raise LLMError("Unexpected response format from Ollama backend")

        content = message.get("content") or ""
        if not isinstance(content, str):
            raise LLMError("LLM backend returned non-text message content")
        calls = [_parse_tool_call(raw) for raw in message.get("tool_calls") or []]
        return AssistantReply(content=content, tool_calls=calls)

    async def __call__(
        self,
        stage: str,
        messages: list[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
    ) -> AssistantReply:
        url, body = self._build_request(messages, tools)
        logger.debug(
            "llm call stage=%s url=%s messages=%d tools=%d",
            stage, url, len(messages), len(tools or []),
        )

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, json=body, headers=self._headers())
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise LLMError(f"Cannot connect to LLM backend at {self._base_url}") from e
        except httpx.HTTPStatusError as e:
            raise LLMError(
                f"LLM backend returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise LLMError(f"LLM backend timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            # ReadError, RemoteProtocolError, WriteError, ...
            raise LLMError(
                f"LLM backend request failed: {type(e).__name__}: {e}"
            ) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMError("LLM backend returned invalid JSON") from e

        reply = self._parse_response(data)
        logger.debug(
            "llm response stage=%s len=%d tool_calls=%d",
            stage, len(reply.content), len(reply.tool_calls),
        )
        return reply


def _parse_tool_call(raw: Any) -> ToolCall:
    if not isinstance(raw, dict) or not isinstance(raw.get("function"), dict):
        raise LLMError("Malformed tool call in LLM response")
    fn = raw["function"]
    name = fn.get("name")
    if not isinstance(name, str) or not name:
        raise LLMError("Tool call without a function name in LLM response")

    arguments = fn.get("arguments")
    if arguments is None:
        arguments = {}
    elif isinstance(arguments, str):
        # OpenAI sends a JSON string; keep the raw text if it does not decode to an object
        try:
            decoded = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, dict):
            arguments = decoded
    elif not isinstance(arguments, dict):
        arguments = json.dumps(arguments)

    return ToolCall(id=str(raw.get("id") or ""), name=name, arguments=arguments)


def _encoded_arguments(call: ToolCall) -> str:
    if isinstance(call.arguments, str):
        return call.arguments
    return json.dumps(call.arguments)


def _ollama_message(msg: ChatMessage) -> dict[str, Any]:
    out: dict[str, Any] = {"role": msg.role, "content": msg.content}
    if msg.tool_calls:
        out["tool_calls"] = [
            {
                "function": {
                    "name": c.name,
                    "arguments": c.arguments if isinstance(c.arguments, dict) else {},
                }
            }
            for c in msg.tool_calls
        ]
    if msg.role == "tool" and msg.name:
        out["tool_name"] = msg.name
    return out


def _openai_message(msg: ChatMessage) -> dict[str, Any]:
    out: dict[str, Any] = {"role": msg.role, "content": msg.content}
    if msg.tool_calls:
        out["tool_calls"] = [
            {
                "id": c.id,
                "type": "function",
                "function": {"name": c.name, "arguments": _encoded_arguments(c)},
            }
            for c in msg.tool_calls
        ]
    if msg.role == "tool":
        out["tool_call_id"] = msg.tool_call_id
        if msg.name:
            out["name"] = msg.name
    return out


# ---------------------------------------------------------------------------
# EchoChatLLM — answers with the last user message; no network calls
# ---------------------------------------------------------------------------

class EchoChatLLM:
    """Returns the latest user message as the reply. Never requests tools.

    Lets you verify the HTTP wiring (request validation, orchestration,
    response shape) end-to-end without a running model.
    """

    async def __call__(
        self,
        stage: str,
        messages: list[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
    ) -> AssistantReply:
        logger.debug("EchoChatLLM stage=%s messages=%d", stage, len(messages))
        for msg in reversed(messages):
            if msg.role == "user":
                return AssistantReply(content=msg.content)
        return AssistantReply()


# ---------------------------------------------------------------------------
# LLMError — raised by HttpChatLLM for all connection and protocol failures
# ---------------------------------------------------------------------------

class LLMError(RuntimeError):
    """Raised when the LLM backend cannot be reached or returns an error."""
