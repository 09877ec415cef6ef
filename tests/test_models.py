"""Tests for buccaneer.models."""

import json

import pytest
from pydantic import ValidationError

from buccaneer.models import AssistantReply, ChatMessage, ErrorKind, ToolCall, ToolResult


class TestChatMessage:
    def test_defaults(self) -> None:
        m = ChatMessage(role="user", content="Ahoy")
        assert m.tool_call_id is None
        assert m.name is None
        assert m.tool_calls == []

    def test_invalid_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ChatMessage(role="narrator", content="x")


class TestToolResult:
    def test_success_message_is_json_payload(self) -> None:
        call = ToolCall(id="c1", name="get_item_info", arguments={"name": "Grog"})
        msg = ToolResult.success(call, {"name": "Grog", "value": 2}).to_message()
        assert msg.role == "tool"
        assert msg.tool_call_id == "c1"
        assert msg.name == "get_item_info"
        assert json.loads(msg.content) == {"name": "Grog", "value": 2}

    def test_failure_message_is_prefixed(self) -> None:
        call = ToolCall(id="c2", name="get_item_info")
        result = ToolResult.failure(call, ErrorKind.NOT_FOUND, "Item not found: cutlass")
        assert not result.ok
        assert result.error_kind == ErrorKind.NOT_FOUND
        assert result.to_message().content == "Error: Item not found: cutlass"

    def test_non_ascii_payload_kept_readable(self) -> None:
        call = ToolCall(id="c3", name="get_item_info")
        result = ToolResult.success(call, {"name": "Café Rum"})
        assert "Café Rum" in result.outcome_text()


class TestAssistantReply:
    def test_to_message_keeps_tool_calls(self) -> None:
        reply = AssistantReply(
            content="checking",
            tool_calls=[ToolCall(id="a", name="listItemTypes")],
        )
        msg = reply.to_message()
        assert msg.role == "assistant"
        assert msg.content == "checking"
        assert [c.name for c in msg.tool_calls] == ["listItemTypes"]
