"""Core domain models.

The orchestrator, the gateway and the tool executor all exchange these types.
Pydantic is used for validation and serialisation at every data boundary.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

Role = Literal["system", "user", "assistant", "tool"]


class ToolCall(BaseModel):
    """A tool invocation proposed by the model. Untrusted until validated."""

    id: str = ""  # assigned by the orchestrator when the backend omits it
    name: str
    # A str means the backend sent an argument payload that was not a JSON object
    arguments: dict[str, Any] | str = Field(default_factory=dict)


class ChatMessage(BaseModel):
    """A single entry in the conversation transcript."""

    role: Role
    content: str = ""
    tool_call_id: str | None = None
    name: str | None = None  # tool name, on role="tool" messages
    tool_calls: list[ToolCall] = Field(default_factory=list)


class ErrorKind(str, Enum):
    ARGUMENT = "argument"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    UNKNOWN_TOOL = "unknown_tool"
    EXECUTION = "execution"


class ToolResult(BaseModel):
    """Outcome of one ToolCall: exactly one of payload / error is meaningful."""

    tool_call_id: str
    name: str
    ok: bool
    payload: Any = None
    error_kind: ErrorKind | None = None
    error: str | None = None

    @classmethod
    def success(cls, call: ToolCall, payload: Any) -> ToolResult:
        return cls(tool_call_id=call.id, name=call.name, ok=True, payload=payload)

    @classmethod
    def failure(cls, call: ToolCall, kind: ErrorKind, message: str) -> ToolResult:
        return cls(
            tool_call_id=call.id, name=call.name, ok=False,
            error_kind=kind, error=message,
        )

    def outcome_text(self) -> str:
        """Text that re-enters the model's context for this result."""
        if self.ok:
            return json.dumps(self.payload, ensure_ascii=False)
        return f"Error: {self.error}"

    def to_message(self) -> ChatMessage:
        return ChatMessage(
            role="tool",
            content=self.outcome_text(),
            tool_call_id=self.tool_call_id,
            name=self.name,
        )


class AssistantReply(BaseModel):
    """What the Model Gateway returns for one generation."""

    content: str = ""
    tool_calls: list[ToolCall] = Field(default_factory=list)

    def to_message(self) -> ChatMessage:
        return ChatMessage(role="assistant", content=self.content, tool_calls=self.tool_calls)


class ChatResult(BaseModel):
    """Result of one orchestration run."""

    result: str
    messages: list[ChatMessage]
    rounds: int = 0
    tool_calls_made: int = 0
    error: str | None = None  # set only for infrastructure failures
