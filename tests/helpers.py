"""Test helpers: a scripted LLM and reply builders."""

from __future__ import annotations

from typing import Any

from buccaneer.models import AssistantReply, ChatMessage, ToolCall


def text(content: str) -> AssistantReply:
    return AssistantReply(content=content)


def tools(*calls: tuple[str, dict[str, Any]], content: str = "") -> AssistantReply:
    """Reply requesting the given (tool name, arguments) calls, ids left for the orchestrator."""
    return AssistantReply(
        content=content,
        tool_calls=[ToolCall(name=name, arguments=args) for name, args in calls],
    )


class StubLLM:
    """Returns scripted replies in order; an Exception in the script is raised instead.

    Records every call as (stage, messages, tools) for assertions.
    """

    def __init__(self, *script: AssistantReply | Exception) -> None:
        self._script = list(script)
        self.calls: list[tuple[str, list[ChatMessage], list[dict] | None]] = []

    async def __call__(
        self,
        stage: str,
        messages: list[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
    ) -> AssistantReply:
        self.calls.append((stage, list(messages), tools))
        if not self._script:
            raise AssertionError(f"StubLLM script exhausted at call {len(self.calls)} ({stage})")
        step = self._script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    def stages(self) -> list[str]:
        return [c[0] for c in self.calls]

    def count(self, stage: str) -> int:
        return sum(1 for c in self.calls if c[0] == stage)
