"""Response synthesis — turns the loop's exit state into the text returned to the caller."""

from __future__ import annotations

import logging

from buccaneer.llm import ChatLLM, LLMError
from buccaneer.models import ChatMessage, ToolResult

from .prompts import APOLOGY, fallback_dump, synthesis_prompt

logger = logging.getLogger(__name__)


def direct_answer(content: str) -> str:
    """The model answered without tools: use its text verbatim unless it is blank."""
    if not content or not content.strip():
        logger.warning("model returned an empty direct answer")
        return APOLOGY
    return content


def original_query(messages: list[ChatMessage]) -> str:
    """Most recent user message of the incoming transcript."""
    for msg in reversed(messages):
        if msg.role == "user":
            return msg.content
    return ""


async def narrate(
    original: list[ChatMessage],
    results: list[ToolResult],
    llm: ChatLLM,
) -> str:
    """One narrative-only model call grounded in the final round's tool results.

    Falls back to a plain dump of the results when the call fails or the
    model returns nothing, so the caller always gets non-empty text.
    """
    context = [m for m in original if m.role == "system"]
    context.append(ChatMessage(
        role="user", content=synthesis_prompt(original_query(original), results),
    ))

    try:
        reply = await llm("narrative", context, None)
    except LLMError as e:
        logger.warning("narrative synthesis failed: %s", e)
        return fallback_dump(results)

    if not reply.content.strip():
        logger.warning("narrative synthesis returned empty content")
        return fallback_dump(results)
    return reply.content
