"""Tool-augmented response orchestrator — answers one chat request.

Round flow (round index starts at 0, at most max_rounds + 1 model calls):
  1. Call the LLM in tool-bound mode with the transcript. A gateway failure
     ends the request at once with an "LLM Error" result; it is never retried.
  2. No tool calls in the reply → the reply text is the answer (blank → apology).
  3. Otherwise execute every call in order, append the assistant message and
     one tool message per result to the transcript.
  4. Classify the round: creation succeeded, target already existed, any
     failure, any discovery/listing call.
  5. Continue while budget remains and the round failed, an earlier failure
     is still unresolved, the model is exploring, or it just created
     something. A creation or already-exists result resolves earlier failures.
  6. When continuing, append one guidance message chosen by the classification.
  7. Otherwise narrate from the final round's tool results only.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from buccaneer.llm import ChatLLM, LLMError
from buccaneer.models import AssistantReply, ChatMessage, ChatResult, ErrorKind, ToolCall, ToolResult
from buccaneer.tools import ToolExecutor, lookup, tool_schemas

from .prompts import (
    ALREADY_EXISTS_GUIDANCE,
    CREATION_GUIDANCE,
    DISCOVERY_GUIDANCE,
    FAILURE_GUIDANCE,
)
from .synthesis import direct_answer, narrate

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 6


@dataclass(frozen=True)
class RoundOutcome:
    successful_creation: bool
    discovered_already_exists: bool
    has_failures: bool
    used_discovery: bool


def classify_round(calls: list[ToolCall], results: list[ToolResult]) -> RoundOutcome:
    def _creates(r: ToolResult) -> bool:
        descriptor = lookup(r.name)
        return descriptor is not None and descriptor.creates

    def _discovers(c: ToolCall) -> bool:
        descriptor = lookup(c.name)
        return descriptor is not None and descriptor.discovers

    return RoundOutcome(
        successful_creation=any(r.ok and _creates(r) for r in results),
        discovered_already_exists=any(
            r.error_kind == ErrorKind.ALREADY_EXISTS for r in results
        ),
        has_failures=any(not r.ok for r in results),
        used_discovery=any(_discovers(c) for c in calls),
    )


def guidance_for(outcome: RoundOutcome) -> str:
    if outcome.successful_creation:
        return CREATION_GUIDANCE
    if outcome.discovered_already_exists:
        return ALREADY_EXISTS_GUIDANCE
    if outcome.has_failures:
        return FAILURE_GUIDANCE
    return DISCOVERY_GUIDANCE


def _with_ids(calls: list[ToolCall], round_index: int) -> list[ToolCall]:
    return [
        c if c.id else c.model_copy(update={"id": f"call_{round_index}_{i}"})
        for i, c in enumerate(calls)
    ]


async def run_chat(
    messages: list[ChatMessage],
    *,
    llm: ChatLLM,
    executor: ToolExecutor,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
    time_budget: float | None = None,
    system_guidance: str | None = None,
) -> ChatResult:
    """Run the bounded tool/retry loop for one request and return the final text.

    `messages` is the caller's transcript; it is never mutated. `system_guidance`
    is prepended to the working transcript only. `time_budget` (seconds) stops
    the loop from starting a new round once exceeded; a round in flight always
    finishes.
    """
    original = list(messages)
    transcript = list(messages)
    if system_guidance:
        transcript.insert(0, ChatMessage(role="system", content=system_guidance))

    deadline = time.monotonic() + time_budget if time_budget is not None else None
    tools = tool_schemas()
    unresolved_failures = False
    last_results: list[ToolResult] = []
    calls_made = 0
    round_index = 0

    while True:
        try:
            reply = await llm("tools", transcript, tools)
        except LLMError as e:
            logger.error("LLM call failed in round %d: %s", round_index, e)
            return ChatResult(
                result=f"LLM Error: {e}.",
                messages=transcript if round_index else original,
                rounds=round_index,
                tool_calls_made=calls_made,
                error=str(e),
            )

        if not reply.tool_calls:
            logger.info("round %d: direct answer, no tools requested", round_index)
            transcript.append(reply.to_message())
            return ChatResult(
                result=direct_answer(reply.content),
                messages=transcript,
                rounds=round_index + 1,
                tool_calls_made=calls_made,
            )

        calls = _with_ids(reply.tool_calls, round_index)
        logger.info(
            "round %d: executing %d tool(s): %s",
            round_index, len(calls), ", ".join(c.name for c in calls),
        )
        results = executor.execute_all(calls)
        calls_made += len(calls)
        last_results = results

        transcript.append(AssistantReply(content=reply.content, tool_calls=calls).to_message())
        transcript.extend(r.to_message() for r in results)

        outcome = classify_round(calls, results)
        if outcome.has_failures:
            unresolved_failures = True
        if outcome.successful_creation or outcome.discovered_already_exists:
            unresolved_failures = False

        wants_more = (
            outcome.has_failures
            or unresolved_failures
            or outcome.used_discovery
            or outcome.successful_creation
        )
        logger.debug("round %d outcome=%s unresolved=%s", round_index, outcome, unresolved_failures)

        if not wants_more:
            break
        if round_index >= max_rounds:
            logger.warning("retry budget of %d rounds exhausted", max_rounds)
            break
        if deadline is not None and time.monotonic() >= deadline:
            logger.warning("time budget of %ss exhausted after round %d", time_budget, round_index)
            break

        transcript.append(ChatMessage(role="system", content=guidance_for(outcome)))
        round_index += 1

    text = await narrate(original, last_results, llm)
    return ChatResult(
        result=text,
        messages=transcript,
        rounds=round_index + 1,
        tool_calls_made=calls_made,
    )
