"""Tool executor — runs one model-proposed ToolCall against the world store.

Never raises for tool-level problems: unknown tool names, invalid arguments,
domain failures and unexpected executor exceptions all come back as error
ToolResults. Error messages get a remediation hint appended so the next
model round knows what to try.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from buccaneer.models import ErrorKind, ToolCall, ToolResult
from buccaneer.world import WorldStore

from .errors import ToolError
from .registry import REGISTRY, ToolName, lookup

logger = logging.getLogger(__name__)

# Operator guidance injected into error text, keyed by (tool, failure kind).
REMEDIATION_HINTS: dict[tuple[ToolName, ErrorKind], str] = {
    (ToolName.GET_ITEM_INFO, ErrorKind.NOT_FOUND):
        "Use listItemCategories tool to see available categories, or use "
        "addItemToItemsList tool to create this item if it should exist.",
    (ToolName.GET_ENEMIES_INFO, ErrorKind.NOT_FOUND):
        "Use listEnemyCategories tool to see available categories, or use "
        "createEnemy tool to create this enemy if it should exist.",
    (ToolName.GET_SHOP_ITEMS, ErrorKind.NOT_FOUND):
        "Use listItemCategories tool to see available item categories first.",
    (ToolName.GET_RANDOM_ENEMY, ErrorKind.NOT_FOUND):
        "Use listEnemyCategories tool to see available enemy categories first.",
    (ToolName.ADD_ITEM, ErrorKind.ALREADY_EXISTS):
        "The item is already in the world. Use get_item_info to fetch it instead of creating it.",
    (ToolName.CREATE_ENEMY, ErrorKind.ALREADY_EXISTS):
        "The enemy is already in the world. Use get_enemies_info to fetch it instead of creating it.",
}

_FALLBACK_HINTS: dict[ErrorKind, str] = {
    ErrorKind.ARGUMENT: "Check the tool's parameter schema and call it again with valid arguments.",
    ErrorKind.UNKNOWN_TOOL: "Only call one of: " + ", ".join(t.value for t in REGISTRY) + ".",
}


def remediation_hint(tool: ToolName | None, kind: ErrorKind) -> str | None:
    if tool is not None and (tool, kind) in REMEDIATION_HINTS:
        return REMEDIATION_HINTS[(tool, kind)]
    return _FALLBACK_HINTS.get(kind)


def _with_hint(message: str, hint: str | None) -> str:
    if not hint:
        return message
    return f"{message.rstrip('.')}. Suggestion: {hint}"


def _describe_validation(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e["loc"]) or "arguments"
        parts.append(f"{loc}: {e['msg']}")
    return "; ".join(parts)


class ToolExecutor:
    """Executes ToolCalls against one WorldStore."""

    def __init__(self, world: WorldStore) -> None:
        self._world = world

    @property
    def world(self) -> WorldStore:
        return self._world

    def execute(self, call: ToolCall) -> ToolResult:
        descriptor = lookup(call.name)
        if descriptor is None:
            logger.warning("model requested unknown tool %r", call.name)
            return self._fail(call, None, ErrorKind.UNKNOWN_TOOL, f"unknown tool {call.name}")

        if not isinstance(call.arguments, dict):
            return self._fail(
                call, descriptor.name, ErrorKind.ARGUMENT,
                f"Arguments for {call.name} must be a JSON object, got {call.arguments!r}",
            )

        try:
            args = descriptor.args_model.model_validate(call.arguments)
        except ValidationError as e:
            return self._fail(
                call, descriptor.name, ErrorKind.ARGUMENT,
                f"Invalid arguments for {call.name}: {_describe_validation(e)}",
            )

        logger.debug("tool %s args=%s", call.name, call.arguments)
        try:
            payload = descriptor.run(self._world, args)
        except ToolError as e:
            return self._fail(call, descriptor.name, e.kind, e.message)
        except Exception as e:
            logger.exception("tool %s raised unexpectedly", call.name)
            return self._fail(
                call, descriptor.name, ErrorKind.EXECUTION, f"{call.name} failed: {e}"
            )

        logger.info("tool %s succeeded", call.name)
        return ToolResult.success(call, payload)

    def execute_all(self, calls: list[ToolCall]) -> list[ToolResult]:
        """Run every call in order; a failure never stops its siblings."""
        return [self.execute(call) for call in calls]

    def _fail(
        self, call: ToolCall, tool: ToolName | None, kind: ErrorKind, message: str
    ) -> ToolResult:
        text = _with_hint(message, remediation_hint(tool, kind))
        logger.info("tool %s failed (%s): %s", call.name, kind.value, message)
        return ToolResult.failure(call, kind, text)
