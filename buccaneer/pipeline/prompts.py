"""Prompt texts used by the orchestrator and the synthesizer."""

from __future__ import annotations

import json
from typing import Any

TOOL_GUIDANCE = """\
INTELLIGENT TOOL USAGE GUIDELINES:

When tool calls fail, use these fallback strategies:

1. ITEM-RELATED FAILURES:
   - If get_item_info fails with "not found": use listItemCategories to see the available
     categories, then either pick a similar item or create it with addItemToItemsList.
   - If getShopItems fails with a type error: use listItemCategories first.

2. ENEMY-RELATED FAILURES:
   - If get_enemies_info fails with "not found": use listEnemyCategories to see the available
     categories, then either pick a similar enemy or create it with createEnemy.
   - If getRandomEnemy fails with a category error: use listEnemyCategories first.

3. GENERAL STRATEGY:
   - Explore the available options before giving up.
   - Use the list/discovery tools when a specific lookup fails.
   - Create missing content when the story needs it, then look it up again.

4. DISCOVERY TOOLS:
   - listItemCategories, listItemTypes, listEnemyCategories, listAllEnemies

Remember: your goal is to be helpful and resourceful, not just to report failures.
"""

CREATION_GUIDANCE = (
    "The content you needed has now been created. Do not create it again. "
    "Call the lookup tool (get_item_info or get_enemies_info) again to fetch the "
    "newly created data, then answer the player."
)

ALREADY_EXISTS_GUIDANCE = (
    "The content you tried to create already exists in the world. Do not create it. "
    "Re-issue the original lookup (get_item_info or get_enemies_info) with the exact "
    "name and category to read it."
)

FAILURE_GUIDANCE = (
    "Some tool calls failed. Continue the workflow: use the discovery tools to see "
    "what exists, create anything that is genuinely missing, then read it with the "
    "lookup tools before answering."
)

DISCOVERY_GUIDANCE = (
    "You now have the listing you asked for. Use it to make the specific lookup or "
    "creation the player's request needs."
)

APOLOGY = (
    "I apologize, but I couldn't generate a proper response. "
    "Please try rephrasing your request."
)

SYNTHESIS_INSTRUCTIONS = (
    "Using only the tool results above as facts about the game world, answer the "
    "player's request in character as the narrator. Do not mention tools or errors "
    "by name; if something could not be found, work around it in the story."
)


def outcome_pairs(results: list[Any]) -> list[dict[str, Any]]:
    """(tool name, outcome) pairs for a list of ToolResults."""
    return [
        {"tool": r.name, "result": r.payload if r.ok else f"Error: {r.error}"}
        for r in results
    ]


def synthesis_prompt(query: str, results: list[Any]) -> str:
    serialized = json.dumps(outcome_pairs(results), indent=2, ensure_ascii=False)
    return (
        f"Player request:\n{query}\n\n"
        f"Tool results:\n{serialized}\n\n"
        f"{SYNTHESIS_INSTRUCTIONS}"
    )


def fallback_dump(results: list[Any]) -> str:
    serialized = json.dumps(outcome_pairs(results), indent=2, ensure_ascii=False)
    return (
        "The tools were executed, but the model failed to generate a proper "
        f"response. Tool results: {serialized}"
    )
