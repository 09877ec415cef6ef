"""Tool registry — the closed set of tools the model may call.

Each ToolName maps to one ToolDescriptor: a description, a pydantic argument
model (validated before every call and published as JSON schema) and the
executor function. The registry is built once at import time; there is no
runtime registration. A name outside ToolName is an unknown tool.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel

from buccaneer.world import WorldStore

from . import enemies, items


class ToolName(str, Enum):
    GET_ENEMIES_INFO = "get_enemies_info"
    GET_RANDOM_ENEMY = "getRandomEnemy"
    CREATE_ENEMY = "createEnemy"
    LIST_ALL_ENEMIES = "listAllEnemies"
    LIST_ENEMY_CATEGORIES = "listEnemyCategories"
    GET_ITEM_INFO = "get_item_info"
    GET_SHOP_ITEMS = "getShopItems"
    GET_RANDOM_ITEMS = "getRandomItems"
    ADD_ITEM = "addItemToItemsList"
    LIST_ITEM_TYPES = "listItemTypes"
    LIST_ITEM_CATEGORIES = "listItemCategories"


class NoArgs(BaseModel):
    pass


@dataclass(frozen=True)
class ToolDescriptor:
    name: ToolName
    description: str
    args_model: type[BaseModel]
    run: Callable[[WorldStore, Any], Any]
    creates: bool = False    # a successful call mutates the world
    discovers: bool = False  # pure listing / enumeration

    def schema(self) -> dict[str, Any]:
        """Function-calling schema offered to the model."""
        return {
            "type": "function",
            "function": {
                "name": self.name.value,
                "description": self.description,
                "parameters": _parameters(self.args_model),
            },
        }


def _parameters(model: type[BaseModel]) -> dict[str, Any]:
    schema = model.model_json_schema()
    schema.pop("title", None)
    for prop in schema.get("properties", {}).values():
        prop.pop("title", None)
    schema.setdefault("properties", {})
    schema.setdefault("required", [])
    return schema


_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        ToolName.GET_ENEMIES_INFO,
        "Get detailed information about an enemy in the game world",
        enemies.GetEnemyInfoArgs, enemies.get_enemies_info,
    ),
    ToolDescriptor(
        ToolName.GET_RANDOM_ENEMY,
        "Get a random enemy from the game world",
        enemies.GetRandomEnemyArgs, enemies.get_random_enemy,
    ),
    ToolDescriptor(
        ToolName.CREATE_ENEMY,
        "Create a new enemy in the game world",
        enemies.CreateEnemyArgs, enemies.create_enemy,
        creates=True,
    ),
    ToolDescriptor(
        ToolName.LIST_ALL_ENEMIES,
        "List all enemy categories and the specific enemies in each category",
        NoArgs, enemies.list_all_enemies,
        discovers=True,
    ),
    ToolDescriptor(
        ToolName.LIST_ENEMY_CATEGORIES,
        "List all available enemy categories in the game world",
        NoArgs, enemies.list_enemy_categories,
        discovers=True,
    ),
    ToolDescriptor(
        ToolName.GET_ITEM_INFO,
        "Get detailed information about an item in the game world",
        items.GetItemInfoArgs, items.get_item_info,
    ),
    ToolDescriptor(
        ToolName.GET_SHOP_ITEMS,
        "Get a list of items available in a shop, filtered by type and limited by count",
        items.GetShopItemsArgs, items.get_shop_items,
    ),
    ToolDescriptor(
        ToolName.GET_RANDOM_ITEMS,
        "Get a random selection of items from the game world",
        items.GetRandomItemsArgs, items.get_random_items,
    ),
    ToolDescriptor(
        ToolName.ADD_ITEM,
        "Add a new item to the ITEMS list if it does not already exist",
        items.AddItemArgs, items.add_item_to_items_list,
        creates=True,
    ),
    ToolDescriptor(
        ToolName.LIST_ITEM_TYPES,
        "List all available item types in the game world",
        NoArgs, items.list_item_types,
        discovers=True,
    ),
    ToolDescriptor(
        ToolName.LIST_ITEM_CATEGORIES,
        "List all available item categories and subcategories in the game world",
        NoArgs, items.list_item_categories,
        discovers=True,
    ),
)

REGISTRY: dict[ToolName, ToolDescriptor] = {t.name: t for t in _TOOLS}


def lookup(name: str) -> ToolDescriptor | None:
    try:
        return REGISTRY[ToolName(name)]
    except ValueError:
        return None


def tool_schemas() -> list[dict[str, Any]]:
    return [t.schema() for t in _TOOLS]
