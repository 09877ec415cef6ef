"""Item tools — lookup, shop stock, random loot, creation and listings.

Items document layout: {category: {item_key: item}} or
{category: {subcategory: {item_key: item}}}. An item is any object carrying a
"name"; an object without one is a subcategory.
"""

from __future__ import annotations

import random
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from buccaneer.world import Document, WorldStore

from .errors import already_exists, bad_argument, not_found


class GetItemInfoArgs(BaseModel):
    name: str = Field(min_length=1, description="The name of the item")


class GetShopItemsArgs(BaseModel):
    type: str = Field(description="The category/type of items to retrieve (e.g., weapon, clothing, ammo, consumable, currency, quest)")
    count: int = Field(ge=0, description="The number of items to return")


class GetRandomItemsArgs(BaseModel):
    count: int = Field(ge=0, description="The number of random items to return")


class AddItemArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str = Field(min_length=1, description="The top-level category for the item (e.g., weapons, clothing, ammo, consumables, treasure)")
    subcategory: str | None = Field(default=None, description="The subcategory for the item, if any (e.g., head, body, legs, feet)")
    key: str = Field(min_length=1, description="The unique key for the item within its category/subcategory")
    item_data: dict[str, Any] = Field(
        alias="itemData",
        description="The full item object to add: name, type, description and any of damage, defense, value, condition, effect, quantity",
    )

    @field_validator("item_data")
    @classmethod
    def _item_has_name(cls, value: dict[str, Any]) -> dict[str, Any]:
        if not isinstance(value.get("name"), str) or not value["name"].strip():
            raise ValueError("itemData must include a non-empty 'name'")
        return value


def _is_item(node: Any) -> bool:
    return isinstance(node, dict) and "name" in node


def _collect(node: Any) -> list[dict[str, Any]]:
    """Every item under a category or subcategory, in document order."""
    if not isinstance(node, dict):
        return []
    found: list[dict[str, Any]] = []
    for child in node.values():
        if _is_item(child):
            found.append(child)
        elif isinstance(child, dict):
            found.extend(_collect(child))
    return found


def all_items(items: Document) -> list[dict[str, Any]]:
    return _collect(items)


def _types(items: list[dict[str, Any]]) -> list[str]:
    seen: dict[str, None] = {}
    for item in items:
        if item.get("type"):
            seen[str(item["type"])] = None
    return list(seen)


def _find_key(container: dict[str, Any], name: str) -> str:
    """Existing key matching `name` case-insensitively, else `name` itself."""
    if name in container:
        return name
    wanted = name.lower()
    for key in container:
        if key.lower() == wanted:
            return key
    return name


def _similar(wanted: str, name: str) -> bool:
    return bool(name) and (wanted in name or name in wanted)


def _sample(items: list[dict[str, Any]], count: int) -> list[dict[str, Any]]:
    if len(items) <= count:
        return list(items)
    return random.sample(items, count)


def get_item_info(world: WorldStore, args: GetItemInfoArgs) -> dict[str, Any]:
    items = all_items(world.items.load())
    wanted = args.name.lower()

    for item in items:
        if str(item["name"]).lower() == wanted:
            return item

    partial = [item for item in items if _similar(wanted, str(item["name"]).lower())]
    if partial:
        return {
            "exactMatch": False,
            "suggestedItems": partial,
            "message": f'No exact match found for "{args.name}". Found {len(partial)} similar items.',
        }

    available = ", ".join(_types(items)) or "none"
    raise not_found(f"Item not found: {args.name}. Available item types: {available}")


def get_shop_items(world: WorldStore, args: GetShopItemsArgs) -> list[dict[str, Any]]:
    document = world.items.load()
    stock = all_items(document)
    wanted = args.type.strip().lower()

    if wanted and wanted != "any":
        matching = [i for i in stock if str(i.get("type", "")).lower() == wanted]
        if not matching:
            # "weapon" finds the "weapons" category, and so on
            for category, group in document.items():
                lowered = category.lower()
                if lowered in wanted or wanted in lowered:
                    matching.extend(_collect(group))
        if not matching:
            available = ", ".join(_types(stock)) or "none"
            raise not_found(f"No items found for type '{args.type}'. Available types: {available}")
        stock = matching

    return _sample(stock, args.count)


def get_random_items(world: WorldStore, args: GetRandomItemsArgs) -> list[dict[str, Any]]:
    return _sample(all_items(world.items.load()), args.count)


def add_item_to_items_list(world: WorldStore, args: AddItemArgs) -> dict[str, Any]:
    document = world.items.load()
    category = _find_key(document, args.category)
    group = document.setdefault(category, {})
    if not isinstance(group, dict) or _is_item(group):
        raise bad_argument(f"{category} is not an item category")

    where = category
    subcategory = None
    if args.subcategory:
        subcategory = _find_key(group, args.subcategory)
        group = group.setdefault(subcategory, {})
        if _is_item(group) or not isinstance(group, dict):
            raise bad_argument(
                f"{subcategory} is an item in {category}, not a subcategory"
            )
        where = f"{category}/{subcategory}"

    if args.key in group:
        raise already_exists(f"Item already exists: {args.key} in {where}")

    group[args.key] = args.item_data
    world.items.save(document)
    return {"created": True, "category": category, "subcategory": subcategory,
            "key": args.key, "item": args.item_data}


def list_item_types(world: WorldStore, args: BaseModel) -> list[str]:
    return _types(all_items(world.items.load()))


def list_item_categories(world: WorldStore, args: BaseModel) -> dict[str, list[str]]:
    document = world.items.load()
    return {
        category: list(group)
        for category, group in document.items()
        if isinstance(group, dict)
    }
