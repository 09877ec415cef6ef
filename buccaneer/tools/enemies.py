"""Enemy tools — lookup, random encounter, creation and listings.

Enemies document layout: {category: {enemy_key: enemy}}, where an enemy is
{name, health, damage, skill, loot[], description, weaknesses[]?, resistances[]?}.
Every executor loads the whole document; createEnemy saves it whole.
"""

from __future__ import annotations

import random
import re
from typing import Any

from pydantic import BaseModel, Field

from buccaneer.world import Document, WorldStore

from .errors import already_exists, bad_argument, not_found

Number = int | float


# ---------------------------------------------------------------------------
# Argument models (also published to the model as JSON schema)
# ---------------------------------------------------------------------------

class GetEnemyInfoArgs(BaseModel):
    category: str = Field(description="The category of the enemy (e.g., pirates, navy, mythical, ghost, town)")
    name: str = Field(min_length=1, description="The name of the enemy")


class GetRandomEnemyArgs(BaseModel):
    category: str = Field(description="The category of enemy to retrieve (e.g., pirates, navy, mythical, ghost, town)")
    name: str | None = Field(default=None, description="The name of the enemy to retrieve (optional)")
    count: int = Field(ge=0, description="The number of random enemies to return")


class CreateEnemyArgs(BaseModel):
    category: str = Field(min_length=1, description="The category of the enemy (e.g., pirates, navy, mythical, ghost, town)")
    name: str = Field(min_length=1, description="The name of the enemy")
    health: Number = Field(description="The health points of the enemy")
    damage: Number = Field(description="The damage the enemy can inflict")
    skill: Number = Field(description="The skill level of the enemy")
    loot: list[str] = Field(description="Possible loot dropped by the enemy")
    description: str = Field(description="A description of the enemy")
    weaknesses: list[str] | None = Field(default=None, description="The enemy's weaknesses")
    resistances: list[str] | None = Field(default=None, description="The enemy's resistances")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def enemy_key(name: str) -> str:
    """Lowercase with whitespace runs as underscores: "Sea Serpent" → "sea_serpent"."""
    return re.sub(r"\s+", "_", name.strip()).lower()


def _find_category(enemies: Document, category: str) -> str | None:
    if category in enemies:
        return category
    wanted = category.lower()
    for key in enemies:
        if key.lower() == wanted:
            return key
    return None


def _group(enemies: Document, category: str) -> tuple[str, dict[str, Any]]:
    found = _find_category(enemies, category)
    if found is None or not isinstance(enemies[found], dict):
        available = ", ".join(enemies) or "none"
        raise not_found(
            f"Category not found: {category}. Available categories: {available}"
        )
    return found, enemies[found]


def _enemies_in(group: dict[str, Any]) -> list[dict[str, Any]]:
    return [e for e in group.values() if isinstance(e, dict) and "name" in e]


def _similar(wanted: str, name: str) -> bool:
    return bool(name) and (wanted in name or name in wanted)


# ---------------------------------------------------------------------------
# Executors
# ---------------------------------------------------------------------------

def get_enemies_info(world: WorldStore, args: GetEnemyInfoArgs) -> dict[str, Any]:
    category, group = _group(world.enemies.load(), args.category)
    wanted = args.name.lower()

    for enemy in _enemies_in(group):
        if str(enemy["name"]).lower() == wanted:
            return {"category": category, **enemy}

    partial = [
        {"category": category, **enemy}
        for enemy in _enemies_in(group)
        if _similar(wanted, str(enemy["name"]).lower())
    ]
    if partial:
        return {
            "exactMatch": False,
            "suggestedEnemies": partial,
            "message": (
                f'No exact match found for "{args.name}" in category "{category}". '
                f"Found {len(partial)} similar enemies."
            ),
        }

    available = ", ".join(str(e["name"]) for e in _enemies_in(group)) or "none"
    raise not_found(
        f"Enemy not found: {args.name} in category {category}. "
        f"Available enemies in this category: {available}"
    )


def get_random_enemy(world: WorldStore, args: GetRandomEnemyArgs) -> list[dict[str, Any]]:
    category, group = _group(world.enemies.load(), args.category)
    found = [
        {"category": category, **enemy}
        for enemy in _enemies_in(group)
        if not args.name or str(enemy["name"]).lower() == args.name.lower()
    ]
    if not found:
        raise not_found(f"Enemy not found: {args.name} in category {category}")
    return random.sample(found, min(args.count, len(found)))


def create_enemy(world: WorldStore, args: CreateEnemyArgs) -> dict[str, Any]:
    enemies = world.enemies.load()
    category = _find_category(enemies, args.category) or args.category
    group = enemies.setdefault(category, {})
    if not isinstance(group, dict):
        raise bad_argument(f"{category} is not an enemy category")
    key = enemy_key(args.name)
    if key in group:
        raise already_exists(f"Enemy already exists: {args.name} in category {category}")

    enemy = args.model_dump(exclude={"category"}, exclude_none=True)
    group[key] = enemy
    world.enemies.save(enemies)
    return {"category": category, **enemy}


def list_all_enemies(world: WorldStore, args: BaseModel) -> dict[str, list[str]]:
    enemies = world.enemies.load()
    return {
        category: [str(e["name"]) for e in _enemies_in(group)]
        for category, group in enemies.items()
        if isinstance(group, dict)
    }


def list_enemy_categories(world: WorldStore, args: BaseModel) -> dict[str, list[str]]:
    enemies = world.enemies.load()
    return {
        category: list(group)
        for category, group in enemies.items()
        if isinstance(group, dict)
    }
