"""Game-state update block — parsing and applying [GAME_UPDATE] directives.

The narrator may end a reply with a block of `key: value` lines:

  [GAME_UPDATE]
  health: -10
  gold: +50
  inventory_add: rusty key
  objective_add: find_ship|Find a ship|You need a ship|100 gold|Harbor Master|Port Haven
  [/GAME_UPDATE]

Keys:
  health, gold                 signed deltas (health clamped 0..max, gold floored at 0)
  inventory_add / _remove      item name (no duplicates on add)
  location                     move to a known location; clears the sub-location
  sublocation                  area within the current location
  objective_add                id|title|description|promised_reward|giver|location, or a plain title
  objective_complete           id|actual_reward
  location_discover            location name
  ship_acquire                 type|name|crew|hull|cannons|sails

Unknown keys and unparseable numbers are ignored. The orchestrator never
interprets the block; clients apply it to the state they hold.
"""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_BLOCK_RE = re.compile(r"\[GAME_UPDATE\](.*?)\[/GAME_UPDATE\]", re.DOTALL)


class Objective(BaseModel):
    id: str
    title: str
    description: str = ""
    promised_reward: str | None = None
    giver: str | None = None
    location: str | None = None
    actual_reward: str | None = None
    completed_at: str | None = None


class Location(BaseModel):
    type: str = "unknown"
    description: str = "A location you've heard about"
    features: list[str] = Field(default_factory=list)
    npcs: list[str] = Field(default_factory=list)
    discovered: bool = False


class Player(BaseModel):
    name: str = "Captain Redbeard"
    health: int = 100
    max_health: int = 100
    gold: int = 25
    location: str = "Port Haven"
    sub_location: str | None = "town square"
    inventory: list[str] = Field(default_factory=lambda: [
        "rusty cutlass", "leather boots", "linen shirt",
        "cotton trousers", "bandana", "torn map fragment",
    ])


class Story(BaseModel):
    current_objectives: list[Objective] = Field(default_factory=list)
    known_locations: list[str] = Field(default_factory=lambda: ["Port Haven"])
    completed_objectives: list[Objective] = Field(default_factory=list)


class Ship(BaseModel):
    has_ship: bool = False
    type: str | None = None
    name: str | None = None
    crew: int = 0
    max_crew: int = 0
    inventory: list[str] = Field(default_factory=list)
    hull: int = 0
    max_hull: int = 0
    cannons: int = 0
    sails: int = 0
    max_sails: int = 0


class GameState(BaseModel):
    player: Player = Field(default_factory=Player)
    story: Story = Field(default_factory=Story)
    locations: dict[str, Location] = Field(default_factory=lambda: {
        "Port Haven": Location(
            type="town",
            description="A small island settlement with a busy harbor",
            features=["tavern", "dock", "market", "blacksmith"],
            npcs=["Tavern Keeper", "Harbor Master", "Old Sailor"],
            discovered=True,
        ),
    })
    ship: Ship = Field(default_factory=Ship)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_game_update(text: str) -> list[tuple[str, str]]:
    """Return the (key, value) directives of the first update block, in order."""
    match = _BLOCK_RE.search(text)
    if not match:
        return []
    directives: list[tuple[str, str]] = []
    for line in match.group(1).strip().split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        directives.append((key.strip(), value.strip()))
    return directives


def strip_game_update(text: str) -> str:
    """Narrative text with the update block removed."""
    return _BLOCK_RE.sub("", text, count=1).strip()


def _to_int(value: str) -> int | None:
    match = re.match(r"^\s*([+-]?\d+)", value)
    return int(match.group(1)) if match else None


# ---------------------------------------------------------------------------
# Applying
# ---------------------------------------------------------------------------

def apply_game_update(state: GameState, text: str) -> bool:
    """Apply every directive found in `text` to `state`. Returns True if anything changed."""
    changed = False
    for key, value in parse_game_update(text):
        handler = _HANDLERS.get(key)
        if handler is None:
            logger.debug("ignoring unknown game update key %r", key)
            continue
        if handler(state, value):
            changed = True
    return changed


def _health(state: GameState, value: str) -> bool:
    delta = _to_int(value)
    if delta is None:
        return False
    p = state.player
    p.health = max(0, min(p.max_health, p.health + delta))
    return True


def _gold(state: GameState, value: str) -> bool:
    delta = _to_int(value)
    if delta is None:
        return False
    state.player.gold = max(0, state.player.gold + delta)
    return True


def _inventory_add(state: GameState, value: str) -> bool:
    if not value or value in state.player.inventory:
        return False
    state.player.inventory.append(value)
    return True


def _inventory_remove(state: GameState, value: str) -> bool:
    if value not in state.player.inventory:
        return False
    state.player.inventory.remove(value)
    return True


def _location(state: GameState, value: str) -> bool:
    if value not in state.story.known_locations:
        return False
    state.player.location = value
    state.player.sub_location = None
    return True


def _sublocation(state: GameState, value: str) -> bool:
    state.player.sub_location = value
    return True


def _objective_add(state: GameState, value: str) -> bool:
    parts = value.split("|")
    if len(parts) >= 2:
        objective = Objective(
            id=parts[0] or f"quest_{int(time.time() * 1000)}",
            title=parts[1] or value,
            description=parts[2] if len(parts) > 2 and parts[2] else parts[1],
            promised_reward=parts[3] if len(parts) > 3 and parts[3] else None,
            giver=parts[4] if len(parts) > 4 and parts[4] else None,
            location=parts[5] if len(parts) > 5 and parts[5] else state.player.location,
        )
        if any(o.id == objective.id for o in state.story.current_objectives):
            return False
    else:
        objective = Objective(
            id=f"quest_{int(time.time() * 1000)}",
            title=value,
            description=value,
            location=state.player.location,
        )
    state.story.current_objectives.append(objective)
    return True


def _objective_complete(state: GameState, value: str) -> bool:
    quest_id, _, reward = value.partition("|")
    objectives = state.story.current_objectives
    for i, objective in enumerate(objectives):
        if quest_id in (objective.id, objective.title) or objective.title == value:
            objective.actual_reward = reward or "No reward"
            objective.completed_at = datetime.now(timezone.utc).isoformat()
            state.story.completed_objectives.append(objectives.pop(i))
            return True
    return False


def _location_discover(state: GameState, value: str) -> bool:
    if not value or value in state.story.known_locations:
        return False
    state.story.known_locations.append(value)
    state.locations.setdefault(value, Location())
    return True


def _ship_acquire(state: GameState, value: str) -> bool:
    parts = value.split("|")
    if len(parts) < 6:
        return False
    crew = _to_int(parts[2]) or 0
    hull = _to_int(parts[3]) or 100
    sails = _to_int(parts[5]) or 100
    state.ship = Ship(
        has_ship=True,
        type=parts[0],
        name=parts[1],
        crew=crew, max_crew=crew,
        hull=hull, max_hull=hull,
        cannons=_to_int(parts[4]) or 0,
        sails=sails, max_sails=sails,
    )
    return True


_HANDLERS = {
    "health": _health,
    "gold": _gold,
    "inventory_add": _inventory_add,
    "inventory_remove": _inventory_remove,
    "location": _location,
    "sublocation": _sublocation,
    "objective_add": _objective_add,
    "objective_complete": _objective_complete,
    "location_discover": _location_discover,
    "ship_acquire": _ship_acquire,
}
