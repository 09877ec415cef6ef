"""Demo pirate world for development/testing."""

from __future__ import annotations

import logging

from buccaneer.world import WorldStore

logger = logging.getLogger(__name__)

DEMO_ENEMIES = {
    "pirates": {
        "scurvy_deckhand": {
            "name": "Scurvy Deckhand",
            "health": 30,
            "damage": 5,
            "skill": 2,
            "loot": ["copper coins", "rusty knife"],
            "description": "A gaunt sailor with more teeth missing than present.",
        },
        "one_eyed_jack": {
            "name": "One-Eyed Jack",
            "health": 60,
            "damage": 12,
            "skill": 6,
            "loot": ["silver doubloons", "brass spyglass"],
            "description": "A notorious quartermaster who never loses at cards.",
            "weaknesses": ["strong drink"],
        },
    },
    "navy": {
        "royal_marine": {
            "name": "Royal Marine",
            "health": 50,
            "damage": 10,
            "skill": 5,
            "loot": ["musket balls", "navy rations"],
            "description": "A disciplined soldier in a red coat, loyal to the crown.",
            "resistances": ["intimidation"],
        },
    },
    "mythical": {
        "kraken": {
            "name": "Kraken",
            "health": 400,
            "damage": 45,
            "skill": 9,
            "loot": ["kraken ink", "sunken gold"],
            "description": "A colossal sea beast whose tentacles can crush a galleon.",
            "weaknesses": ["fire"],
            "resistances": ["cannon shot"],
        },
    },
    "ghost": {
        "drowned_captain": {
            "name": "Drowned Captain",
            "health": 80,
            "damage": 15,
            "skill": 7,
            "loot": ["cursed compass"],
            "description": "The waterlogged shade of a captain who went down with his ship.",
            "weaknesses": ["holy water"],
        },
    },
}

DEMO_ITEMS = {
    "weapons": {
        "boarding_axe": {
            "name": "Boarding Axe",
            "type": "weapon",
            "description": "A short axe made for cutting rigging and foes alike.",
            "damage": 8,
            "value": 12,
            "condition": "good",
        },
        "flintlock_pistol": {
            "name": "Flintlock Pistol",
            "type": "weapon",
            "description": "A single-shot pistol, unreliable in the rain.",
            "damage": 14,
            "value": 30,
            "condition": "worn",
        },
    },
    "clothing": {
        "head": {
            "tricorn_hat": {
                "name": "Tricorn Hat",
                "type": "clothing",
                "description": "A weathered three-cornered hat.",
                "defense": 1,
                "value": 5,
            },
        },
        "body": {
            "leather_coat": {
                "name": "Leather Coat",
                "type": "clothing",
                "description": "A heavy coat that turns aside a glancing blade.",
                "defense": 3,
                "value": 20,
            },
        },
    },
    "ammo": {
        "pistol_shot": {
            "name": "Pistol Shot",
            "type": "ammo",
            "description": "A pouch of lead balls and powder.",
            "damagebonus": 2,
            "quantity": 10,
            "value": 4,
        },
    },
    "consumables": {
        "grog": {
            "name": "Grog",
            "type": "consumable",
            "description": "Watered rum with a squeeze of lime.",
            "effect": {"health": 10},
            "value": 2,
        },
    },
    "currency": {
        "doubloon": {
            "name": "Doubloon",
            "type": "currency",
            "description": "A heavy gold coin stamped with a foreign king.",
            "baseValue": 10,
        },
    },
}


def create_demo_data(world: WorldStore) -> None:
    """Replace both world documents with the demo world."""
    world.enemies.save(DEMO_ENEMIES)
    world.items.save(DEMO_ITEMS)
    logger.info(
        "demo world written: %d enemy categories, %d item categories",
        len(DEMO_ENEMIES), len(DEMO_ITEMS),
    )
