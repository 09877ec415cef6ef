"""JSON file world store.

The world is two flat JSON documents under a configurable base directory:

    {base}/
      enemies.json   ← category → enemy key → enemy
      items.json     ← category → (subcategory →) item key → item

There is no cache and no locking. Every load() re-parses the file and every
save() replaces it wholly, pretty-printed. Two requests that read, modify and
save the same document concurrently race; the last save wins.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

Document = dict[str, Any]

ENEMIES_FILE = "enemies.json"
ITEMS_FILE = "items.json"


class DocumentRepository(Protocol):
    def load(self) -> Document: ...

    def save(self, document: Document) -> None: ...


class JsonDocumentRepository:
    """A single JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> Document:
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self._path.name} must contain a JSON object")
        return data

    def save(self, document: Document) -> None:
        self._path.write_text(
            json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8"
        )
        logger.debug("saved %s (%d top-level keys)", self._path.name, len(document))


class MemoryDocumentRepository:
    """In-process document, copied on every load/save like a file would be."""

    def __init__(self, document: Document | None = None) -> None:
        self._raw = json.dumps(document or {})
        self.saves = 0

    def load(self) -> Document:
        return json.loads(self._raw)

    def save(self, document: Document) -> None:
        self._raw = json.dumps(document)
        self.saves += 1


@dataclass(frozen=True)
class WorldStore:
    enemies: DocumentRepository
    items: DocumentRepository


def init_world(data_dir: Path) -> WorldStore:
    """Create the data directory and any missing documents, return the store."""
    data_dir.mkdir(parents=True, exist_ok=True)
    enemies = JsonDocumentRepository(data_dir / ENEMIES_FILE)
    items = JsonDocumentRepository(data_dir / ITEMS_FILE)
    for repo in (enemies, items):
        if not repo.exists():
            logger.info("creating empty world document %s", repo.path)
            repo.save({})
    return WorldStore(enemies=enemies, items=items)
