"""FastAPI API endpoints under /api.

Endpoint groups: chat (tool-augmented narrator), game-state (apply a reply's
[GAME_UPDATE] block), settings (health, tool schemas, active model settings). Collaborators live on
app.state: settings, world, executor, llm.
"""

from fastapi import APIRouter

from .chat import router as chat_router
from .game_state import router as game_state_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(chat_router)
router.include_router(game_state_router)
