"""Apply a narrator reply's [GAME_UPDATE] block to a client-held game state."""

from fastapi import APIRouter

from buccaneer.game_state import GameState, apply_game_update, strip_game_update

from .models import ApplyGameUpdateBody

router = APIRouter()


@router.post("/game-state/apply")
async def apply_update(body: ApplyGameUpdateBody):
    """Return the updated state, whether it changed, and the reply text without the block."""
    state = body.state or GameState()
    changed = apply_game_update(state, body.text)
    return {
        "state": state.model_dump(),
        "changed": changed,
        "narrative": strip_game_update(body.text),
    }
