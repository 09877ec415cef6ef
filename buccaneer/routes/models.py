"""Pydantic request/response models for API endpoints."""

from typing import Literal

from pydantic import BaseModel

from buccaneer.game_state import GameState


class IncomingMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ApplyGameUpdateBody(BaseModel):
    text: str
    state: GameState | None = None
