"""Chat endpoint — runs the tool-augmented narrator for one transcript."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from buccaneer.models import ChatMessage
from buccaneer.pipeline import TOOL_GUIDANCE, run_chat

from .models import IncomingMessage

logger = logging.getLogger(__name__)

router = APIRouter()


def _bad_request(error: str) -> JSONResponse:
    return JSONResponse({"error": error}, status_code=400)


def _server_error(details: str) -> JSONResponse:
    return JSONResponse(
        {"error": "Internal server error", "details": details}, status_code=500
    )


@router.post("/chat")
async def chat(request: Request):
    """Answer the latest user message, calling world tools as the model requests."""
    try:
        body = await request.json()
    except ValueError:
        return _bad_request("Request body must be JSON")

    messages = body.get("messages") if isinstance(body, dict) else None
    if not isinstance(messages, list) or not messages:
        return _bad_request("Messages array required")

    try:
        incoming = [IncomingMessage.model_validate(m) for m in messages]
    except ValidationError as e:
        return _bad_request(f"Invalid message: {e.errors()[0]['msg']}")

    state = request.app.state
    logger.info("chat request: %d messages", len(incoming))
    try:
        result = await run_chat(
            [ChatMessage(role=m.role, content=m.content) for m in incoming],
            llm=state.llm,
            executor=state.executor,
            max_rounds=state.settings.max_rounds,
            time_budget=state.settings.request_budget,
            system_guidance=TOOL_GUIDANCE,
        )
    except Exception as e:
        logger.exception("chat request failed")
        return _server_error(str(e))

    if result.error:
        return _server_error(result.result)

    logger.info(
        "chat complete: rounds=%d tool_calls=%d len=%d",
        result.rounds, result.tool_calls_made, len(result.result),
    )
    return {"message": {"role": "assistant", "content": result.result}}
