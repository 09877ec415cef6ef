"""Health check and tool schema endpoints."""

from fastapi import APIRouter, Request

from buccaneer.tools import tool_schemas

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/tools")
async def list_tools():
    """Tool schemas offered to the model."""
    return tool_schemas()


@router.get("/settings")
async def get_settings(request: Request):
    """Active model settings (API key omitted)."""
    settings = request.app.state.settings
    return {
        "llm_url": settings.llm_url,
        "llm_model": settings.llm_model,
        "llm_format": settings.llm_format,
        "max_rounds": settings.max_rounds,
        "request_budget": settings.request_budget,
    }
