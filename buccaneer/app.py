import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from buccaneer.config import Settings
from buccaneer.llm import ChatLLM, EchoChatLLM, HttpChatLLM
from buccaneer.routes import router
from buccaneer.tools import ToolExecutor
from buccaneer.world import init_world

logger = logging.getLogger(__name__)


def build_llm(settings: Settings) -> ChatLLM:
    if settings.llm_format == "echo":
        return EchoChatLLM()
    return HttpChatLLM(
        provider_url=settings.llm_url,
        model=settings.llm_model,
        api_key=settings.llm_api_key,
        provider_format=settings.llm_format,
        timeout=settings.llm_timeout,
    )


def create_app(settings: Settings | None = None, llm: ChatLLM | None = None) -> FastAPI:
    resolved = settings or Settings.from_env()
    world = init_world(resolved.data_dir)

    app = FastAPI(title="Buccaneer")
    app.state.settings = resolved
    app.state.world = world
    app.state.executor = ToolExecutor(world)
    app.state.llm = llm or build_llm(resolved)
    app.include_router(router, prefix="/api")

    logger.info(
        "model %s (%s) at %s, world in %s",
        resolved.llm_model, resolved.llm_format, resolved.llm_url, resolved.data_dir,
    )

    if resolved.static_dir.is_dir():
        # Client page and assets; API routes above take precedence
        app.mount("/", StaticFiles(directory=resolved.static_dir, html=True), name="static")

    return app


# Default app instance for uvicorn (uses env vars / .env)
app = create_app()
