"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from websearch.api.routes import router
from websearch.config.schema import Config
from websearch.search import SearchOrchestrator


def create_app(
    config: Config | None = None,
    orchestrator: SearchOrchestrator | None = None,
) -> FastAPI:
    """Build the app; the orchestrator is shared, sessions are not."""
    config = config or Config()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info("WebSearch API loaded")
        yield
        logger.info("WebSearch API stopped")

    app = FastAPI(title="websearch", lifespan=lifespan)
    app.state.config = config
    app.state.orchestrator = orchestrator or SearchOrchestrator(config.session)
    app.include_router(router)
    return app
