from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from cardpoints.api.routes.calculate import router as calculate_router
from cardpoints.api.routes.health import router as health_router
from cardpoints.api.routes.presets import router as presets_router
from cardpoints.api.routes.rules import router as rules_router
from cardpoints.config import configure_logging, settings
from cardpoints.services.orchestrator import RewardOrchestrator


def create_app(orchestrator: RewardOrchestrator | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.orchestrator = orchestrator or RewardOrchestrator.from_settings(settings)
        yield

    app = FastAPI(title="CardPoints API", version="0.1.0", lifespan=lifespan)
    app.include_router(health_router)
    app.include_router(calculate_router)
    app.include_router(rules_router)
    app.include_router(presets_router)
    return app


app = create_app()


def run() -> None:
    configure_logging()
    uvicorn.run("cardpoints.api.app:app", host=settings.app_host, port=settings.app_port, reload=False)
