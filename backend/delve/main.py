"""
Dungeon Delve Backend - FastAPI Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from delve import config
from delve.api import game, llm, speech
from delve.engine.loader import AdventureLoader
from delve.engine.session import GameSession

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure logging from DELVE_LOG_LEVEL."""
    logging.basicConfig(
        level=config.get_log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    adventure_id = config.get_adventure_id()
    content = AdventureLoader().load_adventure(adventure_id)
    app.state.session = GameSession(content)
    logger.info(f"Serving adventure '{adventure_id}'")
    try:
        yield
    finally:
        await app.state.session.close()


app = FastAPI(
    title="Dungeon Delve",
    description="Shared-screen text adventure with turn-based combat",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(game.router, prefix="/api/game", tags=["game"])
app.include_router(llm.router, prefix="/api/llm", tags=["llm"])
app.include_router(speech.router, prefix="/api/speech", tags=["speech"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "name": "Dungeon Delve", "version": "0.1.0"}


@app.get("/api/adventures")
async def list_adventures():
    """List available adventures"""
    loader = AdventureLoader()
    return {"adventures": loader.list_adventures()}


def run() -> None:
    """Serve the app with uvicorn (``dungeon-delve`` console script)."""
    import uvicorn

    uvicorn.run(
        app,
        host=config.get_host(),
        port=config.get_port(),
        log_level=config.get_log_level().lower(),
    )


if __name__ == "__main__":
    run()
