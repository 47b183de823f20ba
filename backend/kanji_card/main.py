"""
Kanji Card API

FastAPI application for the vocabulary set lifecycle.

Run with:
    uvicorn kanji_card.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kanji_card.config import settings
from kanji_card.middleware import setup_error_handling
from kanji_card.routers import health_router, vocabulary_router

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    """Configure logging based on LOG_LEVEL and the debug flag."""
    logging.basicConfig(
        level=logging.DEBUG if debug else level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Reduce noise from httpx and LiteLLM (unless debugging)
    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("LiteLLM").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"{settings.APP_NAME} starting (storage={settings.STORAGE_BACKEND}, "
        f"text_model={settings.TEXT_MODEL})"
    )
    yield
    logger.info(f"{settings.APP_NAME} shutting down")


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL, settings.DEBUG)

    app = FastAPI(title=f"{settings.APP_NAME} API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_error_handling(app, debug=settings.DEBUG)

    app.include_router(health_router.router)
    app.include_router(vocabulary_router.router)
    return app


app = create_app()
