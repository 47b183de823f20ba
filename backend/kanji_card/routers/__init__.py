"""API Routers package."""

from kanji_card.routers import health as health_router
from kanji_card.routers import vocabulary as vocabulary_router

__all__ = ["health_router", "vocabulary_router"]
