"""
FastAPI Dependencies

Common dependencies for user scoping and the vocabulary service.
"""

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from kanji_card.config import settings
from kanji_card.services.llm import get_llm_client
from kanji_card.services.storage import get_record_store
from kanji_card.services.storage.base import is_safe_segment
from kanji_card.services.vocabulary import (
    ContentExtractor,
    StoryGenerator,
    VocabularyService,
)


async def get_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> str:
    """
    Resolve the calling user from the X-User-Id header.

    Authentication happens upstream; the header is trusted as-is once it
    is a valid storage key.

    Raises:
        HTTPException: 401 if the header is missing, 400 if it is malformed
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user. Provide X-User-Id header.",
        )

    if not is_safe_segment(x_user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-User-Id header",
        )

    return x_user_id


@lru_cache()
def get_vocabulary_service() -> VocabularyService:
    """
    Get the process-wide vocabulary service.

    One instance per process so every request shares the same per-user
    locks.
    """
    llm_client = get_llm_client()
    story_generator = (
        StoryGenerator(llm_client) if settings.STORY_GENERATION_ENABLED else None
    )
    return VocabularyService(
        get_record_store(),
        story_generator=story_generator,
        content_extractor=ContentExtractor(llm_client),
    )


# Dependencies that can be used in routers
CurrentUser = Depends(get_user_id)
