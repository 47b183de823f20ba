"""
Vocabulary API Router

Endpoints for word intake, set lifecycle and the archive. All routes are
scoped to the user named in the X-User-Id header.

Endpoints:
- POST /api/vocabulary/words - Add words to intake sets
- POST /api/vocabulary/words/extract/text - Propose words found in text
- POST /api/vocabulary/words/extract/image - Propose words found in an image
- GET /api/vocabulary/sets - List active sets
- GET /api/vocabulary/sets/review-queue - Sets due for review and waiting
- GET /api/vocabulary/sets/{id} - Get a set with its cards and story
- POST /api/vocabulary/sets/{id}/promote - Promote a set by one stage
- GET /api/vocabulary/archive/words - List or search archived words
- POST /api/vocabulary/archive/words/recall - Send archived words back to intake
- GET /api/vocabulary/archive/stories - List or search archived stories
- GET /api/vocabulary/overview - Word totals with previews
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from kanji_card.dependencies import CurrentUser, get_vocabulary_service
from kanji_card.enums.learning import SetStage
from kanji_card.models.api import (
    ExtractedWordsResponse,
    ExtractTextRequest,
    IntakeRequest,
    IntakeResult,
    Overview,
    PromotionResult,
    RecallRequest,
    ReviewQueue,
    SetDetail,
    SetSummary,
)
from kanji_card.models.base import ErrorDetail
from kanji_card.models.vocabulary import Card, Story
from kanji_card.services.vocabulary import VocabularyService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/vocabulary", tags=["vocabulary"])

_ERRORS = {
    404: {"model": ErrorDetail, "description": "Set not found"},
    409: {"model": ErrorDetail, "description": "Invalid stage transition"},
    500: {"model": ErrorDetail, "description": "Storage failure"},
}
_UPSTREAM_ERRORS = {
    502: {"model": ErrorDetail, "description": "Extraction failed upstream"},
}

# Images above this size are rejected before reaching the LLM
MAX_IMAGE_BYTES = 10 * 1024 * 1024


# ===========================================
# Word Endpoints
# ===========================================


@router.post("/words", response_model=IntakeResult, responses=_ERRORS)
async def add_words(
    request: IntakeRequest,
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> IntakeResult:
    """
    Add words to the user's intake sets.

    Words already present in an active set or the archive are skipped.
    Sets fill up to eight cards; a new set is started when one is full.
    """
    return await service.intake(user_id, request.words)


@router.post(
    "/words/extract/text",
    response_model=ExtractedWordsResponse,
    responses=_UPSTREAM_ERRORS,
)
async def extract_words_from_text(
    request: ExtractTextRequest,
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> ExtractedWordsResponse:
    """Propose words found in a piece of text. Nothing is saved."""
    words = await service.extract_from_text(request.text)
    return ExtractedWordsResponse(words=words)


@router.post(
    "/words/extract/image",
    response_model=ExtractedWordsResponse,
    responses=_UPSTREAM_ERRORS,
)
async def extract_words_from_image(
    image: UploadFile = File(..., description="Photo or screenshot with Japanese text"),
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> ExtractedWordsResponse:
    """Propose words found in an uploaded image. Nothing is saved."""
    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=415, detail="Upload must be an image")

    data = await image.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded image is empty")
    if len(data) > MAX_IMAGE_BYTES:
        raise HTTPException(status_code=413, detail="Uploaded image is too large")

    words = await service.extract_from_image(data, content_type)
    return ExtractedWordsResponse(words=words)


# ===========================================
# Set Endpoints
# ===========================================


@router.get("/sets", response_model=list[SetSummary], responses=_ERRORS)
async def list_sets(
    stage: Optional[SetStage] = Query(None, description="Only sets in this stage"),
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> list[SetSummary]:
    """List the user's active sets, oldest first."""
    return await service.list_sets(user_id, stage)


@router.get("/sets/review-queue", response_model=ReviewQueue, responses=_ERRORS)
async def get_review_queue(
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> ReviewQueue:
    """Sets in review, split into due now and waiting."""
    return await service.review_queue(user_id)


@router.get("/sets/{set_id}", response_model=SetDetail, responses=_ERRORS)
async def get_set(
    set_id: str,
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> SetDetail:
    card_set = await service.get_set(user_id, set_id)
    return SetDetail.from_set(card_set, service.clock())


@router.post("/sets/{set_id}/promote", response_model=PromotionResult, responses=_ERRORS)
async def promote_set(
    set_id: str,
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> PromotionResult:
    """
    Promote a set by one stage.

    Promoting into the final stage moves the set's cards and story to the
    archive and deletes the set.
    """
    return await service.promote(user_id, set_id)


# ===========================================
# Archive Endpoints
# ===========================================


@router.get("/archive/words", response_model=list[Card], responses=_ERRORS)
async def list_archived_words(
    search: Optional[str] = Query(None, description="Substring of word, reading or translation"),
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> list[Card]:
    """Archived words, most recently released first."""
    return await service.list_archived(user_id, search)


@router.post("/archive/words/recall", response_model=IntakeResult, responses=_ERRORS)
async def recall_words(
    request: RecallRequest,
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> IntakeResult:
    """Move archived words back into intake sets. Unknown ids are ignored."""
    return await service.recall(user_id, request.word_ids)


@router.get("/archive/stories", response_model=list[Story], responses=_ERRORS)
async def list_archived_stories(
    search: Optional[str] = Query(None, description="Substring of a sentence or translation"),
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> list[Story]:
    return await service.list_stories(user_id, search)


@router.get("/overview", response_model=Overview, responses=_ERRORS)
async def get_overview(
    user_id: str = CurrentUser,
    service: VocabularyService = Depends(get_vocabulary_service),
) -> Overview:
    """Word totals for intake, in review and archived, with previews."""
    return await service.overview(user_id)
