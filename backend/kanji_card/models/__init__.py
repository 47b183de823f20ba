"""
Models Package

- vocabulary.py: persisted domain objects (Card, Story, CardSet)
- api.py: request/response schemas for the vocabulary service
- base.py: strict request/response base classes
"""

from kanji_card.models.api import (
    CandidateWord,
    ExtractedWordsResponse,
    ExtractTextRequest,
    GroupPreview,
    IntakeRequest,
    IntakeResult,
    Overview,
    PromotionResult,
    RecallRequest,
    ReviewQueue,
    SetDetail,
    SetSummary,
)
from kanji_card.models.base import ErrorDetail, StrictRequest, StrictResponse
from kanji_card.models.vocabulary import (
    MAX_SET_CAPACITY,
    Card,
    CardSet,
    Story,
    utcnow,
)

__all__ = [
    "MAX_SET_CAPACITY",
    "CandidateWord",
    "Card",
    "CardSet",
    "ErrorDetail",
    "ExtractTextRequest",
    "ExtractedWordsResponse",
    "GroupPreview",
    "IntakeRequest",
    "IntakeResult",
    "Overview",
    "PromotionResult",
    "RecallRequest",
    "ReviewQueue",
    "SetDetail",
    "SetSummary",
    "Story",
    "StrictRequest",
    "StrictResponse",
    "utcnow",
]
