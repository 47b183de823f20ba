"""
Vocabulary API Models (Pydantic)

Request/response schemas for the vocabulary core:
- Word intake and extraction
- Set summaries, details and the review queue
- Promotion and recall results
- Overview of intake / in-review / archived words

ARCHITECTURE NOTE:
    The persisted domain objects live in kanji_card/models/vocabulary.py.
    This file only shapes what crosses the service boundary.

    Data flows: API Request → StrictRequest → VocabularyService → RecordStore
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from kanji_card.enums.learning import LegacyStage, SetStage, to_legacy_stage
from kanji_card.models.base import StrictRequest, StrictResponse
from kanji_card.models.vocabulary import Card, CardSet, Story

PREVIEW_SIZE = 3


# ===========================================
# Intake Models
# ===========================================


class CandidateWord(StrictRequest):
    """
    A word proposed for intake.

    Usually produced by the content extractor, optionally edited by the user.
    An explicit reading overrides the derived one when it differs from the word.
    """

    word: str = Field(..., min_length=1, description="Word as written")
    translation: str = Field(..., min_length=1, description="Translation")
    reading: Optional[str] = Field(None, description="Optional phonetic reading")


class IntakeRequest(StrictRequest):
    """Request to add words to the user's intake sets."""

    words: list[CandidateWord] = Field(default_factory=list)


class IntakeResult(StrictResponse):
    """Outcome of an intake or recall."""

    added: int = Field(0, description="Cards appended to sets")
    skipped: int = Field(0, description="Candidates dropped as already known")
    set_ids: list[str] = Field(
        default_factory=list, description="Sets written to, in order"
    )


class ExtractTextRequest(StrictRequest):
    """Text to extract Japanese words from."""

    text: str = Field(..., min_length=1)


class ExtractedWordsResponse(StrictResponse):
    """Words proposed by the content extractor; nothing is saved yet."""

    words: list[CandidateWord] = Field(default_factory=list)


# ===========================================
# Set Models
# ===========================================


class SetSummary(StrictResponse):
    """
    Compact view of a set with its schedule.

    ``next_review_at`` is measured from the last promotion only; a set that
    was never promoted has none and is never due.
    """

    id: str
    stage: SetStage
    legacy_stage: LegacyStage
    card_count: int
    writable: bool
    stage_entered_at: Optional[datetime] = None
    next_review_at: Optional[datetime] = None
    needs_review: bool = False
    has_story: bool = False

    @classmethod
    def from_set(cls, card_set: CardSet, now: Optional[datetime] = None) -> SetSummary:
        return cls(
            id=card_set.id,
            stage=card_set.stage,
            legacy_stage=to_legacy_stage(card_set.stage),
            card_count=len(card_set.cards),
            writable=card_set.is_writable,
            stage_entered_at=card_set.stage_entered_at,
            next_review_at=card_set.next_review_at,
            needs_review=card_set.needs_review(now),
            has_story=card_set.story is not None,
        )


class SetDetail(SetSummary):
    """A set with its cards and story."""

    cards: list[Card] = Field(default_factory=list)
    story: Optional[Story] = None

    @classmethod
    def from_set(cls, card_set: CardSet, now: Optional[datetime] = None) -> SetDetail:
        summary = SetSummary.from_set(card_set, now)
        return cls(
            **summary.model_dump(),
            cards=card_set.cards,
            story=card_set.story,
        )


class ReviewQueue(StrictResponse):
    """Sets past intake, split by whether they are due."""

    due: list[SetSummary] = Field(default_factory=list)
    waiting: list[SetSummary] = Field(default_factory=list)


class PromotionResult(StrictResponse):
    """Outcome of promoting a set by one stage."""

    set_id: str
    previous_stage: SetStage
    stage: SetStage
    migrated: bool = Field(
        False, description="True when the set's cards moved to the archive"
    )
    released_card_ids: list[str] = Field(default_factory=list)


# ===========================================
# Archive Models
# ===========================================


class RecallRequest(StrictRequest):
    """Archived card ids to send back through intake."""

    word_ids: list[str] = Field(..., min_length=1)


class GroupPreview(StrictResponse):
    """Word total for one group plus the first few cards."""

    total_words: int = 0
    preview_words: list[Card] = Field(default_factory=list)

    def add(self, cards: list[Card]) -> None:
        self.total_words += len(cards)
        room = PREVIEW_SIZE - len(self.preview_words)
        if room > 0:
            self.preview_words.extend(cards[:room])


class Overview(StrictResponse):
    """Word totals for intake, in-review and archived groups."""

    intake: GroupPreview = Field(default_factory=GroupPreview)
    in_review: GroupPreview = Field(default_factory=GroupPreview)
    archived: GroupPreview = Field(default_factory=GroupPreview)
