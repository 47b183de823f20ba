"""
Vocabulary Domain Models

Cards, stories and card sets as persisted in the record stores. Each model
round-trips through ``model_dump(mode="json")`` / ``model_validate`` and
accepts the field names written by earlier deployments (``words``,
``state``, ``state_timestamp``, ``story_transalte`` ...) when loading.

Lifecycle rules live on CardSet:

    writable  ⟺  stage == INTAKE and len(cards) < MAX_SET_CAPACITY

    INTAKE → DAY_1 → DAY_2 → DAY_3 → DAY_5 → DAY_7 → DAY_10 (absorbing)

    next_review_at = stage_entered_at + stage.review_offset

The review offset is measured from the most recent promotion only, never
from the set's creation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from kanji_card.enums.learning import SetStage
from kanji_card.middleware.error_handling import InvalidTransitionError
from kanji_card.utils.ids import new_id
from kanji_card.utils.reading import derive_reading, transliterate

MAX_SET_CAPACITY = 8


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Card(_Record):
    """A single vocabulary item."""

    id: str
    word: str
    reading: Optional[str] = None
    translation: str
    release_timestamp: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        word: str,
        translation: str,
        reading: Optional[str] = None,
    ) -> Card:
        """
        Build a new card with a fresh id.

        An explicit ``reading`` is kept when it differs from the word;
        otherwise one is derived from the word itself.
        """
        word = word.strip()
        translation = translation.strip()
        reading = reading.strip() if reading else None
        if not reading or reading == word:
            reading = derive_reading(word)

        return cls(
            id=new_id(),
            word=word,
            reading=reading,
            translation=translation,
        )

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match on word, reading or translation."""
        needle = needle.lower()
        return (
            needle in self.word.lower()
            or needle in self.translation.lower()
            or (self.reading is not None and needle in self.reading.lower())
        )


class Story(_Record):
    """Short narrative generated from a full set's words."""

    id: str
    sentences: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("sentences", "story")
    )
    translations: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("translations", "story_translate", "story_transalte"),
    )
    readings: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("readings", "story_reading")
    )

    @classmethod
    def create(cls, sentences: list[str], translations: list[str]) -> Story:
        readings = [transliterate(s) or s for s in sentences]
        return cls(
            id=new_id(),
            sentences=list(sentences),
            translations=list(translations),
            readings=readings,
        )

    def matches(self, needle: str) -> bool:
        needle = needle.lower()
        return any(needle in line.lower() for line in self.sentences) or any(
            needle in line.lower() for line in self.translations
        )


class CardSet(_Record):
    """An ordered, capacity-bounded batch of cards sharing one review stage."""

    id: str
    stage: SetStage = Field(
        default=SetStage.INTAKE, validation_alias=AliasChoices("stage", "state")
    )
    stage_entered_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("stage_entered_at", "state_timestamp"),
    )
    cards: list[Card] = Field(
        default_factory=list, validation_alias=AliasChoices("cards", "words")
    )
    story: Optional[Story] = None

    @classmethod
    def new(cls) -> CardSet:
        """An empty set in the intake stage."""
        return cls(id=new_id())

    @property
    def is_full(self) -> bool:
        return len(self.cards) >= MAX_SET_CAPACITY

    @property
    def is_writable(self) -> bool:
        return self.stage is SetStage.INTAKE and not self.is_full

    def push(
        self,
        word: str,
        translation: str,
        reading: Optional[str] = None,
    ) -> Card:
        """
        Append a new card.

        Raises:
            InvalidTransitionError: If the set is full or past intake
        """
        if not self.is_writable:
            raise InvalidTransitionError(
                f"Set {self.id} is not writable "
                f"(stage={self.stage.value}, cards={len(self.cards)})"
            )

        card = Card.create(word, translation, reading)
        self.cards.append(card)
        return card

    def attach_story(self, sentences: list[str], translations: list[str]) -> Story:
        """
        Attach the companion story.

        Raises:
            InvalidTransitionError: If a story exists or the set left intake
        """
        if self.story is not None:
            raise InvalidTransitionError(f"Set {self.id} already has a story")
        if self.stage is not SetStage.INTAKE:
            raise InvalidTransitionError(
                f"Set {self.id} is in stage {self.stage.value}, stories are attached during intake"
            )

        self.story = Story.create(sentences, translations)
        return self.story

    @property
    def next_review_at(self) -> Optional[datetime]:
        """When the set becomes due, or None if it never entered a stage."""
        if self.stage_entered_at is None:
            return None
        return self.stage_entered_at + self.stage.review_offset

    def needs_review(self, now: Optional[datetime] = None) -> bool:
        next_review_at = self.next_review_at
        if next_review_at is None:
            return False
        return (now or utcnow()) >= next_review_at

    def advance(self, now: Optional[datetime] = None) -> Optional[list[Card]]:
        """
        Promote the set by one stage.

        Refreshes ``stage_entered_at``. On the transition into DAY_10 the
        set's cards are returned stamped with ``release_timestamp`` and the
        caller is expected to archive them and delete the set.
        Returns None for every other promotion, including DAY_10 → DAY_10.
        """
        now = now or utcnow()
        previous = self.stage
        next_stage = previous.next()
        self.stage = next_stage
        self.stage_entered_at = now

        if next_stage.is_terminal and not previous.is_terminal:
            return [
                card.model_copy(update={"release_timestamp": now})
                for card in self.cards
            ]
        return None
