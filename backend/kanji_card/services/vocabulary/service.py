"""
Vocabulary Service

Entry point for everything the API layer can do with a user's words.
Wires the repositories, intake pipeline and lifecycle manager around one
record store, and serializes each user's mutations with a per-user lock.

Usage:
    from kanji_card.services.vocabulary import VocabularyService

    service = VocabularyService(store)

    await service.intake(user_id, [CandidateWord(word="猫", translation="cat")])
    result = await service.promote(user_id, set_id)
    if result.migrated:
        archived = await service.list_archived(user_id)
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from kanji_card.enums.learning import SetStage
from kanji_card.models.api import (
    CandidateWord,
    IntakeResult,
    Overview,
    PromotionResult,
    ReviewQueue,
    SetSummary,
)
from kanji_card.models.vocabulary import Card, CardSet, Story, utcnow
from kanji_card.services.storage.base import RecordStore, check_user_id
from kanji_card.services.vocabulary.archive_repository import ArchiveRepository
from kanji_card.services.vocabulary.content_extractor import ContentExtractor
from kanji_card.services.vocabulary.intake import IntakePipeline
from kanji_card.services.vocabulary.lifecycle import LifecycleManager
from kanji_card.services.vocabulary.locks import UserLockRegistry
from kanji_card.services.vocabulary.set_repository import CardSetRepository
from kanji_card.services.vocabulary.story_generator import StoryGenerator

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class VocabularyService:
    """
    Set/word lifecycle operations for a user.

    Provides:
    - Intake with dedup and batching into intake sets
    - Stage promotion and archive migration
    - Recall of archived words back into intake
    - Set, archive, story and overview queries
    - Word extraction from text and images
    """

    def __init__(
        self,
        store: RecordStore,
        story_generator: Optional[StoryGenerator] = None,
        content_extractor: Optional[ContentExtractor] = None,
        clock: Callable[[], datetime] = utcnow,
        locks: Optional[UserLockRegistry] = None,
    ):
        """
        Initialize the vocabulary service.

        Args:
            store: Record store holding sets, archived cards and stories
            story_generator: Optional story writer used when a set fills up
            content_extractor: Optional extractor for text/image input
            clock: Source of "now" for promotion and due checks
            locks: Per-user lock registry (a new one if omitted)
        """
        self.sets = CardSetRepository(store)
        self.archive = ArchiveRepository(store)
        self.intake_pipeline = IntakePipeline(self.sets, self.archive, story_generator)
        self.lifecycle = LifecycleManager(self.sets, self.archive, clock)
        self.content_extractor = content_extractor
        self.clock = clock
        self.locks = locks if locks is not None else UserLockRegistry()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def intake(
        self, user_id: str, candidates: Sequence[CandidateWord]
    ) -> IntakeResult:
        """Add new words, skipping any the user already has."""
        check_user_id(user_id)
        async with self.locks.hold(user_id):
            return await self.intake_pipeline.run(user_id, candidates)

    async def promote(self, user_id: str, set_id: str) -> PromotionResult:
        """Move a set one stage forward, archiving it on graduation."""
        check_user_id(user_id)
        async with self.locks.hold(user_id):
            return await self.lifecycle.promote(user_id, set_id)

    async def recall(self, user_id: str, word_ids: Sequence[str]) -> IntakeResult:
        """
        Send archived words back through intake.

        The originals are removed from the archive only after the intake
        write has succeeded, so a failed intake never loses a word. Ids
        that aren't archived are ignored and repeated ids count once.
        """
        check_user_id(user_id)
        logger.info(f"Recalling {len(word_ids)} words for user {user_id}")

        async with self.locks.hold(user_id):
            cards = await self.archive.load_by_ids(user_id, list(dict.fromkeys(word_ids)))
            if not cards:
                logger.info(f"No archived words to recall for user {user_id}")
                return IntakeResult()

            candidates = [
                CandidateWord(word=card.word, translation=card.translation)
                for card in cards
            ]
            result = await self.intake_pipeline.run(user_id, candidates, skip_dedup=True)
            await self.archive.remove_by_ids(user_id, [card.id for card in cards])

        logger.info(f"Recalled {len(cards)} words for user {user_id}")
        return result

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get_set(self, user_id: str, set_id: str) -> CardSet:
        check_user_id(user_id)
        return await self.sets.load(user_id, set_id)

    async def list_sets(
        self, user_id: str, stage: Optional[SetStage] = None
    ) -> list[SetSummary]:
        """Summaries of the user's active sets, oldest first."""
        check_user_id(user_id)
        now = self.clock()
        return [
            SetSummary.from_set(card_set, now)
            for card_set in await self.sets.list_all(user_id, stage)
        ]

    async def review_queue(self, user_id: str) -> ReviewQueue:
        """Sets past intake, split into due (soonest first) and waiting."""
        queue = ReviewQueue()
        for summary in await self.list_sets(user_id):
            if summary.stage is SetStage.INTAKE:
                continue
            if summary.needs_review:
                queue.due.append(summary)
            else:
                queue.waiting.append(summary)

        queue.due.sort(key=lambda s: s.next_review_at or _EPOCH)
        queue.waiting.sort(key=lambda s: s.next_review_at or _EPOCH)
        return queue

    async def list_archived(
        self, user_id: str, search: Optional[str] = None
    ) -> list[Card]:
        """Archived cards, most recently released first."""
        check_user_id(user_id)
        if search:
            cards = await self.archive.search(user_id, search)
        else:
            cards = await self.archive.list_all(user_id)

        cards.sort(key=lambda c: (c.release_timestamp or _EPOCH, c.id), reverse=True)
        return cards

    async def list_stories(
        self, user_id: str, search: Optional[str] = None
    ) -> list[Story]:
        check_user_id(user_id)
        if search:
            return await self.archive.search_stories(user_id, search)
        return await self.archive.list_stories(user_id)

    async def overview(self, user_id: str) -> Overview:
        """Word totals with a short preview for each group."""
        overview = Overview()
        for card_set in await self.sets.list_all(check_user_id(user_id)):
            group = overview.intake if card_set.stage is SetStage.INTAKE else overview.in_review
            group.add(card_set.cards)

        overview.archived.add(await self.list_archived(user_id))
        return overview

    # -------------------------------------------------------------------------
    # Extraction
    # -------------------------------------------------------------------------

    async def extract_from_text(self, text: str) -> list[CandidateWord]:
        return await self._extractor().extract_from_text(text)

    async def extract_from_image(
        self, image_data: bytes, mime_type: str = "image/png"
    ) -> list[CandidateWord]:
        return await self._extractor().extract_from_image(image_data, mime_type)

    def _extractor(self) -> ContentExtractor:
        if self.content_extractor is None:
            raise RuntimeError("VocabularyService was built without a content extractor")
        return self.content_extractor
