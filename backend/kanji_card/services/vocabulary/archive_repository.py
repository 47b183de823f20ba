"""
Archive Repository

Long-term store for released words and the stories generated with their
sets. Cards and stories live in separate collections.

Bulk operations are plain loops over single-record writes. A failure
partway through ``save_many`` or ``remove_by_ids`` leaves the records
handled before it in place; nothing is rolled back.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from kanji_card.enums.storage import RecordCollection
from kanji_card.middleware.error_handling import NotFoundError, StorageError
from kanji_card.models.vocabulary import Card, Story
from kanji_card.services.storage.base import RecordNotFoundError, RecordStore

logger = logging.getLogger(__name__)


class ArchiveRepository:
    """Released cards and stories of each user."""

    cards_collection = RecordCollection.ARCHIVE_CARDS
    stories_collection = RecordCollection.ARCHIVE_STORIES

    def __init__(self, store: RecordStore):
        self.store = store

    # -------------------------------------------------------------------------
    # Cards
    # -------------------------------------------------------------------------

    async def save_many(self, user_id: str, cards: list[Card]) -> None:
        """Upsert cards one by one."""
        for card in cards:
            await self.store.upsert(
                user_id, self.cards_collection, card.id, card.model_dump(mode="json")
            )

    async def load_by_id(self, user_id: str, card_id: str) -> Card:
        """
        Load one archived card.

        Raises:
            NotFoundError: If the card isn't archived
            StorageError: If the record can't be read or decoded
        """
        try:
            record = await self.store.load(user_id, self.cards_collection, card_id)
        except RecordNotFoundError as e:
            raise NotFoundError(f"Archived card {card_id} not found") from e

        try:
            return Card.model_validate(record)
        except ValidationError as e:
            raise StorageError(f"Archived card {card_id} is unreadable: {e}") from e

    async def load_by_ids(self, user_id: str, card_ids: list[str]) -> list[Card]:
        """Load the given cards in order, skipping any that fail to load."""
        cards = []
        for card_id in card_ids:
            try:
                cards.append(await self.load_by_id(user_id, card_id))
            except (NotFoundError, StorageError) as e:
                logger.warning(f"Skipping archived card {card_id} for user {user_id}: {e}")
        return cards

    async def remove_by_id(self, user_id: str, card_id: str) -> None:
        try:
            await self.store.remove(user_id, self.cards_collection, card_id)
        except RecordNotFoundError as e:
            raise NotFoundError(f"Archived card {card_id} not found") from e

    async def remove_by_ids(self, user_id: str, card_ids: list[str]) -> None:
        for card_id in card_ids:
            await self.remove_by_id(user_id, card_id)

    async def list_all(self, user_id: str) -> list[Card]:
        """Every archived card that still loads, ordered by id."""
        ids = await self.store.list_ids(user_id, self.cards_collection)
        return await self.load_by_ids(user_id, sorted(ids))

    async def search(self, user_id: str, needle: str) -> list[Card]:
        """Cards whose word, reading or translation contains ``needle`` (any case)."""
        return [card for card in await self.list_all(user_id) if card.matches(needle)]

    # -------------------------------------------------------------------------
    # Stories
    # -------------------------------------------------------------------------

    async def save_story(self, user_id: str, story: Story) -> None:
        await self.store.upsert(
            user_id, self.stories_collection, story.id, story.model_dump(mode="json")
        )

    async def list_stories(
        self, user_id: str, search: Optional[str] = None
    ) -> list[Story]:
        """Archived stories ordered by id, optionally filtered by text."""
        stories = []
        for story_id in sorted(await self.store.list_ids(user_id, self.stories_collection)):
            try:
                record = await self.store.load(user_id, self.stories_collection, story_id)
                story = Story.model_validate(record)
            except (RecordNotFoundError, StorageError, ValidationError) as e:
                logger.warning(f"Skipping story {story_id} for user {user_id}: {e}")
                continue
            if search is None or story.matches(search):
                stories.append(story)
        return stories

    async def search_stories(self, user_id: str, needle: str) -> list[Story]:
        """Stories whose sentences or translations contain ``needle`` (any case)."""
        return await self.list_stories(user_id, needle)
