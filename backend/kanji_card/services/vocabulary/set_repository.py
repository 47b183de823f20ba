"""
Card Set Repository

Typed access to a user's active card sets on top of a RecordStore.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from kanji_card.enums.learning import SetStage
from kanji_card.enums.storage import RecordCollection
from kanji_card.middleware.error_handling import NotFoundError, StorageError
from kanji_card.models.vocabulary import CardSet
from kanji_card.services.storage.base import RecordNotFoundError, RecordStore

logger = logging.getLogger(__name__)


class CardSetRepository:
    """Active sets, one record per set keyed by set id."""

    collection = RecordCollection.SETS

    def __init__(self, store: RecordStore):
        self.store = store

    async def save(self, user_id: str, card_set: CardSet) -> None:
        """Create or replace a set. Saving an unchanged set is harmless."""
        await self.store.upsert(
            user_id, self.collection, card_set.id, card_set.model_dump(mode="json")
        )

    async def load(self, user_id: str, set_id: str) -> CardSet:
        """
        Load a set.

        Raises:
            NotFoundError: If the set doesn't exist
            StorageError: If the record can't be read or decoded
        """
        try:
            record = await self.store.load(user_id, self.collection, set_id)
        except RecordNotFoundError as e:
            raise NotFoundError(f"Set {set_id} not found") from e

        try:
            return CardSet.model_validate(record)
        except ValidationError as e:
            raise StorageError(f"Set {set_id} is unreadable: {e}") from e

    async def remove(self, user_id: str, set_id: str) -> None:
        try:
            await self.store.remove(user_id, self.collection, set_id)
        except RecordNotFoundError as e:
            raise NotFoundError(f"Set {set_id} not found") from e

    async def list_ids(self, user_id: str) -> set[str]:
        return await self.store.list_ids(user_id, self.collection)

    async def list_all(
        self, user_id: str, stage: Optional[SetStage] = None
    ) -> list[CardSet]:
        """
        All sets of a user ordered by id (oldest first).

        Sets removed after the id snapshot, or that no longer parse, are
        skipped with a warning.
        """
        sets = []
        for set_id in sorted(await self.list_ids(user_id)):
            try:
                card_set = await self.load(user_id, set_id)
            except (NotFoundError, StorageError) as e:
                logger.warning(f"Skipping set {set_id} for user {user_id}: {e}")
                continue
            if stage is None or card_set.stage is stage:
                sets.append(card_set)
        return sets

    async def latest_in_stage(self, user_id: str, stage: SetStage) -> Optional[CardSet]:
        """The set with the greatest id in ``stage``, or None."""
        matching = await self.list_all(user_id, stage)
        return matching[-1] if matching else None
